# Initial LogEntry and LogSequence models.
# Lifecycle invariants are mirrored as check constraints.

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("equipment", "0001_initial"),
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="LogSequence",
            fields=[
                (
                    "year",
                    models.PositiveIntegerField(primary_key=True, serialize=False),
                ),
                ("last_value", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "log_sequences",
            },
        ),
        migrations.CreateModel(
            name="LogEntry",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "log_code",
                    models.CharField(editable=False, max_length=32, unique=True),
                ),
                (
                    "activity_type",
                    models.CharField(
                        choices=[
                            ("Operation", "Operation"),
                            ("Maintenance", "Maintenance"),
                            ("Calibration", "Calibration"),
                            ("Cleaning", "Cleaning"),
                            ("Sampling", "Sampling"),
                        ],
                        max_length=20,
                    ),
                ),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("description", models.TextField()),
                ("batch_number", models.CharField(blank=True, max_length=100, null=True)),
                ("readings", models.JSONField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Draft", "Draft"),
                            ("Submitted", "Submitted"),
                            ("Approved", "Approved"),
                            ("Rejected", "Rejected"),
                        ],
                        default="Draft",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("submitted_at", models.DateTimeField(blank=True, null=True)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("rejected_at", models.DateTimeField(blank=True, null=True)),
                ("version", models.PositiveIntegerField(default=1)),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="log_entries",
                        to="equipment.equipment",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="created_log_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="approved_log_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "rejected_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rejected_log_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "log_entries",
                "indexes": [
                    models.Index(fields=["status"], name="idx_log_status"),
                    models.Index(fields=["created_by"], name="idx_log_created_by"),
                    models.Index(fields=["equipment"], name="idx_log_equipment"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            status__in=["Draft", "Submitted", "Approved", "Rejected"]
                        ),
                        name="valid_log_status",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            activity_type__in=[
                                "Operation",
                                "Maintenance",
                                "Calibration",
                                "Cleaning",
                                "Sampling",
                            ]
                        ),
                        name="valid_activity_type",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(status="Draft")
                        | models.Q(submitted_at__isnull=False),
                        name="submitted_at_set_when_not_draft",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(
                                status="Approved",
                                approved_by__isnull=False,
                                approved_at__isnull=False,
                            )
                            | (
                                ~models.Q(status="Approved")
                                & models.Q(
                                    approved_by__isnull=True, approved_at__isnull=True
                                )
                            )
                        ),
                        name="approval_fields_match_status",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(
                                status="Rejected",
                                rejected_by__isnull=False,
                                rejected_at__isnull=False,
                            )
                            | (
                                ~models.Q(status="Rejected")
                                & models.Q(
                                    rejected_by__isnull=True, rejected_at__isnull=True
                                )
                            )
                        ),
                        name="rejection_fields_match_status",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(approved_by__isnull=True)
                        | ~models.Q(approved_by=models.F("created_by")),
                        name="approver_differs_from_author",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(rejected_by__isnull=True)
                        | ~models.Q(rejected_by=models.F("created_by")),
                        name="rejector_differs_from_author",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(end_time__isnull=True)
                        | models.Q(end_time__gte=models.F("start_time")),
                        name="end_time_not_before_start",
                    ),
                ],
            },
        ),
    ]
