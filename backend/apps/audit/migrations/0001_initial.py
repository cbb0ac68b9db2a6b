# Generated migration for AuditEntry model
# Audit entries are append-only immutable records of state-changing actions.

import uuid
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditEntry",
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
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("CREATE", "Create"),
                            ("UPDATE", "Update"),
                            ("DELETE", "Delete"),
                            ("LOGIN", "Login"),
                            ("LOGOUT", "Logout"),
                            ("APPROVE", "Approve"),
                            ("REJECT", "Reject"),
                        ],
                        max_length=10,
                    ),
                ),
                (
                    "entity_type",
                    models.CharField(
                        choices=[
                            ("User", "User"),
                            ("Equipment", "Equipment"),
                            ("LogEntry", "Log Entry"),
                            ("PMSchedule", "Pm Schedule"),
                        ],
                        max_length=20,
                    ),
                ),
                ("entity_id", models.CharField(blank=True, max_length=64, null=True)),
                ("old_value", models.JSONField(blank=True, null=True)),
                ("new_value", models.JSONField(blank=True, null=True)),
                ("reason", models.TextField(blank=True, null=True)),
                ("ip_address", models.CharField(blank=True, max_length=64, null=True)),
                ("request_id", models.CharField(blank=True, max_length=64, null=True)),
                (
                    "actor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="audit_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "audit_trail",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(
                        fields=["entity_type", "entity_id"], name="idx_audit_entity"
                    ),
                    models.Index(fields=["timestamp"], name="idx_audit_timestamp"),
                    models.Index(fields=["actor"], name="idx_audit_actor"),
                    models.Index(fields=["action"], name="idx_audit_action"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            action__in=[
                                "CREATE",
                                "UPDATE",
                                "DELETE",
                                "LOGIN",
                                "LOGOUT",
                                "APPROVE",
                                "REJECT",
                            ]
                        ),
                        name="valid_audit_action",
                    )
                ],
            },
        ),
    ]
