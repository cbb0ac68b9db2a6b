# Initial PMSchedule model.

import uuid
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("equipment", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="PMSchedule",
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
                ("task_name", models.CharField(max_length=255)),
                (
                    "frequency",
                    models.CharField(
                        choices=[
                            ("Daily", "Daily"),
                            ("Weekly", "Weekly"),
                            ("Monthly", "Monthly"),
                            ("Quarterly", "Quarterly"),
                            ("Yearly", "Yearly"),
                        ],
                        max_length=20,
                    ),
                ),
                ("last_performed", models.DateTimeField(blank=True, null=True)),
                ("next_due", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Scheduled", "Scheduled"),
                            ("Overdue", "Overdue"),
                            ("Completed", "Completed"),
                        ],
                        default="Scheduled",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "equipment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="pm_schedules",
                        to="equipment.equipment",
                    ),
                ),
            ],
            options={
                "db_table": "pm_schedules",
                "ordering": ["next_due"],
                "indexes": [
                    models.Index(fields=["next_due"], name="idx_pm_next_due"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            frequency__in=[
                                "Daily",
                                "Weekly",
                                "Monthly",
                                "Quarterly",
                                "Yearly",
                            ]
                        ),
                        name="valid_pm_frequency",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            status__in=["Scheduled", "Overdue", "Completed"]
                        ),
                        name="valid_pm_status",
                    ),
                ],
            },
        ),
    ]
