# Initial Equipment registry.

import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Equipment",
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
                ("equipment_code", models.CharField(max_length=64, unique=True)),
                ("name", models.CharField(max_length=255)),
                ("type", models.CharField(max_length=100)),
                ("manufacturer", models.CharField(blank=True, max_length=255, null=True)),
                ("model", models.CharField(blank=True, max_length=255, null=True)),
                ("serial_number", models.CharField(blank=True, max_length=255, null=True)),
                ("location", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Operational", "Operational"),
                            ("In Use", "In Use"),
                            ("Maintenance", "Maintenance"),
                            ("Offline", "Offline"),
                        ],
                        default="Operational",
                        max_length=20,
                    ),
                ),
                (
                    "qualification_status",
                    models.CharField(blank=True, max_length=50, null=True),
                ),
                ("pm_frequency", models.CharField(blank=True, max_length=50, null=True)),
                ("description", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "equipment",
                "indexes": [
                    models.Index(fields=["status"], name="idx_equipment_status"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            status__in=["Operational", "In Use", "Maintenance", "Offline"]
                        ),
                        name="valid_equipment_status",
                    )
                ],
            },
        ),
    ]
