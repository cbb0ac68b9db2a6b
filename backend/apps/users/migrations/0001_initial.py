# Initial User model with roles Operator, Supervisor, QA, Engineer, Admin.

import uuid
import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                (
                    "last_login",
                    models.DateTimeField(
                        blank=True, null=True, verbose_name="last login"
                    ),
                ),
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
                    "username",
                    models.CharField(
                        max_length=150,
                        unique=True,
                        validators=[
                            django.core.validators.RegexValidator(
                                message=(
                                    "Username may contain only letters, numbers, "
                                    "and @/./+/-/_ characters."
                                ),
                                regex="^[\\w.@+-]+$",
                            )
                        ],
                    ),
                ),
                ("full_name", models.CharField(max_length=255)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("Operator", "Operator"),
                            ("Supervisor", "Supervisor"),
                            ("QA", "Qa"),
                            ("Engineer", "Engineer"),
                            ("Admin", "Admin"),
                        ],
                        default="Operator",
                        max_length=20,
                    ),
                ),
                ("department", models.CharField(blank=True, max_length=255, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "users",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            role__in=["Operator", "Supervisor", "QA", "Engineer", "Admin"]
                        ),
                        name="valid_role",
                    )
                ],
            },
        ),
    ]
