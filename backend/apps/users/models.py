"""
User model for the eLogbook service.

Fields: id (UUID), username, full_name, role, department, is_active,
password (salted hash), created_at, updated_at.
Username unique. Role choices OPERATOR, SUPERVISOR, QA, ENGINEER, ADMIN.
Users are never deleted; deactivation is the terminal lifecycle action.
"""

import uuid
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.db import models
from django.core.validators import RegexValidator

from . import services


class Role(models.TextChoices):
    OPERATOR = "Operator"
    SUPERVISOR = "Supervisor"
    QA = "QA"
    ENGINEER = "Engineer"
    ADMIN = "Admin"


class UserManager(BaseUserManager):
    """Custom user manager."""

    def create_user(
        self, username, password=None, full_name=None, role=Role.OPERATOR, **extra_fields
    ):
        return services.create_user(
            user_model=self.model,
            username=username,
            password=password,
            full_name=full_name,
            role=role,
            using=self._db,
            **extra_fields,
        )

    def create_superuser(self, username, password=None, **extra_fields):
        return services.create_superuser(
            user_model=self.model,
            username=username,
            password=password,
            using=self._db,
            **extra_fields,
        )


class User(AbstractBaseUser):
    """Custom User model with UUID primary key and role field."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(
        max_length=150,
        unique=True,
        validators=[
            RegexValidator(
                regex=r"^[\w.@+-]+$",
                message=(
                    "Username may contain only letters, numbers, and @/./+/-/_ "
                    "characters."
                ),
            )
        ],
    )
    full_name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.OPERATOR)
    department = models.CharField(max_length=255, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = ["full_name", "role"]

    objects = UserManager()

    class Meta:
        db_table = "users"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(role__in=Role.values),
                name="valid_role",
            )
        ]

    def __str__(self):
        return self.username
