"""
Serializers for User model.

No business logic in serializers - validation only.
Password hashes are never serialized.
"""

from rest_framework import serializers
from apps.users.models import User, Role


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model."""

    id = serializers.UUIDField(read_only=True)
    fullName = serializers.CharField(source="full_name", read_only=True)
    role = serializers.ChoiceField(choices=Role.choices, read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "fullName", "role", "department", "isActive", "createdAt"]
        read_only_fields = fields


class UserCreateSerializer(serializers.Serializer):
    """Serializer for user creation endpoint."""

    username = serializers.RegexField(r"^[\w.@+-]+$", max_length=150, required=True)
    password = serializers.CharField(write_only=True, required=True)
    fullName = serializers.CharField(max_length=255, required=False, source="full_name")
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.OPERATOR)
    department = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )
    isActive = serializers.BooleanField(required=False, default=True, source="is_active")


class UserUpdateSerializer(serializers.Serializer):
    """Serializer for administrative user updates (partial)."""

    fullName = serializers.CharField(max_length=255, required=False, source="full_name")
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    department = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )
    isActive = serializers.BooleanField(required=False, source="is_active")
    password = serializers.CharField(write_only=True, required=False)


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for self-service password change."""

    currentPassword = serializers.CharField(write_only=True, required=True)
    newPassword = serializers.CharField(write_only=True, required=True)
