"""
Service-layer functions for the Users app.

This module exists to keep models passive:
- No business logic in models
- Persistence orchestration (create/save) lives here
- Credential verification (login and signature re-authentication) lives here
- Every administrative mutation is audited in the same transaction
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Type

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction

from core.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)
from core.middleware import get_current_request_id

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
UPDATABLE_FIELDS = ("full_name", "role", "department", "is_active")


def create_user(
    *,
    user_model: Type[Any],
    username: str,
    password: Optional[str] = None,
    full_name: Optional[str] = None,
    role: str = "Operator",
    using: Optional[str] = None,
    **extra_fields: Any,
):
    """Create and persist a user (no audit; used by the manager and seeding)."""
    if not username:
        raise ValueError("The username field must be set")

    user = user_model(
        username=username,
        full_name=full_name or username,
        role=role,
        **extra_fields,
    )
    user.set_password(password)
    if using is None:
        user.save()
    else:
        user.save(using=using)
    return user


def create_superuser(
    *,
    user_model: Type[Any],
    username: str,
    password: Optional[str] = None,
    using: Optional[str] = None,
    **extra_fields: Any,
):
    """Create an Admin account."""
    extra_fields.setdefault("role", "Admin")
    return create_user(
        user_model=user_model,
        username=username,
        password=password,
        using=using,
        **extra_fields,
    )


def _validate_password(password: Optional[str]) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


def verify_credentials(user_id: Any, password: Optional[str]) -> bool:
    """
    Check a plaintext password against the stored salted hash of a user.

    Unknown users and empty passwords verify as False. The password is never
    logged.
    """
    from apps.users.models import User

    if not password:
        return False
    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        return False
    return user.check_password(password)


def authenticate_for_signature(user_id: Any, password: Optional[str]):
    """
    Re-authenticate an already-authenticated user at the moment of signing.

    Returns:
        User: The acting user

    Raises:
        UnauthenticatedError: If the user no longer exists or is inactive
        InvalidCredentialsError: If the password does not match
    """
    from apps.users.models import User

    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        raise UnauthenticatedError("Session user not found")

    if not user.is_active:
        raise UnauthenticatedError("Session user is inactive")

    if not verify_credentials(user.id, password):
        logger.warning(
            "signature_reauthentication_failed",
            extra={
                "operation": "REAUTHENTICATE",
                "actor_id": str(user.id),
                "request_id": get_current_request_id(),
            },
        )
        raise InvalidCredentialsError("Invalid password")

    return user


def authenticate_login(username: Optional[str], password: Optional[str]):
    """
    Verify login credentials.

    Unknown username and wrong password produce the same error. A hash is
    still computed for unknown usernames so timing does not reveal existence.

    Raises:
        ValidationError: If username or password is missing
        InvalidCredentialsError: If credentials do not match
        PermissionDeniedError: If the account is inactive
    """
    from apps.users.models import User

    if not username or not password:
        raise ValidationError("Username and password required")

    user = User.objects.filter(username=username).first()
    if user is None:
        make_password(password)
        raise InvalidCredentialsError("Invalid credentials")

    if not user.check_password(password):
        raise InvalidCredentialsError("Invalid credentials")

    if not user.is_active:
        raise PermissionDeniedError("Account is inactive")

    return user


def record_session_event(*, user_id: Any, action: str):
    """Append a LOGIN or LOGOUT audit entry for a user."""
    from apps.audit.services import create_audit_entry

    with transaction.atomic():
        entry = create_audit_entry(
            action=action,
            actor_id=user_id,
            entity_type="User",
            entity_id=user_id,
        )
    logger.info(
        "user_session_event",
        extra={
            "operation": action,
            "actor_id": str(user_id),
            "request_id": get_current_request_id(),
        },
    )
    return entry


def register_user(
    *,
    actor_id: Any,
    username: str,
    password: str,
    role: str,
    full_name: Optional[str] = None,
    department: Optional[str] = None,
    is_active: bool = True,
):
    """
    Create a user on behalf of an administrator.

    Raises:
        ValidationError: If password is too short
        ConflictError: If the username is taken
    """
    from apps.audit.services import create_audit_entry, snapshot
    from apps.users.models import User

    _validate_password(password)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                password=password,
                full_name=full_name or username,
                role=role,
                department=department,
                is_active=is_active,
            )
            create_audit_entry(
                action="CREATE",
                actor_id=actor_id,
                entity_type="User",
                entity_id=user.id,
                new_value=snapshot(user),
            )
    except IntegrityError:
        raise ConflictError(f"User with username '{username}' already exists")

    logger.info(
        "user_created",
        extra={
            "operation": "CREATE_USER",
            "entity_id": str(user.id),
            "actor_id": str(actor_id),
            "request_id": get_current_request_id(),
        },
    )
    return user


def update_user(*, actor_id: Any, user_id: Any, password: Optional[str] = None, **fields: Any):
    """
    Update role, department, full name, active state or password of a user.

    Raises:
        NotFoundError: If the user does not exist
        ValidationError: If an unknown field is supplied, the password is
            too short, or an administrator tries to deactivate themselves
    """
    from apps.audit.services import create_audit_entry, snapshot
    from apps.users.models import User

    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(
            "Unsupported user fields", {"fields": sorted(unknown)}
        )
    if password is not None:
        _validate_password(password)
    if str(actor_id) == str(user_id) and fields.get("is_active") is False:
        raise ValidationError("You cannot deactivate your own account")

    with transaction.atomic():
        try:
            user = User.objects.select_for_update().get(id=user_id)
        except User.DoesNotExist:
            raise NotFoundError(f"User {user_id} does not exist")

        old_value = snapshot(user)
        for name, value in fields.items():
            setattr(user, name, value)
        if password is not None:
            user.set_password(password)
        user.save()

        create_audit_entry(
            action="UPDATE",
            actor_id=actor_id,
            entity_type="User",
            entity_id=user.id,
            old_value=old_value,
            new_value=snapshot(user),
            reason="Password reset by administrator" if password is not None else None,
        )

    logger.info(
        "user_updated",
        extra={
            "operation": "UPDATE_USER",
            "entity_id": str(user.id),
            "actor_id": str(actor_id),
            "request_id": get_current_request_id(),
        },
    )
    return user


def change_password(*, user_id: Any, current_password: str, new_password: str):
    """
    Change the acting user's own password after verifying the current one.

    Raises:
        ValidationError: If either password is missing or the new one is short
        UnauthenticatedError: If the user no longer exists or is inactive
        InvalidCredentialsError: If current_password does not match
    """
    from apps.audit.services import create_audit_entry
    from apps.users.models import User

    if not current_password or not new_password:
        raise ValidationError("Current and new password required")
    _validate_password(new_password)

    authenticate_for_signature(user_id, current_password)

    with transaction.atomic():
        user = User.objects.select_for_update().get(id=user_id)
        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])
        create_audit_entry(
            action="UPDATE",
            actor_id=user.id,
            entity_type="User",
            entity_id=user.id,
            reason="Password changed",
        )

    logger.info(
        "password_changed",
        extra={
            "operation": "CHANGE_PASSWORD",
            "entity_id": str(user.id),
            "actor_id": str(user.id),
            "request_id": get_current_request_id(),
        },
    )
    return user


def seed_admin(*, username: str, password: str, full_name: str = "System Administrator"):
    """
    Create the initial Admin account if no user with `username` exists.

    Returns:
        tuple: (user, created)
    """
    from apps.users.models import Role, User

    _validate_password(password)
    existing = User.objects.filter(username=username).first()
    if existing is not None:
        return existing, False
    user = User.objects.create_user(
        username=username,
        password=password,
        full_name=full_name,
        role=Role.ADMIN,
        department="IT",
    )
    return user, True
