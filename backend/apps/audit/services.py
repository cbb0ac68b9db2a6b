"""
Audit service - creates immutable audit trail entries.

All audit entries are append-only. No updates or deletions.
Callers invoke create_audit_entry inside the same transaction.atomic() block
as the mutation it records; any failure here must abort that transaction.
"""

import json

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder

from apps.audit.models import AuditAction, AuditEntry, EntityType
from core.exceptions import NotFoundError, ValidationError
from core.middleware import get_current_client_ip, get_current_request_id

SNAPSHOT_EXCLUDED_FIELDS = frozenset({"password"})


def snapshot(instance):
    """
    Serialize a model instance into a JSON-safe dict of its concrete fields.

    Foreign keys are stored by attname (e.g. ``equipment_id``). Credential
    fields are never included.
    """
    if instance is None:
        return None
    data = {}
    for field in instance._meta.concrete_fields:
        if field.name in SNAPSHOT_EXCLUDED_FIELDS:
            continue
        data[field.attname] = field.value_from_object(instance)
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))


def create_audit_entry(
    action,
    actor_id,
    entity_type,
    entity_id=None,
    old_value=None,
    new_value=None,
    reason=None,
):
    """
    Create an audit trail entry.

    Args:
        action: AuditAction value (e.g. 'APPROVE')
        actor_id: Identifier of the acting user (required)
        entity_type: EntityType value (e.g. 'LogEntry')
        entity_id: Identifier of affected entity (optional for LOGIN/LOGOUT)
        old_value: Serialized snapshot before change (optional)
        new_value: Serialized snapshot after change (optional)
        reason: Free-text attestation or change reason (optional)

    Returns:
        AuditEntry: Created audit entry

    Raises:
        ValidationError: If action or entity_type is unknown
        NotFoundError: If the actor does not exist
    """
    from apps.users.models import User

    if action not in AuditAction.values:
        raise ValidationError(f"Unknown audit action: {action}")
    if entity_type not in EntityType.values:
        raise ValidationError(f"Unknown audit entity type: {entity_type}")

    try:
        actor = User.objects.get(id=actor_id)
    except User.DoesNotExist:
        raise NotFoundError(f"User {actor_id} does not exist")

    return AuditEntry.objects.create(
        action=action,
        actor=actor,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        old_value=old_value,
        new_value=new_value,
        reason=reason,
        ip_address=get_current_client_ip(),
        request_id=get_current_request_id(),
    )


def resolve_limit(raw_limit):
    """
    Parse a caller-supplied limit, applying the configured default and cap.

    Raises:
        ValidationError: If the limit is not a positive integer
    """
    if raw_limit in (None, ""):
        return settings.ELOG_AUDIT_DEFAULT_LIMIT
    try:
        limit = int(raw_limit)
    except (TypeError, ValueError):
        raise ValidationError("limit must be a positive integer", {"limit": raw_limit})
    if limit < 1:
        raise ValidationError("limit must be a positive integer", {"limit": raw_limit})
    return min(limit, settings.ELOG_AUDIT_MAX_LIMIT)


def list_audit_entries(
    limit=None, entity_type=None, entity_id=None, action=None, actor_id=None
):
    """Return audit entries newest-first, optionally filtered and capped."""
    queryset = AuditEntry.objects.select_related("actor")

    if entity_type:
        if entity_type not in EntityType.values:
            raise ValidationError("Invalid entityType", {"entityType": entity_type})
        queryset = queryset.filter(entity_type=entity_type)
    if entity_id:
        queryset = queryset.filter(entity_id=str(entity_id))
    if action:
        if action not in AuditAction.values:
            raise ValidationError("Invalid action", {"action": action})
        queryset = queryset.filter(action=action)
    if actor_id:
        queryset = queryset.filter(actor_id=actor_id)

    return list(queryset.order_by("-timestamp")[: resolve_limit(limit)])
