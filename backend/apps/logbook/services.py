"""
Logbook services - the only writers of LogEntry lifecycle fields.

Rules:
- Every transition runs inside transaction.atomic with a row lock on the entry
- The state change is a compare-and-set on (status, version)
- Every successful mutation appends exactly one audit entry in the same
  transaction; a failed audit append rolls the mutation back
- Signing transitions (submit, approve, reject) re-authenticate the actor
  with their password and require a reason
"""

import logging
import uuid

from django.db import transaction
from django.utils import timezone

from apps.audit.services import create_audit_entry, snapshot
from apps.equipment.models import Equipment
from apps.logbook.locking import status_locked_update
from apps.logbook.models import ActivityType, LogEntry, LogStatus
from apps.logbook.sequence import next_log_code
from apps.logbook.state_machine import validate_transition
from apps.users.services import authenticate_for_signature
from core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
    ValidationError,
)
from core.middleware import get_current_request_id
from core.permissions import Operation, is_allowed

logger = logging.getLogger(__name__)

CONTENT_FIELDS = (
    "equipment_id",
    "activity_type",
    "start_time",
    "end_time",
    "description",
    "batch_number",
    "readings",
)


def _log(event, operation, entry_id, actor_id, level=logging.INFO):
    logger.log(
        level,
        event,
        extra={
            "operation": operation,
            "entity_id": str(entry_id),
            "actor_id": str(actor_id),
            "request_id": get_current_request_id(),
        },
    )


def _require_signature(password, reason):
    missing = {}
    if not password:
        missing["password"] = "This field is required."
    if not reason or not str(reason).strip():
        missing["reason"] = "This field is required."
    if missing:
        raise ValidationError("Password and reason are required to sign", missing)


def _get_active_actor(actor_id):
    from apps.users.models import User

    try:
        actor = User.objects.get(id=actor_id)
    except User.DoesNotExist:
        raise UnauthenticatedError("Session user not found")
    if not actor.is_active:
        raise UnauthenticatedError("Session user is inactive")
    return actor


def _lock_entry(entry_id):
    try:
        return LogEntry.objects.select_for_update().get(id=entry_id)
    except LogEntry.DoesNotExist:
        raise NotFoundError(f"Log entry {entry_id} does not exist")


def _validate_content(data):
    errors = {}
    activity_type = data.get("activity_type")
    if activity_type is not None and activity_type not in ActivityType.values:
        errors["activityType"] = f"Invalid activity type: {activity_type}"
    if "description" in data and not (data["description"] or "").strip():
        errors["description"] = "This field may not be blank."
    readings = data.get("readings")
    if readings is not None and not isinstance(readings, dict):
        errors["readings"] = "Readings must be a JSON object."
    start_time = data.get("start_time")
    end_time = data.get("end_time")
    if start_time and end_time and end_time < start_time:
        errors["endTime"] = "End time must not be before start time."
    if "equipment_id" in data and not Equipment.objects.filter(
        id=data["equipment_id"]
    ).exists():
        errors["equipmentId"] = f"Equipment {data['equipment_id']} does not exist"
    if errors:
        raise ValidationError("Invalid log entry", errors)


def list_entries(status=None, equipment_id=None):
    """Return log entries newest first, optionally filtered by status and equipment."""
    queryset = LogEntry.objects.select_related(
        "equipment", "created_by", "approved_by", "rejected_by"
    )
    if status:
        if status not in LogStatus.values:
            raise ValidationError("Invalid status filter", {"status": status})
        queryset = queryset.filter(status=status)
    if equipment_id:
        try:
            equipment_id = uuid.UUID(str(equipment_id))
        except ValueError:
            raise ValidationError("Invalid equipment filter", {"equipmentId": equipment_id})
        queryset = queryset.filter(equipment_id=equipment_id)
    return queryset.order_by("-created_at")


def get_entry(entry_id):
    try:
        return LogEntry.objects.select_related("equipment", "created_by").get(
            id=entry_id
        )
    except LogEntry.DoesNotExist:
        raise NotFoundError(f"Log entry {entry_id} does not exist")


def create_entry(
    creator_id,
    equipment_id,
    activity_type,
    start_time,
    description,
    end_time=None,
    batch_number=None,
    readings=None,
):
    """
    Create a LogEntry in Draft with the next sequential log code.

    Returns:
        LogEntry: Created entry

    Raises:
        UnauthenticatedError: If the creator does not exist or is inactive
        ValidationError: If content fields are invalid or equipment is unknown
    """
    creator = _get_active_actor(creator_id)
    data = {
        "equipment_id": equipment_id,
        "activity_type": activity_type,
        "start_time": start_time,
        "end_time": end_time,
        "description": description,
        "batch_number": batch_number,
        "readings": readings,
    }
    if not start_time:
        raise ValidationError("Invalid log entry", {"startTime": "This field is required."})
    _validate_content(data)

    with transaction.atomic():
        entry = LogEntry.objects.create(
            log_code=next_log_code(),
            created_by=creator,
            status=LogStatus.DRAFT,
            **data,
        )
        create_audit_entry(
            action="CREATE",
            actor_id=creator.id,
            entity_type="LogEntry",
            entity_id=entry.id,
            new_value=snapshot(entry),
        )

    _log("log_entry_created", "CREATE_LOG_ENTRY", entry.id, creator.id)
    return entry


def update_entry(entry_id, actor_id, **fields):
    """
    Edit the content of a Draft entry. Only the author may edit.

    Raises:
        NotFoundError: If entry does not exist
        PermissionDeniedError: If actor is not the author
        InvalidStateError: If entry is not in Draft
        ValidationError: If content fields are invalid
    """
    actor = _get_active_actor(actor_id)
    changes = {name: fields[name] for name in CONTENT_FIELDS if name in fields}

    with transaction.atomic():
        entry = _lock_entry(entry_id)

        if entry.created_by_id != actor.id:
            raise PermissionDeniedError("Only the author can edit a log entry")

        validate_transition(entry.status, LogStatus.DRAFT)

        merged = {
            "start_time": entry.start_time,
            "end_time": entry.end_time,
        }
        merged.update(changes)
        _validate_content(merged)

        old_value = snapshot(entry)
        if changes:
            status_locked_update(
                LogEntry.objects.filter(id=entry.id),
                expected_status=LogStatus.DRAFT,
                current_version=entry.version,
                **changes,
            )
            entry.refresh_from_db()

        create_audit_entry(
            action="UPDATE",
            actor_id=actor.id,
            entity_type="LogEntry",
            entity_id=entry.id,
            old_value=old_value,
            new_value=snapshot(entry),
        )

    _log("log_entry_updated", "UPDATE_LOG_ENTRY", entry.id, actor.id)
    return entry


def submit_entry(entry_id, actor_id, password, reason):
    """
    Submit a Draft entry for review (Draft -> Submitted).

    Only the author may submit, and must re-enter their password.

    Returns:
        LogEntry: Entry in Submitted

    Raises:
        ValidationError: If password or reason is missing
        UnauthenticatedError: If actor does not exist or is inactive
        InvalidCredentialsError: If password does not match
        NotFoundError: If entry does not exist
        PermissionDeniedError: If actor is not the author
        InvalidStateError: If entry is not in Draft
    """
    _require_signature(password, reason)
    actor = authenticate_for_signature(actor_id, password)

    with transaction.atomic():
        entry = _lock_entry(entry_id)

        if entry.created_by_id != actor.id:
            _log(
                "log_entry_submit_denied",
                "SUBMIT_LOG_ENTRY",
                entry.id,
                actor.id,
                level=logging.WARNING,
            )
            raise PermissionDeniedError("Only the author can submit a log entry")

        validate_transition(entry.status, LogStatus.SUBMITTED)

        old_value = snapshot(entry)
        status_locked_update(
            LogEntry.objects.filter(id=entry.id),
            expected_status=LogStatus.DRAFT,
            current_version=entry.version,
            status=LogStatus.SUBMITTED,
            submitted_at=timezone.now(),
        )
        entry.refresh_from_db()

        create_audit_entry(
            action="UPDATE",
            actor_id=actor.id,
            entity_type="LogEntry",
            entity_id=entry.id,
            old_value=old_value,
            new_value=snapshot(entry),
            reason=f"Submitted: {reason}",
        )

    _log("log_entry_submitted", "SUBMIT_LOG_ENTRY", entry.id, actor.id)
    return entry


def _review_entry(entry_id, actor_id, password, reason, target_status):
    """
    Shared approve/reject path (Submitted -> Approved | Rejected).

    Order of checks: fields, role, password, existence, dual control, state.
    """
    if target_status == LogStatus.APPROVED:
        action, verb, signer_fields = "APPROVE", "Approved", ("approved_by", "approved_at")
    else:
        action, verb, signer_fields = "REJECT", "Rejected", ("rejected_by", "rejected_at")
    operation = f"{action}_LOG_ENTRY"

    _require_signature(password, reason)
    actor = _get_active_actor(actor_id)

    if not is_allowed(actor.role, Operation.APPROVE_LOG_ENTRY):
        raise PermissionDeniedError(
            f"Role {actor.role} cannot review log entries",
            {"role": actor.role},
        )

    actor = authenticate_for_signature(actor.id, password)

    with transaction.atomic():
        entry = _lock_entry(entry_id)

        # Dual control: by identity, regardless of the author's role
        if entry.created_by_id == actor.id:
            _log(
                "log_entry_dual_control_violation",
                operation,
                entry.id,
                actor.id,
                level=logging.WARNING,
            )
            raise PermissionDeniedError(
                "Dual control: the author of a log entry cannot review it"
            )

        validate_transition(entry.status, target_status)

        old_value = snapshot(entry)
        by_field, at_field = signer_fields
        status_locked_update(
            LogEntry.objects.filter(id=entry.id),
            expected_status=LogStatus.SUBMITTED,
            current_version=entry.version,
            status=target_status,
            **{by_field: actor, at_field: timezone.now()},
        )
        entry.refresh_from_db()

        create_audit_entry(
            action=action,
            actor_id=actor.id,
            entity_type="LogEntry",
            entity_id=entry.id,
            old_value=old_value,
            new_value=snapshot(entry),
            reason=f"{verb}: {reason}",
        )

    _log(f"log_entry_{verb.lower()}", operation, entry.id, actor.id)
    return entry


def approve_entry(entry_id, actor_id, password, reason):
    """
    Approve a Submitted entry (Submitted -> Approved).

    Raises:
        ValidationError: If password or reason is missing
        UnauthenticatedError: If actor does not exist or is inactive
        PermissionDeniedError: If actor's role cannot approve, or actor is the author
        InvalidCredentialsError: If password does not match
        NotFoundError: If entry does not exist
        InvalidStateError: If entry is not in Submitted
    """
    return _review_entry(entry_id, actor_id, password, reason, LogStatus.APPROVED)


def reject_entry(entry_id, actor_id, password, reason):
    """Reject a Submitted entry (Submitted -> Rejected). Same rules as approve."""
    return _review_entry(entry_id, actor_id, password, reason, LogStatus.REJECTED)
