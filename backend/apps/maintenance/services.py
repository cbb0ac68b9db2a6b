"""
PM schedule services - all mutations flow through this layer.

Each create/update appends one audit entry in the same transaction.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.audit.services import create_audit_entry, snapshot
from apps.equipment.models import Equipment
from apps.maintenance.models import PMSchedule, PMStatus
from core.exceptions import NotFoundError, ValidationError
from core.middleware import get_current_request_id

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "equipment_id",
    "task_name",
    "frequency",
    "last_performed",
    "next_due",
    "status",
)

DUE_STATE_COMPLIANT = "compliant"
DUE_STATE_DUE_SOON = "due_soon"
DUE_STATE_OVERDUE = "overdue"


def due_state(schedule, now=None):
    """
    Derive the due state of a schedule relative to `now`.

    Completed schedules are compliant. Otherwise a schedule past its
    next_due is overdue, and one falling due within ELOG_PM_DUE_SOON_DAYS
    is due soon.
    """
    if schedule.status == PMStatus.COMPLETED:
        return DUE_STATE_COMPLIANT
    now = now or timezone.now()
    if schedule.next_due < now:
        return DUE_STATE_OVERDUE
    if schedule.next_due <= now + timedelta(days=settings.ELOG_PM_DUE_SOON_DAYS):
        return DUE_STATE_DUE_SOON
    return DUE_STATE_COMPLIANT


def _check_equipment(equipment_id):
    if not Equipment.objects.filter(id=equipment_id).exists():
        raise ValidationError(
            "Invalid PM schedule",
            {"equipmentId": f"Equipment {equipment_id} does not exist"},
        )


def _log(event, operation, schedule_id, actor_id):
    logger.info(
        event,
        extra={
            "operation": operation,
            "entity_id": str(schedule_id),
            "actor_id": str(actor_id),
            "request_id": get_current_request_id(),
        },
    )


def list_schedules():
    return PMSchedule.objects.select_related("equipment").order_by("next_due")


def create_schedule(actor_id, **fields):
    """
    Create a PM schedule.

    Raises:
        ValidationError: If the referenced equipment does not exist
    """
    data = {name: fields[name] for name in EDITABLE_FIELDS if name in fields}
    _check_equipment(data.get("equipment_id"))

    with transaction.atomic():
        schedule = PMSchedule.objects.create(**data)
        create_audit_entry(
            action="CREATE",
            actor_id=actor_id,
            entity_type="PMSchedule",
            entity_id=schedule.id,
            new_value=snapshot(schedule),
        )

    _log("pm_schedule_created", "CREATE_PM_SCHEDULE", schedule.id, actor_id)
    return schedule


def update_schedule(schedule_id, actor_id, **fields):
    """
    Update a PM schedule.

    Raises:
        NotFoundError: If the schedule does not exist
        ValidationError: If the referenced equipment does not exist
    """
    if "equipment_id" in fields:
        _check_equipment(fields["equipment_id"])

    with transaction.atomic():
        try:
            schedule = PMSchedule.objects.select_for_update().get(id=schedule_id)
        except PMSchedule.DoesNotExist:
            raise NotFoundError(f"PM schedule {schedule_id} does not exist")

        old_value = snapshot(schedule)
        for name in EDITABLE_FIELDS:
            if name in fields:
                setattr(schedule, name, fields[name])
        schedule.save()

        create_audit_entry(
            action="UPDATE",
            actor_id=actor_id,
            entity_type="PMSchedule",
            entity_id=schedule.id,
            old_value=old_value,
            new_value=snapshot(schedule),
        )

    _log("pm_schedule_updated", "UPDATE_PM_SCHEDULE", schedule.id, actor_id)
    return schedule
