"""
Equipment services - all mutations flow through this layer.

Rules:
- All mutations wrapped in transaction.atomic
- Every mutation appends exactly one audit entry in the same transaction
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models.deletion import ProtectedError

from apps.audit.services import create_audit_entry, snapshot
from apps.equipment.models import Equipment
from core.exceptions import ConflictError, NotFoundError
from core.middleware import get_current_request_id

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "equipment_code",
    "name",
    "type",
    "manufacturer",
    "model",
    "serial_number",
    "location",
    "status",
    "qualification_status",
    "pm_frequency",
    "description",
)


def _log(event, operation, equipment_id, actor_id):
    logger.info(
        event,
        extra={
            "operation": operation,
            "entity_id": str(equipment_id),
            "actor_id": str(actor_id),
            "request_id": get_current_request_id(),
        },
    )


def create_equipment(actor_id, **fields):
    """
    Register a piece of equipment.

    Raises:
        ConflictError: If the equipment code already exists
    """
    data = {name: fields[name] for name in EDITABLE_FIELDS if name in fields}
    try:
        with transaction.atomic():
            equipment = Equipment.objects.create(**data)
            create_audit_entry(
                action="CREATE",
                actor_id=actor_id,
                entity_type="Equipment",
                entity_id=equipment.id,
                new_value=snapshot(equipment),
            )
    except IntegrityError:
        raise ConflictError(
            f"Equipment with code '{data.get('equipment_code')}' already exists"
        )

    _log("equipment_created", "CREATE_EQUIPMENT", equipment.id, actor_id)
    return equipment


def update_equipment(equipment_id, actor_id, **fields):
    """
    Update equipment attributes.

    Raises:
        NotFoundError: If the equipment does not exist
        ConflictError: If the new equipment code collides
    """
    try:
        with transaction.atomic():
            try:
                equipment = Equipment.objects.select_for_update().get(id=equipment_id)
            except Equipment.DoesNotExist:
                raise NotFoundError(f"Equipment {equipment_id} does not exist")

            old_value = snapshot(equipment)
            for name in EDITABLE_FIELDS:
                if name in fields:
                    setattr(equipment, name, fields[name])
            equipment.save()

            create_audit_entry(
                action="UPDATE",
                actor_id=actor_id,
                entity_type="Equipment",
                entity_id=equipment.id,
                old_value=old_value,
                new_value=snapshot(equipment),
            )
    except IntegrityError:
        raise ConflictError(
            f"Equipment with code '{fields.get('equipment_code')}' already exists"
        )

    _log("equipment_updated", "UPDATE_EQUIPMENT", equipment.id, actor_id)
    return equipment


def delete_equipment(equipment_id, actor_id):
    """
    Delete an unreferenced equipment record.

    Raises:
        NotFoundError: If the equipment does not exist
        ConflictError: If log entries or PM schedules still reference it
    """
    try:
        with transaction.atomic():
            try:
                equipment = Equipment.objects.select_for_update().get(id=equipment_id)
            except Equipment.DoesNotExist:
                raise NotFoundError(f"Equipment {equipment_id} does not exist")

            old_value = snapshot(equipment)
            equipment.delete()

            create_audit_entry(
                action="DELETE",
                actor_id=actor_id,
                entity_type="Equipment",
                entity_id=equipment_id,
                old_value=old_value,
            )
    except ProtectedError:
        raise ConflictError(
            "Equipment is referenced by log entries or PM schedules and cannot be deleted"
        )

    _log("equipment_deleted", "DELETE_EQUIPMENT", equipment_id, actor_id)
