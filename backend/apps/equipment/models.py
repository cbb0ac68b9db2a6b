"""
Equipment registry model.

Equipment is referenced by log entries and PM schedules through PROTECT
foreign keys; a referenced asset cannot be deleted.
"""

import uuid
from django.db import models


class EquipmentStatus(models.TextChoices):
    OPERATIONAL = "Operational"
    IN_USE = "In Use"
    MAINTENANCE = "Maintenance"
    OFFLINE = "Offline"


class Equipment(models.Model):
    """Equipment model - a qualified production asset."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    equipment_code = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=100)
    manufacturer = models.CharField(max_length=255, null=True, blank=True)
    model = models.CharField(max_length=255, null=True, blank=True)
    serial_number = models.CharField(max_length=255, null=True, blank=True)
    location = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=EquipmentStatus.choices,
        default=EquipmentStatus.OPERATIONAL,
    )
    qualification_status = models.CharField(max_length=50, null=True, blank=True)
    pm_frequency = models.CharField(max_length=50, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "equipment"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=EquipmentStatus.values),
                name="valid_equipment_status",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="idx_equipment_status"),
        ]

    def __str__(self):
        return f"{self.equipment_code} - {self.name}"
