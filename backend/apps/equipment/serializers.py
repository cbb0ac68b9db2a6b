"""
Serializers for Equipment.

No business logic in serializers - validation only.
All mutations flow through service layer.
"""

from rest_framework import serializers
from apps.equipment.models import Equipment, EquipmentStatus


class EquipmentSerializer(serializers.ModelSerializer):
    """Serializer for Equipment (read and write)."""

    id = serializers.UUIDField(read_only=True)
    equipmentCode = serializers.CharField(source="equipment_code", max_length=64)
    serialNumber = serializers.CharField(
        source="serial_number", required=False, allow_null=True, allow_blank=True
    )
    status = serializers.ChoiceField(
        choices=EquipmentStatus.choices, required=False, default=EquipmentStatus.OPERATIONAL
    )
    qualificationStatus = serializers.CharField(
        source="qualification_status", required=False, allow_null=True, allow_blank=True
    )
    pmFrequency = serializers.CharField(
        source="pm_frequency", required=False, allow_null=True, allow_blank=True
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Equipment
        fields = [
            "id",
            "equipmentCode",
            "name",
            "type",
            "manufacturer",
            "model",
            "serialNumber",
            "location",
            "status",
            "qualificationStatus",
            "pmFrequency",
            "description",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "createdAt", "updatedAt"]
