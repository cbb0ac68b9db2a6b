"""
Serializers for PMSchedule.
"""

from rest_framework import serializers
from apps.maintenance.models import PMFrequency, PMSchedule, PMStatus
from apps.maintenance.services import due_state


class PMScheduleSerializer(serializers.ModelSerializer):
    """Serializer for PMSchedule (read and write). dueState is derived."""

    id = serializers.UUIDField(read_only=True)
    equipmentId = serializers.UUIDField(source="equipment_id")
    taskName = serializers.CharField(source="task_name", max_length=255)
    frequency = serializers.ChoiceField(choices=PMFrequency.choices)
    lastPerformed = serializers.DateTimeField(
        source="last_performed", required=False, allow_null=True
    )
    nextDue = serializers.DateTimeField(source="next_due")
    status = serializers.ChoiceField(
        choices=PMStatus.choices, required=False, default=PMStatus.SCHEDULED
    )
    dueState = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = PMSchedule
        fields = [
            "id",
            "equipmentId",
            "taskName",
            "frequency",
            "lastPerformed",
            "nextDue",
            "status",
            "dueState",
            "createdAt",
        ]
        read_only_fields = ["id", "dueState", "createdAt"]

    def get_dueState(self, obj):
        return due_state(obj)
