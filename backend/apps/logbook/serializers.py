"""
Serializers for LogEntry.

No business logic in serializers - validation only.
Lifecycle fields (status, signer ids and timestamps) are read-only; only the
transition services in apps.logbook.services write them.
"""

from rest_framework import serializers
from apps.logbook.models import ActivityType, LogEntry


class LogEntrySerializer(serializers.ModelSerializer):
    """Read serializer for LogEntry."""

    id = serializers.UUIDField(read_only=True)
    logCode = serializers.CharField(source="log_code", read_only=True)
    equipmentId = serializers.UUIDField(source="equipment_id", read_only=True)
    equipmentCode = serializers.CharField(source="equipment.equipment_code", read_only=True)
    activityType = serializers.CharField(source="activity_type", read_only=True)
    startTime = serializers.DateTimeField(source="start_time", read_only=True)
    endTime = serializers.DateTimeField(source="end_time", read_only=True)
    batchNumber = serializers.CharField(source="batch_number", read_only=True)
    createdBy = serializers.UUIDField(source="created_by_id", read_only=True)
    createdByName = serializers.CharField(source="created_by.full_name", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    submittedAt = serializers.DateTimeField(source="submitted_at", read_only=True)
    approvedBy = serializers.UUIDField(source="approved_by_id", read_only=True)
    approvedAt = serializers.DateTimeField(source="approved_at", read_only=True)
    rejectedBy = serializers.UUIDField(source="rejected_by_id", read_only=True)
    rejectedAt = serializers.DateTimeField(source="rejected_at", read_only=True)

    class Meta:
        model = LogEntry
        fields = [
            "id",
            "logCode",
            "equipmentId",
            "equipmentCode",
            "activityType",
            "startTime",
            "endTime",
            "description",
            "batchNumber",
            "readings",
            "status",
            "createdBy",
            "createdByName",
            "createdAt",
            "submittedAt",
            "approvedBy",
            "approvedAt",
            "rejectedBy",
            "rejectedAt",
            "version",
        ]
        read_only_fields = fields


class LogEntryWriteSerializer(serializers.Serializer):
    """Serializer for log entry creation and Draft edits."""

    equipmentId = serializers.UUIDField(source="equipment_id")
    activityType = serializers.ChoiceField(source="activity_type", choices=ActivityType.choices)
    startTime = serializers.DateTimeField(source="start_time")
    endTime = serializers.DateTimeField(source="end_time", required=False, allow_null=True)
    description = serializers.CharField()
    batchNumber = serializers.CharField(
        source="batch_number", required=False, allow_null=True, allow_blank=True
    )
    readings = serializers.DictField(required=False, allow_null=True)

    def validate(self, attrs):
        start_time = attrs.get("start_time")
        end_time = attrs.get("end_time")
        if start_time and end_time and end_time < start_time:
            raise serializers.ValidationError(
                {"endTime": "End time must not be before start time."}
            )
        return attrs


class SignatureSerializer(serializers.Serializer):
    """Password re-entry and reason for a signing transition."""

    password = serializers.CharField(write_only=True, trim_whitespace=False)
    reason = serializers.CharField()
