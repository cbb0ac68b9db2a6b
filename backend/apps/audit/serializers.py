"""
Serializers for AuditEntry model.
"""

from rest_framework import serializers
from apps.audit.models import AuditEntry


class AuditEntrySerializer(serializers.ModelSerializer):
    """Serializer for AuditEntry."""

    id = serializers.UUIDField(read_only=True)
    timestamp = serializers.DateTimeField(read_only=True)
    userId = serializers.UUIDField(source="actor_id", read_only=True)
    username = serializers.CharField(source="actor.username", read_only=True)
    action = serializers.CharField(read_only=True)
    entityType = serializers.CharField(source="entity_type", read_only=True)
    entityId = serializers.CharField(source="entity_id", read_only=True, allow_null=True)
    oldValue = serializers.JSONField(source="old_value", read_only=True, allow_null=True)
    newValue = serializers.JSONField(source="new_value", read_only=True, allow_null=True)
    reason = serializers.CharField(read_only=True, allow_null=True)
    ipAddress = serializers.CharField(source="ip_address", read_only=True, allow_null=True)

    class Meta:
        model = AuditEntry
        fields = [
            "id",
            "timestamp",
            "userId",
            "username",
            "action",
            "entityType",
            "entityId",
            "oldValue",
            "newValue",
            "reason",
            "ipAddress",
        ]
