"""
Audit trail views - query audit entries.

Read-only - audit entries are append-only.
"""

from uuid import UUID

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.exceptions import ValidationError
from core.permissions import CanViewAuditTrail
from apps.audit.serializers import AuditEntrySerializer
from apps.audit import services


@api_view(["GET"])
@permission_classes([CanViewAuditTrail])
def query_audit_trail(request):
    """
    GET /api/v1/audit?limit=N

    Audit entries newest-first, capped at N. Optional filters:
    entityType, entityId, action, userId.
    """
    actor_id = request.query_params.get("userId")
    if actor_id:
        try:
            actor_id = UUID(actor_id)
        except ValueError:
            raise ValidationError("Invalid userId format")

    entries = services.list_audit_entries(
        limit=request.query_params.get("limit"),
        entity_type=request.query_params.get("entityType"),
        entity_id=request.query_params.get("entityId"),
        action=request.query_params.get("action"),
        actor_id=actor_id,
    )
    serializer = AuditEntrySerializer(entries, many=True)
    return Response({"data": serializer.data}, status=status.HTTP_200_OK)
