"""
LogEntry API views.

All mutations flow through service layer.
The acting user is always request.user; it is never read from the body.
"""

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.exceptions import ValidationError
from core.permissions import CanApproveLogEntries, IsActiveUser
from apps.logbook import services
from apps.logbook.serializers import (
    LogEntrySerializer,
    LogEntryWriteSerializer,
    SignatureSerializer,
)


@api_view(["GET", "POST"])
@permission_classes([IsActiveUser])
def list_or_create_entries(request):
    """
    GET /api/v1/logs?status=Submitted - List log entries
    POST /api/v1/logs - Create a Draft log entry
    """
    if request.method == "GET":
        entries = services.list_entries(status=request.query_params.get("status"))
        serializer = LogEntrySerializer(entries, many=True)
        return Response({"data": serializer.data}, status=status.HTTP_200_OK)

    serializer = LogEntryWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    entry = services.create_entry(creator_id=request.user.id, **serializer.validated_data)
    return Response(
        {"data": LogEntrySerializer(entry).data}, status=status.HTTP_201_CREATED
    )


@api_view(["GET", "PATCH"])
@permission_classes([IsActiveUser])
def entry_detail(request, entryId):
    """
    GET /api/v1/logs/{entryId}
    PATCH /api/v1/logs/{entryId} - Edit a Draft entry (author only)
    """
    if request.method == "GET":
        entry = services.get_entry(entryId)
        return Response({"data": LogEntrySerializer(entry).data}, status=status.HTTP_200_OK)

    serializer = LogEntryWriteSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    entry = services.update_entry(entryId, request.user.id, **serializer.validated_data)
    return Response({"data": LogEntrySerializer(entry).data}, status=status.HTTP_200_OK)


def _signature(request):
    serializer = SignatureSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data["password"], serializer.validated_data["reason"]


@api_view(["POST"])
@permission_classes([IsActiveUser])
def submit_entry(request, entryId):
    """
    POST /api/v1/logs/{entryId}/submit

    Request body: {"password": "...", "reason": "..."}
    """
    password, reason = _signature(request)
    entry = services.submit_entry(entryId, request.user.id, password, reason)
    return Response({"data": LogEntrySerializer(entry).data}, status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([CanApproveLogEntries])
def approve_entry(request, entryId):
    """
    POST /api/v1/logs/{entryId}/approve

    Request body: {"password": "...", "reason": "..."}
    Requires QA or ADMIN; the author can never approve their own entry.
    """
    password, reason = _signature(request)
    entry = services.approve_entry(entryId, request.user.id, password, reason)
    return Response({"data": LogEntrySerializer(entry).data}, status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([CanApproveLogEntries])
def reject_entry(request, entryId):
    """
    POST /api/v1/logs/{entryId}/reject

    Request body: {"password": "...", "reason": "..."}
    """
    password, reason = _signature(request)
    entry = services.reject_entry(entryId, request.user.id, password, reason)
    return Response({"data": LogEntrySerializer(entry).data}, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([IsActiveUser])
def export_log_report(request):
    """
    GET /api/v1/reports/logbook?format=pdf|excel&status=&equipmentId=

    Export the filtered log entries with their signatures as a file.
    """
    format_param = request.query_params.get("format", "pdf").lower()
    if format_param not in ("pdf", "excel"):
        raise ValidationError("Format must be 'pdf' or 'excel'", {"format": format_param})

    filters = {
        key: request.query_params[key]
        for key in ("status", "equipmentId")
        if request.query_params.get(key)
    }
    entries = services.list_entries(
        status=filters.get("status"), equipment_id=filters.get("equipmentId")
    )

    from apps.logbook.report_export import export_log_report_excel, export_log_report_pdf

    if format_param == "pdf":
        content, filename = export_log_report_pdf(entries, filters)
        content_type = "application/pdf"
    else:
        content, filename = export_log_report_excel(entries, filters)
        content_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    response = HttpResponse(content, content_type=content_type)
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
