"""
PM schedule API views.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.permissions import IsActiveUser
from apps.maintenance import services
from apps.maintenance.serializers import PMScheduleSerializer


@api_view(["GET", "POST"])
@permission_classes([IsActiveUser])
def list_or_create_schedules(request):
    """
    GET /api/v1/pm-schedules - List schedules ordered by next due date
    POST /api/v1/pm-schedules - Create a schedule
    """
    if request.method == "GET":
        serializer = PMScheduleSerializer(services.list_schedules(), many=True)
        return Response({"data": serializer.data}, status=status.HTTP_200_OK)

    serializer = PMScheduleSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    schedule = services.create_schedule(request.user.id, **serializer.validated_data)
    return Response(
        {"data": PMScheduleSerializer(schedule).data}, status=status.HTTP_201_CREATED
    )


@api_view(["PATCH"])
@permission_classes([IsActiveUser])
def update_schedule(request, scheduleId):
    """PATCH /api/v1/pm-schedules/{scheduleId}"""
    serializer = PMScheduleSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    schedule = services.update_schedule(
        scheduleId, request.user.id, **serializer.validated_data
    )
    return Response({"data": PMScheduleSerializer(schedule).data}, status=status.HTTP_200_OK)
