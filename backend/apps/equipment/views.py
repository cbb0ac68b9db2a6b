"""
Equipment API views.

All mutations flow through service layer.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.exceptions import NotFoundError
from core.permissions import IsActiveUser
from apps.equipment.models import Equipment
from apps.equipment import services
from apps.equipment.serializers import EquipmentSerializer


@api_view(["GET", "POST"])
@permission_classes([IsActiveUser])
def list_or_create_equipment(request):
    """
    GET /api/v1/equipment - List equipment
    POST /api/v1/equipment - Register equipment
    """
    if request.method == "GET":
        queryset = Equipment.objects.all().order_by("equipment_code")
        serializer = EquipmentSerializer(queryset, many=True)
        return Response({"data": serializer.data}, status=status.HTTP_200_OK)

    serializer = EquipmentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    equipment = services.create_equipment(request.user.id, **serializer.validated_data)
    return Response(
        {"data": EquipmentSerializer(equipment).data}, status=status.HTTP_201_CREATED
    )


@api_view(["GET", "PATCH", "DELETE"])
@permission_classes([IsActiveUser])
def equipment_detail(request, equipmentId):
    """
    GET /api/v1/equipment/{equipmentId}
    PATCH /api/v1/equipment/{equipmentId}
    DELETE /api/v1/equipment/{equipmentId}
    """
    if request.method == "GET":
        try:
            equipment = Equipment.objects.get(id=equipmentId)
        except Equipment.DoesNotExist:
            raise NotFoundError(f"Equipment {equipmentId} does not exist")
        return Response(
            {"data": EquipmentSerializer(equipment).data}, status=status.HTTP_200_OK
        )

    if request.method == "PATCH":
        serializer = EquipmentSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        equipment = services.update_equipment(
            equipmentId, request.user.id, **serializer.validated_data
        )
        return Response(
            {"data": EquipmentSerializer(equipment).data}, status=status.HTTP_200_OK
        )

    services.delete_equipment(equipmentId, request.user.id)
    return Response({"data": {"success": True}}, status=status.HTTP_200_OK)
