"""
User views: list users, create users, update users.

Listing requires ADMIN or QA; creation and updates require ADMIN.
Role checks run before any lookup so denials are uniform.
"""

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from core.permissions import CanListUsers, CanManageUsers, IsActiveUser
from apps.users.models import User
from apps.users import services
from apps.users.serializers import (
    UserSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
)


@api_view(["GET", "POST"])
@permission_classes([IsActiveUser])
def list_or_create_users(request):
    """
    GET /api/v1/users - List all users (ADMIN, QA).
    POST /api/v1/users - Create a new user (ADMIN only).
    """
    if request.method == "GET":
        if not CanListUsers().has_permission(request, None):
            return _forbidden("User listing is restricted to Admin and QA roles")

        users = User.objects.all().order_by("username")
        serializer = UserSerializer(users, many=True)
        return Response({"data": serializer.data}, status=status.HTTP_200_OK)

    # POST requires ADMIN permission
    if not CanManageUsers().has_permission(request, None):
        return _forbidden("Only Admin can create users")

    serializer = UserCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    user = services.register_user(
        actor_id=request.user.id,
        username=data["username"],
        password=data["password"],
        role=data["role"],
        full_name=data.get("full_name"),
        department=data.get("department") or None,
        is_active=data["is_active"],
    )
    return Response({"data": UserSerializer(user).data}, status=status.HTTP_201_CREATED)


@api_view(["PATCH"])
@permission_classes([CanManageUsers])
def update_user(request, userId):
    """
    PATCH /api/v1/users/{userId}

    Update role, department, full name, active state or password (ADMIN only).
    """
    serializer = UserUpdateSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    fields = dict(serializer.validated_data)
    password = fields.pop("password", None)
    if "department" in fields and not fields["department"]:
        fields["department"] = None

    user = services.update_user(
        actor_id=request.user.id,
        user_id=userId,
        password=password,
        **fields,
    )
    return Response({"data": UserSerializer(user).data}, status=status.HTTP_200_OK)


def _forbidden(message):
    return Response(
        {
            "error": {
                "code": "FORBIDDEN",
                "message": message,
                "details": {},
            }
        },
        status=status.HTTP_403_FORBIDDEN,
    )
