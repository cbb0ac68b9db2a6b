"""
Authentication views: login, logout, current user, password change.

Login establishes a session cookie and also returns a JWT access token for
API clients. No domain logic beyond credential checks and session audit.
"""

from django.contrib.auth import login as session_login
from django.contrib.auth import logout as session_logout
from django.contrib.auth import update_session_auth_hash
from rest_framework import status
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
    throttle_classes,
)
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from core.permissions import IsActiveUser
from core.throttling import LoginRateThrottle
from apps.auth.serializers import LoginSerializer
from apps.users import services as user_services
from apps.users.serializers import ChangePasswordSerializer, UserSerializer


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login(request):
    """
    POST /api/v1/auth/login

    Authenticate user, open a session and return a JWT access token.
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = user_services.authenticate_login(
        serializer.validated_data["username"],
        serializer.validated_data["password"],
    )

    session_login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    user_services.record_session_event(user_id=user.id, action="LOGIN")

    access_token = str(RefreshToken.for_user(user).access_token)
    user_data = UserSerializer(user).data

    return Response(
        {"data": {"token": access_token, "user": user_data}}, status=status.HTTP_200_OK
    )


@api_view(["POST"])
@permission_classes([IsActiveUser])
def logout(request):
    """
    POST /api/v1/auth/logout

    Record the logout and end the session.
    """
    user_services.record_session_event(user_id=request.user.id, action="LOGOUT")
    session_logout(request)
    return Response({"data": {"success": True}}, status=status.HTTP_200_OK)


@api_view(["GET"])
@permission_classes([IsActiveUser])
def me(request):
    """
    GET /api/v1/auth/me

    Get current authenticated user.
    """
    serializer = UserSerializer(request.user)
    return Response({"data": serializer.data}, status=status.HTTP_200_OK)


@api_view(["POST"])
@permission_classes([IsActiveUser])
def change_password(request):
    """
    POST /api/v1/auth/change-password

    Change the current user's password after re-verifying the current one.
    """
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = user_services.change_password(
        user_id=request.user.id,
        current_password=serializer.validated_data["currentPassword"],
        new_password=serializer.validated_data["newPassword"],
    )
    # Keep the current session valid under the new password hash
    update_session_auth_hash(request, user)
    return Response({"data": {"success": True}}, status=status.HTTP_200_OK)
