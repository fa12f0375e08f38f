"""Views for authentication flows (register, login, logout)."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.views import APIView  # type: ignore
from rest_framework_simplejwt.exceptions import TokenError  # type: ignore
from rest_framework_simplejwt.tokens import RefreshToken  # type: ignore

from shared.api.responses import success_response
from shared.exceptions import ValidationFailed

from .auth_serializers import LoginSerializer, LogoutSerializer, RegisterSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def _tokens_for_user(user) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    return {"refresh": str(refresh), "access": str(refresh.access_token)}


def _access_cookie_name() -> str:
    return getattr(settings, "JWT_ACCESS_COOKIE_NAME", "access_token")


class RegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Registered %s account %s", user.account_type, user.pk)
        data = {
            "user": UserSerializer(user).data,
            "tokens": _tokens_for_user(user),
        }
        return success_response(data, "Registration successful", status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        user.touch_last_activity()
        tokens = _tokens_for_user(user)
        response = success_response(
            {"user": UserSerializer(user).data, "tokens": tokens},
            "Login successful",
        )
        lifetime = settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
        response.set_cookie(
            _access_cookie_name(),
            tokens["access"],
            max_age=int(lifetime.total_seconds()),
            httponly=True,
            secure=not settings.DEBUG,
            samesite="Lax",
        )
        return response


class LogoutView(APIView):
    """Blacklists the refresh token and drops the access cookie."""

    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = LogoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            RefreshToken(serializer.validated_data["refresh"]).blacklist()
        except TokenError as exc:
            raise ValidationFailed(str(exc))
        response = success_response(message="Logout successful")
        response.delete_cookie(_access_cookie_name())
        return response
