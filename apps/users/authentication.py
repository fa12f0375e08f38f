"""JWT authentication accepting the access token from a header or a cookie."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework_simplejwt.authentication import JWTAuthentication  # type: ignore


ACCESS_COOKIE_NAME = getattr(settings, "JWT_ACCESS_COOKIE_NAME", "access_token")


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """Prefer ``Authorization: Bearer``; fall back to the access-token cookie."""

    def authenticate(self, request):  # type: ignore
        header = self.get_header(request)
        if header is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(ACCESS_COOKIE_NAME)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token
