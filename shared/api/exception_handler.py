"""Project-wide DRF exception handler producing the failure envelope."""

from __future__ import annotations

import logging

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import DatabaseError, IntegrityError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.exceptions import DependencyError, DuplicateEntryError, ValidationFailed

logger = logging.getLogger(__name__)


def _first_message(data) -> str:
    """Pull the first human readable message out of DRF error data."""
    if isinstance(data, dict):
        if "detail" in data:
            return str(data["detail"])
        for value in data.values():
            message = _first_message(value)
            if message:
                return message
        return ""
    if isinstance(data, (list, tuple)):
        for item in data:
            message = _first_message(item)
            if message:
                return message
        return ""
    return str(data)


def _translate(exc):
    if isinstance(exc, IntegrityError):
        if "unique" in str(exc).lower():
            return DuplicateEntryError()
        return ValidationFailed("Data integrity check failed.")
    if isinstance(exc, DatabaseError):
        return DependencyError("Database error")
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, "message_dict"):
            return ValidationFailed(exc.message_dict)
        return ValidationFailed(exc.messages)
    return exc


def exception_handler(exc, context):
    """Render every error as ``{success: false, message, errors?, error?}``."""

    original = exc
    exc = _translate(exc)
    response = drf_exception_handler(exc, context)
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if response is None:
        logger.error("Unhandled error in %s", view_name, exc_info=original)
        payload = {"success": False, "message": "Internal server error"}
        if settings.DEBUG:
            payload["error"] = str(original)
        return Response(payload, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    data = response.data
    payload = {"success": False, "message": _first_message(data) or "Request failed"}
    if isinstance(data, dict) and "detail" not in data:
        payload["errors"] = data
    elif isinstance(data, list):
        payload["errors"] = data
    if settings.DEBUG and original is not exc:
        payload["error"] = str(original)

    if response.status_code >= 500:
        logger.error("Request failed in %s: %s", view_name, payload["message"], exc_info=original)
    elif response.status_code in (status.HTTP_403_FORBIDDEN, status.HTTP_409_CONFLICT):
        logger.warning("Request refused in %s: %s", view_name, payload["message"])

    response.data = payload
    return response
