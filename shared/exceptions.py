"""
Error taxonomy shared by every app.

Services raise these; the API layer turns them into the failure envelope
via ``shared.api.exception_handler``. Each class carries the HTTP status it
maps to, so views never translate errors by hand.
"""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.exceptions import APIException  # type: ignore


class ServiceError(APIException):
    """Base class for domain errors with a fixed HTTP status."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed."
    default_code = "error"


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed."
    default_code = "validation_error"


class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found."
    default_code = "not_found"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Request conflicts with the current state."
    default_code = "conflict"


class BookingConflictError(ConflictError):
    """Raised when a bookable entity is busy for the requested dates."""

    default_detail = "The selected dates are not available."
    default_code = "booking_conflict"


class QuotaExceededError(ConflictError):
    """Raised when a merchant has used up its listing quota."""

    default_detail = "Merchant has reached the maximum allowed listings."
    default_code = "quota_exceeded"


class InvalidStatusTransition(ConflictError):
    default_detail = "Status transition is not allowed."
    default_code = "invalid_transition"


class DuplicateEntryError(ConflictError):
    default_detail = "Duplicate entry."
    default_code = "duplicate"


class DependencyError(ServiceError):
    """Database or storage failure."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error."
    default_code = "dependency_error"
