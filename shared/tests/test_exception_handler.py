"""Tests for the error envelope rendered by the API exception handler."""

from __future__ import annotations

from django.db import DatabaseError, IntegrityError  # type: ignore
from django.test import SimpleTestCase  # type: ignore
from rest_framework import status  # type: ignore

from shared.api.exception_handler import exception_handler
from shared.exceptions import BookingConflictError


class ExceptionHandlerTests(SimpleTestCase):
    def test_database_error_becomes_dependency_error(self) -> None:
        response = exception_handler(DatabaseError("connection reset"), {})

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["message"], "Database error")

    def test_unique_violation_becomes_conflict(self) -> None:
        response = exception_handler(IntegrityError("UNIQUE constraint failed: users_customuser.email"), {})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data["success"])

    def test_other_integrity_error_is_a_validation_failure(self) -> None:
        response = exception_handler(IntegrityError("NOT NULL constraint failed"), {})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_service_error_keeps_its_message(self) -> None:
        response = exception_handler(BookingConflictError("Room is already booked"), {})

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data, {"success": False, "message": "Room is already booked"})

    def test_unknown_error_is_an_internal_error(self) -> None:
        with self.assertLogs("shared.api.exception_handler", level="ERROR"):
            response = exception_handler(RuntimeError("boom"), {})

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["message"], "Internal server error")
