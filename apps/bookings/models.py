"""Booking domain models for the Vista marketplace."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.models import SoftDeleteModel


class Booking(SoftDeleteModel):
    """Stay of a customer in one or more rooms and/or homestays."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")
        FAILED = "failed", _("Failed")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        PARTIALLY_PAID = "partially_paid", _("Partially paid")
        REFUNDED = "refunded", _("Refunded")
        FAILED = "failed", _("Failed")

    class PaymentMethod(models.TextChoices):
        CARD = "card", _("Card")
        CASH = "cash", _("Cash")
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")

    # Bookings in these states no longer hold their dates.
    INACTIVE_STATUSES = (Status.CANCELLED, Status.FAILED)
    TERMINAL_STATUSES = (Status.CANCELLED, Status.COMPLETED, Status.FAILED)

    customer = models.ForeignKey(
        "users.CustomerProfile",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    rooms = models.ManyToManyField(
        "properties.Room",
        through="BookingRoom",
        related_name="bookings",
        blank=True,
    )
    homestays = models.ManyToManyField(
        "properties.HomeStay",
        through="BookingHomeStay",
        related_name="bookings",
        blank=True,
    )
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )
    booking_status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, blank=True)
    number_of_guests = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    number_of_children = models.PositiveSmallIntegerField(default=0)
    number_of_infants = models.PositiveSmallIntegerField(default=0)
    special_requests = models.TextField(blank=True)
    is_refundable = models.BooleanField(default=True)
    cancellation_reason = models.TextField(blank=True)
    cancellation_date = models.DateTimeField(null=True, blank=True)
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out_date__gt=models.F("check_in_date")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="booking_non_negative_amount",
            ),
        ]
        indexes = [
            models.Index(fields=["check_in_date", "check_out_date"]),
            models.Index(fields=["booking_status"]),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} ({self.check_in_date} - {self.check_out_date})"

    @property
    def nights(self) -> int:
        return (self.check_out_date - self.check_in_date).days

    @property
    def is_active(self) -> bool:
        return self.booking_status not in self.INACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.booking_status in self.TERMINAL_STATUSES


class BookingRoom(models.Model):
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="booking_rooms")
    room = models.ForeignKey("properties.Room", on_delete=models.PROTECT, related_name="booking_rooms")
    special_requests = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Booked room")
        verbose_name_plural = _("Booked rooms")
        constraints = [
            models.UniqueConstraint(fields=["booking", "room"], name="unique_booking_room"),
        ]

    def __str__(self) -> str:
        return f"{self.booking_id}:{self.room_id}"


class BookingHomeStay(models.Model):
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="booking_homestays")
    homestay = models.ForeignKey("properties.HomeStay", on_delete=models.PROTECT, related_name="booking_homestays")
    special_requests = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Booked homestay")
        verbose_name_plural = _("Booked homestays")
        constraints = [
            models.UniqueConstraint(fields=["booking", "homestay"], name="unique_booking_homestay"),
        ]

    def __str__(self) -> str:
        return f"{self.booking_id}:{self.homestay_id}"
