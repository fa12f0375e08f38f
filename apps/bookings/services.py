"""Domain services for booking workflows.

Conflict detection, availability propagation onto booked rooms and
homestays, and the booking lifecycle (create, status change, cancel,
delete). Every state change and the matching availability update run in
one transaction.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from apps.properties.models import BookableAvailabilityStatus, HomeStay, Room
from apps.users.api.permissions import is_admin, is_customer, is_merchant
from shared.domain.value_objects import DateRange
from shared.exceptions import (
    BookingConflictError,
    Forbidden,
    InvalidStatusTransition,
    NotFound,
    ValidationFailed,
)
from shared.infrastructure.models import lock_queryset_if_possible

from .models import Booking, BookingHomeStay, BookingRoom

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.users.models import CustomerProfile


logger = logging.getLogger(__name__)

# Availability written onto every booked room/homestay per booking status.
AVAILABILITY_BY_STATUS = {
    Booking.Status.PENDING: BookableAvailabilityStatus.UNAVAILABLE,
    Booking.Status.CONFIRMED: BookableAvailabilityStatus.BOOKED,
    Booking.Status.COMPLETED: BookableAvailabilityStatus.AVAILABLE,
    Booking.Status.CANCELLED: BookableAvailabilityStatus.AVAILABLE,
    Booking.Status.FAILED: BookableAvailabilityStatus.AVAILABLE,
}

STATUS_TARGETS = (
    Booking.Status.CONFIRMED,
    Booking.Status.COMPLETED,
    Booking.Status.CANCELLED,
    Booking.Status.FAILED,
)

CENT = Decimal("0.01")


def _bookings_holding(bookable):
    if isinstance(bookable, Room):
        return Booking.objects.filter(booking_rooms__room=bookable)
    if isinstance(bookable, HomeStay):
        return Booking.objects.filter(booking_homestays__homestay=bookable)
    raise TypeError(f"{bookable.__class__.__name__} cannot be booked")


# --- Conflict checker ------------------------------------------------------


def is_available(bookable, check_in_date: date, check_out_date: date, *, exclude_booking_id=None) -> bool:
    """True when no active booking of ``bookable`` touches the requested stay.

    Both ends are inclusive: a stay ending on the day another one starts is
    a conflict, so same-day turnover is refused. The query is the database
    form of ``DateRange.overlaps_with``.
    """
    try:
        DateRange(check_in_date, check_out_date)
    except ValueError as exc:
        raise ValidationFailed(str(exc))

    overlapping = _bookings_holding(bookable).filter(
        Q(check_in_date__lte=check_out_date) & Q(check_out_date__gte=check_in_date)
    ).exclude(booking_status__in=Booking.INACTIVE_STATUSES)

    if exclude_booking_id is not None:
        overlapping = overlapping.exclude(pk=exclude_booking_id)

    return not overlapping.exists()


def _load_bookables(model, ids: list[int], label: str) -> list:
    entities = list(
        lock_queryset_if_possible(model.objects.filter(pk__in=ids).order_by("pk"))
    )
    if len(entities) != len(set(ids)):
        found = {entity.pk for entity in entities}
        missing = ", ".join(str(pk) for pk in ids if pk not in found)
        raise NotFound(f"{label.capitalize()} not found: {missing}")
    for entity in entities:
        if not entity.is_bookable:
            raise BookingConflictError(f"One or more {label} are not available for booking")
    return entities


def ensure_bookables_available(
    room_ids: Iterable[int],
    homestay_ids: Iterable[int],
    check_in_date: date,
    check_out_date: date,
) -> tuple[list[Room], list[HomeStay]]:
    """Check entity state, then dates, for every requested room and homestay.

    Rows are locked for the rest of the surrounding transaction so two
    requests for the same entity cannot both pass the check.
    """
    room_ids, homestay_ids = list(room_ids), list(homestay_ids)
    rooms = _load_bookables(Room, room_ids, "rooms") if room_ids else []
    homestays = _load_bookables(HomeStay, homestay_ids, "homestays") if homestay_ids else []

    if any(not is_available(room, check_in_date, check_out_date) for room in rooms):
        raise BookingConflictError("One or more rooms are not available for the selected dates")
    if any(not is_available(homestay, check_in_date, check_out_date) for homestay in homestays):
        raise BookingConflictError("One or more homestays are not available for the selected dates")
    return rooms, homestays


# --- Availability propagator -----------------------------------------------


# Bookings that still hold their entities once another booking lets go.
HOLDING_STATUSES = (Booking.Status.PENDING, Booking.Status.CONFIRMED)


def held_availability(bookable, *, exclude_booking_id=None) -> str:
    """Availability implied by the bookings still holding ``bookable``.

    ``booked`` while any of them is confirmed, ``unavailable`` while any is
    pending, ``available`` otherwise.
    """
    holding = _bookings_holding(bookable).filter(booking_status__in=HOLDING_STATUSES)
    if exclude_booking_id is not None:
        holding = holding.exclude(pk=exclude_booking_id)
    statuses = set(holding.values_list("booking_status", flat=True))
    if Booking.Status.CONFIRMED in statuses:
        return BookableAvailabilityStatus.BOOKED
    if Booking.Status.PENDING in statuses:
        return BookableAvailabilityStatus.UNAVAILABLE
    return BookableAvailabilityStatus.AVAILABLE


def _release(queryset, booking: Booking, now) -> int:
    """Recompute availability of entities ``booking`` no longer holds.

    One update per resulting status, so an entity another booking still
    holds keeps that booking's state.
    """
    by_availability: dict[str, list[int]] = {}
    for entity in queryset:
        availability = held_availability(entity, exclude_booking_id=booking.pk)
        by_availability.setdefault(availability, []).append(entity.pk)

    updated = 0
    for availability, pks in by_availability.items():
        updated += queryset.model.all_objects.filter(pk__in=pks).update(
            availability_status=availability, last_status_change=now
        )
    return updated


def propagate_availability(booking: Booking, status: str | None = None) -> str:
    """Write the availability matching ``status`` onto every booked entity.

    Must run inside the transaction that changed the booking. Holding
    statuses update each collection with a single statement; releasing
    statuses fall back to what the remaining bookings imply.
    """
    status = status or booking.booking_status
    availability = AVAILABILITY_BY_STATUS[status]
    now = timezone.now()
    rooms = Room.all_objects.filter(booking_rooms__booking=booking)
    homestays = HomeStay.all_objects.filter(booking_homestays__booking=booking)

    if status in HOLDING_STATUSES:
        room_count = rooms.update(availability_status=availability, last_status_change=now)
        homestay_count = homestays.update(availability_status=availability, last_status_change=now)
    else:
        room_count = _release(rooms, booking, now)
        homestay_count = _release(homestays, booking, now)
    logger.info(
        "Booking %s (%s): %s rooms and %s homestays set to %s",
        booking.pk,
        status,
        room_count,
        homestay_count,
        availability,
    )
    return availability


# --- Lifecycle ---------------------------------------------------------------


def _normalize_items(items, label: str) -> list[dict]:
    normalized: list[dict] = []
    seen: set[int] = set()
    for item in items or []:
        if isinstance(item, dict):
            pk, notes = item.get("id"), item.get("special_requests") or ""
        else:
            pk, notes = item, ""
        if pk in seen:
            raise ValidationFailed(f"Duplicate {label} in booking: {pk}")
        seen.add(pk)
        normalized.append({"id": pk, "special_requests": notes})
    return normalized


def quote_stay(rooms: list[Room], homestays: list[HomeStay], nights: int) -> Decimal:
    """Rooms cost nights x nightly price; homestays add their cleaning fee once."""
    total = Decimal("0.00")
    for room in rooms:
        total += room.price_per_night * nights
    for homestay in homestays:
        total += homestay.base_price * nights + homestay.cleaning_fee
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


@transaction.atomic
def create_booking(
    customer: "CustomerProfile",
    *,
    rooms=None,
    homestays=None,
    check_in_date: date,
    check_out_date: date,
    special_requests: str = "",
    payment_method: str = "",
    number_of_guests: int = 1,
    number_of_children: int = 0,
    number_of_infants: int = 0,
) -> Booking:
    """Create a pending booking for the given rooms and homestays.

    ``rooms`` and ``homestays`` are lists of ids or of
    ``{"id": ..., "special_requests": ...}`` dicts.
    """
    if check_in_date < timezone.localdate():
        raise ValidationFailed("Cannot book for past dates")
    if check_out_date <= check_in_date:
        raise ValidationFailed("Check-out date must be after check-in date")

    room_items = _normalize_items(rooms, "room")
    homestay_items = _normalize_items(homestays, "homestay")
    if not room_items and not homestay_items:
        raise ValidationFailed("At least one room or homestay must be selected")

    stay = DateRange(check_in_date, check_out_date)
    room_objs, homestay_objs = ensure_bookables_available(
        [item["id"] for item in room_items],
        [item["id"] for item in homestay_items],
        check_in_date,
        check_out_date,
    )

    capacity = sum(room.max_occupancy for room in room_objs) + sum(h.max_guests for h in homestay_objs)
    if number_of_guests > capacity:
        raise ValidationFailed(f"Number of guests ({number_of_guests}) exceeds capacity ({capacity})")
    for homestay in homestay_objs:
        if stay.nights < homestay.minimum_stay:
            raise ValidationFailed(f"{homestay.name} requires a minimum stay of {homestay.minimum_stay} nights")

    booking = Booking.objects.create(
        customer=customer,
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        total_amount=quote_stay(room_objs, homestay_objs, stay.nights),
        booking_status=Booking.Status.PENDING,
        payment_status=Booking.PaymentStatus.PENDING,
        payment_method=payment_method or "",
        special_requests=special_requests or "",
        number_of_guests=number_of_guests,
        number_of_children=number_of_children,
        number_of_infants=number_of_infants,
    )

    notes_by_room = {item["id"]: item["special_requests"] for item in room_items}
    notes_by_homestay = {item["id"]: item["special_requests"] for item in homestay_items}
    BookingRoom.objects.bulk_create(
        BookingRoom(booking=booking, room=room, special_requests=notes_by_room[room.pk]) for room in room_objs
    )
    BookingHomeStay.objects.bulk_create(
        BookingHomeStay(booking=booking, homestay=homestay, special_requests=notes_by_homestay[homestay.pk])
        for homestay in homestay_objs
    )

    propagate_availability(booking, Booking.Status.PENDING)
    logger.info(
        "Booking %s created for customer %s: %s, total %s",
        booking.pk,
        customer.pk,
        stay,
        booking.total_amount,
    )
    return booking


def merchant_owns_booking(user, booking: Booking) -> bool:
    profile = user.get_merchant_profile() if is_merchant(user) else None
    if profile is None:
        return False
    return (
        Room.all_objects.filter(booking_rooms__booking=booking, property__merchant=profile).exists()
        or HomeStay.all_objects.filter(booking_homestays__booking=booking, merchant=profile).exists()
    )


def _customer_owns_booking(user, booking: Booking) -> bool:
    return is_customer(user) and booking.customer.user_id == user.pk


def _lock_booking(booking: Booking) -> Booking:
    return lock_queryset_if_possible(Booking.objects.filter(pk=booking.pk)).get()


def refund_for(booking: Booking, today: date | None = None) -> Decimal:
    """Refund owed when ``booking`` is cancelled on ``today``."""
    if not booking.is_refundable:
        return Decimal("0.00")
    today = today or timezone.localdate()
    days_before = (booking.check_in_date - today).days
    if days_before > settings.BOOKING_FULL_REFUND_DAYS:
        return booking.total_amount
    if days_before > settings.BOOKING_PARTIAL_REFUND_DAYS:
        rate = Decimal(str(settings.BOOKING_PARTIAL_REFUND_RATE))
        return (booking.total_amount * rate).quantize(CENT, rounding=ROUND_HALF_UP)
    return Decimal("0.00")


def _apply_cancellation(booking: Booking, reason: str) -> Booking:
    if booking.check_in_date <= timezone.localdate():
        raise InvalidStatusTransition("Cannot cancel a booking that has already started")

    refund = refund_for(booking)
    booking.booking_status = Booking.Status.CANCELLED
    booking.cancellation_reason = reason or ""
    booking.cancellation_date = timezone.now()
    booking.refund_amount = refund
    if refund > 0:
        booking.payment_status = Booking.PaymentStatus.REFUNDED
    booking.save(
        update_fields=[
            "booking_status",
            "cancellation_reason",
            "cancellation_date",
            "refund_amount",
            "payment_status",
            "updated_at",
        ]
    )
    propagate_availability(booking, Booking.Status.CANCELLED)
    logger.info("Booking %s cancelled, refund %s", booking.pk, refund)
    return booking


@transaction.atomic
def cancel_booking(booking: Booking, actor, reason: str = "") -> Booking:
    """Cancel on behalf of the customer, the owning merchant or an admin."""
    if not (is_admin(actor) or _customer_owns_booking(actor, booking) or merchant_owns_booking(actor, booking)):
        raise Forbidden("You don't have permission to cancel this booking")

    booking = _lock_booking(booking)
    if booking.is_terminal:
        raise InvalidStatusTransition(
            f"Booking is already {booking.booking_status} and cannot be cancelled"
        )
    return _apply_cancellation(booking, reason)


@transaction.atomic
def change_booking_status(booking: Booking, actor, status: str, reason: str = "") -> Booking:
    """Admin or owning-merchant status change, propagated to booked entities."""
    if status not in STATUS_TARGETS:
        raise ValidationFailed(f"Invalid status: {status}")
    if not (is_admin(actor) or merchant_owns_booking(actor, booking)):
        raise Forbidden("Only admins and the owning merchant can update booking status")

    booking = _lock_booking(booking)
    previous = booking.booking_status
    if booking.is_terminal:
        raise InvalidStatusTransition(f"Cannot change status of a {previous} booking")
    if previous == status:
        raise InvalidStatusTransition(f"Booking is already {status}")

    if status == Booking.Status.CANCELLED:
        return _apply_cancellation(booking, reason)

    booking.booking_status = status
    fields = ["booking_status", "updated_at"]
    if status == Booking.Status.COMPLETED:
        booking.payment_status = Booking.PaymentStatus.PAID
        fields.append("payment_status")
    elif status == Booking.Status.FAILED:
        booking.payment_status = Booking.PaymentStatus.FAILED
        fields.append("payment_status")
    booking.save(update_fields=fields)
    propagate_availability(booking, status)
    logger.info("Booking %s status %s -> %s by %s", booking.pk, previous, status, actor.pk)
    return booking


@transaction.atomic
def delete_booking(booking: Booking, actor) -> None:
    """Soft delete; an active booking is cancelled first so its entities are released."""
    if not is_admin(actor):
        raise Forbidden("Only admins can delete bookings")
    booking = _lock_booking(booking)
    if not booking.is_terminal:
        booking.booking_status = Booking.Status.CANCELLED
        booking.cancellation_date = timezone.now()
        booking.save(update_fields=["booking_status", "cancellation_date", "updated_at"])
        propagate_availability(booking, Booking.Status.CANCELLED)
    booking.soft_delete()
    logger.info("Booking %s deleted by %s", booking.pk, actor.pk)
