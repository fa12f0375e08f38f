"""Listing services: merchant quota guard and the approval workflow."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.services import held_availability
from apps.users.api.permissions import is_admin
from apps.users.models import MerchantProfile
from shared.exceptions import Forbidden, NotFound, QuotaExceededError, ValidationFailed
from shared.infrastructure.models import lock_queryset_if_possible

from .models import ApprovalStatus, AvailabilityStatus, HomeStay, Property, Room, Unit

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .models import ListingStatusFields


logger = logging.getLogger(__name__)

QUOTA_LABELS = {
    Property: "properties",
    HomeStay: "homestays",
    Unit: "units",
}

REASON_REQUIRED = (ApprovalStatus.REJECTED, ApprovalStatus.CHANGES_REQUESTED)

# ``booked`` is written only by the booking lifecycle.
MANUAL_AVAILABILITY = (
    AvailabilityStatus.AVAILABLE,
    AvailabilityStatus.UNAVAILABLE,
    AvailabilityStatus.MAINTENANCE,
    AvailabilityStatus.ARCHIVED,
)


def count_listings(merchant: MerchantProfile, model) -> int:
    """Non-deleted listings of ``model`` owned by ``merchant``."""
    if model is Unit:
        return Unit.objects.filter(property__merchant=merchant).count()
    return model.objects.filter(merchant=merchant).count()


def assert_under_quota(merchant: MerchantProfile, model) -> None:
    """Refuse creating another ``model`` listing once the merchant's quota is used up.

    Inside a transaction the merchant row stays locked until commit, so
    concurrent creates for the same merchant are counted one after another.
    """
    merchant = lock_queryset_if_possible(MerchantProfile.all_objects.filter(pk=merchant.pk)).get()
    quota = merchant.max_properties_allowed
    if count_listings(merchant, model) >= quota:
        label = QUOTA_LABELS.get(model, "listings")
        logger.warning("Merchant %s hit %s quota (%s)", merchant.pk, label, quota)
        raise QuotaExceededError(f"Merchant has reached maximum allowed {label} ({quota})")


def resolve_listing_merchant(actor, merchant_id=None) -> MerchantProfile:
    """Merchant that will own a new listing.

    Merchants always create for themselves and must be active. Admins create
    on behalf of the merchant named in the payload, which must be active too.
    """
    if is_admin(actor):
        if not merchant_id:
            raise ValidationFailed({"merchant": ["Merchant is required when an admin creates a listing."]})
        merchant = MerchantProfile.objects.filter(pk=merchant_id).first()
        if merchant is None:
            raise NotFound("Merchant not found.")
        if not merchant.can_list:
            raise ValidationFailed("Merchant is not active.")
        return merchant

    merchant = actor.get_merchant_profile() if hasattr(actor, "get_merchant_profile") else None
    if merchant is None:
        raise Forbidden("Merchant profile not found.")
    if not merchant.can_list:
        raise Forbidden("Merchant account is not active or not approved.")
    return merchant


def initial_approval_fields(actor) -> dict:
    """Admin-created listings start approved; merchant ones wait for moderation."""
    now = timezone.now()
    if is_admin(actor):
        return {"approval_status": ApprovalStatus.APPROVED, "approved_at": now, "last_status_change": now}
    return {"approval_status": ApprovalStatus.PENDING, "last_status_change": now}


def transition_approval(
    listing: "ListingStatusFields",
    actor,
    status: str,
    rejection_reason: str | None = None,
) -> "ListingStatusFields":
    """Move a listing through the approval state machine.

    The reason is validated before the role check so a missing reason is a
    validation error for every caller. Approving twice keeps the original
    ``approved_at``. Approving a room also marks it Vista verified.
    """
    if status not in ApprovalStatus.values:
        raise ValidationFailed(f"Invalid approval status: {status}")
    reason = (rejection_reason or "").strip()
    if status in REASON_REQUIRED and not reason:
        raise ValidationFailed("Rejection reason is required when rejecting or requesting changes")
    if not is_admin(actor):
        raise Forbidden("Only admins can change approval status")

    now = timezone.now()
    fields = ["approval_status", "last_status_change", "updated_at"]

    if status == ApprovalStatus.APPROVED:
        if listing.approval_status != ApprovalStatus.APPROVED or listing.approved_at is None:
            listing.approved_at = now
            fields.append("approved_at")
        listing.rejection_reason = None
        fields.append("rejection_reason")
        if isinstance(listing, Room):
            listing.vista_verified = True
            fields.append("vista_verified")
    elif status in REASON_REQUIRED:
        listing.rejection_reason = reason
        fields.append("rejection_reason")

    previous = listing.approval_status
    listing.approval_status = status
    listing.last_status_change = now
    listing.save(update_fields=fields)
    logger.info(
        "%s %s approval %s -> %s by %s",
        listing.__class__.__name__,
        listing.pk,
        previous,
        status,
        actor.pk,
    )
    return listing


def mark_pending_after_edit(listing: "ListingStatusFields", actor) -> None:
    """A merchant edit sends the listing back to moderation."""
    if is_admin(actor):
        return
    listing.approval_status = ApprovalStatus.PENDING
    listing.last_status_change = timezone.now()
    listing.save(update_fields=["approval_status", "last_status_change", "updated_at"])


def set_availability_status(listing: "ListingStatusFields", status: str) -> "ListingStatusFields":
    if status not in MANUAL_AVAILABILITY:
        allowed = ", ".join(MANUAL_AVAILABILITY)
        raise ValidationFailed(f"Invalid availability status. Allowed: {allowed}")
    listing.availability_status = status
    listing.last_status_change = timezone.now()
    listing.save(update_fields=["availability_status", "last_status_change", "updated_at"])
    return listing


def set_active_status(listing: "ListingStatusFields", is_active: bool | None = None) -> "ListingStatusFields":
    """Toggle (or set) ``is_active``; availability follows the flag.

    A reactivated room or homestay takes the state its live bookings imply.
    """
    listing.is_active = (not listing.is_active) if is_active is None else is_active
    if not listing.is_active:
        listing.availability_status = AvailabilityStatus.UNAVAILABLE
    elif isinstance(listing, (Room, HomeStay)):
        listing.availability_status = held_availability(listing)
    else:
        listing.availability_status = AvailabilityStatus.AVAILABLE
    listing.last_status_change = timezone.now()
    listing.save(update_fields=["is_active", "availability_status", "last_status_change", "updated_at"])
    return listing


def toggle_verification(listing: "ListingStatusFields", vista_verified: bool | None = None) -> "ListingStatusFields":
    listing.vista_verified = (not listing.vista_verified) if vista_verified is None else vista_verified
    listing.save(update_fields=["vista_verified", "updated_at"])
    return listing


@transaction.atomic
def soft_delete_listing(listing: "ListingStatusFields") -> None:
    """Soft delete a listing; deleting a property takes its rooms and units along."""
    if isinstance(listing, Property):
        Room.objects.filter(property=listing).soft_delete()
        Unit.objects.filter(property=listing).soft_delete()
    listing.soft_delete()
    logger.info("%s %s soft-deleted", listing.__class__.__name__, listing.pk)


@transaction.atomic
def restore_listing(listing: "ListingStatusFields", actor) -> "ListingStatusFields":
    """Restore a soft-deleted listing, re-checking the owner's quota first."""
    if listing.deleted_at is None:
        raise ValidationFailed(f"{listing.__class__.__name__} is not deleted.")
    model = listing.__class__
    if model in QUOTA_LABELS:
        merchant = listing.merchant if model is not Unit else listing.property.merchant
        assert_under_quota(merchant, model)
    listing.restore()
    logger.info("%s %s restored by %s", model.__name__, listing.pk, actor.pk)
    return listing
