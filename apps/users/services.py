"""Merchant moderation performed by administrators."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.exceptions import InvalidStatusTransition, ValidationFailed

from .models import MerchantProfile

logger = logging.getLogger(__name__)


@transaction.atomic
def approve_merchant(merchant: MerchantProfile, *, quota: int, admin_notes: str = "") -> MerchantProfile:
    if merchant.status != MerchantProfile.Status.PENDING:
        raise InvalidStatusTransition(f"Only pending merchants can be approved (current status: {merchant.status}).")

    merchant.status = MerchantProfile.Status.ACTIVE
    merchant.is_active = True
    merchant.max_properties_allowed = quota
    merchant.verification_date = timezone.now()
    if admin_notes:
        merchant.admin_notes = admin_notes
    merchant.save(
        update_fields=[
            "status",
            "is_active",
            "max_properties_allowed",
            "verification_date",
            "admin_notes",
            "updated_at",
        ]
    )
    logger.info("Merchant %s approved with quota %s", merchant.pk, quota)
    return merchant


@transaction.atomic
def reject_merchant(merchant: MerchantProfile, *, reason: str) -> MerchantProfile:
    """Reject a pending merchant and disable its login in the same transaction."""
    if not reason or not reason.strip():
        raise ValidationFailed("Rejection reason is required.")
    if merchant.status != MerchantProfile.Status.PENDING:
        raise InvalidStatusTransition(f"Only pending merchants can be rejected (current status: {merchant.status}).")

    merchant.status = MerchantProfile.Status.REJECTED
    merchant.is_active = False
    merchant.admin_notes = reason.strip()
    merchant.save(update_fields=["status", "is_active", "admin_notes", "updated_at"])

    user = merchant.user
    user.is_active = False
    user.save(update_fields=["is_active", "updated_at"])
    logger.info("Merchant %s rejected", merchant.pk)
    return merchant


@transaction.atomic
def update_merchant_status(merchant: MerchantProfile, **changes) -> MerchantProfile:
    new_status = changes.get("status")
    fields = ["updated_at"]

    if new_status is not None:
        if new_status == MerchantProfile.Status.SUSPENDED:
            reason = (changes.get("suspension_reason") or "").strip()
            if not reason:
                raise ValidationFailed("A reason is required to suspend a merchant.")
            merchant.suspension_reason = reason
        elif merchant.status == MerchantProfile.Status.SUSPENDED:
            merchant.suspension_reason = ""
        merchant.status = new_status
        merchant.is_active = new_status == MerchantProfile.Status.ACTIVE
        if new_status == MerchantProfile.Status.ACTIVE and merchant.verification_date is None:
            merchant.verification_date = timezone.now()
            fields.append("verification_date")
        fields += ["status", "is_active", "suspension_reason"]

    if "max_properties_allowed" in changes:
        merchant.max_properties_allowed = changes["max_properties_allowed"]
        fields.append("max_properties_allowed")
    if "admin_notes" in changes:
        merchant.admin_notes = changes["admin_notes"]
        fields.append("admin_notes")

    merchant.save(update_fields=fields)
    logger.info("Merchant %s updated: %s", merchant.pk, sorted(set(fields) - {"updated_at"}))
    return merchant
