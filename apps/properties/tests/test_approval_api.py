"""Tests for the listing approval workflow and admin listing actions."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties import services
from apps.properties.models import ApprovalStatus, HomeStay, Property, Room
from apps.users.models import MerchantProfile, User
from shared.exceptions import Forbidden, ValidationFailed


class ApprovalWorkflowTests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass12345",
            account_type=User.AccountType.ADMIN,
        )
        self.merchant_user = User.objects.create_user(
            email="merchant@example.com",
            password="pass12345",
            account_type=User.AccountType.MERCHANT,
        )
        self.merchant = MerchantProfile.objects.create(
            user=self.merchant_user,
            merchant_name="Nimal",
            business_name="Lagoon Stays",
            business_registration_number="PV-1001",
            business_type=MerchantProfile.BusinessType.BOTH,
            address="12 Beach Road",
            city="Negombo",
            phone_number="+94771234567",
            status=MerchantProfile.Status.ACTIVE,
            max_properties_allowed=5,
        )
        self.homestay = HomeStay.objects.create(merchant=self.merchant, name="Garden Stay", base_price=40)
        self.property = Property.objects.create(
            merchant=self.merchant,
            property_type=Property.PropertyType.HOTEL,
            title="Lagoon Hotel",
            address="1 Lagoon Road",
            city="Negombo",
            phone="+94771234567",
        )
        self.room = Room.objects.create(property=self.property, room_number="101", price_per_night=60)

    def test_admin_approves_homestay_without_verifying_it(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("homestay-approval-status", args=[self.homestay.pk]),
            {"approval_status": "approved"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

        self.homestay.refresh_from_db()
        self.assertEqual(self.homestay.approval_status, ApprovalStatus.APPROVED)
        self.assertIsNotNone(self.homestay.approved_at)
        self.assertIsNone(self.homestay.rejection_reason)
        self.assertFalse(self.homestay.vista_verified)
        self.assertIsNotNone(self.homestay.last_status_change)

    def test_approving_room_marks_it_verified(self) -> None:
        services.transition_approval(self.room, self.admin, ApprovalStatus.APPROVED)

        self.room.refresh_from_db()
        self.assertTrue(self.room.vista_verified)
        self.assertIsNotNone(self.room.approved_at)

    def test_approving_property_leaves_verification_alone(self) -> None:
        services.transition_approval(self.property, self.admin, ApprovalStatus.APPROVED)

        self.property.refresh_from_db()
        self.assertFalse(self.property.vista_verified)

    def test_second_approval_keeps_approved_at(self) -> None:
        services.transition_approval(self.homestay, self.admin, ApprovalStatus.APPROVED)
        self.homestay.refresh_from_db()
        first_approved_at = self.homestay.approved_at
        first_change = self.homestay.last_status_change

        services.transition_approval(self.homestay, self.admin, ApprovalStatus.APPROVED)
        self.homestay.refresh_from_db()
        self.assertEqual(self.homestay.approved_at, first_approved_at)
        self.assertGreaterEqual(self.homestay.last_status_change, first_change)

    def test_reject_requires_reason(self) -> None:
        for target in (ApprovalStatus.REJECTED, ApprovalStatus.CHANGES_REQUESTED):
            with self.assertRaises(ValidationFailed):
                services.transition_approval(self.homestay, self.admin, target, "   ")

        self.homestay.refresh_from_db()
        self.assertEqual(self.homestay.approval_status, ApprovalStatus.PENDING)

    def test_reason_is_validated_before_role(self) -> None:
        with self.assertRaises(ValidationFailed):
            services.transition_approval(self.homestay, self.merchant_user, ApprovalStatus.REJECTED)

        with self.assertRaises(Forbidden):
            services.transition_approval(self.homestay, self.merchant_user, ApprovalStatus.REJECTED, "Blurry photos")

    def test_reject_stores_reason_and_approval_clears_it(self) -> None:
        self.client.force_authenticate(self.admin)
        url = reverse("property-approval-status", args=[self.property.pk])

        response = self.client.patch(
            url,
            {"approval_status": "rejected", "rejection_reason": "Missing licence"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.property.refresh_from_db()
        self.assertEqual(self.property.rejection_reason, "Missing licence")
        self.assertIsNone(self.property.approved_at)

        self.client.patch(url, {"approval_status": "approved"}, format="json")
        self.property.refresh_from_db()
        self.assertIsNone(self.property.rejection_reason)
        self.assertIsNotNone(self.property.approved_at)

    def test_merchant_gets_validation_error_then_forbidden(self) -> None:
        self.client.force_authenticate(self.merchant_user)
        url = reverse("homestay-approval-status", args=[self.homestay.pk])

        response = self.client.patch(url, {"approval_status": "rejected"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(url, {"approval_status": "approved"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.homestay.refresh_from_db()
        self.assertEqual(self.homestay.approval_status, ApprovalStatus.PENDING)

    def test_unknown_status_is_rejected(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("homestay-approval-status", args=[self.homestay.pk]),
            {"approval_status": "published"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ListingAdminActionTests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass12345",
            account_type=User.AccountType.ADMIN,
        )
        merchant_user = User.objects.create_user(
            email="merchant@example.com",
            password="pass12345",
            account_type=User.AccountType.MERCHANT,
        )
        self.merchant_user = merchant_user
        merchant = MerchantProfile.objects.create(
            user=merchant_user,
            merchant_name="Nimal",
            business_name="Lagoon Stays",
            business_registration_number="PV-1001",
            business_type=MerchantProfile.BusinessType.BOTH,
            address="12 Beach Road",
            city="Negombo",
            phone_number="+94771234567",
            status=MerchantProfile.Status.ACTIVE,
        )
        self.homestay = HomeStay.objects.create(merchant=merchant, name="Garden Stay")

    def test_status_toggle_drives_availability(self) -> None:
        self.client.force_authenticate(self.admin)
        url = reverse("homestay-status", args=[self.homestay.pk])

        response = self.client.patch(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.homestay.refresh_from_db()
        self.assertFalse(self.homestay.is_active)
        self.assertEqual(self.homestay.availability_status, "unavailable")

        self.client.patch(url, {"is_active": True}, format="json")
        self.homestay.refresh_from_db()
        self.assertTrue(self.homestay.is_active)
        self.assertEqual(self.homestay.availability_status, "available")

    def test_verify_is_admin_only(self) -> None:
        url = reverse("homestay-verify", args=[self.homestay.pk])

        self.client.force_authenticate(self.merchant_user)
        response = self.client.patch(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.patch(url, {}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.homestay.refresh_from_db()
        self.assertTrue(self.homestay.vista_verified)

    def test_booked_cannot_be_set_by_hand(self) -> None:
        self.client.force_authenticate(self.merchant_user)

        response = self.client.patch(
            reverse("homestay-availability", args=[self.homestay.pk]),
            {"availability_status": "booked"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(
            reverse("homestay-availability", args=[self.homestay.pk]),
            {"availability_status": "maintenance"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.homestay.refresh_from_db()
        self.assertEqual(self.homestay.availability_status, "maintenance")
