"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking, BookingRoom
from apps.properties.models import ApprovalStatus, BookableAvailabilityStatus, HomeStay, Property, Room
from apps.users.models import CustomerProfile, MerchantProfile, User


def make_customer(email: str) -> tuple[User, CustomerProfile]:
    user = User.objects.create_user(email=email, password="pass12345", account_type=User.AccountType.CUSTOMER)
    profile = CustomerProfile.objects.create(user=user, first_name="Kamal", last_name="Perera")
    return user, profile


def make_merchant(email: str, registration: str) -> tuple[User, MerchantProfile]:
    user = User.objects.create_user(email=email, password="pass12345", account_type=User.AccountType.MERCHANT)
    profile = MerchantProfile.objects.create(
        user=user,
        merchant_name="Nimal",
        business_name=f"Business {registration}",
        business_registration_number=registration,
        business_type=MerchantProfile.BusinessType.BOTH,
        address="12 Beach Road",
        city="Galle",
        phone_number="+94771234567",
        status=MerchantProfile.Status.ACTIVE,
        max_properties_allowed=5,
    )
    return user, profile


class BookingAPITests(APITestCase):
    """Booking creation, conflicts, cancellation and status changes over HTTP."""

    def setUp(self) -> None:
        self.customer_user, self.customer = make_customer("guest@example.com")
        self.merchant_user, self.merchant = make_merchant("merchant@example.com", "PV-1")
        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass12345",
            account_type=User.AccountType.ADMIN,
        )
        self.property = Property.objects.create(
            merchant=self.merchant,
            property_type=Property.PropertyType.HOTEL,
            title="Sea Breeze Hotel",
            address="1 Lighthouse Street",
            city="Galle",
            phone="+94771234567",
            approval_status=ApprovalStatus.APPROVED,
        )
        self.room = Room.objects.create(
            property=self.property,
            room_number="101",
            max_occupancy=2,
            price_per_night=Decimal("100.00"),
        )
        self.homestay = HomeStay.objects.create(
            merchant=self.merchant,
            name="Palm Cottage",
            max_guests=4,
            base_price=Decimal("80.00"),
            cleaning_fee=Decimal("20.00"),
            minimum_stay=2,
        )
        self.today = timezone.localdate()
        self.list_url = reverse("booking-list")

    def _payload(self, days_ahead: int = 10, nights: int = 3, **overrides) -> dict:
        check_in = self.today + timedelta(days=days_ahead)
        payload = {
            "room_ids": [self.room.pk],
            "check_in_date": str(check_in),
            "check_out_date": str(check_in + timedelta(days=nights)),
            "number_of_guests": 2,
        }
        payload.update(overrides)
        return payload

    def _book(self, **overrides) -> Booking:
        self.client.force_authenticate(self.customer_user)
        response = self.client.post(self.list_url, self._payload(**overrides), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return Booking.objects.get(pk=response.data["data"]["id"])

    def test_customer_creates_pending_booking(self) -> None:
        self.client.force_authenticate(self.customer_user)

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["message"], "Booking created successfully")
        data = response.data["data"]
        self.assertEqual(data["booking_status"], Booking.Status.PENDING)
        self.assertEqual(data["nights"], 3)
        self.assertEqual(Decimal(data["total_amount"]), Decimal("300.00"))
        self.assertEqual(data["rooms"][0]["id"], self.room.pk)

        self.room.refresh_from_db()
        self.assertEqual(self.room.availability_status, BookableAvailabilityStatus.UNAVAILABLE)

    def test_homestay_booking_adds_cleaning_fee_once(self) -> None:
        booking = self._book(room_ids=[], homestay_id=self.homestay.pk, nights=2)

        self.assertEqual(booking.total_amount, Decimal("180.00"))
        self.homestay.refresh_from_db()
        self.assertEqual(self.homestay.availability_status, BookableAvailabilityStatus.UNAVAILABLE)

    def test_homestay_minimum_stay_enforced(self) -> None:
        self.client.force_authenticate(self.customer_user)

        response = self.client.post(
            self.list_url,
            self._payload(room_ids=[], homestay_id=self.homestay.pk, nights=1),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("minimum stay", response.data["message"])

    def test_room_no_longer_available_after_pending_booking(self) -> None:
        self._book()
        _other_user, _other = make_customer("second@example.com")
        self.client.force_authenticate(_other_user)

        response = self.client.post(self.list_url, self._payload(days_ahead=40), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["message"], "One or more rooms are not available for booking")

    def test_past_dates_rejected(self) -> None:
        self.client.force_authenticate(self.customer_user)

        response = self.client.post(self.list_url, self._payload(days_ahead=-2), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["message"], "Cannot book for past dates")
        self.assertFalse(Booking.objects.exists())

    def test_checkout_before_checkin_rejected(self) -> None:
        self.client.force_authenticate(self.customer_user)

        response = self.client.post(self.list_url, self._payload(nights=0), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("check_out_date", response.data["errors"])

    def test_empty_selection_rejected(self) -> None:
        self.client.force_authenticate(self.customer_user)

        response = self.client.post(self.list_url, self._payload(room_ids=[]), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_guest_count_above_capacity_rejected(self) -> None:
        self.client.force_authenticate(self.customer_user)

        response = self.client.post(self.list_url, self._payload(number_of_guests=5), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.room.refresh_from_db()
        self.assertEqual(self.room.availability_status, BookableAvailabilityStatus.AVAILABLE)

    def test_unknown_room_returns_404(self) -> None:
        self.client.force_authenticate(self.customer_user)

        response = self.client.post(self.list_url, self._payload(room_ids=[9999]), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_merchant_cannot_create_booking(self) -> None:
        self.client.force_authenticate(self.merchant_user)

        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_is_scoped_by_role(self) -> None:
        booking = self._book()
        other_user, _ = make_customer("other@example.com")
        other_merchant_user, _ = make_merchant("other-merchant@example.com", "PV-2")

        self.client.force_authenticate(self.customer_user)
        own = self.client.get(self.list_url)
        self.assertEqual(own.status_code, status.HTTP_200_OK)
        self.assertEqual(own.data["pagination"]["total"], 1)
        self.assertEqual(own.data["data"][0]["id"], booking.pk)

        self.client.force_authenticate(other_user)
        self.assertEqual(self.client.get(self.list_url).data["pagination"]["total"], 0)

        self.client.force_authenticate(self.merchant_user)
        self.assertEqual(self.client.get(self.list_url).data["pagination"]["total"], 1)

        self.client.force_authenticate(other_merchant_user)
        self.assertEqual(self.client.get(self.list_url).data["pagination"]["total"], 0)

        self.client.force_authenticate(self.admin)
        self.assertEqual(self.client.get(self.list_url).data["pagination"]["total"], 1)

    def test_list_hides_cancelled_unless_requested(self) -> None:
        booking = self._book()
        self.client.post(reverse("booking-cancel", args=[booking.pk]), {}, format="json")

        self.assertEqual(self.client.get(self.list_url).data["pagination"]["total"], 0)
        self.assertEqual(
            self.client.get(self.list_url, {"include_cancelled": "true"}).data["pagination"]["total"], 1
        )
        self.assertEqual(self.client.get(self.list_url, {"status": "cancelled"}).data["pagination"]["total"], 1)

    def test_customer_cancels_with_full_refund(self) -> None:
        booking = self._book(days_ahead=10)

        response = self.client.post(
            reverse("booking-cancel", args=[booking.pk]),
            {"cancellation_reason": "Change of plans"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["message"], "Booking cancelled successfully")
        booking.refresh_from_db()
        self.assertEqual(booking.booking_status, Booking.Status.CANCELLED)
        self.assertEqual(booking.refund_amount, Decimal("300.00"))
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.REFUNDED)
        self.assertEqual(booking.cancellation_reason, "Change of plans")
        self.room.refresh_from_db()
        self.assertEqual(self.room.availability_status, BookableAvailabilityStatus.AVAILABLE)

    def test_cancelling_twice_conflicts(self) -> None:
        booking = self._book()
        url = reverse("booking-cancel", args=[booking.pk])
        self.client.post(url, {}, format="json")

        response = self.client.post(url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)

    def test_other_customer_cannot_see_or_cancel(self) -> None:
        booking = self._book()
        other_user, _ = make_customer("other@example.com")
        self.client.force_authenticate(other_user)

        response = self.client.post(reverse("booking-cancel", args=[booking.pk]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_merchant_confirms_then_completes(self) -> None:
        booking = self._book()
        url = reverse("booking-status", args=[booking.pk])
        self.client.force_authenticate(self.merchant_user)

        confirmed = self.client.patch(url, {"status": "confirmed"}, format="json")
        self.assertEqual(confirmed.status_code, status.HTTP_200_OK, confirmed.data)
        self.room.refresh_from_db()
        self.assertEqual(self.room.availability_status, BookableAvailabilityStatus.BOOKED)

        completed = self.client.patch(url, {"status": "completed"}, format="json")
        self.assertEqual(completed.status_code, status.HTTP_200_OK, completed.data)
        self.assertEqual(completed.data["data"]["payment_status"], Booking.PaymentStatus.PAID)
        self.room.refresh_from_db()
        self.assertEqual(self.room.availability_status, BookableAvailabilityStatus.AVAILABLE)

        again = self.client.patch(url, {"status": "confirmed"}, format="json")
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT, again.data)

    def test_confirmed_booking_cancelled_releases_every_entity(self) -> None:
        booking = self._book(homestay_id=self.homestay.pk, number_of_guests=3)
        self.client.force_authenticate(self.admin)
        url = reverse("booking-status", args=[booking.pk])
        self.client.patch(url, {"status": "confirmed"}, format="json")

        response = self.client.patch(url, {"status": "cancelled", "reason": "Overbooked"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.room.refresh_from_db()
        self.homestay.refresh_from_db()
        self.assertEqual(self.room.availability_status, BookableAvailabilityStatus.AVAILABLE)
        self.assertEqual(self.homestay.availability_status, BookableAvailabilityStatus.AVAILABLE)
        self.assertEqual(response.data["data"]["cancellation_reason"], "Overbooked")

    def test_customer_cannot_change_status(self) -> None:
        booking = self._book()

        response = self.client.patch(
            reverse("booking-status", args=[booking.pk]),
            {"status": "confirmed"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)

    def test_unknown_status_rejected(self) -> None:
        booking = self._book()
        self.client.force_authenticate(self.admin)

        response = self.client.patch(
            reverse("booking-status", args=[booking.pk]),
            {"status": "archived"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)

    def test_admin_delete_releases_room_and_hides_booking(self) -> None:
        booking = self._book()
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("booking-detail", args=[booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(Booking.objects.filter(pk=booking.pk).exists())
        deleted = Booking.all_objects.get(pk=booking.pk)
        self.assertTrue(deleted.is_deleted)
        self.assertEqual(deleted.booking_status, Booking.Status.CANCELLED)
        self.room.refresh_from_db()
        self.assertEqual(self.room.availability_status, BookableAvailabilityStatus.AVAILABLE)

    def test_customer_cannot_delete(self) -> None:
        booking = self._book()

        response = self.client.delete(reverse("booking-detail", args=[booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(BookingRoom.objects.filter(booking=booking).exists())
