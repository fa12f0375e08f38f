"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking, BookingHomeStay, BookingRoom
from .services import STATUS_TARGETS


class BookingItemSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from a customer.

    Rooms and homestays come either as ``rooms``/``homestays`` item lists or
    through the ``room_ids``/``homestay_id`` shorthands.
    """

    rooms = BookingItemSerializer(many=True, required=False)
    homestays = BookingItemSerializer(many=True, required=False)
    room_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    homestay_id = serializers.IntegerField(min_value=1, required=False)
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    payment_method = serializers.ChoiceField(
        choices=Booking.PaymentMethod.choices,
        required=False,
        allow_blank=True,
        default="",
    )
    number_of_guests = serializers.IntegerField(min_value=1, default=1)
    number_of_children = serializers.IntegerField(min_value=0, default=0)
    number_of_infants = serializers.IntegerField(min_value=0, default=0)

    def validate(self, attrs):  # type: ignore
        rooms = list(attrs.pop("rooms", []))
        rooms += [{"id": pk, "special_requests": ""} for pk in attrs.pop("room_ids", [])]
        homestays = list(attrs.pop("homestays", []))
        homestay_id = attrs.pop("homestay_id", None)
        if homestay_id is not None:
            homestays.append({"id": homestay_id, "special_requests": ""})

        if attrs["check_out_date"] <= attrs["check_in_date"]:
            raise serializers.ValidationError({"check_out_date": "Check-out date must be after check-in date"})
        if not rooms and not homestays:
            raise serializers.ValidationError("At least one room or homestay must be selected")

        attrs["rooms"] = [dict(item) for item in rooms]
        attrs["homestays"] = [dict(item) for item in homestays]
        return attrs


class BookingRoomSerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="room_id", read_only=True)
    room_number = serializers.CharField(source="room.room_number", read_only=True)
    property = serializers.IntegerField(source="room.property_id", read_only=True)
    availability_status = serializers.CharField(source="room.availability_status", read_only=True)

    class Meta:
        model = BookingRoom
        fields = ["id", "room_number", "property", "availability_status", "special_requests"]


class BookingHomeStaySerializer(serializers.ModelSerializer):
    id = serializers.IntegerField(source="homestay_id", read_only=True)
    name = serializers.CharField(source="homestay.name", read_only=True)
    availability_status = serializers.CharField(source="homestay.availability_status", read_only=True)

    class Meta:
        model = BookingHomeStay
        fields = ["id", "name", "availability_status", "special_requests"]


class BookingSerializer(serializers.ModelSerializer):
    customer = serializers.SerializerMethodField()
    rooms = BookingRoomSerializer(source="booking_rooms", many=True, read_only=True)
    homestays = BookingHomeStaySerializer(source="booking_homestays", many=True, read_only=True)
    nights = serializers.IntegerField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "customer",
            "rooms",
            "homestays",
            "check_in_date",
            "check_out_date",
            "nights",
            "total_amount",
            "booking_status",
            "payment_status",
            "payment_method",
            "number_of_guests",
            "number_of_children",
            "number_of_infants",
            "special_requests",
            "is_refundable",
            "cancellation_reason",
            "cancellation_date",
            "refund_amount",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_customer(self, obj: Booking) -> dict:
        customer = obj.customer
        return {
            "id": customer.id,
            "first_name": customer.first_name,
            "last_name": customer.last_name,
            "email": customer.user.email,
        }


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[(value, value) for value in STATUS_TARGETS])
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class BookingCancelSerializer(serializers.Serializer):
    cancellation_reason = serializers.CharField(required=False, allow_blank=True, default="")
