"""Serializers for the listings domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Amenity, ApprovalStatus, HomeStay, Property, Room, Unit
from .services import MANUAL_AVAILABILITY

LISTING_STATUS_FIELDS = [
    "availability_status",
    "approval_status",
    "rejection_reason",
    "approved_at",
    "last_status_change",
    "vista_verified",
    "is_active",
    "created_at",
    "updated_at",
]


class AmenitySerializer(serializers.ModelSerializer):
    class Meta:
        model = Amenity
        fields = ["id", "name", "category", "icon"]


class ListingSerializer(serializers.ModelSerializer):
    """Base for listing serializers: moderation fields are never writable."""

    amenities = AmenitySerializer(many=True, read_only=True)
    amenity_ids = serializers.PrimaryKeyRelatedField(
        source="amenities",
        many=True,
        queryset=Amenity.objects.all(),
        write_only=True,
        required=False,
    )

    def create(self, validated_data):  # type: ignore
        amenities = validated_data.pop("amenities", None)
        instance = super().create(validated_data)
        if amenities:
            instance.amenities.set(amenities)
        return instance

    def update(self, instance, validated_data):  # type: ignore
        amenities = validated_data.pop("amenities", None)
        instance = super().update(instance, validated_data)
        if amenities is not None:
            instance.amenities.set(amenities)
        return instance


class PropertySerializer(ListingSerializer):
    merchant = serializers.IntegerField(source="merchant_id", read_only=True)
    merchant_name = serializers.CharField(source="merchant.business_name", read_only=True)

    class Meta:
        model = Property
        fields = [
            "id",
            "merchant",
            "merchant_name",
            "property_type",
            "title",
            "slug",
            "description",
            "address",
            "city",
            "district",
            "province",
            "country",
            "postal_code",
            "latitude",
            "longitude",
            "cancellation_policy",
            "check_in_time",
            "check_out_time",
            "phone",
            "email",
            "website",
            "amenities",
            "amenity_ids",
            *LISTING_STATUS_FIELDS,
        ]
        read_only_fields = ["slug", *LISTING_STATUS_FIELDS]


class HomeStaySerializer(ListingSerializer):
    merchant = serializers.IntegerField(source="merchant_id", read_only=True)

    class Meta:
        model = HomeStay
        fields = [
            "id",
            "merchant",
            "name",
            "slug",
            "description",
            "unit_type",
            "address",
            "city",
            "max_guests",
            "max_children",
            "max_infants",
            "bedroom_count",
            "bathroom_count",
            "has_kitchen",
            "base_price",
            "cleaning_fee",
            "security_deposit",
            "minimum_stay",
            "smoking_allowed",
            "pets_allowed",
            "events_allowed",
            "amenities",
            "amenity_ids",
            *LISTING_STATUS_FIELDS,
        ]
        read_only_fields = ["slug", *LISTING_STATUS_FIELDS]


class RoomSerializer(ListingSerializer):
    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all())

    class Meta:
        model = Room
        fields = [
            "id",
            "property",
            "room_number",
            "floor",
            "max_occupancy",
            "size_sqft",
            "bed_configuration",
            "view_type",
            "price_per_night",
            "has_ac",
            "smoking_allowed",
            "is_accessible",
            "maintenance_notes",
            "amenities",
            "amenity_ids",
            *LISTING_STATUS_FIELDS,
        ]
        read_only_fields = LISTING_STATUS_FIELDS


class UnitSerializer(ListingSerializer):
    property = serializers.PrimaryKeyRelatedField(queryset=Property.objects.all())

    class Meta:
        model = Unit
        fields = [
            "id",
            "property",
            "unit_code",
            "name",
            "description",
            "floor_number",
            "max_adults",
            "max_children",
            "base_price",
            "amenities",
            "amenity_ids",
            *LISTING_STATUS_FIELDS,
        ]
        read_only_fields = LISTING_STATUS_FIELDS


class ApprovalStatusSerializer(serializers.Serializer):
    approval_status = serializers.ChoiceField(choices=ApprovalStatus.choices)
    rejection_reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AvailabilityStatusSerializer(serializers.Serializer):
    availability_status = serializers.ChoiceField(choices=[(value, value) for value in MANUAL_AVAILABILITY])


class ActiveStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)


class VerificationSerializer(serializers.Serializer):
    vista_verified = serializers.BooleanField(required=False, allow_null=True, default=None)


class AmenitiesSerializer(serializers.Serializer):
    amenity_ids = serializers.PrimaryKeyRelatedField(many=True, queryset=Amenity.objects.all())
