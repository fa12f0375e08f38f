"""Serializers for the admin merchant-moderation API."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.users.models import MerchantProfile


class MerchantListSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(source="user.email", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)

    class Meta:
        model = MerchantProfile
        fields = [
            "id",
            "email",
            "merchant_name",
            "business_name",
            "business_type",
            "city",
            "status",
            "status_display",
            "max_properties_allowed",
            "is_active",
            "created_at",
        ]
        read_only_fields = fields


class MerchantDetailSerializer(serializers.ModelSerializer):
    """Full merchant profile as seen by an administrator."""

    email = serializers.EmailField(source="user.email", read_only=True)
    user_id = serializers.IntegerField(source="user.id", read_only=True)
    user_is_active = serializers.BooleanField(source="user.is_active", read_only=True)

    class Meta:
        model = MerchantProfile
        fields = [
            "id",
            "user_id",
            "email",
            "user_is_active",
            "merchant_name",
            "business_name",
            "business_registration_number",
            "business_type",
            "business_description",
            "address",
            "city",
            "country",
            "phone_number",
            "status",
            "max_properties_allowed",
            "verification_date",
            "suspension_reason",
            "admin_notes",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MerchantApproveSerializer(serializers.Serializer):
    max_properties_allowed = serializers.IntegerField(min_value=0, max_value=100, required=False)
    admin_notes = serializers.CharField(required=False, allow_blank=True)

    def get_quota(self) -> int:
        default = getattr(settings, "MERCHANT_DEFAULT_APPROVED_QUOTA", 5)
        return self.validated_data.get("max_properties_allowed", default)


class MerchantRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=False, trim_whitespace=True)


class MerchantStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=MerchantProfile.Status.choices, required=False)
    suspension_reason = serializers.CharField(required=False, allow_blank=True)
    max_properties_allowed = serializers.IntegerField(min_value=0, max_value=100, required=False)
    admin_notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError("Nothing to update.")
        if attrs.get("status") == MerchantProfile.Status.SUSPENDED and not attrs.get("suspension_reason", "").strip():
            raise serializers.ValidationError({"suspension_reason": "A reason is required to suspend a merchant."})
        return attrs
