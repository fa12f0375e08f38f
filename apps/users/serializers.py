"""Serializers for user-related API endpoints."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import CustomerProfile, MerchantProfile

User = get_user_model()


class MerchantProfileShortSerializer(serializers.ModelSerializer):
    """Merchant summary embedded in user responses."""

    class Meta:
        model = MerchantProfile
        fields = [
            "id",
            "merchant_name",
            "business_name",
            "business_type",
            "city",
            "status",
            "max_properties_allowed",
            "is_active",
        ]


class CustomerProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomerProfile
        fields = ["id", "first_name", "last_name", "mobile_number", "is_active"]
        read_only_fields = ["id", "is_active"]


class UserSerializer(serializers.ModelSerializer):
    """Current user with the profile matching its account type."""

    merchant_profile = serializers.SerializerMethodField()
    customer_profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "username",
            "first_name",
            "last_name",
            "phone",
            "account_type",
            "is_active",
            "merchant_profile",
            "customer_profile",
            "last_activity_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "account_type",
            "is_active",
            "last_activity_at",
            "created_at",
            "updated_at",
        ]

    def get_merchant_profile(self, obj):  # type: ignore
        if not obj.is_merchant():
            return None
        profile = obj.get_merchant_profile()
        return MerchantProfileShortSerializer(profile).data if profile else None

    def get_customer_profile(self, obj):  # type: ignore
        if not obj.is_customer():
            return None
        profile = obj.get_customer_profile()
        return CustomerProfileSerializer(profile).data if profile else None
