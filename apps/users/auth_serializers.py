"""Serializers for authentication flows (register, login, logout)."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from shared.exceptions import DuplicateEntryError

from .models import PHONE_VALIDATOR, CustomerProfile, MerchantProfile


User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    """Registers a customer or a merchant together with its profile."""

    ACCOUNT_TYPES = (User.AccountType.CUSTOMER, User.AccountType.MERCHANT)

    email = serializers.EmailField()
    password = serializers.CharField(min_length=8, write_only=True)
    password_confirm = serializers.CharField(min_length=8, write_only=True)
    account_type = serializers.ChoiceField(choices=ACCOUNT_TYPES, default=User.AccountType.CUSTOMER)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[PHONE_VALIDATOR])
    username = serializers.CharField(required=False, allow_blank=True)
    first_name = serializers.CharField(required=False, allow_blank=True)
    last_name = serializers.CharField(required=False, allow_blank=True)

    # merchant-only
    merchant_name = serializers.CharField(required=False, max_length=100)
    business_name = serializers.CharField(required=False, max_length=100)
    business_registration_number = serializers.CharField(required=False, max_length=50)
    business_type = serializers.ChoiceField(choices=MerchantProfile.BusinessType.choices, required=False)
    business_description = serializers.CharField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, max_length=200)
    city = serializers.CharField(required=False, max_length=50)
    country = serializers.CharField(required=False, max_length=50)

    MERCHANT_REQUIRED = (
        "merchant_name",
        "business_name",
        "business_registration_number",
        "business_type",
        "address",
        "city",
        "phone",
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("password") != attrs.get("password_confirm"):
            raise serializers.ValidationError({"password_confirm": "Passwords do not match."})

        if User.objects.filter(email__iexact=attrs["email"]).exists():
            raise DuplicateEntryError("A user with this email already exists.")
        phone = attrs.get("phone")
        if phone and User.objects.filter(phone=User.objects.normalize_phone(phone)).exists():
            raise DuplicateEntryError("A user with this phone already exists.")

        if attrs["account_type"] == User.AccountType.MERCHANT:
            missing = {name: "This field is required." for name in self.MERCHANT_REQUIRED if not attrs.get(name)}
            if missing:
                raise serializers.ValidationError(missing)
            registration_number = attrs["business_registration_number"]
            if MerchantProfile.all_objects.filter(business_registration_number=registration_number).exists():
                raise DuplicateEntryError("A merchant with this business registration number already exists.")
        return attrs

    @transaction.atomic
    def create(self, validated_data: dict[str, Any]):  # type: ignore
        account_type = validated_data["account_type"]
        user = User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            account_type=account_type,
            phone=validated_data.get("phone") or None,
            username=validated_data.get("username", ""),
            first_name=validated_data.get("first_name", ""),
            last_name=validated_data.get("last_name", ""),
        )
        if account_type == User.AccountType.MERCHANT:
            MerchantProfile.objects.create(
                user=user,
                merchant_name=validated_data["merchant_name"],
                business_name=validated_data["business_name"],
                business_registration_number=validated_data["business_registration_number"],
                business_type=validated_data["business_type"],
                business_description=validated_data.get("business_description", ""),
                address=validated_data["address"],
                city=validated_data["city"],
                country=validated_data.get("country") or "Sri Lanka",
                phone_number=user.phone,
            )
        else:
            CustomerProfile.objects.create(
                user=user,
                first_name=validated_data.get("first_name", ""),
                last_name=validated_data.get("last_name", ""),
                mobile_number=user.phone or "",
            )
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        try:
            user = User.objects.get(email__iexact=attrs["email"])
        except User.DoesNotExist:
            raise serializers.ValidationError({"email": "Invalid email or password."})

        if not user.check_password(attrs["password"]):
            raise serializers.ValidationError({"email": "Invalid email or password."})
        if not user.is_active:
            raise serializers.ValidationError({"non_field_errors": ["Account is disabled."]})

        attrs["user"] = user
        return attrs


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
