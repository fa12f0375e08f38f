"""User domain models for the Vista marketplace.

The platform distinguishes three account types: administrators who
moderate listings, merchants who own properties, homestays, rooms and
units, and customers who book them. Merchants and customers carry a
profile with business or contact details; the merchant profile also holds
the listing quota enforced when new listings are created.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.models import SoftDeleteModel


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?[\d\s-]{10,15}$",
    message=_("Invalid phone number. Use 10-15 digits, optionally prefixed with +."),
)


class CustomUserManager(BaseUserManager):
    """User manager that uses the email address as the login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)

        phone = extra_fields.get("phone")
        if phone:
            extra_fields["phone"] = self.normalize_phone(phone)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        extra_fields.setdefault("account_type", CustomUser.AccountType.CUSTOMER)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("account_type", CustomUser.AccountType.ADMIN)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Strip spaces and dashes so phones are stored in one format."""
        return phone.replace(" ", "").replace("-", "")


class CustomUser(AbstractUser):
    """Platform account with an account type driving role checks."""

    class AccountType(models.TextChoices):
        ADMIN = "admin", _("Admin")
        MERCHANT = "merchant", _("Merchant")
        CUSTOMER = "customer", _("Customer")

    username = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
        help_text=_("Optional, shown in interfaces."),
    )
    email = models.EmailField(_("Email"), unique=True)
    phone = models.CharField(
        _("Phone"),
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        validators=[PHONE_VALIDATOR],
    )
    account_type = models.CharField(
        _("Account type"),
        max_length=20,
        choices=AccountType.choices,
        default=AccountType.CUSTOMER,
    )
    last_activity_at = models.DateTimeField(_("Last activity"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.get_account_type_display()})"

    # --- Role helpers -------------------------------------------------------
    def is_admin(self) -> bool:
        return self.account_type == self.AccountType.ADMIN or self.is_staff or self.is_superuser

    def is_merchant(self) -> bool:
        return self.account_type == self.AccountType.MERCHANT

    def is_customer(self) -> bool:
        return self.account_type == self.AccountType.CUSTOMER

    def get_merchant_profile(self) -> "MerchantProfile | None":
        return MerchantProfile.objects.filter(user=self).first()

    def get_customer_profile(self) -> "CustomerProfile | None":
        return CustomerProfile.objects.filter(user=self).first()

    def touch_last_activity(self) -> None:
        self.last_activity_at = timezone.now()
        self.save(update_fields=["last_activity_at"])


class MerchantProfile(SoftDeleteModel):
    """Business details and moderation state of a merchant account."""

    class BusinessType(models.TextChoices):
        HOTEL_AND_APARTMENT = "hotel_and_apartment", _("Hotel and apartment")
        HOMESTAY = "homestay", _("Homestay")
        BOTH = "both", _("Both")
        OTHER = "other", _("Other")

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        ACTIVE = "active", _("Active")
        INACTIVE = "inactive", _("Inactive")
        SUSPENDED = "suspended", _("Suspended")
        REJECTED = "rejected", _("Rejected")

    user = models.OneToOneField(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="merchant_profile",
    )
    merchant_name = models.CharField(max_length=100)
    business_name = models.CharField(max_length=100)
    business_registration_number = models.CharField(max_length=50, unique=True)
    business_type = models.CharField(max_length=30, choices=BusinessType.choices)
    business_description = models.TextField(blank=True)
    address = models.CharField(max_length=200)
    city = models.CharField(max_length=50)
    country = models.CharField(max_length=50, default="Sri Lanka")
    phone_number = models.CharField(max_length=20, validators=[PHONE_VALIDATOR])
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    max_properties_allowed = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text=_("Maximum number of listings of each type the merchant may keep."),
    )
    verification_date = models.DateTimeField(null=True, blank=True)
    suspension_reason = models.TextField(blank=True)
    admin_notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Merchant profile")
        verbose_name_plural = _("Merchant profiles")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["business_name"]),
        ]

    def __str__(self) -> str:
        return f"{self.business_name} ({self.get_status_display()})"

    @property
    def can_list(self) -> bool:
        return self.is_active and self.status == self.Status.ACTIVE

    def allows_rooms(self) -> bool:
        return self.business_type != self.BusinessType.HOMESTAY


class CustomerProfile(models.Model):
    """Contact details of a customer account."""

    user = models.OneToOneField(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="customer_profile",
    )
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    mobile_number = models.CharField(max_length=20, blank=True, validators=[PHONE_VALIDATOR])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Customer profile")
        verbose_name_plural = _("Customer profiles")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# Short alias used across apps and tests
User = CustomUser
