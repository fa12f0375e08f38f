"""Listing models for the Vista marketplace.

Merchants list properties (hotels, apartments, resorts, villas) made of
rooms and units, and standalone homestays. Every listing goes through the
approval workflow (``approval_status``) before customers see it, and rooms
and homestays carry an ``availability_status`` that the booking lifecycle
keeps in step with their latest active booking.
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.infrastructure.models import SoftDeleteModel


class Amenity(models.Model):
    """Facility that can be attached to any listing."""

    class Category(models.TextChoices):
        BASIC = "basic", _("Basic")
        ADDITIONAL = "additional", _("Additional")
        SAFETY = "safety", _("Safety")
        BUSINESS = "business", _("Business")

    name = models.CharField(max_length=100, unique=True)
    category = models.CharField(
        max_length=20,
        choices=Category.choices,
        default=Category.BASIC,
    )
    icon = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Icon identifier used by the frontend."),
    )

    class Meta:
        verbose_name = _("Amenity")
        verbose_name_plural = _("Amenities")
        ordering = ["category", "name"]

    def __str__(self) -> str:
        return self.name


class AvailabilityStatus(models.TextChoices):
    AVAILABLE = "available", _("Available")
    UNAVAILABLE = "unavailable", _("Unavailable")
    MAINTENANCE = "maintenance", _("Maintenance")
    ARCHIVED = "archived", _("Archived")


class BookableAvailabilityStatus(models.TextChoices):
    """Availability of rooms and homestays, which can also be ``booked``."""

    AVAILABLE = "available", _("Available")
    UNAVAILABLE = "unavailable", _("Unavailable")
    MAINTENANCE = "maintenance", _("Maintenance")
    ARCHIVED = "archived", _("Archived")
    BOOKED = "booked", _("Booked")


class ApprovalStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")
    CHANGES_REQUESTED = "changes_requested", _("Changes requested")


class ListingStatusFields(models.Model):
    """Moderation and availability state shared by every listing."""

    availability_status = models.CharField(
        max_length=20,
        choices=AvailabilityStatus.choices,
        default=AvailabilityStatus.AVAILABLE,
    )
    approval_status = models.CharField(
        max_length=20,
        choices=ApprovalStatus.choices,
        default=ApprovalStatus.PENDING,
    )
    rejection_reason = models.TextField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)
    last_status_change = models.DateTimeField(null=True, blank=True)
    vista_verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    @property
    def owner_merchant_id(self) -> int | None:
        """Merchant owning the listing; rooms and units inherit it from their property."""
        if hasattr(self, "merchant_id"):
            return self.merchant_id
        return self.property.merchant_id

    @property
    def is_bookable(self) -> bool:
        return (
            self.is_active
            and not self.is_deleted
            and self.availability_status == AvailabilityStatus.AVAILABLE
        )


def _unique_slug(instance, source: str, max_length: int = 90) -> str:
    base_slug = slugify(source)[:max_length] or instance.__class__.__name__.lower()
    candidate = base_slug
    counter = 1
    while instance.__class__.all_objects.filter(slug=candidate).exclude(pk=instance.pk).exists():
        counter += 1
        candidate = f"{base_slug}-{counter}"
    return candidate


class Property(ListingStatusFields, SoftDeleteModel):
    """Hotel, apartment, resort or villa owned by a merchant."""

    class PropertyType(models.TextChoices):
        HOTEL = "hotel", _("Hotel")
        APARTMENT = "apartment", _("Apartment")
        RESORT = "resort", _("Resort")
        VILLA = "villa", _("Villa")

    class CancellationPolicy(models.TextChoices):
        FLEXIBLE = "flexible", _("Flexible")
        MODERATE = "moderate", _("Moderate")
        STRICT = "strict", _("Strict")
        NON_REFUNDABLE = "non_refundable", _("Non refundable")

    merchant = models.ForeignKey(
        "users.MerchantProfile",
        on_delete=models.CASCADE,
        related_name="properties",
    )
    property_type = models.CharField(max_length=20, choices=PropertyType.choices)
    title = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    description = models.TextField(blank=True)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=50)
    district = models.CharField(max_length=50, blank=True)
    province = models.CharField(max_length=50, blank=True)
    country = models.CharField(max_length=50, default="Sri Lanka")
    postal_code = models.CharField(max_length=20, blank=True)
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(-90), MaxValueValidator(90)],
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(-180), MaxValueValidator(180)],
    )
    cancellation_policy = models.CharField(
        max_length=20,
        choices=CancellationPolicy.choices,
        default=CancellationPolicy.MODERATE,
    )
    check_in_time = models.TimeField(default="14:00")
    check_out_time = models.TimeField(default="12:00")
    phone = models.CharField(max_length=20)
    email = models.EmailField(max_length=100, blank=True)
    website = models.URLField(max_length=255, blank=True)
    amenities = models.ManyToManyField(Amenity, related_name="properties", blank=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["approval_status", "is_active"]),
            models.Index(fields=["city"]),
        ]

    def __str__(self) -> str:
        return self.title

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = _unique_slug(self, self.title)
        super().save(*args, **kwargs)


class HomeStay(ListingStatusFields, SoftDeleteModel):
    """Standalone homestay listing owned by a merchant."""

    class UnitType(models.TextChoices):
        ENTIRE_HOME = "entire_home", _("Entire home")
        PRIVATE_ROOM = "private_room", _("Private room")
        SHARED_ROOM = "shared_room", _("Shared room")
        GUEST_SUITE = "guest_suite", _("Guest suite")
        VILLA = "villa", _("Villa")
        COTTAGE = "cottage", _("Cottage")

    merchant = models.ForeignKey(
        "users.MerchantProfile",
        on_delete=models.CASCADE,
        related_name="homestays",
    )
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=100, unique=True, blank=True)
    description = models.TextField(blank=True)
    unit_type = models.CharField(max_length=20, choices=UnitType.choices, default=UnitType.PRIVATE_ROOM)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=50, blank=True)
    max_guests = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    max_children = models.PositiveSmallIntegerField(default=0)
    max_infants = models.PositiveSmallIntegerField(default=0)
    bedroom_count = models.PositiveSmallIntegerField(default=1)
    bathroom_count = models.PositiveSmallIntegerField(default=1)
    has_kitchen = models.BooleanField(default=False)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    cleaning_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    security_deposit = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    minimum_stay = models.PositiveSmallIntegerField(default=1, validators=[MinValueValidator(1)])
    smoking_allowed = models.BooleanField(default=False)
    pets_allowed = models.BooleanField(default=False)
    events_allowed = models.BooleanField(default=False)
    availability_status = models.CharField(
        max_length=20,
        choices=BookableAvailabilityStatus.choices,
        default=BookableAvailabilityStatus.AVAILABLE,
    )
    amenities = models.ManyToManyField(Amenity, related_name="homestays", blank=True)

    class Meta:
        verbose_name = _("Homestay")
        verbose_name_plural = _("Homestays")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["approval_status", "is_active"]),
        ]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            self.slug = _unique_slug(self, self.name)
        super().save(*args, **kwargs)


class Room(ListingStatusFields, SoftDeleteModel):
    """Bookable room of a property."""

    class ViewType(models.TextChoices):
        SEA = "sea", _("Sea")
        GARDEN = "garden", _("Garden")
        CITY = "city", _("City")
        MOUNTAIN = "mountain", _("Mountain")
        POOL = "pool", _("Pool")
        NONE = "none", _("None")

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="rooms")
    room_number = models.CharField(max_length=20, unique=True)
    floor = models.CharField(max_length=10, default="GF")
    max_occupancy = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    size_sqft = models.FloatField(null=True, blank=True)
    bed_configuration = models.CharField(max_length=50, default="1 Double Bed")
    view_type = models.CharField(max_length=20, choices=ViewType.choices, default=ViewType.NONE)
    price_per_night = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    has_ac = models.BooleanField(default=True)
    smoking_allowed = models.BooleanField(default=False)
    is_accessible = models.BooleanField(default=False)
    maintenance_notes = models.TextField(blank=True)
    availability_status = models.CharField(
        max_length=20,
        choices=BookableAvailabilityStatus.choices,
        default=BookableAvailabilityStatus.AVAILABLE,
    )
    amenities = models.ManyToManyField(Amenity, related_name="rooms", blank=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["property_id", "room_number"]

    def __str__(self) -> str:
        return f"{self.property} #{self.room_number}"


class Unit(ListingStatusFields, SoftDeleteModel):
    """Sellable unit of a property identified by its unit code."""

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="units")
    unit_code = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    floor_number = models.SmallIntegerField(null=True, blank=True)
    max_adults = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    max_children = models.PositiveSmallIntegerField(default=0)
    base_price = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    amenities = models.ManyToManyField(Amenity, related_name="units", blank=True)

    class Meta:
        verbose_name = _("Unit")
        verbose_name_plural = _("Units")
        ordering = ["property_id", "unit_code"]

    def __str__(self) -> str:
        return f"{self.unit_code} {self.name}"
