"""Admin registrations for the listings domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Amenity, HomeStay, Property, Room, Unit


LISTING_FILTERS = ("approval_status", "availability_status", "is_active", "vista_verified")


@admin.register(Amenity)
class AmenityAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "icon")
    list_filter = ("category",)
    search_fields = ("name", "category")


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0
    fields = ("room_number", "floor", "max_occupancy", "price_per_night", "availability_status")


class UnitInline(admin.TabularInline):
    model = Unit
    extra = 0
    fields = ("unit_code", "name", "max_adults", "base_price", "availability_status")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "merchant",
        "property_type",
        "city",
        "approval_status",
        "availability_status",
        "vista_verified",
        "is_active",
        "deleted_at",
    )
    list_filter = ("property_type", *LISTING_FILTERS)
    search_fields = ("title", "slug", "city", "merchant__business_name")
    readonly_fields = ("slug", "approved_at", "last_status_change", "created_at", "updated_at")
    filter_horizontal = ("amenities",)
    inlines = [RoomInline, UnitInline]

    def get_queryset(self, request):  # type: ignore
        return Property.all_objects.select_related("merchant")


@admin.register(HomeStay)
class HomeStayAdmin(admin.ModelAdmin):
    list_display = ("name", "merchant", "unit_type", "base_price", "approval_status", "availability_status", "is_active")
    list_filter = ("unit_type", *LISTING_FILTERS)
    search_fields = ("name", "slug", "merchant__business_name")
    readonly_fields = ("slug", "approved_at", "last_status_change", "created_at", "updated_at")
    filter_horizontal = ("amenities",)


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("room_number", "property", "max_occupancy", "price_per_night", "approval_status", "availability_status")
    list_filter = ("view_type", *LISTING_FILTERS)
    search_fields = ("room_number", "property__title")


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ("unit_code", "name", "property", "base_price", "approval_status", "availability_status")
    list_filter = LISTING_FILTERS
    search_fields = ("unit_code", "name", "property__title")
