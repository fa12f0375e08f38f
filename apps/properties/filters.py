"""FilterSet definitions for listing endpoints."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import HomeStay, Property, Room, Unit


class ListingFilterSet(django_filters.FilterSet):
    """Filters shared by every listing type."""

    approval_status = django_filters.CharFilter(field_name="approval_status")
    availability_status = django_filters.CharFilter(field_name="availability_status")
    is_active = django_filters.BooleanFilter(field_name="is_active")
    vista_verified = django_filters.BooleanFilter(field_name="vista_verified")
    # CSV of amenity ids, any of them matches
    amenities = django_filters.CharFilter(method="filter_amenities")

    def filter_amenities(self, queryset, name, value):  # type: ignore
        try:
            ids = [int(x) for x in str(value).replace(" ", "").split(",") if x]
        except ValueError:
            return queryset
        if not ids:
            return queryset
        return queryset.filter(amenities__id__in=ids).distinct()


class PropertyFilterSet(ListingFilterSet):
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    district = django_filters.CharFilter(field_name="district", lookup_expr="icontains")
    merchant = django_filters.NumberFilter(field_name="merchant_id")

    class Meta:
        model = Property
        fields = ["property_type", "cancellation_policy"]


class HomeStayFilterSet(ListingFilterSet):
    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")
    merchant = django_filters.NumberFilter(field_name="merchant_id")
    price_min = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")

    class Meta:
        model = HomeStay
        fields = ["unit_type"]


class RoomFilterSet(ListingFilterSet):
    property = django_filters.NumberFilter(field_name="property_id")
    price_min = django_filters.NumberFilter(field_name="price_per_night", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_per_night", lookup_expr="lte")
    guests = django_filters.NumberFilter(field_name="max_occupancy", lookup_expr="gte")

    class Meta:
        model = Room
        fields = ["view_type"]


class UnitFilterSet(ListingFilterSet):
    property = django_filters.NumberFilter(field_name="property_id")

    class Meta:
        model = Unit
        fields = ["floor_number"]
