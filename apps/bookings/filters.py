"""FilterSet for the booking list."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """``status``, ``from_date``/``to_date`` and ``include_cancelled`` filters.

    Without ``status`` the list hides cancelled and failed bookings unless
    ``include_cancelled`` is set. A date window matches bookings whose
    check-in or check-out falls inside it.
    """

    status = django_filters.ChoiceFilter(field_name="booking_status", choices=Booking.Status.choices)
    from_date = django_filters.DateFilter(method="filter_window")
    to_date = django_filters.DateFilter(method="filter_window")
    include_cancelled = django_filters.BooleanFilter(method="filter_noop")

    class Meta:
        model = Booking
        fields = ["status", "payment_status"]

    def filter_noop(self, queryset, name, value):  # type: ignore
        return queryset

    def filter_window(self, queryset, name, value):  # type: ignore
        start = self.form.cleaned_data.get("from_date")
        end = self.form.cleaned_data.get("to_date")
        if not (start and end) or name != "from_date":
            return queryset
        return queryset.filter(
            Q(check_in_date__range=(start, end)) | Q(check_out_date__range=(start, end))
        )

    def filter_queryset(self, queryset):  # type: ignore
        queryset = super().filter_queryset(queryset)
        data = self.form.cleaned_data
        if not data.get("status") and not data.get("include_cancelled"):
            queryset = queryset.exclude(booking_status__in=Booking.INACTIVE_STATUSES)
        return queryset
