"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Booking, BookingHomeStay, BookingRoom


class BookingRoomInline(admin.TabularInline):
    model = BookingRoom
    extra = 0
    raw_id_fields = ("room",)


class BookingHomeStayInline(admin.TabularInline):
    model = BookingHomeStay
    extra = 0
    raw_id_fields = ("homestay",)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer",
        "booking_status",
        "payment_status",
        "check_in_date",
        "check_out_date",
        "total_amount",
        "refund_amount",
        "created_at",
    )
    list_filter = ("booking_status", "payment_status", "payment_method", "check_in_date")
    search_fields = ("customer__user__email", "customer__first_name", "customer__last_name")
    readonly_fields = ("total_amount", "refund_amount", "cancellation_date", "created_at", "updated_at")
    inlines = [BookingRoomInline, BookingHomeStayInline]

    def get_queryset(self, request):  # type: ignore
        return Booking.all_objects.select_related("customer", "customer__user")
