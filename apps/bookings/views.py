"""API views for the booking domain."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore

from apps.users.api.permissions import IsAdmin, IsCustomer, is_admin, is_customer, is_merchant
from shared.api.responses import EnvelopeMixin, success_response
from shared.exceptions import NotFound

from . import services
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
)


class BookingViewSet(
    EnvelopeMixin,
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Create, list and manage bookings.

    Admins see every booking, merchants the bookings touching their rooms or
    homestays, customers their own.
    """

    queryset = Booking.objects.select_related("customer", "customer__user").prefetch_related(
        "booking_rooms__room", "booking_homestays__homestay"
    )
    serializer_class = BookingSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["created_at", "check_in_date", "total_amount"]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsCustomer()]
        if self.action == "destroy":
            return [permissions.IsAuthenticated(), IsAdmin()]
        return [permissions.IsAuthenticated()]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if is_admin(user):
            return qs
        if is_merchant(user):
            profile = user.get_merchant_profile()
            if profile is None:
                return qs.none()
            return qs.filter(
                Q(booking_rooms__room__property__merchant=profile)
                | Q(booking_homestays__homestay__merchant=profile)
            ).distinct()
        if is_customer(user):
            return qs.filter(customer__user=user)
        return qs.none()

    def filter_queryset(self, queryset):  # type: ignore
        # Status filters apply to the list only; detail routes must still reach
        # cancelled bookings.
        if self.action != "list":
            return queryset
        return super().filter_queryset(queryset)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = request.user.get_customer_profile()
        if customer is None:
            raise NotFound("Customer profile not found")
        booking = services.create_booking(customer, **serializer.validated_data)
        booking = self.get_queryset().get(pk=booking.pk)
        return success_response(
            BookingSerializer(booking, context=self.get_serializer_context()).data,
            "Booking created successfully",
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.delete_booking(self.get_object(), request.user)
        return success_response(message="Booking deleted successfully")

    def _respond(self, booking: Booking, message: str):
        booking = self.get_queryset().get(pk=booking.pk)
        return success_response(self.get_serializer(booking).data, message)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.cancel_booking(booking, request.user, serializer.validated_data["cancellation_reason"])
        return self._respond(booking, "Booking cancelled successfully")

    @action(detail=True, methods=["patch"], url_path="status", url_name="status")
    def update_status(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.change_booking_status(
            booking,
            request.user,
            serializer.validated_data["status"],
            serializer.validated_data["reason"],
        )
        return self._respond(booking, "Booking status updated successfully")
