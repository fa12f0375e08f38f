"""Listing API views."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore

from apps.users.api.permissions import IsAdmin, IsAdminOrMerchant, IsAdminOrReadOnly, is_admin, is_merchant
from shared.api.responses import EnvelopeMixin, success_response
from shared.exceptions import Forbidden, ValidationFailed

from . import services
from .filters import HomeStayFilterSet, PropertyFilterSet, RoomFilterSet, UnitFilterSet
from .models import Amenity, ApprovalStatus, HomeStay, Property, Room, Unit
from .serializers import (
    ActiveStatusSerializer,
    AmenitiesSerializer,
    AmenitySerializer,
    ApprovalStatusSerializer,
    AvailabilityStatusSerializer,
    HomeStaySerializer,
    PropertySerializer,
    RoomSerializer,
    UnitSerializer,
    VerificationSerializer,
)


class ListingViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """Shared CRUD and moderation actions for every listing type.

    Anonymous users and customers see approved, active listings. Merchants
    additionally see their own listings in any state; admins see everything.
    """

    model = None
    owner_lookup = "merchant"
    label = "Listing"
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    ordering_fields = ["created_at", "updated_at"]

    admin_actions = {"set_status", "verify"}
    owner_actions = {
        "create",
        "update",
        "partial_update",
        "destroy",
        "availability",
        "amenities",
        "restore",
    }

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        if self.action in self.admin_actions:
            return [permissions.IsAuthenticated(), IsAdmin()]
        if self.action in self.owner_actions:
            return [permissions.IsAuthenticated(), IsAdminOrMerchant()]
        # approval-status: role is checked by the workflow itself
        return [permissions.IsAuthenticated()]

    def get_queryset(self):  # type: ignore
        manager = self.model.all_objects if self.action == "restore" else self.model.objects
        qs = self.get_base_queryset(manager)
        user = self.request.user
        if is_admin(user):
            return qs
        public = Q(approval_status=ApprovalStatus.APPROVED, is_active=True)
        if is_merchant(user):
            profile = user.get_merchant_profile()
            if profile is not None:
                return qs.filter(public | Q(**{self.owner_lookup: profile}))
        if self.action == "restore":
            return qs.none()
        return qs.filter(public)

    def get_base_queryset(self, manager):  # type: ignore
        return manager.all()

    # --- CRUD -------------------------------------------------------------
    def perform_create(self, serializer):  # type: ignore
        merchant = services.resolve_listing_merchant(self.request.user, self.request.data.get("merchant"))
        with transaction.atomic():
            services.assert_under_quota(merchant, self.model)
            serializer.save(merchant=merchant, **services.initial_approval_fields(self.request.user))

    def perform_update(self, serializer):  # type: ignore
        with transaction.atomic():
            instance = serializer.save()
            services.mark_pending_after_edit(instance, self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        response = super().create(request, *args, **kwargs)
        return success_response(response.data, f"{self.label} created successfully", status=response.status_code)

    def update(self, request, *args, **kwargs):  # type: ignore
        response = super().update(request, *args, **kwargs)
        return success_response(response.data, f"{self.label} updated successfully")

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.soft_delete_listing(self.get_object())
        return success_response(message=f"{self.label} deleted successfully")

    def _respond(self, instance, message: str):
        instance.refresh_from_db()
        return success_response(self.get_serializer(instance).data, message)

    # --- Actions ----------------------------------------------------------
    @action(detail=True, methods=["patch"], url_path="approval-status", url_name="approval-status")
    def approval_status(self, request, pk=None):
        serializer = ApprovalStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        listing = self.get_object()
        services.transition_approval(
            listing,
            request.user,
            serializer.validated_data["approval_status"],
            serializer.validated_data.get("rejection_reason"),
        )
        return self._respond(listing, f"{self.label} approval status updated")

    @action(detail=True, methods=["patch"])
    def availability(self, request, pk=None):
        listing = self.get_object()
        serializer = AvailabilityStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.set_availability_status(listing, serializer.validated_data["availability_status"])
        return self._respond(listing, f"{self.label} availability updated")

    @action(detail=True, methods=["patch"], url_path="status", url_name="status")
    def set_status(self, request, pk=None):
        listing = self.get_object()
        serializer = ActiveStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.set_active_status(listing, serializer.validated_data.get("is_active"))
        state = "activated" if listing.is_active else "deactivated"
        return self._respond(listing, f"{self.label} {state} successfully")

    @action(detail=True, methods=["patch"])
    def verify(self, request, pk=None):
        listing = self.get_object()
        serializer = VerificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.toggle_verification(listing, serializer.validated_data.get("vista_verified"))
        return self._respond(listing, f"{self.label} verification updated")

    @action(detail=True, methods=["patch"])
    def amenities(self, request, pk=None):
        listing = self.get_object()
        serializer = AmenitiesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        listing.amenities.set(serializer.validated_data["amenity_ids"])
        return self._respond(listing, f"{self.label} amenities updated")

    @action(detail=True, methods=["patch"])
    def restore(self, request, pk=None):
        listing = self.get_object()
        services.restore_listing(listing, request.user)
        return self._respond(listing, f"{self.label} restored successfully")


class PropertyViewSet(ListingViewSet):
    model = Property
    label = "Property"
    serializer_class = PropertySerializer
    filterset_class = PropertyFilterSet
    search_fields = ["title", "city", "district"]

    def get_base_queryset(self, manager):  # type: ignore
        return manager.select_related("merchant").prefetch_related("amenities")


class HomeStayViewSet(ListingViewSet):
    model = HomeStay
    label = "Homestay"
    serializer_class = HomeStaySerializer
    filterset_class = HomeStayFilterSet
    search_fields = ["name", "city"]
    ordering_fields = ["created_at", "base_price"]

    def get_base_queryset(self, manager):  # type: ignore
        return manager.select_related("merchant").prefetch_related("amenities")


class PropertyChildViewSet(ListingViewSet):
    """Rooms and units belong to a property and inherit its merchant."""

    owner_lookup = "property__merchant"

    def get_base_queryset(self, manager):  # type: ignore
        return manager.select_related("property", "property__merchant").prefetch_related("amenities")

    def _check_parent(self, parent: Property) -> None:
        user = self.request.user
        if is_admin(user):
            if not parent.merchant.can_list:
                raise ValidationFailed("Merchant is not active.")
            return
        profile = user.get_merchant_profile()
        if profile is None or parent.merchant_id != profile.id:
            raise Forbidden(f"You can only manage {self.label.lower()}s of your own properties.")
        if not profile.can_list:
            raise Forbidden("Merchant account is not active or not approved.")

    def perform_create(self, serializer):  # type: ignore
        parent = serializer.validated_data["property"]
        self._check_parent(parent)
        with transaction.atomic():
            if self.model in services.QUOTA_LABELS:
                services.assert_under_quota(parent.merchant, self.model)
            serializer.save(**services.initial_approval_fields(self.request.user))

    def perform_update(self, serializer):  # type: ignore
        parent = serializer.validated_data.get("property")
        if parent is not None:
            self._check_parent(parent)
        super().perform_update(serializer)


class RoomViewSet(PropertyChildViewSet):
    model = Room
    label = "Room"
    serializer_class = RoomSerializer
    filterset_class = RoomFilterSet
    search_fields = ["room_number", "property__title"]
    ordering_fields = ["created_at", "price_per_night", "room_number"]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        if self.action in self.owner_actions and is_merchant(request.user):
            profile = request.user.get_merchant_profile()
            if profile is not None and not profile.allows_rooms():
                raise Forbidden("Homestay merchants cannot manage rooms.")


class UnitViewSet(PropertyChildViewSet):
    model = Unit
    label = "Unit"
    serializer_class = UnitSerializer
    filterset_class = UnitFilterSet
    search_fields = ["unit_code", "name"]


class AmenityViewSet(EnvelopeMixin, viewsets.ModelViewSet):
    """Amenity catalogue: readable by everyone, managed by admins."""

    queryset = Amenity.objects.all()
    serializer_class = AmenitySerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, SearchFilter]
    filterset_fields = ["category"]
    search_fields = ["name"]
