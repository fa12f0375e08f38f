"""API views for administrator merchant moderation."""

from __future__ import annotations

from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.users import services
from apps.users.models import MerchantProfile
from shared.api.responses import EnvelopeMixin, success_response

from .permissions import IsAdmin
from .serializers import (
    MerchantApproveSerializer,
    MerchantDetailSerializer,
    MerchantListSerializer,
    MerchantRejectSerializer,
    MerchantStatusSerializer,
)


class MerchantModerationViewSet(
    EnvelopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Merchant moderation for administrators.

    Endpoints:
    - GET /api/v1/admin/merchants/ - list merchants (filter by ?status=)
    - GET /api/v1/admin/merchants/{id}/ - merchant details
    - POST /api/v1/admin/merchants/{id}/approve/ - approve a pending merchant
    - POST /api/v1/admin/merchants/{id}/reject/ - reject and deactivate
    - PATCH /api/v1/admin/merchants/{id}/status/ - set status, quota or notes
    """

    queryset = MerchantProfile.objects.select_related("user").all()
    permission_classes = [permissions.IsAuthenticated, IsAdmin]
    search_fields = ["business_name", "merchant_name", "user__email"]
    ordering_fields = ["created_at", "business_name", "status"]

    def get_serializer_class(self) -> type:  # type: ignore
        if self.action == "list":
            return MerchantListSerializer  # type: ignore
        return MerchantDetailSerializer  # type: ignore

    def get_queryset(self):  # type: ignore
        queryset = super().get_queryset()
        status_param = self.request.query_params.get("status")
        if status_param:
            queryset = queryset.filter(status=status_param)
        return queryset

    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        merchant = self.get_object()
        serializer = MerchantApproveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        merchant = services.approve_merchant(
            merchant,
            quota=serializer.get_quota(),
            admin_notes=serializer.validated_data.get("admin_notes", ""),
        )
        return success_response(MerchantDetailSerializer(merchant).data, "Merchant approved")

    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        merchant = self.get_object()
        serializer = MerchantRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        merchant = services.reject_merchant(merchant, reason=serializer.validated_data["reason"])
        return success_response(MerchantDetailSerializer(merchant).data, "Merchant rejected")

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):
        merchant = self.get_object()
        serializer = MerchantStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        merchant = services.update_merchant_status(merchant, **serializer.validated_data)
        return success_response(MerchantDetailSerializer(merchant).data, "Merchant status updated")
