"""URL routing for the admin moderation API."""

from django.urls import path, include  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import MerchantModerationViewSet

router = DefaultRouter()
router.register(r"merchants", MerchantModerationViewSet, basename="admin-merchant")

urlpatterns = [
    path("", include(router.urls)),
]
