"""URL routing for the listings domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AmenityViewSet, HomeStayViewSet, PropertyViewSet, RoomViewSet, UnitViewSet

router = DefaultRouter()
router.register(r"properties", PropertyViewSet, basename="property")
router.register(r"homestays", HomeStayViewSet, basename="homestay")
router.register(r"rooms", RoomViewSet, basename="room")
router.register(r"units", UnitViewSet, basename="unit")
router.register(r"amenities", AmenityViewSet, basename="amenity")

urlpatterns = [
    path("", include(router.urls)),
]
