"""Role-based permission classes shared by all API views."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def is_admin(user) -> bool:
    return bool(user and user.is_authenticated and hasattr(user, "is_admin") and user.is_admin())


def is_merchant(user) -> bool:
    return bool(user and user.is_authenticated and hasattr(user, "is_merchant") and user.is_merchant())


def is_customer(user) -> bool:
    return bool(user and user.is_authenticated and hasattr(user, "is_customer") and user.is_customer())


class IsAdmin(permissions.BasePermission):
    """Only administrators (account type ``admin``, staff or superusers)."""

    message = "Only admins can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_admin(request.user)


class IsMerchant(permissions.BasePermission):
    message = "Only merchants can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_merchant(request.user)


class IsCustomer(permissions.BasePermission):
    message = "Only customers can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_customer(request.user)


class IsAdminOrMerchant(permissions.BasePermission):
    """
    Admins and merchants may write; ownership of the target object is
    checked at object level through ``merchant_id`` of the listing.
    """

    message = "Only admins and merchants can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return is_admin(request.user) or is_merchant(request.user)

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        user = request.user
        if is_admin(user):
            return True
        profile = user.get_merchant_profile()
        if profile is None:
            return False
        return getattr(obj, "owner_merchant_id", None) == profile.id


class IsAdminOrReadOnly(permissions.BasePermission):
    """Anyone may read; only admins may write."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return is_admin(request.user)
