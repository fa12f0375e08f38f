"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomerProfile, CustomUser, MerchantProfile


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Personal info"), {"fields": ("username", "first_name", "last_name", "phone")}),
        (_("Account"), {"fields": ("account_type",)}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (
            _("Important dates"),
            {"fields": ("last_login", "last_activity_at", "date_joined", "created_at", "updated_at")},
        ),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "phone", "account_type", "is_staff", "is_superuser"),
            },
        ),
    )
    list_display = ("email", "account_type", "phone", "is_active", "is_staff", "created_at")
    list_filter = ("account_type", "is_active", "is_staff")
    search_fields = ("email", "phone", "first_name", "last_name")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined", "last_activity_at")


@admin.register(MerchantProfile)
class MerchantProfileAdmin(admin.ModelAdmin):
    list_display = (
        "business_name",
        "user",
        "business_type",
        "status",
        "max_properties_allowed",
        "is_active",
        "deleted_at",
    )
    list_filter = ("status", "business_type", "is_active")
    search_fields = ("business_name", "merchant_name", "business_registration_number", "user__email")
    readonly_fields = ("created_at", "updated_at", "verification_date")

    def get_queryset(self, request):  # type: ignore
        return MerchantProfile.all_objects.select_related("user")


@admin.register(CustomerProfile)
class CustomerProfileAdmin(admin.ModelAdmin):
    list_display = ("first_name", "last_name", "user", "mobile_number", "is_active")
    list_filter = ("is_active",)
    search_fields = ("first_name", "last_name", "user__email", "mobile_number")
