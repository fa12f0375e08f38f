"""Users app package.

Defines the platform account (``apps.users.models.CustomUser``, the
AUTH_USER_MODEL) with its admin/merchant/customer account type, the
merchant and customer profiles, authentication endpoints and the
administrator merchant-moderation API under ``apps.users.api``.
"""
