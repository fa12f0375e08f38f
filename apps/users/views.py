"""User API views."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from shared.api.responses import EnvelopeMixin, success_response

from .serializers import UserSerializer

User = get_user_model()


class UserViewSet(EnvelopeMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Current-user profile.

    - `me` (GET) returns the authenticated user with its profile
    - `me` (PATCH) updates name and phone
    """

    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        user = self.request.user
        if user.is_authenticated and user.is_admin():
            return User.objects.all()
        return User.objects.filter(pk=user.pk)

    @action(detail=False, methods=["get", "patch"])
    def me(self, request):
        if request.method == "PATCH":
            serializer = UserSerializer(request.user, data=request.data, partial=True)
            serializer.is_valid(raise_exception=True)
            serializer.save()
            return success_response(serializer.data, "Profile updated")
        return success_response(UserSerializer(request.user).data)
