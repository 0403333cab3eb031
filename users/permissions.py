"""
Users — DRF Permission Classes

Role-based permission checks reusable by any app's ViewSets.

@file users/permissions.py
"""

from rest_framework.permissions import BasePermission


class HasRole(BasePermission):
    """
    Checks that the user is a superuser or holds one of ``roles`` (set on a
    subclass) or of ``view.required_roles``.

    Usage::

        class MyView(APIView):
            permission_classes = [IsAuthenticated, HasRole]
            required_roles = ['ADMIN', 'MANAGER']
    """

    roles: tuple[str, ...] = ()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        required = self.roles or tuple(getattr(view, 'required_roles', ()))
        if user.is_superuser:
            return True
        if not required:
            return False
        return user.has_any_role(*required)
