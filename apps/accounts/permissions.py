from rest_framework import permissions

from .models import UserRole


class IsAdminRole(permissions.BasePermission):
    """
    Permission: User must be an admin (role or staff flag).
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)


class IsAdminOrStoreManager(permissions.BasePermission):
    """
    Permission: User must be an admin or a store manager.
    """

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated
            and (user.is_admin or user.role == UserRole.STORE_MANAGER)
        )
