from rest_framework import permissions

from apps.accounts.models import UserRole


class IsStoreManagerOrReadOnly(permissions.BasePermission):
    """
    Permission: anyone may read; only store managers and admins may write.
    """

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        return bool(
            user and user.is_authenticated
            and (user.is_admin or user.role == UserRole.STORE_MANAGER)
        )


class IsStoreOwnerOrReadOnly(permissions.BasePermission):
    """
    Permission: writes on a store (or a store's product) need its owner or an admin.
    """

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        store = getattr(obj, 'store', obj)
        return request.user.is_admin or store.owner_id == request.user.id
