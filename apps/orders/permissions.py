from apps.accounts.permissions import IsAdminRole, IsAdminOrStoreManager


class IsShopAdmin(IsAdminRole):
    """
    Permission: User must be an admin (role or staff flag).
    """


class IsVoucherStoreStaff(IsAdminOrStoreManager):
    """
    Permission: Admins, or the manager who owns the voucher's store.

    Object-level check on an Order; store managers cannot act on
    vouchers sold by other stores.
    """

    def has_object_permission(self, request, view, obj):
        if request.user.is_admin:
            return True
        return obj.voucher.store.owner_id == request.user.id
