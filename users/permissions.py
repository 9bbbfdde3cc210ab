"""DRF permission classes keyed on the user's inventory role."""

from common.choices import Role
from rest_framework.permissions import BasePermission


class HasInventoryRole(BasePermission):
    """Allow authenticated users holding any inventory role (STAFF or OWNER)."""

    message = "An inventory role is required."
    allowed_roles = frozenset({Role.STAFF, Role.OWNER})

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "role", None) in self.allowed_roles


class IsOwner(HasInventoryRole):
    """Allow only OWNER users."""

    message = "Only owners may perform this action."
    allowed_roles = frozenset({Role.OWNER})
