from rest_framework.permissions import BasePermission, SAFE_METHODS
from rolepermissions.checkers import has_role


def is_admin(user):
    return bool(
        user and user.is_authenticated
        and (user.is_superuser or user.is_staff or has_role(user, 'admin'))
    )


class IsAdmin(BasePermission):
    def has_permission(self, request, view):
        return is_admin(request.user)


class IsAdminOrReadOnly(BasePermission):
    """Anyone can read; only admins can create, edit or delete."""
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return is_admin(request.user)
