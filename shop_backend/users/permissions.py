# users/permissions.py

from rest_framework.permissions import SAFE_METHODS, BasePermission


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


# ---------------- ROLE PERMISSIONS ----------------
class IsAdmin(HasRole):
    allowed_roles = {"admin"}


class IsAdminOrReadOnly(BasePermission):
    """
    Catalog policy:
    - anyone can read
    - only admins can write
    """

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return IsAdmin().has_permission(request, view)
