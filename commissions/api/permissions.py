"""
API PERMISSIONS

Views declare the permission each HTTP method needs in `required_permissions`
(e.g. {"GET": "view_sales"}); methods missing from the map only require an
authenticated user.
"""

from rest_framework.permissions import BasePermission

from ..services.auth_service import user_has_permission


def get_required_permission(request, view):
    return getattr(view, "required_permissions", {}).get(request.method)


class HasRequiredPermission(BasePermission):
    """
    Permission check against the commissions permission codenames.
    """

    message = "You do not have permission to perform this action."
    code = "permission_denied"

    def has_permission(self, request, view):
        permission = get_required_permission(request, view)
        if permission is None:
            return True
        if user_has_permission(request.user, permission):
            return True
        self.message = f"{self.message} Required permission: {permission}."
        return False
