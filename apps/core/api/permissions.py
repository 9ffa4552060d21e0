from django.utils.translation import gettext as _
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission


class RoleBasedPermission(BasePermission):
    """
    Permission class that checks the caller's role against the capability
    policy table.

    Views declare `permission_prefix`; the capability asked for is
    ``f"{permission_prefix}.{action}"`` (see BaseModelViewSet).
    """

    def has_permission(self, request, view):
        """Verify that the authenticated user holds the required capability."""
        capability = None

        if getattr(view, "permission_prefix", None) and getattr(view, "action", None):
            capability = f"{view.permission_prefix}.{view.action}"

        # If no capability is derived, allow access (view doesn't require one)
        if not capability:
            return True

        if not request.user or not request.user.is_authenticated:
            raise PermissionDenied(_("You need to login to perform this action"))

        if request.user.has_capability(capability):
            return True

        raise PermissionDenied(_("You do not have permission to perform this action"))
