"""
Base ViewSets carrying capability metadata.

Every project viewset inherits from one of these classes so that
``RoleBasedPermission`` can resolve ``<permission_prefix>.<action>`` for the
current request.
"""

from rest_framework import viewsets

from libs.drf.mixin.permission import PermissionRegistrationMixin


class BaseModelViewSet(PermissionRegistrationMixin, viewsets.ModelViewSet):
    """
    Base ModelViewSet with capability metadata.

    Example:
        class AssignmentOverrideViewSet(BaseModelViewSet):
            queryset = AssignmentOverride.objects.all()
            serializer_class = AssignmentOverrideSerializer
            module = "Performance"
            submodule = "Overrides"
            permission_prefix = "assignment_override"

        Requests are then checked against:
            - assignment_override.list
            - assignment_override.retrieve
            - assignment_override.create
            - assignment_override.update
            - assignment_override.partial_update
            - assignment_override.destroy
    """

    pass


class BaseReadOnlyModelViewSet(PermissionRegistrationMixin, viewsets.ReadOnlyModelViewSet):
    """Base ReadOnlyModelViewSet with capability metadata."""

    STANDARD_ACTIONS = ("list", "retrieve")


class BaseGenericViewSet(PermissionRegistrationMixin, viewsets.GenericViewSet):
    pass
