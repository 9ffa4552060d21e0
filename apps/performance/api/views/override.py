from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework.filters import OrderingFilter

from apps.performance.api.filtersets import AssignmentOverrideFilterSet
from apps.performance.api.serializers import AssignmentOverrideSerializer
from apps.performance.models import AssignmentOverride
from libs import BaseModelViewSet

TAG = "9.3: Assignment Overrides"


@extend_schema_view(
    list=extend_schema(summary="List assignment overrides", tags=[TAG]),
    retrieve=extend_schema(summary="Get assignment override", tags=[TAG]),
    create=extend_schema(
        summary="Create assignment override",
        description="Exclude an assignment for an employee or replace its effective weight for the year",
        tags=[TAG],
    ),
    update=extend_schema(summary="Update assignment override", tags=[TAG]),
    partial_update=extend_schema(summary="Partially update assignment override", tags=[TAG]),
    destroy=extend_schema(summary="Delete assignment override", tags=[TAG]),
)
class AssignmentOverrideViewSet(BaseModelViewSet):
    queryset = AssignmentOverride.objects.select_related("employee", "template").all()
    serializer_class = AssignmentOverrideSerializer
    filterset_class = AssignmentOverrideFilterSet
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["year", "employee", "template", "created_at"]
    ordering = ["-year", "employee_id", "template_id"]

    module = "Performance"
    submodule = "Assignment overrides"
    permission_prefix = "assignment_override"

    def perform_create(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)
