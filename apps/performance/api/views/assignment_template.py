from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.hrm.models import Employee
from apps.performance.api.filtersets import AssignmentTemplateFilterSet
from apps.performance.api.serializers import (
    AssignmentTemplateListSerializer,
    AssignmentTemplateSerializer,
    MaterializeRequestSerializer,
    MaterializeResponseSerializer,
    PeriodSerializer,
    RecalculateRequestSerializer,
    RecalculateResponseSerializer,
)
from apps.performance.models import AssignmentTemplate
from apps.performance.services import EvaluationWorkflow, materialize_template
from libs import BaseModelViewSet
from libs.drf.filtersets.search import PhraseSearchFilter

TAG = "9.1: Assignment Templates"


@extend_schema_view(
    list=extend_schema(
        summary="List assignment templates",
        description="Retrieve objective and aptitude templates, filterable by year, kind and scope",
        tags=[TAG],
    ),
    retrieve=extend_schema(
        summary="Get assignment template details",
        description="Retrieve a template with its goal definitions",
        tags=[TAG],
    ),
    create=extend_schema(
        summary="Create assignment template",
        description="Create a template; objectives may carry a list of goals",
        tags=[TAG],
        examples=[
            OpenApiExample(
                "Request",
                value={
                    "kind": "objective",
                    "year": 2024,
                    "scope_type": "department",
                    "department": 1,
                    "name": "Sales growth",
                    "base_weight": "40.00",
                    "frequency": "quarterly",
                    "goals": [
                        {
                            "name": "Revenue",
                            "expected_value": "80",
                            "unit": "numeric",
                            "operator": ">=",
                            "tolerance": "2",
                            "effort_credit": True,
                        }
                    ],
                },
                request_only=True,
            )
        ],
    ),
    update=extend_schema(summary="Update assignment template", tags=[TAG]),
    partial_update=extend_schema(summary="Partially update assignment template", tags=[TAG]),
    destroy=extend_schema(
        summary="Delete assignment template",
        description="Templates referenced by evaluations are deactivated instead of deleted",
        tags=[TAG],
    ),
    periods=extend_schema(
        summary="List template periods",
        description="Ordered tracking periods generated from the template's year, frequency and window",
        tags=[TAG],
        responses={200: PeriodSerializer(many=True)},
        examples=[
            OpenApiExample(
                "Success",
                value={
                    "success": True,
                    "data": [
                        {"code": "2024Q1", "index": 1, "start": "2024-09-01", "end": "2024-11-30"},
                        {"code": "2024Q2", "index": 2, "start": "2024-12-01", "end": "2025-02-28"},
                    ],
                    "error": None,
                },
                response_only=True,
            )
        ],
    ),
    materialize=extend_schema(
        summary="Materialize evaluations",
        description="Create the missing DRAFT evaluations for every employee in scope and every period",
        tags=[TAG],
        request=MaterializeRequestSerializer,
        responses={200: MaterializeResponseSerializer},
    ),
    recalculate=extend_schema(
        summary="Recalculate evaluations",
        description="Rescore stored evaluations with the template's current goal configuration",
        tags=[TAG],
        request=RecalculateRequestSerializer,
        responses={200: RecalculateResponseSerializer},
    ),
)
class AssignmentTemplateViewSet(BaseModelViewSet):
    """ViewSet for AssignmentTemplate with nested goals."""

    queryset = (
        AssignmentTemplate.objects.select_related("department", "section", "employee")
        .prefetch_related("goals")
        .all()
    )
    serializer_class = AssignmentTemplateSerializer
    filterset_class = AssignmentTemplateFilterSet
    filter_backends = [DjangoFilterBackend, PhraseSearchFilter, OrderingFilter]
    search_fields = ["name", "description", "process"]
    ordering_fields = ["year", "kind", "name", "base_weight", "created_at"]
    ordering = ["year", "kind", "name"]

    module = "Performance"
    submodule = "Assignment templates"
    permission_prefix = "assignment_template"

    def get_serializer_class(self):
        if self.action == "list":
            return AssignmentTemplateListSerializer
        return AssignmentTemplateSerializer

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_destroy(self, instance):
        if instance.evaluations.exists():
            instance.is_active = False
            instance.save(update_fields=["is_active", "updated_at"])
            return
        instance.delete()

    @action(detail=True, methods=["get"], url_path="periods")
    def periods(self, request, pk=None):
        template = self.get_object()
        try:
            periods = template.get_periods()
        except ValueError as e:
            raise ValidationError({"window_start": [str(e)]}) from e
        return Response(PeriodSerializer(periods, many=True).data)

    @action(detail=True, methods=["post"], url_path="materialize")
    def materialize(self, request, pk=None):
        template = self.get_object()
        serializer = MaterializeRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = materialize_template(template, dry_run=serializer.validated_data["dry_run"], actor=request.user)
        return Response(result, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="recalculate")
    def recalculate(self, request, pk=None):
        template = self.get_object()
        serializer = RecalculateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        employee = None
        employee_id = serializer.validated_data.get("employee")
        if employee_id is not None:
            employee = get_object_or_404(Employee, pk=employee_id)

        result = EvaluationWorkflow.recalculate_template_evaluations(template, employee=employee, actor=request.user)
        return Response(result, status=status.HTTP_200_OK)
