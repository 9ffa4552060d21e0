from django.db.models import Q
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.performance.api.filtersets import EvaluationFilterSet
from apps.performance.api.mixins import EmployeeScopeMixin
from apps.performance.api.serializers import (
    BulkCloseResponseSerializer,
    BulkCloseSerializer,
    EvaluationCreateSerializer,
    EvaluationListSerializer,
    EvaluationSerializer,
    EvaluationTransitionSerializer,
)
from apps.performance.models import Evaluation
from apps.performance.services import EvaluationWorkflow
from libs import BaseGenericViewSet

TAG = "9.2: Evaluations"


@extend_schema_view(
    list=extend_schema(
        summary="List evaluations",
        description="Evaluations visible to the caller, filterable by status, period, template, employee and year",
        tags=[TAG],
    ),
    retrieve=extend_schema(
        summary="Get evaluation details",
        description="Evaluation with goal results, timeline and the actions the caller may perform",
        tags=[TAG],
    ),
    create=extend_schema(
        summary="Create or fetch evaluation",
        description="Return the evaluation of (employee, template, period), creating it in DRAFT when missing. "
        "Responds 201 when created and 200 when it already existed.",
        tags=[TAG],
        request=EvaluationCreateSerializer,
        responses={200: EvaluationSerializer, 201: EvaluationSerializer},
    ),
    transition=extend_schema(
        summary="Apply workflow action",
        description="EDIT, SUBMIT_TO_EMPLOYEE, EMPLOYEE_ACKNOWLEDGE, EMPLOYEE_CONTEST, SUBMIT_TO_HR, CLOSE or REOPEN. "
        "A disallowed state yields 409, a failed guard 403.",
        tags=[TAG],
        request=EvaluationTransitionSerializer,
        responses={200: EvaluationSerializer},
        examples=[
            OpenApiExample(
                "Edit goal results",
                value={
                    "action": "EDIT",
                    "goal_results": [{"goal": 1, "submitted_value": 75}],
                    "comment": "Q1 figures",
                },
                request_only=True,
            ),
            OpenApiExample(
                "Close",
                value={"action": "CLOSE", "comment": "Approved", "note": "Quarter closing"},
                request_only=True,
            ),
            OpenApiExample(
                "Error - Invalid state",
                value={
                    "success": False,
                    "data": None,
                    "error": {
                        "type": "client_error",
                        "errors": [
                            {
                                "code": "invalid_transition",
                                "detail": "Cannot perform CLOSE on an evaluation in state DRAFT; "
                                "required state: PENDING_HR.",
                                "attr": None,
                            }
                        ],
                    },
                },
                response_only=True,
                status_codes=["409"],
            ),
        ],
    ),
    bulk_close=extend_schema(
        summary="Bulk close evaluations",
        description="Close PENDING_HR evaluations by id list or by period/template; each one independently",
        tags=[TAG],
        request=BulkCloseSerializer,
        responses={200: BulkCloseResponseSerializer},
    ),
)
class EvaluationViewSet(
    EmployeeScopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    BaseGenericViewSet,
):
    """ViewSet for evaluations and their workflow."""

    queryset = Evaluation.objects.select_related("employee", "template").all()
    serializer_class = EvaluationSerializer
    filterset_class = EvaluationFilterSet
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["period_code", "status", "score", "updated_at"]
    ordering = ["employee_id", "template_id", "period_code"]

    module = "Performance"
    submodule = "Evaluations"
    permission_prefix = "evaluation"

    view_all_capability = "evaluation.view_all"
    team_capability = "evaluation.edit"

    def get_scope_q(self):
        scope = super().get_scope_q()
        if scope is None:
            return None
        return scope | Q(evaluator=self.request.user)

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == "retrieve":
            queryset = queryset.prefetch_related("goal_results", "timeline__actor")
        return queryset

    def get_serializer_class(self):
        if self.action == "list":
            return EvaluationListSerializer
        return EvaluationSerializer

    def create(self, request, *args, **kwargs):
        serializer = EvaluationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        employee = serializer.validated_data["employee"]
        self.check_employees_in_scope([employee.pk])

        evaluation, created = EvaluationWorkflow.get_or_create_evaluation(
            employee,
            serializer.validated_data["template"],
            serializer.validated_data["period_code"],
            actor=request.user,
        )
        data = EvaluationSerializer(evaluation, context=self.get_serializer_context()).data
        return Response(data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    @action(detail=True, methods=["post"], url_path="transition")
    def transition(self, request, pk=None):
        evaluation = self.get_object()
        serializer = EvaluationTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payload = dict(serializer.validated_data)
        workflow_action = payload.pop("action")
        if "goal_results" in payload:
            payload["goal_results"] = [dict(item) for item in payload["goal_results"]]

        evaluation = EvaluationWorkflow.transition(evaluation.pk, workflow_action, request.user, payload)
        return Response(EvaluationSerializer(evaluation, context=self.get_serializer_context()).data)

    @action(detail=False, methods=["post"], url_path="bulk-close")
    def bulk_close(self, request):
        serializer = BulkCloseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = EvaluationWorkflow.bulk_close(
            request.user,
            evaluation_ids=data.get("ids"),
            period_code=data.get("period_code") or None,
            template_id=data.get("template"),
            note=data.get("note", ""),
        )
        return Response(result, status=status.HTTP_200_OK)
