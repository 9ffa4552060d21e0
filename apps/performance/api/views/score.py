from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, extend_schema_view
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.hrm.models import Employee
from apps.performance.api.mixins import EmployeeScopeMixin
from apps.performance.api.serializers import (
    AnnualScoreQuerySerializer,
    EmployeeScoreSerializer,
    ScoreQuerySerializer,
    SimulationRequestSerializer,
)
from apps.performance.services import ScoringService, simulate as simulate_scores
from libs import BaseGenericViewSet

TAG = "9.4: Scores"
YEAR_PARAMETER = OpenApiParameter("year", OpenApiTypes.INT, OpenApiParameter.QUERY, required=True)


@extend_schema_view(
    list=extend_schema(
        summary="Compute scores",
        description="Objective, aptitude and global scores of the given employees for a fiscal year, "
        "aggregated from every evaluation (closed or not)",
        tags=[TAG],
        parameters=[
            YEAR_PARAMETER,
            OpenApiParameter("employee_ids", OpenApiTypes.STR, OpenApiParameter.QUERY, required=True),
        ],
        responses={200: EmployeeScoreSerializer(many=True)},
    ),
    annual=extend_schema(
        summary="Recompute annual score",
        description="Full recomputation of one employee's year from evaluation history",
        tags=[TAG],
        parameters=[YEAR_PARAMETER],
        responses={200: OpenApiTypes.OBJECT},
        examples=[
            OpenApiExample(
                "Success",
                value={
                    "success": True,
                    "data": {
                        "employee_id": 7,
                        "year": 2024,
                        "objectives": [],
                        "aptitudes": [],
                        "objective_score": "86.50",
                        "aptitude_score": "80.00",
                        "global": "84.6",
                    },
                    "error": None,
                },
                response_only=True,
            )
        ],
    ),
    simulate=extend_schema(
        summary="Simulate scores",
        description="What-if run of goal scoring and score aggregation over the goal configurations and period "
        "values in the request body. Nothing is read or stored.",
        tags=[TAG],
        request=SimulationRequestSerializer,
        responses={200: OpenApiTypes.OBJECT},
        examples=[
            OpenApiExample(
                "Request",
                value={
                    "objectives": [
                        {
                            "name": "Sales volume",
                            "weight": "60",
                            "goals": [
                                {
                                    "name": "Revenue",
                                    "expected_value": "80",
                                    "effort_credit": True,
                                    "records": [
                                        {"period_code": "2024Q1", "value": 80},
                                        {"period_code": "2024Q2", "value": 60},
                                    ],
                                }
                            ],
                        }
                    ],
                    "aptitudes": [{"name": "Teamwork", "weight": "40", "score": "80"}],
                },
                request_only=True,
            )
        ],
    ),
)
class ScoreViewSet(EmployeeScopeMixin, BaseGenericViewSet):
    """Read-only score computation; nothing is stored."""

    queryset = Employee.objects.all()
    lookup_url_kwarg = "employee_id"
    pagination_class = None

    module = "Performance"
    submodule = "Scores"
    permission_prefix = "score"

    view_all_capability = "score.view_all"
    team_capability = "score.list"
    employee_lookup = ""

    def list(self, request, *args, **kwargs):
        serializer = ScoreQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        employee_ids = serializer.validated_data["employee_ids"]
        self.check_employees_in_scope(employee_ids)

        results = ScoringService(serializer.validated_data["year"]).compute_scores(employee_ids)
        return Response([item.as_dict() for item in results])

    @action(detail=True, methods=["get"], url_path="annual")
    def annual(self, request, employee_id=None):
        employee = self.get_object()
        serializer = AnnualScoreQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        return Response(ScoringService(serializer.validated_data["year"]).recompute_annual(employee.pk))

    @action(detail=False, methods=["post"], url_path="simulate")
    def simulate(self, request):
        serializer = SimulationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        return Response(simulate_scores(data.get("objectives", []), data.get("aptitudes", []), mix=data.get("mix")))
