from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.payroll.api.filtersets import BonusResultFilterSet
from apps.payroll.api.serializers import (
    BonusCalculateRequestSerializer,
    BonusCalculateResponseSerializer,
    BonusResultSerializer,
)
from apps.payroll.models import BonusResult
from apps.payroll.services import calculate_bonus_batch
from libs import BaseReadOnlyModelViewSet
from libs.drf.filtersets.search import PhraseSearchFilter

TAG = "10.2: Bonus Results"


@extend_schema_view(
    list=extend_schema(
        summary="List bonus results",
        description="Stored bonus snapshots, filterable by year, employee, department and score range",
        tags=[TAG],
    ),
    retrieve=extend_schema(summary="Get bonus result", tags=[TAG]),
    calculate=extend_schema(
        summary="Calculate bonuses",
        description="Recalculate and store the bonuses of a fiscal year from CLOSED evaluations. "
        "Safe to re-run: each (employee, year) snapshot is overwritten.",
        tags=[TAG],
        request=BonusCalculateRequestSerializer,
        responses={200: BonusCalculateResponseSerializer},
        examples=[
            OpenApiExample(
                "Request",
                value={"year": 2024, "department_id": 2},
                request_only=True,
            ),
            OpenApiExample(
                "Success",
                value={
                    "success": True,
                    "data": {
                        "year": 2024,
                        "count": 1,
                        "sample": [
                            {
                                "employee_id": 7,
                                "employee_code": "MV007",
                                "global_score": "80.0",
                                "config_source": "GLOBAL",
                                "payout_fraction": "0.1500",
                                "amount": "150000.00",
                            }
                        ],
                        "failures": [],
                    },
                    "error": None,
                },
                response_only=True,
            ),
        ],
    ),
)
class BonusResultViewSet(BaseReadOnlyModelViewSet):
    queryset = BonusResult.objects.select_related("employee").all()
    serializer_class = BonusResultSerializer
    filterset_class = BonusResultFilterSet
    filter_backends = [DjangoFilterBackend, PhraseSearchFilter, OrderingFilter]
    search_fields = ["employee__code", "employee__fullname", "department_name", "section_name"]
    ordering_fields = ["year", "global_score", "amount", "calculated_at"]
    ordering = ["-year", "employee__code"]

    module = "Payroll"
    submodule = "Bonus results"
    permission_prefix = "bonus_result"

    @action(detail=False, methods=["post"], url_path="calculate")
    def calculate(self, request):
        serializer = BonusCalculateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        scope_filter = {key: data[key] for key in ("department_id", "employee_id") if data.get(key) is not None}
        result = calculate_bonus_batch(data["year"], scope_filter=scope_filter)
        return Response(result, status=status.HTTP_200_OK)
