from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework.filters import OrderingFilter

from apps.payroll.api.filtersets import BonusConfigFilterSet
from apps.payroll.api.serializers import BonusConfigSerializer
from apps.payroll.models import BonusConfig
from libs import BaseModelViewSet

TAG = "10.1: Bonus Configuration"


@extend_schema_view(
    list=extend_schema(summary="List bonus configurations", tags=[TAG]),
    retrieve=extend_schema(summary="Get bonus configuration", tags=[TAG]),
    create=extend_schema(
        summary="Create bonus configuration",
        description="One configuration per fiscal year: default scale, target multiple and scoped overrides",
        tags=[TAG],
        examples=[
            OpenApiExample(
                "Linear scale",
                value={
                    "year": 2024,
                    "scale_type": "linear",
                    "threshold": "60",
                    "min_fraction": "0",
                    "max_fraction": "0.3",
                    "target_multiple": "1.00",
                    "overrides": [
                        {"scope": "department", "department": 2, "target_multiple": "1.50"},
                        {
                            "scope": "employee",
                            "employee": 7,
                            "scale_type": "tiered",
                            "tiers": [{"min_score": "70", "payout": "0.1"}, {"min_score": "90", "payout": "0.2"}],
                        },
                    ],
                },
                request_only=True,
            )
        ],
    ),
    update=extend_schema(summary="Update bonus configuration", tags=[TAG]),
    partial_update=extend_schema(summary="Partially update bonus configuration", tags=[TAG]),
    destroy=extend_schema(summary="Delete bonus configuration", tags=[TAG]),
)
class BonusConfigViewSet(BaseModelViewSet):
    queryset = BonusConfig.objects.prefetch_related("overrides").all()
    serializer_class = BonusConfigSerializer
    filterset_class = BonusConfigFilterSet
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["year", "created_at"]
    ordering = ["-year"]

    module = "Payroll"
    submodule = "Bonus configuration"
    permission_prefix = "bonus_config"

    def perform_create(self, serializer):
        serializer.save(updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)
