import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiExample, extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response

from apps.hrm.api.filtersets import SectionParticipationFilterSet
from apps.hrm.api.serializers import SectionParticipationSerializer
from apps.hrm.models import SectionParticipation
from libs import BaseModelViewSet

logger = logging.getLogger(__name__)

TAG = "8.1: Section Participation"


@extend_schema_view(
    list=extend_schema(
        summary="List section participation",
        description="Participation records, filterable by employee, section, department and year",
        tags=[TAG],
    ),
    retrieve=extend_schema(summary="Get section participation", tags=[TAG]),
    create=extend_schema(
        summary="Set section participation",
        description="Create or replace the percentage of an employee in a section for a year. "
        "Returns 201 when the record is new and 200 when an existing one was updated.",
        tags=[TAG],
        examples=[
            OpenApiExample(
                "Request",
                value={"employee": 7, "section": 3, "year": 2024, "percentage": "60.00"},
                request_only=True,
            )
        ],
    ),
    destroy=extend_schema(summary="Delete section participation", tags=[TAG]),
)
class SectionParticipationViewSet(BaseModelViewSet):
    """Share of employees' time per section; scales section-scoped assignment weights."""

    queryset = SectionParticipation.objects.select_related("employee", "section").all()
    serializer_class = SectionParticipationSerializer
    filterset_class = SectionParticipationFilterSet
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["year", "employee", "section", "percentage"]
    ordering = ["-year", "employee_id", "section_id"]
    http_method_names = ["get", "post", "delete", "head", "options"]

    module = "HRM"
    submodule = "Section participation"
    permission_prefix = "section_participation"

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        participation, created = SectionParticipation.objects.update_or_create(
            employee=data["employee"],
            section=data["section"],
            year=data["year"],
            defaults={"percentage": data["percentage"]},
        )
        logger.info(
            "Section participation of employee %s in section %s for %s set to %s%%",
            participation.employee_id,
            participation.section_id,
            participation.year,
            participation.percentage,
        )
        return Response(
            self.get_serializer(participation).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
