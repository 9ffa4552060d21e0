from decimal import Decimal

from django.db.models import Sum
from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.hrm.models import SectionParticipation


class SectionParticipationSerializer(serializers.ModelSerializer):
    """Serializer for SectionParticipation.

    Writes are upserts keyed by (employee, section, year), so the stored row
    for the same key is left out of the 100% total check.
    """

    section_name = serializers.CharField(source="section.name", read_only=True)

    class Meta:
        model = SectionParticipation
        fields = [
            "id",
            "employee",
            "section",
            "section_name",
            "year",
            "percentage",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "section_name", "created_at", "updated_at"]
        # The view upserts on (employee, section, year)
        validators = []

    def validate(self, data):
        others = SectionParticipation.objects.filter(employee=data["employee"], year=data["year"]).exclude(
            section=data["section"]
        )
        total = others.aggregate(total=Sum("percentage"))["total"] or Decimal("0")
        if total + data["percentage"] > Decimal("100"):
            raise serializers.ValidationError(
                {
                    "percentage": _("Participation for the year would add up to %(total)s%%, above 100%%")
                    % {"total": total + data["percentage"]}
                }
            )
        return data
