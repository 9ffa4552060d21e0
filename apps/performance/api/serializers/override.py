from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.performance.models import AssignmentOverride


class AssignmentOverrideSerializer(serializers.ModelSerializer):
    """Serializer for AssignmentOverride.

    ``year`` defaults to the template's year and must match it when given.
    """

    year = serializers.IntegerField(required=False)

    class Meta:
        model = AssignmentOverride
        fields = [
            "id",
            "employee",
            "year",
            "template",
            "excluded",
            "weight",
            "note",
            "updated_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "updated_by", "created_at", "updated_at"]
        # Uniqueness is checked in validate() once the year is defaulted
        validators = []

    def _current(self, data, field):
        if field in data:
            return data[field]
        return getattr(self.instance, field, None) if self.instance else None

    def validate(self, data):
        template = self._current(data, "template")
        year = self._current(data, "year")
        if template is not None:
            if year is None:
                data["year"] = year = template.year
            elif year != template.year:
                raise serializers.ValidationError({"year": _("Year must match the template's year")})

        excluded = self._current(data, "excluded") or False
        if not excluded and self._current(data, "weight") is None:
            raise serializers.ValidationError({"weight": _("Provide a weight or mark the assignment as excluded")})

        employee = self._current(data, "employee")
        if employee is not None and template is not None:
            queryset = AssignmentOverride.objects.filter(employee=employee, year=year, template=template)
            if self.instance:
                queryset = queryset.exclude(pk=self.instance.pk)
            if queryset.exists():
                raise serializers.ValidationError(
                    _("An override for this employee, year and template already exists")
                )
        return data
