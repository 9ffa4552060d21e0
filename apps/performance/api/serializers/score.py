from decimal import Decimal, InvalidOperation

from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.performance.api.serializers.assignment_template import GoalDefinitionSerializer
from apps.performance.constants import GoalUnit
from apps.performance.utils import MixRatio


def is_finite_number(value) -> bool:
    try:
        return Decimal(str(value)).is_finite()
    except (InvalidOperation, ValueError):
        return False


class ScoreQuerySerializer(serializers.Serializer):
    """Query parameters of the score listing.

    ``employee_ids`` is a comma separated list, e.g. ``?employee_ids=1,2,3&year=2024``.
    """

    year = serializers.IntegerField(min_value=2000, max_value=2100)
    employee_ids = serializers.CharField()

    def validate_employee_ids(self, value):
        try:
            ids = [int(item) for item in value.split(",") if item.strip()]
        except ValueError:
            raise serializers.ValidationError(_("Employee ids must be a comma separated list of integers"))
        if not ids:
            raise serializers.ValidationError(_("At least one employee id is required"))
        return ids


class AnnualScoreQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)


class AssignmentScoreSerializer(serializers.Serializer):
    template_id = serializers.IntegerField()
    name = serializers.CharField()
    kind = serializers.CharField()
    base_weight = serializers.DecimalField(max_digits=7, decimal_places=2)
    weight = serializers.DecimalField(max_digits=7, decimal_places=2)
    score = serializers.DecimalField(max_digits=7, decimal_places=2)
    override_source = serializers.CharField()
    periods = serializers.ListField(child=serializers.DictField())
    goals = serializers.ListField(child=serializers.DictField())


class EmployeeScoreSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    employee_code = serializers.CharField()
    year = serializers.IntegerField()
    objectives = AssignmentScoreSerializer(many=True)
    aptitudes = AssignmentScoreSerializer(many=True)
    objective_score = serializers.DecimalField(max_digits=7, decimal_places=2)
    aptitude_score = serializers.DecimalField(max_digits=7, decimal_places=2)
    global_score = serializers.DecimalField(max_digits=6, decimal_places=1)
    excluded_template_ids = serializers.ListField(child=serializers.IntegerField())



class SimulationRecordSerializer(serializers.Serializer):
    period_code = serializers.CharField(max_length=20)
    value = serializers.JSONField(help_text="Number, or true/false / 0/1 for binary goals")


class SimulationGoalSerializer(GoalDefinitionSerializer):
    """A goal configuration with its period values, scored without being saved."""

    id = None
    records = SimulationRecordSerializer(many=True, required=False)

    class Meta(GoalDefinitionSerializer.Meta):
        fields = [
            "name",
            "expected_value",
            "unit",
            "operator",
            "weight",
            "accumulation_mode",
            "closure_rule",
            "threshold_periods",
            "tolerance",
            "effort_credit",
            "allow_overachievement",
            "overachievement_cap",
            "records",
        ]

    def validate(self, data):
        data = super().validate(data)
        binary = data.get("unit") == GoalUnit.BINARY
        for record in data.get("records", []):
            value = record["value"]
            if binary:
                valid = isinstance(value, bool) or value in (0, 1, "0", "1")
            else:
                valid = not isinstance(value, bool) and is_finite_number(value)
            if not valid:
                raise serializers.ValidationError(
                    {"records": _("Invalid value for period %(code)s") % {"code": record["period_code"]}}
                )
        return data


class SimulationObjectiveSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, default="")
    weight = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), default=Decimal("100")
    )
    total_periods = serializers.IntegerField(min_value=1, required=False)
    goals = SimulationGoalSerializer(many=True)


class SimulationAptitudeSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, default="")
    weight = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), default=Decimal("100")
    )
    score = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"))


class SimulationRequestSerializer(serializers.Serializer):
    """Input of a what-if score run.

    ``objective_weight``/``aptitude_weight`` replace the configured mix ratio
    for this run only; both must be given and sum to 1.
    """

    objectives = SimulationObjectiveSerializer(many=True, required=False)
    aptitudes = SimulationAptitudeSerializer(many=True, required=False)
    objective_weight = serializers.DecimalField(
        max_digits=4, decimal_places=3, min_value=Decimal("0"), max_value=Decimal("1"), required=False
    )
    aptitude_weight = serializers.DecimalField(
        max_digits=4, decimal_places=3, min_value=Decimal("0"), max_value=Decimal("1"), required=False
    )

    def validate(self, data):
        if not data.get("objectives") and not data.get("aptitudes"):
            raise serializers.ValidationError({"objectives": _("At least one objective or aptitude is required")})

        weights = [data.get("objective_weight"), data.get("aptitude_weight")]
        if any(weight is not None for weight in weights):
            if None in weights:
                raise serializers.ValidationError(
                    {"aptitude_weight": _("Both objective and aptitude weights must be given")}
                )
            try:
                data["mix"] = MixRatio(objective=weights[0], aptitude=weights[1])
            except ValueError:
                raise serializers.ValidationError({"aptitude_weight": _("The two weights must sum to 1")})
        return data
