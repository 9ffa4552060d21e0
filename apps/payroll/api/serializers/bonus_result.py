from django.utils.translation import gettext as _
from rest_framework import serializers

from apps.payroll.models import BonusResult


class BonusResultSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source="employee.code", read_only=True)
    employee_fullname = serializers.CharField(source="employee.fullname", read_only=True)

    class Meta:
        model = BonusResult
        fields = [
            "id",
            "employee",
            "employee_code",
            "employee_fullname",
            "year",
            "objective_score",
            "aptitude_score",
            "global_score",
            "payout_fraction",
            "base_salary",
            "target_multiple",
            "target_amount",
            "amount",
            "scale",
            "config_source",
            "department_name",
            "section_name",
            "trace",
            "calculated_at",
        ]
        read_only_fields = fields


class BonusCalculateRequestSerializer(serializers.Serializer):
    """Scope of a bonus batch: the whole year, one department or one employee."""

    year = serializers.IntegerField(min_value=2000, max_value=2100)
    department_id = serializers.IntegerField(required=False)
    employee_id = serializers.IntegerField(required=False)

    def validate(self, data):
        if data.get("department_id") is not None and data.get("employee_id") is not None:
            raise serializers.ValidationError(_("Filter by department or by employee, not both"))
        return data


class BonusFailureSerializer(serializers.Serializer):
    employee_id = serializers.IntegerField()
    error = serializers.CharField()


class BonusCalculateResponseSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    count = serializers.IntegerField(help_text="Bonus results stored")
    sample = serializers.ListField(child=serializers.DictField(), help_text="Calculation traces of the first employees")
    failures = BonusFailureSerializer(many=True)
