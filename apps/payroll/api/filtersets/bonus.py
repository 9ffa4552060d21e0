import django_filters

from apps.payroll.constants import BonusConfigSource
from apps.payroll.models import BonusConfig, BonusResult


class BonusConfigFilterSet(django_filters.FilterSet):
    year = django_filters.NumberFilter(field_name="year")
    scale_type = django_filters.CharFilter(field_name="scale_type")

    class Meta:
        model = BonusConfig
        fields = ["year", "scale_type"]


class BonusResultFilterSet(django_filters.FilterSet):
    """FilterSet for BonusResult.

    Filters:
        - year: exact fiscal year
        - employee: employee id
        - department: employee's current department id
        - config_source: GLOBAL / DEPARTMENT_OVERRIDE / EMPLOYEE_OVERRIDE
        - min_score / max_score: global score range
    """

    year = django_filters.NumberFilter(field_name="year")
    employee = django_filters.NumberFilter(field_name="employee__id")
    department = django_filters.NumberFilter(field_name="employee__department__id")
    config_source = django_filters.ChoiceFilter(choices=BonusConfigSource.choices)
    min_score = django_filters.NumberFilter(field_name="global_score", lookup_expr="gte")
    max_score = django_filters.NumberFilter(field_name="global_score", lookup_expr="lte")

    class Meta:
        model = BonusResult
        fields = ["year", "employee", "department", "config_source", "min_score", "max_score"]
