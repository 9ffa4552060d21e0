import django_filters

from apps.performance.models import AssignmentOverride


class AssignmentOverrideFilterSet(django_filters.FilterSet):
    employee = django_filters.NumberFilter(field_name="employee__id")
    template = django_filters.NumberFilter(field_name="template__id")
    year = django_filters.NumberFilter(field_name="year")
    excluded = django_filters.BooleanFilter(field_name="excluded")

    class Meta:
        model = AssignmentOverride
        fields = ["employee", "template", "year", "excluded"]
