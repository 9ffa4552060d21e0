import django_filters

from apps.performance.models import AssignmentTemplate


class AssignmentTemplateFilterSet(django_filters.FilterSet):
    """FilterSet for AssignmentTemplate.

    Provides filtering by year, kind, scope type and target, frequency and
    active flag.
    """

    year = django_filters.NumberFilter(field_name="year")
    kind = django_filters.CharFilter(field_name="kind")
    scope_type = django_filters.CharFilter(field_name="scope_type")
    department = django_filters.NumberFilter(field_name="department__id")
    section = django_filters.NumberFilter(field_name="section__id")
    employee = django_filters.NumberFilter(field_name="employee__id")
    frequency = django_filters.CharFilter(field_name="frequency")
    is_active = django_filters.BooleanFilter(field_name="is_active")

    class Meta:
        model = AssignmentTemplate
        fields = ["year", "kind", "scope_type", "department", "section", "employee", "frequency", "is_active"]
