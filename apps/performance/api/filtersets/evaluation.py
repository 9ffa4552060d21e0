import django_filters

from apps.performance.models import Evaluation


class EvaluationFilterSet(django_filters.FilterSet):
    """FilterSet for Evaluation.

    ``status`` accepts several comma separated values, e.g.
    ``?status=PENDING_HR,PENDING_EMPLOYEE``.
    """

    employee = django_filters.NumberFilter(field_name="employee__id")
    template = django_filters.NumberFilter(field_name="template__id")
    department = django_filters.NumberFilter(field_name="employee__department__id")
    section = django_filters.NumberFilter(field_name="employee__section__id")
    year = django_filters.NumberFilter(field_name="year")
    period_code = django_filters.CharFilter(field_name="period_code")
    kind = django_filters.CharFilter(field_name="template__kind")
    status = django_filters.CharFilter(method="filter_status")
    acknowledgement_status = django_filters.CharFilter(field_name="acknowledgement_status")

    class Meta:
        model = Evaluation
        fields = [
            "employee",
            "template",
            "department",
            "section",
            "year",
            "period_code",
            "kind",
            "status",
            "acknowledgement_status",
        ]

    def filter_status(self, queryset, name, value):
        statuses = [item.strip() for item in value.split(",") if item.strip()]
        if not statuses:
            return queryset
        return queryset.filter(status__in=statuses)
