import django_filters

from apps.hrm.models import SectionParticipation


class SectionParticipationFilterSet(django_filters.FilterSet):
    employee = django_filters.NumberFilter(field_name="employee__id")
    section = django_filters.NumberFilter(field_name="section__id")
    department = django_filters.NumberFilter(field_name="section__department__id")
    year = django_filters.NumberFilter(field_name="year")

    class Meta:
        model = SectionParticipation
        fields = ["employee", "section", "department", "year"]
