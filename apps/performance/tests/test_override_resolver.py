from decimal import Decimal

import pytest

from apps.performance.models import AssignmentOverride
from apps.performance.services import OverrideResolver, resolve_override


@pytest.mark.django_db
class TestOverrideResolver:
    def test_no_override_keeps_base_weight(self, employee, objective_template):
        resolution = resolve_override(employee.pk, 2024, objective_template)

        assert resolution.excluded is False
        assert resolution.source == "NONE"
        assert resolution.effective_weight(Decimal("60")) == Decimal("60")

    def test_weight_override(self, employee, objective_template):
        AssignmentOverride.objects.create(
            employee=employee, year=2024, template=objective_template, weight=Decimal("25")
        )

        resolution = resolve_override(employee.pk, 2024, objective_template)

        assert resolution.source == "EMPLOYEE"
        assert resolution.effective_weight(Decimal("60")) == Decimal("25")

    def test_exclusion(self, employee, objective_template):
        AssignmentOverride.objects.create(employee=employee, year=2024, template=objective_template, excluded=True)

        assert resolve_override(employee.pk, 2024, objective_template.pk).excluded is True

    def test_override_is_scoped_to_its_year(self, employee, objective_template):
        AssignmentOverride.objects.create(employee=employee, year=2023, template=objective_template, excluded=True)

        assert resolve_override(employee.pk, 2024, objective_template).excluded is False

    def test_resolver_is_narrowed_to_requested_employees(
        self, employee, make_employee, objective_template, django_assert_num_queries
    ):
        colleague = make_employee()
        AssignmentOverride.objects.create(employee=colleague, year=2024, template=objective_template, excluded=True)
        resolver = OverrideResolver(employee_ids=[employee.pk])

        with django_assert_num_queries(1):
            assert resolver.resolve(colleague.pk, 2024, objective_template).excluded is False
            assert resolver.resolve(employee.pk, 2024, objective_template).excluded is False
