from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError

from apps.performance.constants import AssignmentKind, ReviewFrequency, ScopeType
from apps.performance.models import AssignmentTemplate


@pytest.mark.django_db
class TestAssignmentTemplateClean:
    def _template(self, department, **kwargs):
        return AssignmentTemplate(
            kind=AssignmentKind.APTITUDE,
            year=2024,
            scope_type=ScopeType.DEPARTMENT,
            department=department,
            name="Teamwork",
            base_weight=Decimal("40"),
            frequency=ReviewFrequency.QUARTERLY,
            **kwargs,
        )

    def test_custom_window_inside_fiscal_year_is_valid(self, department):
        template = self._template(department, window_start=date(2024, 10, 1), window_end=date(2025, 3, 31))

        template.full_clean()

        assert [period.code for period in template.get_periods()] == ["2024Q1", "2024Q2"]

    @pytest.mark.parametrize(
        "window,field",
        [
            ({"window_start": date(2025, 10, 1)}, "window_start"),
            ({"window_end": date(2024, 8, 1)}, "window_end"),
            ({"window_start": date(2025, 1, 1), "window_end": date(2024, 12, 1)}, "window_end"),
        ],
    )
    def test_empty_window_is_rejected(self, department, window, field):
        """Test that a window leaving no day in the fiscal year fails validation on the offending edge."""
        template = self._template(department, **window)

        with pytest.raises(ValidationError) as exc_info:
            template.full_clean()

        assert field in exc_info.value.message_dict
