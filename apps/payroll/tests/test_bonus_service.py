"""Tests for the bonus batch service."""

from datetime import date
from decimal import Decimal

import pytest

from apps.payroll.constants import BonusConfigSource, BonusOverrideScope, BonusScaleType
from apps.payroll.exceptions import BonusConfigNotFound
from apps.payroll.models import BonusConfigOverride, BonusResult
from apps.payroll.services import BonusCalculationService, calculate_bonus_batch
from apps.performance.constants import AssignmentKind, ReviewFrequency, ScopeType
from apps.performance.models import AssignmentTemplate


@pytest.mark.django_db
class TestBonusBatch:
    def test_global_configuration(self, employee, bonus_config, give_score):
        """Test that a score of 80 on the 60-100 / 0-30% scale pays 15% of the salary."""
        give_score(employee, 80)

        result = calculate_bonus_batch(2024)

        assert result["count"] == 1
        assert result["failures"] == []
        [trace] = result["sample"]
        assert trace["employee_code"] == "EMP100"
        assert trace["global_score"] == "80.0"
        assert trace["payout_fraction"] == "0.1500"
        assert trace["amount"] == "150000.00"
        assert trace["config_source"] == BonusConfigSource.GLOBAL

        stored = BonusResult.objects.get(employee=employee, year=2024)
        assert stored.amount == Decimal("150000.00")
        assert stored.target_amount == Decimal("1000000.00")
        assert stored.department_name == "Sales"
        assert stored.section_name == "Sales North"
        assert stored.scale["scale_type"] == BonusScaleType.LINEAR

    def test_department_override_target(self, employee, department, bonus_config, give_score):
        BonusConfigOverride.objects.create(
            config=bonus_config,
            scope=BonusOverrideScope.DEPARTMENT,
            department=department,
            target_multiple=Decimal("2"),
        )
        give_score(employee, 80)

        calculate_bonus_batch(2024)

        stored = BonusResult.objects.get(employee=employee)
        assert stored.amount == Decimal("300000.00")
        assert stored.config_source == BonusConfigSource.DEPARTMENT_OVERRIDE

    def test_employee_override_scale(self, employee, bonus_config, give_score):
        BonusConfigOverride.objects.create(
            config=bonus_config,
            scope=BonusOverrideScope.EMPLOYEE,
            employee=employee,
            scale_type=BonusScaleType.TIERED,
            tiers=[{"min_score": "70", "payout": "0.1"}, {"min_score": "90", "payout": "0.2"}],
        )
        give_score(employee, 80)

        calculate_bonus_batch(2024)

        stored = BonusResult.objects.get(employee=employee)
        assert stored.payout_fraction == Decimal("0.1000")
        assert stored.amount == Decimal("100000.00")
        assert stored.config_source == BonusConfigSource.EMPLOYEE_OVERRIDE

    def test_most_specific_layer_is_reported(self, employee, department, bonus_config):
        """Test that a department scale with an employee target is reported as the employee override."""
        BonusConfigOverride.objects.create(
            config=bonus_config,
            scope=BonusOverrideScope.DEPARTMENT,
            department=department,
            scale_type=BonusScaleType.TIERED,
            tiers=[{"min_score": "50", "payout": "0.25"}],
        )
        BonusConfigOverride.objects.create(
            config=bonus_config,
            scope=BonusOverrideScope.EMPLOYEE,
            employee=employee,
            target_multiple=Decimal("2"),
        )

        scale, multiple, source = BonusCalculationService(2024).resolve(employee)

        assert scale.scale_type == BonusScaleType.TIERED
        assert multiple == Decimal("2")
        assert source == BonusConfigSource.EMPLOYEE_OVERRIDE

    def test_override_scale_inherits_unset_fields(self, employee, department, bonus_config):
        BonusConfigOverride.objects.create(
            config=bonus_config,
            scope=BonusOverrideScope.DEPARTMENT,
            department=department,
            scale_type=BonusScaleType.LINEAR,
            max_fraction=Decimal("0.5"),
        )

        scale, multiple, source = BonusCalculationService(2024).resolve(employee)

        assert scale.max_fraction == Decimal("0.5")
        assert scale.threshold == Decimal("60")
        assert multiple == Decimal("1.00")
        assert source == BonusConfigSource.DEPARTMENT_OVERRIDE

    def test_population_needs_a_closed_evaluation(self, employee, make_employee, bonus_config, give_score):
        give_score(employee, 80)
        give_score(make_employee(), 90, close=False)

        result = calculate_bonus_batch(2024)

        assert result["count"] == 1
        assert list(BonusResult.objects.values_list("employee_id", flat=True)) == [employee.pk]

    def test_rerun_overwrites_snapshot(self, employee, bonus_config, give_score):
        give_score(employee, 80)
        calculate_bonus_batch(2024)
        bonus_config.max_fraction = Decimal("0.2")
        bonus_config.save()

        calculate_bonus_batch(2024)

        assert BonusResult.objects.count() == 1
        assert BonusResult.objects.get().amount == Decimal("100000.00")

    def test_failure_does_not_stop_the_batch(self, employee, make_employee, bonus_config, give_score, monkeypatch):
        broken = make_employee(code="EMP001")
        give_score(broken, 70)
        give_score(employee, 80)
        build_result = BonusCalculationService.build_result

        def failing_build_result(self, target, score, calculated_at):
            if target.pk == broken.pk:
                raise ValueError("salary missing")
            return build_result(self, target, score, calculated_at)

        monkeypatch.setattr(BonusCalculationService, "build_result", failing_build_result)

        result = calculate_bonus_batch(2024)

        assert result["count"] == 1
        assert result["failures"] == [{"employee_id": broken.pk, "error": "salary missing"}]
        assert list(BonusResult.objects.values_list("employee_id", flat=True)) == [employee.pk]

    def test_template_with_empty_window_does_not_abort(self, employee, department, bonus_config, give_score):
        give_score(employee, 80)
        AssignmentTemplate.objects.create(
            kind=AssignmentKind.OBJECTIVE,
            year=2024,
            scope_type=ScopeType.DEPARTMENT,
            department=department,
            name="Late objective",
            base_weight=Decimal("100"),
            frequency=ReviewFrequency.QUARTERLY,
            window_end=date(2024, 8, 1),
        )

        result = calculate_bonus_batch(2024)

        assert result["count"] == 1
        assert result["failures"] == []
        assert BonusResult.objects.get(employee=employee).amount == Decimal("150000.00")

    def test_missing_configuration(self, employee, give_score):
        give_score(employee, 80)

        with pytest.raises(BonusConfigNotFound):
            calculate_bonus_batch(2024)

    def test_scope_filters(self, employee, make_employee, other_department, bonus_config, give_score):
        outsider = make_employee(department=other_department)
        give_score(employee, 80)
        give_score(outsider, 90)

        by_department = calculate_bonus_batch(2024, {"department_id": other_department.pk})
        by_employee = calculate_bonus_batch(2024, {"employee_id": employee.pk})

        assert [trace["employee_id"] for trace in by_department["sample"]] == [outsider.pk]
        assert [trace["employee_id"] for trace in by_employee["sample"]] == [employee.pk]
        assert BonusResult.objects.count() == 2
