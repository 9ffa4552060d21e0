"""Bonus batch calculation.

Turns the official (CLOSED-only) global score of each employee into a bonus
amount using the year's bonus configuration, after cascading department and
employee overrides, and stores one BonusResult per (employee, year).
"""

import logging
from typing import Dict, List, Optional, Tuple

from django.conf import settings
from django.utils import timezone

from apps.hrm.models import Employee
from apps.payroll.constants import BonusConfigSource, BonusOverrideScope
from apps.payroll.exceptions import BonusConfigNotFound
from apps.payroll.models import BonusConfig, BonusResult
from apps.payroll.utils.bonus_calculation import BonusScale, bonus_amount, payout_fraction, target_amount
from apps.performance.constants import EvaluationStatus
from apps.performance.services import ScoringService
from apps.performance.utils.overrides import cascade
from libs.decimals import quantize_decimal, to_decimal

logger = logging.getLogger(__name__)

# Most specific first
SOURCE_PRECEDENCE = [
    BonusConfigSource.EMPLOYEE_OVERRIDE,
    BonusConfigSource.DEPARTMENT_OVERRIDE,
    BonusConfigSource.GLOBAL,
]

RESULT_UPDATE_FIELDS = [
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
    "updated_at",
]


class BonusCalculationService:
    """Service for calculating the bonuses of a fiscal year.

    Usage:
        service = BonusCalculationService(2024)
        summary = service.calculate_batch(department_id=3)
    """

    def __init__(self, year: int, config: Optional[BonusConfig] = None):
        self.year = year
        self.config = config or self._load_config(year)
        self.global_scale = self.config.default_scale()
        self._department_overrides = {}
        self._employee_overrides = {}
        for override in self.config.overrides.all():
            if override.scope == BonusOverrideScope.DEPARTMENT:
                self._department_overrides[override.department_id] = override
            else:
                self._employee_overrides[override.employee_id] = override

    @staticmethod
    def _load_config(year: int) -> BonusConfig:
        try:
            return BonusConfig.objects.prefetch_related("overrides").get(year=year)
        except BonusConfig.DoesNotExist:
            raise BonusConfigNotFound()

    def population(self, department_id=None, employee_id=None):
        """Employees with at least one CLOSED evaluation in the year."""
        queryset = (
            Employee.objects.filter(evaluations__year=self.year, evaluations__status=EvaluationStatus.CLOSED)
            .select_related("department", "section")
            .distinct()
            .order_by("code")
        )
        if department_id is not None:
            queryset = queryset.filter(department_id=department_id)
        if employee_id is not None:
            queryset = queryset.filter(pk=employee_id)
        return queryset

    def resolve(self, employee) -> Tuple[BonusScale, object, str]:
        """Resolve (scale, target multiple, source) for ``employee``.

        Employee override wins over department override, which wins over the
        year's configuration. The reported source is the most specific layer
        that supplied either value.
        """
        employee_override = self._employee_overrides.get(employee.pk)
        department_override = self._department_overrides.get(employee.department_id)

        scale, scale_source = cascade(
            [
                (
                    BonusConfigSource.EMPLOYEE_OVERRIDE,
                    employee_override.get_scale(self.global_scale) if employee_override else None,
                ),
                (
                    BonusConfigSource.DEPARTMENT_OVERRIDE,
                    department_override.get_scale(self.global_scale) if department_override else None,
                ),
            ],
            default=self.global_scale,
            default_source=BonusConfigSource.GLOBAL,
        )
        multiple, multiple_source = cascade(
            [
                (BonusConfigSource.EMPLOYEE_OVERRIDE, employee_override.target_multiple if employee_override else None),
                (
                    BonusConfigSource.DEPARTMENT_OVERRIDE,
                    department_override.target_multiple if department_override else None,
                ),
            ],
            default=self.config.target_multiple,
            default_source=BonusConfigSource.GLOBAL,
        )
        source = min(scale_source, multiple_source, key=SOURCE_PRECEDENCE.index)
        return scale, to_decimal(multiple), source

    def build_result(self, employee, score, calculated_at) -> Tuple[BonusResult, Dict]:
        """Compute the unsaved BonusResult and its trace for one employee."""
        scale, multiple, source = self.resolve(employee)
        fraction = payout_fraction(score.global_score, scale)
        base_salary = quantize_decimal(employee.base_salary)
        amount = bonus_amount(base_salary, multiple, fraction)

        trace = {
            "employee_id": employee.pk,
            "employee_code": employee.code,
            "year": self.year,
            "objective_score": str(quantize_decimal(score.objective_score)),
            "aptitude_score": str(quantize_decimal(score.aptitude_score)),
            "global_score": str(score.global_score),
            "excluded_template_ids": score.excluded_template_ids,
            "config_source": str(source),
            "scale": scale.as_dict(),
            "base_salary": str(base_salary),
            "target_multiple": str(multiple),
            "target_amount": str(target_amount(base_salary, multiple)),
            "payout_fraction": str(fraction),
            "amount": str(amount),
        }
        result = BonusResult(
            employee=employee,
            year=self.year,
            objective_score=quantize_decimal(score.objective_score),
            aptitude_score=quantize_decimal(score.aptitude_score),
            global_score=quantize_decimal(score.global_score),
            payout_fraction=fraction,
            base_salary=base_salary,
            target_multiple=multiple,
            target_amount=target_amount(base_salary, multiple),
            amount=amount,
            scale=scale.as_dict(),
            config_source=source,
            department_name=employee.department.name if employee.department_id else "",
            section_name=employee.section.name if employee.section_id else "",
            trace=trace,
            calculated_at=calculated_at,
        )
        return result, trace

    def calculate_batch(self, department_id=None, employee_id=None) -> Dict:
        """Calculate and store the bonuses of the population.

        One employee's failure is logged and reported without stopping the
        others. Results are written in one upsert keyed by (employee, year),
        so re-running overwrites the previous snapshot.

        Returns:
            dict with ``year``, ``count`` (results stored), ``sample`` (first
            traces) and ``failures`` (``employee_id`` and ``error`` per failure)
        """
        employees = list(self.population(department_id=department_id, employee_id=employee_id))
        scores = {
            item.employee_id: item
            for item in ScoringService(self.year, official_only=True).compute_scores([e.pk for e in employees])
        }
        calculated_at = timezone.now()

        results: List[BonusResult] = []
        traces: List[Dict] = []
        failures: List[Dict] = []
        for employee in employees:
            try:
                result, trace = self.build_result(employee, scores[employee.pk], calculated_at)
            except Exception as e:
                logger.exception("Bonus calculation failed for employee %s in year %s", employee.pk, self.year)
                failures.append({"employee_id": employee.pk, "error": str(e)})
                continue
            results.append(result)
            traces.append(trace)

        if results:
            BonusResult.objects.bulk_create(
                results,
                update_conflicts=True,
                unique_fields=["employee", "year"],
                update_fields=RESULT_UPDATE_FIELDS,
            )

        logger.info(
            "Bonus batch for year %s: %s stored, %s failed",
            self.year,
            len(results),
            len(failures),
        )
        return {
            "year": self.year,
            "count": len(results),
            "sample": traces[: settings.PERFORMANCE_BONUS_TRACE_SAMPLE_SIZE],
            "failures": failures,
        }


def calculate_bonus_batch(year: int, scope_filter: Optional[Dict] = None) -> Dict:
    """Run the bonus batch for ``year``.

    Args:
        year: Fiscal year
        scope_filter: Optional ``{"department_id": ...}`` or ``{"employee_id": ...}``

    Raises:
        BonusConfigNotFound: when the year has no bonus configuration
    """
    scope_filter = scope_filter or {}
    return BonusCalculationService(year).calculate_batch(
        department_id=scope_filter.get("department_id"),
        employee_id=scope_filter.get("employee_id"),
    )
