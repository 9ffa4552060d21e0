"""Metric aggregation over stored evaluations.

Scores are always rebuilt from the submitted values stored on evaluations
(goal results and ratings); nothing is accumulated between runs, so a
recomputation after a rule change gives the same answer as a fresh one.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from apps.hrm.models import Employee, SectionParticipation
from apps.performance.constants import AssignmentKind, EvaluationStatus, ScopeType
from apps.performance.models import AssignmentTemplate, Evaluation
from apps.performance.services.override_resolver import OverrideResolver
from apps.performance.utils import (
    MixRatio,
    block_score,
    global_score,
    objective_score_from_goals,
    period_order,
    rating_to_score,
    scale_weight,
    score_goal,
    score_goal_periods,
)
from libs.decimals import DECIMAL_HUNDRED, quantize_decimal, to_decimal

logger = logging.getLogger(__name__)


def get_mix_ratio() -> MixRatio:
    """Global score mix ratio from settings."""
    try:
        return MixRatio(
            objective=Decimal(str(settings.PERFORMANCE_OBJECTIVE_WEIGHT)),
            aptitude=Decimal(str(settings.PERFORMANCE_APTITUDE_WEIGHT)),
        )
    except (InvalidOperation, ValueError) as e:
        raise ImproperlyConfigured(f"Invalid global score mix ratio: {e}") from e


@dataclass
class GoalBreakdown:
    goal_id: int
    name: str
    weight: Optional[Decimal]
    score: Decimal
    met: bool
    periods: list = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "goal_id": self.goal_id,
            "name": self.name,
            "weight": self.weight,
            "score": quantize_decimal(self.score),
            "met": self.met,
            "periods": [period.as_dict() for period in self.periods],
        }


@dataclass
class AssignmentScore:
    template_id: int
    name: str
    kind: str
    base_weight: Decimal
    weight: Decimal
    score: Decimal
    override_source: str
    periods: list = field(default_factory=list)
    goals: List[GoalBreakdown] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "template_id": self.template_id,
            "name": self.name,
            "kind": self.kind,
            "base_weight": self.base_weight,
            "weight": quantize_decimal(self.weight),
            "score": quantize_decimal(self.score),
            "override_source": self.override_source,
            "periods": self.periods,
            "goals": [goal.as_dict() for goal in self.goals],
        }


@dataclass
class EmployeeScore:
    employee_id: int
    employee_code: str
    year: int
    objectives: List[AssignmentScore]
    aptitudes: List[AssignmentScore]
    objective_score: Decimal
    aptitude_score: Decimal
    global_score: Decimal
    excluded_template_ids: List[int] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_code": self.employee_code,
            "year": self.year,
            "objectives": [item.as_dict() for item in self.objectives],
            "aptitudes": [item.as_dict() for item in self.aptitudes],
            "objective_score": quantize_decimal(self.objective_score),
            "aptitude_score": quantize_decimal(self.aptitude_score),
            "global_score": self.global_score,
            "excluded_template_ids": self.excluded_template_ids,
        }


def section_shares(employee, participations: Iterable) -> Dict[int, Decimal]:
    """Participation percentage per section; 100% in the primary section when none is recorded."""
    shares = {item.section_id: to_decimal(item.percentage) for item in participations}
    if shares:
        return shares
    if employee.section_id:
        return {employee.section_id: DECIMAL_HUNDRED}
    return {}


def applicable_weight(employee, template, shares: Dict[int, Decimal]) -> Optional[Decimal]:
    """Base weight of ``template`` for ``employee``, or None when it does not apply.

    Section-scoped weights are scaled by the employee's participation share.
    """
    if template.scope_type == ScopeType.EMPLOYEE:
        return to_decimal(template.base_weight) if template.employee_id == employee.id else None
    if template.scope_type == ScopeType.SECTION:
        share = shares.get(template.section_id)
        return scale_weight(template.base_weight, share) if share is not None else None
    if template.scope_type == ScopeType.DEPARTMENT:
        return to_decimal(template.base_weight) if template.department_id == employee.department_id else None
    return None


def template_applies(employee, template) -> bool:
    participations = SectionParticipation.objects.filter(year=template.year, employee=employee)
    return applicable_weight(employee, template, section_shares(employee, participations)) is not None


def aptitude_period_score(template, evaluation) -> Optional[Decimal]:
    """Score of one aptitude evaluation: converted rating, else the directly entered score."""
    if evaluation.rating is not None:
        return rating_to_score(evaluation.rating, template.rating_scale_max)
    if evaluation.score is not None:
        return to_decimal(evaluation.score)
    return None


def _ordered(template, evaluations: Iterable, periods=None) -> list:
    order = period_order(periods if periods is not None else template.get_periods())
    return sorted(evaluations, key=lambda item: (order.get(item.period_code, len(order) + 1), item.period_code))


def _results_by_goal(evaluation) -> dict:
    return {result.goal_id: result for result in evaluation.goal_results.all()}


def rescore_evaluations(template, evaluations: Iterable) -> list:
    """Recompute derived values of one employee's evaluations of ``template`` in place.

    Goal results get their evaluated value, score and met flag rebuilt (with
    running sums for cumulative goals) and each evaluation gets its period
    score. Nothing is saved.

    Returns:
        The evaluations in period order
    """
    evaluations = _ordered(template, evaluations)

    if template.kind == AssignmentKind.APTITUDE:
        for evaluation in evaluations:
            score = aptitude_period_score(template, evaluation)
            evaluation.score = quantize_decimal(score) if score is not None else None
        return evaluations

    goals = list(template.goals.all())
    if not goals:
        return evaluations
    results = {evaluation.pk: _results_by_goal(evaluation) for evaluation in evaluations}

    for goal in goals:
        submissions = []
        for evaluation in evaluations:
            result = results[evaluation.pk].get(goal.pk)
            if result is not None and result.submitted_value is not None:
                submissions.append((evaluation.period_code, result.submitted_value))

        scored = {item.period_code: item for item in score_goal_periods(goal.to_config(), submissions)}
        for evaluation in evaluations:
            result = results[evaluation.pk].get(goal.pk)
            period_score = scored.get(evaluation.period_code)
            if result is None:
                continue
            if period_score is None:
                result.evaluated_value, result.score, result.met = None, Decimal(0), False
                continue
            result.evaluated_value = period_score.evaluated_value
            result.score = quantize_decimal(period_score.score)
            result.met = period_score.met

    for evaluation in evaluations:
        scored_goals = [
            (goal.weight, results[evaluation.pk][goal.pk].score)
            for goal in goals
            if goal.pk in results[evaluation.pk] and results[evaluation.pk][goal.pk].submitted_value is not None
        ]
        evaluation.score = quantize_decimal(objective_score_from_goals(scored_goals)) if scored_goals else None
    return evaluations


class ScoringService:
    """Per-employee, per-year aggregation of evaluation results.

    Args:
        year: Fiscal year
        official_only: Only count CLOSED evaluations (used for bonuses)
        mix: Global mix ratio; defaults to settings
    """

    def __init__(self, year: int, official_only: bool = False, mix: Optional[MixRatio] = None):
        self.year = year
        self.official_only = official_only
        self.mix = mix or get_mix_ratio()
        self._periods: Dict[int, list] = {}

    def _template_periods(self, template) -> list:
        if template.pk not in self._periods:
            self._periods[template.pk] = template.get_periods()
        return self._periods[template.pk]

    def _load_templates(self) -> List[AssignmentTemplate]:
        """Active templates of the year whose tracking periods can be generated."""
        templates = []
        queryset = AssignmentTemplate.objects.filter(year=self.year, is_active=True).prefetch_related("goals")
        for template in queryset.order_by("kind", "id"):
            try:
                self._template_periods(template)
            except ValueError as e:
                logger.warning("Skipping template %s while scoring year %s: %s", template.pk, self.year, e)
                continue
            templates.append(template)
        return templates

    def _load_evaluations(self, employee_ids, templates) -> Dict[tuple, Dict[str, Evaluation]]:
        queryset = Evaluation.objects.filter(
            year=self.year,
            employee_id__in=employee_ids,
            template__in=templates,
        ).prefetch_related("goal_results")
        if self.official_only:
            queryset = queryset.filter(status=EvaluationStatus.CLOSED)

        grouped: Dict[tuple, Dict[str, Evaluation]] = defaultdict(dict)
        for evaluation in queryset:
            grouped[(evaluation.employee_id, evaluation.template_id)][evaluation.period_code] = evaluation
        return grouped

    def _load_participations(self, employee_ids) -> Dict[int, list]:
        grouped = defaultdict(list)
        for item in SectionParticipation.objects.filter(year=self.year, employee_id__in=employee_ids):
            grouped[item.employee_id].append(item)
        return grouped

    def score_objective(self, template, evaluations_by_period: Dict[str, Evaluation]):
        """Close every goal of an objective over its tracked periods.

        Returns:
            Tuple of (objective score, goal breakdowns, per-period rows)
        """
        periods = self._template_periods(template)
        goals = list(template.goals.all())
        ordered = [evaluations_by_period[p.code] for p in periods if p.code in evaluations_by_period]

        if not goals:
            scores = [to_decimal(item.score) for item in ordered if item.score is not None]
            score = sum(scores, Decimal(0)) / len(scores) if scores else Decimal(0)
            rows = [{"period_code": item.period_code, "score": item.score, "status": item.status} for item in ordered]
            return score, [], rows

        breakdown = []
        per_period = defaultdict(list)
        for goal in goals:
            submissions = []
            for evaluation in ordered:
                result = _results_by_goal(evaluation).get(goal.pk)
                if result is not None and result.submitted_value is not None:
                    submissions.append((evaluation.period_code, result.submitted_value))

            closed, period_scores = score_goal(goal.to_config(), submissions, total_periods=len(periods))
            breakdown.append(
                GoalBreakdown(
                    goal_id=goal.pk,
                    name=goal.name,
                    weight=goal.weight,
                    score=closed.score,
                    met=closed.met,
                    periods=period_scores,
                )
            )
            for item in period_scores:
                per_period[item.period_code].append((goal.weight, item.score))

        score = objective_score_from_goals((goal.weight, goal.score) for goal in breakdown)
        rows = [
            {
                "period_code": evaluation.period_code,
                "score": quantize_decimal(objective_score_from_goals(per_period[evaluation.period_code]))
                if per_period[evaluation.period_code]
                else None,
                "status": evaluation.status,
            }
            for evaluation in ordered
        ]
        return score, breakdown, rows

    def score_aptitude(self, template, evaluations_by_period: Dict[str, Evaluation]):
        """Mean of the rated periods of an aptitude.

        Returns:
            Tuple of (aptitude score, per-period rows)
        """
        ordered = _ordered(template, evaluations_by_period.values(), self._template_periods(template))
        rows = []
        scores = []
        for evaluation in ordered:
            score = aptitude_period_score(template, evaluation)
            rows.append(
                {
                    "period_code": evaluation.period_code,
                    "rating": evaluation.rating,
                    "score": quantize_decimal(score) if score is not None else None,
                    "status": evaluation.status,
                }
            )
            if score is not None:
                scores.append(score)
        score = sum(scores, Decimal(0)) / len(scores) if scores else Decimal(0)
        return score, rows

    def score_employee(self, employee, templates, evaluations, participations, resolver) -> EmployeeScore:
        shares = section_shares(employee, participations)
        objectives, aptitudes, excluded = [], [], []

        for template in templates:
            base_weight = applicable_weight(employee, template, shares)
            if base_weight is None:
                continue

            resolution = resolver.resolve(employee.pk, self.year, template)
            if resolution.excluded:
                excluded.append(template.pk)
                continue
            weight = to_decimal(resolution.effective_weight(base_weight))

            evaluations_by_period = evaluations.get((employee.pk, template.pk), {})
            if template.kind == AssignmentKind.OBJECTIVE:
                score, goals, rows = self.score_objective(template, evaluations_by_period)
                target = objectives
            else:
                score, rows = self.score_aptitude(template, evaluations_by_period)
                goals = []
                target = aptitudes

            target.append(
                AssignmentScore(
                    template_id=template.pk,
                    name=template.name,
                    kind=template.kind,
                    base_weight=template.base_weight,
                    weight=weight,
                    score=score,
                    override_source=resolution.source,
                    periods=rows,
                    goals=goals,
                )
            )

        objective_block = block_score((item.weight, item.score) for item in objectives)
        aptitude_block = block_score((item.weight, item.score) for item in aptitudes)
        return EmployeeScore(
            employee_id=employee.pk,
            employee_code=employee.code,
            year=self.year,
            objectives=objectives,
            aptitudes=aptitudes,
            objective_score=objective_block,
            aptitude_score=aptitude_block,
            global_score=global_score(objective_block, aptitude_block, self.mix),
            excluded_template_ids=excluded,
        )

    def compute_scores(self, employee_ids: Iterable[int]) -> List[EmployeeScore]:
        """Aggregate scores for each existing employee in ``employee_ids``."""
        employee_ids = list(employee_ids)
        employees = list(Employee.objects.filter(id__in=employee_ids).order_by("code"))
        missing = set(employee_ids) - {employee.pk for employee in employees}
        if missing:
            logger.warning("Skipping unknown employees while scoring year %s: %s", self.year, sorted(missing))

        templates = self._load_templates()
        evaluations = self._load_evaluations(employee_ids, templates)
        participations = self._load_participations(employee_ids)
        resolver = OverrideResolver(employee_ids=employee_ids)

        return [
            self.score_employee(employee, templates, evaluations, participations.get(employee.pk, []), resolver)
            for employee in employees
        ]

    def recompute_annual(self, employee_id: int) -> dict:
        """Full recomputation for one employee from evaluation history.

        Raises:
            Employee.DoesNotExist: when the employee does not exist
        """
        employee = Employee.objects.get(pk=employee_id)
        templates = self._load_templates()
        result = self.score_employee(
            employee,
            templates,
            self._load_evaluations([employee.pk], templates),
            list(SectionParticipation.objects.filter(year=self.year, employee=employee)),
            OverrideResolver(employee_ids=[employee.pk]),
        )
        return {
            "employee_id": employee.pk,
            "year": self.year,
            "objectives": [item.as_dict() for item in result.objectives],
            "aptitudes": [item.as_dict() for item in result.aptitudes],
            "objective_score": quantize_decimal(result.objective_score),
            "aptitude_score": quantize_decimal(result.aptitude_score),
            "global": result.global_score,
        }


def compute_scores(employee_ids: Iterable[int], year: int, official_only: bool = False) -> List[EmployeeScore]:
    return ScoringService(year, official_only=official_only).compute_scores(employee_ids)


def recompute_annual(employee_id: int, year: int) -> dict:
    return ScoringService(year).recompute_annual(employee_id)
