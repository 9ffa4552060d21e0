from decimal import Decimal

import pytest

from apps.payroll.constants import BonusScaleType
from apps.payroll.models import BonusConfig
from apps.performance.constants import AssignmentKind, EvaluationAction, ReviewFrequency, ScopeType
from apps.performance.models import AssignmentTemplate
from apps.performance.services import EvaluationWorkflow


@pytest.fixture(autouse=True)
def objective_only_mix(settings):
    """Make the global score equal the objective score."""
    settings.PERFORMANCE_OBJECTIVE_WEIGHT = "1"
    settings.PERFORMANCE_APTITUDE_WEIGHT = "0"


@pytest.fixture
def bonus_config(db):
    """Linear 2024 scale: nothing below 60, 0 at 60 rising to 30% at 100."""
    return BonusConfig.objects.create(
        year=2024,
        scale_type=BonusScaleType.LINEAR,
        min_fraction=Decimal("0"),
        max_fraction=Decimal("0.3"),
        threshold=Decimal("60"),
        floor_fraction=Decimal("0"),
        target_multiple=Decimal("1.00"),
    )


@pytest.fixture
def annual_objective(db, department):
    """Annual department objective scored directly (no goals)."""
    return AssignmentTemplate.objects.create(
        kind=AssignmentKind.OBJECTIVE,
        year=2024,
        scope_type=ScopeType.DEPARTMENT,
        department=department,
        name="Annual results",
        base_weight=Decimal("100"),
        frequency=ReviewFrequency.ANNUAL,
    )


@pytest.fixture
def give_score(annual_objective, hr_user):
    """Record ``score`` for an employee's annual objective and optionally close it.

    Employees outside the fixture department get a copy of the objective for
    their own department.
    """

    def _give_score(employee, score, close=True):
        template = annual_objective
        if employee.department_id != annual_objective.department_id:
            template, _created = AssignmentTemplate.objects.get_or_create(
                kind=AssignmentKind.OBJECTIVE,
                year=2024,
                scope_type=ScopeType.DEPARTMENT,
                department_id=employee.department_id,
                name=annual_objective.name,
                defaults={"base_weight": Decimal("100"), "frequency": ReviewFrequency.ANNUAL},
            )
        evaluation, _created = EvaluationWorkflow.get_or_create_evaluation(employee, template, "2024A1", actor=hr_user)
        EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.EDIT, hr_user, {"score": score})
        if close:
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.SUBMIT_TO_HR, hr_user)
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.CLOSE, hr_user)
        return evaluation

    return _give_score
