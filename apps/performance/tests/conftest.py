from decimal import Decimal

import pytest

from apps.performance.constants import (
    AccumulationMode,
    AssignmentKind,
    EvaluationAction,
    ReviewFrequency,
    ScopeType,
)
from apps.performance.models import AssignmentTemplate, GoalDefinition
from apps.performance.services import EvaluationWorkflow

YEAR = 2024


@pytest.fixture
def objective_template(db, department):
    """Quarterly department objective weighted 60."""
    return AssignmentTemplate.objects.create(
        kind=AssignmentKind.OBJECTIVE,
        year=YEAR,
        scope_type=ScopeType.DEPARTMENT,
        department=department,
        name="Sales volume",
        base_weight=Decimal("60"),
        frequency=ReviewFrequency.QUARTERLY,
    )


@pytest.fixture
def revenue_goal(objective_template):
    """Revenue >= 80 with effort credit, averaged over the periods."""
    return GoalDefinition.objects.create(
        template=objective_template,
        name="Revenue",
        expected_value=Decimal("80"),
        effort_credit=True,
    )


@pytest.fixture
def cumulative_template(db, department):
    template = AssignmentTemplate.objects.create(
        kind=AssignmentKind.OBJECTIVE,
        year=YEAR,
        scope_type=ScopeType.DEPARTMENT,
        department=department,
        name="New contracts",
        base_weight=Decimal("40"),
        frequency=ReviewFrequency.QUARTERLY,
    )
    GoalDefinition.objects.create(
        template=template,
        name="Contracts signed",
        expected_value=Decimal("80"),
        effort_credit=True,
        accumulation_mode=AccumulationMode.CUMULATIVE,
    )
    return template


@pytest.fixture
def aptitude_template(db, department):
    """Annual department aptitude rated 1-5."""
    return AssignmentTemplate.objects.create(
        kind=AssignmentKind.APTITUDE,
        year=YEAR,
        scope_type=ScopeType.DEPARTMENT,
        department=department,
        name="Teamwork",
        base_weight=Decimal("40"),
        frequency=ReviewFrequency.ANNUAL,
    )


@pytest.fixture
def evaluation(employee, objective_template, revenue_goal, hr_user):
    """DRAFT evaluation of ``employee`` for the first quarter."""
    evaluation, _created = EvaluationWorkflow.get_or_create_evaluation(
        employee, objective_template, "2024Q1", actor=hr_user
    )
    return evaluation


@pytest.fixture
def record_goal(hr_user):
    """Create (if needed) and edit an objective evaluation with one value per goal."""

    def _record(employee, template, period_code, values):
        evaluation, _created = EvaluationWorkflow.get_or_create_evaluation(
            employee, template, period_code, actor=hr_user
        )
        goals = list(template.goals.all())
        payload = {
            "goal_results": [{"goal": goal.pk, "submitted_value": value} for goal, value in zip(goals, values)]
        }
        return EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.EDIT, hr_user, payload)

    return _record


@pytest.fixture
def record_rating(hr_user):
    def _record(employee, template, period_code, rating):
        evaluation, _created = EvaluationWorkflow.get_or_create_evaluation(
            employee, template, period_code, actor=hr_user
        )
        return EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.EDIT, hr_user, {"rating": rating})

    return _record


@pytest.fixture
def close_evaluation(hr_user):
    """Move a DRAFT evaluation through HR review to CLOSED."""

    def _close(evaluation):
        EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.SUBMIT_TO_HR, hr_user)
        return EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.CLOSE, hr_user)

    return _close
