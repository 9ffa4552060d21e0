"""Tests for the evaluation workflow service."""

from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from apps.performance.constants import AcknowledgementStatus, EvaluationAction, EvaluationStatus
from apps.performance.exceptions import (
    EvaluationNotFound,
    InvalidTransition,
    TimelineEntryImmutable,
    TransitionNotPermitted,
)
from apps.performance.models import Evaluation, EvaluationTimelineEntry
from apps.performance.services import TRANSITIONS, EvaluationWorkflow


def timeline_actions(evaluation):
    return list(evaluation.timeline.order_by("created_at", "id").values_list("action", flat=True))


@pytest.mark.django_db
class TestGetOrCreateEvaluation:
    def test_creation_is_idempotent(self, employee, objective_template, hr_user):
        """Test that a second call returns the same evaluation and records no second CREATE."""
        first, created = EvaluationWorkflow.get_or_create_evaluation(employee, objective_template, "2024Q2", hr_user)
        second, created_again = EvaluationWorkflow.get_or_create_evaluation(
            employee, objective_template, "2024Q2", hr_user
        )

        assert created is True
        assert created_again is False
        assert first.pk == second.pk
        assert first.status == EvaluationStatus.DRAFT
        assert first.year == 2024
        assert timeline_actions(first) == [EvaluationAction.CREATE]

    def test_unknown_period_code_is_rejected(self, employee, objective_template):
        with pytest.raises(ValidationError) as exc_info:
            EvaluationWorkflow.get_or_create_evaluation(employee, objective_template, "2024M01")

        assert "period_code" in exc_info.value.detail

    def test_inactive_template_is_rejected(self, employee, objective_template):
        objective_template.is_active = False
        objective_template.save()

        with pytest.raises(ValidationError):
            EvaluationWorkflow.get_or_create_evaluation(employee, objective_template, "2024Q1")

    def test_template_outside_employee_scope_is_rejected(self, make_employee, other_department, objective_template):
        outsider = make_employee(department=other_department)

        with pytest.raises(ValidationError) as exc_info:
            EvaluationWorkflow.get_or_create_evaluation(outsider, objective_template, "2024Q1")

        assert "employee" in exc_info.value.detail


@pytest.mark.django_db
class TestTransitions:
    def test_full_review_cycle(self, evaluation, employee, manager_user, hr_user):
        """Test DRAFT -> PENDING_EMPLOYEE -> PENDING_HR -> CLOSED with one timeline entry per step."""
        EvaluationWorkflow.transition(
            evaluation.pk, EvaluationAction.SUBMIT_TO_EMPLOYEE, manager_user, {"comment": "Good quarter"}
        )
        EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.EMPLOYEE_ACKNOWLEDGE, employee.user)
        closed = EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.CLOSE, hr_user, {"note": "ok"})

        assert closed.status == EvaluationStatus.CLOSED
        assert closed.closed_at is not None
        assert closed.hr_reviewer == hr_user
        assert closed.manager_comment == "Good quarter"
        assert closed.acknowledgement_status == AcknowledgementStatus.AGREE
        assert timeline_actions(closed) == [
            EvaluationAction.CREATE,
            EvaluationAction.SUBMIT_TO_EMPLOYEE,
            EvaluationAction.EMPLOYEE_ACKNOWLEDGE,
            EvaluationAction.CLOSE,
        ]
        last = closed.timeline.order_by("-id").first()
        assert (last.from_status, last.to_status, last.note) == (
            EvaluationStatus.PENDING_HR,
            EvaluationStatus.CLOSED,
            "ok",
        )
        assert last.actor == hr_user

    def test_employee_contest_moves_to_hr(self, evaluation, employee):
        contested = EvaluationWorkflow.transition(
            evaluation.pk, EvaluationAction.EMPLOYEE_CONTEST, employee.user, {"comment": "Too low"}
        )

        assert contested.status == EvaluationStatus.PENDING_HR
        assert contested.acknowledgement_status == AcknowledgementStatus.CONTEST
        assert contested.employee_comment == "Too low"

    def test_closed_evaluation_only_accepts_reopen(self, evaluation, close_evaluation, hr_user):
        close_evaluation(evaluation)

        for action in TRANSITIONS:
            if action == EvaluationAction.REOPEN:
                continue
            with pytest.raises(InvalidTransition):
                EvaluationWorkflow.transition(evaluation.pk, action, hr_user)

        reopened = EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.REOPEN, hr_user)
        assert reopened.status == EvaluationStatus.DRAFT
        assert reopened.closed_at is None

    def test_state_is_checked_before_permission(self, evaluation, employee):
        """Test that an illegal state is reported as a conflict even for an unauthorized actor."""
        with pytest.raises(InvalidTransition) as exc_info:
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.CLOSE, employee.user)

        assert exc_info.value.status_code == 409
        assert exc_info.value.required_states == [EvaluationStatus.PENDING_HR]

    def test_manager_cannot_close(self, evaluation, manager_user):
        EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.SUBMIT_TO_HR, manager_user)

        with pytest.raises(TransitionNotPermitted):
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.CLOSE, manager_user)

        evaluation.refresh_from_db()
        assert evaluation.status == EvaluationStatus.PENDING_HR

    def test_only_the_subject_employee_acknowledges(self, evaluation, make_employee, make_user, manager_user):
        colleague = make_employee(user=make_user("colleague", "employee"))
        EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.SUBMIT_TO_EMPLOYEE, manager_user)

        with pytest.raises(TransitionNotPermitted):
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.EMPLOYEE_ACKNOWLEDGE, colleague.user)

    def test_employee_cannot_edit(self, evaluation, employee, revenue_goal):
        with pytest.raises(TransitionNotPermitted):
            EvaluationWorkflow.transition(
                evaluation.pk,
                EvaluationAction.EDIT,
                employee.user,
                {"goal_results": [{"goal": revenue_goal.pk, "submitted_value": 90}]},
            )

    def test_failed_transition_leaves_no_timeline_entry(self, evaluation, manager_user):
        with pytest.raises(InvalidTransition):
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.CLOSE, manager_user)

        assert timeline_actions(evaluation) == [EvaluationAction.CREATE]

    def test_unknown_action(self, evaluation, hr_user):
        with pytest.raises(ValidationError):
            EvaluationWorkflow.transition(evaluation.pk, "APPROVE", hr_user)

    def test_missing_evaluation(self, hr_user):
        with pytest.raises(EvaluationNotFound):
            EvaluationWorkflow.transition(999999, EvaluationAction.SUBMIT_TO_HR, hr_user)

    def test_available_actions(self, evaluation, employee, hr_user):
        assert EvaluationWorkflow.available_actions(employee.user, evaluation) == [
            EvaluationAction.SUBMIT_TO_EMPLOYEE,
            EvaluationAction.EMPLOYEE_ACKNOWLEDGE,
            EvaluationAction.EMPLOYEE_CONTEST,
            EvaluationAction.SUBMIT_TO_HR,
        ]
        assert EvaluationAction.EDIT in EvaluationWorkflow.available_actions(hr_user, evaluation)
        assert EvaluationWorkflow.can_perform(hr_user, evaluation, EvaluationAction.CLOSE) is False


@pytest.mark.django_db
class TestEdit:
    def test_edit_scores_goal_results(self, evaluation, revenue_goal, hr_user):
        edited = EvaluationWorkflow.transition(
            evaluation.pk,
            EvaluationAction.EDIT,
            hr_user,
            {"goal_results": [{"goal": revenue_goal.pk, "submitted_value": "60"}]},
        )

        result = edited.goal_results.get()
        assert result.submitted_value == Decimal("60")
        assert result.score == Decimal("75.00")
        assert result.met is False
        assert edited.score == Decimal("75.00")
        assert edited.status == EvaluationStatus.DRAFT
        assert edited.evaluator == hr_user

    def test_edit_rejects_foreign_goal(self, evaluation, cumulative_template, hr_user):
        foreign_goal = cumulative_template.goals.get()

        with pytest.raises(ValidationError) as exc_info:
            EvaluationWorkflow.transition(
                evaluation.pk,
                EvaluationAction.EDIT,
                hr_user,
                {"goal_results": [{"goal": foreign_goal.pk, "submitted_value": 1}]},
            )

        assert "goal_results[0]" in exc_info.value.detail

    def test_edit_rejects_unparsable_value(self, evaluation, revenue_goal, hr_user):
        with pytest.raises(ValidationError) as exc_info:
            EvaluationWorkflow.transition(
                evaluation.pk,
                EvaluationAction.EDIT,
                hr_user,
                {"goal_results": [{"goal": revenue_goal.pk, "submitted_value": "lots"}]},
            )

        assert "goal_results[0]" in exc_info.value.detail
        assert not evaluation.goal_results.exists()

    def test_rating_and_score_rules(self, evaluation, employee, aptitude_template, hr_user):
        with pytest.raises(ValidationError) as exc_info:
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.EDIT, hr_user, {"rating": 4})
        assert "rating" in exc_info.value.detail

        with pytest.raises(ValidationError) as exc_info:
            EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.EDIT, hr_user, {"score": 80})
        assert "score" in exc_info.value.detail

        aptitude, _created = EvaluationWorkflow.get_or_create_evaluation(employee, aptitude_template, "2024A1")
        with pytest.raises(ValidationError) as exc_info:
            EvaluationWorkflow.transition(aptitude.pk, EvaluationAction.EDIT, hr_user, {"rating": 6})
        assert "rating" in exc_info.value.detail

        rated = EvaluationWorkflow.transition(aptitude.pk, EvaluationAction.EDIT, hr_user, {"rating": 4})
        assert rated.score == Decimal("80.00")

    def test_edit_rescores_later_cumulative_periods(self, employee, cumulative_template, record_goal):
        """Test that editing an earlier period carries the new running sum into later periods."""
        q1 = record_goal(employee, cumulative_template, "2024Q1", [30])
        q2 = record_goal(employee, cumulative_template, "2024Q2", [30])
        assert q1.score == Decimal("37.50")
        assert q2.score == Decimal("75.00")

        record_goal(employee, cumulative_template, "2024Q1", [50])

        q2.refresh_from_db()
        result = q2.goal_results.get()
        assert result.evaluated_value == Decimal("80")
        assert result.met is True
        assert q2.score == Decimal("100.00")
        recalculated = q2.timeline.filter(action=EvaluationAction.RECALCULATE).get()
        assert recalculated.snapshot == {"previous_score": "75.00", "score": "100.00"}


@pytest.mark.django_db
class TestTimeline:
    def test_entries_cannot_be_modified_or_deleted(self, evaluation):
        entry = evaluation.timeline.get()

        entry.note = "rewritten"
        with pytest.raises(TimelineEntryImmutable):
            entry.save()
        with pytest.raises(TimelineEntryImmutable):
            entry.delete()

        assert EvaluationTimelineEntry.objects.get(pk=entry.pk).note == ""


@pytest.mark.django_db
class TestBulkClose:
    def _pending(self, employee, template, period_code, hr_user):
        evaluation, _created = EvaluationWorkflow.get_or_create_evaluation(employee, template, period_code, hr_user)
        return EvaluationWorkflow.transition(evaluation.pk, EvaluationAction.SUBMIT_TO_HR, hr_user)

    def test_partial_failures_do_not_stop_the_batch(self, employee, objective_template, hr_user):
        first = self._pending(employee, objective_template, "2024Q1", hr_user)
        second = self._pending(employee, objective_template, "2024Q2", hr_user)
        draft, _created = EvaluationWorkflow.get_or_create_evaluation(employee, objective_template, "2024Q3")

        result = EvaluationWorkflow.bulk_close(hr_user, evaluation_ids=[first.pk, draft.pk, second.pk, 999999])

        assert result["processed"] == 4
        assert result["closed"] == 2
        assert result["closed_ids"] == [first.pk, second.pk]
        assert [item["id"] for item in result["failures"]] == [draft.pk, 999999]
        assert Evaluation.objects.get(pk=draft.pk).status == EvaluationStatus.DRAFT
        assert Evaluation.objects.get(pk=first.pk).timeline.filter(action=EvaluationAction.BULK_CLOSE).count() == 1

    def test_filter_picks_pending_hr_only(self, employee, objective_template, hr_user):
        pending = self._pending(employee, objective_template, "2024Q1", hr_user)
        EvaluationWorkflow.get_or_create_evaluation(employee, objective_template, "2024Q2")

        result = EvaluationWorkflow.bulk_close(hr_user, template_id=objective_template.pk)

        assert result["closed_ids"] == [pending.pk]
        assert result["failures"] == []

    def test_requires_close_capability(self, manager_user):
        with pytest.raises(TransitionNotPermitted):
            EvaluationWorkflow.bulk_close(manager_user, evaluation_ids=[1])

    def test_requires_ids_or_filter(self, hr_user):
        with pytest.raises(ValidationError):
            EvaluationWorkflow.bulk_close(hr_user)


@pytest.mark.django_db
class TestRecalculate:
    def test_recalculate_applies_new_goal_configuration(self, evaluation, revenue_goal, hr_user):
        EvaluationWorkflow.transition(
            evaluation.pk,
            EvaluationAction.EDIT,
            hr_user,
            {"goal_results": [{"goal": revenue_goal.pk, "submitted_value": 60}]},
        )
        revenue_goal.expected_value = Decimal("120")
        revenue_goal.save()

        result = EvaluationWorkflow.recalculate_template_evaluations(revenue_goal.template, actor=hr_user)

        evaluation.refresh_from_db()
        assert result == {"template_id": revenue_goal.template_id, "employees": 1, "evaluations": 1, "changed": 1}
        assert evaluation.score == Decimal("50.00")
        assert evaluation.status == EvaluationStatus.DRAFT
        assert evaluation.timeline.filter(action=EvaluationAction.RECALCULATE).count() == 1
