"""Evaluation workflow.

Every state change of an evaluation goes through ``EvaluationWorkflow.transition``,
which looks the action up in ``TRANSITIONS``, checks the current state, then
the actor's guard, applies the effect and appends exactly one timeline entry.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from django.db import IntegrityError, transaction
from django.db.models import prefetch_related_objects
from django.utils import timezone
from django.utils.translation import gettext as _
from rest_framework.exceptions import APIException, ValidationError

from apps.performance.constants import (
    AcknowledgementStatus,
    AssignmentKind,
    EvaluationAction,
    EvaluationStatus,
    GoalUnit,
)
from apps.performance.exceptions import EvaluationNotFound, InvalidTransition, TransitionNotPermitted
from apps.performance.models import Evaluation, EvaluationTimelineEntry, GoalResult
from apps.performance.services.scoring import rescore_evaluations, template_applies

logger = logging.getLogger(__name__)

CAPABILITY_EDIT = "evaluation.edit"
CAPABILITY_CLOSE = "evaluation.close"
CAPABILITY_REOPEN = "evaluation.reopen"


@dataclass(frozen=True)
class TransitionRule:
    allowed_from: frozenset
    next_status: Optional[str] = None
    guard: Optional[Callable] = None
    effect: Optional[Callable] = None


def _has_capability(actor, capability: str) -> bool:
    return actor is not None and actor.has_capability(capability)


def is_subject_employee(actor, evaluation) -> bool:
    return actor is not None and evaluation.employee.user_id is not None and evaluation.employee.user_id == actor.pk


def can_edit(actor, evaluation) -> bool:
    if actor is None:
        return False
    return evaluation.evaluator_id == actor.pk or actor.has_capability(CAPABILITY_EDIT)


def can_close(actor, evaluation) -> bool:
    return _has_capability(actor, CAPABILITY_CLOSE)


def can_reopen(actor, evaluation) -> bool:
    return _has_capability(actor, CAPABILITY_REOPEN)


def _parse_decimal(value, field: str, errors: dict) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        errors[field] = [_("A valid number is required.")]
        return None
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        errors[field] = [_("A valid number is required.")]
        return None
    if not parsed.is_finite():
        errors[field] = [_("A valid number is required.")]
        return None
    return parsed


def _parse_binary(value, field: str, errors: dict) -> Optional[Decimal]:
    if isinstance(value, bool):
        return Decimal(1) if value else Decimal(0)
    if value in (0, 1, "0", "1"):
        return Decimal(str(value))
    errors[field] = [_("Binary goals accept true/false or 0/1.")]
    return None


def clean_edit_payload(evaluation, payload: dict) -> dict:
    """Validate an edit payload against the evaluation's template.

    Writes are strict: unknown goals, unparsable numbers and out-of-range
    ratings or scores are rejected before anything is saved.

    Raises:
        ValidationError: with a ``{field: [message]}`` payload
    """
    template = evaluation.template
    errors = {}
    cleaned = {}

    goal_items = payload.get("goal_results")
    if goal_items:
        if template.kind != AssignmentKind.OBJECTIVE:
            errors["goal_results"] = [_("Goal results can only be submitted for objectives.")]
        else:
            goals = {goal.pk: goal for goal in template.goals.all()}
            cleaned_goals = []
            for index, item in enumerate(goal_items):
                field = f"goal_results[{index}]"
                goal = goals.get(item.get("goal"))
                if goal is None:
                    errors[field] = [_("Goal does not belong to this template.")]
                    continue
                raw = item.get("submitted_value")
                if raw is None:
                    cleaned_goals.append((goal, None))
                    continue
                if goal.unit == GoalUnit.BINARY:
                    value = _parse_binary(raw, field, errors)
                else:
                    value = _parse_decimal(raw, field, errors)
                if value is not None:
                    cleaned_goals.append((goal, value))
            cleaned["goal_results"] = cleaned_goals

    has_goals = template.kind == AssignmentKind.OBJECTIVE and template.goals.exists()

    if payload.get("rating") is not None:
        if template.kind != AssignmentKind.APTITUDE:
            errors["rating"] = [_("Ratings can only be given to aptitudes.")]
        else:
            rating = _parse_decimal(payload["rating"], "rating", errors)
            if rating is not None and not (1 <= rating <= template.rating_scale_max):
                errors["rating"] = [
                    _("Rating must be between 1 and %(max)s.") % {"max": template.rating_scale_max}
                ]
            cleaned["rating"] = rating

    if payload.get("score") is not None:
        if has_goals:
            errors["score"] = [_("The score of an objective with goals is derived from its goal results.")]
        else:
            score = _parse_decimal(payload["score"], "score", errors)
            if score is not None and not (0 <= score <= 100):
                errors["score"] = [_("Score must be between 0 and 100.")]
            cleaned["score"] = score

    if "rating" in cleaned and "score" in cleaned:
        errors["score"] = [_("Provide either a rating or a score, not both.")]

    if errors:
        raise ValidationError(errors)
    return cleaned


def evaluation_snapshot(evaluation) -> dict:
    return {
        "status": evaluation.status,
        "score": evaluation.score,
        "rating": evaluation.rating,
        "goal_results": [
            {
                "goal_id": result.goal_id,
                "goal_name": result.goal_name,
                "submitted_value": result.submitted_value,
                "evaluated_value": result.evaluated_value,
                "score": result.score,
                "met": result.met,
            }
            for result in evaluation.goal_results.all()
        ],
    }


def build_timeline_entry(evaluation, actor, action, from_status="", to_status="", note="", snapshot=None):
    return EvaluationTimelineEntry(
        evaluation=evaluation,
        actor=actor,
        action=action,
        from_status=from_status or "",
        to_status=to_status or "",
        note=note or "",
        snapshot=snapshot,
    )


def rescore_history(template, employee_id, current=None):
    """Rescore all evaluations of one employee for ``template`` and persist the derived values.

    ``current`` (already locked and modified in memory) replaces its stored
    copy and is left for the caller to save.

    Returns:
        Tuple of (evaluations in period order, previous score by evaluation id)
    """
    queryset = Evaluation.objects.filter(template=template, employee_id=employee_id)
    if current is not None:
        queryset = queryset.exclude(pk=current.pk)
    evaluations = list(queryset.prefetch_related("goal_results"))
    if current is not None:
        prefetch_related_objects([current], "goal_results")
        evaluations.append(current)

    previous = {evaluation.pk: evaluation.score for evaluation in evaluations}
    evaluations = rescore_evaluations(template, evaluations)

    GoalResult.objects.bulk_update(
        [result for evaluation in evaluations for result in evaluation.goal_results.all()],
        ["evaluated_value", "score", "met"],
    )
    Evaluation.objects.bulk_update(
        [evaluation for evaluation in evaluations if current is None or evaluation.pk != current.pk],
        ["score"],
    )
    return evaluations, previous


def _apply_edit(evaluation, actor, payload):
    cleaned = clean_edit_payload(evaluation, payload)

    for goal, value in cleaned.get("goal_results", []):
        GoalResult.objects.update_or_create(
            evaluation=evaluation,
            goal=goal,
            defaults={"goal_name": goal.name, "submitted_value": value},
        )
    if "rating" in cleaned:
        evaluation.rating = cleaned["rating"]
        evaluation.score = None
    if "score" in cleaned:
        evaluation.score = cleaned["score"]
        evaluation.rating = None
    if payload.get("comment") is not None:
        evaluation.manager_comment = payload["comment"]
    if evaluation.evaluator_id is None:
        evaluation.evaluator = actor

    evaluations, previous = rescore_history(evaluation.template, evaluation.employee_id, current=evaluation)

    # Cumulative goals carry running sums into later periods
    entries = [
        build_timeline_entry(
            item,
            actor,
            EvaluationAction.RECALCULATE,
            item.status,
            item.status,
            note=_("Rescored after edit of period %(period)s") % {"period": evaluation.period_code},
            snapshot={"previous_score": previous[item.pk], "score": item.score},
        )
        for item in evaluations
        if item.pk != evaluation.pk and previous[item.pk] != item.score
    ]
    if entries:
        EvaluationTimelineEntry.objects.bulk_create(entries)


def _apply_submit_to_employee(evaluation, actor, payload):
    evaluation.submitted_to_employee_at = timezone.now()
    if payload.get("comment") is not None:
        evaluation.manager_comment = payload["comment"]


def _acknowledge(status):
    def effect(evaluation, actor, payload):
        now = timezone.now()
        evaluation.acknowledgement_status = status
        evaluation.acknowledged_at = now
        evaluation.acknowledged_by = actor
        evaluation.submitted_to_hr_at = now
        if payload.get("comment") is not None:
            evaluation.employee_comment = payload["comment"]

    return effect


def _apply_submit_to_hr(evaluation, actor, payload):
    evaluation.submitted_to_hr_at = timezone.now()


def _apply_close(evaluation, actor, payload):
    evaluation.closed_at = timezone.now()
    evaluation.hr_reviewer = actor
    if payload.get("comment") is not None:
        evaluation.hr_comment = payload["comment"]


def _apply_reopen(evaluation, actor, payload):
    evaluation.closed_at = None


TRANSITIONS = {
    EvaluationAction.EDIT: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.DRAFT}),
        guard=can_edit,
        effect=_apply_edit,
    ),
    EvaluationAction.SUBMIT_TO_EMPLOYEE: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.DRAFT}),
        next_status=EvaluationStatus.PENDING_EMPLOYEE,
        effect=_apply_submit_to_employee,
    ),
    EvaluationAction.EMPLOYEE_ACKNOWLEDGE: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.PENDING_EMPLOYEE, EvaluationStatus.DRAFT}),
        next_status=EvaluationStatus.PENDING_HR,
        guard=is_subject_employee,
        effect=_acknowledge(AcknowledgementStatus.AGREE),
    ),
    EvaluationAction.EMPLOYEE_CONTEST: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.PENDING_EMPLOYEE, EvaluationStatus.DRAFT}),
        next_status=EvaluationStatus.PENDING_HR,
        guard=is_subject_employee,
        effect=_acknowledge(AcknowledgementStatus.CONTEST),
    ),
    EvaluationAction.SUBMIT_TO_HR: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.DRAFT, EvaluationStatus.PENDING_EMPLOYEE}),
        next_status=EvaluationStatus.PENDING_HR,
        effect=_apply_submit_to_hr,
    ),
    EvaluationAction.CLOSE: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.PENDING_HR}),
        next_status=EvaluationStatus.CLOSED,
        guard=can_close,
        effect=_apply_close,
    ),
    EvaluationAction.BULK_CLOSE: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.PENDING_HR}),
        next_status=EvaluationStatus.CLOSED,
        guard=can_close,
        effect=_apply_close,
    ),
    EvaluationAction.REOPEN: TransitionRule(
        allowed_from=frozenset({EvaluationStatus.PENDING_HR, EvaluationStatus.CLOSED}),
        next_status=EvaluationStatus.DRAFT,
        guard=can_reopen,
        effect=_apply_reopen,
    ),
}


class EvaluationWorkflow:
    """Service for evaluation creation and workflow transitions."""

    @staticmethod
    def can_perform(actor, evaluation, action) -> bool:
        """Return True when ``actor`` may apply ``action`` to ``evaluation`` in its current state."""
        rule = TRANSITIONS.get(action)
        if rule is None or evaluation.status not in rule.allowed_from:
            return False
        return rule.guard is None or rule.guard(actor, evaluation)

    @staticmethod
    def available_actions(actor, evaluation) -> list:
        return [
            str(action)
            for action in TRANSITIONS
            if action != EvaluationAction.BULK_CLOSE and EvaluationWorkflow.can_perform(actor, evaluation, action)
        ]

    @staticmethod
    @transaction.atomic
    def transition(evaluation_id, action, actor, payload: Optional[dict] = None) -> Evaluation:
        """Apply one workflow action to an evaluation.

        The state check runs before the actor's guard, so an illegal state is
        always reported as a conflict.

        Args:
            evaluation_id: Evaluation id (an Evaluation instance is accepted too)
            action: EvaluationAction value
            actor: User performing the action
            payload: Action data; ``note`` goes to the timeline, ``comment`` to the
                role's comment field, EDIT also takes ``goal_results``, ``rating``, ``score``

        Returns:
            The updated Evaluation

        Raises:
            ValidationError: unknown action or invalid edit payload
            EvaluationNotFound: evaluation does not exist
            InvalidTransition: action not allowed from the current state
            TransitionNotPermitted: actor fails the action's guard
        """
        payload = payload or {}
        rule = TRANSITIONS.get(action)
        if rule is None:
            raise ValidationError({"action": [_("Unknown workflow action: %(action)s") % {"action": action}]})

        pk = getattr(evaluation_id, "pk", evaluation_id)
        try:
            evaluation = (
                Evaluation.objects.select_for_update(of=("self",))
                .select_related("template", "employee")
                .get(pk=pk)
            )
        except Evaluation.DoesNotExist:
            raise EvaluationNotFound()

        if evaluation.status not in rule.allowed_from:
            raise InvalidTransition(action, evaluation.status, rule.allowed_from)
        if rule.guard is not None and not rule.guard(actor, evaluation):
            raise TransitionNotPermitted()

        from_status = evaluation.status
        if rule.effect is not None:
            rule.effect(evaluation, actor, payload)
        if rule.next_status is not None:
            evaluation.status = rule.next_status
        evaluation.save()

        build_timeline_entry(
            evaluation,
            actor,
            action,
            from_status,
            evaluation.status,
            note=payload.get("note", ""),
            snapshot=evaluation_snapshot(evaluation),
        ).save()

        logger.info(
            "Evaluation %s: %s %s -> %s by user %s",
            evaluation.pk,
            action,
            from_status,
            evaluation.status,
            getattr(actor, "pk", None),
        )
        return evaluation

    @staticmethod
    def get_or_create_evaluation(employee, template, period_code: str, actor=None, check_scope: bool = True):
        """Find or create the evaluation of (employee, template, period).

        A uniqueness violation on insert means a concurrent request created the
        row first; the existing row is returned instead.

        Returns:
            Tuple of (evaluation, created)

        Raises:
            ValidationError: inactive template, unknown period code or template not applicable
        """
        lookup = {"employee": employee, "template": template, "period_code": period_code}
        existing = Evaluation.objects.filter(**lookup).first()
        if existing is not None:
            return existing, False

        if not template.is_active:
            raise ValidationError({"template": [_("Template is not active.")]})
        try:
            period_codes = {period.code for period in template.get_periods()}
        except ValueError as e:
            raise ValidationError({"template": [str(e)]}) from e
        if period_code not in period_codes:
            raise ValidationError(
                {"period_code": [_("Period %(code)s is not tracked by this template.") % {"code": period_code}]}
            )
        if check_scope and not template_applies(employee, template):
            raise ValidationError({"employee": [_("Template does not apply to this employee.")]})

        try:
            with transaction.atomic():
                evaluation = Evaluation.objects.create(year=template.year, created_by=actor, **lookup)
                build_timeline_entry(
                    evaluation, actor, EvaluationAction.CREATE, "", EvaluationStatus.DRAFT
                ).save()
        except IntegrityError:
            logger.info(
                "Evaluation for employee %s, template %s, period %s created concurrently",
                employee.pk,
                template.pk,
                period_code,
            )
            return Evaluation.objects.get(**lookup), False
        return evaluation, True

    @staticmethod
    def bulk_close(actor, evaluation_ids=None, period_code=None, template_id=None, note: str = "") -> dict:
        """Close every matching PENDING_HR evaluation independently.

        Either an explicit id list or a (period, template) filter is required.
        With an id list, ids that are missing or not pending HR are reported as
        failures; with a filter only PENDING_HR evaluations are picked up.

        Returns:
            dict with ``processed``, ``closed``, ``closed_ids`` and ``failures``
        """
        if not can_close(actor, None):
            raise TransitionNotPermitted()
        if not evaluation_ids and not (period_code or template_id):
            raise ValidationError(
                {"non_field_errors": [_("Provide evaluation ids or a period/template filter.")]}
            )

        if evaluation_ids:
            candidate_ids = list(dict.fromkeys(evaluation_ids))
        else:
            queryset = Evaluation.objects.filter(status=EvaluationStatus.PENDING_HR)
            if period_code:
                queryset = queryset.filter(period_code=period_code)
            if template_id:
                queryset = queryset.filter(template_id=template_id)
            candidate_ids = list(queryset.order_by("id").values_list("id", flat=True))

        closed_ids, failures = [], []
        for pk in candidate_ids:
            try:
                EvaluationWorkflow.transition(pk, EvaluationAction.BULK_CLOSE, actor, {"note": note})
            except APIException as e:
                logger.warning("Bulk close skipped evaluation %s: %s", pk, e.detail)
                failures.append({"id": pk, "error": str(e.detail)})
            except Exception as e:
                logger.exception("Bulk close failed for evaluation %s", pk)
                failures.append({"id": pk, "error": str(e)})
            else:
                closed_ids.append(pk)

        logger.info(
            "Bulk close by user %s: %s processed, %s closed, %s failed",
            getattr(actor, "pk", None),
            len(candidate_ids),
            len(closed_ids),
            len(failures),
        )
        return {
            "processed": len(candidate_ids),
            "closed": len(closed_ids),
            "closed_ids": closed_ids,
            "failures": failures,
        }

    @staticmethod
    @transaction.atomic
    def recalculate_template_evaluations(template, employee=None, actor=None) -> dict:
        """Rescore stored evaluations of ``template`` with its current goal configuration.

        Workflow state is left untouched; each rescored evaluation gets a
        RECALCULATE timeline entry.
        """
        queryset = Evaluation.objects.filter(template=template)
        if employee is not None:
            queryset = queryset.filter(employee=employee)
        employee_ids = list(queryset.order_by("employee_id").values_list("employee_id", flat=True).distinct())

        entries = []
        changed = 0
        for employee_id in employee_ids:
            evaluations, previous = rescore_history(template, employee_id)
            for evaluation in evaluations:
                if previous[evaluation.pk] != evaluation.score:
                    changed += 1
                entries.append(
                    build_timeline_entry(
                        evaluation,
                        actor,
                        EvaluationAction.RECALCULATE,
                        evaluation.status,
                        evaluation.status,
                        snapshot={"previous_score": previous[evaluation.pk], "score": evaluation.score},
                    )
                )
        EvaluationTimelineEntry.objects.bulk_create(entries)

        logger.info(
            "Recalculated template %s: %s employees, %s evaluations, %s changed",
            template.pk,
            len(employee_ids),
            len(entries),
            changed,
        )
        return {
            "template_id": template.pk,
            "employees": len(employee_ids),
            "evaluations": len(entries),
            "changed": changed,
        }


can_perform = EvaluationWorkflow.can_perform
transition = EvaluationWorkflow.transition
get_or_create_evaluation = EvaluationWorkflow.get_or_create_evaluation
bulk_close = EvaluationWorkflow.bulk_close
recalculate_template_evaluations = EvaluationWorkflow.recalculate_template_evaluations
