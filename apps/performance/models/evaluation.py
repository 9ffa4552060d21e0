from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from apps.performance.constants import AcknowledgementStatus, EvaluationAction, EvaluationStatus
from apps.performance.exceptions import TimelineEntryImmutable
from libs.models import BaseModel


class Evaluation(BaseModel):
    """Evaluation of one employee against one template for one period.

    Unique on (employee, template, period_code); concurrent creation relies
    on that constraint. Workflow state changes go through
    ``apps.performance.services.workflow`` which also appends the timeline.

    Attributes:
        score: Derived period score (objective: goal aggregate; aptitude: rating converted to 0-100)
        rating: Aptitude rating on the template's scale
        acknowledgement_status: Employee response (AGREE / CONTEST)
    """

    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.PROTECT,
        related_name="evaluations",
        verbose_name="Employee",
        help_text="Employee being evaluated",
    )
    template = models.ForeignKey(
        "performance.AssignmentTemplate",
        on_delete=models.PROTECT,
        related_name="evaluations",
        verbose_name="Template",
    )
    period_code = models.CharField(
        max_length=16,
        verbose_name="Period code",
        help_text="Stable code of the tracked period, e.g. 2024M09 or 2024Q1",
    )
    year = models.PositiveIntegerField(db_index=True, verbose_name="Fiscal year")
    status = models.CharField(
        max_length=20,
        choices=EvaluationStatus.choices,
        default=EvaluationStatus.DRAFT,
        db_index=True,
        verbose_name="Status",
    )
    score = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Score",
        help_text="Derived score of this period",
    )
    rating = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Rating",
        help_text="Aptitude rating on the template's scale",
    )

    evaluator = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="evaluations_as_evaluator",
        verbose_name="Evaluator",
    )
    hr_reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="evaluations_as_hr_reviewer",
        verbose_name="HR reviewer",
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Created by",
    )

    manager_comment = models.TextField(blank=True, verbose_name="Manager comment")
    employee_comment = models.TextField(blank=True, verbose_name="Employee comment")
    hr_comment = models.TextField(blank=True, verbose_name="HR comment")

    acknowledgement_status = models.CharField(
        max_length=10,
        choices=AcknowledgementStatus.choices,
        blank=True,
        verbose_name="Acknowledgement",
    )
    acknowledged_at = models.DateTimeField(null=True, blank=True, verbose_name="Acknowledged at")
    acknowledged_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Acknowledged by",
    )

    submitted_to_employee_at = models.DateTimeField(null=True, blank=True, verbose_name="Submitted to employee at")
    submitted_to_hr_at = models.DateTimeField(null=True, blank=True, verbose_name="Submitted to HR at")
    closed_at = models.DateTimeField(null=True, blank=True, verbose_name="Closed at")

    class Meta:
        verbose_name = "Evaluation"
        verbose_name_plural = "Evaluations"
        db_table = "performance_evaluation"
        ordering = ["employee_id", "template_id", "period_code"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "template", "period_code"],
                name="performance_evaluation_unique_period",
            ),
        ]
        indexes = [
            models.Index(fields=["year", "status"], name="perf_eval_year_status_idx"),
            models.Index(fields=["template", "period_code"], name="perf_eval_template_period_idx"),
        ]

    def __str__(self):
        return f"{self.employee_id} / {self.template_id} / {self.period_code} ({self.status})"

    @property
    def is_closed(self) -> bool:
        return self.status == EvaluationStatus.CLOSED


class GoalResult(BaseModel):
    """Submitted value and derived score of one goal in one evaluation."""

    evaluation = models.ForeignKey(
        Evaluation,
        on_delete=models.CASCADE,
        related_name="goal_results",
        verbose_name="Evaluation",
    )
    goal = models.ForeignKey(
        "performance.GoalDefinition",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="results",
        verbose_name="Goal",
    )
    goal_name = models.CharField(max_length=255, blank=True, verbose_name="Goal name")
    submitted_value = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name="Submitted value",
    )
    evaluated_value = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name="Evaluated value",
        help_text="Value the scorer used; the running sum for cumulative goals",
    )
    score = models.DecimalField(max_digits=7, decimal_places=2, default=0, verbose_name="Score")
    met = models.BooleanField(default=False, verbose_name="Met")

    class Meta:
        verbose_name = "Goal result"
        verbose_name_plural = "Goal results"
        db_table = "performance_goal_result"
        ordering = ["evaluation_id", "goal__order", "id"]
        constraints = [
            models.UniqueConstraint(fields=["evaluation", "goal"], name="performance_goal_result_unique_goal"),
        ]

    def __str__(self):
        return f"{self.goal_name}: {self.submitted_value} -> {self.score}"


class EvaluationTimelineEntry(BaseModel):
    """Append-only audit record of one workflow action; ``created_at`` is the timestamp."""

    evaluation = models.ForeignKey(
        Evaluation,
        on_delete=models.PROTECT,
        related_name="timeline",
        verbose_name="Evaluation",
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Actor",
    )
    action = models.CharField(max_length=30, choices=EvaluationAction.choices, verbose_name="Action")
    from_status = models.CharField(max_length=20, blank=True, verbose_name="From status")
    to_status = models.CharField(max_length=20, blank=True, verbose_name="To status")
    note = models.TextField(blank=True, verbose_name="Note")
    snapshot = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder, verbose_name="Snapshot")

    class Meta:
        verbose_name = "Evaluation timeline entry"
        verbose_name_plural = "Evaluation timeline entries"
        db_table = "performance_evaluation_timeline"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.evaluation_id} {self.action} @ {self.created_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise TimelineEntryImmutable("Timeline entries cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TimelineEntryImmutable("Timeline entries cannot be deleted")
