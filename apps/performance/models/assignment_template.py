from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext as _

from apps.performance.constants import (
    DEFAULT_OVERACHIEVEMENT_CAP,
    DEFAULT_RATING_SCALE_MAX,
    AccumulationMode,
    AssignmentKind,
    ClosureRule,
    ComparisonOperator,
    GoalUnit,
    ReviewFrequency,
    ScopeType,
)
from apps.performance.utils.goal_scoring import GoalConfig
from apps.performance.utils.periods import generate_periods, review_window
from libs.models import BaseModel

SCOPE_TARGET_FIELDS = {
    ScopeType.DEPARTMENT: "department",
    ScopeType.SECTION: "section",
    ScopeType.EMPLOYEE: "employee",
}


def review_window_errors(year, window_start, window_end) -> dict:
    """Field errors for a review window that leaves no day inside the fiscal year."""
    if year is None or (window_start is None and window_end is None):
        return {}
    try:
        review_window(year, window_start, window_end, settings.PERFORMANCE_FISCAL_YEAR_START_MONTH)
    except ValueError:
        field = "window_start" if window_end is None else "window_end"
        return {field: _("The review window is empty for fiscal year %(year)s.") % {"year": year}}
    return {}


class AssignmentTemplate(BaseModel):
    """One trackable item (objective or aptitude) assigned to a scope for a fiscal year.

    Objectives carry an ordered list of GoalDefinition; aptitudes are rated
    directly on a ``1..rating_scale_max`` scale each period. Templates are
    soft-deactivated (``is_active=False``) instead of deleted once
    evaluations reference them.

    Attributes:
        kind: objective or aptitude
        year: Fiscal year the template applies to
        scope_type: department, section or employee
        department/section/employee: Scope target, exactly the one matching scope_type
        base_weight: Weight of the assignment in its block (0-100)
        frequency: Review frequency driving period generation
        window_start/window_end: Optional custom review window
    """

    kind = models.CharField(
        max_length=20,
        choices=AssignmentKind.choices,
        verbose_name="Kind",
    )
    year = models.PositiveIntegerField(
        db_index=True,
        verbose_name="Fiscal year",
        help_text="Fiscal year Y runs from September 1 of Y to August 31 of Y+1",
    )
    scope_type = models.CharField(
        max_length=20,
        choices=ScopeType.choices,
        verbose_name="Scope type",
    )
    department = models.ForeignKey(
        "hrm.Department",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="assignment_templates",
        verbose_name="Department",
        help_text="Target when scope_type is department",
    )
    section = models.ForeignKey(
        "hrm.Section",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="assignment_templates",
        verbose_name="Section",
        help_text="Target when scope_type is section",
    )
    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="assignment_templates",
        verbose_name="Employee",
        help_text="Target when scope_type is employee",
    )
    name = models.CharField(max_length=255, verbose_name="Name")
    description = models.TextField(blank=True, verbose_name="Description")
    process = models.CharField(max_length=255, blank=True, verbose_name="Process")
    base_weight = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        verbose_name="Base weight",
        help_text="Weight of this assignment inside its block (0-100)",
    )
    frequency = models.CharField(
        max_length=20,
        choices=ReviewFrequency.choices,
        default=ReviewFrequency.ANNUAL,
        verbose_name="Review frequency",
    )
    window_start = models.DateField(
        null=True,
        blank=True,
        verbose_name="Window start",
        help_text="Custom first day of the review window (defaults to fiscal year start)",
    )
    window_end = models.DateField(
        null=True,
        blank=True,
        verbose_name="Window end",
        help_text="Custom last day of the review window (defaults to fiscal year end)",
    )
    rating_scale_max = models.PositiveSmallIntegerField(
        default=DEFAULT_RATING_SCALE_MAX,
        validators=[MinValueValidator(1)],
        verbose_name="Rating scale maximum",
        help_text="Aptitudes are rated from 1 to this value",
    )
    is_active = models.BooleanField(default=True, db_index=True, verbose_name="Active")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Created by",
    )

    class Meta:
        verbose_name = "Assignment template"
        verbose_name_plural = "Assignment templates"
        db_table = "performance_assignment_template"
        ordering = ["year", "kind", "name"]
        indexes = [
            models.Index(fields=["year", "kind", "is_active"], name="perf_template_year_kind_idx"),
        ]

    def __str__(self):
        return f"{self.year} {self.get_kind_display()} - {self.name}"

    @property
    def target_id(self):
        field = SCOPE_TARGET_FIELDS.get(self.scope_type)
        return getattr(self, f"{field}_id") if field else None

    @property
    def is_objective(self) -> bool:
        return self.kind == AssignmentKind.OBJECTIVE

    def clean(self):
        errors = {}
        target_field = SCOPE_TARGET_FIELDS.get(self.scope_type)
        if target_field and getattr(self, f"{target_field}_id") is None:
            errors[target_field] = _("This field is required for scope type %(scope)s.") % {"scope": self.scope_type}
        for field in SCOPE_TARGET_FIELDS.values():
            if field != target_field and getattr(self, f"{field}_id") is not None:
                errors[field] = _("Only the %(target)s target may be set for this scope type.") % {
                    "target": target_field
                }
        errors.update(review_window_errors(self.year, self.window_start, self.window_end))
        if errors:
            raise ValidationError(errors)

    def get_periods(self):
        """Ordered tracking periods of this template."""
        return generate_periods(
            self.year,
            self.frequency,
            window_start=self.window_start,
            window_end=self.window_end,
            start_month=settings.PERFORMANCE_FISCAL_YEAR_START_MONTH,
        )


class GoalDefinition(BaseModel):
    """One measurable target inside an objective template."""

    template = models.ForeignKey(
        AssignmentTemplate,
        on_delete=models.CASCADE,
        related_name="goals",
        verbose_name="Template",
    )
    name = models.CharField(max_length=255, verbose_name="Name")
    expected_value = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name="Expected value",
    )
    unit = models.CharField(
        max_length=20,
        choices=GoalUnit.choices,
        default=GoalUnit.NUMERIC,
        verbose_name="Unit",
    )
    operator = models.CharField(
        max_length=2,
        choices=ComparisonOperator.choices,
        default=ComparisonOperator.GTE,
        verbose_name="Operator",
    )
    weight = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        verbose_name="Weight",
        help_text="Empty means no explicit weight; 0 means the goal contributes nothing",
    )
    accumulation_mode = models.CharField(
        max_length=20,
        choices=AccumulationMode.choices,
        default=AccumulationMode.PER_PERIOD,
        verbose_name="Accumulation mode",
    )
    closure_rule = models.CharField(
        max_length=20,
        choices=ClosureRule.choices,
        default=ClosureRule.AVERAGE,
        verbose_name="Closure rule",
    )
    threshold_periods = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        verbose_name="Threshold periods",
        help_text="Periods that must be met under the threshold_count rule (empty means all)",
    )
    tolerance = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
        verbose_name="Tolerance",
    )
    effort_credit = models.BooleanField(
        default=False,
        verbose_name="Effort credit",
        help_text="Score proportionally to the expected value instead of all-or-nothing",
    )
    allow_overachievement = models.BooleanField(default=False, verbose_name="Allow overachievement")
    overachievement_cap = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal(DEFAULT_OVERACHIEVEMENT_CAP),
        validators=[MinValueValidator(Decimal("100"))],
        verbose_name="Overachievement cap",
    )
    order = models.PositiveSmallIntegerField(default=0, verbose_name="Order")

    class Meta:
        verbose_name = "Goal definition"
        verbose_name_plural = "Goal definitions"
        db_table = "performance_goal_definition"
        ordering = ["order", "id"]

    def __str__(self):
        return f"{self.name} ({self.operator} {self.expected_value})"

    def to_config(self) -> GoalConfig:
        return GoalConfig(
            expected_value=self.expected_value,
            unit=self.unit,
            operator=self.operator,
            tolerance=self.tolerance,
            effort_credit=self.effort_credit,
            allow_overachievement=self.allow_overachievement,
            overachievement_cap=self.overachievement_cap,
            accumulation_mode=self.accumulation_mode,
            closure_rule=self.closure_rule,
            threshold_periods=self.threshold_periods,
            weight=self.weight,
        )
