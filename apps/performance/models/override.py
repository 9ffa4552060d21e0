from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext as _

from libs.models import BaseModel


class AssignmentOverride(BaseModel):
    """Employee-level exception to an assignment for one fiscal year.

    Either excludes the assignment for the employee or replaces its
    effective weight. Takes precedence over the template's base weight and
    any participation scaling.
    """

    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.CASCADE,
        related_name="assignment_overrides",
        verbose_name="Employee",
    )
    year = models.PositiveIntegerField(verbose_name="Fiscal year")
    template = models.ForeignKey(
        "performance.AssignmentTemplate",
        on_delete=models.CASCADE,
        related_name="overrides",
        verbose_name="Template",
    )
    excluded = models.BooleanField(
        default=False,
        verbose_name="Excluded",
        help_text="Skip this assignment entirely for the employee",
    )
    weight = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        verbose_name="Weight",
        help_text="Replacement effective weight (0-100)",
    )
    note = models.TextField(blank=True, verbose_name="Note")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="Updated by",
    )

    class Meta:
        verbose_name = "Assignment override"
        verbose_name_plural = "Assignment overrides"
        db_table = "performance_assignment_override"
        unique_together = [["employee", "year", "template"]]
        indexes = [models.Index(fields=["year", "employee"], name="perf_override_year_emp_idx")]

    def __str__(self):
        if self.excluded:
            return f"{self.employee_id} / {self.template_id} ({self.year}): excluded"
        return f"{self.employee_id} / {self.template_id} ({self.year}): weight {self.weight}"

    def clean(self):
        if not self.excluded and self.weight is None:
            raise ValidationError({"weight": _("Provide a weight or mark the assignment as excluded.")})
