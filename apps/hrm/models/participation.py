from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from libs.models import BaseModel


class SectionParticipation(BaseModel):
    """Share of an employee's time spent in a section during a fiscal year.

    When an employee has participation records for a year, section-scoped
    assignments only apply to the listed sections and their base weight is
    scaled by ``percentage / 100``. Without records the employee counts as
    100% in their primary section.
    """

    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.CASCADE,
        related_name="section_participations",
        verbose_name=_("Employee"),
    )
    section = models.ForeignKey(
        "hrm.Section",
        on_delete=models.CASCADE,
        related_name="participations",
        verbose_name=_("Section"),
    )
    year = models.PositiveIntegerField(verbose_name=_("Fiscal year"))
    percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        verbose_name=_("Participation percentage"),
    )

    class Meta:
        verbose_name = _("Section participation")
        verbose_name_plural = _("Section participations")
        db_table = "hrm_section_participation"
        unique_together = [["employee", "year", "section"]]
        indexes = [models.Index(fields=["year", "employee"], name="hrm_participation_year_emp_idx")]

    def __str__(self):
        return f"{self.employee_id} - {self.section_id} ({self.year}): {self.percentage}%"
