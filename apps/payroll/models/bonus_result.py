from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from apps.payroll.constants import BonusConfigSource
from libs.models import BaseModel


class BonusResult(BaseModel):
    """Materialized bonus computation of one employee for one fiscal year.

    Regenerated by the bonus batch (upsert on employee + year) and never
    edited by hand. Organisation names, the resolved scale and the salary
    are frozen at calculation time.
    """

    employee = models.ForeignKey(
        "hrm.Employee",
        on_delete=models.CASCADE,
        related_name="bonus_results",
        verbose_name="Employee",
    )
    year = models.PositiveIntegerField(db_index=True, verbose_name="Fiscal year")

    objective_score = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    aptitude_score = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    global_score = models.DecimalField(max_digits=7, decimal_places=2, default=0, verbose_name="Global score")

    payout_fraction = models.DecimalField(max_digits=6, decimal_places=4, default=0, verbose_name="Payout fraction")
    base_salary = models.DecimalField(max_digits=20, decimal_places=2, default=0, verbose_name="Base salary")
    target_multiple = models.DecimalField(max_digits=6, decimal_places=2, default=0, verbose_name="Target multiple")
    target_amount = models.DecimalField(max_digits=20, decimal_places=2, default=0, verbose_name="Target amount")
    amount = models.DecimalField(max_digits=20, decimal_places=2, default=0, verbose_name="Bonus amount")

    scale = models.JSONField(default=dict, encoder=DjangoJSONEncoder, verbose_name="Resolved scale")
    config_source = models.CharField(
        max_length=30,
        choices=BonusConfigSource.choices,
        default=BonusConfigSource.GLOBAL,
        verbose_name="Configuration source",
    )
    department_name = models.CharField(max_length=200, blank=True, verbose_name="Department name")
    section_name = models.CharField(max_length=200, blank=True, verbose_name="Section name")
    trace = models.JSONField(default=dict, encoder=DjangoJSONEncoder, verbose_name="Calculation trace")
    calculated_at = models.DateTimeField(verbose_name="Calculated at")

    class Meta:
        verbose_name = "Bonus result"
        verbose_name_plural = "Bonus results"
        db_table = "payroll_bonus_result"
        unique_together = [["employee", "year"]]
        ordering = ["year", "employee"]

    def __str__(self):
        return f"{self.employee_id} ({self.year}): {self.amount}"
