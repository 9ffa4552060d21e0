from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.hrm.constants import EmployeeStatus
from libs.models import BaseModel


class Employee(BaseModel):
    """Employee record read by the scoring and bonus engine."""

    code = models.CharField(max_length=50, unique=True, verbose_name=_("Employee code"))
    fullname = models.CharField(max_length=200, verbose_name=_("Full name"))
    email = models.EmailField(blank=True, verbose_name=_("Email"))
    position = models.CharField(max_length=200, blank=True, verbose_name=_("Position"))
    department = models.ForeignKey(
        "hrm.Department",
        on_delete=models.PROTECT,
        related_name="employees",
        verbose_name=_("Department"),
    )
    section = models.ForeignKey(
        "hrm.Section",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employees",
        verbose_name=_("Primary section"),
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee",
        verbose_name=_("User account"),
    )
    base_salary = models.DecimalField(
        max_digits=20,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
        verbose_name=_("Base salary"),
        help_text=_("Annual reference salary used to size the bonus target"),
    )
    status = models.CharField(
        max_length=20,
        choices=EmployeeStatus.choices,
        default=EmployeeStatus.ACTIVE,
        db_index=True,
        verbose_name=_("Status"),
    )

    class Meta:
        verbose_name = _("Employee")
        verbose_name_plural = _("Employees")
        db_table = "hrm_employee"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.fullname}"
