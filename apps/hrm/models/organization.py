from django.db import models
from django.utils.translation import gettext_lazy as _

from libs.models import BaseModel


class Department(BaseModel):
    """Organizational unit ("area"). Assignments and bonus overrides can target it."""

    name = models.CharField(max_length=200, verbose_name=_("Department name"))
    code = models.CharField(max_length=50, unique=True, verbose_name=_("Department code"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        verbose_name = _("Department")
        verbose_name_plural = _("Departments")
        db_table = "hrm_department"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"


class Section(BaseModel):
    """Sub-unit of a department ("sector")."""

    name = models.CharField(max_length=200, verbose_name=_("Section name"))
    code = models.CharField(max_length=50, unique=True, verbose_name=_("Section code"))
    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        related_name="sections",
        verbose_name=_("Department"),
    )
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        verbose_name = _("Section")
        verbose_name_plural = _("Sections")
        db_table = "hrm_section"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"
