"""Constants for the payroll app."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class BonusScaleType(models.TextChoices):
    LINEAR = "linear", _("Linear")
    TIERED = "tiered", _("Tiered")


class BonusOverrideScope(models.TextChoices):
    DEPARTMENT = "department", _("Department")
    EMPLOYEE = "employee", _("Employee")


class BonusConfigSource(models.TextChoices):
    """Layer that supplied the scale and target used for a bonus result."""

    GLOBAL = "GLOBAL", _("Global configuration")
    DEPARTMENT_OVERRIDE = "DEPARTMENT_OVERRIDE", _("Department override")
    EMPLOYEE_OVERRIDE = "EMPLOYEE_OVERRIDE", _("Employee override")


DEFAULT_TARGET_MULTIPLE = "1.00"
