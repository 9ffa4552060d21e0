"""Centralized constants for the core app."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RoleCode(models.TextChoices):
    """Role codes known to the capability policy table."""

    ADMIN = "admin", _("Administrator")
    HR = "hr", _("Human resources")
    MANAGER = "manager", _("Manager")
    EMPLOYEE = "employee", _("Employee")


__all__ = ["RoleCode"]
