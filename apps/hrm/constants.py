# HRM Module Constants
from django.db import models
from django.utils.translation import gettext_lazy as _


class EmployeeStatus(models.TextChoices):
    ACTIVE = "active", _("Active")
    ON_LEAVE = "on_leave", _("On leave")
    RESIGNED = "resigned", _("Resigned")

    @classmethod
    def working_statuses(cls) -> list:
        return [cls.ACTIVE, cls.ON_LEAVE]
