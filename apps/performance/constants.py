"""Constants for the performance app."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class AssignmentKind(models.TextChoices):
    OBJECTIVE = "objective", _("Objective")
    APTITUDE = "aptitude", _("Aptitude")


class ScopeType(models.TextChoices):
    """Applicability level of an assignment template."""

    DEPARTMENT = "department", _("Department")
    SECTION = "section", _("Section")
    EMPLOYEE = "employee", _("Employee")


class ReviewFrequency(models.TextChoices):
    MONTHLY = "monthly", _("Monthly")
    QUARTERLY = "quarterly", _("Quarterly")
    SEMIANNUAL = "semiannual", _("Semiannual")
    ANNUAL = "annual", _("Annual")


class GoalUnit(models.TextChoices):
    BINARY = "binary", _("Met / not met")
    PERCENTAGE = "percentage", _("Percentage")
    NUMERIC = "numeric", _("Numeric")


class ComparisonOperator(models.TextChoices):
    GTE = ">=", _("Greater than or equal")
    GT = ">", _("Greater than")
    LTE = "<=", _("Less than or equal")
    LT = "<", _("Less than")
    EQ = "=", _("Equal")


class AccumulationMode(models.TextChoices):
    PER_PERIOD = "per_period", _("Per period")
    CUMULATIVE = "cumulative", _("Cumulative")


class ClosureRule(models.TextChoices):
    AVERAGE = "average", _("Average of periods")
    LAST_PERIOD = "last_period", _("Last period only")
    THRESHOLD_COUNT = "threshold_count", _("Periods met threshold")


class EvaluationStatus(models.TextChoices):
    DRAFT = "DRAFT", _("Draft")
    PENDING_EMPLOYEE = "PENDING_EMPLOYEE", _("Pending employee")
    PENDING_HR = "PENDING_HR", _("Pending HR")
    CLOSED = "CLOSED", _("Closed")


class EvaluationAction(models.TextChoices):
    """Actions recorded on the evaluation timeline."""

    CREATE = "CREATE", _("Create")
    EDIT = "EDIT", _("Edit")
    SUBMIT_TO_EMPLOYEE = "SUBMIT_TO_EMPLOYEE", _("Submit to employee")
    EMPLOYEE_ACKNOWLEDGE = "EMPLOYEE_ACKNOWLEDGE", _("Employee acknowledge")
    EMPLOYEE_CONTEST = "EMPLOYEE_CONTEST", _("Employee contest")
    SUBMIT_TO_HR = "SUBMIT_TO_HR", _("Submit to HR")
    CLOSE = "CLOSE", _("Close")
    REOPEN = "REOPEN", _("Reopen")
    BULK_CLOSE = "BULK_CLOSE", _("Bulk close")
    RECALCULATE = "RECALCULATE", _("Recalculate")


class AcknowledgementStatus(models.TextChoices):
    AGREE = "AGREE", _("Agree")
    CONTEST = "CONTEST", _("Contest")


DEFAULT_OVERACHIEVEMENT_CAP = 120
DEFAULT_RATING_SCALE_MAX = 5
