"""Create the DRAFT evaluations a template expects."""

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Exists, OuterRef, Q
from django.utils.translation import gettext as _
from rest_framework.exceptions import ValidationError

from apps.hrm.constants import EmployeeStatus
from apps.hrm.models import Employee, SectionParticipation
from apps.performance.constants import EvaluationAction, EvaluationStatus, ScopeType
from apps.performance.exceptions import TemplateNotFound
from apps.performance.models import AssignmentTemplate, Evaluation, EvaluationTimelineEntry
from apps.performance.services.workflow import build_timeline_entry

logger = logging.getLogger(__name__)

BULK_BATCH_SIZE = 500


def target_employees(template):
    """Working employees the template applies to.

    Section templates reach employees with a participation record in the
    section for the template's year, and employees whose primary section it
    is when they have no participation records that year.
    """
    queryset = Employee.objects.filter(status__in=EmployeeStatus.working_statuses())

    if template.scope_type == ScopeType.EMPLOYEE:
        return queryset.filter(pk=template.employee_id)
    if template.scope_type == ScopeType.DEPARTMENT:
        return queryset.filter(department_id=template.department_id)
    if template.scope_type == ScopeType.SECTION:
        participants = SectionParticipation.objects.filter(
            year=template.year, section_id=template.section_id
        ).values("employee_id")
        has_records = SectionParticipation.objects.filter(year=template.year, employee=OuterRef("pk"))
        return queryset.filter(
            Q(pk__in=participants) | (Q(section_id=template.section_id) & ~Exists(has_records))
        )
    return queryset.none()


def materialize_template(template, dry_run: bool = False, actor=None) -> dict:
    """Create the missing evaluations for every target employee and period of ``template``.

    Existing evaluations are left alone, so running it twice creates nothing
    the second time.

    Returns:
        dict with ``template_id``, ``created`` (or would-be created on dry run),
        ``skipped`` (already existing) and a small ``sample`` of the missing keys
    """
    if not template.is_active:
        raise ValidationError({"template": [_("Template is not active.")]})

    try:
        periods = template.get_periods()
    except ValueError as e:
        raise ValidationError({"template": [str(e)]}) from e
    employees = list(target_employees(template).order_by("code"))
    existing = set(Evaluation.objects.filter(template=template).values_list("employee_id", "period_code"))

    missing = [
        (employee, period) for employee in employees for period in periods if (employee.pk, period.code) not in existing
    ]
    sample = [
        {"employee_id": employee.pk, "employee_code": employee.code, "period_code": period.code}
        for employee, period in missing[: settings.PERFORMANCE_MATERIALIZE_SAMPLE_SIZE]
    ]
    skipped = len(employees) * len(periods) - len(missing)

    if dry_run:
        return {
            "template_id": template.pk,
            "dry_run": True,
            "created": len(missing),
            "skipped": skipped,
            "sample": sample,
        }

    keys = {(employee.pk, period.code) for employee, period in missing}
    with transaction.atomic():
        Evaluation.objects.bulk_create(
            [
                Evaluation(
                    employee=employee,
                    template=template,
                    period_code=period.code,
                    year=template.year,
                    created_by=actor,
                )
                for employee, period in missing
            ],
            batch_size=BULK_BATCH_SIZE,
            ignore_conflicts=True,
        )
        # Rows inserted by a concurrent request already carry their CREATE entry
        has_create_entry = EvaluationTimelineEntry.objects.filter(
            evaluation=OuterRef("pk"), action=EvaluationAction.CREATE
        )
        new_evaluations = [
            evaluation
            for evaluation in Evaluation.objects.filter(template=template).exclude(Exists(has_create_entry))
            if (evaluation.employee_id, evaluation.period_code) in keys
        ]
        EvaluationTimelineEntry.objects.bulk_create(
            [
                build_timeline_entry(evaluation, actor, EvaluationAction.CREATE, "", EvaluationStatus.DRAFT)
                for evaluation in new_evaluations
            ],
            batch_size=BULK_BATCH_SIZE,
        )

    created = len(new_evaluations)
    skipped += len(missing) - created

    logger.info("Materialized template %s: %s created, %s skipped", template.pk, created, skipped)
    return {
        "template_id": template.pk,
        "dry_run": False,
        "created": created,
        "skipped": skipped,
        "sample": sample,
    }


def materialize_year(year: int, template_id=None, dry_run: bool = False, actor=None) -> dict:
    """Materialize one template or every active template of ``year``."""
    templates = AssignmentTemplate.objects.filter(year=year, is_active=True).order_by("id")
    if template_id is not None:
        templates = templates.filter(pk=template_id)
        if not templates.exists():
            raise TemplateNotFound()

    results = [materialize_template(template, dry_run=dry_run, actor=actor) for template in templates]
    return {
        "year": year,
        "dry_run": dry_run,
        "created": sum(item["created"] for item in results),
        "skipped": sum(item["skipped"] for item in results),
        "templates": results,
    }
