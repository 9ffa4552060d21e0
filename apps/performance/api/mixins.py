"""
API mixins for the performance module.

Limits what a caller sees to their own scope: everything with the view-all
capability, otherwise their own records plus, for team leads, the records of
their department.
"""

from typing import Optional

from django.db.models import Q
from django.utils.translation import gettext as _
from rest_framework.exceptions import PermissionDenied

from apps.hrm.models import Employee


def employee_scope_q(user, view_all_capability: str, team_capability: str, prefix: str = "") -> Optional[Q]:
    """Build the Q restricting employees (reached through ``prefix``) to ``user``'s scope.

    Args:
        user: Requesting user
        view_all_capability: Capability that lifts every restriction
        team_capability: Capability that extends the scope to the user's department
        prefix: Lookup path from the filtered model to Employee, e.g. ``"employee__"``

    Returns:
        Q object, or None when the user may see everything
    """
    if user.has_capability(view_all_capability):
        return None

    scope = Q(**{f"{prefix}user": user})
    own_employee = getattr(user, "employee", None)
    if own_employee is not None and own_employee.department_id and user.has_capability(team_capability):
        scope |= Q(**{f"{prefix}department_id": own_employee.department_id})
    return scope


class EmployeeScopeMixin:
    """
    Mixin narrowing ``get_queryset`` to the caller's employee scope.

    Usage:
        class EvaluationViewSet(EmployeeScopeMixin, BaseGenericViewSet):
            view_all_capability = "evaluation.view_all"
            team_capability = "evaluation.edit"
            employee_lookup = "employee__"
    """

    view_all_capability = ""
    team_capability = ""
    employee_lookup = "employee__"

    def get_scope_q(self) -> Optional[Q]:
        return employee_scope_q(
            self.request.user,
            self.view_all_capability,
            self.team_capability,
            prefix=self.employee_lookup,
        )

    def get_queryset(self):
        queryset = super().get_queryset()
        if getattr(self, "swagger_fake_view", False):
            return queryset
        scope = self.get_scope_q()
        if scope is None:
            return queryset
        return queryset.filter(scope).distinct()

    def check_employees_in_scope(self, employee_ids):
        """Raise PermissionDenied unless every employee id is within the caller's scope."""
        scope = employee_scope_q(self.request.user, self.view_all_capability, self.team_capability)
        if scope is None:
            return
        employee_ids = set(employee_ids)
        visible = set(Employee.objects.filter(scope, pk__in=employee_ids).values_list("pk", flat=True))
        existing = set(Employee.objects.filter(pk__in=employee_ids).values_list("pk", flat=True))
        if existing - visible:
            raise PermissionDenied(_("You cannot access employees outside your scope."))
