"""Assignment override lookup."""

from typing import Dict, Iterable, Optional, Tuple

from apps.performance.models import AssignmentOverride
from apps.performance.utils.overrides import OVERRIDE_SOURCE_NONE, Resolution

OVERRIDE_SOURCE_EMPLOYEE = "EMPLOYEE"


class OverrideResolver:
    """Resolve employee-level assignment overrides.

    Overrides of a year are loaded once (optionally narrowed to a set of
    employees) and served from memory, so one resolver can back a whole
    aggregation run.

    Example:
        resolver = OverrideResolver(employee_ids=[1, 2])
        resolution = resolver.resolve(1, 2024, template)
        if not resolution.excluded:
            weight = resolution.effective_weight(template.base_weight)
    """

    def __init__(self, employee_ids: Optional[Iterable[int]] = None):
        self.employee_ids = list(employee_ids) if employee_ids is not None else None
        self._cache: Dict[int, Dict[Tuple[int, int], AssignmentOverride]] = {}

    def _load(self, year: int) -> Dict[Tuple[int, int], AssignmentOverride]:
        if year not in self._cache:
            queryset = AssignmentOverride.objects.filter(year=year)
            if self.employee_ids is not None:
                queryset = queryset.filter(employee_id__in=self.employee_ids)
            self._cache[year] = {(item.employee_id, item.template_id): item for item in queryset}
        return self._cache[year]

    def resolve(self, employee_id: int, year: int, template) -> Resolution:
        """Return the override for (employee, year, template), or an empty Resolution."""
        template_id = getattr(template, "pk", template)
        override = self._load(year).get((employee_id, template_id))
        if override is None:
            return Resolution(source=OVERRIDE_SOURCE_NONE)
        if override.excluded:
            return Resolution(excluded=True, source=OVERRIDE_SOURCE_EMPLOYEE)
        return Resolution(weight=override.weight, source=OVERRIDE_SOURCE_EMPLOYEE)


def resolve_override(employee_id: int, year: int, template) -> Resolution:
    """One-off lookup; prefer an OverrideResolver when resolving many keys."""
    return OverrideResolver(employee_ids=[employee_id]).resolve(employee_id, year, template)
