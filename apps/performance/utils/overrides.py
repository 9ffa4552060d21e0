"""Override cascading.

Exceptions are layered from most to least specific (employee, then
organizational unit, then the global default); the first layer that
provides a value wins.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

OVERRIDE_SOURCE_NONE = "NONE"


@dataclass(frozen=True)
class Resolution:
    """Outcome of an assignment override lookup."""

    excluded: bool = False
    weight: Optional[Any] = None
    source: str = OVERRIDE_SOURCE_NONE

    def effective_weight(self, default):
        return default if self.weight is None else self.weight


def cascade(layers: Sequence[Tuple[str, Any]], default: Any = None, default_source: str = OVERRIDE_SOURCE_NONE):
    """Return ``(value, source)`` from the first layer whose value is not None.

    Args:
        layers: ``(source, value)`` pairs ordered from most to least specific
        default: Value used when no layer provides one
        default_source: Source reported for the default

    Example:
        >>> cascade([("EMPLOYEE", None), ("DEPARTMENT", 2)], default=1, default_source="GLOBAL")
        (2, 'DEPARTMENT')
    """
    for source, value in layers:
        if value is not None:
            return value, source
    return default, default_source
