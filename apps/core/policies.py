"""Declarative role capability policy.

Capabilities are dotted codes ``<resource>.<action>``; the HTTP layer derives
them from ``permission_prefix`` and the routed action, services ask for
domain capabilities such as ``evaluation.close`` directly.

Patterns in a policy may be an exact code, ``*`` (everything) or a
``<resource>.*`` wildcard. A matching deny pattern always wins over allow.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from apps.core.constants import RoleCode


@dataclass(frozen=True)
class RolePolicy:
    allow: frozenset
    deny: frozenset = frozenset()


ROLE_POLICIES = MappingProxyType(
    {
        RoleCode.ADMIN.value: RolePolicy(allow=frozenset({"*"})),
        RoleCode.HR.value: RolePolicy(
            allow=frozenset(
                {
                    "assignment_template.*",
                    "assignment_override.*",
                    "evaluation.*",
                    "score.*",
                    "bonus_config.*",
                    "section_participation.*",
                    "bonus_result.*",
                }
            ),
        ),
        RoleCode.MANAGER.value: RolePolicy(
            allow=frozenset(
                {
                    "assignment_template.list",
                    "assignment_template.retrieve",
                    "assignment_template.periods",
                    "evaluation.*",
                    "score.*",
                }
            ),
            deny=frozenset(
                {
                    "evaluation.close",
                    "evaluation.reopen",
                    "evaluation.bulk_close",
                    "evaluation.view_all",
                    "score.view_all",
                }
            ),
        ),
        RoleCode.EMPLOYEE.value: RolePolicy(
            allow=frozenset(
                {
                    "evaluation.list",
                    "evaluation.retrieve",
                    "evaluation.transition",
                    "score.annual",
                }
            ),
        ),
    }
)


def matches(pattern: str, capability: str) -> bool:
    if pattern == "*":
        return True
    if pattern.endswith(".*"):
        return capability.startswith(pattern[:-1])
    return pattern == capability


def can(role: Optional[str], capability: str, policies=ROLE_POLICIES) -> bool:
    """Return True when ``role`` is granted ``capability``.

    Unknown roles and a missing role are denied.

    Example:
        >>> can("manager", "evaluation.edit")
        True
        >>> can("manager", "evaluation.close")
        False
    """
    policy = policies.get(str(role)) if role else None
    if policy is None:
        return False
    if any(matches(pattern, capability) for pattern in policy.deny):
        return False
    return any(matches(pattern, capability) for pattern in policy.allow)
