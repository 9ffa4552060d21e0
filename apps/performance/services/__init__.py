from .materialization import materialize_template, materialize_year, target_employees
from .override_resolver import OverrideResolver, resolve_override
from .scoring import ScoringService, compute_scores, get_mix_ratio, recompute_annual
from .simulation import simulate
from .workflow import (
    TRANSITIONS,
    EvaluationWorkflow,
    bulk_close,
    can_perform,
    get_or_create_evaluation,
    recalculate_template_evaluations,
    transition,
)

__all__ = [
    "OverrideResolver",
    "resolve_override",
    "ScoringService",
    "compute_scores",
    "get_mix_ratio",
    "recompute_annual",
    "simulate",
    "TRANSITIONS",
    "EvaluationWorkflow",
    "bulk_close",
    "can_perform",
    "get_or_create_evaluation",
    "recalculate_template_evaluations",
    "transition",
    "materialize_template",
    "materialize_year",
    "target_employees",
]
