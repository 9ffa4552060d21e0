"""What-if scoring.

Runs the goal scorer, the objective and block aggregation and the global mix
over goal configurations and period values supplied by the caller. Nothing
is read from or written to the database.
"""

import logging
from typing import Iterable, Optional

from apps.performance.services.scoring import get_mix_ratio
from apps.performance.utils import (
    GoalConfig,
    MixRatio,
    block_score,
    global_score,
    objective_score_from_goals,
    score_goal,
)
from libs.decimals import quantize_decimal, to_decimal

logger = logging.getLogger(__name__)

GOAL_CONFIG_FIELDS = (
    "expected_value",
    "unit",
    "operator",
    "tolerance",
    "effort_credit",
    "allow_overachievement",
    "overachievement_cap",
    "accumulation_mode",
    "closure_rule",
    "threshold_periods",
    "weight",
)


def goal_config_from_data(data: dict) -> GoalConfig:
    """Build a GoalConfig from validated goal data, leaving unset fields at their defaults."""
    return GoalConfig(**{field: data[field] for field in GOAL_CONFIG_FIELDS if field in data})


def simulate_objective(objective: dict) -> dict:
    goals = []
    for goal in objective.get("goals", []):
        config = goal_config_from_data(goal)
        submissions = [(record["period_code"], record["value"]) for record in goal.get("records", [])]
        closed, period_scores = score_goal(config, submissions, total_periods=objective.get("total_periods"))
        goals.append(
            {
                "name": goal.get("name", ""),
                "weight": config.weight,
                "score": quantize_decimal(closed.score),
                "met": closed.met,
                "periods": [item.as_dict() for item in period_scores],
            }
        )

    score = objective_score_from_goals((goal["weight"], goal["score"]) for goal in goals)
    return {
        "name": objective.get("name", ""),
        "weight": to_decimal(objective.get("weight")),
        "score": quantize_decimal(score),
        "goals": goals,
    }


def simulate(objectives: Iterable[dict], aptitudes: Iterable[dict] = (), mix: Optional[MixRatio] = None) -> dict:
    """Score a hypothetical set of objectives and aptitudes.

    Args:
        objectives: ``{"name", "weight", "total_periods", "goals": [...]}``; each
            goal carries its configuration and ``records`` as
            ``[{"period_code", "value"}]`` in period order
        aptitudes: ``{"name", "weight", "score"}`` with a 0-100 score
        mix: Global mix ratio; defaults to settings

    Returns:
        dict with the per-objective and per-aptitude breakdown, both block
        scores and the global score
    """
    mix = mix or get_mix_ratio()
    objective_results = [simulate_objective(objective) for objective in objectives]
    aptitude_results = [
        {
            "name": aptitude.get("name", ""),
            "weight": to_decimal(aptitude.get("weight")),
            "score": quantize_decimal(aptitude.get("score")),
        }
        for aptitude in aptitudes
    ]

    objective_block = block_score((item["weight"], item["score"]) for item in objective_results)
    aptitude_block = block_score((item["weight"], item["score"]) for item in aptitude_results)
    result = global_score(objective_block, aptitude_block, mix)
    logger.debug(
        "Simulated %s objectives and %s aptitudes: global %s", len(objective_results), len(aptitude_results), result
    )
    return {
        "objectives": objective_results,
        "aptitudes": aptitude_results,
        "objective_score": quantize_decimal(objective_block),
        "aptitude_score": quantize_decimal(aptitude_block),
        "mix": {"objective": mix.objective, "aptitude": mix.aptitude},
        "global_score": result,
    }
