from .aggregation import (
    MixRatio,
    block_score,
    global_score,
    objective_score_from_goals,
    rating_to_score,
    scale_weight,
)
from .goal_scoring import (
    GoalConfig,
    GoalScore,
    PeriodGoalScore,
    close_goal,
    compare,
    score_goal,
    score_goal_periods,
    score_goal_value,
)
from .overrides import Resolution, cascade
from .periods import Period, fiscal_year_of, fiscal_year_window, generate_periods, period_order, review_window

__all__ = [
    "GoalConfig",
    "GoalScore",
    "PeriodGoalScore",
    "close_goal",
    "compare",
    "score_goal",
    "score_goal_periods",
    "score_goal_value",
    "MixRatio",
    "block_score",
    "global_score",
    "objective_score_from_goals",
    "rating_to_score",
    "scale_weight",
    "Resolution",
    "cascade",
    "Period",
    "fiscal_year_of",
    "fiscal_year_window",
    "generate_periods",
    "period_order",
    "review_window",
]
