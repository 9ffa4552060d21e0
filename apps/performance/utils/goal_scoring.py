"""Goal scoring.

Converts submitted goal results into scores and "met" flags, per period and
once per goal via its closure rule. Everything here is pure: callers pass the
goal configuration and the submitted values in period order.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from apps.performance.constants import (
    DEFAULT_OVERACHIEVEMENT_CAP,
    AccumulationMode,
    ClosureRule,
    ComparisonOperator,
    GoalUnit,
)
from libs.decimals import DECIMAL_HUNDRED, clamp_decimal, to_decimal

ZERO = Decimal(0)

MAXIMIZING_OPERATORS = (ComparisonOperator.GTE, ComparisonOperator.GT)
MINIMIZING_OPERATORS = (ComparisonOperator.LTE, ComparisonOperator.LT)


@dataclass(frozen=True)
class GoalConfig:
    """Canonical goal configuration seen by the scorer."""

    expected_value: Decimal = ZERO
    unit: str = GoalUnit.NUMERIC
    operator: str = ComparisonOperator.GTE
    tolerance: Decimal = ZERO
    effort_credit: bool = False
    allow_overachievement: bool = False
    overachievement_cap: Decimal = Decimal(DEFAULT_OVERACHIEVEMENT_CAP)
    accumulation_mode: str = AccumulationMode.PER_PERIOD
    closure_rule: str = ClosureRule.AVERAGE
    threshold_periods: Optional[int] = None
    weight: Optional[Decimal] = None

    @property
    def cap(self) -> Decimal:
        """Upper bound of a score: the overachievement ceiling or 100."""
        if self.allow_overachievement:
            return max(to_decimal(self.overachievement_cap), DECIMAL_HUNDRED)
        return DECIMAL_HUNDRED

    @property
    def is_binary(self) -> bool:
        return self.unit == GoalUnit.BINARY

    @property
    def is_cumulative(self) -> bool:
        return self.accumulation_mode == AccumulationMode.CUMULATIVE


@dataclass(frozen=True)
class GoalScore:
    score: Decimal
    met: bool


@dataclass(frozen=True)
class PeriodGoalScore:
    period_code: str
    submitted_value: object
    evaluated_value: Decimal
    score: Decimal
    met: bool

    def as_dict(self) -> dict:
        return {
            "period_code": self.period_code,
            "submitted_value": self.submitted_value,
            "evaluated_value": self.evaluated_value,
            "score": self.score,
            "met": self.met,
        }


def is_truthy(value) -> bool:
    """Interpret a binary submission ("met" checkbox, 1/0, "true"/"false")."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "yes", "y", "met"):
            return True
        if text in ("", "false", "no", "n"):
            return False
    return to_decimal(value) != ZERO


def compare(operator: str, value: Decimal, expected: Decimal, tolerance: Decimal = ZERO) -> bool:
    """Tolerance-adjusted comparison of a value against the expected value.

    Maximizing operators add the tolerance to the value, minimizing operators
    subtract it, equality accepts ``|value - expected| <= tolerance``.
    """
    if operator == ComparisonOperator.GTE:
        return value + tolerance >= expected
    if operator == ComparisonOperator.GT:
        return value + tolerance > expected
    if operator == ComparisonOperator.LTE:
        return value - tolerance <= expected
    if operator == ComparisonOperator.LT:
        return value - tolerance < expected
    if operator == ComparisonOperator.EQ:
        return abs(value - expected) <= tolerance
    raise ValueError(f"Unknown comparison operator: {operator}")


def _binary_met(config: GoalConfig, value) -> bool:
    if not config.is_cumulative:
        return is_truthy(value)
    # Cumulative binary goals receive the count of met periods so far
    count = to_decimal(value)
    expected = to_decimal(config.expected_value)
    if expected > ZERO:
        return count >= expected
    return count > ZERO


def score_goal_value(config: GoalConfig, value) -> GoalScore:
    """Score one evaluated value of a goal.

    Args:
        config: Goal configuration
        value: Value to evaluate; for cumulative goals the running sum

    Returns:
        GoalScore with score in [0, cap] and the tolerance-adjusted met flag

    Example:
        >>> score_goal_value(GoalConfig(expected_value=Decimal(80), tolerance=Decimal(2)), 75)
        GoalScore(score=Decimal('0'), met=False)
    """
    if config.is_binary:
        met = _binary_met(config, value)
        return GoalScore(score=DECIMAL_HUNDRED if met else ZERO, met=met)

    number = to_decimal(value)
    expected = to_decimal(config.expected_value)
    tolerance = to_decimal(config.tolerance)
    met = compare(config.operator, number, expected, tolerance)

    if not config.effort_credit:
        return GoalScore(score=DECIMAL_HUNDRED if met else ZERO, met=met)

    if config.operator in MAXIMIZING_OPERATORS:
        if expected > ZERO:
            score = number / expected * DECIMAL_HUNDRED
        else:
            score = DECIMAL_HUNDRED if met else ZERO
    elif config.operator in MINIMIZING_OPERATORS:
        if number > ZERO:
            score = expected / number * DECIMAL_HUNDRED
        else:
            score = config.cap
    else:
        score = DECIMAL_HUNDRED if met else ZERO

    return GoalScore(score=clamp_decimal(score, ZERO, config.cap), met=met)


def score_goal_periods(config: GoalConfig, submissions: Sequence[Tuple[str, object]]) -> List[PeriodGoalScore]:
    """Score a goal's submissions in period order.

    Args:
        config: Goal configuration
        submissions: ``(period_code, submitted_value)`` pairs, chronologically ordered

    Returns:
        One PeriodGoalScore per submission. In cumulative mode each period is
        scored on the running sum up to and including that period (binary
        results sum as 0/1).
    """
    results = []
    running_total = ZERO
    for period_code, submitted in submissions:
        if config.is_cumulative:
            if config.is_binary:
                running_total += Decimal(1) if is_truthy(submitted) else ZERO
            else:
                running_total += to_decimal(submitted)
            evaluated = running_total
        elif config.is_binary:
            evaluated = Decimal(1) if is_truthy(submitted) else ZERO
        else:
            evaluated = to_decimal(submitted)

        goal_score = score_goal_value(config, evaluated)
        results.append(
            PeriodGoalScore(
                period_code=period_code,
                submitted_value=submitted,
                evaluated_value=evaluated,
                score=goal_score.score,
                met=goal_score.met,
            )
        )
    return results


def close_goal(
    config: GoalConfig,
    period_scores: Sequence[PeriodGoalScore],
    total_periods: Optional[int] = None,
) -> GoalScore:
    """Apply the goal's closure rule to its per-period scores.

    - average: mean of period scores; met when the mean reaches 100 or any
      period was met.
    - last_period: the chronologically last period stands for the goal.
    - threshold_count: met when the number of met periods reaches the
      threshold (all tracked periods when no threshold is set); score is
      ``met periods / total periods * 100``.

    Args:
        config: Goal configuration
        period_scores: Output of score_goal_periods
        total_periods: Number of tracked periods; defaults to the number of scored periods

    Returns:
        GoalScore for the whole goal; an empty history scores 0, not met
    """
    if not period_scores:
        return GoalScore(score=ZERO, met=False)

    if config.closure_rule == ClosureRule.LAST_PERIOD:
        last = period_scores[-1]
        return GoalScore(score=last.score, met=last.met)

    if config.closure_rule == ClosureRule.THRESHOLD_COUNT:
        total = max(total_periods or 0, len(period_scores))
        met_count = sum(1 for item in period_scores if item.met)
        threshold = total if config.threshold_periods is None else config.threshold_periods
        score = Decimal(met_count) / Decimal(total) * DECIMAL_HUNDRED
        return GoalScore(score=clamp_decimal(score, ZERO, DECIMAL_HUNDRED), met=met_count >= threshold)

    average = sum((item.score for item in period_scores), ZERO) / Decimal(len(period_scores))
    met = average >= DECIMAL_HUNDRED or any(item.met for item in period_scores)
    return GoalScore(score=average, met=met)


def score_goal(
    config: GoalConfig,
    submissions: Sequence[Tuple[str, object]],
    total_periods: Optional[int] = None,
) -> Tuple[GoalScore, List[PeriodGoalScore]]:
    """Score every period of a goal and close it."""
    period_scores = score_goal_periods(config, submissions)
    return close_goal(config, period_scores, total_periods), period_scores
