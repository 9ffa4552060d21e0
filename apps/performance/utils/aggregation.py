"""Score aggregation: goals into objectives, assignments into blocks, blocks into a global score."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from libs.decimals import DECIMAL_HUNDRED, round_decimal, to_decimal

ZERO = Decimal(0)


@dataclass(frozen=True)
class MixRatio:
    """Weights of the objective and aptitude blocks in the global score."""

    objective: Decimal
    aptitude: Decimal

    def __post_init__(self):
        if self.objective < ZERO or self.aptitude < ZERO:
            raise ValueError("Mix ratio weights must not be negative")
        if self.objective + self.aptitude != Decimal(1):
            raise ValueError(f"Mix ratio weights must sum to 1, got {self.objective} + {self.aptitude}")


def _mean(scores) -> Decimal:
    scores = list(scores)
    if not scores:
        return ZERO
    return sum(scores, ZERO) / Decimal(len(scores))


def objective_score_from_goals(goals: Iterable[Tuple[Optional[Decimal], Decimal]]) -> Decimal:
    """Combine closed goal scores into one objective score.

    A goal weight of ``None`` means "no weight given"; an explicit 0 means
    "contributes nothing". When no goal carries a weight, or the given
    weights add up to zero, the unweighted mean is used. Otherwise the
    weighted mean over weighted goals is returned and unweighted goals do
    not contribute.

    Args:
        goals: ``(weight, score)`` pairs

    Returns:
        Objective score, 0 when there are no goals

    Example:
        >>> objective_score_from_goals([(Decimal(60), Decimal(100)), (Decimal(40), Decimal(50))])
        Decimal('80')
    """
    goals = [(weight, to_decimal(score)) for weight, score in goals]
    if not goals:
        return ZERO

    weighted = [(to_decimal(weight), score) for weight, score in goals if weight is not None]
    total_weight = sum((weight for weight, _ in weighted), ZERO)
    if not weighted or total_weight <= ZERO:
        return _mean(score for _, score in goals)

    return sum((weight * score for weight, score in weighted), ZERO) / total_weight


def block_score(items: Iterable[Tuple[Decimal, Decimal]]) -> Decimal:
    """Weighted mean of ``(effective weight, score)`` pairs.

    Falls back to the unweighted mean when the weights sum to zero; an empty
    block scores 0.
    """
    items = [(to_decimal(weight), to_decimal(score)) for weight, score in items]
    if not items:
        return ZERO

    total_weight = sum((weight for weight, _ in items), ZERO)
    if total_weight <= ZERO:
        return _mean(score for _, score in items)

    return sum((weight * score for weight, score in items), ZERO) / total_weight


def global_score(objective_block: Decimal, aptitude_block: Decimal, mix: MixRatio) -> Decimal:
    """Mix the two block scores and round to one decimal place.

    Example:
        >>> global_score(Decimal(90), Decimal(80), MixRatio(Decimal("0.7"), Decimal("0.3")))
        Decimal('87.0')
    """
    combined = to_decimal(objective_block) * mix.objective + to_decimal(aptitude_block) * mix.aptitude
    return round_decimal(combined, 1)


def rating_to_score(rating, scale_max) -> Decimal:
    """Convert a ``1..scale_max`` rating to a 0-100 score."""
    scale_max = to_decimal(scale_max)
    if scale_max <= ZERO:
        return ZERO
    return to_decimal(rating) / scale_max * DECIMAL_HUNDRED


def scale_weight(base_weight, percentage) -> Decimal:
    """Scale a base weight by a participation percentage (0-100)."""
    return to_decimal(base_weight) * to_decimal(percentage) / DECIMAL_HUNDRED
