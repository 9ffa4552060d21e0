"""Bonus scale calculations.

Pure functions that turn a global performance score into a payout fraction
and a bonus amount. No database access; callers resolve the scale first.

Linear scale:
    score < threshold            -> floor_fraction
    threshold <= score <= 100    -> min_fraction + (max_fraction - min_fraction)
                                    * (score - threshold) / (100 - threshold)
    the score is clamped to [0, 100] first, so overachievement never pays
    beyond max_fraction.

Tiered scale:
    tiers are sorted by min_score ascending and the last tier whose
    min_score <= score wins; no qualifying tier pays floor_fraction.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from apps.payroll.constants import BonusScaleType
from libs.decimals import DECIMAL_HUNDRED, clamp_decimal, quantize_decimal, to_decimal

FRACTION_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class BonusTier:
    min_score: Decimal
    payout: Decimal

    def as_dict(self) -> Dict[str, str]:
        return {"min_score": str(self.min_score), "payout": str(self.payout)}


@dataclass(frozen=True)
class BonusScale:
    """Resolved bonus scale."""

    scale_type: str = BonusScaleType.LINEAR
    min_fraction: Decimal = Decimal("0")
    max_fraction: Decimal = Decimal("0")
    threshold: Decimal = Decimal("0")
    floor_fraction: Decimal = Decimal("0")
    tiers: List[BonusTier] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        data = {"scale_type": str(self.scale_type), "floor_fraction": str(self.floor_fraction)}
        if self.scale_type == BonusScaleType.TIERED:
            data["tiers"] = [tier.as_dict() for tier in sorted_tiers(self.tiers)]
        else:
            data.update(
                {
                    "min_fraction": str(self.min_fraction),
                    "max_fraction": str(self.max_fraction),
                    "threshold": str(self.threshold),
                }
            )
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "BonusScale":
        """Build a scale from stored JSON, coercing malformed numbers to zero."""
        data = data or {}
        tiers = [
            BonusTier(min_score=to_decimal(item.get("min_score")), payout=to_decimal(item.get("payout")))
            for item in data.get("tiers") or []
        ]
        return cls(
            scale_type=data.get("scale_type") or BonusScaleType.LINEAR,
            min_fraction=to_decimal(data.get("min_fraction")),
            max_fraction=to_decimal(data.get("max_fraction")),
            threshold=to_decimal(data.get("threshold")),
            floor_fraction=to_decimal(data.get("floor_fraction")),
            tiers=tiers,
        )


def sorted_tiers(tiers) -> List[BonusTier]:
    return sorted(tiers, key=lambda tier: tier.min_score)


def validate_scale(scale: BonusScale) -> Dict[str, List[str]]:
    """Return ``{field: [message]}`` for every problem found; empty when the scale is usable."""
    errors: Dict[str, List[str]] = {}

    if scale.scale_type == BonusScaleType.TIERED:
        if not scale.tiers:
            errors["tiers"] = ["A tiered scale needs at least one tier."]
        else:
            min_scores = [tier.min_score for tier in scale.tiers]
            if len(set(min_scores)) != len(min_scores):
                errors["tiers"] = ["Tier minimum scores must be unique."]
            elif any(tier.payout < 0 for tier in scale.tiers):
                errors["tiers"] = ["Tier payouts cannot be negative."]
            elif any(tier.payout < scale.floor_fraction for tier in scale.tiers):
                errors["tiers"] = ["Tier payouts cannot be lower than the floor fraction."]
        return errors

    if scale.scale_type != BonusScaleType.LINEAR:
        errors["scale_type"] = [f"Unknown scale type {scale.scale_type}."]
        return errors

    if not Decimal("0") <= scale.threshold <= DECIMAL_HUNDRED:
        errors["threshold"] = ["Threshold must be between 0 and 100."]
    if scale.min_fraction > scale.max_fraction:
        errors["min_fraction"] = ["Minimum fraction cannot exceed the maximum fraction."]
    if scale.floor_fraction > scale.min_fraction:
        errors["floor_fraction"] = ["Floor fraction cannot exceed the minimum fraction."]
    if scale.floor_fraction < 0:
        errors["floor_fraction"] = ["Floor fraction cannot be negative."]
    return errors


def _quantize_fraction(value: Decimal) -> Decimal:
    return value.quantize(FRACTION_PLACES, rounding=ROUND_HALF_UP)


def linear_payout_fraction(score, scale: BonusScale) -> Decimal:
    score = clamp_decimal(to_decimal(score), Decimal("0"), DECIMAL_HUNDRED)
    if score < scale.threshold:
        return _quantize_fraction(scale.floor_fraction)
    if score >= DECIMAL_HUNDRED:
        return _quantize_fraction(scale.max_fraction)

    span = DECIMAL_HUNDRED - scale.threshold
    progress = (score - scale.threshold) / span
    return _quantize_fraction(scale.min_fraction + (scale.max_fraction - scale.min_fraction) * progress)


def tiered_payout_fraction(score, scale: BonusScale) -> Decimal:
    score = to_decimal(score)
    payout = scale.floor_fraction
    for tier in sorted_tiers(scale.tiers):
        if tier.min_score <= score:
            payout = tier.payout
    return _quantize_fraction(payout)


def payout_fraction(score, scale: BonusScale) -> Decimal:
    """Fraction of the target bonus earned for ``score`` under ``scale``.

    Example:
        >>> scale = BonusScale(min_fraction=Decimal("0"), max_fraction=Decimal("0.3"), threshold=Decimal("60"))
        >>> payout_fraction(Decimal("80"), scale)
        Decimal('0.1500')
    """
    if scale.scale_type == BonusScaleType.TIERED:
        return tiered_payout_fraction(score, scale)
    return linear_payout_fraction(score, scale)


def target_amount(base_salary, target_multiple) -> Decimal:
    return quantize_decimal(to_decimal(base_salary) * to_decimal(target_multiple))


def bonus_amount(base_salary, target_multiple, fraction) -> Decimal:
    """``base_salary * target_multiple * fraction`` rounded half-up to cents."""
    return quantize_decimal(to_decimal(base_salary) * to_decimal(target_multiple) * to_decimal(fraction))
