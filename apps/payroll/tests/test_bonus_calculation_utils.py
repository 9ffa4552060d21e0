"""Tests for bonus scale calculations."""

from decimal import Decimal

import pytest

from apps.payroll.constants import BonusScaleType
from apps.payroll.utils.bonus_calculation import (
    BonusScale,
    BonusTier,
    bonus_amount,
    payout_fraction,
    target_amount,
    validate_scale,
)

LINEAR = BonusScale(
    scale_type=BonusScaleType.LINEAR,
    min_fraction=Decimal("0"),
    max_fraction=Decimal("0.3"),
    threshold=Decimal("60"),
)

TIERED = BonusScale(
    scale_type=BonusScaleType.TIERED,
    tiers=[
        BonusTier(Decimal("0"), Decimal("0")),
        BonusTier(Decimal("70"), Decimal("0.1")),
        BonusTier(Decimal("85"), Decimal("0.2")),
        BonusTier(Decimal("95"), Decimal("0.3")),
    ],
)


class TestLinearScale:
    def test_interpolates_between_threshold_and_hundred(self):
        """Test that a score of 80 on a 60-100 / 0-30% scale pays 15%."""
        assert payout_fraction(Decimal("80"), LINEAR) == Decimal("0.1500")

    def test_threshold_pays_min_fraction(self):
        scale = BonusScale(
            min_fraction=Decimal("0.05"),
            max_fraction=Decimal("0.3"),
            threshold=Decimal("60"),
            floor_fraction=Decimal("0.02"),
        )

        assert payout_fraction(Decimal("60"), scale) == Decimal("0.0500")
        assert payout_fraction(Decimal("59.9"), scale) == Decimal("0.0200")

    def test_hundred_and_above_pay_max_fraction(self):
        assert payout_fraction(Decimal("100"), LINEAR) == Decimal("0.3000")
        assert payout_fraction(Decimal("130"), LINEAR) == Decimal("0.3000")

    def test_fraction_never_decreases_with_score(self):
        fractions = [payout_fraction(Decimal(score), LINEAR) for score in range(0, 121, 5)]

        assert fractions == sorted(fractions)

    def test_fraction_is_rounded_to_four_places(self):
        scale = BonusScale(min_fraction=Decimal("0"), max_fraction=Decimal("0.1"), threshold=Decimal("70"))

        # 0.1 * 10 / 30 = 0.03333...
        assert payout_fraction(Decimal("80"), scale) == Decimal("0.0333")


class TestTieredScale:
    @pytest.mark.parametrize(
        "score,expected",
        [("50", "0.0000"), ("70", "0.1000"), ("84.9", "0.1000"), ("90", "0.2000"), ("95", "0.3000"), ("100", "0.3000")],
    )
    def test_last_qualifying_tier_wins(self, score, expected):
        assert payout_fraction(Decimal(score), TIERED) == Decimal(expected)

    def test_tier_order_does_not_matter(self):
        shuffled = BonusScale(scale_type=BonusScaleType.TIERED, tiers=list(reversed(TIERED.tiers)))

        assert payout_fraction(Decimal("90"), shuffled) == Decimal("0.2000")

    def test_no_qualifying_tier_pays_floor(self):
        scale = BonusScale(
            scale_type=BonusScaleType.TIERED,
            floor_fraction=Decimal("0.02"),
            tiers=[BonusTier(Decimal("70"), Decimal("0.1"))],
        )

        assert payout_fraction(Decimal("40"), scale) == Decimal("0.0200")


class TestAmounts:
    def test_bonus_amount(self):
        assert bonus_amount(Decimal("1000000"), Decimal("1.0"), Decimal("0.15")) == Decimal("150000.00")

    def test_bonus_amount_rounds_half_up_to_cents(self):
        assert bonus_amount(Decimal("100.05"), Decimal("1"), Decimal("0.5")) == Decimal("50.03")

    def test_target_amount(self):
        assert target_amount(Decimal("1000000"), Decimal("1.5")) == Decimal("1500000.00")


class TestValidateScale:
    def test_valid_scales(self):
        assert validate_scale(LINEAR) == {}
        assert validate_scale(TIERED) == {}

    def test_linear_ordering_rules(self):
        scale = BonusScale(
            min_fraction=Decimal("0.4"),
            max_fraction=Decimal("0.3"),
            threshold=Decimal("120"),
            floor_fraction=Decimal("0.5"),
        )

        errors = validate_scale(scale)

        assert set(errors) == {"threshold", "min_fraction", "floor_fraction"}

    def test_tiered_needs_tiers(self):
        assert "tiers" in validate_scale(BonusScale(scale_type=BonusScaleType.TIERED))

    def test_tiered_rejects_duplicate_min_scores(self):
        scale = BonusScale(
            scale_type=BonusScaleType.TIERED,
            tiers=[BonusTier(Decimal("70"), Decimal("0.1")), BonusTier(Decimal("70"), Decimal("0.2"))],
        )

        assert "tiers" in validate_scale(scale)

    def test_tier_payout_below_floor(self):
        scale = BonusScale(
            scale_type=BonusScaleType.TIERED,
            floor_fraction=Decimal("0.05"),
            tiers=[BonusTier(Decimal("70"), Decimal("0.01"))],
        )

        assert "tiers" in validate_scale(scale)

    def test_unknown_scale_type(self):
        assert "scale_type" in validate_scale(BonusScale(scale_type="stepped"))


class TestScaleSerialization:
    def test_from_dict_coerces_malformed_numbers(self):
        scale = BonusScale.from_dict({"scale_type": "linear", "max_fraction": "0.3", "threshold": "n/a"})

        assert scale.max_fraction == Decimal("0.3")
        assert scale.threshold == Decimal("0")

    def test_tiered_as_dict_sorts_tiers(self):
        shuffled = BonusScale(scale_type=BonusScaleType.TIERED, tiers=list(reversed(TIERED.tiers)))

        assert [tier["min_score"] for tier in shuffled.as_dict()["tiers"]] == ["0", "70", "85", "95"]
