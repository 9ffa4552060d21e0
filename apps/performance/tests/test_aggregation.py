from decimal import Decimal

import pytest
from django.core.exceptions import ImproperlyConfigured

from apps.performance.services.scoring import get_mix_ratio
from apps.performance.utils.aggregation import (
    MixRatio,
    block_score,
    global_score,
    objective_score_from_goals,
    rating_to_score,
    scale_weight,
)
from apps.performance.utils.overrides import cascade

MIX = MixRatio(Decimal("0.7"), Decimal("0.3"))


class TestObjectiveScore:
    def test_weighted_goals(self):
        score = objective_score_from_goals([(Decimal(60), Decimal(100)), (Decimal(40), Decimal(50))])

        assert score == Decimal("80")

    def test_unweighted_goals_use_mean(self):
        score = objective_score_from_goals([(None, Decimal(100)), (None, Decimal(50))])

        assert score == Decimal("75")

    def test_unweighted_goals_do_not_contribute_when_others_are_weighted(self):
        score = objective_score_from_goals([(Decimal(1), Decimal(90)), (None, Decimal(10))])

        assert score == Decimal("90")

    def test_zero_weights_fall_back_to_mean(self):
        score = objective_score_from_goals([(Decimal(0), Decimal(100)), (Decimal(0), Decimal(0))])

        assert score == Decimal("50")

    def test_no_goals(self):
        assert objective_score_from_goals([]) == Decimal("0")


class TestBlockAndGlobalScore:
    def test_block_weighted_mean(self):
        assert block_score([(Decimal(60), Decimal(90)), (Decimal(40), Decimal(40))]) == Decimal("70")

    def test_block_zero_weights_fall_back_to_mean(self):
        assert block_score([(0, Decimal(90)), (0, Decimal(70))]) == Decimal("80")

    def test_empty_block_scores_zero(self):
        assert block_score([]) == Decimal("0")

    def test_global_score(self):
        assert global_score(Decimal(90), Decimal(80), MIX) == Decimal("87.0")

    def test_global_score_rounds_half_up_to_one_decimal(self):
        # 85.55 * 0.7 + 70 * 0.3 = 80.885
        assert global_score(Decimal("85.55"), Decimal(70), MIX) == Decimal("80.9")
        # 87.5 * 0.7 = 61.25
        assert global_score(Decimal("87.5"), Decimal(0), MIX) == Decimal("61.3")

    def test_rating_and_weight_helpers(self):
        assert rating_to_score(4, 5) == Decimal("80")
        assert rating_to_score(3, 0) == Decimal("0")
        assert scale_weight(40, 50) == Decimal("20")


class TestMixRatio:
    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError):
            MixRatio(Decimal("0.8"), Decimal("0.3"))

    def test_weights_must_not_be_negative(self):
        with pytest.raises(ValueError):
            MixRatio(Decimal("1.2"), Decimal("-0.2"))

    def test_settings_mix_ratio(self, settings):
        settings.PERFORMANCE_OBJECTIVE_WEIGHT = "0.6"
        settings.PERFORMANCE_APTITUDE_WEIGHT = "0.4"

        assert get_mix_ratio() == MixRatio(Decimal("0.6"), Decimal("0.4"))

    def test_invalid_settings_mix_ratio(self, settings):
        settings.PERFORMANCE_OBJECTIVE_WEIGHT = "0.8"
        settings.PERFORMANCE_APTITUDE_WEIGHT = "0.3"

        with pytest.raises(ImproperlyConfigured):
            get_mix_ratio()


class TestCascade:
    def test_most_specific_layer_wins(self):
        assert cascade([("EMPLOYEE", 3), ("DEPARTMENT", 2)], default=1, default_source="GLOBAL") == (3, "EMPLOYEE")

    def test_none_layers_are_skipped(self):
        assert cascade([("EMPLOYEE", None), ("DEPARTMENT", 2)], default=1, default_source="GLOBAL") == (
            2,
            "DEPARTMENT",
        )

    def test_default_when_no_layer_provides_a_value(self):
        assert cascade([("EMPLOYEE", None)], default=1, default_source="GLOBAL") == (1, "GLOBAL")

    def test_zero_is_a_value(self):
        assert cascade([("EMPLOYEE", 0)], default=1) == (0, "EMPLOYEE")
