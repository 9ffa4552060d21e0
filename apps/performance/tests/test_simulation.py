from decimal import Decimal

from apps.performance.constants import AccumulationMode, ClosureRule
from apps.performance.services.simulation import goal_config_from_data, simulate
from apps.performance.utils.aggregation import MixRatio

MIX = MixRatio(Decimal("0.7"), Decimal("0.3"))


def revenue_goal(**kwargs):
    goal = {
        "name": "Revenue",
        "expected_value": Decimal("80"),
        "effort_credit": True,
        "records": [{"period_code": "2024Q1", "value": 80}, {"period_code": "2024Q2", "value": 60}],
    }
    goal.update(kwargs)
    return goal


class TestGoalConfigFromData:
    def test_unset_fields_keep_defaults(self):
        config = goal_config_from_data({"name": "Visits", "expected_value": Decimal("10"), "records": []})

        assert config.expected_value == Decimal("10")
        assert config.closure_rule == ClosureRule.AVERAGE
        assert config.weight is None


class TestSimulate:
    def test_objectives_and_aptitudes_mix_into_global_score(self):
        """Test that revenue 80 then 60 against 80 and a teamwork score of 80 give 85.3."""
        result = simulate(
            [{"name": "Sales volume", "weight": Decimal("60"), "goals": [revenue_goal()]}],
            [{"name": "Teamwork", "weight": Decimal("40"), "score": Decimal("80")}],
            mix=MIX,
        )

        [objective] = result["objectives"]
        [goal] = objective["goals"]
        assert goal["score"] == Decimal("87.50")
        assert goal["met"] is True
        assert [period["period_code"] for period in goal["periods"]] == ["2024Q1", "2024Q2"]
        assert objective["score"] == Decimal("87.50")
        assert result["objective_score"] == Decimal("87.50")
        assert result["aptitude_score"] == Decimal("80.00")
        assert result["global_score"] == Decimal("85.3")

    def test_weighted_goals(self):
        goals = [
            revenue_goal(weight=Decimal("60"), records=[{"period_code": "2024A1", "value": 80}]),
            revenue_goal(name="Visits", weight=Decimal("40"), records=[{"period_code": "2024A1", "value": 40}]),
        ]

        result = simulate([{"name": "Sales", "weight": Decimal("100"), "goals": goals}], mix=MIX)

        assert result["objectives"][0]["score"] == Decimal("80.00")
        assert result["aptitude_score"] == Decimal("0.00")
        assert result["global_score"] == Decimal("56.0")

    def test_cumulative_goal_closes_on_last_period(self):
        goal = revenue_goal(
            expected_value=Decimal("100"),
            effort_credit=False,
            accumulation_mode=AccumulationMode.CUMULATIVE,
            closure_rule=ClosureRule.LAST_PERIOD,
            records=[
                {"period_code": "2024Q1", "value": 40},
                {"period_code": "2024Q2", "value": 30},
                {"period_code": "2024Q3", "value": 50},
            ],
        )

        result = simulate([{"name": "Contracts", "weight": Decimal("100"), "goals": [goal]}], mix=MIX)

        [scored] = result["objectives"][0]["goals"]
        assert [period["evaluated_value"] for period in scored["periods"]] == [
            Decimal("40"),
            Decimal("70"),
            Decimal("120"),
        ]
        assert scored["score"] == Decimal("100.00")
        assert scored["met"] is True

    def test_threshold_count_uses_total_periods(self):
        goal = revenue_goal(
            effort_credit=False,
            closure_rule=ClosureRule.THRESHOLD_COUNT,
            records=[{"period_code": "2024Q1", "value": 90}],
        )

        result = simulate(
            [{"name": "Sales", "weight": Decimal("100"), "total_periods": 4, "goals": [goal]}],
            mix=MIX,
        )

        [scored] = result["objectives"][0]["goals"]
        assert scored["score"] == Decimal("25.00")
        assert scored["met"] is False

    def test_custom_mix(self):
        result = simulate(
            [{"name": "Sales", "weight": Decimal("100"), "goals": [revenue_goal()]}],
            [{"name": "Teamwork", "weight": Decimal("100"), "score": Decimal("40")}],
            mix=MixRatio(Decimal("0.5"), Decimal("0.5")),
        )

        assert result["global_score"] == Decimal("63.8")
        assert result["mix"] == {"objective": Decimal("0.5"), "aptitude": Decimal("0.5")}
