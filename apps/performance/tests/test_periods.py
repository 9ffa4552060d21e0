"""Tests for milestone period generation."""

from datetime import date

import pytest

from apps.performance.constants import ReviewFrequency
from apps.performance.utils.periods import (
    fiscal_year_of,
    fiscal_year_window,
    generate_periods,
    period_order,
    review_window,
)


class TestFiscalYear:
    def test_window_runs_september_to_august(self):
        assert fiscal_year_window(2024) == (date(2024, 9, 1), date(2025, 8, 31))

    def test_custom_start_month(self):
        assert fiscal_year_window(2024, start_month=1) == (date(2024, 1, 1), date(2024, 12, 31))

    def test_fiscal_year_of(self):
        assert fiscal_year_of(date(2024, 9, 1)) == 2024
        assert fiscal_year_of(date(2025, 3, 15)) == 2024
        assert fiscal_year_of(date(2025, 8, 31)) == 2024


class TestGeneratePeriods:
    def test_quarterly_codes_and_boundaries(self):
        """Test that a quarterly fiscal year yields four contiguous quarters."""
        periods = generate_periods(2024, ReviewFrequency.QUARTERLY)

        assert [p.code for p in periods] == ["2024Q1", "2024Q2", "2024Q3", "2024Q4"]
        assert periods[0].start == date(2024, 9, 1)
        assert periods[0].end == date(2024, 11, 30)
        assert periods[1].end == date(2025, 2, 28)
        assert periods[-1].end == date(2025, 8, 31)
        for previous, current in zip(periods, periods[1:]):
            assert (current.start - previous.end).days == 1

    def test_monthly_codes_use_calendar_year(self):
        periods = generate_periods(2024, ReviewFrequency.MONTHLY)

        assert len(periods) == 12
        assert periods[0].code == "2024M09"
        assert periods[3].code == "2024M12"
        assert periods[4].code == "2025M01"
        assert periods[-1].code == "2025M08"

    def test_semiannual_and_annual(self):
        semiannual = generate_periods(2024, ReviewFrequency.SEMIANNUAL)
        annual = generate_periods(2024, ReviewFrequency.ANNUAL)

        assert [p.code for p in semiannual] == ["2024S1", "2024S2"]
        assert semiannual[0].end == date(2025, 2, 28)
        assert [p.code for p in annual] == ["2024A1"]
        assert (annual[0].start, annual[0].end) == (date(2024, 9, 1), date(2025, 8, 31))

    def test_custom_window_is_clipped(self):
        """Test that the first and last periods are clipped to a custom window."""
        periods = generate_periods(
            2024,
            ReviewFrequency.QUARTERLY,
            window_start=date(2024, 10, 15),
            window_end=date(2025, 3, 10),
        )

        assert [p.code for p in periods] == ["2024Q1", "2024Q2"]
        assert periods[0].start == date(2024, 10, 15)
        assert periods[0].end == date(2024, 12, 31)
        assert periods[1].start == date(2025, 1, 1)
        assert periods[1].end == date(2025, 3, 10)

    def test_window_shorter_than_one_unit_yields_one_period(self):
        periods = generate_periods(
            2024,
            ReviewFrequency.QUARTERLY,
            window_start=date(2024, 10, 5),
            window_end=date(2024, 10, 20),
        )

        assert len(periods) == 1
        assert periods[0].code == "2024Q1"
        assert (periods[0].start, periods[0].end) == (date(2024, 10, 5), date(2024, 10, 20))

    def test_generation_is_deterministic(self):
        first = generate_periods(2024, ReviewFrequency.MONTHLY)
        second = generate_periods(2024, ReviewFrequency.MONTHLY)

        assert first == second

    def test_unknown_frequency_raises(self):
        with pytest.raises(ValueError):
            generate_periods(2024, "weekly")

    def test_window_end_before_start_raises(self):
        with pytest.raises(ValueError):
            generate_periods(
                2024,
                ReviewFrequency.QUARTERLY,
                window_start=date(2025, 1, 1),
                window_end=date(2024, 12, 1),
            )

    def test_window_start_after_fiscal_year_raises(self):
        with pytest.raises(ValueError):
            generate_periods(2024, ReviewFrequency.QUARTERLY, window_start=date(2025, 10, 1))

    def test_period_order_and_as_dict(self):
        periods = generate_periods(2024, ReviewFrequency.QUARTERLY)

        assert period_order(periods) == {"2024Q1": 1, "2024Q2": 2, "2024Q3": 3, "2024Q4": 4}
        assert periods[0].as_dict() == {
            "code": "2024Q1",
            "start": "2024-09-01",
            "end": "2024-11-30",
            "index": 1,
        }


class TestReviewWindow:
    def test_unset_edges_fall_back_to_fiscal_year(self):
        assert review_window(2024) == (date(2024, 9, 1), date(2025, 8, 31))
        assert review_window(2024, window_end=date(2025, 2, 28)) == (date(2024, 9, 1), date(2025, 2, 28))

    @pytest.mark.parametrize(
        "window_start,window_end",
        [
            (date(2025, 10, 1), None),
            (None, date(2024, 8, 1)),
        ],
    )
    def test_single_edge_outside_fiscal_year_is_empty(self, window_start, window_end):
        with pytest.raises(ValueError):
            review_window(2024, window_start=window_start, window_end=window_end)
