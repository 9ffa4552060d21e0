"""Milestone period generation.

A fiscal year ``Y`` runs from the 1st of the start month (September by
default) of ``Y`` to the day before that month in ``Y + 1``. Period codes are
stable so that evaluations keyed on them can be regenerated:

- monthly: ``<calendar year>M<mm>`` (e.g. ``2024M09`` ... ``2025M08``)
- quarterly: ``<fiscal year>Q<n>``
- semiannual: ``<fiscal year>S<n>``
- annual: ``<fiscal year>A1``
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from apps.performance.constants import ReviewFrequency

FISCAL_YEAR_START_MONTH = 9

# frequency -> (months per period, code letter)
FREQUENCY_UNITS = {
    ReviewFrequency.MONTHLY: (1, "M"),
    ReviewFrequency.QUARTERLY: (3, "Q"),
    ReviewFrequency.SEMIANNUAL: (6, "S"),
    ReviewFrequency.ANNUAL: (12, "A"),
}


@dataclass(frozen=True)
class Period:
    code: str
    start: date
    end: date
    index: int

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "index": self.index,
        }


def add_months(value: date, months: int) -> date:
    """Return the 1st of the month ``months`` after ``value``'s month."""
    month_index = value.month - 1 + months
    return date(value.year + month_index // 12, month_index % 12 + 1, 1)


def fiscal_year_window(year: int, start_month: int = FISCAL_YEAR_START_MONTH) -> Tuple[date, date]:
    """Return the first and last day of fiscal year ``year``.

    Example:
        >>> fiscal_year_window(2024)
        (datetime.date(2024, 9, 1), datetime.date(2025, 8, 31))
    """
    start = date(year, start_month, 1)
    return start, add_months(start, 12) - timedelta(days=1)


def fiscal_year_of(day: date, start_month: int = FISCAL_YEAR_START_MONTH) -> int:
    return day.year if day.month >= start_month else day.year - 1


def review_window(
    year: int,
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
    start_month: int = FISCAL_YEAR_START_MONTH,
) -> Tuple[date, date]:
    """Return the effective first and last day of a review window.

    Unset edges fall back to the fiscal year boundaries.

    Raises:
        ValueError: when the resulting window is empty
    """
    fiscal_start, fiscal_end = fiscal_year_window(year, start_month)
    start = window_start or fiscal_start
    end = window_end or fiscal_end
    if end < start:
        raise ValueError("Review window end must not precede its start")
    return start, end


def _period_code(year: int, frequency: str, letter: str, index: int, period_start: date) -> str:
    if frequency == ReviewFrequency.MONTHLY:
        return f"{period_start.year}{letter}{period_start.month:02d}"
    return f"{year}{letter}{index}"


def generate_periods(
    year: int,
    frequency: str,
    window_start: Optional[date] = None,
    window_end: Optional[date] = None,
    start_month: int = FISCAL_YEAR_START_MONTH,
) -> List[Period]:
    """Generate the ordered, non-overlapping periods of a review window.

    The window defaults to the fiscal year; ``window_start``/``window_end``
    override either edge. Period boundaries are aligned to the 1st of the
    month of the window start, the first and last periods are clipped to the
    window. A window shorter than one period unit still yields one period.

    Args:
        year: Fiscal year the periods belong to (used in non-monthly codes)
        frequency: One of ReviewFrequency
        window_start: Optional custom first day
        window_end: Optional custom last day
        start_month: Month the fiscal year starts in

    Returns:
        List of Period in chronological order

    Raises:
        ValueError: unknown frequency, or window end before window start

    Example:
        >>> [p.code for p in generate_periods(2024, "quarterly")]
        ['2024Q1', '2024Q2', '2024Q3', '2024Q4']
    """
    if frequency not in FREQUENCY_UNITS:
        raise ValueError(f"Unknown review frequency: {frequency}")

    start, end = review_window(year, window_start, window_end, start_month)

    months, letter = FREQUENCY_UNITS[frequency]
    anchor = start.replace(day=1)

    periods = []
    index = 0
    while True:
        period_start = max(add_months(anchor, index * months), start)
        if period_start > end:
            break
        period_end = min(add_months(anchor, (index + 1) * months) - timedelta(days=1), end)
        index += 1
        periods.append(
            Period(
                code=_period_code(year, frequency, letter, index, period_start),
                start=period_start,
                end=period_end,
                index=index,
            )
        )
    return periods


def period_order(periods: List[Period]) -> Dict[str, int]:
    """Map period code to its 1-based position."""
    return {period.code: period.index for period in periods}
