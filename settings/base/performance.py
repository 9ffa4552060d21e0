"""Scoring and bonus engine settings."""

from .base import config

# Global score mix: objective block vs aptitude block. Must sum to 1.
PERFORMANCE_OBJECTIVE_WEIGHT = config("PERFORMANCE_OBJECTIVE_WEIGHT", default="0.7")
PERFORMANCE_APTITUDE_WEIGHT = config("PERFORMANCE_APTITUDE_WEIGHT", default="0.3")

# Fiscal year runs from the 1st of this month to the day before it next year
PERFORMANCE_FISCAL_YEAR_START_MONTH = config("PERFORMANCE_FISCAL_YEAR_START_MONTH", default=9, cast=int)

PERFORMANCE_BONUS_TRACE_SAMPLE_SIZE = config("PERFORMANCE_BONUS_TRACE_SAMPLE_SIZE", default=20, cast=int)
PERFORMANCE_MATERIALIZE_SAMPLE_SIZE = config("PERFORMANCE_MATERIALIZE_SAMPLE_SIZE", default=5, cast=int)
