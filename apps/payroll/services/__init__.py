from .bonus_calculation import BonusCalculationService, calculate_bonus_batch

__all__ = [
    "BonusCalculationService",
    "calculate_bonus_batch",
]
