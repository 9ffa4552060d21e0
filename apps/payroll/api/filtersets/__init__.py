from .bonus import BonusConfigFilterSet, BonusResultFilterSet

__all__ = [
    "BonusConfigFilterSet",
    "BonusResultFilterSet",
]
