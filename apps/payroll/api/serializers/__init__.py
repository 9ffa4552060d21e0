from .bonus_config import BonusConfigOverrideSerializer, BonusConfigSerializer, BonusTierSerializer
from .bonus_result import (
    BonusCalculateRequestSerializer,
    BonusCalculateResponseSerializer,
    BonusFailureSerializer,
    BonusResultSerializer,
)

__all__ = [
    "BonusTierSerializer",
    "BonusConfigOverrideSerializer",
    "BonusConfigSerializer",
    "BonusResultSerializer",
    "BonusCalculateRequestSerializer",
    "BonusCalculateResponseSerializer",
    "BonusFailureSerializer",
]
