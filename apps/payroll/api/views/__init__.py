from .bonus_config import BonusConfigViewSet
from .bonus_result import BonusResultViewSet

__all__ = [
    "BonusConfigViewSet",
    "BonusResultViewSet",
]
