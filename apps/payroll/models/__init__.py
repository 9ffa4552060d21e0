from .bonus_config import BonusConfig, BonusConfigOverride
from .bonus_result import BonusResult

__all__ = [
    "BonusConfig",
    "BonusConfigOverride",
    "BonusResult",
]
