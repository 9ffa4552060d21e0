from .decimals import clamp_decimal, quantize_decimal, round_decimal, to_decimal
from .drf.base_viewset import BaseGenericViewSet, BaseModelViewSet, BaseReadOnlyModelViewSet
from .drf.pagination import PageNumberWithSizePagination
from .models import BaseModel

__all__ = [
    "BaseModel",
    "BaseModelViewSet",
    "BaseReadOnlyModelViewSet",
    "BaseGenericViewSet",
    "PageNumberWithSizePagination",
    "clamp_decimal",
    "quantize_decimal",
    "round_decimal",
    "to_decimal",
]
