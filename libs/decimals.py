from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Union

DECIMAL_ZERO = Decimal("0.00")
DECIMAL_HUNDRED = Decimal("100")


def quantize_decimal(val: Union[Decimal, int, float, str, None]) -> Decimal:
    if val is None:
        return DECIMAL_ZERO
    if not isinstance(val, Decimal):
        val = Decimal(str(val))
    return val.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def round_decimal(val: Union[Decimal, int, float, str, None], places: int = 1) -> Decimal:
    """Round half-up to the given number of decimal places.

    Example:
        >>> round_decimal(Decimal("84.25"))
        Decimal('84.3')
    """
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(val).quantize(exponent, rounding=ROUND_HALF_UP)


def to_decimal(val: Any) -> Decimal:
    """Coerce a loosely typed value to Decimal, falling back to zero.

    Used on read paths where a malformed number must not break a computation:
    ``None``, blank strings, unparsable text, NaN and infinities all become 0.
    Booleans map to 1/0.
    """
    if val is None:
        return Decimal(0)
    if isinstance(val, bool):
        return Decimal(1) if val else Decimal(0)
    if isinstance(val, Decimal):
        result = val
    else:
        try:
            result = Decimal(str(val).strip())
        except (InvalidOperation, ValueError):
            return Decimal(0)
    if not result.is_finite():
        return Decimal(0)
    return result


def clamp_decimal(val: Decimal, lower: Decimal, upper: Decimal) -> Decimal:
    return max(lower, min(upper, val))
