from decimal import Decimal
from typing import Union

Amount = Union[Decimal, int, float, str]

ZERO = Decimal("0")


def to_decimal(value: Amount) -> Decimal:
    """Coerce a price or weight to Decimal; floats go through str() so 0.2 stays 0.2."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)
