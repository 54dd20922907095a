import math
from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a cashier does: 0.5 always goes up. Non-finite input becomes 0."""
    if not math.isfinite(value):
        return 0.0
    exponent = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def round_won(value: float) -> float:
    return round_half_up(value, 0)


def round_cents(value: float) -> float:
    return round_half_up(value, 2)


def format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_krw(value: float) -> str:
    return f"{format_number(round_won(value))}원"
