from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, float, int]


def _group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Number, symbol: str = "₹", decimals: int = 0) -> str:
    """Format an amount as e.g. '₹1,23,456' (lakh grouping)."""
    value = Decimal(str(amount))
    quantum = Decimal(1).scaleb(-decimals)
    value = value.quantize(quantum, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):f}".partition(".")
    text = _group_indian(whole)
    if decimals:
        text = f"{text}.{fraction}"
    return f"{sign}{symbol}{text}"


def format_signed(amount: Number, symbol: str = "₹") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_currency(abs(Decimal(str(amount))), symbol)}"
