"""Money helpers.

Amounts are held as ``Decimal`` at the edges and as integer minor units
(cents) whenever they are summed or compared.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENTS = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def to_cents(amount: Amount) -> int:
    """Convert a display amount to integer cents, rounding half up."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENTS)


def format_money(amount: Amount, symbol: str = "$") -> str:
    """Format an amount for display, e.g. ``$1,234.50``."""
    cents = to_cents(amount)
    sign = "-" if cents < 0 else ""
    return f"{sign}{symbol}{from_cents(abs(cents)):,.2f}"
