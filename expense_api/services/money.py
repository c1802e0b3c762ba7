"""Money helpers.

Centralized so validation and storage use identical decimal semantics.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENTS = Decimal("0.01")


def parse_amount(value: Union[str, int, float, Decimal]) -> Decimal:
    """Parse a currency amount, rejecting negatives and sub-cent precision.

    Raises ValueError when the value is not a finite non-negative number with
    at most two fractional digits.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"not a finite number: {value!r}")
    if amount < 0:
        raise ValueError("amount cannot be negative")
    try:
        cents = amount.quantize(CENTS)
    except InvalidOperation as e:
        raise ValueError(f"amount out of range: {value!r}") from e
    if cents != amount:
        raise ValueError("amount has more than 2 decimal places")
    return abs(amount)  # folds -0 into 0


def format_amount(amount: Decimal) -> str:
    """Render an amount with exactly two fractional digits ("4.5" -> "4.50")."""
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))
