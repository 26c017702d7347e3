"""Cent-precise currency arithmetic.

Every monetary value in the engine passes through these helpers so results
are reproducible to the cent. Values are ``Decimal`` quantized to two places
with half-up rounding; floats are converted through their shortest ``repr`` so
``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import reduce
from typing import Iterable, Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
DEFAULT_SYMBOL = "$"

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


def to_decimal(value: Number) -> Decimal:
    """Convert *value* to ``Decimal`` without rounding."""

    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def to_money(value: Number) -> Decimal:
    """Return *value* rounded to the cent."""

    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


# Alias kept for readability at call sites that round an existing amount.
round_money = to_money


def add(a: Number, b: Number) -> Decimal:
    return to_money(to_money(a) + to_money(b))


def subtract(a: Number, b: Number) -> Decimal:
    return to_money(to_money(a) - to_money(b))


def multiply(amount: Number, factor: Number) -> Decimal:
    """Multiply a currency amount by a plain scalar."""

    return to_money(to_money(amount) * to_decimal(factor))


def divide(amount: Number, divisor: Number) -> Decimal:
    """Divide a currency amount by a plain scalar.

    Raises ``ZeroDivisionError`` when *divisor* is zero.
    """

    return to_money(to_money(amount) / to_decimal(divisor))


def sum_money(amounts: Iterable[Number]) -> Decimal:
    return reduce(add, amounts, ZERO)


def min_money(a: Number, b: Number) -> Decimal:
    left, right = to_money(a), to_money(b)
    return left if left <= right else right


def max_money(a: Number, b: Number) -> Decimal:
    left, right = to_money(a), to_money(b)
    return left if left >= right else right


def is_zero(amount: Number) -> bool:
    return to_money(amount) == ZERO


def is_positive(amount: Number) -> bool:
    return to_money(amount) > ZERO


def is_negative(amount: Number) -> bool:
    return to_money(amount) < ZERO


def _clean(text: str) -> Decimal | None:
    cleaned = _NON_NUMERIC.sub("", text or "")
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def parse_currency(text: str) -> Decimal:
    """Parse user input such as ``"$1,234.50"``; unparseable input yields 0."""

    value = _clean(text)
    return ZERO if value is None else to_money(value)


def is_valid_currency(text: str) -> bool:
    """Return True when *text* parses to a finite, non-negative amount."""

    value = _clean(text)
    return value is not None and value >= 0


def format_currency(amount: Number, *, symbol: str = DEFAULT_SYMBOL) -> str:
    """Render an amount as ``$1,234.56`` (``-$1,234.56`` when negative)."""

    value = to_money(amount)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.2f}"


def calculate_monthly_interest(balance: Number, annual_rate: Number) -> Decimal:
    """Return one month of interest on *balance* at an annual percentage rate."""

    return to_money(to_money(balance) * to_decimal(annual_rate) / Decimal(1200))


def calculate_required_payment(balance: Number, annual_rate: Number, months: int) -> Decimal:
    """Return the level monthly payment that retires *balance* in *months*."""

    if months <= 0:
        raise ValueError("months must be positive")
    rate = to_decimal(annual_rate)
    if rate == 0:
        return divide(balance, months)
    monthly_rate = rate / Decimal(1200)
    denominator = 1 - (1 + monthly_rate) ** -months
    return to_money(to_money(balance) * monthly_rate / denominator)
