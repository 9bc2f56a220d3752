"""
money.py — Rupee/paise conversion and the single rounding policy.

Inside the engine every amount is an int number of paise. Intermediate tax
figures stay as exact Decimal paise; only the final total is rounded, once,
to a whole rupee (half-up). Rupees appear only at the HTTP boundary.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

PAISE_PER_RUPEE = 100

_ONE = Decimal("1")
_CENT = Decimal("0.01")

Number = Union[int, float, str, Decimal]


def rupees(amount: Number) -> int:
    """
    Convert a rupee amount to paise.

    Floats go through str() so 0.1 becomes exactly 10 paise. Sub-paisa
    fractions are rounded half-up.
    """
    if isinstance(amount, float):
        amount = str(amount)
    value = Decimal(amount) * PAISE_PER_RUPEE
    return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))


def round_to_rupee(paise: Union[int, Decimal]) -> int:
    """Round a paise amount to the nearest whole rupee, returned in paise."""
    whole = (Decimal(paise) / PAISE_PER_RUPEE).quantize(_ONE, rounding=ROUND_HALF_UP)
    return int(whole) * PAISE_PER_RUPEE


def to_rupees(paise: Union[int, Decimal]) -> float:
    """Paise → rupees for display/JSON, 2 dp half-up."""
    value = (Decimal(paise) / PAISE_PER_RUPEE).quantize(_CENT, rounding=ROUND_HALF_UP)
    return float(value)


def percent_of(paise: Union[int, Decimal], rate_percent: Union[int, Decimal]) -> Decimal:
    """Exact `paise × rate / 100` with no rounding."""
    return Decimal(paise) * Decimal(rate_percent) / 100


def share_percent(part: Union[int, Decimal], whole: Union[int, Decimal]) -> Decimal:
    """part / whole × 100 at 2 dp half-up; 0.00 when whole is 0."""
    if not whole:
        return Decimal("0").quantize(_CENT)
    return (Decimal(part) * 100 / Decimal(whole)).quantize(_CENT, rounding=ROUND_HALF_UP)


def format_inr(paise: Union[int, Decimal]) -> str:
    """
    Indian digit grouping for messages: 15000000 paise → '₹1,50,000'.
    Whole rupees only.
    """
    whole = int((Decimal(paise) / PAISE_PER_RUPEE).quantize(_ONE, rounding=ROUND_HALF_UP))
    sign = "-" if whole < 0 else ""
    digits = str(abs(whole))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups) + "," + tail
    return f"{sign}₹{digits}"


__all__ = [
    "PAISE_PER_RUPEE",
    "rupees",
    "round_to_rupee",
    "to_rupees",
    "percent_of",
    "share_percent",
    "format_inr",
]
