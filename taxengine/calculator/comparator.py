"""
comparator.py — Old vs New regime comparison.

Runs the slab calculator once per regime on the same aggregates and picks
the cheaper one. Ties go to the New Regime (simpler compliance).
"""
from __future__ import annotations

import logging

from taxengine.calculator.schemas import (
    DeductionAggregate,
    IncomeAggregate,
    RegimeComparison,
)
from taxengine.calculator.slab_calculator import compute_for_regime
from taxengine.money import format_inr, share_percent
from taxengine.rules.schemas import Regime, RegimeTables

logger = logging.getLogger(__name__)


def compare(
    income: IncomeAggregate,
    deductions: DeductionAggregate,
    tables: RegimeTables,
) -> RegimeComparison:
    old = compute_for_regime(income, deductions, tables.old)
    new = compute_for_regime(income, deductions, tables.new)

    if old.total_tax < new.total_tax:
        cheaper = Regime.old
    else:
        # new is cheaper, or a tie → New Regime
        cheaper = Regime.new

    savings = abs(old.total_tax - new.total_tax)
    result = RegimeComparison(
        old=old,
        new=new,
        cheaper=cheaper,
        savings_amount=savings,
        savings_percentage=share_percent(savings, old.gross_income),
    )
    logger.debug("Regime comparison fy=%s cheaper=%s", old.financial_year, cheaper.value)
    return result


def build_rationale(comparison: RegimeComparison) -> str:
    """Two or three plain sentences explaining the recommendation."""
    old, new = comparison.old, comparison.new
    savings = comparison.savings_amount

    if savings == 0:
        return (
            f"Both regimes result in the same tax ({format_inr(old.total_tax)}). "
            "New Regime recommended as the simpler option with no mandatory investment requirements."
        )
    if comparison.cheaper == Regime.old:
        top = sorted(old.deductions, key=lambda d: d.capped, reverse=True)[:3]
        key_deds = ", ".join(f"{d.section} {format_inr(d.capped)}" for d in top if d.capped > 0)
        return (
            f"Old Regime saves {format_inr(savings)} over the New Regime. "
            f"Old Regime tax: {format_inr(old.total_tax)} vs New Regime tax: {format_inr(new.total_tax)}. "
            f"Key deductions: {key_deds or 'available deductions'}."
        )
    return (
        f"New Regime saves {format_inr(savings)} over the Old Regime. "
        f"New Regime tax: {format_inr(new.total_tax)} vs Old Regime tax: {format_inr(old.total_tax)}. "
        f"Your eligible Old Regime deductions ({format_inr(old.total_deductions)}) "
        "are insufficient to overcome the lower New Regime slab rates."
    )


__all__ = ["compare", "build_rationale"]
