"""
Slab tax calculator — progressive slabs, 87A rebate, surcharge, cess.
Pure Python, deterministic. Same input → same output, byte for byte.

All statutory numbers come from the TaxRuleTable passed in; nothing is
hardcoded here, so every financial year runs through the same code path.

Rounding policy (do NOT change — results must be reproducible):
  - per-slab tax, rebate, surcharge and cess are exact Decimal paise
  - ONLY total_tax is rounded, half-up, to a whole rupee
  - effective_rate_percent is a display figure, 2 dp
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from taxengine.calculator.schemas import (
    DeductionAggregate,
    IncomeAggregate,
    SectionDeduction,
    SlabTax,
    TaxComputationResult,
)
from taxengine.money import percent_of, round_to_rupee, share_percent
from taxengine.rules.schemas import TaxRuleTable

_ZERO = Decimal("0")


# ===========================================================================
# INTERNAL HELPERS (pure functions — no side effects, no I/O)
# ===========================================================================

def _slab_breakdown(taxable_income: int, rules: TaxRuleTable) -> list[SlabTax]:
    """
    taxable_in_slab = clamp(taxable, slab.min, slab.max) - slab.min.
    Every slab gets a row, including the untouched ones above the income.
    """
    rows: list[SlabTax] = []
    for index, slab in enumerate(rules.slabs, start=1):
        if taxable_income <= slab.min:
            taxable_in_slab = 0
        else:
            upper = taxable_income if slab.max is None else min(taxable_income, slab.max)
            taxable_in_slab = upper - slab.min
        rows.append(
            SlabTax(
                slab_index=index,
                min=slab.min,
                max=slab.max,
                rate_percent=slab.rate_percent,
                taxable_in_slab=taxable_in_slab,
                tax_in_slab=percent_of(taxable_in_slab, slab.rate_percent),
            )
        )
    return rows


def _rebate_87a(taxable_income: int, tax_before_rebate: Decimal, rules: TaxRuleTable) -> Decimal:
    """Full rebate up to the cap at or below the threshold; nothing a paisa above it."""
    if taxable_income <= rules.rebate_threshold_income:
        return min(tax_before_rebate, Decimal(rules.rebate_max_amount))
    return _ZERO


def _surcharge_rate(basis_income: int, rules: TaxRuleTable) -> Decimal:
    """Highest band whose min_income <= basis_income; 0 when none matches."""
    rate = _ZERO
    for band in rules.surcharge_bands:
        if band.min_income <= basis_income:
            rate = band.rate_percent
    return rate


def marginal_rate_percent(taxable_income: int, rules: TaxRuleTable) -> Decimal:
    """Rate of the slab the last rupee of taxable income falls in (0 at zero income)."""
    rate = _ZERO
    for slab in rules.slabs:
        if taxable_income > slab.min:
            rate = slab.rate_percent
    return rate


# ===========================================================================
# COMPUTE — public API
# ===========================================================================

def compute(
    taxable_income: int,
    rules: TaxRuleTable,
    *,
    gross_income: Optional[int] = None,
    standard_deduction: int = 0,
    deductions: Iterable[SectionDeduction] = (),
) -> TaxComputationResult:
    """
    Tax on an already-derived taxable income under one regime's rule table.

    Negative taxable income is clamped to 0, never rejected. gross_income only
    feeds the effective rate (and the surcharge when the table's basis is
    "gross"); it defaults to the taxable income.
    """
    taxable = max(0, taxable_income)
    gross = taxable if gross_income is None else gross_income
    applied = list(deductions)

    # Step 1: progressive slabs (exact)
    breakdown = _slab_breakdown(taxable, rules)
    tax_before_rebate = sum((row.tax_in_slab for row in breakdown), _ZERO)

    # Step 2: 87A rebate — can never exceed the tax it rebates
    rebate = _rebate_87a(taxable, tax_before_rebate, rules)
    tax_after_rebate = tax_before_rebate - rebate

    # Step 3: surcharge on post-rebate tax
    basis = gross if rules.surcharge_basis == "gross" else taxable
    surcharge_rate = _surcharge_rate(basis, rules)
    surcharge = percent_of(tax_after_rebate, surcharge_rate)

    # Step 4: cess on (tax + surcharge), always applied
    cess = percent_of(tax_after_rebate + surcharge, rules.cess_rate_percent)

    # Step 5: the single rounding step
    total_tax = max(0, round_to_rupee(tax_after_rebate + surcharge + cess))

    effective = share_percent(total_tax, gross)

    return TaxComputationResult(
        financial_year=rules.financial_year.code,
        regime=rules.regime,
        gross_income=gross,
        standard_deduction=standard_deduction,
        total_deductions=sum(d.capped for d in applied),
        deductions=applied,
        taxable_income=taxable,
        slab_breakdown=breakdown,
        tax_before_rebate=tax_before_rebate,
        rebate_87a=rebate,
        tax_after_rebate=tax_after_rebate,
        surcharge_rate_percent=surcharge_rate,
        surcharge=surcharge,
        cess_rate_percent=rules.cess_rate_percent,
        cess=cess,
        total_tax=total_tax,
        effective_rate_percent=effective,
    )


def allowed_deductions(deductions: DeductionAggregate, rules: TaxRuleTable) -> list[SectionDeduction]:
    """Sections this regime lets the taxpayer deduct, in section order."""
    return [d for d in deductions.by_section.values() if rules.allows(d.section)]


def derive_taxable_income(
    gross_income: int,
    deductions: DeductionAggregate,
    rules: TaxRuleTable,
) -> int:
    """gross - standard deduction - Σ capped allowed sections, floored at 0."""
    itemized = sum(d.capped for d in allowed_deductions(deductions, rules))
    return max(0, gross_income - rules.standard_deduction - itemized)


def compute_for_regime(
    income: IncomeAggregate,
    deductions: DeductionAggregate,
    rules: TaxRuleTable,
    *,
    gross_income: Optional[int] = None,
) -> TaxComputationResult:
    """
    Derive the regime's taxable income from the aggregates and compute tax.

    Old regime: every itemized section is deductible.
    New regime: only the table's allowed_sections (employer NPS).
    The standard deduction is applied in both, from the regime's own table.
    """
    gross = income.gross_income if gross_income is None else gross_income
    return compute(
        derive_taxable_income(gross, deductions, rules),
        rules,
        gross_income=gross,
        standard_deduction=rules.standard_deduction,
        deductions=allowed_deductions(deductions, rules),
    )


__all__ = [
    "compute",
    "compute_for_regime",
    "derive_taxable_income",
    "allowed_deductions",
    "marginal_rate_percent",
]
