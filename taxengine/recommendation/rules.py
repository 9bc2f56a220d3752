"""
Recommendation rules — plain-English, quantified suggestions.
Pure functions. No LLM. No I/O.

Each rule: RecommendationInputs → Recommendation | None.
Savings estimates use the Old Regime marginal rate, cess inclusive:
    marginal = slab_rate(old taxable income) × (1 + cess/100)
"""
from __future__ import annotations

from decimal import Decimal
from typing import Callable, List, Optional

from taxengine.calculator.schemas import IncomeType
from taxengine.calculator.slab_calculator import derive_taxable_income, marginal_rate_percent
from taxengine.money import format_inr, round_to_rupee, rupees
from taxengine.recommendation.schemas import (
    Confidence,
    Priority,
    Recommendation,
    RecommendationInputs,
    RecommendationType,
)
from taxengine.rules.schemas import Regime

RecommendationRule = Callable[[RecommendationInputs], Optional[Recommendation]]

_80C_MIN_GROSS = rupees(500_000)
_NPS_MIN_GROSS = rupees(700_000)
_80D_MIN_GROSS = rupees(300_000)
_ADVANCE_TAX_MIN_GROSS = rupees(1_000_000)
_SURCHARGE_MIN_GROSS = rupees(5_000_000)

# Typical self + family premium used to size the 80D estimate
HEALTH_PREMIUM_ESTIMATE = rupees(25_000)


def _old_marginal_rate(inputs: RecommendationInputs) -> Decimal:
    """Fraction (e.g. 0.312 for 30% slab + 4% cess) at the old-regime taxable income."""
    rules = inputs.old_rules
    taxable = derive_taxable_income(inputs.gross_income, inputs.deductions, rules)
    slab_rate = marginal_rate_percent(taxable, rules)
    return slab_rate / 100 * (1 + rules.cess_rate_percent / 100)


def _saving(amount: int, inputs: RecommendationInputs) -> int:
    return round_to_rupee(Decimal(amount) * _old_marginal_rate(inputs))


def _headroom(inputs: RecommendationInputs, section: str) -> int:
    """Room left under the section cap and under any combined cap it shares."""
    rules = inputs.old_rules
    entry = inputs.deductions.by_section.get(section)
    if entry is not None:
        headroom = entry.headroom
    else:
        headroom = rules.cap_for(section) or 0
    group = rules.combined_cap_for(section)
    if group is not None:
        used = sum(inputs.deductions.capped(member) for member in group.sections)
        headroom = min(headroom, max(0, group.cap - used))
    return headroom


# ---------------------------------------------------------------------------
# Regime
# ---------------------------------------------------------------------------

def regime_switch(inputs: RecommendationInputs) -> Optional[Recommendation]:
    savings = abs(inputs.old_regime_tax - inputs.new_regime_tax)
    if savings == 0:
        return None
    better = Regime.old if inputs.old_regime_tax < inputs.new_regime_tax else Regime.new
    name = "Old" if better == Regime.old else "New"
    return Recommendation(
        rule_id="regime_switch",
        type=RecommendationType.optimization,
        category="regime",
        priority=Priority.high,
        title=f"Switch to {name} Regime",
        description=f"You can save {format_inr(savings)} by choosing the {better.value} tax regime",
        reason=(
            "Your deductions make the old regime more beneficial"
            if better == Regime.old
            else "With limited deductions, the new regime offers better rates"
        ),
        impact_amount=savings,
        impact_description=f"{format_inr(savings)} annual tax savings",
        confidence=Confidence.high,
        action_required=inputs.regime_selected != better,
        action_type="switch_regime",
        action_label=f"Switch to {name} Regime",
    )


# ---------------------------------------------------------------------------
# Deductions
# ---------------------------------------------------------------------------

def maximize_80c(inputs: RecommendationInputs) -> Optional[Recommendation]:
    headroom = _headroom(inputs, "80C")
    if headroom <= 0 or inputs.gross_income <= _80C_MIN_GROSS:
        return None
    saving = _saving(headroom, inputs)
    return Recommendation(
        rule_id="maximize_80c",
        type=RecommendationType.optimization,
        category="deduction",
        priority=Priority.high,
        title="Maximize Section 80C",
        description=f"You can claim {format_inr(headroom)} more under Section 80C",
        reason="Investing in tax-saving instruments (PPF, ELSS, LIC) reduces taxable income",
        impact_amount=saving,
        impact_description=f"Up to {format_inr(saving)} tax savings in the Old Regime",
        confidence=Confidence.high,
        action_required=True,
        action_type="add_deduction",
        action_label="Add 80C Investment",
    )


def nps_80ccd1b(inputs: RecommendationInputs) -> Optional[Recommendation]:
    headroom = _headroom(inputs, "80CCD1B")
    if headroom <= 0 or inputs.gross_income <= _NPS_MIN_GROSS:
        return None
    saving = _saving(headroom, inputs)
    return Recommendation(
        rule_id="nps_80ccd1b",
        type=RecommendationType.optimization,
        category="deduction",
        priority=Priority.medium,
        title="NPS Contribution (80CCD1B)",
        description=f"Additional {format_inr(headroom)} deduction available for NPS",
        reason="NPS offers an exclusive tax benefit over and above the 80C limit",
        impact_amount=saving,
        impact_description=f"Up to {format_inr(saving)} tax savings in the Old Regime",
        confidence=Confidence.high,
        action_required=True,
        action_type="add_deduction",
        action_label="Add NPS Investment",
    )


def health_insurance_80d(inputs: RecommendationInputs) -> Optional[Recommendation]:
    if inputs.deductions.claimed("80D") > 0 or inputs.gross_income <= _80D_MIN_GROSS:
        return None
    saving = _saving(HEALTH_PREMIUM_ESTIMATE, inputs)
    return Recommendation(
        rule_id="health_insurance_80d",
        type=RecommendationType.mandatory,
        category="insurance",
        priority=Priority.high,
        title="Get Health Insurance",
        description="No health insurance premium detected for 80D deduction",
        reason="Health insurance provides both tax benefits and financial protection",
        impact_amount=saving,
        impact_description=f"Up to {format_inr(saving)} tax savings + health coverage",
        confidence=Confidence.high,
        action_required=True,
        action_type="upload_document",
        action_label="Upload Insurance Policy",
    )


# ---------------------------------------------------------------------------
# Income completeness
# ---------------------------------------------------------------------------

def missing_income_sources(inputs: RecommendationInputs) -> Optional[Recommendation]:
    if inputs.income.has_records:
        return None
    return Recommendation(
        rule_id="missing_income_sources",
        type=RecommendationType.mandatory,
        category="income",
        priority=Priority.critical,
        title="Add Income Sources",
        description="No income sources detected for this financial year",
        reason="Accurate income reporting is mandatory for tax calculation",
        impact_description="Required for accurate tax computation",
        confidence=Confidence.high,
        action_required=True,
        action_type="confirm_data",
        action_label="Add Income",
    )


def declare_interest_income(inputs: RecommendationInputs) -> Optional[Recommendation]:
    if not inputs.income.has_records or IncomeType.interest not in inputs.income.missing_types:
        return None
    return Recommendation(
        rule_id="declare_interest_income",
        type=RecommendationType.compliance,
        category="income",
        priority=Priority.low,
        title="Declare Interest Income",
        description="No savings or deposit interest is recorded for this financial year",
        reason="Bank interest is reported to the department through AIS and must be declared",
        impact_description="Avoids a mismatch notice against your AIS",
        confidence=Confidence.medium,
        action_required=False,
        action_type="confirm_data",
        action_label="Add Interest Income",
    )


# ---------------------------------------------------------------------------
# Alerts and planning
# ---------------------------------------------------------------------------

def surcharge_awareness(inputs: RecommendationInputs) -> Optional[Recommendation]:
    if inputs.gross_income <= _SURCHARGE_MIN_GROSS:
        return None
    return Recommendation(
        rule_id="surcharge_awareness",
        type=RecommendationType.risk_alert,
        category="compliance",
        priority=Priority.high,
        title="High Income - Surcharge Applicable",
        description="Surcharge will apply on your income above ₹50L",
        reason="High-income taxpayers attract additional surcharge on tax",
        impact_description="Plan investments to optimize surcharge impact",
        confidence=Confidence.high,
        action_required=False,
    )


def advance_tax(inputs: RecommendationInputs) -> Optional[Recommendation]:
    if inputs.gross_income <= _ADVANCE_TAX_MIN_GROSS:
        return None
    return Recommendation(
        rule_id="advance_tax",
        type=RecommendationType.planning,
        category="compliance",
        priority=Priority.medium,
        title="Advance Tax Payment",
        description="Consider paying advance tax to avoid interest",
        reason="If tax liability exceeds ₹10,000, advance tax is required",
        impact_description="Avoid 1% interest per month on unpaid tax",
        confidence=Confidence.medium,
        action_required=False,
    )


RECOMMENDATION_RULES: List[RecommendationRule] = [
    regime_switch,
    maximize_80c,
    nps_80ccd1b,
    health_insurance_80d,
    missing_income_sources,
    declare_interest_income,
    surcharge_awareness,
    advance_tax,
]


__all__ = [
    "RecommendationRule",
    "RECOMMENDATION_RULES",
    "HEALTH_PREMIUM_ESTIMATE",
    "regime_switch",
    "maximize_80c",
    "nps_80ccd1b",
    "health_insurance_80d",
    "missing_income_sources",
    "declare_interest_income",
    "surcharge_awareness",
    "advance_tax",
]
