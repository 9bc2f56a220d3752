"""
Recommendation engine tests — triggers, quantified impact and ordering.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from taxengine.calculator.aggregation import aggregate_deductions, aggregate_income, claims_from_mapping
from taxengine.calculator.schemas import IncomeRecord, IncomeType
from taxengine.money import rupees
from taxengine.recommendation.engine import recommend
from taxengine.recommendation.rules import RECOMMENDATION_RULES
from taxengine.recommendation.schemas import (
    Priority,
    Recommendation,
    RecommendationInputs,
    RecommendationType,
)
from taxengine.rules import Regime, get_regime_tables

TABLES = get_regime_tables("2025-26")


def _inputs(
    *,
    gross: int = 1_000_000,
    records: Optional[List[IncomeRecord]] = None,
    deductions: Optional[Dict[str, int]] = None,
    old_tax: int = 0,
    new_tax: int = 0,
    regime: Regime = Regime.new,
) -> RecommendationInputs:
    """Amounts in rupees. Records default to one salary + one interest record."""
    if records is None:
        records = [
            IncomeRecord(type=IncomeType.salary, gross_amount=rupees(gross), confirmed=True),
            IncomeRecord(type=IncomeType.interest, gross_amount=0, confirmed=True),
        ]
    claims = claims_from_mapping({k: rupees(v) for k, v in (deductions or {}).items()})
    return RecommendationInputs(
        income=aggregate_income(records),
        gross_income=rupees(gross),
        deductions=aggregate_deductions(claims, TABLES.old.section_caps, TABLES.old.combined_caps),
        regime_selected=regime,
        old_regime_tax=rupees(old_tax),
        new_regime_tax=rupees(new_tax),
        old_rules=TABLES.old,
    )


def _by_id(recs: List[Recommendation]) -> Dict[str, Recommendation]:
    return {r.rule_id: r for r in recs}


def test_regime_switch_when_selected_regime_costs_more() -> None:
    result = recommend(_inputs(old_tax=91_000, new_tax=105_300, regime=Regime.new))
    rec = _by_id(result.recommendations)["regime_switch"]
    assert rec.title == "Switch to Old Regime"
    assert rec.impact_amount == rupees(14_300)
    assert rec.action_required is True


def test_regime_switch_informational_when_already_cheaper() -> None:
    rec = _by_id(recommend(_inputs(old_tax=50_000, new_tax=40_000)).recommendations)["regime_switch"]
    assert rec.title == "Switch to New Regime"
    assert rec.action_required is False


def test_no_regime_switch_on_tie() -> None:
    result = recommend(_inputs(old_tax=0, new_tax=0))
    assert "regime_switch" not in _by_id(result.recommendations)


def test_maximize_80c_uses_old_marginal_rate() -> None:
    # gross 10L, 80C 50k, 80D 25k → old taxable 10L - 50k - 75k = 8.75L → 20% slab
    # headroom 100000 × 0.20 × 1.04 = 20800
    result = recommend(_inputs(deductions={"80C": 50_000, "80D": 25_000}))
    rec = _by_id(result.recommendations)["maximize_80c"]
    assert rec.impact_amount == rupees(20_800)
    assert rec.priority == Priority.high
    assert "₹1,00,000" in rec.description


def test_maximize_80c_counts_80ccc_against_the_shared_ceiling() -> None:
    # 80CCC 100000 leaves 50000 of the 150000 80CCE ceiling
    # old taxable 10L - 100000 - 50000 = 8.5L → 20%: 50000 × 0.208 = 10400
    rec = _by_id(recommend(_inputs(deductions={"80CCC": 100_000})).recommendations)["maximize_80c"]
    assert rec.impact_amount == rupees(10_400)
    assert "₹50,000" in rec.description


def test_no_80c_headroom_once_80ccc_fills_the_ceiling() -> None:
    result = recommend(_inputs(deductions={"80CCC": 150_000}))
    assert "maximize_80c" not in _by_id(result.recommendations)


def test_maximize_80c_needs_gross_above_5_lakh() -> None:
    result = recommend(_inputs(gross=500_000, deductions={"80D": 10_000}))
    assert "maximize_80c" not in _by_id(result.recommendations)


def test_nps_recommendation_above_7_lakh() -> None:
    # gross 20L, no deductions → old taxable 19.5L → 30% slab
    # 50000 × 0.30 × 1.04 = 15600
    rec = _by_id(recommend(_inputs(gross=2_000_000)).recommendations)["nps_80ccd1b"]
    assert rec.impact_amount == rupees(15_600)
    assert rec.priority == Priority.medium
    assert "nps_80ccd1b" not in _by_id(recommend(_inputs(gross=700_000)).recommendations)


def test_health_insurance_when_no_80d_claim() -> None:
    # gross 10L, no deductions → old taxable 9.5L → 20%: 25000 × 0.208 = 5200
    rec = _by_id(recommend(_inputs()).recommendations)["health_insurance_80d"]
    assert rec.type == RecommendationType.mandatory
    assert rec.impact_amount == rupees(5_200)
    assert "health_insurance_80d" not in _by_id(
        recommend(_inputs(deductions={"80D": 5_000})).recommendations
    )


def test_zero_marginal_rate_means_zero_impact() -> None:
    # gross 4L, no deductions → old taxable 3.5L → 5%; with 80C 1.2L → 1.8L → 0%
    rec = _by_id(recommend(_inputs(gross=400_000, deductions={"80C": 120_000})).recommendations)[
        "health_insurance_80d"
    ]
    assert rec.impact_amount == 0


def test_missing_income_sources_is_critical_and_first() -> None:
    result = recommend(_inputs(records=[], old_tax=10_000, new_tax=0))
    first = result.recommendations[0]
    assert first.rule_id == "missing_income_sources"
    assert first.priority == Priority.critical
    assert "declare_interest_income" not in _by_id(result.recommendations)


def test_declare_interest_income_when_only_salary_recorded() -> None:
    records = [IncomeRecord(type=IncomeType.salary, gross_amount=rupees(900_000))]
    rec = _by_id(recommend(_inputs(gross=900_000, records=records)).recommendations)[
        "declare_interest_income"
    ]
    assert rec.type == RecommendationType.compliance
    assert rec.priority == Priority.low
    assert rec.impact_amount == 0


def test_high_income_alerts() -> None:
    ids = _by_id(recommend(_inputs(gross=6_000_000)).recommendations)
    assert ids["surcharge_awareness"].type == RecommendationType.risk_alert
    assert ids["advance_tax"].type == RecommendationType.planning
    assert "surcharge_awareness" not in _by_id(recommend(_inputs(gross=5_000_000)).recommendations)
    assert "advance_tax" not in _by_id(recommend(_inputs(gross=1_000_000)).recommendations)


def test_sorted_by_priority() -> None:
    result = recommend(_inputs(gross=6_000_000, records=[], old_tax=10, new_tax=20))
    order = [r.priority for r in result.recommendations]
    rank = {Priority.critical: 0, Priority.high: 1, Priority.medium: 2, Priority.low: 3}
    assert order == sorted(order, key=rank.__getitem__)


def test_sort_is_stable_within_a_priority() -> None:
    """Equal-priority recommendations keep rule-list order, whatever that order is."""
    inputs = _inputs(gross=6_000_000, old_tax=10, new_tax=20)
    forward = [r.rule_id for r in recommend(inputs).recommendations if r.priority == Priority.high]
    assert forward == ["regime_switch", "maximize_80c", "health_insurance_80d", "surcharge_awareness"]

    reversed_rules = list(reversed(RECOMMENDATION_RULES))
    backward = [
        r.rule_id
        for r in recommend(inputs, rules=reversed_rules).recommendations
        if r.priority == Priority.high
    ]
    assert backward == list(reversed(forward))


def test_summary() -> None:
    result = recommend(_inputs(old_tax=91_000, new_tax=105_300, deductions={"80C": 50_000, "80D": 25_000}))
    summary = result.summary
    assert summary.total == len(result.recommendations)
    assert summary.by_type[RecommendationType.optimization] == 3   # switch, 80C, NPS
    assert summary.action_required == 3
    # 14300 + 20800 + NPS 50000 × 0.208 = 10400
    assert summary.total_potential_savings == rupees(14_300 + 20_800 + 10_400)
