"""
Regime comparison tests — demo profiles plus structural properties.
"""
from __future__ import annotations

from decimal import Decimal

import pytest

from demo_profiles import DEMO_PROFILES
from taxengine.calculator.aggregation import aggregate_deductions, aggregate_income
from taxengine.calculator.comparator import build_rationale, compare
from taxengine.calculator.schemas import DeductionClaim, IncomeRecord
from taxengine.calculator.slab_calculator import compute, compute_for_regime, derive_taxable_income
from taxengine.money import rupees
from taxengine.rules import Regime, get_regime_tables


def _aggregates(request: dict):
    tables = get_regime_tables(request["financial_year"])
    records = [
        IncomeRecord(**{**r, "gross_amount": rupees(r["gross_amount"])})
        for r in request["income_records"]
    ]
    claims = [
        DeductionClaim(section_code=c["section_code"], claimed_amount=rupees(c["claimed_amount"]))
        for c in request["deduction_claims"]
    ]
    income = aggregate_income(records)
    deductions = aggregate_deductions(claims, tables.old.section_caps)
    return income, deductions, tables


@pytest.mark.parametrize("name", ["asha", "rohan", "meera"])
def test_demo_profile_comparison(name: str) -> None:
    data = DEMO_PROFILES[name]
    expected = data["expected"]
    income, deductions, tables = _aggregates(data["request"])

    result = compare(income, deductions, tables)

    assert result.new.taxable_income == rupees(expected["new_taxable"])
    assert result.old.taxable_income == rupees(expected["old_taxable"])
    assert result.new.total_tax == rupees(expected["new_total_tax"])
    assert result.old.total_tax == rupees(expected["old_total_tax"])
    assert result.cheaper.value == expected["cheaper"]
    assert result.savings_amount == rupees(expected["savings"])


def test_asha_new_regime_slab_tax_fully_rebated() -> None:
    income, deductions, tables = _aggregates(DEMO_PROFILES["asha"]["request"])
    new = compare(income, deductions, tables).new
    assert int(new.tax_before_rebate) == rupees(52_500)
    assert int(new.rebate_87a) == rupees(52_500)
    assert new.total_tax == 0


def test_new_regime_ignores_old_only_sections() -> None:
    income, deductions, tables = _aggregates(DEMO_PROFILES["rohan"]["request"])
    result = compare(income, deductions, tables)
    assert result.new.total_deductions == 0
    assert result.new.deductions == []
    assert result.old.total_deductions == rupees(625_000)


def test_employer_nps_allowed_in_new_regime() -> None:
    tables = get_regime_tables("2025-26")
    income = aggregate_income([IncomeRecord(type="salary", gross_amount=rupees(2_000_000))])
    deductions = aggregate_deductions(
        [DeductionClaim(section_code="80CCD2", claimed_amount=rupees(100_000))],
        tables.old.section_caps,
    )
    new = compare(income, deductions, tables).new
    assert new.taxable_income == rupees(2_000_000 - 75_000 - 100_000)


def test_tie_goes_to_new_regime() -> None:
    # Both regimes owe 0 on ₹3L
    tables = get_regime_tables("2025-26")
    income = aggregate_income([IncomeRecord(type="salary", gross_amount=rupees(300_000))])
    result = compare(income, aggregate_deductions([], tables.old.section_caps), tables)
    assert result.old.total_tax == result.new.total_tax == 0
    assert result.cheaper == Regime.new
    assert result.savings_amount == 0
    assert "same tax" in build_rationale(result)


@pytest.mark.parametrize("name", ["asha", "rohan", "meera"])
def test_comparison_round_trips_through_compute(name: str) -> None:
    """Each side equals a direct compute() on the same derived taxable income."""
    income, deductions, tables = _aggregates(DEMO_PROFILES[name]["request"])
    result = compare(income, deductions, tables)

    for regime in Regime:
        rules = tables.for_regime(regime)
        side = result.for_regime(regime)
        direct = compute(
            derive_taxable_income(income.gross_income, deductions, rules),
            rules,
            gross_income=income.gross_income,
            standard_deduction=rules.standard_deduction,
            deductions=side.deductions,
        )
        assert direct == side
        assert compute_for_regime(income, deductions, rules) == side


def test_rationale_names_the_cheaper_regime() -> None:
    income, deductions, tables = _aggregates(DEMO_PROFILES["rohan"]["request"])
    text = build_rationale(compare(income, deductions, tables))
    assert text.startswith("Old Regime saves ₹14,300")


@pytest.mark.parametrize(
    "name, percentage",
    [
        ("rohan", "0.92"),   # 14300 / 1550000 = 0.9226%
        ("meera", "4.50"),   # 274560 / 6100000 = 4.5010%
        ("asha", "13.65"),   # 163800 / 1200000 = 13.65%
    ],
)
def test_savings_percentage_of_gross_income(name: str, percentage: str) -> None:
    income, deductions, tables = _aggregates(DEMO_PROFILES[name]["request"])
    assert compare(income, deductions, tables).savings_percentage == Decimal(percentage)


def test_savings_percentage_is_zero_without_income() -> None:
    tables = get_regime_tables("2025-26")
    result = compare(aggregate_income([]), aggregate_deductions([], tables.old.section_caps), tables)
    assert result.old.gross_income == 0
    assert result.savings_amount == 0
    assert result.savings_percentage == Decimal("0.00")
