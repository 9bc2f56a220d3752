"""
Income and deduction aggregation tests.
"""
from __future__ import annotations

import pytest

from taxengine.calculator.aggregation import (
    aggregate_deductions,
    aggregate_income,
    claims_from_mapping,
    normalize_section_code,
)
from taxengine.calculator.schemas import DeductionClaim, IncomeHead, IncomeRecord, IncomeType
from taxengine.money import rupees
from taxengine.rules import OTHER_SECTION, Regime, get_rule_table


@pytest.fixture
def caps():
    return get_rule_table("2025-26", Regime.old).section_caps


@pytest.fixture
def combined_caps():
    return get_rule_table("2025-26", Regime.old).combined_caps


# ---------------------------------------------------------------------------
# Income
# ---------------------------------------------------------------------------

def test_income_sums_by_type_and_head() -> None:
    records = [
        IncomeRecord(type=IncomeType.salary, gross_amount=rupees(900_000), confirmed=True),
        IncomeRecord(type=IncomeType.pension, gross_amount=rupees(100_000), document_ref="ppo.pdf"),
        IncomeRecord(type=IncomeType.freelance, gross_amount=rupees(200_000)),
        IncomeRecord(type=IncomeType.rental, gross_amount=rupees(120_000)),
        IncomeRecord(type=IncomeType.salary, gross_amount=rupees(50_000)),
    ]
    agg = aggregate_income(records)

    assert agg.gross_income == rupees(1_370_000)
    assert agg.by_type[IncomeType.salary] == rupees(950_000)
    assert agg.by_head[IncomeHead.salary] == rupees(1_050_000)
    assert agg.by_head[IncomeHead.business] == rupees(200_000)
    assert agg.by_head[IncomeHead.house_property] == rupees(120_000)
    assert agg.record_count == 5
    # freelance, rental and the second salary record are unverified
    assert agg.unverified_count == 3


def test_missing_expected_sources_are_reported() -> None:
    agg = aggregate_income([IncomeRecord(type=IncomeType.salary, gross_amount=rupees(1))])
    assert agg.missing_types == frozenset({IncomeType.interest})


def test_empty_income() -> None:
    agg = aggregate_income([])
    assert agg.gross_income == 0
    assert not agg.has_records
    assert agg.missing_types == frozenset({IncomeType.salary, IncomeType.interest})


# ---------------------------------------------------------------------------
# Deductions
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw, expected",
    [
        ("80C", "80C"),
        (" 80c ", "80C"),
        ("80CCD(1B)", "80CCD1B"),
        ("80ccd-1b", "80CCD1B"),
        ("24(b)", "24B"),
        ("Section 80D", "80D"),
        ("hra", "HRA"),
    ],
)
def test_normalize_section_code(raw: str, expected: str) -> None:
    assert normalize_section_code(raw) == expected


def test_80c_capped_at_150000(caps) -> None:
    agg = aggregate_deductions(
        [DeductionClaim(section_code="80C", claimed_amount=rupees(200_000))], caps
    )
    entry = agg.by_section["80C"]
    assert entry.claimed == rupees(200_000)
    assert entry.capped == rupees(150_000)
    assert entry.headroom == 0


def test_claims_for_one_section_are_summed_before_capping(caps) -> None:
    claims = [
        DeductionClaim(section_code="80C", claimed_amount=rupees(100_000)),
        DeductionClaim(section_code="80 C", claimed_amount=rupees(30_000)),
    ]
    entry = aggregate_deductions(claims, caps).by_section["80C"]
    assert entry.capped == rupees(130_000)
    assert entry.headroom == rupees(20_000)


def test_uncapped_sections_pass_through(caps) -> None:
    agg = aggregate_deductions(
        [DeductionClaim(section_code="HRA", claimed_amount=rupees(480_000))], caps
    )
    assert agg.by_section["HRA"].capped == rupees(480_000)
    assert agg.by_section["HRA"].cap is None


def test_unknown_sections_go_to_other(caps) -> None:
    claims = [
        DeductionClaim(section_code="80ZZZ", claimed_amount=rupees(1_000)),
        DeductionClaim(section_code="donation", claimed_amount=rupees(2_000)),
    ]
    agg = aggregate_deductions(claims, caps)
    assert list(agg.by_section) == [OTHER_SECTION]
    assert agg.by_section[OTHER_SECTION].capped == rupees(3_000)


def test_totals_respect_caps(caps) -> None:
    agg = aggregate_deductions(
        claims_from_mapping({"80C": rupees(200_000), "80D": rupees(100_000), "80E": rupees(40_000)}),
        caps,
    )
    assert agg.total_claimed == rupees(340_000)
    assert agg.total_capped == rupees(150_000 + 75_000 + 40_000)
    for entry in agg.by_section.values():
        if entry.cap is not None:
            assert entry.capped <= entry.cap


def test_80c_and_80ccc_share_one_ceiling(caps, combined_caps) -> None:
    claims = claims_from_mapping({"80C": rupees(150_000), "80CCC": rupees(150_000)})
    agg = aggregate_deductions(claims, caps, combined_caps)
    assert agg.by_section["80C"].capped == rupees(150_000)
    assert agg.by_section["80CCC"].capped == 0
    assert agg.by_section["80CCC"].claimed == rupees(150_000)
    assert agg.total_capped == rupees(150_000)


def test_combined_cap_fills_members_in_order(caps, combined_caps) -> None:
    claims = claims_from_mapping({"80C": rupees(100_000), "80CCC": rupees(100_000)})
    agg = aggregate_deductions(claims, caps, combined_caps)
    assert agg.by_section["80C"].capped == rupees(100_000)
    assert agg.by_section["80CCC"].capped == rupees(50_000)


def test_savings_interest_sections_share_one_ceiling(caps, combined_caps) -> None:
    claims = claims_from_mapping({"80TTA": rupees(10_000), "80TTB": rupees(50_000)})
    agg = aggregate_deductions(claims, caps, combined_caps)
    assert agg.by_section["80TTB"].capped == rupees(50_000)
    assert agg.by_section["80TTA"].capped == 0


def test_without_combined_caps_sections_cap_independently(caps) -> None:
    claims = claims_from_mapping({"80C": rupees(150_000), "80CCC": rupees(150_000)})
    assert aggregate_deductions(claims, caps).total_capped == rupees(300_000)
