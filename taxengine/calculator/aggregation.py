"""
aggregation.py — Regime-independent aggregation of raw income and deduction records.

Pure functions. No I/O, no rule judgement:
  - aggregate_income() only REPORTS missing expected sources; the audit and
    recommendation engines decide whether that matters.
  - aggregate_deductions() caps each section, then each combined group,
    but never rejects a claim.
    Unknown section codes are bucketed under OTHER to keep the pipeline total.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Optional, Sequence

from taxengine.calculator.schemas import (
    INCOME_HEADS,
    DeductionAggregate,
    DeductionClaim,
    IncomeAggregate,
    IncomeHead,
    IncomeRecord,
    IncomeType,
    SectionDeduction,
)
from taxengine.rules.registry import OTHER_SECTION
from taxengine.rules.schemas import CombinedCap

# Sources most salaried filers have; their absence is worth a second look downstream
EXPECTED_SOURCES = frozenset({IncomeType.salary, IncomeType.interest})

_SECTION_NOISE = re.compile(r"[\s()\-_.]")


def normalize_section_code(code: str) -> str:
    """'80CCD(1B)' → '80CCD1B', '24(b)' → '24B', ' 80c ' → '80C'."""
    cleaned = _SECTION_NOISE.sub("", code or "").upper()
    if cleaned.startswith("SECTION"):
        cleaned = cleaned[len("SECTION"):]
    return cleaned


def aggregate_income(records: Iterable[IncomeRecord]) -> IncomeAggregate:
    by_type: Dict[IncomeType, int] = {}
    by_head: Dict[IncomeHead, int] = {}
    count = 0
    unverified = 0
    for record in records:
        count += 1
        by_type[record.type] = by_type.get(record.type, 0) + record.gross_amount
        head = INCOME_HEADS[record.type]
        by_head[head] = by_head.get(head, 0) + record.gross_amount
        if not record.is_verified:
            unverified += 1

    return IncomeAggregate(
        gross_income=sum(by_type.values()),
        by_type=by_type,
        by_head=by_head,
        missing_types=frozenset(EXPECTED_SOURCES - set(by_type)),
        record_count=count,
        unverified_count=unverified,
    )


def aggregate_deductions(
    claims: Iterable[DeductionClaim],
    caps: Mapping[str, Optional[int]],
    combined_caps: Sequence[CombinedCap] = (),
) -> DeductionAggregate:
    """
    Sum claims per section, then cap: capped = min(Σ claims, cap).

    A section present in caps with a None cap passes through uncapped.
    A section absent from caps is folded into OTHER (also uncapped).
    Each combined cap then bounds the sum of its members, filled in the
    group's listed order.
    """
    claimed: Dict[str, int] = {}
    for claim in claims:
        section = normalize_section_code(claim.section_code)
        if section not in caps:
            section = OTHER_SECTION
        claimed[section] = claimed.get(section, 0) + claim.claimed_amount

    by_section: Dict[str, SectionDeduction] = {}
    for section in sorted(claimed):
        cap = caps.get(section)
        amount = claimed[section]
        by_section[section] = SectionDeduction(
            section=section,
            claimed=amount,
            capped=amount if cap is None else min(amount, cap),
            cap=cap,
        )

    for group in combined_caps:
        remaining = group.cap
        for section in group.sections:
            entry = by_section.get(section)
            if entry is None:
                continue
            allowed = min(entry.capped, remaining)
            remaining -= allowed
            if allowed != entry.capped:
                by_section[section] = entry.model_copy(update={"capped": allowed})

    return DeductionAggregate(
        by_section=by_section,
        total_claimed=sum(d.claimed for d in by_section.values()),
        total_capped=sum(d.capped for d in by_section.values()),
    )


def claims_from_mapping(amounts: Mapping[str, int]) -> list[DeductionClaim]:
    """{section: paise} → one DeductionClaim per section (Audit/Recommend inputs)."""
    return [
        DeductionClaim(section_code=section, claimed_amount=amount)
        for section, amount in amounts.items()
    ]


__all__ = [
    "EXPECTED_SOURCES",
    "normalize_section_code",
    "aggregate_income",
    "aggregate_deductions",
    "claims_from_mapping",
]
