"""
Audit rules — compliance and data-quality checks run before filing.

Each rule is a small pure function: AuditInputs → AuditFlag | None.
A rule reads only its inputs, never another rule's output, so the order of
AUDIT_RULES changes the order of flags and nothing else.

Penalties (points off a starting score of 100):
    no_income_records          30
    limit_exceeded_80c         20
    unverified_income          15
    limit_exceeded_80d         15
    limit_exceeded_24b         15
    high_deduction_ratio       10
    income_mismatch            10
    old_regime_low_deductions   5
"""
from __future__ import annotations

from typing import Callable, List, Optional

from taxengine.audit.schemas import AuditFlag, AuditInputs, FlagType, Severity
from taxengine.money import format_inr, rupees
from taxengine.rules.schemas import Regime

AuditRule = Callable[[AuditInputs], Optional[AuditFlag]]

# Deductions above this share of reported gross income attract scrutiny
HIGH_DEDUCTION_RATIO = 0.5
# Old regime rarely pays off below this much in itemized deductions
LOW_OLD_REGIME_DEDUCTIONS = rupees(50_000)
# Tolerated gap between the income records and the declared gross income
INCOME_MISMATCH_TOLERANCE = rupees(10_000)


# ---------------------------------------------------------------------------
# Data quality
# ---------------------------------------------------------------------------

def unverified_income(inputs: AuditInputs) -> Optional[AuditFlag]:
    count = inputs.income.unverified_count
    if count == 0:
        return None
    return AuditFlag(
        rule_id="unverified_income",
        flag_type=FlagType.missing_document,
        severity=Severity.warning,
        title="Unverified Income Sources",
        description=f"{count} income source(s) without supporting documents",
        resolution_required=False,
        resolution_action="Upload Form-16 or salary slips",
        penalty=15,
    )


def no_income_records(inputs: AuditInputs) -> Optional[AuditFlag]:
    if inputs.income.has_records:
        return None
    return AuditFlag(
        rule_id="no_income_records",
        flag_type=FlagType.verification_needed,
        severity=Severity.critical,
        title="No Income Reported",
        description="Please add your income sources for accurate tax calculation",
        resolution_required=True,
        resolution_action="Add income from salary, business, or other sources",
        penalty=30,
    )


def income_mismatch(inputs: AuditInputs) -> Optional[AuditFlag]:
    recorded = inputs.income.gross_income
    reported = inputs.reported_gross_income
    gap = abs(recorded - reported)
    if gap <= INCOME_MISMATCH_TOLERANCE:
        return None
    return AuditFlag(
        rule_id="income_mismatch",
        flag_type=FlagType.mismatch,
        severity=Severity.warning,
        title="Income Mismatch",
        description=(
            f"Income records total {format_inr(recorded)} but declared gross income "
            f"is {format_inr(reported)}"
        ),
        affected_amount=gap,
        resolution_required=True,
        resolution_action="Verify all income sources are included",
        penalty=10,
    )


# ---------------------------------------------------------------------------
# Statutory limits
# ---------------------------------------------------------------------------

def _limit_exceeded(
    inputs: AuditInputs,
    *,
    section: str,
    rule_id: str,
    title: str,
    resolution_action: str,
    penalty: int,
) -> Optional[AuditFlag]:
    cap = inputs.section_caps.get(section)
    claimed = inputs.deductions.claimed(section)
    if cap is None or claimed <= cap:
        return None
    return AuditFlag(
        rule_id=rule_id,
        flag_type=FlagType.limit_exceeded,
        severity=Severity.error,
        title=title,
        description=f"Claimed {format_inr(claimed)} but limit is {format_inr(cap)}",
        affected_section=section,
        affected_amount=claimed - cap,
        resolution_required=True,
        resolution_action=resolution_action,
        penalty=penalty,
    )


def limit_exceeded_80c(inputs: AuditInputs) -> Optional[AuditFlag]:
    return _limit_exceeded(
        inputs,
        section="80C",
        rule_id="limit_exceeded_80c",
        title="80C Limit Exceeded",
        resolution_action="Reduce 80C claim to the statutory limit",
        penalty=20,
    )


def limit_exceeded_80d(inputs: AuditInputs) -> Optional[AuditFlag]:
    return _limit_exceeded(
        inputs,
        section="80D",
        rule_id="limit_exceeded_80d",
        title="80D Limit Exceeded",
        resolution_action="Verify 80D claim with supporting documents",
        penalty=15,
    )


def limit_exceeded_24b(inputs: AuditInputs) -> Optional[AuditFlag]:
    return _limit_exceeded(
        inputs,
        section="24B",
        rule_id="limit_exceeded_24b",
        title="Home Loan Interest Limit Exceeded",
        resolution_action="Reduce 24(b) claim to the statutory limit",
        penalty=15,
    )


# ---------------------------------------------------------------------------
# Risk and regime fit
# ---------------------------------------------------------------------------

def high_deduction_ratio(inputs: AuditInputs) -> Optional[AuditFlag]:
    gross = inputs.reported_gross_income
    if gross <= 0:
        return None
    ratio = inputs.deductions.total_capped / gross
    if ratio <= HIGH_DEDUCTION_RATIO:
        return None
    return AuditFlag(
        rule_id="high_deduction_ratio",
        flag_type=FlagType.high_risk,
        severity=Severity.warning,
        title="High Deduction Ratio",
        description=f"Deductions are {ratio * 100:.1f}% of gross income - may attract scrutiny",
        resolution_required=False,
        resolution_action="Keep all supporting documents ready",
        penalty=10,
    )


def old_regime_low_deductions(inputs: AuditInputs) -> Optional[AuditFlag]:
    if inputs.regime_selected != Regime.old:
        return None
    if inputs.deductions.total_capped >= LOW_OLD_REGIME_DEDUCTIONS:
        return None
    return AuditFlag(
        rule_id="old_regime_low_deductions",
        flag_type=FlagType.compliance,
        severity=Severity.info,
        title="Consider New Regime",
        description="Low deductions may make new regime more beneficial",
        resolution_required=False,
        penalty=5,
    )


AUDIT_RULES: List[AuditRule] = [
    unverified_income,
    limit_exceeded_80c,
    limit_exceeded_80d,
    limit_exceeded_24b,
    high_deduction_ratio,
    old_regime_low_deductions,
    income_mismatch,
    no_income_records,
]


__all__ = [
    "AuditRule",
    "AUDIT_RULES",
    "unverified_income",
    "limit_exceeded_80c",
    "limit_exceeded_80d",
    "limit_exceeded_24b",
    "high_deduction_ratio",
    "old_regime_low_deductions",
    "income_mismatch",
    "no_income_records",
]
