"""
schemas.py — Audit data contracts.

AuditInputs is the read-only bundle every audit rule receives. Amounts are
int paise; the route converts the rupee request body (AuditRequest) before
any rule runs.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taxengine.calculator.schemas import DeductionAggregate, IncomeAggregate
from taxengine.rules.schemas import Regime
from taxengine.schemas import IncomeRecordIn, RupeeAmount


class FlagType(str, Enum):
    missing_document = "missing_document"
    limit_exceeded = "limit_exceeded"
    mismatch = "mismatch"
    high_risk = "high_risk"
    compliance = "compliance"
    verification_needed = "verification_needed"


class Severity(str, Enum):
    critical = "critical"
    error = "error"
    warning = "warning"
    info = "info"


class ReadinessLevel(str, Enum):
    excellent = "excellent"
    good = "good"
    needs_attention = "needs_attention"
    critical = "critical"


class AuditFlag(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    rule_id: str
    flag_type: FlagType
    severity: Severity
    title: str
    description: str
    affected_section: Optional[str] = None
    affected_amount: Optional[int] = None       # paise
    resolution_required: bool = False
    resolution_action: Optional[str] = None
    penalty: int = Field(..., ge=0)             # points subtracted from the score


class AuditInputs(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    income: IncomeAggregate
    reported_gross_income: int                  # the taxpayer's own declared total
    deductions: DeductionAggregate
    section_caps: Dict[str, Optional[int]]
    regime_selected: Regime


class AuditSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    total_flags: int
    critical: int
    errors: int
    warnings: int
    info: int
    resolution_required: int


class AuditResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    audit_score: int = Field(..., ge=0, le=100)
    readiness_level: ReadinessLevel
    flags: List[AuditFlag]
    summary: AuditSummary


# ---------------------------------------------------------------------------
# HTTP contracts (rupees)
# ---------------------------------------------------------------------------

class AuditRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    financial_year: str
    gross_income: RupeeAmount = 0
    deductions_by_section: Dict[str, RupeeAmount] = Field(default_factory=dict)
    income_records: List[IncomeRecordIn] = Field(default_factory=list)
    regime: Regime = Regime.new


class AuditFlagOut(BaseModel):
    rule_id: str
    flag_type: FlagType
    severity: Severity
    title: str
    description: str
    affected_section: Optional[str] = None
    affected_amount: Optional[float] = None
    resolution_required: bool
    resolution_action: Optional[str] = None
    penalty: int


class AuditResponse(BaseModel):
    audit_score: int
    readiness_level: ReadinessLevel
    flags: List[AuditFlagOut]
    summary: AuditSummary
