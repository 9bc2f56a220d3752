"""
schemas.py — Recommendation data contracts (internal amounts in int paise).
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taxengine.calculator.schemas import DeductionAggregate, IncomeAggregate
from taxengine.rules.schemas import Regime, TaxRuleTable
from taxengine.schemas import IncomeRecordIn, RupeeAmount


class RecommendationType(str, Enum):
    mandatory = "mandatory"
    optimization = "optimization"
    risk_alert = "risk_alert"
    compliance = "compliance"
    planning = "planning"


class Priority(str, Enum):
    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


# Sort key: lower sorts first
PRIORITY_ORDER: Dict[Priority, int] = {
    Priority.critical: 0,
    Priority.high: 1,
    Priority.medium: 2,
    Priority.low: 3,
}


class Recommendation(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    rule_id: str
    type: RecommendationType
    category: str                               # regime, deduction, insurance, income, compliance
    priority: Priority
    title: str
    description: str
    reason: str
    impact_amount: int = 0                      # paise, whole rupee
    impact_description: str = ""
    confidence: Confidence = Confidence.high
    action_required: bool = False
    action_type: Optional[str] = None           # switch_regime, add_deduction, upload_document, confirm_data
    action_label: Optional[str] = None


class RecommendationInputs(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    income: IncomeAggregate
    gross_income: int
    deductions: DeductionAggregate
    regime_selected: Regime
    old_regime_tax: int
    new_regime_tax: int
    old_rules: TaxRuleTable


class RecommendationSummary(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    total: int
    by_type: Dict[RecommendationType, int]
    action_required: int
    total_potential_savings: int                # paise


class RecommendationResult(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    recommendations: List[Recommendation]
    summary: RecommendationSummary


# ---------------------------------------------------------------------------
# HTTP contracts (rupees)
# ---------------------------------------------------------------------------

class RecommendRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    financial_year: str
    gross_income: RupeeAmount = 0
    regime: Regime = Regime.new
    old_regime_tax: RupeeAmount = 0
    new_regime_tax: RupeeAmount = 0
    deductions_by_section: Dict[str, RupeeAmount] = Field(default_factory=dict)
    income_records: List[IncomeRecordIn] = Field(default_factory=list)


class RecommendationOut(BaseModel):
    rule_id: str
    type: RecommendationType
    category: str
    priority: Priority
    title: str
    description: str
    reason: str
    impact_amount: float
    impact_description: str
    confidence: Confidence
    action_required: bool
    action_type: Optional[str] = None
    action_label: Optional[str] = None


class RecommendationSummaryOut(BaseModel):
    total: int
    by_type: Dict[RecommendationType, int]
    action_required: int
    total_potential_savings: float


class RecommendResponse(BaseModel):
    recommendations: List[RecommendationOut]
    summary: RecommendationSummaryOut
