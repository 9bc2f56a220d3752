"""
schemas.py — HTTP boundary contracts shared by every route (amounts in RUPEES).

Defines:
  - IncomeRecordIn, DeductionClaimIn        request items → domain models (paise)
  - SlabTaxOut, SectionDeductionOut,
    TaxComputationOut                       TaxComputationResult ↔ JSON (rupees)
  - ErrorDetail, ErrorBody, ErrorResponse   cross-cutting error envelope

This is the only layer that knows about rupees. Everything below it works in
int paise (see taxengine/money.py).
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taxengine.calculator.schemas import (
    DeductionClaim,
    IncomeRecord,
    IncomeType,
    RegimeComparison,
    SectionDeduction,
    SlabTax,
    TaxComputationResult,
)
from taxengine.money import PAISE_PER_RUPEE, rupees, to_rupees
from taxengine.rules.schemas import Regime

# Non-negative rupee amount with at most 2 decimal places (paise precision)
RupeeAmount = Annotated[Decimal, Field(ge=0, max_digits=15, decimal_places=2)]


def _exact_rupees(value: Decimal) -> float:
    return to_rupees(value)


def _paise_from_rupees(value: float) -> Decimal:
    return Decimal(str(value)) * PAISE_PER_RUPEE


# ---------------------------------------------------------------------------
# Request items
# ---------------------------------------------------------------------------

class IncomeRecordIn(BaseModel):
    """One income source as supplied by the collaborator (annual, INR)."""
    model_config = ConfigDict(extra="forbid")

    type: IncomeType
    gross_amount: RupeeAmount
    source_ref: str = ""
    confirmed: bool = False
    document_ref: Optional[str] = Field(
        default=None,
        description="Reference to a supporting document (Form 16, bank statement).",
    )

    def to_domain(self) -> IncomeRecord:
        return IncomeRecord(
            type=self.type,
            gross_amount=rupees(self.gross_amount),
            source_ref=self.source_ref,
            confirmed=self.confirmed,
            document_ref=self.document_ref,
        )


class DeductionClaimIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    section_code: str = Field(..., min_length=1, description="e.g. 80C, 80CCD(1B), 80D, 24B, HRA")
    claimed_amount: RupeeAmount

    def to_domain(self) -> DeductionClaim:
        return DeductionClaim(
            section_code=self.section_code,
            claimed_amount=rupees(self.claimed_amount),
        )


# ---------------------------------------------------------------------------
# TaxComputationResult — JSON shape
# ---------------------------------------------------------------------------

class SlabTaxOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    slab_index: int
    min_amount: float
    max_amount: Optional[float]
    rate_percent: float
    taxable_in_slab: float
    tax_in_slab: float


class SectionDeductionOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    section: str
    claimed: float
    capped: float
    cap: Optional[float] = None


class TaxComputationOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    financial_year: str
    regime: Regime
    gross_income: float
    standard_deduction: float
    total_deductions: float
    deductions: List[SectionDeductionOut] = Field(default_factory=list)
    taxable_income: float
    slab_breakdown: List[SlabTaxOut]
    tax_before_rebate: float
    rebate_87a: float
    tax_after_rebate: float
    surcharge_rate_percent: float
    surcharge: float
    cess_rate_percent: float
    cess: float
    total_tax: float
    effective_rate_percent: float

    @classmethod
    def from_result(cls, result: TaxComputationResult) -> "TaxComputationOut":
        return cls(
            financial_year=result.financial_year,
            regime=result.regime,
            gross_income=to_rupees(result.gross_income),
            standard_deduction=to_rupees(result.standard_deduction),
            total_deductions=to_rupees(result.total_deductions),
            deductions=[
                SectionDeductionOut(
                    section=d.section,
                    claimed=to_rupees(d.claimed),
                    capped=to_rupees(d.capped),
                    cap=None if d.cap is None else to_rupees(d.cap),
                )
                for d in result.deductions
            ],
            taxable_income=to_rupees(result.taxable_income),
            slab_breakdown=[
                SlabTaxOut(
                    slab_index=row.slab_index,
                    min_amount=to_rupees(row.min),
                    max_amount=None if row.max is None else to_rupees(row.max),
                    rate_percent=float(row.rate_percent),
                    taxable_in_slab=to_rupees(row.taxable_in_slab),
                    tax_in_slab=_exact_rupees(row.tax_in_slab),
                )
                for row in result.slab_breakdown
            ],
            tax_before_rebate=_exact_rupees(result.tax_before_rebate),
            rebate_87a=_exact_rupees(result.rebate_87a),
            tax_after_rebate=_exact_rupees(result.tax_after_rebate),
            surcharge_rate_percent=float(result.surcharge_rate_percent),
            surcharge=_exact_rupees(result.surcharge),
            cess_rate_percent=float(result.cess_rate_percent),
            cess=_exact_rupees(result.cess),
            total_tax=to_rupees(result.total_tax),
            effective_rate_percent=float(result.effective_rate_percent),
        )

    def to_result(self) -> TaxComputationResult:
        """Back to the domain model (display precision) — used by the export route."""
        return TaxComputationResult(
            financial_year=self.financial_year,
            regime=self.regime,
            gross_income=rupees(self.gross_income),
            standard_deduction=rupees(self.standard_deduction),
            total_deductions=rupees(self.total_deductions),
            deductions=[
                SectionDeduction(
                    section=d.section,
                    claimed=rupees(d.claimed),
                    capped=rupees(d.capped),
                    cap=None if d.cap is None else rupees(d.cap),
                )
                for d in self.deductions
            ],
            taxable_income=rupees(self.taxable_income),
            slab_breakdown=[
                SlabTax(
                    slab_index=row.slab_index,
                    min=rupees(row.min_amount),
                    max=None if row.max_amount is None else rupees(row.max_amount),
                    rate_percent=Decimal(str(row.rate_percent)),
                    taxable_in_slab=rupees(row.taxable_in_slab),
                    tax_in_slab=_paise_from_rupees(row.tax_in_slab),
                )
                for row in self.slab_breakdown
            ],
            tax_before_rebate=_paise_from_rupees(self.tax_before_rebate),
            rebate_87a=_paise_from_rupees(self.rebate_87a),
            tax_after_rebate=_paise_from_rupees(self.tax_after_rebate),
            surcharge_rate_percent=Decimal(str(self.surcharge_rate_percent)),
            surcharge=_paise_from_rupees(self.surcharge),
            cess_rate_percent=Decimal(str(self.cess_rate_percent)),
            cess=_paise_from_rupees(self.cess),
            total_tax=rupees(self.total_tax),
            effective_rate_percent=Decimal(str(self.effective_rate_percent)),
        )


class RegimeComparisonOut(BaseModel):
    model_config = ConfigDict(extra="forbid")

    old: TaxComputationOut
    new: TaxComputationOut
    cheaper: Regime
    savings_amount: float
    savings_percentage: float
    rationale: str = ""

    @classmethod
    def from_comparison(cls, comparison: RegimeComparison, rationale: str = "") -> "RegimeComparisonOut":
        return cls(
            old=TaxComputationOut.from_result(comparison.old),
            new=TaxComputationOut.from_result(comparison.new),
            cheaper=comparison.cheaper,
            savings_amount=to_rupees(comparison.savings_amount),
            savings_percentage=float(comparison.savings_percentage),
            rationale=rationale,
        )


# ---------------------------------------------------------------------------
# Compute / Compare requests
# ---------------------------------------------------------------------------

class CompareRequest(BaseModel):
    """
    Income and deductions for one financial year.

    financial_year is parsed leniently ("FY2025-26", "2025-2026" ...);
    an unknown year is a 400, not a 422.
    """
    model_config = ConfigDict(extra="forbid")

    financial_year: str
    income_records: List[IncomeRecordIn] = Field(default_factory=list)
    deduction_claims: List[DeductionClaimIn] = Field(default_factory=list)

    def records(self) -> List[IncomeRecord]:
        return [r.to_domain() for r in self.income_records]

    def claims(self) -> List[DeductionClaim]:
        return [c.to_domain() for c in self.deduction_claims]


class ComputeRequest(CompareRequest):
    regime: Regime


class FinancialYearOut(BaseModel):
    code: str
    label: str
    assessment_year: str
    start_date: date
    end_date: date
    regimes: List[Regime]


# ---------------------------------------------------------------------------
# Error response models — used by main.py exception handlers (cross-cutting)
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    """Single field-level validation error."""
    model_config = ConfigDict(extra="forbid")

    field: Optional[str] = None   # Dot-notation field path, e.g. "income_records.0.gross_amount"
    issue: str


class ErrorBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str                                      # VALIDATION_ERROR, UNAUTHORIZED, ...
    message: str
    details: List[ErrorDetail] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """
    Standard error response format for all endpoints.

    Structure: {"error": {"code": "...", "message": "...", "details": [...]}}
    """
    model_config = ConfigDict(extra="forbid")

    error: ErrorBody


__all__ = [
    "RupeeAmount",
    "IncomeRecordIn",
    "DeductionClaimIn",
    "SlabTaxOut",
    "SectionDeductionOut",
    "TaxComputationOut",
    "RegimeComparisonOut",
    "CompareRequest",
    "ComputeRequest",
    "FinancialYearOut",
    "ErrorDetail",
    "ErrorBody",
    "ErrorResponse",
]
