"""
schemas.py — Calculator data contracts (internal, amounts in int paise).

Defines:
  - IncomeType, IncomeHead           enums
  - IncomeRecord, DeductionClaim     externally supplied inputs (read-only)
  - IncomeAggregate                  output of aggregate_income()
  - SectionDeduction, DeductionAggregate   output of aggregate_deductions()
  - SlabTax, TaxComputationResult    output of compute()
  - RegimeComparison                 output of compare()

Internal stages only ever see these frozen models; raw request dicts are
converted at the HTTP boundary (taxengine/schemas.py).
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taxengine.rules.schemas import Regime


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class IncomeType(str, Enum):
    salary = "salary"
    business = "business"
    freelance = "freelance"
    rental = "rental"
    interest = "interest"
    dividend = "dividend"
    pension = "pension"
    gift = "gift"
    other = "other"


class IncomeHead(str, Enum):
    """Statutory heads of income the types roll up into."""
    salary = "salary"
    house_property = "house_property"
    business = "business"
    other_sources = "other_sources"


INCOME_HEADS: Dict[IncomeType, IncomeHead] = {
    IncomeType.salary: IncomeHead.salary,
    IncomeType.pension: IncomeHead.salary,
    IncomeType.rental: IncomeHead.house_property,
    IncomeType.business: IncomeHead.business,
    IncomeType.freelance: IncomeHead.business,
    IncomeType.interest: IncomeHead.other_sources,
    IncomeType.dividend: IncomeHead.other_sources,
    IncomeType.gift: IncomeHead.other_sources,
    IncomeType.other: IncomeHead.other_sources,
}


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class IncomeRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    type: IncomeType
    gross_amount: int = Field(..., ge=0)       # paise
    source_ref: str = ""                       # employer, bank, tenant...
    confirmed: bool = False                    # user confirmed the figure
    document_ref: Optional[str] = None         # Form 16, bank statement...

    @property
    def is_verified(self) -> bool:
        return self.confirmed or bool(self.document_ref)


class DeductionClaim(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    section_code: str
    claimed_amount: int = Field(..., ge=0)     # paise


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------

class IncomeAggregate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    gross_income: int
    by_type: Dict[IncomeType, int]
    by_head: Dict[IncomeHead, int]
    missing_types: FrozenSet[IncomeType]
    record_count: int
    unverified_count: int

    @property
    def has_records(self) -> bool:
        return self.record_count > 0


class SectionDeduction(BaseModel):
    """
    One section's deduction. claimed is the raw sum of every claim for the
    section; capped is what is actually deductible (== claimed when cap is None).
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    section: str
    claimed: int
    capped: int
    cap: Optional[int] = None

    @property
    def headroom(self) -> int:
        return 0 if self.cap is None else max(0, self.cap - self.capped)


class DeductionAggregate(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    by_section: Dict[str, SectionDeduction]
    total_claimed: int
    total_capped: int

    def claimed(self, section: str) -> int:
        entry = self.by_section.get(section)
        return entry.claimed if entry else 0

    def capped(self, section: str) -> int:
        entry = self.by_section.get(section)
        return entry.capped if entry else 0


# ---------------------------------------------------------------------------
# Tax computation
# ---------------------------------------------------------------------------

class SlabTax(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    slab_index: int                 # 1-based, in rule-table order
    min: int
    max: Optional[int]
    rate_percent: Decimal
    taxable_in_slab: int
    tax_in_slab: Decimal            # exact, never rounded


class TaxComputationResult(BaseModel):
    """
    Full computation for one regime.

    Sequence:
      1. taxable_income = max(0, gross - standard_deduction - total_deductions)
      2. tax_before_rebate = Σ slab taxes (exact)
      3. rebate_87a only when taxable_income <= rebate threshold
      4. surcharge on tax_after_rebate, cess on (tax_after_rebate + surcharge)
      5. total_tax = the ONLY rounded figure (whole rupee)
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    financial_year: str
    regime: Regime
    gross_income: int
    standard_deduction: int
    total_deductions: int                       # capped itemized deductions, excl. standard
    deductions: List[SectionDeduction] = Field(default_factory=list)
    taxable_income: int
    slab_breakdown: List[SlabTax]
    tax_before_rebate: Decimal
    rebate_87a: Decimal
    tax_after_rebate: Decimal
    surcharge_rate_percent: Decimal
    surcharge: Decimal
    cess_rate_percent: Decimal
    cess: Decimal
    total_tax: int
    effective_rate_percent: Decimal


class RegimeComparison(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    old: TaxComputationResult
    new: TaxComputationResult
    cheaper: Regime
    savings_amount: int
    savings_percentage: Decimal                 # savings / gross income, 2 dp

    def for_regime(self, regime: Regime) -> TaxComputationResult:
        return self.old if regime == Regime.old else self.new


__all__ = [
    "IncomeType",
    "IncomeHead",
    "INCOME_HEADS",
    "IncomeRecord",
    "DeductionClaim",
    "IncomeAggregate",
    "SectionDeduction",
    "DeductionAggregate",
    "SlabTax",
    "TaxComputationResult",
    "RegimeComparison",
]
