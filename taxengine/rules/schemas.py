"""
schemas.py — Statutory rule-table data contracts.

Defines:
  - Regime            (old | new)
  - FinancialYear     (code "2025-26", start/end dates)
  - Slab              (one contiguous income range at a fixed marginal rate)
  - SurchargeBand     (minimum income at which a surcharge rate kicks in)
  - CombinedCap       (one ceiling shared by several deduction sections)
  - TaxRuleTable      (everything needed to tax one regime in one year)

All amounts are int paise. Every model is frozen: tables are loaded once at
process start and shared read-only by every request.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Regime(str, Enum):
    old = "old"
    new = "new"


class FinancialYear(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    code: str               # canonical form "2025-26"
    start_date: date        # 1 April
    end_date: date          # 31 March

    @property
    def label(self) -> str:
        return f"FY {self.code}"

    @property
    def assessment_year(self) -> str:
        """AY is the year after the FY: FY 2025-26 → AY 2026-27."""
        start = self.start_date.year + 1
        return f"AY {start}-{str(start + 1)[-2:]}"


class Slab(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    min: int = Field(..., ge=0)
    max: Optional[int] = None                  # None → unbounded (final slab only)
    rate_percent: Decimal = Field(..., ge=0, le=100)


class SurchargeBand(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    min_income: int = Field(..., ge=0)         # band applies when income >= min_income
    rate_percent: Decimal = Field(..., ge=0, le=100)


class CombinedCap(BaseModel):
    """
    One ceiling shared by several sections (80CCE over 80C + 80CCC).
    Members are filled in listed order until the shared cap runs out.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    sections: Tuple[str, ...]
    cap: int = Field(..., ge=0)


class TaxRuleTable(BaseModel):
    """
    Statutory constants for one (financial year, regime) pair.

    section_caps maps a normalised section code to its cap; None means the
    section passes through uncapped (HRA, LTA, 80E, 80G, employer NPS...).
    allowed_sections=None means every itemized section is deductible; the
    new regime restricts this to employer NPS (80CCD2).
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    financial_year: FinancialYear
    regime: Regime
    display_name: str
    slabs: List[Slab]
    standard_deduction: int = Field(..., ge=0)
    rebate_threshold_income: int = Field(..., ge=0)
    rebate_max_amount: int = Field(..., ge=0)
    section_caps: Dict[str, Optional[int]] = Field(default_factory=dict)
    combined_caps: List[CombinedCap] = Field(default_factory=list)
    allowed_sections: Optional[FrozenSet[str]] = None
    surcharge_bands: List[SurchargeBand] = Field(default_factory=list)
    surcharge_basis: Literal["taxable", "gross"] = "taxable"
    cess_rate_percent: Decimal = Field(..., ge=0, le=100)

    def cap_for(self, section: str) -> Optional[int]:
        return self.section_caps.get(section)

    def combined_cap_for(self, section: str) -> Optional[CombinedCap]:
        return next((group for group in self.combined_caps if section in group.sections), None)

    def allows(self, section: str) -> bool:
        return self.allowed_sections is None or section in self.allowed_sections


class RegimeTables(BaseModel):
    """The two tables a regime comparison needs, always from the same year."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    old: TaxRuleTable
    new: TaxRuleTable

    def for_regime(self, regime: Regime) -> TaxRuleTable:
        return self.old if regime == Regime.old else self.new


__all__ = [
    "Regime",
    "FinancialYear",
    "Slab",
    "SurchargeBand",
    "CombinedCap",
    "TaxRuleTable",
    "RegimeTables",
]
