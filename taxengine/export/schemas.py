"""
schemas.py — Export document contracts.

ExportDocument is the versioned, render-ready summary handed to the PDF
collaborator. All amounts in it are rupees; nothing here is rendered.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from taxengine.rules.schemas import Regime
from taxengine.schemas import TaxComputationOut

DOCUMENT_TYPE = "tax_summary"
DOCUMENT_VERSION = "1.0.0"


class ExportMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: str
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    calculation_date: Optional[date] = None     # defaults to the generation date
    generated_at: Optional[datetime] = None     # defaults to now (UTC)


class ExportUser(BaseModel):
    id: str
    email: str = ""
    name: Optional[str] = None


class ExportCalculation(BaseModel):
    financial_year: str
    regime: Regime
    regime_display: str
    calculation_date: date


class IncomeSummary(BaseModel):
    gross_income: float
    standard_deduction: float
    income_after_std_deduction: float


class DeductionRow(BaseModel):
    section: str
    description: str
    claimed_amount: float
    allowed_amount: float


class SlabRow(BaseModel):
    slab_range: str                 # "₹4.0L - ₹8.0L", "Above ₹24.0L"
    rate: str                       # "5%"
    taxable_amount: float
    tax_amount: float


class TaxComputationSection(BaseModel):
    tax_before_rebate: float
    rebate_87a: float
    tax_after_rebate: float
    surcharge: float
    cess: float
    cess_rate: str
    total_tax_payable: float


class ExportTotals(BaseModel):
    effective_tax_rate: float
    monthly_tax_equivalent: float


class ExportFooter(BaseModel):
    company_name: str
    generated_by: str
    support_email: str


class ExportDocument(BaseModel):
    document_type: str = DOCUMENT_TYPE
    version: str = DOCUMENT_VERSION
    generated_at: datetime
    user: ExportUser
    calculation: ExportCalculation
    income_summary: IncomeSummary
    deductions_table: List[DeductionRow]
    total_deductions: float
    taxable_income: float
    slab_wise_tax_table: List[SlabRow]
    tax_computation: TaxComputationSection
    summary: ExportTotals
    disclaimer: str
    footer: ExportFooter


# ---------------------------------------------------------------------------
# HTTP contracts
# ---------------------------------------------------------------------------

class ExportMetadataIn(BaseModel):
    """user_id defaults to the caller's verified identity."""
    model_config = ConfigDict(extra="forbid")

    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    calculation_date: Optional[date] = None
    generated_at: Optional[datetime] = None


class ExportRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    result: TaxComputationOut
    metadata: ExportMetadataIn = Field(default_factory=ExportMetadataIn)
