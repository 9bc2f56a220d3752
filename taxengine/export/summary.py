"""
summary.py — Builds the structured tax summary document for PDF rendering.

Input is a completed TaxComputationResult (paise); output amounts are rupees,
slab ranges in lakh notation. The only non-deterministic inputs are the
generation timestamp and calculation date, and both can be pinned through
ExportMetadata.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from taxengine.calculator.schemas import SlabTax, TaxComputationResult
from taxengine.config import settings
from taxengine.export.schemas import (
    DeductionRow,
    ExportCalculation,
    ExportDocument,
    ExportFooter,
    ExportMetadata,
    ExportTotals,
    ExportUser,
    IncomeSummary,
    SlabRow,
    TaxComputationSection,
)
from taxengine.money import PAISE_PER_RUPEE, round_to_rupee, to_rupees
from taxengine.rules.schemas import Regime

PAISE_PER_LAKH = 100_000 * PAISE_PER_RUPEE

SECTION_DESCRIPTIONS = {
    "80C": "PPF, ELSS, LIC, EPF, Home Loan Principal",
    "80CCD1B": "Additional NPS Contribution",
    "80D": "Health Insurance Premium",
    "80E": "Education Loan Interest",
    "24B": "Home Loan Interest",
    "HRA": "House Rent Allowance Exemption",
}

REGIME_DISPLAY = {
    Regime.old: "Old Tax Regime",
    Regime.new: "New Tax Regime",
}

DISCLAIMER = (
    "This is a computer-generated tax estimate for informational purposes only. "
    "It does not constitute tax advice. Please consult a qualified Chartered Accountant "
    "or tax professional for accurate tax filing. {company} is not responsible for any "
    "discrepancies or errors."
)


def _lakhs(paise: int) -> str:
    value = (Decimal(paise) / PAISE_PER_LAKH).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"₹{value}L"


def _percent(rate: Decimal) -> str:
    return f"{format(rate.normalize(), 'f')}%"


def slab_range_label(slab: SlabTax) -> str:
    """'₹4.0L - ₹8.0L', or 'Above ₹24.0L' for the unbounded top slab."""
    if slab.max is None:
        return f"Above {_lakhs(slab.min)}"
    return f"{_lakhs(slab.min)} - {_lakhs(slab.max)}"


def build_export_summary(
    result: TaxComputationResult,
    metadata: ExportMetadata,
    *,
    now: Optional[datetime] = None,
) -> ExportDocument:
    generated_at = metadata.generated_at or now or datetime.now(timezone.utc)
    calculation_date = metadata.calculation_date or generated_at.date()

    deductions_table = [
        DeductionRow(
            section=d.section,
            description=SECTION_DESCRIPTIONS.get(d.section, d.section),
            claimed_amount=to_rupees(d.claimed),
            allowed_amount=to_rupees(d.capped),
        )
        for d in result.deductions
    ]

    slab_table = [
        SlabRow(
            slab_range=slab_range_label(row),
            rate=_percent(row.rate_percent),
            taxable_amount=to_rupees(row.taxable_in_slab),
            tax_amount=to_rupees(row.tax_in_slab),
        )
        for row in result.slab_breakdown
    ]

    return ExportDocument(
        generated_at=generated_at,
        user=ExportUser(
            id=metadata.user_id,
            email=metadata.user_email or "",
            name=metadata.user_name,
        ),
        calculation=ExportCalculation(
            financial_year=result.financial_year,
            regime=result.regime,
            regime_display=REGIME_DISPLAY[result.regime],
            calculation_date=calculation_date,
        ),
        income_summary=IncomeSummary(
            gross_income=to_rupees(result.gross_income),
            standard_deduction=to_rupees(result.standard_deduction),
            income_after_std_deduction=to_rupees(
                max(0, result.gross_income - result.standard_deduction)
            ),
        ),
        deductions_table=deductions_table,
        total_deductions=to_rupees(result.total_deductions),
        taxable_income=to_rupees(result.taxable_income),
        slab_wise_tax_table=slab_table,
        tax_computation=TaxComputationSection(
            tax_before_rebate=to_rupees(result.tax_before_rebate),
            rebate_87a=to_rupees(result.rebate_87a),
            tax_after_rebate=to_rupees(result.tax_after_rebate),
            surcharge=to_rupees(result.surcharge),
            cess=to_rupees(result.cess),
            cess_rate=_percent(result.cess_rate_percent),
            total_tax_payable=to_rupees(result.total_tax),
        ),
        summary=ExportTotals(
            effective_tax_rate=float(result.effective_rate_percent),
            monthly_tax_equivalent=to_rupees(round_to_rupee(Decimal(result.total_tax) / 12)),
        ),
        disclaimer=DISCLAIMER.format(company=settings.company_name),
        footer=ExportFooter(
            company_name=settings.company_name,
            generated_by=f"{settings.app_name} v{settings.app_version}",
            support_email=settings.support_email,
        ),
    )


__all__ = ["SECTION_DESCRIPTIONS", "slab_range_label", "build_export_summary"]
