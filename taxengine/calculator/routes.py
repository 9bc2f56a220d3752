"""
Calculator HTTP routes — POST /api/tax/compute,
                         POST /api/tax/compare,
                         GET  /api/tax/financial-years

Every route checks the bearer identity before any engine work. Request bodies
are in rupees; they are converted to paise domain models here and nowhere else.
"""
from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends

from taxengine.auth import Identity, require_identity
from taxengine.calculator.aggregation import aggregate_deductions, aggregate_income
from taxengine.calculator.comparator import build_rationale, compare
from taxengine.calculator.slab_calculator import compute_for_regime
from taxengine.rules import Regime, get_regime_tables, supported_financial_years
from taxengine.schemas import (
    CompareRequest,
    ComputeRequest,
    FinancialYearOut,
    RegimeComparisonOut,
    TaxComputationOut,
)

router = APIRouter(prefix="/api/tax", tags=["calculator"])
logger = logging.getLogger(__name__)


@router.post("/compute", response_model=TaxComputationOut)
async def compute_tax(
    body: ComputeRequest,
    identity: Identity = Depends(require_identity),
) -> TaxComputationOut:
    """Tax under ONE regime for the given financial year."""
    tables = get_regime_tables(body.financial_year)
    rules = tables.for_regime(body.regime)

    income = aggregate_income(body.records())
    deductions = aggregate_deductions(body.claims(), rules.section_caps, rules.combined_caps)
    result = compute_for_regime(income, deductions, rules)

    logger.info(
        "Computed tax user=%s fy=%s regime=%s records=%d",
        identity.user_id, result.financial_year, result.regime.value, income.record_count,
    )
    return TaxComputationOut.from_result(result)


@router.post("/compare", response_model=RegimeComparisonOut)
async def compare_tax(
    body: CompareRequest,
    identity: Identity = Depends(require_identity),
) -> RegimeComparisonOut:
    """Old vs New for the same inputs. Ties recommend the New Regime."""
    tables = get_regime_tables(body.financial_year)

    income = aggregate_income(body.records())
    deductions = aggregate_deductions(
        body.claims(), tables.old.section_caps, tables.old.combined_caps
    )
    comparison = compare(income, deductions, tables)

    logger.info(
        "Compared regimes user=%s fy=%s cheaper=%s",
        identity.user_id, comparison.old.financial_year, comparison.cheaper.value,
    )
    return RegimeComparisonOut.from_comparison(comparison, build_rationale(comparison))


@router.get("/financial-years", response_model=List[FinancialYearOut])
async def list_financial_years(
    identity: Identity = Depends(require_identity),
) -> List[FinancialYearOut]:
    return [
        FinancialYearOut(
            code=fy.code,
            label=fy.label,
            assessment_year=fy.assessment_year,
            start_date=fy.start_date,
            end_date=fy.end_date,
            regimes=list(Regime),
        )
        for fy in supported_financial_years()
    ]
