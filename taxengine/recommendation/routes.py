"""
Recommendation HTTP route — POST /api/tax/recommend
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from taxengine.auth import Identity, require_identity
from taxengine.calculator.aggregation import (
    aggregate_deductions,
    aggregate_income,
    claims_from_mapping,
)
from taxengine.money import rupees, to_rupees
from taxengine.recommendation.engine import recommend
from taxengine.recommendation.schemas import (
    RecommendationInputs,
    RecommendationOut,
    RecommendationResult,
    RecommendationSummaryOut,
    RecommendRequest,
    RecommendResponse,
)
from taxengine.rules import get_regime_tables

router = APIRouter(prefix="/api/tax", tags=["recommendation"])
logger = logging.getLogger(__name__)


def recommendations_to_response(result: RecommendationResult) -> RecommendResponse:
    summary = result.summary
    return RecommendResponse(
        recommendations=[
            RecommendationOut(
                **rec.model_dump(exclude={"impact_amount"}),
                impact_amount=to_rupees(rec.impact_amount),
            )
            for rec in result.recommendations
        ],
        summary=RecommendationSummaryOut(
            total=summary.total,
            by_type=summary.by_type,
            action_required=summary.action_required,
            total_potential_savings=to_rupees(summary.total_potential_savings),
        ),
    )


@router.post("/recommend", response_model=RecommendResponse)
async def recommend_actions(
    body: RecommendRequest,
    identity: Identity = Depends(require_identity),
) -> RecommendResponse:
    """Prioritized, quantified tax-saving and compliance suggestions."""
    tables = get_regime_tables(body.financial_year)

    claims = claims_from_mapping(
        {section: rupees(amount) for section, amount in body.deductions_by_section.items()}
    )
    inputs = RecommendationInputs(
        income=aggregate_income(r.to_domain() for r in body.income_records),
        gross_income=rupees(body.gross_income),
        deductions=aggregate_deductions(claims, tables.old.section_caps, tables.old.combined_caps),
        regime_selected=body.regime,
        old_regime_tax=rupees(body.old_regime_tax),
        new_regime_tax=rupees(body.new_regime_tax),
        old_rules=tables.old,
    )
    result = recommend(inputs)
    logger.info(
        "Recommendations served user=%s fy=%s count=%d",
        identity.user_id, tables.old.financial_year.code, result.summary.total,
    )
    return recommendations_to_response(result)
