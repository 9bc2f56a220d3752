"""
Full-pipeline HTTP route — POST /api/tax/analyze

Runs aggregate → compare → audit → recommend through the LangGraph pipeline
and returns every stage's output in one response.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from taxengine.audit.routes import audit_to_response
from taxengine.audit.schemas import AuditResponse
from taxengine.auth import Identity, require_identity
from taxengine.graph.graph import run_pipeline
from taxengine.recommendation.routes import recommendations_to_response
from taxengine.recommendation.schemas import RecommendResponse
from taxengine.rules import get_regime_tables
from taxengine.schemas import ComputeRequest, RegimeComparisonOut, TaxComputationOut

router = APIRouter(prefix="/api/tax", tags=["pipeline"])
logger = logging.getLogger(__name__)


class AnalyzeResponse(BaseModel):
    computation: TaxComputationOut
    comparison: RegimeComparisonOut
    audit: AuditResponse
    recommendations: RecommendResponse


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    body: ComputeRequest,
    identity: Identity = Depends(require_identity),
) -> AnalyzeResponse:
    tables = get_regime_tables(body.financial_year)

    final_state = run_pipeline(body.records(), body.claims(), tables, body.regime)

    logger.info(
        "Pipeline complete user=%s fy=%s stage=%s",
        identity.user_id, tables.old.financial_year.code, final_state.get("current_stage"),
    )
    return AnalyzeResponse(
        computation=TaxComputationOut.from_result(final_state["computation"]),
        comparison=RegimeComparisonOut.from_comparison(
            final_state["comparison"], final_state["rationale"]
        ),
        audit=audit_to_response(final_state["audit"]),
        recommendations=recommendations_to_response(final_state["recommendations"]),
    )
