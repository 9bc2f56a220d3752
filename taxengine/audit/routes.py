"""
Audit HTTP route — POST /api/tax/audit
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from taxengine.audit.engine import run_audit
from taxengine.audit.schemas import (
    AuditFlagOut,
    AuditInputs,
    AuditRequest,
    AuditResponse,
    AuditResult,
)
from taxengine.auth import Identity, require_identity
from taxengine.calculator.aggregation import (
    aggregate_deductions,
    aggregate_income,
    claims_from_mapping,
)
from taxengine.money import rupees, to_rupees
from taxengine.rules import get_rule_table

router = APIRouter(prefix="/api/tax", tags=["audit"])
logger = logging.getLogger(__name__)


def audit_to_response(result: AuditResult) -> AuditResponse:
    return AuditResponse(
        audit_score=result.audit_score,
        readiness_level=result.readiness_level,
        flags=[
            AuditFlagOut(
                **flag.model_dump(exclude={"affected_amount"}),
                affected_amount=(
                    None if flag.affected_amount is None else to_rupees(flag.affected_amount)
                ),
            )
            for flag in result.flags
        ],
        summary=result.summary,
    )


@router.post("/audit", response_model=AuditResponse)
async def audit_return(
    body: AuditRequest,
    identity: Identity = Depends(require_identity),
) -> AuditResponse:
    """Pre-filing compliance check: score, readiness level and flags."""
    rules = get_rule_table(body.financial_year, body.regime)

    claims = claims_from_mapping(
        {section: rupees(amount) for section, amount in body.deductions_by_section.items()}
    )
    inputs = AuditInputs(
        income=aggregate_income(r.to_domain() for r in body.income_records),
        reported_gross_income=rupees(body.gross_income),
        deductions=aggregate_deductions(claims, rules.section_caps, rules.combined_caps),
        section_caps=rules.section_caps,
        regime_selected=body.regime,
    )
    result = run_audit(inputs)
    logger.info("Audit served user=%s fy=%s", identity.user_id, rules.financial_year.code)
    return audit_to_response(result)
