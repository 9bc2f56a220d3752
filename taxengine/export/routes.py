"""
Export HTTP route — POST /api/tax/export-summary

Returns the structured document only; rendering it to PDF is the caller's job.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from taxengine.auth import Identity, require_identity
from taxengine.export.schemas import ExportDocument, ExportMetadata, ExportRequest
from taxengine.export.summary import build_export_summary
from taxengine.rules import get_financial_year

router = APIRouter(prefix="/api/tax", tags=["export"])
logger = logging.getLogger(__name__)


@router.post("/export-summary", response_model=ExportDocument)
async def export_summary(
    body: ExportRequest,
    identity: Identity = Depends(require_identity),
) -> ExportDocument:
    # Rejects results for years this deployment has no tables for
    fy = get_financial_year(body.result.financial_year)
    result = body.result.to_result().model_copy(update={"financial_year": fy.code})

    meta = body.metadata
    metadata = ExportMetadata(
        user_id=meta.user_id or identity.user_id,
        user_email=meta.user_email or identity.email,
        user_name=meta.user_name or identity.name,
        calculation_date=meta.calculation_date,
        generated_at=meta.generated_at,
    )
    document = build_export_summary(result, metadata)
    logger.info("Export summary built user=%s fy=%s", identity.user_id, fy.code)
    return document
