"""
nodes.py — One LangGraph node per pipeline stage.

Nodes are synchronous pure functions: state in, partial state out. All the
arithmetic lives in the stage packages; a node only wires inputs to a stage.
"""
from __future__ import annotations

import logging

from taxengine.audit.engine import run_audit
from taxengine.audit.schemas import AuditInputs
from taxengine.calculator.aggregation import aggregate_deductions, aggregate_income
from taxengine.calculator.comparator import build_rationale, compare
from taxengine.graph.state import TaxEngineState
from taxengine.recommendation.engine import recommend
from taxengine.recommendation.schemas import RecommendationInputs

logger = logging.getLogger(__name__)


def aggregate_node(state: TaxEngineState) -> dict:
    """
    Reads:  income_records, deduction_claims, tables
    Writes: income, deductions
    """
    tables = state["tables"]
    income = aggregate_income(state.get("income_records", []))
    deductions = aggregate_deductions(
        state.get("deduction_claims", []), tables.old.section_caps, tables.old.combined_caps
    )
    logger.debug(
        "aggregate: records=%d sections=%d", income.record_count, len(deductions.by_section)
    )
    return {"income": income, "deductions": deductions, "current_stage": "aggregate"}


def compare_node(state: TaxEngineState) -> dict:
    """
    Reads:  income, deductions, tables, regime_selected
    Writes: comparison, computation, rationale
    """
    comparison = compare(state["income"], state["deductions"], state["tables"])
    return {
        "comparison": comparison,
        "computation": comparison.for_regime(state["regime_selected"]),
        "rationale": build_rationale(comparison),
        "current_stage": "compare",
    }


def audit_node(state: TaxEngineState) -> dict:
    """
    Reads:  income, deductions, tables, regime_selected
    Writes: audit
    """
    income = state["income"]
    reported = state.get("reported_gross_income")
    inputs = AuditInputs(
        income=income,
        reported_gross_income=income.gross_income if reported is None else reported,
        deductions=state["deductions"],
        section_caps=state["tables"].old.section_caps,
        regime_selected=state["regime_selected"],
    )
    return {"audit": run_audit(inputs), "current_stage": "audit"}


def recommend_node(state: TaxEngineState) -> dict:
    """
    Reads:  income, deductions, tables, regime_selected, comparison
    Writes: recommendations
    """
    comparison = state["comparison"]
    tables = state["tables"]
    inputs = RecommendationInputs(
        income=state["income"],
        gross_income=state["income"].gross_income,
        deductions=state["deductions"],
        regime_selected=state["regime_selected"],
        old_regime_tax=comparison.old.total_tax,
        new_regime_tax=comparison.new.total_tax,
        old_rules=tables.old,
    )
    return {"recommendations": recommend(inputs), "current_stage": "recommend"}


__all__ = ["aggregate_node", "compare_node", "audit_node", "recommend_node"]
