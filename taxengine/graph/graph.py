"""
graph.py — Tax engine LangGraph StateGraph orchestrator.

Builds and compiles the full pipeline:
  aggregate → compare → audit → recommend

Usage:
    from taxengine.graph.graph import get_graph, run_pipeline

    # At FastAPI startup (warms the cache):
    app.state.tax_graph = get_graph()

    # At request time:
    final_state = run_pipeline(records, claims, tables, Regime.new)
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Optional

from taxengine.calculator.schemas import DeductionClaim, IncomeRecord
from taxengine.rules.schemas import Regime, RegimeTables

logger = logging.getLogger(__name__)


def build_graph():
    """
    Builds and compiles the tax engine StateGraph.

    Node execution order is strictly linear; every stage needs the previous
    stage's output and none can fail on user data (data-quality problems
    become audit flags, not branches).
    """
    from langgraph.graph import END, StateGraph

    from taxengine.graph.nodes import aggregate_node, audit_node, compare_node, recommend_node
    from taxengine.graph.state import TaxEngineState

    workflow = StateGraph(TaxEngineState)

    workflow.add_node("aggregate", aggregate_node)
    workflow.add_node("compare", compare_node)
    workflow.add_node("audit", audit_node)
    workflow.add_node("recommend", recommend_node)

    workflow.set_entry_point("aggregate")
    workflow.add_edge("aggregate", "compare")
    workflow.add_edge("compare", "audit")
    workflow.add_edge("audit", "recommend")
    workflow.add_edge("recommend", END)

    compiled = workflow.compile()
    logger.info("Tax engine LangGraph compiled successfully")
    return compiled


@lru_cache(maxsize=1)
def get_graph():
    """Compiled graph singleton. Compiling is the only costly step; invoking is cheap."""
    return build_graph()


def run_pipeline(
    income_records: Iterable[IncomeRecord],
    deduction_claims: Iterable[DeductionClaim],
    tables: RegimeTables,
    regime_selected: Regime,
    *,
    reported_gross_income: Optional[int] = None,
) -> dict:
    """Invoke the compiled graph once and return the final state."""
    initial_state = {
        "income_records": list(income_records),
        "deduction_claims": list(deduction_claims),
        "tables": tables,
        "regime_selected": regime_selected,
        "reported_gross_income": reported_gross_income,
    }
    return get_graph().invoke(initial_state)


__all__ = ["build_graph", "get_graph", "run_pipeline"]
