"""
state.py — Shared TaxEngineState TypedDict for the LangGraph pipeline.

Flows through the four stage nodes:
  aggregate → compare → audit → recommend

Each node reads the fields it needs and returns only the fields it produces;
LangGraph merges the partial updates. Values are frozen domain models, so a
node can never mutate another node's output.
"""
from __future__ import annotations

from typing import List, Optional

from typing_extensions import TypedDict

from taxengine.audit.schemas import AuditResult
from taxengine.calculator.schemas import (
    DeductionAggregate,
    DeductionClaim,
    IncomeAggregate,
    IncomeRecord,
    RegimeComparison,
    TaxComputationResult,
)
from taxengine.recommendation.schemas import RecommendationResult
from taxengine.rules.schemas import Regime, RegimeTables


class TaxEngineState(TypedDict, total=False):
    """
    'total=False' means every field is optional at invoke time; the caller
    sets the input group and each node fills in its own group.
    """

    # ---- Inputs (set before graph.invoke) ------------------------------------
    income_records: List[IncomeRecord]
    deduction_claims: List[DeductionClaim]
    tables: RegimeTables
    regime_selected: Regime
    reported_gross_income: Optional[int]   # None → use Σ income records

    # ---- aggregate ----------------------------------------------------------
    income: IncomeAggregate
    deductions: DeductionAggregate

    # ---- compare ------------------------------------------------------------
    comparison: RegimeComparison
    computation: TaxComputationResult      # the selected regime's side
    rationale: str

    # ---- audit --------------------------------------------------------------
    audit: AuditResult

    # ---- recommend ----------------------------------------------------------
    recommendations: RecommendationResult

    # ---- Control flow -------------------------------------------------------
    current_stage: str                     # "aggregate" | "compare" | "audit" | "recommend"
