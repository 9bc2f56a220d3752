"""
Recommendation engine — runs every rule and orders the results.

Ordering is a STABLE sort on priority (critical > high > medium > low):
recommendations of equal priority keep rule-list order.
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from taxengine.recommendation.rules import RECOMMENDATION_RULES, RecommendationRule
from taxengine.recommendation.schemas import (
    PRIORITY_ORDER,
    Recommendation,
    RecommendationInputs,
    RecommendationResult,
    RecommendationSummary,
    RecommendationType,
)

logger = logging.getLogger(__name__)


def summarize(recommendations: List[Recommendation]) -> RecommendationSummary:
    return RecommendationSummary(
        total=len(recommendations),
        by_type={
            kind: sum(1 for r in recommendations if r.type == kind)
            for kind in RecommendationType
        },
        action_required=sum(1 for r in recommendations if r.action_required),
        total_potential_savings=sum(r.impact_amount for r in recommendations),
    )


def recommend(
    inputs: RecommendationInputs,
    rules: Iterable[RecommendationRule] = RECOMMENDATION_RULES,
) -> RecommendationResult:
    fired = [rec for rec in (rule(inputs) for rule in rules) if rec is not None]
    ordered = sorted(fired, key=lambda rec: PRIORITY_ORDER[rec.priority])
    logger.info("Generated %d recommendations", len(ordered))
    return RecommendationResult(recommendations=ordered, summary=summarize(ordered))


__all__ = ["recommend", "summarize"]
