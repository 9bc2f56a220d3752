"""
Audit engine — runs every audit rule and turns the flags into a score.

score = max(0, 100 - Σ penalty of fired rules)
"""
from __future__ import annotations

import logging
from typing import Iterable, List

from taxengine.audit.rules import AUDIT_RULES, AuditRule
from taxengine.audit.schemas import (
    AuditFlag,
    AuditInputs,
    AuditResult,
    AuditSummary,
    ReadinessLevel,
    Severity,
)

logger = logging.getLogger(__name__)

MAX_SCORE = 100


def readiness_for(score: int) -> ReadinessLevel:
    if score >= 90:
        return ReadinessLevel.excellent
    if score >= 75:
        return ReadinessLevel.good
    if score >= 50:
        return ReadinessLevel.needs_attention
    return ReadinessLevel.critical


def summarize(flags: List[AuditFlag]) -> AuditSummary:
    def count(severity: Severity) -> int:
        return sum(1 for f in flags if f.severity == severity)

    return AuditSummary(
        total_flags=len(flags),
        critical=count(Severity.critical),
        errors=count(Severity.error),
        warnings=count(Severity.warning),
        info=count(Severity.info),
        resolution_required=sum(1 for f in flags if f.resolution_required),
    )


def run_audit(inputs: AuditInputs, rules: Iterable[AuditRule] = AUDIT_RULES) -> AuditResult:
    flags: List[AuditFlag] = []
    for rule in rules:
        flag = rule(inputs)
        if flag is not None:
            flags.append(flag)

    score = max(0, MAX_SCORE - sum(f.penalty for f in flags))
    readiness = readiness_for(score)
    logger.info("Audit complete: score=%d readiness=%s flags=%d", score, readiness.value, len(flags))

    return AuditResult(
        audit_score=score,
        readiness_level=readiness,
        flags=flags,
        summary=summarize(flags),
    )


__all__ = ["MAX_SCORE", "readiness_for", "summarize", "run_audit"]
