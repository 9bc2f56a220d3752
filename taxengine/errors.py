"""
errors.py — Exception taxonomy for the tax engine.

  InputValidationError           malformed input / unknown financial year → HTTP 400
    UnknownFinancialYearError
  UnauthorizedError              missing or invalid identity token         → HTTP 401
  ComputationInvariantViolation  corrupted statutory rule table            → HTTP 500

Data-quality problems (unverified income, exceeded caps, mismatched totals) are
NOT exceptions. They are reported as AuditFlags on a successful response.
"""
from __future__ import annotations

from typing import Optional


class TaxEngineError(Exception):
    """Base class for every error raised deliberately by the engine."""


class InputValidationError(TaxEngineError, ValueError):
    """Caller-supplied data is malformed. Raised before any computation runs."""

    def __init__(self, issue: str, field: Optional[str] = None) -> None:
        super().__init__(issue)
        self.field = field
        self.issue = issue

    def to_detail(self) -> dict:
        return {"field": self.field, "issue": self.issue}


class UnknownFinancialYearError(InputValidationError):
    """Financial-year code is unparseable or has no rule table."""

    def __init__(self, code: object, field: str = "financial_year") -> None:
        super().__init__(
            f"Unknown or unsupported financial year code: {code!r}",
            field=field,
        )
        self.code = code


class UnauthorizedError(TaxEngineError):
    """Identity token missing, malformed, expired or signed with the wrong key."""


class ComputationInvariantViolation(TaxEngineError, RuntimeError):
    """
    A statutory rule table broke a structural invariant (non-contiguous slabs,
    unbounded slab not last, unsorted surcharge bands, ...).

    This is a deployment/configuration defect, never a user-input problem.
    """


__all__ = [
    "TaxEngineError",
    "InputValidationError",
    "UnknownFinancialYearError",
    "UnauthorizedError",
    "ComputationInvariantViolation",
]
