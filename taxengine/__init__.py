"""
taxengine — deterministic Indian income-tax computation, audit and advisory engine.

Pipeline:
  IncomeRecord[] / DeductionClaim[] → aggregation → slab tax (old, new)
  → regime comparison → audit scoring → recommendations → export payload
"""

__version__ = "0.1.0"
