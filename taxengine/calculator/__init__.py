from taxengine.calculator.aggregation import (
    aggregate_deductions,
    aggregate_income,
    normalize_section_code,
)
from taxengine.calculator.comparator import build_rationale, compare
from taxengine.calculator.slab_calculator import (
    compute,
    compute_for_regime,
    derive_taxable_income,
    marginal_rate_percent,
)

__all__ = [
    "aggregate_income",
    "aggregate_deductions",
    "normalize_section_code",
    "compute",
    "compute_for_regime",
    "derive_taxable_income",
    "marginal_rate_percent",
    "compare",
    "build_rationale",
]
