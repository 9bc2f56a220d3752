from taxengine.rules.registry import (
    OTHER_SECTION,
    get_financial_year,
    get_regime_tables,
    get_rule_table,
    normalize_fy_code,
    supported_financial_years,
)
from taxengine.rules.schemas import (
    CombinedCap,
    FinancialYear,
    Regime,
    RegimeTables,
    Slab,
    SurchargeBand,
    TaxRuleTable,
)

__all__ = [
    "OTHER_SECTION",
    "CombinedCap",
    "FinancialYear",
    "Regime",
    "RegimeTables",
    "Slab",
    "SurchargeBand",
    "TaxRuleTable",
    "get_financial_year",
    "get_regime_tables",
    "get_rule_table",
    "normalize_fy_code",
    "supported_financial_years",
]
