"""
registry.py — Versioned statutory rule tables, keyed by (financial year, regime).

The tables live in declarative JSON (rules/tax_rules.json, amounts in rupees)
and are loaded exactly once per process. Loading converts rupees to paise,
builds frozen TaxRuleTable models and checks every structural invariant; a
table that fails a check aborts with ComputationInvariantViolation because it
is a deployment defect, not a user error.

Public API:
    normalize_fy_code("FY2025_26")        -> "2025-26"
    get_financial_year("2025-26")         -> FinancialYear
    get_rule_table("2025-26", Regime.new) -> TaxRuleTable
    get_regime_tables("2025-26")          -> RegimeTables
    supported_financial_years()           -> list[FinancialYear]
"""
from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from taxengine.config import settings
from taxengine.errors import ComputationInvariantViolation, UnknownFinancialYearError
from taxengine.money import rupees
from taxengine.rules.schemas import (
    CombinedCap,
    FinancialYear,
    Regime,
    RegimeTables,
    Slab,
    SurchargeBand,
    TaxRuleTable,
)

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / "tax_rules.json"

# Bucket for deduction claims whose section code has no entry in section_caps
OTHER_SECTION = "OTHER"

_FY_PATTERN = re.compile(r"^(?:FY)?\s*(\d{4})\s*[-_/]\s*(\d{2}|\d{4})$", re.IGNORECASE)


# ===========================================================================
# FINANCIAL YEAR CODES
# ===========================================================================

def normalize_fy_code(code: object) -> str:
    """
    Canonicalise a financial-year code to "YYYY-YY".

    Accepts "2025-26", "FY2025-26", "FY2025_26", "FY 2025-26", "2025-2026".
    The end year must be the start year + 1.
    """
    if not isinstance(code, str):
        raise UnknownFinancialYearError(code)
    match = _FY_PATTERN.match(code.strip())
    if match is None:
        raise UnknownFinancialYearError(code)
    start = int(match.group(1))
    end_raw = match.group(2)
    end = int(end_raw) if len(end_raw) == 4 else (start // 100) * 100 + int(end_raw)
    if end != start + 1:
        raise UnknownFinancialYearError(code)
    return f"{start}-{end % 100:02d}"


# ===========================================================================
# INVARIANT CHECKS
# ===========================================================================

def validate_rule_table(table: TaxRuleTable) -> None:
    """Raise ComputationInvariantViolation if the table is structurally unsound."""
    where = f"{table.financial_year.code}/{table.regime.value}"
    slabs = table.slabs
    if not slabs:
        raise ComputationInvariantViolation(f"{where}: slab list is empty")
    if slabs[0].min != 0:
        raise ComputationInvariantViolation(f"{where}: first slab must start at 0")
    for index, slab in enumerate(slabs):
        is_last = index == len(slabs) - 1
        if slab.max is None:
            if not is_last:
                raise ComputationInvariantViolation(
                    f"{where}: unbounded slab {index + 1} is not the final slab"
                )
            continue
        if slab.max <= slab.min:
            raise ComputationInvariantViolation(
                f"{where}: slab {index + 1} has max <= min"
            )
        if is_last:
            raise ComputationInvariantViolation(f"{where}: final slab must be unbounded")
        if slabs[index + 1].min != slab.max:
            raise ComputationInvariantViolation(
                f"{where}: slabs {index + 1} and {index + 2} are not contiguous"
            )
    bands = table.surcharge_bands
    for lower, upper in zip(bands, bands[1:]):
        if upper.min_income <= lower.min_income:
            raise ComputationInvariantViolation(
                f"{where}: surcharge bands must be strictly ascending"
            )
    if table.allowed_sections is not None:
        unknown = set(table.allowed_sections) - set(table.section_caps)
        if unknown:
            raise ComputationInvariantViolation(
                f"{where}: allowed sections without a cap entry: {sorted(unknown)}"
            )
    grouped: set = set()
    for group in table.combined_caps:
        members = set(group.sections)
        missing = members - set(table.section_caps)
        if missing:
            raise ComputationInvariantViolation(
                f"{where}: combined cap {group.name} lists sections without a cap entry: {sorted(missing)}"
            )
        if members & grouped:
            raise ComputationInvariantViolation(
                f"{where}: sections in more than one combined cap: {sorted(members & grouped)}"
            )
        grouped |= members


# ===========================================================================
# LOADING
# ===========================================================================

class RuleBook:
    """Immutable index of every loaded table. One instance per rules file."""

    def __init__(
        self,
        years: Dict[str, FinancialYear],
        tables: Dict[Tuple[str, Regime], TaxRuleTable],
    ) -> None:
        self._years = dict(years)
        self._tables = dict(tables)

    def financial_year(self, code: str) -> FinancialYear:
        try:
            return self._years[code]
        except KeyError:
            raise UnknownFinancialYearError(code) from None

    def table(self, code: str, regime: Regime) -> TaxRuleTable:
        try:
            return self._tables[(code, regime)]
        except KeyError:
            raise UnknownFinancialYearError(code) from None

    def years(self) -> List[FinancialYear]:
        return sorted(self._years.values(), key=lambda fy: fy.start_date)


def _caps_to_paise(raw_caps: dict) -> Dict[str, Optional[int]]:
    return {
        section.upper(): (None if cap is None else rupees(cap))
        for section, cap in raw_caps.items()
    }


def _combined_caps_to_paise(raw_groups: list) -> List[CombinedCap]:
    return [
        CombinedCap(
            name=group["name"],
            sections=tuple(section.upper() for section in group["sections"]),
            cap=rupees(group["cap"]),
        )
        for group in raw_groups
    ]


def _build_table(
    raw: dict,
    year: FinancialYear,
    caps: Dict[str, Optional[int]],
    combined_caps: List[CombinedCap],
) -> TaxRuleTable:
    allowed = raw.get("allowed_sections")
    return TaxRuleTable(
        financial_year=year,
        regime=Regime(raw["regime"]),
        display_name=raw["display_name"],
        slabs=[
            Slab(
                min=rupees(s["min"]),
                max=None if s["max"] is None else rupees(s["max"]),
                rate_percent=s["rate_percent"],
            )
            for s in raw["slabs"]
        ],
        standard_deduction=rupees(raw["standard_deduction"]),
        rebate_threshold_income=rupees(raw["rebate_threshold_income"]),
        rebate_max_amount=rupees(raw["rebate_max_amount"]),
        section_caps=caps,
        combined_caps=combined_caps,
        allowed_sections=None if allowed is None else frozenset(s.upper() for s in allowed),
        surcharge_bands=[
            SurchargeBand(min_income=rupees(b["min_income"]), rate_percent=b["rate_percent"])
            for b in raw.get("surcharge_bands", [])
        ],
        surcharge_basis=raw.get("surcharge_basis", "taxable"),
        cess_rate_percent=raw["cess_rate_percent"],
    )


def parse_rulebook(document: dict) -> RuleBook:
    """Build and validate a RuleBook from the decoded JSON document."""
    years: Dict[str, FinancialYear] = {}
    caps_by_year: Dict[str, Dict[str, Optional[int]]] = {}
    groups_by_year: Dict[str, List[CombinedCap]] = {}
    tables: Dict[Tuple[str, Regime], TaxRuleTable] = {}
    try:
        for raw_year in document["financial_years"]:
            code = normalize_fy_code(raw_year["code"])
            years[code] = FinancialYear(
                code=code,
                start_date=raw_year["start_date"],
                end_date=raw_year["end_date"],
            )
            caps_by_year[code] = _caps_to_paise(raw_year.get("section_caps", {}))
            groups_by_year[code] = _combined_caps_to_paise(raw_year.get("combined_caps", []))

        for raw_table in document["tables"]:
            code = normalize_fy_code(raw_table["financial_year"])
            if code not in years:
                raise ComputationInvariantViolation(
                    f"table references undeclared financial year {code}"
                )
            table = _build_table(raw_table, years[code], caps_by_year[code], groups_by_year[code])
            key = (code, table.regime)
            if key in tables:
                raise ComputationInvariantViolation(
                    f"duplicate rule table for {code}/{table.regime.value}"
                )
            validate_rule_table(table)
            tables[key] = table
    except (KeyError, TypeError, ValueError, ValidationError) as exc:
        raise ComputationInvariantViolation(f"malformed rule tables: {exc}") from exc

    for code in years:
        for regime in Regime:
            if (code, regime) not in tables:
                raise ComputationInvariantViolation(
                    f"financial year {code} has no {regime.value} regime table"
                )
    return RuleBook(years, tables)


@lru_cache(maxsize=None)
def _load_rulebook(path: str) -> RuleBook:
    with open(path, encoding="utf-8") as fh:
        document = json.load(fh)
    rulebook = parse_rulebook(document)
    logger.info(
        "Loaded statutory rule tables from %s: years=%s",
        path,
        ",".join(fy.code for fy in rulebook.years()),
    )
    return rulebook


def get_rulebook() -> RuleBook:
    return _load_rulebook(settings.rule_tables_path or str(DEFAULT_RULES_PATH))


# ===========================================================================
# PUBLIC LOOKUPS
# ===========================================================================

def get_financial_year(code: object) -> FinancialYear:
    return get_rulebook().financial_year(normalize_fy_code(code))


def get_rule_table(code: object, regime: Regime) -> TaxRuleTable:
    return get_rulebook().table(normalize_fy_code(code), Regime(regime))


def get_regime_tables(code: object) -> RegimeTables:
    canonical = normalize_fy_code(code)
    rulebook = get_rulebook()
    return RegimeTables(
        old=rulebook.table(canonical, Regime.old),
        new=rulebook.table(canonical, Regime.new),
    )


def supported_financial_years() -> List[FinancialYear]:
    return get_rulebook().years()


__all__ = [
    "OTHER_SECTION",
    "RuleBook",
    "normalize_fy_code",
    "validate_rule_table",
    "parse_rulebook",
    "get_rulebook",
    "get_financial_year",
    "get_rule_table",
    "get_regime_tables",
    "supported_financial_years",
]
