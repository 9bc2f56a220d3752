"""
Demo taxpayer fixtures for end-to-end tests — FY 2025-26.

Three hand-computed profiles used as the primary integration data set.
All amounts are RUPEES (the HTTP boundary unit); domain tests convert with
taxengine.money.rupees().
"""
from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Profile 1: Asha — ₹12L salary, no deductions, no interest record
# ---------------------------------------------------------------------------
_ASHA_REQUEST: dict[str, Any] = dict(
    financial_year="2025-26",
    income_records=[
        dict(type="salary", gross_amount=1_200_000, source_ref="Acme Pvt Ltd", confirmed=True),
    ],
    deduction_claims=[],
)
# NEW: taxable = 1200000 - 75000 = 1125000
#      slab: 0 + 20000 (4-8L @5%) + 32500 (8-11.25L @10%) = 52500
#      87A: taxable <= 12L → rebate 52500 → total 0
# OLD: taxable = 1200000 - 50000 = 1150000
#      slab: 12500 + 100000 + 45000 = 157500, cess 6300 → 163800
_ASHA_EXPECTED: dict[str, Any] = dict(
    new_taxable=1_125_000,
    new_slab_tax=52_500,
    new_total_tax=0,
    old_taxable=1_150_000,
    old_total_tax=163_800,
    cheaper="new",
    savings=163_800,
)

# ---------------------------------------------------------------------------
# Profile 2: Rohan — ₹15L salary + ₹50k interest, heavy old-regime deductions
# ---------------------------------------------------------------------------
_ROHAN_REQUEST: dict[str, Any] = dict(
    financial_year="FY2025-26",
    income_records=[
        dict(type="salary", gross_amount=1_500_000, source_ref="Globex", document_ref="form16-2025.pdf"),
        dict(type="interest", gross_amount=50_000, source_ref="SBI savings", confirmed=True),
    ],
    deduction_claims=[
        dict(section_code="80C", claimed_amount=150_000),
        dict(section_code="80D", claimed_amount=25_000),
        dict(section_code="80CCD(1B)", claimed_amount=50_000),
        dict(section_code="24(b)", claimed_amount=200_000),
        dict(section_code="HRA", claimed_amount=100_000),
        dict(section_code="80E", claimed_amount=100_000),
    ],
)
# gross = 1550000
# OLD: itemized = 150000+25000+50000+200000+100000+100000 = 625000
#      taxable = 1550000 - 50000 - 625000 = 875000
#      slab: 12500 + 75000 (5-8.75L @20%) = 87500, cess 3500 → 91000
# NEW: only 80CCD2 allowed (none claimed) → taxable = 1550000 - 75000 = 1475000
#      slab: 20000 + 40000 + 41250 (12-14.75L @15%) = 101250, cess 4050 → 105300
_ROHAN_EXPECTED: dict[str, Any] = dict(
    new_taxable=1_475_000,
    new_total_tax=105_300,
    old_taxable=875_000,
    old_total_tax=91_000,
    cheaper="old",
    savings=14_300,
)

# ---------------------------------------------------------------------------
# Profile 3: Meera — ₹60L salary + ₹1L interest, surcharge band 10%
# ---------------------------------------------------------------------------
_MEERA_REQUEST: dict[str, Any] = dict(
    financial_year="2025-2026",
    income_records=[
        dict(type="salary", gross_amount=6_000_000, source_ref="Initech", document_ref="form16.pdf"),
        dict(type="interest", gross_amount=100_000, source_ref="HDFC FD", document_ref="26as.pdf"),
    ],
    deduction_claims=[],
)
# gross = 6100000
# NEW: taxable = 6025000
#      slab: 20000+40000+60000+80000+100000 + 1087500 (30% of 3625000) = 1387500
#      surcharge 10% = 138750 → 1526250, cess 61050 → 1587300
# OLD: taxable = 6050000
#      slab: 12500 + 100000 + 1515000 (30% of 5050000) = 1627500
#      surcharge 10% = 162750 → 1790250, cess 71610 → 1861860
_MEERA_EXPECTED: dict[str, Any] = dict(
    new_taxable=6_025_000,
    new_total_tax=1_587_300,
    old_taxable=6_050_000,
    old_total_tax=1_861_860,
    cheaper="new",
    savings=274_560,
)


DEMO_PROFILES: dict[str, dict[str, Any]] = {
    "asha": {"request": _ASHA_REQUEST, "expected": _ASHA_EXPECTED},
    "rohan": {"request": _ROHAN_REQUEST, "expected": _ROHAN_EXPECTED},
    "meera": {"request": _MEERA_REQUEST, "expected": _MEERA_EXPECTED},
}
