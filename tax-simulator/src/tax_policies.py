"""
Tax Policy Tables — FY 2024-25
Single canonical source for every rate, threshold and assumption the
simulators use. Tables are validated at import; a malformed table stops the
service from starting.

  - Income tax: new regime, old regime, startup profit (80-IAC baseline)
  - GST registration threshold and simplified ITC assumptions
  - Composition scheme limit, rates and compliance costs
  - Section 80-IAC tax holiday window
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

from slab_tax import PolicyModifiers, SlabTable, TaxBracket, bracket_to_dict, money, to_decimal

POLICY_VERSION = "FY2024-25"

# ---------------------------------------------------------------------------
# Income tax slabs (rates in %)
# ---------------------------------------------------------------------------

NEW_REGIME_SLABS = SlabTable([
    TaxBracket(0,          3_00_000,  0, "₹0 - ₹3L"),
    TaxBracket(3_00_000,   6_00_000,  5, "₹3L - ₹6L"),
    TaxBracket(6_00_000,   9_00_000, 10, "₹6L - ₹9L"),
    TaxBracket(9_00_000,  12_00_000, 15, "₹9L - ₹12L"),
    TaxBracket(12_00_000, 15_00_000, 20, "₹12L - ₹15L"),
    TaxBracket(15_00_000,      None, 30, "Above ₹15L"),
])

OLD_REGIME_SLABS = SlabTable([
    TaxBracket(0,          2_50_000,  0, "₹0 - ₹2.5L"),
    TaxBracket(2_50_000,   5_00_000,  5, "₹2.5L - ₹5L"),
    TaxBracket(5_00_000,  10_00_000, 20, "₹5L - ₹10L"),
    TaxBracket(10_00_000,      None, 30, "Above ₹10L"),
])

# Startup profits are taxed as business income on the new regime slabs
STARTUP_PROFIT_SLABS = SlabTable(NEW_REGIME_SLABS.brackets)

CESS_RATE_PERCENT = Decimal("4")                 # Health & Education Cess
STD_DEDUCTION_NEW_REGIME = Decimal("75000")
STD_DEDUCTION_OLD_REGIME = Decimal("50000")
REBATE_CEILING_NEW_REGIME = Decimal("700000")    # 87A, on taxable income
REBATE_CEILING_OLD_REGIME = Decimal("500000")

NEW_REGIME_MODIFIERS = PolicyModifiers(
    standard_deduction=STD_DEDUCTION_NEW_REGIME,
    rebate_threshold=REBATE_CEILING_NEW_REGIME,
    cess_rate_percent=CESS_RATE_PERCENT,
)

STARTUP_PROFIT_MODIFIERS = PolicyModifiers(cess_rate_percent=CESS_RATE_PERCENT)


def old_regime_modifiers(user_deductions=0) -> PolicyModifiers:
    """Old regime: ₹50,000 standard deduction plus the user's Chapter VI-A claims."""
    extra = to_decimal(user_deductions, "deductions")
    if extra < 0:
        raise ValueError(f"deductions must be >= 0, got {extra}")
    return PolicyModifiers(
        standard_deduction=STD_DEDUCTION_OLD_REGIME + extra,
        rebate_threshold=REBATE_CEILING_OLD_REGIME,
        cess_rate_percent=CESS_RATE_PERCENT,
    )


OLD_REGIME_MODIFIERS = old_regime_modifiers(0)

# ---------------------------------------------------------------------------
# GST registration
# ---------------------------------------------------------------------------

GST_REGISTRATION_THRESHOLD = Decimal("4000000")   # ₹40L, goods and services
GST_ASSUMED_ITC_SHARE = Decimal("0.60")           # ITC as a share of output GST
GST_TAXABLE_INPUT_SHARE = Decimal("0.60")         # share of unit cost bought with GST
GST_CASH_OPPORTUNITY_COST = Decimal("0.10")       # cost of net GST cash tied up

# ---------------------------------------------------------------------------
# Composition scheme
# ---------------------------------------------------------------------------

COMPOSITION_TURNOVER_LIMIT = Decimal("15000000")  # ₹1.5 Cr
COMPOSITION_RATES: Dict[str, Decimal] = {
    "manufacturer": Decimal("1"),
    "trader":       Decimal("1"),
    "restaurant":   Decimal("5"),
}
REGULAR_GST_RATE_PERCENT = Decimal("18")
REGULAR_COMPLIANCE_COST = Decimal("48000")        # monthly returns, detailed books
COMPOSITION_COMPLIANCE_COST = Decimal("12000")    # quarterly returns

# ---------------------------------------------------------------------------
# Startup India — Section 80-IAC
# ---------------------------------------------------------------------------

TAX_HOLIDAY_YEARS = 3
ELIGIBILITY_WINDOW_YEARS = 10
STARTUP_TURNOVER_LIMIT = Decimal("1000000000")    # ₹100 Cr


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaxPolicy:
    key: str
    name: str
    version: str
    table: SlabTable
    modifiers: PolicyModifiers


POLICIES: Dict[str, TaxPolicy] = {
    "new_regime": TaxPolicy("new_regime", "New Tax Regime", POLICY_VERSION,
                            NEW_REGIME_SLABS, NEW_REGIME_MODIFIERS),
    "old_regime": TaxPolicy("old_regime", "Old Tax Regime", POLICY_VERSION,
                            OLD_REGIME_SLABS, OLD_REGIME_MODIFIERS),
    "startup_profit": TaxPolicy("startup_profit", "Startup Profit (80-IAC baseline)", POLICY_VERSION,
                                STARTUP_PROFIT_SLABS, STARTUP_PROFIT_MODIFIERS),
}


def get_policy(key: str) -> TaxPolicy:
    try:
        return POLICIES[key]
    except KeyError:
        raise KeyError(f"Unknown tax policy: {key}") from None


def policy_catalogue() -> List[Dict]:
    """JSON view of every policy table for the /policies endpoint."""
    catalogue = []
    for p in POLICIES.values():
        rebate = p.modifiers.rebate_threshold
        catalogue.append({
            "key": p.key,
            "name": p.name,
            "version": p.version,
            "standard_deduction": money(p.modifiers.standard_deduction),
            "rebate_threshold": None if rebate is None else money(rebate),
            "cess_rate_pct": money(p.modifiers.cess_rate_percent),
            "slabs": [bracket_to_dict(b) for b in p.table],
        })
    return catalogue
