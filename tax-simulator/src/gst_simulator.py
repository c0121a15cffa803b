"""
GST Registration Simulator — India
Shows when GST registration becomes mandatory and what GST does to price,
cash flow and profit for a single product line.
Covers:
  • Registration threshold (₹40L aggregate turnover)
  • Per-unit price build-up (base + GST)
  • Annual output GST, assumed ITC and net GST payable
  • Monthly cash-flow impact of net GST
  • Profit and margin before vs after the GST cash cost

ITC is not computed from purchase records: a fixed share of output GST (and
of unit cost) is assumed to carry claimable input GST.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal

from slab_tax import HUNDRED, ZERO, money, to_decimal
from tax_policies import (
    GST_ASSUMED_ITC_SHARE,
    GST_CASH_OPPORTUNITY_COST,
    GST_REGISTRATION_THRESHOLD,
    GST_TAXABLE_INPUT_SHARE,
)

STANDARD_GST_RATES = (Decimal("0"), Decimal("5"), Decimal("12"), Decimal("18"), Decimal("28"))
MIN_BASE_PRICE = Decimal("0.01")   # one paisa


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class GSTImpact:
    annual_turnover:            Decimal
    base_price:                 Decimal
    gst_rate:                   Decimal
    profit_margin:              Decimal
    registration_mandatory:     bool
    threshold_distance:         Decimal   # +ve = headroom below ₹40L
    # per unit
    gst_amount:                 Decimal
    final_price:                Decimal
    cost_price:                 Decimal
    input_gst_per_unit:         Decimal
    net_gst_per_unit:           Decimal
    profit_before_gst:          Decimal
    profit_after_gst:           Decimal
    # annual
    annual_gst_liability:       Decimal
    estimated_input_credit:     Decimal
    net_gst_payable:            Decimal
    monthly_cash_flow_impact:   Decimal   # -ve = outflow
    annual_units:               Decimal
    annual_profit_before_gst:   Decimal
    annual_profit_after_gst:    Decimal
    # margins (%)
    margin_before_gst:          Decimal
    margin_after_gst:           Decimal
    margin_compression:         Decimal


# ---------------------------------------------------------------------------
# Simulator
# ---------------------------------------------------------------------------

def _percent(value, name: str) -> Decimal:
    pct = to_decimal(value, name)
    if not ZERO <= pct <= HUNDRED:
        raise ValueError(f"{name} must be between 0 and 100, got {pct}")
    return pct


def is_registration_mandatory(annual_turnover) -> bool:
    return to_decimal(annual_turnover, "annual_turnover") >= GST_REGISTRATION_THRESHOLD


def simulate_gst(
    annual_turnover,
    base_price,
    gst_rate=18,
    profit_margin=20,
) -> GSTImpact:
    turnover = max(ZERO, to_decimal(annual_turnover, "annual_turnover"))
    price    = to_decimal(base_price, "base_price")
    rate     = _percent(gst_rate, "gst_rate")
    margin   = _percent(profit_margin, "profit_margin")
    if price < MIN_BASE_PRICE:
        raise ValueError(f"base_price must be at least {MIN_BASE_PRICE}, got {price}")

    gst_amount  = price * rate / HUNDRED
    profit_unit = price * margin / HUNDRED

    annual_liability = turnover * rate / HUNDRED
    input_credit     = annual_liability * GST_ASSUMED_ITC_SHARE
    net_payable      = annual_liability - input_credit

    cost_price       = price * (1 - margin / HUNDRED)
    input_gst        = cost_price * GST_TAXABLE_INPUT_SHARE * rate / HUNDRED
    net_gst_unit     = gst_amount - input_gst
    profit_after     = profit_unit - net_gst_unit * GST_CASH_OPPORTUNITY_COST

    units            = turnover / price
    margin_after     = profit_after / price * HUNDRED

    return GSTImpact(
        annual_turnover          = turnover,
        base_price               = price,
        gst_rate                 = rate,
        profit_margin            = margin,
        registration_mandatory   = turnover >= GST_REGISTRATION_THRESHOLD,
        threshold_distance       = GST_REGISTRATION_THRESHOLD - turnover,
        gst_amount               = gst_amount,
        final_price              = price + gst_amount,
        cost_price               = cost_price,
        input_gst_per_unit       = input_gst,
        net_gst_per_unit         = net_gst_unit,
        profit_before_gst        = profit_unit,
        profit_after_gst         = profit_after,
        annual_gst_liability     = annual_liability,
        estimated_input_credit   = input_credit,
        net_gst_payable          = net_payable,
        monthly_cash_flow_impact = -net_payable / 12,
        annual_units             = units,
        annual_profit_before_gst = profit_unit * units,
        annual_profit_after_gst  = profit_after * units,
        margin_before_gst        = margin,
        margin_after_gst         = margin_after,
        margin_compression       = margin - margin_after,
    )


# ---------------------------------------------------------------------------
# Convenience wrapper
# ---------------------------------------------------------------------------

def simulate_gst_registration(params: dict) -> dict:
    """JSON wrapper for the /gst endpoint."""
    impact = simulate_gst(
        annual_turnover = params.get("annual_turnover", 0),
        base_price      = params.get("base_price", 10_000),
        gst_rate        = params.get("gst_rate", 18),
        profit_margin   = params.get("profit_margin", 20),
    )
    result = {}
    for key, value in asdict(impact).items():
        result[key] = money(value) if isinstance(value, Decimal) else value
    result["status"] = "mandatory" if impact.registration_mandatory else "optional"
    result["is_standard_rate"] = impact.gst_rate in STANDARD_GST_RATES
    return result
