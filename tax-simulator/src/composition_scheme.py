"""
GST Composition Scheme Simulator
Compares the Composition Scheme (flat % of turnover, no ITC, quarterly
returns) against regular GST at 18% with ITC on purchases.

Eligibility (simplified):
  - Below ₹40L turnover GST registration is optional
  - Up to ₹1.5 Cr turnover the composition scheme may be chosen
  - Above ₹1.5 Cr regular GST is mandatory

Rates: manufacturer 1%, trader 1%, restaurant 5% of turnover.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal

from slab_tax import HUNDRED, ZERO, money, to_decimal
from tax_policies import (
    COMPOSITION_COMPLIANCE_COST,
    COMPOSITION_RATES,
    COMPOSITION_TURNOVER_LIMIT,
    GST_REGISTRATION_THRESHOLD,
    REGULAR_COMPLIANCE_COST,
    REGULAR_GST_RATE_PERCENT,
)


@dataclass
class CompositionComparison:
    annual_turnover:             Decimal
    business_type:               str
    purchases_percent:           Decimal
    status:                      str      # below_threshold | eligible | ineligible
    is_eligible:                 bool
    is_gst_required:             bool
    composition_rate:            Decimal
    regular_gst_on_sales:        Decimal
    input_tax_credit:            Decimal
    net_regular_gst:             Decimal
    composition_tax:             Decimal
    lost_itc:                    Decimal
    composition_benefit:         Decimal  # +ve = composition is cheaper
    composition_cheaper:         bool
    regular_compliance_cost:     Decimal
    composition_compliance_cost: Decimal
    total_regular_cost:          Decimal
    total_composition_cost:      Decimal


def composition_status(annual_turnover) -> str:
    turnover = to_decimal(annual_turnover, "annual_turnover")
    if turnover < GST_REGISTRATION_THRESHOLD:
        return "below_threshold"
    if turnover <= COMPOSITION_TURNOVER_LIMIT:
        return "eligible"
    return "ineligible"


def compare_composition(
    annual_turnover,
    business_type: str = "trader",
    purchases_percent=50,
) -> CompositionComparison:
    if business_type not in COMPOSITION_RATES:
        raise ValueError(
            f"business_type must be one of {sorted(COMPOSITION_RATES)}, got {business_type!r}"
        )
    turnover  = max(ZERO, to_decimal(annual_turnover, "annual_turnover"))
    purchases = to_decimal(purchases_percent, "purchases_percent")
    if not ZERO <= purchases <= HUNDRED:
        raise ValueError(f"purchases_percent must be between 0 and 100, got {purchases}")

    comp_rate = COMPOSITION_RATES[business_type]

    regular_output = turnover * REGULAR_GST_RATE_PERCENT / HUNDRED
    purchase_value = turnover * purchases / HUNDRED
    itc            = purchase_value * REGULAR_GST_RATE_PERCENT / HUNDRED
    net_regular    = regular_output - itc
    comp_tax       = turnover * comp_rate / HUNDRED

    return CompositionComparison(
        annual_turnover             = turnover,
        business_type               = business_type,
        purchases_percent           = purchases,
        status                      = composition_status(turnover),
        is_eligible                 = turnover <= COMPOSITION_TURNOVER_LIMIT,
        is_gst_required             = turnover >= GST_REGISTRATION_THRESHOLD,
        composition_rate            = comp_rate,
        regular_gst_on_sales        = regular_output,
        input_tax_credit            = itc,
        net_regular_gst             = net_regular,
        composition_tax             = comp_tax,
        lost_itc                    = itc,
        composition_benefit         = net_regular - comp_tax,
        composition_cheaper         = comp_tax < net_regular,
        regular_compliance_cost     = REGULAR_COMPLIANCE_COST,
        composition_compliance_cost = COMPOSITION_COMPLIANCE_COST,
        total_regular_cost          = net_regular + REGULAR_COMPLIANCE_COST,
        total_composition_cost      = comp_tax + COMPOSITION_COMPLIANCE_COST,
    )


def simulate_composition(params: dict) -> dict:
    """JSON wrapper for the /composition endpoint."""
    comparison = compare_composition(
        annual_turnover   = params.get("annual_turnover", 0),
        business_type     = params.get("business_type", "trader"),
        purchases_percent = params.get("purchases_percent", 50),
    )
    return {
        key: money(value) if isinstance(value, Decimal) else value
        for key, value in asdict(comparison).items()
    }
