"""
Startup India — Section 80-IAC Tax Holiday
A DPIIT-recognised startup may claim 100% deduction of profits for any 3
consecutive years out of its first 10 years from incorporation.

The overlay sits on top of the slab evaluator: profit tax is computed on the
new regime slabs with 4% cess, then waived in full for a year the holiday can
be claimed. The waived amount is kept so the savings can be shown.

Each call is a pure function of its inputs. Multi-year projections re-run
the overlay once per simulated year with the counters advanced by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from slab_tax import (
    ZERO,
    TaxBracket,
    TaxResult,
    bracket_to_dict,
    effective_rate_percent,
    evaluate,
    find_effective_bracket,
    money,
    result_to_dict,
    to_decimal,
)
from tax_policies import (
    ELIGIBILITY_WINDOW_YEARS,
    STARTUP_PROFIT_MODIFIERS,
    STARTUP_PROFIT_SLABS,
    STARTUP_TURNOVER_LIMIT,
    TAX_HOLIDAY_YEARS,
)

logger = logging.getLogger(__name__)

PROJECTION_YEARS = 5
MAX_PROJECTION_YEARS = 25


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HolidayEligibility:
    years_since_incorporation: int
    holiday_years_used: int
    is_recognized: bool
    is_within_window: bool
    holiday_years_remaining: int
    can_claim_holiday: bool


@dataclass(frozen=True)
class HolidayOutcome:
    eligibility: HolidayEligibility
    evaluation: TaxResult       # un-waived slab result
    tax_payable: Decimal
    tax_waived: Decimal         # what would have been owed without 80-IAC


@dataclass(frozen=True)
class EligibilityCriterion:
    label: str
    met: bool
    detail: str


@dataclass
class StartupSimulation:
    annual_profit: Decimal
    outcome: HolidayOutcome
    status: str                 # not_recognized | turnover_exceeded | expired | exhausted | eligible
    status_description: str
    holiday_granted: bool
    tax_slab: TaxBracket
    normal_tax: Decimal
    net_profit: Decimal
    effective_tax_rate: Decimal
    total_potential_savings: Decimal
    remaining_savings: Decimal
    criteria: List[EligibilityCriterion] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectionYear:
    year: int                   # years since incorporation
    label: str
    holiday_claimed: bool
    profit_with_exemption: Decimal
    profit_without_exemption: Decimal
    savings: Decimal


# ---------------------------------------------------------------------------
# Overlay
# ---------------------------------------------------------------------------

def check_eligibility(
    years_since_incorporation: int,
    holiday_years_used: int,
    is_recognized: bool,
) -> HolidayEligibility:
    if years_since_incorporation < 1:
        raise ValueError(f"years_since_incorporation must be >= 1, got {years_since_incorporation}")
    if not 0 <= holiday_years_used <= TAX_HOLIDAY_YEARS:
        raise ValueError(
            f"holiday_years_used must be between 0 and {TAX_HOLIDAY_YEARS}, got {holiday_years_used}"
        )

    within_window = years_since_incorporation <= ELIGIBILITY_WINDOW_YEARS
    remaining = max(0, TAX_HOLIDAY_YEARS - holiday_years_used)
    return HolidayEligibility(
        years_since_incorporation=years_since_incorporation,
        holiday_years_used=holiday_years_used,
        is_recognized=is_recognized,
        is_within_window=within_window,
        holiday_years_remaining=remaining,
        can_claim_holiday=bool(is_recognized) and within_window and remaining > 0,
    )


def profit_tax(annual_profit) -> TaxResult:
    """Slab tax on startup profit, before any 80-IAC waiver."""
    return evaluate(annual_profit, STARTUP_PROFIT_SLABS, STARTUP_PROFIT_MODIFIERS)


def apply_holiday(
    evaluation: TaxResult,
    years_since_incorporation: int,
    holiday_years_used: int,
    is_recognized: bool,
) -> HolidayOutcome:
    eligibility = check_eligibility(years_since_incorporation, holiday_years_used, is_recognized)
    if eligibility.can_claim_holiday:
        return HolidayOutcome(eligibility, evaluation, ZERO, evaluation.total_tax)
    return HolidayOutcome(eligibility, evaluation, evaluation.total_tax, ZERO)


def _status(e: HolidayEligibility, turnover_ok: bool) -> tuple:
    if not e.is_recognized:
        return "not_recognized", "Get DPIIT recognition to claim Section 80-IAC benefits."
    if not turnover_ok:
        return "turnover_exceeded", "Turnover is ₹100 Cr or more; Section 80-IAC does not apply."
    if not e.is_within_window:
        return "expired", (
            f"Section 80-IAC is only available for startups within "
            f"{ELIGIBILITY_WINDOW_YEARS} years of incorporation."
        )
    if e.holiday_years_remaining == 0:
        return "exhausted", (
            f"You've used all {TAX_HOLIDAY_YEARS} years of tax holiday. Standard tax applies."
        )
    return "eligible", f"You can claim {e.holiday_years_remaining} more year(s) of tax exemption."


def _criteria(e: HolidayEligibility, turnover_ok: bool) -> List[EligibilityCriterion]:
    return [
        EligibilityCriterion("DPIIT Recognition", e.is_recognized,
                             "Recognized by Dept. for Promotion of Industry"),
        EligibilityCriterion(f"Within {ELIGIBILITY_WINDOW_YEARS} Years", e.is_within_window,
                             f"Currently year {e.years_since_incorporation} of {ELIGIBILITY_WINDOW_YEARS}"),
        EligibilityCriterion("Turnover < ₹100 Cr", turnover_ok,
                             "Annual turnover under ₹100 crore"),
        EligibilityCriterion("Holiday Years Left", e.holiday_years_remaining > 0,
                             f"{e.holiday_years_remaining} of {TAX_HOLIDAY_YEARS} years remaining"),
    ]


def simulate_startup(
    annual_profit,
    years_since_incorporation: int,
    holiday_years_used: int = 0,
    is_recognized: bool = True,
    annual_turnover=None,
) -> StartupSimulation:
    """
    Full single-year view for the Startup India screen.

    annual_turnover is optional; when given at or above ₹100 Cr the turnover
    criterion fails and the holiday is not granted.
    """
    profit = to_decimal(annual_profit, "annual_profit")
    turnover = None if annual_turnover is None else to_decimal(annual_turnover, "annual_turnover")
    turnover_ok = turnover is None or turnover < STARTUP_TURNOVER_LIMIT

    evaluation = profit_tax(profit)
    outcome = apply_holiday(evaluation, years_since_incorporation, holiday_years_used, is_recognized)
    granted = outcome.eligibility.can_claim_holiday and turnover_ok
    if outcome.eligibility.can_claim_holiday and not turnover_ok:
        logger.debug("Holiday withheld: turnover %s at or above %s", turnover, STARTUP_TURNOVER_LIMIT)
        outcome = HolidayOutcome(outcome.eligibility, evaluation, evaluation.total_tax, ZERO)

    status, description = _status(outcome.eligibility, turnover_ok)
    normal_tax = evaluation.total_tax
    taxable_profit = max(ZERO, profit)
    return StartupSimulation(
        annual_profit=profit,
        outcome=outcome,
        status=status,
        status_description=description,
        holiday_granted=granted,
        tax_slab=find_effective_bracket(taxable_profit, STARTUP_PROFIT_SLABS),
        normal_tax=normal_tax,
        net_profit=profit - outcome.tax_payable,
        effective_tax_rate=effective_rate_percent(outcome.tax_payable, profit),
        total_potential_savings=normal_tax * TAX_HOLIDAY_YEARS,
        remaining_savings=normal_tax * outcome.eligibility.holiday_years_remaining,
        criteria=_criteria(outcome.eligibility, turnover_ok),
    )


def project_holiday(
    annual_profit,
    years_since_incorporation: int,
    holiday_years_used: int = 0,
    is_recognized: bool = True,
    years: int = PROJECTION_YEARS,
) -> List[ProjectionYear]:
    """Year-by-year profit with and without 80-IAC at a constant profit."""
    if years < 1:
        raise ValueError(f"years must be >= 1, got {years}")
    if years > MAX_PROJECTION_YEARS:
        raise ValueError(f"years must be <= {MAX_PROJECTION_YEARS}, got {years}")

    profit = to_decimal(annual_profit, "annual_profit")
    evaluation = profit_tax(profit)
    used = holiday_years_used
    rows: List[ProjectionYear] = []
    for i in range(years):
        year = years_since_incorporation + i
        outcome = apply_holiday(evaluation, year, used, is_recognized)
        claimed = outcome.eligibility.can_claim_holiday
        if claimed:
            used += 1
        rows.append(ProjectionYear(
            year=year,
            label=f"Year {year}",
            holiday_claimed=claimed,
            profit_with_exemption=profit - outcome.tax_payable,
            profit_without_exemption=profit - evaluation.total_tax,
            savings=outcome.tax_waived,
        ))
    return rows


# ---------------------------------------------------------------------------
# API wrappers
# ---------------------------------------------------------------------------

def _parse_int(params: dict, key: str, default: int) -> int:
    value = params.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer, got {value!r}") from None


def _parse_bool(params: dict, key: str, default: bool) -> bool:
    value = params.get(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def simulation_to_dict(s: StartupSimulation) -> Dict:
    e = s.outcome.eligibility
    return {
        "annual_profit": money(s.annual_profit),
        "status": s.status,
        "status_description": s.status_description,
        "is_within_window": e.is_within_window,
        "can_claim_holiday": s.holiday_granted,
        "holiday_years_remaining": e.holiday_years_remaining,
        "tax_slab": bracket_to_dict(s.tax_slab),
        "normal_tax": money(s.normal_tax),
        "tax_payable": money(s.outcome.tax_payable),
        "tax_waived": money(s.outcome.tax_waived),
        "net_profit": money(s.net_profit),
        "effective_tax_rate_pct": money(s.effective_tax_rate),
        "total_potential_savings": money(s.total_potential_savings),
        "remaining_savings": money(s.remaining_savings),
        "criteria": [{"label": c.label, "met": c.met, "detail": c.detail} for c in s.criteria],
        "evaluation": result_to_dict(s.outcome.evaluation),
    }


def simulate_startup_holiday(params: dict) -> dict:
    """JSON wrapper for the /startup-holiday endpoint."""
    sim = simulate_startup(
        annual_profit             = params.get("annual_profit", 0),
        years_since_incorporation = _parse_int(params, "years_since_incorporation", 1),
        holiday_years_used        = _parse_int(params, "holiday_years_used", 0),
        is_recognized             = _parse_bool(params, "is_recognized", True),
        annual_turnover           = params.get("annual_turnover"),
    )
    return simulation_to_dict(sim)


def holiday_projection(params: dict) -> dict:
    """JSON wrapper for the /startup-holiday/projection endpoint."""
    rows = project_holiday(
        annual_profit             = params.get("annual_profit", 0),
        years_since_incorporation = _parse_int(params, "years_since_incorporation", 1),
        holiday_years_used        = _parse_int(params, "holiday_years_used", 0),
        is_recognized             = _parse_bool(params, "is_recognized", True),
        years                     = _parse_int(params, "years", PROJECTION_YEARS),
    )
    return {
        "projection": [
            {
                "year": r.year,
                "label": r.label,
                "holiday_claimed": r.holiday_claimed,
                "with_exemption": money(r.profit_with_exemption),
                "without_exemption": money(r.profit_without_exemption),
                "savings": money(r.savings),
            }
            for r in rows
        ],
        "total_savings": money(sum((r.savings for r in rows), ZERO)),
    }
