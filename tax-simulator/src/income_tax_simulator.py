"""
Income Tax Simulator — Old vs New Regime
Evaluates both regimes for one income figure and answers the questions the
regime-comparison screen asks:

  1. Which slab am I in under each regime?
  2. Which regime is cheaper, and by how much?
  3. Net income, effective rate, monthly take-home for the selected regime
  4. At what level of deductions does the old regime start to win?

New regime: ₹75,000 standard deduction, rebate up to ₹7L taxable.
Old regime: ₹50,000 standard deduction + user deductions, rebate up to ₹5L.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

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
    NEW_REGIME_MODIFIERS,
    NEW_REGIME_SLABS,
    OLD_REGIME_SLABS,
    old_regime_modifiers,
)

logger = logging.getLogger(__name__)

REGIMES = ("new", "old")
MAX_SWEEP_POINTS = 1000


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RegimeOutcome:
    regime: str
    result: TaxResult
    current_slab: TaxBracket


@dataclass(frozen=True)
class RegimeComparison:
    annual_income: Decimal
    deductions: Decimal
    selected_regime: str
    new: RegimeOutcome
    old: RegimeOutcome
    better_regime: str
    savings: Decimal           # |old - new|
    current_tax: Decimal
    net_income: Decimal
    effective_rate: Decimal    # % of annual income
    monthly_take_home: Decimal


@dataclass(frozen=True)
class DeductionSweepPoint:
    deduction: Decimal
    old_tax: Decimal
    new_tax: Decimal
    better_regime: str


# ---------------------------------------------------------------------------
# Core
# ---------------------------------------------------------------------------

def new_regime_tax(annual_income) -> TaxResult:
    return evaluate(annual_income, NEW_REGIME_SLABS, NEW_REGIME_MODIFIERS)


def old_regime_tax(annual_income, deductions=0) -> TaxResult:
    return evaluate(annual_income, OLD_REGIME_SLABS, old_regime_modifiers(deductions))


def _better(old_tax: Decimal, new_tax: Decimal) -> str:
    # Ties go to the new regime
    return "old" if old_tax < new_tax else "new"


def compare_regimes(annual_income, deductions=0, selected_regime: str = "new") -> RegimeComparison:
    """Evaluate both regimes and summarise for the selected one."""
    if selected_regime not in REGIMES:
        raise ValueError(f"regime must be 'new' or 'old', got {selected_regime!r}")

    income = max(ZERO, to_decimal(annual_income, "annual_income"))
    ded = to_decimal(deductions, "deductions")

    new_result = new_regime_tax(income)
    old_result = old_regime_tax(income, ded)
    new = RegimeOutcome("new", new_result, find_effective_bracket(new_result.taxable_income, NEW_REGIME_SLABS))
    old = RegimeOutcome("old", old_result, find_effective_bracket(old_result.taxable_income, OLD_REGIME_SLABS))

    current = new if selected_regime == "new" else old
    current_tax = current.result.total_tax
    net_income = income - current_tax

    logger.debug(
        "Regime comparison income=%s deductions=%s new=%s old=%s",
        income, ded, new_result.total_tax, old_result.total_tax,
    )

    return RegimeComparison(
        annual_income=income,
        deductions=ded,
        selected_regime=selected_regime,
        new=new,
        old=old,
        better_regime=_better(old_result.total_tax, new_result.total_tax),
        savings=abs(old_result.total_tax - new_result.total_tax),
        current_tax=current_tax,
        net_income=net_income,
        effective_rate=effective_rate_percent(current_tax, income),
        monthly_take_home=net_income / 12,
    )


def sweep_deductions(annual_income, start=0, stop=500_000, step=25_000) -> List[DeductionSweepPoint]:
    """Old vs new tax at each deduction level from start to stop inclusive."""
    lo = to_decimal(start, "start")
    hi = to_decimal(stop, "stop")
    inc = to_decimal(step, "step")
    if inc <= 0:
        raise ValueError(f"step must be > 0, got {inc}")
    if hi < lo:
        raise ValueError(f"stop ({hi}) must be >= start ({lo})")
    if (hi - lo) / inc >= MAX_SWEEP_POINTS:
        raise ValueError(f"sweep would exceed {MAX_SWEEP_POINTS} points; use a larger step")

    new_tax = new_regime_tax(annual_income).total_tax
    points: List[DeductionSweepPoint] = []
    deduction = lo
    while deduction <= hi:
        old_tax = old_regime_tax(annual_income, deduction).total_tax
        points.append(DeductionSweepPoint(deduction, old_tax, new_tax, _better(old_tax, new_tax)))
        deduction += inc
    return points


def find_crossover_deduction(annual_income, max_deduction=500_000) -> Optional[Decimal]:
    """
    Smallest whole-rupee deduction at which the old regime is strictly cheaper.

    Old regime tax never rises as deductions grow and new regime tax ignores
    them, so "old is cheaper" flips at most once and a binary search over
    [0, max_deduction] finds the exact rupee. Returns None if the old regime
    never wins within range.
    """
    new_tax = new_regime_tax(annual_income).total_tax
    hi = int(to_decimal(max_deduction, "max_deduction"))
    if hi < 0:
        raise ValueError(f"max_deduction must be >= 0, got {hi}")

    def old_wins(d: int) -> bool:
        return old_regime_tax(annual_income, d).total_tax < new_tax

    if not old_wins(hi):
        return None
    lo = 0
    while lo < hi:
        mid = (lo + hi) // 2
        if old_wins(mid):
            hi = mid
        else:
            lo = mid + 1
    return Decimal(lo)


# ---------------------------------------------------------------------------
# API wrappers
# ---------------------------------------------------------------------------

def _outcome_to_dict(o: RegimeOutcome) -> Dict:
    d = result_to_dict(o.result)
    d["regime"] = o.regime
    d["current_slab"] = bracket_to_dict(o.current_slab)
    return d


def comparison_to_dict(c: RegimeComparison) -> Dict:
    return {
        "annual_income": money(c.annual_income),
        "deductions": money(c.deductions),
        "selected_regime": c.selected_regime,
        "new": _outcome_to_dict(c.new),
        "old": _outcome_to_dict(c.old),
        "recommended": c.better_regime,
        "savings": money(c.savings),
        "current_tax": money(c.current_tax),
        "net_income": money(c.net_income),
        "effective_rate_pct": money(c.effective_rate),
        "monthly_take_home": money(c.monthly_take_home),
    }


def simulate_income_tax(params: dict) -> dict:
    """JSON wrapper for the /income-tax endpoint."""
    comparison = compare_regimes(
        annual_income   = params.get("annual_income", 0),
        deductions      = params.get("deductions", 0),
        selected_regime = params.get("regime", "new"),
    )
    return comparison_to_dict(comparison)


def deduction_crossover(params: dict) -> dict:
    """JSON wrapper for the /income-tax/crossover endpoint."""
    income = params.get("annual_income", 0)
    max_deduction = params.get("max_deduction", 500_000)
    crossover = find_crossover_deduction(income, max_deduction)
    points = sweep_deductions(
        income,
        start = params.get("start", 0),
        stop  = max_deduction,
        step  = params.get("step", 25_000),
    )
    return {
        "annual_income": money(to_decimal(income, "annual_income")),
        "crossover_deduction": None if crossover is None else money(crossover),
        "sweep": [
            {
                "deduction": money(p.deduction),
                "old_tax": money(p.old_tax),
                "new_tax": money(p.new_tax),
                "better_regime": p.better_regime,
            }
            for p in points
        ],
    }
