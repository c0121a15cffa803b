"""
Slab Tax Evaluator
Progressive (slab) tax over an ordered bracket table, with the policy
modifiers used by Indian income tax:

  - Standard deduction, subtracted before any bracket is evaluated
  - Health & Education Cess, a flat % of the base slab tax
  - Rebate u/s 87A, modelled as a full waiver at or below a taxable ceiling

All amounts are Decimal. Nothing is rounded here; callers round for display.

Usage:
    table  = SlabTable([TaxBracket(0, 300_000, 0), TaxBracket(300_000, None, 5)])
    mods   = PolicyModifiers(standard_deduction=75_000, cess_rate_percent=4)
    result = evaluate(1_200_000, table, mods)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
INFINITY = Decimal("Infinity")
LAKH = Decimal("100000")
# ₹1,000 lakh crore. Every derived figure then fits in the default 28-digit context.
MAX_AMOUNT = Decimal("1E+15")


class SlabConfigurationError(ValueError):
    """A bracket table that is not a contiguous partition of [0, ∞)."""


def to_decimal(value, name: str = "amount") -> Decimal:
    """Coerce ints, floats and numeric strings to Decimal via their text form."""
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool) or value is None:
        raise ValueError(f"{name} must be a number, got {value!r}")
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"{name} must be a number, got {value!r}")
    if abs(result) > MAX_AMOUNT:
        raise ValueError(f"{name} must not exceed {MAX_AMOUNT:,f} in magnitude, got {value!r}")
    return result


def _lakh_label(amount: Decimal) -> str:
    lakhs = (amount / LAKH).normalize()
    return f"₹{lakhs:f}L" if amount else "₹0"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TaxBracket:
    lower_bound: Decimal
    upper_bound: Optional[Decimal]  # None means no upper bound
    rate_percent: Decimal           # e.g. 5 for 5%
    label: str = ""

    def __post_init__(self):
        object.__setattr__(self, "lower_bound", to_decimal(self.lower_bound, "lower_bound"))
        if self.upper_bound is not None:
            object.__setattr__(self, "upper_bound", to_decimal(self.upper_bound, "upper_bound"))
        object.__setattr__(self, "rate_percent", to_decimal(self.rate_percent, "rate_percent"))
        if not self.label:
            object.__setattr__(self, "label", self._default_label())

    @property
    def ceiling(self) -> Decimal:
        return INFINITY if self.upper_bound is None else self.upper_bound

    @property
    def is_unbounded(self) -> bool:
        return self.upper_bound is None

    def _default_label(self) -> str:
        if self.upper_bound is None:
            return f"Above {_lakh_label(self.lower_bound)}"
        return f"{_lakh_label(self.lower_bound)} - {_lakh_label(self.upper_bound)}"


@dataclass(frozen=True)
class PolicyModifiers:
    standard_deduction: Decimal = ZERO
    rebate_threshold: Optional[Decimal] = None   # taxable income at or below → no tax
    cess_rate_percent: Decimal = ZERO

    def __post_init__(self):
        deduction = to_decimal(self.standard_deduction, "standard_deduction")
        cess = to_decimal(self.cess_rate_percent, "cess_rate_percent")
        if deduction < 0:
            raise ValueError(f"standard_deduction must be >= 0, got {deduction}")
        if cess < 0:
            raise ValueError(f"cess_rate_percent must be >= 0, got {cess}")
        object.__setattr__(self, "standard_deduction", deduction)
        object.__setattr__(self, "cess_rate_percent", cess)
        if self.rebate_threshold is not None:
            object.__setattr__(
                self, "rebate_threshold", to_decimal(self.rebate_threshold, "rebate_threshold")
            )


@dataclass(frozen=True)
class BracketShare:
    """One row of the slab-wise breakdown."""
    bracket_label: str
    taxable_amount_in_bracket: Decimal
    tax_in_bracket: Decimal
    rate: Decimal


@dataclass(frozen=True)
class TaxResult:
    taxable_income: Decimal
    base_tax: Decimal
    cess_amount: Decimal
    total_tax: Decimal
    tax_before_rebate: Decimal       # base + cess, had no rebate applied
    rebate_applied: bool
    breakdown: Tuple[BracketShare, ...] = field(default_factory=tuple)

    @property
    def rebate_amount(self) -> Decimal:
        return self.tax_before_rebate - self.total_tax


# ---------------------------------------------------------------------------
# Bracket table
# ---------------------------------------------------------------------------

class SlabTable:
    """
    Immutable, validated bracket table.

    The brackets must partition [0, ∞): ascending, each upper bound equal to
    the next lower bound, the first starting at 0 and only the last one
    unbounded. Violations raise SlabConfigurationError here, once, so that
    evaluate() never has to re-check a table.
    """

    def __init__(self, brackets: Iterable[TaxBracket]):
        self._brackets: Tuple[TaxBracket, ...] = tuple(brackets)
        self._validate()

    def _validate(self) -> None:
        brackets = self._brackets
        if not brackets:
            raise SlabConfigurationError("Bracket table is empty")
        if brackets[0].lower_bound != ZERO:
            raise SlabConfigurationError(
                f"First bracket must start at 0, starts at {brackets[0].lower_bound}"
            )
        for i, b in enumerate(brackets):
            if b.rate_percent < 0:
                raise SlabConfigurationError(f"Bracket {i} has negative rate {b.rate_percent}")
            is_last = i == len(brackets) - 1
            if b.is_unbounded:
                if not is_last:
                    raise SlabConfigurationError(f"Only the last bracket may be unbounded (bracket {i})")
                continue
            if is_last:
                raise SlabConfigurationError("Last bracket must be unbounded")
            if b.upper_bound < b.lower_bound:
                raise SlabConfigurationError(
                    f"Bracket {i} upper bound {b.upper_bound} is below lower bound {b.lower_bound}"
                )
            nxt = brackets[i + 1]
            if nxt.lower_bound > b.upper_bound:
                raise SlabConfigurationError(
                    f"Gap between bracket {i} (ends {b.upper_bound}) and {i + 1} (starts {nxt.lower_bound})"
                )
            if nxt.lower_bound < b.upper_bound:
                raise SlabConfigurationError(
                    f"Bracket {i + 1} (starts {nxt.lower_bound}) overlaps bracket {i} (ends {b.upper_bound})"
                )

    @property
    def brackets(self) -> Tuple[TaxBracket, ...]:
        return self._brackets

    def __iter__(self):
        return iter(self._brackets)

    def __len__(self) -> int:
        return len(self._brackets)

    def __getitem__(self, index: int) -> TaxBracket:
        return self._brackets[index]

    def __repr__(self) -> str:
        return f"SlabTable({list(self._brackets)!r})"


# ---------------------------------------------------------------------------
# Core computation
# ---------------------------------------------------------------------------

def _slab_shares(
    taxable_income: Decimal,
    table: SlabTable,
    include_zero_rate: bool,
) -> Tuple[Decimal, List[BracketShare]]:
    base_tax = ZERO
    shares: List[BracketShare] = []
    for b in table:
        overlap = max(ZERO, min(taxable_income, b.ceiling) - b.lower_bound)
        if overlap <= 0:
            continue
        slab_tax = overlap * b.rate_percent / HUNDRED
        base_tax += slab_tax
        if b.rate_percent == 0 and not include_zero_rate:
            continue
        shares.append(BracketShare(
            bracket_label=b.label,
            taxable_amount_in_bracket=overlap,
            tax_in_bracket=slab_tax,
            rate=b.rate_percent,
        ))
    return base_tax, shares


def evaluate(
    gross_amount,
    table: SlabTable,
    modifiers: Optional[PolicyModifiers] = None,
    include_zero_rate: bool = True,
    strict: bool = False,
) -> TaxResult:
    """
    Compute slab tax on gross_amount.

    Args:
        gross_amount:      income or profit before deductions. Negative values
                           are treated as 0 unless strict=True.
        table:             validated SlabTable.
        modifiers:         deduction / rebate / cess; defaults to none of them.
        include_zero_rate: keep 0% brackets that hold income in the breakdown.
        strict:            raise ValueError on negative gross_amount.

    The rebate is an all-or-nothing override applied after the un-rebated tax
    is known, so tax_before_rebate always reports what would have been owed.
    """
    mods = modifiers or PolicyModifiers()
    gross = to_decimal(gross_amount, "gross_amount")
    if gross < 0:
        if strict:
            raise ValueError(f"gross_amount must be >= 0, got {gross}")
        logger.debug("Negative gross amount %s clamped to 0", gross)
        gross = ZERO

    taxable = max(ZERO, gross - mods.standard_deduction)
    base_tax, shares = _slab_shares(taxable, table, include_zero_rate)
    cess = base_tax * mods.cess_rate_percent / HUNDRED
    total = base_tax + cess

    rebate_applied = mods.rebate_threshold is not None and taxable <= mods.rebate_threshold
    if rebate_applied:
        return TaxResult(
            taxable_income=taxable,
            base_tax=base_tax,
            cess_amount=ZERO,
            total_tax=ZERO,
            tax_before_rebate=total,
            rebate_applied=True,
            breakdown=(),
        )

    return TaxResult(
        taxable_income=taxable,
        base_tax=base_tax,
        cess_amount=cess,
        total_tax=total,
        tax_before_rebate=total,
        rebate_applied=False,
        breakdown=tuple(shares),
    )


def find_effective_bracket(taxable_income, table: SlabTable) -> TaxBracket:
    """Bracket that the next rupee earned falls in (labelling only)."""
    income = to_decimal(taxable_income, "taxable_income")
    for b in reversed(table.brackets):
        if income > b.lower_bound:
            return b
    return table[0]


def effective_rate_percent(tax: Decimal, amount: Decimal) -> Decimal:
    """Tax as a % of amount; 0 for a non-positive amount."""
    if amount <= 0:
        return ZERO
    return tax / amount * HUNDRED


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------

def money(value: Decimal, places: int = 2) -> float:
    """Round a Decimal for a JSON response. Only used at the API boundary."""
    return float(round(value, places))


def bracket_to_dict(b: TaxBracket) -> dict:
    return {
        "label": b.label,
        "lower_bound": money(b.lower_bound),
        "upper_bound": None if b.upper_bound is None else money(b.upper_bound),
        "rate_pct": money(b.rate_percent),
    }


def result_to_dict(r: TaxResult) -> dict:
    return {
        "taxable_income": money(r.taxable_income),
        "base_tax": money(r.base_tax),
        "cess": money(r.cess_amount),
        "total_tax": money(r.total_tax),
        "tax_before_rebate": money(r.tax_before_rebate),
        "rebate_applied": r.rebate_applied,
        "rebate_amount": money(r.rebate_amount),
        "slab_breakdown": [
            {
                "slab": s.bracket_label,
                "taxable_amount": money(s.taxable_amount_in_bracket),
                "rate_pct": money(s.rate),
                "tax": money(s.tax_in_bracket),
            }
            for s in r.breakdown
        ],
    }
