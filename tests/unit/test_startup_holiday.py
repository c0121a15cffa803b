"""Section 80-IAC tax holiday overlay."""

from decimal import Decimal

import pytest

from startup_holiday import (
    MAX_PROJECTION_YEARS,
    apply_holiday,
    check_eligibility,
    holiday_projection,
    profit_tax,
    project_holiday,
    simulate_startup,
    simulate_startup_holiday,
)

FIFTY_LAKH_TAX = Decimal("1248000")   # 12,00,000 slab tax + 4% cess


class TestEligibility:

    def test_recognized_early_startup_can_claim(self):
        e = check_eligibility(2, 0, True)
        assert e.is_within_window
        assert e.holiday_years_remaining == 3
        assert e.can_claim_holiday

    def test_holiday_used_up(self):
        e = check_eligibility(2, 3, True)
        assert e.holiday_years_remaining == 0
        assert not e.can_claim_holiday

    def test_window_is_inclusive(self):
        assert check_eligibility(10, 0, True).can_claim_holiday
        assert not check_eligibility(11, 0, True).can_claim_holiday

    def test_not_recognized(self):
        assert not check_eligibility(2, 0, False).can_claim_holiday

    @pytest.mark.parametrize("years,used", [(0, 0), (2, -1), (2, 4)])
    def test_invalid_inputs(self, years, used):
        with pytest.raises(ValueError):
            check_eligibility(years, used, True)


class TestOverlay:

    def test_profit_tax(self):
        result = profit_tax(5_000_000)
        assert result.base_tax == Decimal("1200000")
        assert result.total_tax == FIFTY_LAKH_TAX

    def test_waived_when_claimable(self):
        outcome = apply_holiday(profit_tax(5_000_000), 2, 0, True)
        assert outcome.tax_payable == Decimal("0")
        assert outcome.tax_waived == FIFTY_LAKH_TAX

    def test_unmodified_when_not_claimable(self):
        evaluation = profit_tax(5_000_000)
        outcome = apply_holiday(evaluation, 2, 3, True)
        assert outcome.tax_payable == evaluation.total_tax
        assert outcome.tax_waived == Decimal("0")

    def test_zero_regardless_of_profit(self):
        for profit in (400_000, 20_000_000, 750_000_000):
            assert apply_holiday(profit_tax(profit), 2, 0, True).tax_payable == Decimal("0")


class TestSimulateStartup:

    def test_eligible(self):
        sim = simulate_startup(5_000_000, 2, 0, True)
        assert sim.status == "eligible"
        assert sim.holiday_granted
        assert sim.net_profit == Decimal("5000000")
        assert sim.effective_tax_rate == Decimal("0")
        assert sim.normal_tax == FIFTY_LAKH_TAX
        assert sim.total_potential_savings == FIFTY_LAKH_TAX * 3
        assert sim.remaining_savings == FIFTY_LAKH_TAX * 3
        assert sim.tax_slab.rate_percent == Decimal("30")

    def test_status_order(self):
        assert simulate_startup(5_000_000, 12, 3, False).status == "not_recognized"
        assert simulate_startup(5_000_000, 12, 3, True).status == "expired"
        assert simulate_startup(5_000_000, 4, 3, True).status == "exhausted"

    def test_exhausted_pays_full_tax(self):
        sim = simulate_startup(5_000_000, 4, 3, True)
        assert sim.outcome.tax_payable == FIFTY_LAKH_TAX
        assert sim.net_profit == Decimal("5000000") - FIFTY_LAKH_TAX
        assert sim.remaining_savings == Decimal("0")

    def test_turnover_over_limit(self):
        sim = simulate_startup(5_000_000, 2, 0, True, annual_turnover=1_000_000_000)
        assert sim.status == "turnover_exceeded"
        assert not sim.holiday_granted
        assert sim.outcome.tax_payable == FIFTY_LAKH_TAX
        turnover = next(c for c in sim.criteria if c.label.startswith("Turnover"))
        assert not turnover.met

    def test_turnover_under_limit(self):
        sim = simulate_startup(5_000_000, 2, 1, True, annual_turnover=999_999_999)
        assert sim.holiday_granted
        assert sim.remaining_savings == FIFTY_LAKH_TAX * 2
        assert all(c.met for c in sim.criteria)


class TestProjection:

    def test_three_holiday_years_then_tax(self):
        rows = project_holiday(5_000_000, 2, 0, True)
        assert [r.year for r in rows] == [2, 3, 4, 5, 6]
        assert [r.holiday_claimed for r in rows] == [True, True, True, False, False]
        assert rows[0].profit_with_exemption == Decimal("5000000")
        assert rows[3].profit_with_exemption == Decimal("3752000")
        assert all(r.profit_without_exemption == Decimal("3752000") for r in rows)
        assert rows[0].label == "Year 2"

    def test_window_closes_mid_projection(self):
        rows = project_holiday(5_000_000, 9, 0, True)
        assert [r.holiday_claimed for r in rows] == [True, True, False, False, False]

    def test_counter_starts_from_used_years(self):
        rows = project_holiday(5_000_000, 2, 2, True)
        assert sum(r.holiday_claimed for r in rows) == 1

    def test_not_recognized_never_claims(self):
        rows = project_holiday(5_000_000, 1, 0, False)
        assert not any(r.holiday_claimed for r in rows)
        assert all(r.savings == 0 for r in rows)

    def test_bad_years(self):
        with pytest.raises(ValueError):
            project_holiday(5_000_000, 2, 0, True, years=0)

    def test_projection_length_capped(self):
        assert len(project_holiday(5_000_000, 1, 0, True, years=MAX_PROJECTION_YEARS)) == MAX_PROJECTION_YEARS
        with pytest.raises(ValueError, match="years must be <="):
            project_holiday(5_000_000, 1, 0, True, years=MAX_PROJECTION_YEARS + 1)


class TestWrappers:

    def test_simulate_startup_holiday(self):
        out = simulate_startup_holiday({
            "annual_profit": 5_000_000,
            "years_since_incorporation": 2,
            "holiday_years_used": 0,
            "is_recognized": "true",
        })
        assert out["status"] == "eligible"
        assert out["can_claim_holiday"] is True
        assert out["tax_payable"] == 0.0
        assert out["tax_waived"] == 1248000.0
        assert out["evaluation"]["total_tax"] == 1248000.0
        assert len(out["criteria"]) == 4

    def test_bad_integer(self):
        with pytest.raises(ValueError):
            simulate_startup_holiday({"years_since_incorporation": "two"})

    def test_holiday_projection(self):
        out = holiday_projection({"annual_profit": 5_000_000, "years_since_incorporation": 2})
        assert len(out["projection"]) == 5
        assert out["total_savings"] == 3744000.0
