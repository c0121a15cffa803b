"""GST registration simulator."""

from decimal import Decimal

import pytest

from gst_simulator import is_registration_mandatory, simulate_gst, simulate_gst_registration


class TestRegistrationThreshold:

    def test_threshold_inclusive(self):
        assert not is_registration_mandatory(3_999_999)
        assert is_registration_mandatory(4_000_000)

    def test_distance_to_threshold(self):
        assert simulate_gst(3_000_000, 10_000).threshold_distance == Decimal("1000000")


class TestSimulateGST:

    def setup_method(self):
        self.impact = simulate_gst(3_000_000, 10_000, 18, 20)

    def test_price_build_up(self):
        assert self.impact.gst_amount == Decimal("1800")
        assert self.impact.final_price == Decimal("11800")

    def test_annual_liability_and_itc(self):
        assert self.impact.annual_gst_liability == Decimal("540000")
        assert self.impact.estimated_input_credit == Decimal("324000")
        assert self.impact.net_gst_payable == Decimal("216000")
        assert self.impact.monthly_cash_flow_impact == Decimal("-18000")

    def test_profit_impact(self):
        assert self.impact.cost_price == Decimal("8000")
        assert self.impact.input_gst_per_unit == Decimal("864")
        assert self.impact.net_gst_per_unit == Decimal("936")
        assert self.impact.profit_after_gst == Decimal("1906.4")
        assert self.impact.annual_units == Decimal("300")
        assert self.impact.annual_profit_before_gst == Decimal("600000")
        assert self.impact.annual_profit_after_gst == Decimal("571920")
        assert self.impact.margin_after_gst == Decimal("19.064")
        assert self.impact.margin_compression == Decimal("0.936")

    def test_zero_rate(self):
        impact = simulate_gst(5_000_000, 1_000, 0, 10)
        assert impact.net_gst_payable == Decimal("0")
        assert impact.margin_compression == Decimal("0")

    def test_smallest_price_at_largest_turnover(self):
        impact = simulate_gst("1e15", "0.01")
        assert impact.annual_units == Decimal("1e17")
        out = simulate_gst_registration({"annual_turnover": "1e15", "base_price": "0.01"})
        assert out["annual_units"] == 1e17

    def test_negative_turnover_clamped(self):
        assert simulate_gst(-1, 1_000).annual_units == Decimal("0")

    @pytest.mark.parametrize("kwargs", [
        {"base_price": 0},
        {"base_price": "0.001"},
        {"base_price": 1_000, "gst_rate": 120},
        {"base_price": 1_000, "profit_margin": -5},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            simulate_gst(1_000_000, **kwargs)


class TestWrapper:

    def test_json_output(self):
        out = simulate_gst_registration({"annual_turnover": 4_500_000, "base_price": 10_000})
        assert out["status"] == "mandatory"
        assert out["registration_mandatory"] is True
        assert out["gst_amount"] == 1800.0
        assert out["is_standard_rate"] is True

    def test_non_standard_rate_flagged(self):
        out = simulate_gst_registration({"annual_turnover": 1_000_000, "gst_rate": 7})
        assert out["is_standard_rate"] is False
