"""HTTP layer."""

import logging

import pytest

from app import _cors_origins, _log_level


class TestConfiguration:

    @pytest.mark.parametrize("raw, expected", [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("verbose", logging.INFO),
        ("", logging.INFO),
    ])
    def test_log_level(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LOG_LEVEL", raw)
        assert _log_level() == expected

    def test_log_level_default(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert _log_level() == logging.INFO

    def test_cors_origins_from_env(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, ,https://b.example")
        assert _cors_origins() == ["https://a.example", "https://b.example"]


class TestReferenceEndpoints:

    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "ok"

    def test_policies(self, client):
        body = client.get("/policies").get_json()
        assert body["version"] == "FY2024-25"
        assert len(body["policies"]) == 3

    def test_assumptions(self, client):
        body = client.get("/assumptions").get_json()
        assert len(body["assumptions"]) == 5
        assert body["disclaimer"]["title"] == "Not Financial Advice"


class TestSimulatorEndpoints:

    def test_income_tax(self, client):
        resp = client.post("/income-tax", json={"annual_income": 1_200_000, "deductions": 150_000})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["new"]["total_tax"] == 81900
        assert body["old"]["total_tax"] == 117000
        assert body["recommended"] == "new"

    def test_income_tax_rebate_cliff(self, client):
        at = client.post("/income-tax", json={"annual_income": 775_000}).get_json()
        over = client.post("/income-tax", json={"annual_income": 775_001}).get_json()
        assert at["new"]["total_tax"] == 0
        assert at["new"]["rebate_applied"] is True
        assert over["new"]["total_tax"] > 0

    def test_crossover(self, client):
        body = client.post("/income-tax/crossover", json={"annual_income": 1_200_000}).get_json()
        assert body["crossover_deduction"] == 318751
        assert len(body["sweep"]) == 21

    def test_startup_holiday(self, client):
        body = client.post("/startup-holiday", json={
            "annual_profit": 5_000_000, "years_since_incorporation": 2,
            "holiday_years_used": 3, "is_recognized": True,
        }).get_json()
        assert body["status"] == "exhausted"
        assert body["tax_payable"] == 1248000

    def test_projection(self, client):
        body = client.post("/startup-holiday/projection", json={
            "annual_profit": 5_000_000, "years_since_incorporation": 2,
        }).get_json()
        assert [r["holiday_claimed"] for r in body["projection"]] == [True, True, True, False, False]

    def test_gst(self, client):
        body = client.post("/gst", json={"annual_turnover": 3_000_000}).get_json()
        assert body["status"] == "optional"

    def test_composition(self, client):
        body = client.post("/composition", json={"annual_turnover": 8_000_000}).get_json()
        assert body["status"] == "eligible"


class TestErrors:

    def test_bad_regime(self, client):
        resp = client.post("/income-tax", json={"annual_income": 1_000_000, "regime": "flat"})
        assert resp.status_code == 400
        assert "regime" in resp.get_json()["error"]

    def test_bad_holiday_counter(self, client):
        resp = client.post("/startup-holiday", json={"years_since_incorporation": 2, "holiday_years_used": 5})
        assert resp.status_code == 400

    def test_oversized_amount_is_bad_request(self, client):
        resp = client.post("/income-tax", json={"annual_income": 1e27})
        assert resp.status_code == 400
        assert "annual_income" in resp.get_json()["error"]

    def test_projection_years_capped(self, client):
        resp = client.post("/startup-holiday/projection", json={"years": 200_000})
        assert resp.status_code == 400
        assert "years" in resp.get_json()["error"]

    def test_unknown_business_type(self, client):
        resp = client.post("/composition", json={"business_type": "shop"})
        assert resp.status_code == 400

    def test_body_must_be_object(self, client):
        resp = client.post("/gst", json=[1, 2, 3])
        assert resp.status_code == 400

    def test_missing_body_uses_defaults(self, client):
        resp = client.post("/gst")
        assert resp.status_code == 200
