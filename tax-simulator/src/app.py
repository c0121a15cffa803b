"""
India Tax Policy Simulator - API service
Flask application exposing the GST, Composition Scheme, Income Tax and
Startup India simulators as JSON endpoints for the simulator UI.
"""

import os
import logging
import time
from flask import Flask, jsonify, request
from flask_cors import CORS

from assumptions import get_assumptions
from composition_scheme import simulate_composition
from gst_simulator import simulate_gst_registration
from income_tax_simulator import deduction_crossover, simulate_income_tax
from startup_holiday import holiday_projection, simulate_startup_holiday
from tax_policies import POLICY_VERSION, policy_catalogue

SERVICE_VERSION = "1.0.0"


def _log_level():
    """LOG_LEVEL by name; unknown names fall back to INFO."""
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


# Configure logging
logging.basicConfig(
    level=_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:3000,http://localhost:3001,http://localhost:8080"


def _cors_origins():
    raw = os.environ.get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [o.strip() for o in raw.split(",") if o.strip()]


app = Flask(__name__)
CORS(app, origins=_cors_origins())


def _run_simulation(name, handler):
    """
    Parse the JSON body, run one simulator wrapper and build the response.

    Bad input (ValueError/KeyError raised by the simulators) is a 400; anything
    else is logged and reported as a 500.
    """
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        return jsonify({"error": "request body must be a JSON object"}), 400

    start = time.perf_counter()
    try:
        result = handler(body)
    except (ValueError, KeyError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else str(exc)
        logger.warning("Rejected %s request: %s", name, message)
        return jsonify({"error": message}), 400
    except Exception as exc:
        logger.error("%s simulation failed: %s", name, exc)
        return jsonify({"error": "Internal error — please try again."}), 500

    latency_ms = round((time.perf_counter() - start) * 1000, 2)
    logger.debug("%s simulation done in %.2f ms", name, latency_ms)
    return jsonify(result)


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.route("/health", methods=["GET"])
def health():
    """Lightweight liveness probe used by load balancers and Docker."""
    return jsonify(
        {
            "status": "ok",
            "service": "tax-simulator",
            "timestamp": time.time(),
            "version": SERVICE_VERSION,
            "policy_version": POLICY_VERSION,
        }
    )


# ---------------------------------------------------------------------------
# Static reference data
# ---------------------------------------------------------------------------

@app.route("/policies", methods=["GET"])
def policies():
    """Slab tables and modifiers for every income tax policy."""
    return jsonify({"version": POLICY_VERSION, "policies": policy_catalogue()})


@app.route("/assumptions", methods=["GET"])
def assumptions():
    return jsonify(get_assumptions())


# ---------------------------------------------------------------------------
# Simulators
# ---------------------------------------------------------------------------

@app.route("/income-tax", methods=["POST"])
def income_tax():
    """
    POST /income-tax
    Body: { "annual_income": number, "deductions": number, "regime": "new"|"old" }
    """
    return _run_simulation("income-tax", simulate_income_tax)


@app.route("/income-tax/crossover", methods=["POST"])
def income_tax_crossover():
    """
    POST /income-tax/crossover
    Body: { "annual_income": number, "max_deduction": number, "step": number }
    """
    return _run_simulation("income-tax-crossover", deduction_crossover)


@app.route("/startup-holiday", methods=["POST"])
def startup_holiday():
    """
    POST /startup-holiday
    Body: { "annual_profit", "years_since_incorporation", "holiday_years_used",
            "is_recognized", "annual_turnover" (optional) }
    """
    return _run_simulation("startup-holiday", simulate_startup_holiday)


@app.route("/startup-holiday/projection", methods=["POST"])
def startup_holiday_projection():
    return _run_simulation("startup-holiday-projection", holiday_projection)


@app.route("/gst", methods=["POST"])
def gst():
    """
    POST /gst
    Body: { "annual_turnover", "base_price", "gst_rate", "profit_margin" }
    """
    return _run_simulation("gst", simulate_gst_registration)


@app.route("/composition", methods=["POST"])
def composition():
    """
    POST /composition
    Body: { "annual_turnover", "business_type", "purchases_percent" }
    """
    return _run_simulation("composition", simulate_composition)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    port = int(os.environ.get("SIMULATOR_SERVICE_PORT", 5002))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    logger.info("Starting tax simulator on port %d (debug=%s)", port, debug)
    app.run(host="0.0.0.0", port=port, debug=debug)
