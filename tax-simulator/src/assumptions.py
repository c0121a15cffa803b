"""
Assumptions & disclaimers shown alongside every simulator.
"""

from __future__ import annotations

from typing import Dict, List

from tax_policies import POLICY_VERSION

ASSUMPTIONS: List[Dict[str, str]] = [
    {
        "title": "Simplified Economic Models",
        "description": (
            "All calculations use simplified formulas that approximate real-world tax calculations. "
            "Actual tax liability may vary based on specific circumstances, exemptions, and "
            "deductions not covered here."
        ),
    },
    {
        "title": "GST Calculations",
        "description": (
            "Input Tax Credit (ITC) utilization is simplified. Actual ITC depends on the nature of "
            "purchases, supplier compliance, and business type."
        ),
    },
    {
        "title": "Income Tax Slabs",
        "description": (
            f"Based on {POLICY_VERSION} tax slabs. Does not include surcharge for high income "
            "earners or all possible deductions under various sections."
        ),
    },
    {
        "title": "Startup India Benefits",
        "description": (
            "Section 80-IAC benefits require DPIIT recognition and meeting specific criteria. "
            "Consult a CA for eligibility assessment."
        ),
    },
    {
        "title": "Illustrative Results",
        "description": (
            "All results are for educational purposes only. They are not predictions or financial "
            "advice. Always consult a qualified tax professional for actual tax planning."
        ),
    },
]

DISCLAIMER = (
    "This tool is for educational purposes only. Do not make financial decisions based solely "
    "on these simulations. Always consult a qualified Chartered Accountant or tax professional."
)


def get_assumptions() -> dict:
    return {
        "policy_version": POLICY_VERSION,
        "assumptions": ASSUMPTIONS,
        "disclaimer": {"title": "Not Financial Advice", "text": DISCLAIMER},
    }
