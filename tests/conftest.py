"""
Shared fixtures for the DPR engine tests.

The textile unit below is the reference project used throughout: project
cost 22 (lakhs), 5.5 promoter contribution, 16.5 term loan at 11% over
7 years, 40 year-1 revenue growing 15% at a 10% net margin.
"""

from typing import Any, Dict

import pytest

from dpr_finance.inputs import FinancialInputs


TEXTILE_UNIT: Dict[str, Any] = {
    "land_cost": 0,
    "building_cost": 5,
    "machinery_cost": 10,
    "working_capital_cost": 5,
    "other_cost": 2,
    "own_contribution": 5.5,
    "loan_required": 16.5,
    "interest_rate": 11,
    "year1_revenue": 40,
    "revenue_growth_rate": 15,
    "net_margin": 10,
    "income_tax_rate": 25,
    "depreciation_building": 5,
    "depreciation_machinery": 15,
    "depreciation_other": 10,
    "loan_tenure": 7,
}


@pytest.fixture
def textile_financials() -> Dict[str, Any]:
    """Raw ``financials`` section for the reference project."""
    return dict(TEXTILE_UNIT)


@pytest.fixture
def textile_inputs() -> FinancialInputs:
    return FinancialInputs.from_mapping(TEXTILE_UNIT)


@pytest.fixture
def textile_config(textile_financials) -> Dict[str, Any]:
    """A complete project config as it would be loaded from YAML."""
    return {
        "scenario_name": "textile_unit_base",
        "sector": "textile",
        "financials": textile_financials,
        "policy": {},
        "scenarios": {},
    }
