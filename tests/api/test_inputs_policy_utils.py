"""FinancialInputs construction, PolicyConstants overrides and rounding helpers."""

import dataclasses
import math

import pytest

from dpr_finance.inputs import FinancialInputs, InvalidInputError
from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants, policy_from_mapping
from dpr_finance.utils import as_float, as_int, round2, round_to


# ---------------------------------------------------------------------------
# FinancialInputs
# ---------------------------------------------------------------------------


def test_project_cost_is_derived_from_components(textile_inputs):
    assert textile_inputs.project_cost == pytest.approx(22.0)
    assert textile_inputs.gross_block == pytest.approx(17.0)
    assert textile_inputs.promoter_share_pct == pytest.approx(25.0)


def test_supplied_project_cost_is_ignored(textile_financials):
    textile_financials["project_cost"] = 999.0

    inputs = FinancialInputs.from_mapping(textile_financials)

    assert inputs.project_cost == pytest.approx(22.0)


def test_camel_case_payload_is_accepted():
    payload = {
        "landCost": 0, "buildingCost": 5, "machineryCost": 10, "workingCapitalCost": 5,
        "otherCost": 2, "projectCost": 22, "ownContribution": 5.5, "loanRequired": 16.5,
        "interestRate": 11, "year1Revenue": 40, "revenueGrowthRate": 15, "netMargin": 10,
        "incomeTaxRate": 25, "depreciationBuilding": 5, "depreciationMachinery": 15,
        "depreciationOther": 10, "loanTenure": 7,
    }

    inputs = FinancialInputs.from_mapping(payload)

    assert inputs.loan_tenure == 7
    assert isinstance(inputs.loan_tenure, int)
    assert inputs.debt_equity_ratio == 3.0


def test_fully_debt_funded_leverage_is_infinite(textile_inputs):
    inputs = textile_inputs.with_overrides(own_contribution=0.0, loan_required=22.0)

    assert math.isinf(inputs.debt_equity_ratio)
    assert inputs.promoter_share_pct == 0.0


def test_optional_fields_take_defaults(textile_financials):
    for key in ("income_tax_rate", "depreciation_building", "depreciation_machinery",
                "depreciation_other", "loan_tenure"):
        textile_financials.pop(key)

    inputs = FinancialInputs.from_mapping(textile_financials)

    assert inputs.income_tax_rate == 25.0
    assert inputs.loan_tenure == 7


def test_missing_required_field_is_reported(textile_financials):
    textile_financials.pop("loan_required")

    with pytest.raises(InvalidInputError, match="loan_required"):
        FinancialInputs.from_mapping(textile_financials)


@pytest.mark.parametrize("tenure", [2.5, "seven", math.inf, math.nan, "inf"])
def test_fractional_or_text_tenure_is_rejected(textile_financials, tenure):
    textile_financials["loan_tenure"] = tenure

    with pytest.raises(InvalidInputError):
        FinancialInputs.from_mapping(textile_financials)


def test_inputs_are_immutable(textile_inputs):
    with pytest.raises(dataclasses.FrozenInstanceError):
        textile_inputs.net_margin = 50  # type: ignore[misc]

    changed = textile_inputs.with_overrides(net_margin=12.0)
    assert changed.net_margin == 12.0
    assert textile_inputs.net_margin == 10.0


def test_to_dict_includes_project_cost(textile_inputs):
    data = textile_inputs.to_dict()

    assert data["project_cost"] == pytest.approx(22.0)
    assert data["loan_tenure"] == 7


# ---------------------------------------------------------------------------
# PolicyConstants
# ---------------------------------------------------------------------------


def test_default_policy_values():
    assert DEFAULT_POLICY.horizon_years == 5
    assert DEFAULT_POLICY.npv_discount_rate == 0.10
    assert DEFAULT_POLICY.bank_finance_share == 0.75
    assert DEFAULT_POLICY.funding_tolerance == 0.5
    assert DEFAULT_POLICY.variable_cost_share == pytest.approx(0.6)


def test_policy_from_empty_mapping_is_default():
    assert policy_from_mapping(None) is DEFAULT_POLICY
    assert policy_from_mapping({}) is DEFAULT_POLICY


def test_policy_overrides_and_unknown_keys(caplog):
    with caplog.at_level("WARNING"):
        policy = policy_from_mapping({"horizon_years": "7", "npv_discount_rate": 0.12, "colour": "red"})

    assert policy == PolicyConstants(horizon_years=7, npv_discount_rate=0.12)
    assert "colour" in caplog.text


@pytest.mark.parametrize(
    "overrides",
    [{"horizon_years": 0}, {"fixed_cost_share": 1.5}, {"npv_discount_rate": "high"}],
)
def test_invalid_policy_is_rejected(overrides):
    with pytest.raises(ValueError):
        policy_from_mapping(overrides)


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, digits, expected",
    [
        (0.375, 2, 0.38),
        (0.125, 2, 0.13),
        (-0.125, 2, -0.12),
        (1.45, 1, 1.5),
        (3.0, 2, 3.0),
    ],
)
def test_round_to_rounds_half_up(value, digits, expected):
    assert round_to(value, digits) == pytest.approx(expected)


def test_round_to_passes_non_finite_through():
    assert math.isinf(round_to(math.inf, 2))
    assert math.isnan(round2(math.nan))


def test_coercion_helpers():
    assert as_float("1.5") == 1.5
    assert as_float("x", default=0.0) == 0.0
    assert as_int("7") == 7
    assert as_int(None) is None
