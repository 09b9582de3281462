"""Upstream business validation: blocking errors vs advisory warnings."""

import pytest

from dpr_analytics.validation import (
    FundingValidationError,
    ensure_valid_inputs,
    validate_financial_inputs,
)
from dpr_finance.policy import PolicyConstants


def test_reference_project_is_clean(textile_inputs):
    report = validate_financial_inputs(textile_inputs)

    assert report.ok
    assert report.messages == []


def test_funding_mismatch_is_blocking(textile_inputs):
    report = validate_financial_inputs(textile_inputs.with_overrides(loan_required=10.0))

    assert not report.ok
    assert len(report.errors) == 1
    assert report.errors[0].startswith("Mismatch in Funding: Sources (15.50)")
    assert "Project Cost (22.00)" in report.errors[0]


def test_funding_gap_within_tolerance_passes(textile_inputs):
    report = validate_financial_inputs(textile_inputs.with_overrides(loan_required=16.9))

    assert report.ok


def test_funding_tolerance_comes_from_policy(textile_inputs):
    inputs = textile_inputs.with_overrides(loan_required=16.9)

    report = validate_financial_inputs(inputs, PolicyConstants(funding_tolerance=0.1))

    assert not report.ok


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"net_margin": 100.0}, "cannot be 100% or more"),
        ({"net_margin": -1.0}, "should be positive"),
        ({"year1_revenue": 0.0}, "Year 1 Revenue"),
        ({"loan_tenure": 0}, "at least 1 year"),
    ],
)
def test_blocking_checks(textile_inputs, overrides, fragment):
    report = validate_financial_inputs(textile_inputs.with_overrides(**overrides))

    assert not report.ok
    assert any(fragment in e for e in report.errors)


def test_zero_project_cost_is_blocking(textile_inputs):
    inputs = textile_inputs.with_overrides(
        land_cost=0.0, building_cost=0.0, machinery_cost=0.0, working_capital_cost=0.0,
        other_cost=0.0, own_contribution=0.0, loan_required=0.0,
    )

    report = validate_financial_inputs(inputs)

    assert "Total Project Cost must be greater than zero." in report.errors


@pytest.mark.parametrize(
    "overrides, fragment",
    [
        ({"revenue_growth_rate": 250.0}, "(>200%)"),
        ({"interest_rate": 35.0}, "exceptionally high"),
        ({"interest_rate": 3.0}, "(<4%)"),
        ({"loan_tenure": 25}, ">20 years"),
    ],
)
def test_advisory_checks_do_not_block(textile_inputs, overrides, fragment):
    report = validate_financial_inputs(textile_inputs.with_overrides(**overrides))

    assert report.ok
    assert any(fragment in w for w in report.warnings)


def test_ensure_valid_inputs_raises_with_all_errors(textile_inputs):
    inputs = textile_inputs.with_overrides(loan_required=10.0, net_margin=120.0)

    with pytest.raises(FundingValidationError) as excinfo:
        ensure_valid_inputs(inputs)

    assert len(excinfo.value.errors) == 2
    assert "Mismatch in Funding" in str(excinfo.value)


def test_ensure_valid_inputs_logs_warnings(textile_inputs, caplog):
    with caplog.at_level("WARNING"):
        report = ensure_valid_inputs(textile_inputs.with_overrides(interest_rate=3.0))

    assert report.ok
    assert "Interest Rate seems unrealistic" in caplog.text
