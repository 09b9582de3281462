"""Upstream business validation of financial inputs.

The engine assumes validated input and does not re-check plausibility. This
module is that upstream gate. Problems are split in two:

- blocking: engine preconditions (funding adds up, positive cost and
  revenue, margin in [0, 100), tenure >= 1). ``ensure_valid_inputs`` raises.
- advisory: figures a bank would query (growth > 200%, interest outside
  4–30%, tenure > 20 years). Logged, never fatal.

It also registers the ``financials`` config fields with the schema registry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from dpr_analytics.config_schema import (
    RequiredFieldSpec,
    is_non_negative,
    is_number,
    is_whole_years,
    register_required_fields,
)
from dpr_finance.inputs import FinancialInputs
from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants

logger = logging.getLogger(__name__)

MAX_GROWTH_RATE = 200.0
MIN_INTEREST_RATE = 4.0
MAX_INTEREST_RATE = 30.0
MAX_TENURE_YEARS = 20


class FundingValidationError(ValueError):
    """Raised when inputs fail a blocking business check."""

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid financial inputs: " + " ".join(self.errors))


@dataclass(frozen=True)
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return self.errors + self.warnings


# ---------------------------------------------------------------------------
# Config schema registration
# ---------------------------------------------------------------------------


def _paths(snake: str, camel: str):
    return (("financials", snake), ("financials", camel))


_FINANCIALS_SPECS = [
    RequiredFieldSpec("financials", "land_cost", _paths("land_cost", "landCost"),
                      description="Land cost", validator=is_non_negative),
    RequiredFieldSpec("financials", "building_cost", _paths("building_cost", "buildingCost"),
                      description="Building / civil works cost", validator=is_non_negative),
    RequiredFieldSpec("financials", "machinery_cost", _paths("machinery_cost", "machineryCost"),
                      description="Plant and machinery cost", validator=is_non_negative),
    RequiredFieldSpec("financials", "working_capital_cost",
                      _paths("working_capital_cost", "workingCapitalCost"),
                      description="Working capital margin in project cost", validator=is_non_negative),
    RequiredFieldSpec("financials", "other_cost", _paths("other_cost", "otherCost"),
                      description="Other fixed assets / preliminary expenses", validator=is_non_negative),
    RequiredFieldSpec("financials", "own_contribution", _paths("own_contribution", "ownContribution"),
                      description="Promoter contribution", validator=is_non_negative),
    RequiredFieldSpec("financials", "loan_required", _paths("loan_required", "loanRequired"),
                      description="Term loan amount", validator=is_non_negative),
    RequiredFieldSpec("financials", "interest_rate", _paths("interest_rate", "interestRate"),
                      description="Annual interest rate (%)", validator=is_non_negative),
    RequiredFieldSpec("financials", "year1_revenue", _paths("year1_revenue", "year1Revenue"),
                      description="Year-1 revenue", validator=is_number),
    RequiredFieldSpec("financials", "revenue_growth_rate",
                      _paths("revenue_growth_rate", "revenueGrowthRate"),
                      description="Annual revenue growth (%)", validator=is_number),
    RequiredFieldSpec("financials", "net_margin", _paths("net_margin", "netMargin"),
                      description="Net profit margin after tax (%)", validator=is_number),
    RequiredFieldSpec("financials", "income_tax_rate", _paths("income_tax_rate", "incomeTaxRate"),
                      required=False, severity="warning",
                      description="Income tax rate (%), default 25", validator=is_non_negative),
    RequiredFieldSpec("financials", "depreciation_building",
                      _paths("depreciation_building", "depreciationBuilding"),
                      required=False, severity="warning",
                      description="Building depreciation (%), default 5", validator=is_non_negative),
    RequiredFieldSpec("financials", "depreciation_machinery",
                      _paths("depreciation_machinery", "depreciationMachinery"),
                      required=False, severity="warning",
                      description="Machinery depreciation (%), default 15", validator=is_non_negative),
    RequiredFieldSpec("financials", "depreciation_other",
                      _paths("depreciation_other", "depreciationOther"),
                      required=False, severity="warning",
                      description="Other assets depreciation (%), default 10", validator=is_non_negative),
    RequiredFieldSpec("financials", "loan_tenure", _paths("loan_tenure", "loanTenure"),
                      required=False,
                      description="Loan tenure in whole years, default 7", validator=is_whole_years),
]

register_required_fields("financials", _FINANCIALS_SPECS)


# ---------------------------------------------------------------------------
# Business checks
# ---------------------------------------------------------------------------


def validate_financial_inputs(
    inputs: FinancialInputs,
    policy: PolicyConstants = DEFAULT_POLICY,
) -> ValidationReport:
    """Run every business check and collect the messages."""
    errors: List[str] = []
    warnings: List[str] = []

    total_funds = inputs.own_contribution + inputs.loan_required
    if abs(total_funds - inputs.project_cost) > policy.funding_tolerance:
        errors.append(
            f"Mismatch in Funding: Sources ({total_funds:.2f}) must equal Project Cost "
            f"({inputs.project_cost:.2f}). Please adjust Loan or Own Contribution."
        )

    if inputs.project_cost <= 0:
        errors.append("Total Project Cost must be greater than zero.")

    if inputs.year1_revenue <= 0:
        errors.append("Year 1 Revenue estimate must be greater than zero.")

    if inputs.net_margin >= 100:
        errors.append("Net Profit Margin cannot be 100% or more.")
    if inputs.net_margin < 0:
        errors.append("Net Profit Margin should be positive for a viable project report.")

    if inputs.loan_tenure < 1:
        errors.append("Loan Tenure must be at least 1 year.")

    if inputs.revenue_growth_rate > MAX_GROWTH_RATE:
        warnings.append(
            "Revenue Growth Rate (>200%) seems unrealistic for a standard bank loan proposal."
        )

    if inputs.interest_rate > MAX_INTEREST_RATE:
        warnings.append("Interest Rate seems exceptionally high (>30%). Please verify.")
    if inputs.interest_rate < MIN_INTEREST_RATE:
        warnings.append(
            "Interest Rate seems unrealistic (<4%). Current market rates are typically 9-14%."
        )

    if inputs.loan_tenure > MAX_TENURE_YEARS:
        warnings.append("Loan Tenure of >20 years is unusual for MSME Term Loans.")

    return ValidationReport(errors=errors, warnings=warnings)


def ensure_valid_inputs(
    inputs: FinancialInputs,
    policy: PolicyConstants = DEFAULT_POLICY,
) -> ValidationReport:
    """Validate, log advisory findings and raise on blocking ones."""
    report = validate_financial_inputs(inputs, policy)
    for message in report.warnings:
        logger.warning("Input check: %s", message)
    if not report.ok:
        raise FundingValidationError(report.errors)
    return report


__all__ = [
    "FundingValidationError",
    "ValidationReport",
    "validate_financial_inputs",
    "ensure_valid_inputs",
]
