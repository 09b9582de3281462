"""
Projection engine tests pinned to the textile reference project.

Year 1: PAT = 40 x 10% = 4.0, depreciation = 5x5% + 10x15% + 2x10% = 1.95,
interest = 16.5 x 11% = 1.815.
"""

import math

import pytest

from dpr_finance.inputs import InvalidInputError
from dpr_finance.policy import PolicyConstants
from dpr_finance.projections import annual_depreciation, calculate_projections


def test_five_year_horizon_by_default(textile_inputs):
    projections = calculate_projections(textile_inputs)

    assert [p.year for p in projections] == [1, 2, 3, 4, 5]


def test_year_one_figures(textile_inputs):
    y1 = calculate_projections(textile_inputs)[0]

    assert y1.revenue == pytest.approx(40.0)
    assert y1.pat == pytest.approx(4.0)
    assert y1.depreciation == pytest.approx(1.95)
    assert y1.interest == pytest.approx(1.815, abs=0.006)
    # PBT grossed up from PAT at 25% tax
    assert y1.pbt == pytest.approx(5.33)
    assert y1.tax == pytest.approx(1.33)
    assert y1.ebitda == pytest.approx(y1.pbt + y1.interest + y1.depreciation, abs=0.02)
    assert y1.expense == pytest.approx(y1.revenue - y1.ebitda, abs=0.02)


def test_year_one_cash_flow_and_dscr(textile_inputs):
    y1 = calculate_projections(textile_inputs)[0]
    principal = 16.5 / 7

    assert y1.cash_flow == pytest.approx(4.0 + 1.95 - principal, abs=0.01)
    assert y1.dscr == pytest.approx((4.0 + 1.95 + 1.815) / (1.815 + principal), abs=0.01)


def test_revenue_compounds_at_growth_rate(textile_inputs):
    projections = calculate_projections(textile_inputs)

    assert projections[1].revenue == pytest.approx(46.0)
    assert projections[4].revenue == pytest.approx(40 * 1.15 ** 4, abs=0.01)


def test_balance_sheet_balances_every_year(textile_inputs):
    for p in calculate_projections(textile_inputs):
        assert p.total_assets == p.total_liabilities
        assert p.net_fixed_assets + p.current_assets == pytest.approx(p.total_assets, abs=0.016)
        assert p.share_capital + p.reserves + p.long_term_loan == pytest.approx(
            p.total_liabilities, abs=0.016
        )


def test_fixed_assets_decline_and_reserves_accumulate(textile_inputs):
    projections = calculate_projections(textile_inputs)

    assert projections[0].net_fixed_assets == pytest.approx(17.0 - 1.95)
    for prev, cur in zip(projections, projections[1:]):
        assert cur.net_fixed_assets <= prev.net_fixed_assets
        assert cur.reserves == pytest.approx(prev.reserves + cur.pat, abs=0.016)


def test_years_after_repayment_carry_no_debt_service(textile_inputs):
    inputs = textile_inputs.with_overrides(loan_tenure=3)

    projections = calculate_projections(inputs)

    for p in projections[3:]:
        assert p.interest == 0.0
        assert p.long_term_loan == 0.0
        assert p.dscr == 0.0
    assert projections[2].long_term_loan == 0.0


def test_net_fixed_assets_never_negative(textile_inputs):
    inputs = textile_inputs.with_overrides(depreciation_machinery=60.0, depreciation_other=60.0)

    projections = calculate_projections(inputs, PolicyConstants(horizon_years=10))

    assert len(projections) == 10
    assert all(p.net_fixed_assets >= 0 for p in projections)


def test_annual_depreciation_excludes_land(textile_inputs):
    with_land = textile_inputs.with_overrides(land_cost=100.0)

    assert annual_depreciation(with_land) == pytest.approx(annual_depreciation(textile_inputs))


def test_projection_is_deterministic(textile_inputs):
    assert calculate_projections(textile_inputs) == calculate_projections(textile_inputs)


def test_non_finite_inputs_are_rejected(textile_inputs):
    with pytest.raises(InvalidInputError):
        calculate_projections(textile_inputs.with_overrides(year1_revenue=math.nan))


def test_tax_rate_of_one_hundred_is_rejected(textile_inputs):
    with pytest.raises(InvalidInputError):
        calculate_projections(textile_inputs.with_overrides(income_tax_rate=100.0))
