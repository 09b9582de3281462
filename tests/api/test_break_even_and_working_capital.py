"""Break-even point and working-capital assessment."""

import pytest

from dpr_finance.break_even import calculate_break_even
from dpr_finance.policy import PolicyConstants
from dpr_finance.projections import YearProjection, calculate_projections
from dpr_finance.working_capital import calculate_working_capital


def _year(**fields) -> YearProjection:
    base = {name: 0.0 for name in YearProjection.__dataclass_fields__}
    base["year"] = 1
    base.update(fields)
    return YearProjection(**base)


def test_break_even_worked_example():
    """
    fixed = 1.815 + 1.95 + 0.4 x 32 = 16.565, variable = 0.6 x 32 = 19.2,
    P/V ratio = 20.8 / 40 = 0.52, BEP = 16.565 / 0.52 = 31.86 (79.6%).
    """
    y1 = _year(revenue=40.0, expense=32.0, interest=1.815, depreciation=1.95)

    bep = calculate_break_even(y1)

    assert bep.fixed_cost == pytest.approx(16.565, abs=0.006)
    assert bep.variable_cost == pytest.approx(19.2)
    assert bep.bep_revenue == pytest.approx(31.86, abs=0.01)
    assert bep.bep_percentage == pytest.approx(79.64, abs=0.01)


def test_break_even_zero_revenue_raises():
    with pytest.raises(ZeroDivisionError):
        calculate_break_even(_year(revenue=0.0, expense=5.0))


def test_break_even_honours_fixed_cost_share():
    y1 = _year(revenue=100.0, expense=50.0)

    bep = calculate_break_even(y1, PolicyConstants(fixed_cost_share=0.0))

    assert bep.fixed_cost == 0.0
    assert bep.variable_cost == pytest.approx(50.0)
    assert bep.bep_revenue == 0.0


def test_working_capital_one_month_holding(textile_inputs):
    projections = calculate_projections(textile_inputs)

    assessments = calculate_working_capital(projections)

    assert [a.year for a in assessments] == [p.year for p in projections]
    y1, a1 = projections[0], assessments[0]
    assert a1.receivables == pytest.approx(40.0 / 12, abs=0.005)
    assert a1.inventory == pytest.approx(y1.expense / 12, abs=0.01)
    assert a1.payables == a1.inventory
    # Inventory and payables cancel: the gap is the receivables
    assert a1.net_working_capital == pytest.approx(a1.receivables, abs=0.01)
    assert a1.bank_finance == pytest.approx(0.75 * a1.net_working_capital, abs=0.01)


def test_working_capital_bank_share_is_configurable(textile_inputs):
    projections = calculate_projections(textile_inputs)

    full = calculate_working_capital(projections, PolicyConstants(bank_finance_share=1.0))

    assert all(a.bank_finance == a.net_working_capital for a in full)


def test_working_capital_of_empty_projection_is_empty():
    assert calculate_working_capital([]) == []
