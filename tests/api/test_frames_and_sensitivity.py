"""pandas views and the one-at-a-time sensitivity table."""

import pandas as pd
import pytest

from dpr_analytics.frames import (
    amortization_frame,
    projections_frame,
    scenario_comparison_frame,
    working_capital_frame,
)
from dpr_analytics.scenarios import run_scenarios
from dpr_analytics.sensitivity import (
    SENSITIVITY_COLUMNS,
    create_tornado_chart_data,
    run_sensitivity_analysis,
)
from dpr_finance.amortization import calculate_amortization
from dpr_finance.projections import calculate_projections
from dpr_finance.working_capital import calculate_working_capital


def test_projection_frame_is_indexed_by_year(textile_inputs):
    projections = calculate_projections(textile_inputs)

    df = projections_frame(projections)

    assert list(df.index) == [1, 2, 3, 4, 5]
    assert df.loc[1, "pat"] == pytest.approx(4.0)
    assert (df["total_assets"] == df["total_liabilities"]).all()


def test_schedule_and_working_capital_frames(textile_inputs):
    projections = calculate_projections(textile_inputs)

    am = amortization_frame(calculate_amortization(textile_inputs))
    wc = working_capital_frame(calculate_working_capital(projections))

    assert len(am) == 7
    assert am.iloc[-1]["closing_balance"] == 0.0
    assert list(wc.columns) == ["inventory", "receivables", "payables", "net_working_capital", "bank_finance"]


def test_scenario_comparison_frame(textile_inputs):
    df = scenario_comparison_frame(run_scenarios(textile_inputs))

    assert list(df.index) == ["Pessimistic", "Base", "Optimistic"]
    assert df.loc["Base", "net_margin"] == 10
    assert df["irr"].is_monotonic_increasing


def test_sensitivity_table_shape_and_order(textile_inputs):
    df = run_sensitivity_analysis(textile_inputs)

    assert list(df.columns) == SENSITIVITY_COLUMNS
    assert len(df) == 8
    assert set(df["parameter"]) == {"Revenue Growth", "Net Margin", "Interest Rate", "Year-1 Revenue"}
    # Widest IRR swing first
    assert df["swing"].is_monotonic_decreasing
    assert (df["base_irr"] == df["base_irr"].iloc[0]).all()


def test_sensitivity_moves_in_expected_direction(textile_inputs):
    df = run_sensitivity_analysis(textile_inputs)

    margin = df[df["parameter"] == "Net Margin"].set_index("stressed_value")
    assert margin.loc[7.0, "delta_irr"] < 0 < margin.loc[12.0, "delta_irr"]

    rate = df[df["parameter"] == "Interest Rate"].set_index("stressed_value")
    assert rate.loc[13.0, "delta_dscr"] < 0


def test_sensitivity_custom_config_and_floor(textile_inputs):
    config = [{"param": "revenue_growth_rate", "label": "Growth", "mode": "points", "stress": [-50.0]}]

    df = run_sensitivity_analysis(textile_inputs, config=config)

    assert len(df) == 1
    assert df.loc[0, "stressed_value"] == 0.0


def test_tornado_collapses_to_one_row_per_driver(textile_inputs):
    tornado = create_tornado_chart_data(run_sensitivity_analysis(textile_inputs))

    assert len(tornado) == 4
    assert tornado["impact"].is_monotonic_decreasing
    assert (tornado["low_irr"] <= tornado["high_irr"]).all()


def test_empty_sensitivity_config_gives_empty_frame(textile_inputs):
    df = run_sensitivity_analysis(textile_inputs, config=[])

    assert isinstance(df, pd.DataFrame)
    assert df.empty
    assert "swing" in df.columns
