"""
Sensitivity analysis for DPR projects.
One-at-a-time stress test (tornado chart compatible).

Each driver is moved to a low and a high value while everything else stays
at base; IRR, average DSCR and the loan-readiness score are recorded for
every stressed run.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from dpr_finance.break_even import calculate_break_even
from dpr_finance.inputs import FinancialInputs, InvalidInputError
from dpr_finance.metrics import calculate_metrics
from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants
from dpr_finance.projections import calculate_projections
from dpr_finance.readiness import calculate_loan_readiness

logger = logging.getLogger(__name__)

# "points": stress values are base +/- delta (percentage points)
# "relative": stress values are base * (1 +/- delta)
SENSITIVITY_CONFIG: List[Dict[str, Any]] = [
    {"param": "revenue_growth_rate", "label": "Revenue Growth", "mode": "points", "stress": [-5.0, 5.0]},
    {"param": "net_margin", "label": "Net Margin", "mode": "points", "stress": [-3.0, 2.0]},
    {"param": "interest_rate", "label": "Interest Rate", "mode": "points", "stress": [2.0, -1.0]},
    {"param": "year1_revenue", "label": "Year-1 Revenue", "mode": "relative", "stress": [-0.10, 0.10]},
]

SENSITIVITY_COLUMNS = [
    "parameter",
    "base_value",
    "stressed_value",
    "base_irr",
    "stressed_irr",
    "delta_irr",
    "base_avg_dscr",
    "stressed_avg_dscr",
    "delta_dscr",
    "base_score",
    "stressed_score",
    "delta_score",
    "swing",
]


def _stressed_value(base: float, delta: float, mode: str) -> float:
    if mode == "relative":
        value = base * (1 + delta)
    elif mode == "points":
        value = base + delta
    else:
        raise ValueError(f"Unknown stress mode {mode!r}")
    return max(value, 0.0)


def _headline(inputs: FinancialInputs, policy: PolicyConstants) -> Tuple[float, float, int]:
    """IRR (%), average DSCR and readiness score for one input set."""
    projections = calculate_projections(inputs, policy)
    metrics = calculate_metrics(projections, inputs, policy)
    break_even = calculate_break_even(projections[0], policy)
    readiness = calculate_loan_readiness(inputs, metrics, projections, break_even)
    return metrics.irr, metrics.avg_dscr, readiness.total_score


def run_sensitivity_analysis(
    inputs: FinancialInputs,
    policy: PolicyConstants = DEFAULT_POLICY,
    config: Optional[List[Dict[str, Any]]] = None,
) -> pd.DataFrame:
    """
    Run one-at-a-time sensitivity analysis.

    Args:
        inputs: Base case inputs
        policy: Engine constants
        config: Optional custom sensitivity configuration

    Returns:
        DataFrame with one row per stressed value, drivers with the widest
        IRR swing first.
    """
    if config is None:
        config = SENSITIVITY_CONFIG

    base_irr, base_dscr, base_score = _headline(inputs, policy)
    results: List[Dict[str, Any]] = []

    for s in config:
        param = s["param"]
        base = getattr(inputs, param)

        for delta in s["stress"]:
            val = _stressed_value(base, delta, s.get("mode", "points"))
            try:
                irr, dscr, score = _headline(inputs.with_overrides(**{param: val}), policy)
            except (InvalidInputError, ZeroDivisionError) as e:
                logger.warning("Sensitivity for %s at %s failed: %s", s["label"], val, e)
                continue

            results.append(
                {
                    "parameter": s["label"],
                    "base_value": base,
                    "stressed_value": val,
                    "base_irr": base_irr,
                    "stressed_irr": irr,
                    "delta_irr": irr - base_irr,
                    "base_avg_dscr": base_dscr,
                    "stressed_avg_dscr": dscr,
                    "delta_dscr": dscr - base_dscr,
                    "base_score": base_score,
                    "stressed_score": score,
                    "delta_score": score - base_score,
                }
            )

    df = pd.DataFrame(results, columns=[c for c in SENSITIVITY_COLUMNS if c != "swing"])
    if df.empty:
        df["swing"] = pd.Series(dtype=float)
        return df

    df["swing"] = df.groupby("parameter")["stressed_irr"].transform(lambda s: s.max() - s.min())
    df = df.sort_values(["swing", "parameter", "stressed_value"], ascending=[False, True, True])
    return df.reset_index(drop=True)


def create_tornado_chart_data(df: pd.DataFrame) -> pd.DataFrame:
    """
    Collapse sensitivity rows to one bar per driver.

    Returns:
        DataFrame with low/high IRR per parameter, widest impact first.
    """
    tornado_data = []

    for param in df["parameter"].unique():
        param_df = df[df["parameter"] == param]

        max_irr = param_df["stressed_irr"].max()
        min_irr = param_df["stressed_irr"].min()
        base_irr = param_df["base_irr"].iloc[0]

        tornado_data.append(
            {
                "parameter": param,
                "base_irr": base_irr,
                "low_irr": min_irr,
                "high_irr": max_irr,
                "impact": abs(max_irr - min_irr),
            }
        )

    tornado_df = pd.DataFrame(
        tornado_data, columns=["parameter", "base_irr", "low_irr", "high_irr", "impact"]
    )
    return tornado_df.sort_values("impact", ascending=False).reset_index(drop=True)


__all__ = [
    "SENSITIVITY_CONFIG",
    "SENSITIVITY_COLUMNS",
    "run_sensitivity_analysis",
    "create_tornado_chart_data",
]
