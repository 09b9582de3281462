"""pandas views of pipeline outputs for reporting and export."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from dpr_analytics.contracts import ScenarioResult
from dpr_finance.amortization import AmortizationEntry
from dpr_finance.projections import YearProjection
from dpr_finance.working_capital import WorkingCapitalAssessment

PROJECTION_COLUMNS = [
    "year",
    "revenue",
    "expense",
    "ebitda",
    "interest",
    "depreciation",
    "pbt",
    "tax",
    "pat",
    "cash_flow",
    "dscr",
    "share_capital",
    "reserves",
    "long_term_loan",
    "total_liabilities",
    "net_fixed_assets",
    "current_assets",
    "total_assets",
]

AMORTIZATION_COLUMNS = ["year", "opening_balance", "interest", "principal", "closing_balance"]

WORKING_CAPITAL_COLUMNS = [
    "year",
    "inventory",
    "receivables",
    "payables",
    "net_working_capital",
    "bank_finance",
]

SCENARIO_COLUMNS = [
    "scenario",
    "revenue_growth_rate",
    "net_margin",
    "interest_rate",
    "irr",
    "npv",
    "avg_dscr",
    "payback_period",
    "roi",
]


def projections_frame(projections: Sequence[YearProjection]) -> pd.DataFrame:
    """One row per projected year, indexed by year."""
    df = pd.DataFrame([p.to_dict() for p in projections], columns=PROJECTION_COLUMNS)
    return df.set_index("year")


def amortization_frame(schedule: Sequence[AmortizationEntry]) -> pd.DataFrame:
    df = pd.DataFrame([e.to_dict() for e in schedule], columns=AMORTIZATION_COLUMNS)
    return df.set_index("year")


def working_capital_frame(assessments: Sequence[WorkingCapitalAssessment]) -> pd.DataFrame:
    df = pd.DataFrame([w.to_dict() for w in assessments], columns=WORKING_CAPITAL_COLUMNS)
    return df.set_index("year")


def scenario_comparison_frame(results: Sequence[ScenarioResult]) -> pd.DataFrame:
    """Side-by-side headline metrics, in the order the results were produced."""
    rows = [
        {
            "scenario": r.type,
            "revenue_growth_rate": r.inputs.revenue_growth_rate,
            "net_margin": r.inputs.net_margin,
            "interest_rate": r.inputs.interest_rate,
            **r.metrics.to_dict(),
        }
        for r in results
    ]
    df = pd.DataFrame(rows, columns=SCENARIO_COLUMNS)
    return df.set_index("scenario")


__all__ = [
    "projections_frame",
    "amortization_frame",
    "working_capital_frame",
    "scenario_comparison_frame",
]
