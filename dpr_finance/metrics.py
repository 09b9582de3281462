"""Investment metrics over the projection series.

Metrics are computed from the *emitted* projection rows (cash flow, DSCR and
PAT already rounded to 2 decimals), which is what a lender reading the DPR
sees.

OUTPUTS:
--------
- irr: equity IRR (%) on ``[-own_contribution, cf_1..cf_N]``
- npv: NPV of the same flows at the policy discount rate (10%)
- avg_dscr: arithmetic mean of yearly DSCR, degenerate 0-valued years included
- payback_period: fractional years until cumulative cash flow turns
  non-negative (defaults to the full horizon)
- roi: average PAT / total project cost, in %
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from dpr_finance.inputs import FinancialInputs, InvalidInputError
from dpr_finance.irr import discounted_value, irr_newton
from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants
from dpr_finance.projections import YearProjection
from dpr_finance.utils import round2, round_to

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinancialMetrics:
    irr: float
    npv: float
    avg_dscr: float
    payback_period: float
    roi: float

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def payback_period(initial_investment: float, cashflows: Sequence[float], default: float) -> float:
    """Years until cumulative cash flow (starting at ``-initial_investment``) is non-negative.

    The crossing year is interpolated linearly: ``index + |balance before| / flow``.
    Returns ``default`` when the stream never pays back.
    """
    cumulative = -float(initial_investment)
    for i, cf in enumerate(cashflows):
        cumulative += cf
        if cumulative >= 0:
            previous = cumulative - cf
            fraction = abs(previous) / cf if cf != 0 else 0.0
            return i + fraction
    return default


def calculate_metrics(
    projections: Sequence[YearProjection],
    inputs: FinancialInputs,
    policy: PolicyConstants = DEFAULT_POLICY,
) -> FinancialMetrics:
    """Derive IRR, NPV, average DSCR, payback and ROI for one projection run."""
    if not projections:
        raise InvalidInputError("At least one projected year is required")

    equity_flows: List[float] = [p.cash_flow for p in projections]
    flows_for_irr = [-inputs.own_contribution] + equity_flows

    irr = irr_newton(
        flows_for_irr,
        guess=policy.irr_guess,
        tolerance=policy.irr_tolerance,
        max_iterations=policy.irr_max_iterations,
        min_derivative=policy.irr_min_derivative,
    ) * 100
    npv = discounted_value(policy.npv_discount_rate, inputs.own_contribution, equity_flows)
    avg_dscr = sum(p.dscr for p in projections) / len(projections)
    payback = payback_period(inputs.own_contribution, equity_flows, float(policy.horizon_years))
    avg_pat = sum(p.pat for p in projections) / len(projections)
    roi = avg_pat / inputs.project_cost * 100

    metrics = FinancialMetrics(
        irr=round2(irr),
        npv=round2(npv),
        avg_dscr=round2(avg_dscr),
        payback_period=round_to(payback, 1),
        roi=round2(roi),
    )
    logger.info(
        "Metrics: IRR=%.2f%% NPV=%.2f avgDSCR=%.2f payback=%.1fy ROI=%.2f%%",
        metrics.irr,
        metrics.npv,
        metrics.avg_dscr,
        metrics.payback_period,
        metrics.roi,
    )
    return metrics


__all__ = [
    "FinancialMetrics",
    "payback_period",
    "calculate_metrics",
]
