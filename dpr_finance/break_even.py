"""Break-even point from the year-1 projection.

Fixed cost is interest + depreciation + 40% of expense (overheads); the
remaining 60% of expense is treated as variable. The split is a heuristic
held in ``PolicyConstants.fixed_cost_share``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict

from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants
from dpr_finance.projections import YearProjection
from dpr_finance.utils import round2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakEvenPoint:
    fixed_cost: float
    variable_cost: float
    bep_revenue: float
    bep_percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def calculate_break_even(
    year1: YearProjection,
    policy: PolicyConstants = DEFAULT_POLICY,
) -> BreakEvenPoint:
    """Compute break-even revenue and its share of year-1 revenue.

    Raises
    ------
    ZeroDivisionError
        If year-1 revenue is zero (the contribution ratio is undefined).
        Upstream validation is expected to reject such inputs first.
    """
    if year1.revenue == 0:
        raise ZeroDivisionError("Break-even undefined: year-1 revenue is zero")

    fixed_cost = year1.interest + year1.depreciation + year1.expense * policy.fixed_cost_share
    variable_cost = year1.expense * policy.variable_cost_share
    contribution = year1.revenue - variable_cost
    pv_ratio = contribution / year1.revenue

    bep_revenue = fixed_cost / pv_ratio
    bep_percentage = bep_revenue / year1.revenue * 100

    logger.debug(
        "Break-even: fixed=%.4f variable=%.4f ratio=%.4f bep=%.4f (%.2f%%)",
        fixed_cost,
        variable_cost,
        pv_ratio,
        bep_revenue,
        bep_percentage,
    )

    return BreakEvenPoint(
        fixed_cost=round2(fixed_cost),
        variable_cost=round2(variable_cost),
        bep_revenue=round2(bep_revenue),
        bep_percentage=round2(bep_percentage),
    )


__all__ = [
    "BreakEvenPoint",
    "calculate_break_even",
]
