"""Working-capital assessment derived from the projections.

Inventory and payables are one month of expense, receivables one month of
revenue (a fixed 30-day holding heuristic). The bank-financeable share of the
net working-capital gap follows the MPBF convention: ``policy.bank_finance_share``
(75%) of the gap, the balance being the promoter's margin.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants
from dpr_finance.projections import YearProjection
from dpr_finance.utils import round2


@dataclass(frozen=True)
class WorkingCapitalAssessment:
    year: int
    inventory: float
    receivables: float
    payables: float
    net_working_capital: float
    bank_finance: float

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def calculate_working_capital(
    projections: Sequence[YearProjection],
    policy: PolicyConstants = DEFAULT_POLICY,
) -> List[WorkingCapitalAssessment]:
    """One assessment per projected year; no inputs beyond the projections."""
    holding = policy.working_capital_months / 12

    out: List[WorkingCapitalAssessment] = []
    for p in projections:
        inventory = p.expense * holding
        receivables = p.revenue * holding
        payables = p.expense * holding
        net_working_capital = inventory + receivables - payables
        bank_finance = net_working_capital * policy.bank_finance_share

        out.append(
            WorkingCapitalAssessment(
                year=p.year,
                inventory=round2(inventory),
                receivables=round2(receivables),
                payables=round2(payables),
                net_working_capital=round2(net_working_capital),
                bank_finance=round2(bank_finance),
            )
        )
    return out


__all__ = [
    "WorkingCapitalAssessment",
    "calculate_working_capital",
]
