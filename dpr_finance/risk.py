"""Rule-based financial risk flags.

Each rule is checked independently and may add one flag; rules never
suppress each other. Output order follows the rule order below so callers
and tests get a stable sequence:

1. Average DSCR: below 1.0 is CRITICAL, otherwise below 1.25 is HIGH.
2. Negative cash flow in any year: HIGH, value is the count of such years.
3. Debt/equity above 3.0 (strict): MEDIUM.
4. ROI below the loan interest rate: MEDIUM.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from dpr_finance.inputs import FinancialInputs
from dpr_finance.metrics import FinancialMetrics
from dpr_finance.projections import YearProjection

logger = logging.getLogger(__name__)

DSCR_CRITICAL = 1.0
DSCR_BANK_BENCHMARK = 1.25
MAX_DEBT_EQUITY = 3.0


class RiskLevel(enum.IntEnum):
    """Severity, ordered LOW < MEDIUM < HIGH < CRITICAL."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


@dataclass(frozen=True)
class RiskFlag:
    id: str
    level: RiskLevel
    metric: str
    value: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        out["level"] = self.level.name
        return out


def assess_financial_risks(
    metrics: FinancialMetrics,
    projections: Sequence[YearProjection],
    inputs: FinancialInputs,
) -> List[RiskFlag]:
    """Scan metrics, projections and inputs and return the raised flags."""
    found: List[Dict[str, Any]] = []

    if metrics.avg_dscr < DSCR_CRITICAL:
        found.append(
            {
                "level": RiskLevel.CRITICAL,
                "metric": "Avg DSCR",
                "value": f"{metrics.avg_dscr:.2f}",
                "message": "Debt Service Coverage Ratio is below 1.0. "
                "Project cannot service its debt obligations.",
            }
        )
    elif metrics.avg_dscr < DSCR_BANK_BENCHMARK:
        found.append(
            {
                "level": RiskLevel.HIGH,
                "metric": "Avg DSCR",
                "value": f"{metrics.avg_dscr:.2f}",
                "message": "DSCR is below the bank benchmark of 1.25. Loan rejection likely.",
            }
        )

    negative_years = sum(1 for p in projections if p.cash_flow < 0)
    if negative_years > 0:
        found.append(
            {
                "level": RiskLevel.HIGH,
                "metric": "Cash Flow",
                "value": f"{negative_years} Yrs",
                "message": f"Project has negative net cash flow for {negative_years} years. "
                "Liquidity crunch warning.",
            }
        )

    der = inputs.debt_equity_ratio
    if der > MAX_DEBT_EQUITY:
        found.append(
            {
                "level": RiskLevel.MEDIUM,
                "metric": "Debt/Equity",
                "value": f"{der:.2f}",
                "message": "High Leverage. Promoters contribution is low relative to debt.",
            }
        )

    if metrics.roi < inputs.interest_rate:
        found.append(
            {
                "level": RiskLevel.MEDIUM,
                "metric": "ROI vs Interest",
                "value": f"{metrics.roi:.2f}%",
                "message": "Return on Investment is lower than the Interest Rate. "
                "Project may not be economically efficient.",
            }
        )

    flags = [RiskFlag(id=f"R{i}", **fields) for i, fields in enumerate(found, start=1)]
    if flags:
        logger.info(
            "Risk scan raised %d flag(s): %s",
            len(flags),
            ", ".join(f"{f.metric}={f.level.name}" for f in flags),
        )
    return flags


__all__ = [
    "RiskLevel",
    "RiskFlag",
    "assess_financial_risks",
]
