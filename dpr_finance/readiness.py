"""Loan readiness diagnostic: a weighted five-criterion bank rubric.

| Criterion                  | Max | Bands -> score                          |
|----------------------------|-----|-----------------------------------------|
| DSCR                       | 30  | >=1.5 30, >=1.25 20, >=1.0 10, else 0   |
| Debt/Equity                | 20  | <=1.5 20, <=2.5 15, <=3.0 5, else 0     |
| Break-even %               | 15  | <40 15, <60 10, <75 5, else 0           |
| Promoter contribution %    | 15  | >=30 15, >=25 10, >=15 5, else 0        |
| ROI spread (roi - rate)    | 20  | >10 20, >5 15, >0 5, else 0             |

The total (max 100) maps to Approved (>=75, 90%), Borderline (>=50, 50%)
or Rejected (20%). This is a deterministic lookup, not a statistical model;
the probabilities are fixed per tier.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
import operator
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from dpr_finance.break_even import BreakEvenPoint
from dpr_finance.inputs import FinancialInputs
from dpr_finance.metrics import FinancialMetrics
from dpr_finance.projections import YearProjection

logger = logging.getLogger(__name__)

MAX_POSSIBLE_SCORE = 100


class DiagnosticStatus(str, enum.Enum):
    PASS = "Pass"
    WARNING = "Warning"
    FAIL = "Fail"


class ReadinessStatus(str, enum.Enum):
    APPROVED = "Approved"
    BORDERLINE = "Borderline"
    REJECTED = "Rejected"


@dataclass(frozen=True)
class DiagnosticMetric:
    name: str
    score: int
    max_score: int
    status: DiagnosticStatus
    value_display: str
    benchmark: str
    feedback: str
    fix_action: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        out["status"] = self.status.value
        return out


@dataclass(frozen=True)
class LoanReadinessReport:
    total_score: int
    readiness_status: ReadinessStatus
    probability: int
    metrics: Tuple[DiagnosticMetric, ...]
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "readiness_status": self.readiness_status.value,
            "probability": self.probability,
            "metrics": [m.to_dict() for m in self.metrics],
            "summary": self.summary,
        }


# ============================================================================
# Band tables
# ============================================================================

# (threshold, score, status, feedback, fix_action); first match wins
Band = Tuple[float, int, DiagnosticStatus, str, Optional[str]]
# (score, status, feedback, fix_action) when no band matches
Fallback = Tuple[int, DiagnosticStatus, str, Optional[str]]

_DSCR_BANDS: Sequence[Band] = (
    (1.5, 30, DiagnosticStatus.PASS, "Excellent cash flow to service debt.", None),
    (1.25, 20, DiagnosticStatus.PASS, "Meets minimum banking standards.", None),
    (
        1.0,
        10,
        DiagnosticStatus.WARNING,
        "Cash flow is tight. High risk of default.",
        "Increase Loan Tenure or Reduce Loan Amount.",
    ),
)
_DSCR_FALLBACK: Fallback = (
    0,
    DiagnosticStatus.FAIL,
    "Project cannot repay loan from profits.",
    "Increase Equity, Reduce Loan, or Improve Margins.",
)

_DER_BANDS: Sequence[Band] = (
    (1.5, 20, DiagnosticStatus.PASS, "Conservative leverage. Very safe.", None),
    (2.5, 15, DiagnosticStatus.PASS, "Standard leverage ratio.", None),
    (
        3.0,
        5,
        DiagnosticStatus.WARNING,
        "High leverage. Promoter stake is low.",
        "Increase Promoter Contribution.",
    ),
)
_DER_FALLBACK: Fallback = (
    0,
    DiagnosticStatus.FAIL,
    "Over-leveraged. Banks rarely fund > 3:1.",
    "Must inject more Own Capital.",
)

_BEP_FIX = "Reduce Fixed Costs (Overheads)"
_BEP_BANDS: Sequence[Band] = (
    (40, 15, DiagnosticStatus.PASS, "Low risk. Profits start early.", None),
    (60, 10, DiagnosticStatus.PASS, "Acceptable risk profile.", None),
    (75, 5, DiagnosticStatus.WARNING, "High BEP. Vulnerable to sales drop.", _BEP_FIX),
)
_BEP_FALLBACK: Fallback = (
    0,
    DiagnosticStatus.FAIL,
    "Very risky. Requires high sales to survive.",
    _BEP_FIX,
)

_PROMOTER_FIX = "Increase Own Capital."
_PROMOTER_BANDS: Sequence[Band] = (
    (30, 15, DiagnosticStatus.PASS, "Adequate stake.", None),
    (25, 10, DiagnosticStatus.PASS, "Adequate stake.", None),
    (15, 5, DiagnosticStatus.WARNING, "Adequate stake.", _PROMOTER_FIX),
)
_PROMOTER_FALLBACK: Fallback = (
    0,
    DiagnosticStatus.FAIL,
    "Skin in the game is too low.",
    _PROMOTER_FIX,
)

_ROI_FIX = "Improve Net Margins or Revenue."
_ROI_BANDS: Sequence[Band] = (
    (10, 20, DiagnosticStatus.PASS, "Return is higher than cost of capital.", None),
    (5, 15, DiagnosticStatus.PASS, "Return is higher than cost of capital.", None),
    (0, 5, DiagnosticStatus.WARNING, "Return is higher than cost of capital.", None),
)
_ROI_FALLBACK: Fallback = (
    0,
    DiagnosticStatus.FAIL,
    "Return is lower than cost of capital.",
    _ROI_FIX,
)

# (minimum total, status, probability %, summary)
_TIERS: Sequence[Tuple[int, ReadinessStatus, int, str]] = (
    (
        75,
        ReadinessStatus.APPROVED,
        90,
        "Highly Bankable Project. Meets or exceeds all major financial norms.",
    ),
    (
        50,
        ReadinessStatus.BORDERLINE,
        50,
        "Viable but has weaknesses. May require additional collateral or guarantor.",
    ),
)
_REJECTED_TIER = (
    ReadinessStatus.REJECTED,
    20,
    "High Rejection Risk. Key financial ratios (DSCR/DER) are outside banking norms.",
)


def _grade(
    name: str,
    max_score: int,
    value: float,
    compare: Callable[[float, float], bool],
    bands: Sequence[Band],
    fallback: Fallback,
    value_display: str,
    benchmark: str,
) -> DiagnosticMetric:
    """Score ``value`` against the first band whose threshold it satisfies."""
    for threshold, score, status, feedback, fix in bands:
        if compare(value, threshold):
            break
    else:
        score, status, feedback, fix = fallback

    return DiagnosticMetric(
        name=name,
        score=score,
        max_score=max_score,
        status=status,
        value_display=value_display,
        benchmark=benchmark,
        feedback=feedback,
        fix_action=fix,
    )


def _tier(total_score: int) -> Tuple[ReadinessStatus, int, str]:
    for minimum, status, probability, summary in _TIERS:
        if total_score >= minimum:
            return status, probability, summary
    return _REJECTED_TIER


# ============================================================================
# Public API
# ============================================================================


def calculate_loan_readiness(
    inputs: FinancialInputs,
    metrics: FinancialMetrics,
    projections: Sequence[YearProjection],
    break_even: BreakEvenPoint,
) -> LoanReadinessReport:
    """Score the project against the bank rubric.

    ``projections`` is accepted for parity with the rest of the pipeline;
    every criterion is derived from the metrics, inputs and break-even.
    """
    der = inputs.debt_equity_ratio
    promoter_share = inputs.promoter_share_pct
    spread = metrics.roi - inputs.interest_rate

    diagnostics: List[DiagnosticMetric] = [
        _grade(
            "DSCR (Repayment Capacity)",
            30,
            metrics.avg_dscr,
            operator.ge,
            _DSCR_BANDS,
            _DSCR_FALLBACK,
            f"{metrics.avg_dscr:.2f}",
            "> 1.25",
        ),
        _grade(
            "Debt-Equity Ratio (Leverage)",
            20,
            der,
            operator.le,
            _DER_BANDS,
            _DER_FALLBACK,
            f"{der:.2f}",
            "< 3.0",
        ),
        _grade(
            "Break-Even Point (Risk)",
            15,
            break_even.bep_percentage,
            operator.lt,
            _BEP_BANDS,
            _BEP_FALLBACK,
            f"{break_even.bep_percentage:.0f}%",
            "< 60%",
        ),
        _grade(
            "Promoter Contribution",
            15,
            promoter_share,
            operator.ge,
            _PROMOTER_BANDS,
            _PROMOTER_FALLBACK,
            f"{promoter_share:.1f}%",
            "> 25%",
        ),
        _grade(
            "Economic Viability (ROI Spread)",
            20,
            spread,
            operator.gt,
            _ROI_BANDS,
            _ROI_FALLBACK,
            f"{metrics.roi:.1f}%",
            f"> {inputs.interest_rate + 5:g}%",
        ),
    ]

    total_score = sum(d.score for d in diagnostics)
    status, probability, summary = _tier(total_score)

    logger.info(
        "Loan readiness: %d/%d -> %s (%d%%) over %d projected years",
        total_score,
        MAX_POSSIBLE_SCORE,
        status.value,
        probability,
        len(projections),
    )

    return LoanReadinessReport(
        total_score=total_score,
        readiness_status=status,
        probability=probability,
        metrics=tuple(diagnostics),
        summary=summary,
    )


__all__ = [
    "MAX_POSSIBLE_SCORE",
    "DiagnosticStatus",
    "ReadinessStatus",
    "DiagnosticMetric",
    "LoanReadinessReport",
    "calculate_loan_readiness",
]
