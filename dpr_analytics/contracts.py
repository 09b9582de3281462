"""DPR contracts and data structures.

Containers produced by the pipeline layer. The engine-level records
(YearProjection, FinancialMetrics, ...) live with the code that builds them
in dpr_finance; these bundle them per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from dpr_finance.amortization import AmortizationEntry
from dpr_finance.break_even import BreakEvenPoint
from dpr_finance.inputs import FinancialInputs
from dpr_finance.metrics import FinancialMetrics
from dpr_finance.policy import PolicyConstants
from dpr_finance.projections import YearProjection
from dpr_finance.readiness import LoanReadinessReport
from dpr_finance.risk import RiskFlag
from dpr_finance.working_capital import WorkingCapitalAssessment


@dataclass(frozen=True)
class ProjectEvaluation:
    """Every output of one full pipeline run for a single set of inputs."""

    scenario_name: str
    inputs: FinancialInputs
    policy: PolicyConstants
    projections: Tuple[YearProjection, ...]
    amortization: Tuple[AmortizationEntry, ...]
    working_capital: Tuple[WorkingCapitalAssessment, ...]
    break_even: BreakEvenPoint
    metrics: FinancialMetrics
    risks: Tuple[RiskFlag, ...]
    readiness: LoanReadinessReport
    warnings: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ScenarioResult:
    """Projection and metrics for one scenario variant (base/optimistic/pessimistic)."""

    type: str
    inputs: FinancialInputs
    projections: Tuple[YearProjection, ...]
    metrics: FinancialMetrics


__all__ = [
    "ProjectEvaluation",
    "ScenarioResult",
]
