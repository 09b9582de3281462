"""Policy constants for the DPR engine.

Every heuristic the engine relies on (horizon, discount rate, working-capital
norms, break-even cost split, IRR solver settings) lives here in one immutable
container. Components receive a ``PolicyConstants`` explicitly; nothing reads
ambient or global state.

The defaults are the usual DPR appraisal norms and should not be changed
without an explicit requirement:

- ``bank_finance_share`` (0.75) is the MPBF-style share of the net working
  capital gap a bank will fund.
- ``funding_tolerance`` (0.5) is the accepted gap between sources of funds
  and project cost, in the same monetary unit as the inputs.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from dpr_finance.utils import as_float, as_int

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolicyConstants:
    """Tunable but rarely changed engine constants."""

    horizon_years: int = 5
    npv_discount_rate: float = 0.10

    # Working capital: months of flow held as inventory/receivables/payables
    working_capital_months: float = 1.0
    bank_finance_share: float = 0.75

    # Break-even: share of year-1 expense treated as fixed overhead
    fixed_cost_share: float = 0.40

    # Upstream funding check
    funding_tolerance: float = 0.5

    # Newton-Raphson IRR
    irr_guess: float = 0.10
    irr_tolerance: float = 1e-5
    irr_max_iterations: int = 1000
    irr_min_derivative: float = 1e-9

    @property
    def variable_cost_share(self) -> float:
        return 1.0 - self.fixed_cost_share

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


DEFAULT_POLICY = PolicyConstants()

_INT_FIELDS = ("horizon_years", "irr_max_iterations")


def policy_from_mapping(data: Optional[Mapping[str, Any]]) -> PolicyConstants:
    """Build a PolicyConstants from a (possibly partial) config mapping.

    Unknown keys are ignored with a warning so that typos surface in logs
    without breaking a run.
    """
    if not data:
        return DEFAULT_POLICY

    known = {f.name for f in dataclasses.fields(PolicyConstants)}
    changes: Dict[str, Any] = {}
    for key, raw in data.items():
        if key not in known:
            logger.warning("Ignoring unknown policy key %r", key)
            continue
        if key in _INT_FIELDS:
            value = as_int(raw)
        else:
            value = as_float(raw)
        if value is None:
            raise ValueError(f"policy.{key} must be numeric, got {raw!r}")
        changes[key] = value

    policy = dataclasses.replace(DEFAULT_POLICY, **changes)
    if policy.horizon_years < 1:
        raise ValueError("policy.horizon_years must be at least 1")
    if not 0.0 <= policy.fixed_cost_share <= 1.0:
        raise ValueError("policy.fixed_cost_share must lie in [0, 1]")

    logger.debug("Policy overrides applied: %s", changes)
    return policy


__all__ = [
    "PolicyConstants",
    "DEFAULT_POLICY",
    "policy_from_mapping",
]
