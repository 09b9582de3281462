"""Scenario driver: base / optimistic / pessimistic variants of one project.

Each variant overrides three assumptions (revenue growth, net margin,
interest rate) on a copy of the base inputs and runs projections + metrics
once. Variants share nothing, so they can be evaluated in any order.

Default modifiers (percentage points):

- optimistic: growth +5, margin +2 (capped at 99), interest -1 (floored at 1)
- pessimistic: growth -5 (floored at 0), margin -3 (floored at 1), interest +2

A project config may override any of them under ``scenarios:``.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from dpr_analytics.config_schema import RequiredFieldSpec, is_number, register_required_fields
from dpr_analytics.contracts import ScenarioResult
from dpr_finance.inputs import FinancialInputs
from dpr_finance.metrics import calculate_metrics
from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants
from dpr_finance.projections import calculate_projections
from dpr_finance.utils import as_float

logger = logging.getLogger(__name__)

BASE = "Base"
OPTIMISTIC = "Optimistic"
PESSIMISTIC = "Pessimistic"

# Presentation order: worst case first
SCENARIO_ORDER = (PESSIMISTIC, BASE, OPTIMISTIC)

_MODIFIER_KEYS = ("growth", "margin", "interest")


@dataclass(frozen=True)
class ScenarioModifiers:
    """Absolute values (not deltas) applied to a scenario's inputs."""

    growth: float
    margin: float
    interest: float


register_required_fields(
    "scenarios",
    [
        RequiredFieldSpec(
            "scenarios",
            f"{scenario.lower()}.{key}",
            (("scenarios", scenario.lower(), key),),
            required=False,
            description=f"{scenario} scenario {key} (%)",
            validator=is_number,
        )
        for scenario in SCENARIO_ORDER
        for key in _MODIFIER_KEYS
    ],
)


def default_modifiers(inputs: FinancialInputs) -> Dict[str, ScenarioModifiers]:
    """Standard stress settings derived from the base assumptions."""
    return {
        PESSIMISTIC: ScenarioModifiers(
            growth=max(inputs.revenue_growth_rate - 5, 0),
            margin=max(inputs.net_margin - 3, 1),
            interest=inputs.interest_rate + 2,
        ),
        BASE: ScenarioModifiers(
            growth=inputs.revenue_growth_rate,
            margin=inputs.net_margin,
            interest=inputs.interest_rate,
        ),
        OPTIMISTIC: ScenarioModifiers(
            growth=inputs.revenue_growth_rate + 5,
            margin=min(inputs.net_margin + 2, 99),
            interest=max(inputs.interest_rate - 1, 1),
        ),
    }


def _merge_overrides(
    defaults: Dict[str, ScenarioModifiers],
    overrides: Optional[Mapping[str, Mapping[str, Any]]],
) -> Dict[str, ScenarioModifiers]:
    if not overrides:
        return defaults

    by_key = {name.lower(): name for name in defaults}
    merged = dict(defaults)
    for raw_name, values in overrides.items():
        name = by_key.get(str(raw_name).lower())
        if name is None:
            logger.warning("Ignoring unknown scenario %r", raw_name)
            continue
        changes: Dict[str, float] = {}
        for key in _MODIFIER_KEYS:
            if key in (values or {}):
                value = as_float(values[key])
                if value is None:
                    raise ValueError(f"scenarios.{raw_name}.{key} must be numeric")
                changes[key] = value
        merged[name] = dataclasses.replace(merged[name], **changes)
    return merged


def calculate_scenario(
    base_inputs: FinancialInputs,
    scenario_type: str,
    modifiers: ScenarioModifiers,
    policy: PolicyConstants = DEFAULT_POLICY,
) -> ScenarioResult:
    """Run projections and metrics for one variant of the base inputs."""
    inputs = base_inputs.with_overrides(
        revenue_growth_rate=modifiers.growth,
        net_margin=modifiers.margin,
        interest_rate=modifiers.interest,
    )
    projections = calculate_projections(inputs, policy)
    metrics = calculate_metrics(projections, inputs, policy)
    return ScenarioResult(
        type=scenario_type,
        inputs=inputs,
        projections=tuple(projections),
        metrics=metrics,
    )


def run_scenarios(
    base_inputs: FinancialInputs,
    overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
    policy: PolicyConstants = DEFAULT_POLICY,
) -> List[ScenarioResult]:
    """Evaluate pessimistic, base and optimistic variants, in that order."""
    modifiers = _merge_overrides(default_modifiers(base_inputs), overrides)

    results: List[ScenarioResult] = []
    for name in SCENARIO_ORDER:
        result = calculate_scenario(base_inputs, name, modifiers[name], policy)
        logger.info(
            "Scenario %-11s growth=%.1f%% margin=%.1f%% interest=%.1f%% -> IRR=%.2f%% avgDSCR=%.2f",
            name,
            modifiers[name].growth,
            modifiers[name].margin,
            modifiers[name].interest,
            result.metrics.irr,
            result.metrics.avg_dscr,
        )
        results.append(result)
    return results


__all__ = [
    "BASE",
    "OPTIMISTIC",
    "PESSIMISTIC",
    "SCENARIO_ORDER",
    "ScenarioModifiers",
    "default_modifiers",
    "calculate_scenario",
    "run_scenarios",
]
