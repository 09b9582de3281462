"""Central project evaluator: one config in, one ProjectEvaluation out."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dpr_analytics.contracts import ProjectEvaluation
from dpr_analytics.scenario_loader import load_scenario_config
from dpr_analytics.schema_guard import validate_config
from dpr_analytics.sectors import apply_sector_defaults
from dpr_analytics.validation import ensure_valid_inputs
from dpr_finance.amortization import calculate_amortization
from dpr_finance.break_even import calculate_break_even
from dpr_finance.inputs import FinancialInputs
from dpr_finance.metrics import calculate_metrics
from dpr_finance.policy import DEFAULT_POLICY, PolicyConstants, policy_from_mapping
from dpr_finance.projections import calculate_projections
from dpr_finance.readiness import calculate_loan_readiness
from dpr_finance.risk import assess_financial_risks
from dpr_finance.working_capital import calculate_working_capital

logger = logging.getLogger(__name__)

CONFIG_MODULES = ("financials", "scenarios")


def evaluate_project(
    inputs: FinancialInputs,
    policy: PolicyConstants = DEFAULT_POLICY,
    scenario_name: str = "base",
) -> ProjectEvaluation:
    """Run the full DPR pipeline for one set of inputs.

    Order: validate, projections, amortization, working capital, break-even,
    metrics, risks, readiness.

    Raises
    ------
    FundingValidationError
        Inputs fail a blocking business check.
    InvalidInputError
        Inputs are non-finite or the tax rate makes the gross-up undefined.
    """
    report = ensure_valid_inputs(inputs, policy)

    projections = calculate_projections(inputs, policy)
    amortization = calculate_amortization(inputs)
    working_capital = calculate_working_capital(projections, policy)
    break_even = calculate_break_even(projections[0], policy)
    metrics = calculate_metrics(projections, inputs, policy)
    risks = assess_financial_risks(metrics, projections, inputs)
    readiness = calculate_loan_readiness(inputs, metrics, projections, break_even)

    logger.info(
        "Project '%s': cost=%.2f IRR=%.2f%% NPV=%.2f avgDSCR=%.2f score=%d (%s), %d risk flag(s)",
        scenario_name,
        inputs.project_cost,
        metrics.irr,
        metrics.npv,
        metrics.avg_dscr,
        readiness.total_score,
        readiness.readiness_status.value,
        len(risks),
    )

    return ProjectEvaluation(
        scenario_name=scenario_name,
        inputs=inputs,
        policy=policy,
        projections=tuple(projections),
        amortization=tuple(amortization),
        working_capital=tuple(working_capital),
        break_even=break_even,
        metrics=metrics,
        risks=tuple(risks),
        readiness=readiness,
        warnings=list(report.warnings),
    )


def load_project(
    config_path: str,
    validation_mode: str = "strict",
) -> Tuple[Dict[str, Any], FinancialInputs, PolicyConstants]:
    """Load a project config and turn it into engine inputs.

    Sector defaults are merged into ``financials`` before the schema check,
    so a config may omit any field its sector template supplies.

    Returns
    -------
    tuple
        ``(config, inputs, policy)`` where ``config`` carries the merged
        ``financials`` section.
    """
    path_obj = Path(config_path)
    if not path_obj.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    logger.info("Loading project config: %s", config_path)
    config = load_scenario_config(path_obj)

    financials = dict(config.get("financials") or {})
    sector = config.get("sector")
    if sector:
        financials = apply_sector_defaults(financials, str(sector))
    config["financials"] = financials

    validate_config(
        config,
        config_path=str(config_path),
        modules=CONFIG_MODULES,
        mode=validation_mode,
    )

    policy = policy_from_mapping(config.get("policy"))
    inputs = FinancialInputs.from_mapping(financials)
    return config, inputs, policy


def evaluate_project_file(
    config_path: str,
    scenario_name: Optional[str] = None,
    validation_mode: str = "strict",
) -> ProjectEvaluation:
    """Evaluate a project straight from its YAML/JSON config.

    Parameters
    ----------
    config_path : str
        Path to the project config.
    scenario_name : Optional[str]
        Override the run name (default: ``scenario_name`` from config, else
        the file stem).
    validation_mode : str
        ``strict``, ``relaxed`` or ``none``; see schema_guard.validate_config.
    """
    config, inputs, policy = load_project(config_path, validation_mode)

    if scenario_name is None:
        scenario_name = str(config.get("scenario_name", Path(config_path).stem))

    evaluation = evaluate_project(inputs, policy, scenario_name)
    evaluation.meta.update(
        {
            "config_path": str(config_path),
            "sector": config.get("sector"),
            "validation_mode": validation_mode,
        }
    )
    return evaluation


def evaluation_as_dict(evaluation: ProjectEvaluation) -> Dict[str, Any]:
    """Flatten an evaluation into plain JSON-serialisable structures."""
    return {
        "scenario_name": evaluation.scenario_name,
        "inputs": evaluation.inputs.to_dict(),
        "policy": evaluation.policy.to_dict(),
        "projections": [p.to_dict() for p in evaluation.projections],
        "amortization": [a.to_dict() for a in evaluation.amortization],
        "working_capital": [w.to_dict() for w in evaluation.working_capital],
        "break_even": evaluation.break_even.to_dict(),
        "metrics": evaluation.metrics.to_dict(),
        "risks": [r.to_dict() for r in evaluation.risks],
        "readiness": evaluation.readiness.to_dict(),
        "warnings": list(evaluation.warnings),
        "meta": dict(evaluation.meta),
    }


__all__ = [
    "CONFIG_MODULES",
    "evaluate_project",
    "load_project",
    "evaluate_project_file",
    "evaluation_as_dict",
]
