"""Canonical CLI for the DPR loan-viability pipeline.

Single entry point for all evaluation modes:
- base: Full evaluation of one project config
- scenarios: Pessimistic / base / optimistic comparison
- sensitivity: Tornado/one-at-a-time analysis
- schema: Registered config fields

Logs go to stderr; tables (``--format text``) or a JSON document
(``--format json``) go to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pandas as pd
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from dpr_analytics.config_schema import build_schema_dataframe
from dpr_analytics.evaluate_project import (
    CONFIG_MODULES,
    evaluate_project_file,
    evaluation_as_dict,
    load_project,
)
from dpr_analytics.frames import (
    amortization_frame,
    projections_frame,
    scenario_comparison_frame,
)
from dpr_analytics.scenarios import run_scenarios
from dpr_analytics.schema_guard import VALIDATION_MODES
from dpr_analytics.sensitivity import create_tornado_chart_data, run_sensitivity_analysis

logger = logging.getLogger(__name__)

console = Console()

# Mode registry for extensibility
MODE_REGISTRY = {
    "base": "Full project evaluation (projections, metrics, risks, readiness)",
    "scenarios": "Pessimistic / base / optimistic comparison",
    "sensitivity": "One-at-a-time sensitivity (tornado order)",
    "schema": "List the config fields the pipeline reads",
}

_STATUS_STYLE = {
    "Approved": "bold green",
    "Borderline": "bold yellow",
    "Rejected": "bold red",
    "Pass": "green",
    "Warning": "yellow",
    "Fail": "red",
}


# =============================================================================
# Rendering helpers
# =============================================================================


def _frame_table(df: pd.DataFrame, title: str, index_label: Optional[str] = None) -> Table:
    """Render a DataFrame as a rich Table; floats shown with 2 decimals."""
    table = Table(title=title, show_lines=False)
    if index_label is not None:
        table.add_column(index_label, justify="right", style="bold")
    for col in df.columns:
        table.add_column(str(col), justify="right")

    for idx, row in df.iterrows():
        cells = [f"{v:,.2f}" if isinstance(v, float) else str(v) for v in row.tolist()]
        if index_label is not None:
            cells.insert(0, str(idx))
        table.add_row(*cells)
    return table


def _emit_json(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")


def _export(payload: Any, export_path: Optional[str]) -> None:
    if not export_path:
        return
    export_path_obj = Path(export_path)
    export_path_obj.parent.mkdir(parents=True, exist_ok=True)
    with open(export_path_obj, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    logger.info("Results exported to: %s", export_path)


# =============================================================================
# Modes
# =============================================================================


def run_base_mode(
    config_path: str,
    validation_mode: str,
    output_format: str,
    export_path: Optional[str],
) -> int:
    """
    Run the full evaluation for one project config.

    Returns
    -------
    int
        Exit code (0 = success, 1 = failure).
    """
    try:
        result = evaluate_project_file(config_path, validation_mode=validation_mode)
        payload = evaluation_as_dict(result)

        if output_format == "json":
            _emit_json(payload)
        else:
            m = result.metrics
            readiness = result.readiness
            style = _STATUS_STYLE.get(readiness.readiness_status.value, "bold")

            console.rule(f"[bold]{result.scenario_name}")
            summary = Table(title="Key Metrics", show_header=False)
            summary.add_column("Metric", style="bold")
            summary.add_column("Value", justify="right")
            summary.add_row("Project cost", f"{result.inputs.project_cost:,.2f}")
            summary.add_row("IRR", f"{m.irr:.2f}%")
            summary.add_row("NPV", f"{m.npv:,.2f}")
            summary.add_row("Average DSCR", f"{m.avg_dscr:.2f}")
            summary.add_row("Payback", f"{m.payback_period:.1f} years")
            summary.add_row("ROI", f"{m.roi:.2f}%")
            summary.add_row(
                "Break-even",
                f"{result.break_even.bep_revenue:,.2f} ({result.break_even.bep_percentage:.2f}%)",
            )
            console.print(summary)

            console.print(_frame_table(projections_frame(result.projections), "Projections", "year"))
            console.print(_frame_table(amortization_frame(result.amortization), "Term Loan Schedule", "year"))

            if result.risks:
                risks = Table(title="Risk Flags")
                for col in ("id", "level", "metric", "value", "message"):
                    risks.add_column(col)
                for r in result.risks:
                    risks.add_row(r.id, r.level.name, r.metric, r.value, r.message)
                console.print(risks)
            else:
                console.print("[green]No risk flags raised.[/green]")

            diag = Table(title=f"Loan Readiness: {readiness.total_score}/100")
            for col in ("criterion", "score", "status", "value", "benchmark", "feedback"):
                diag.add_column(col)
            for d in readiness.metrics:
                diag.add_row(
                    d.name,
                    f"{d.score}/{d.max_score}",
                    f"[{_STATUS_STYLE[d.status.value]}]{d.status.value}[/]",
                    d.value_display,
                    d.benchmark,
                    d.feedback,
                )
            console.print(diag)
            console.print(
                f"[{style}]{readiness.readiness_status.value}[/] "
                f"(approval probability ~{readiness.probability}%): {readiness.summary}"
            )
            for w in result.warnings:
                console.print(f"[yellow]Warning:[/yellow] {w}")

        _export(payload, export_path)
        logger.info("Base evaluation completed successfully")
        return 0

    except Exception as exc:
        logger.error("Base evaluation failed: %s", exc, exc_info=True)
        return 1


def run_scenarios_mode(
    config_path: str,
    validation_mode: str,
    output_format: str,
    export_path: Optional[str],
) -> int:
    """Run the three-way scenario comparison."""
    try:
        config, inputs, policy = load_project(config_path, validation_mode)
        results = run_scenarios(inputs, config.get("scenarios"), policy)
        df = scenario_comparison_frame(results)
        payload = [
            {"type": r.type, "inputs": r.inputs.to_dict(), "metrics": r.metrics.to_dict()}
            for r in results
        ]

        if output_format == "json":
            _emit_json(payload)
        else:
            console.print(_frame_table(df, "Scenario Comparison", "scenario"))

        _export(payload, export_path)
        return 0

    except Exception as exc:
        logger.error("Scenario comparison failed: %s", exc, exc_info=True)
        return 1


def run_sensitivity_mode(
    config_path: str,
    validation_mode: str,
    output_format: str,
    export_path: Optional[str],
) -> int:
    """Run one-at-a-time sensitivity analysis."""
    try:
        _, inputs, policy = load_project(config_path, validation_mode)
        df = run_sensitivity_analysis(inputs, policy)
        payload = df.to_dict(orient="records")

        if output_format == "json":
            _emit_json(payload)
        else:
            view = df[["parameter", "stressed_value", "stressed_irr", "delta_irr",
                       "stressed_avg_dscr", "stressed_score"]]
            console.print(_frame_table(view, "Sensitivity"))
            tornado = create_tornado_chart_data(df) if not df.empty else df
            if not tornado.empty:
                console.print(_frame_table(tornado, "Tornado (IRR %)"))

        _export(payload, export_path)
        return 0

    except Exception as exc:
        logger.error("Sensitivity analysis failed: %s", exc, exc_info=True)
        return 1


def run_schema_mode(
    config_path: Optional[str],
    validation_mode: str,
    output_format: str,
    export_path: Optional[str],
) -> int:
    """List registered config fields."""
    df = build_schema_dataframe()
    df = df[df["module"].isin(CONFIG_MODULES)].reset_index(drop=True)
    payload = df.to_dict(orient="records")

    if output_format == "json":
        _emit_json(payload)
    else:
        view = df.assign(path_candidates=df["path_candidates"].map(", ".join))
        console.print(_frame_table(view, "Project config fields"))

    _export(payload, export_path)
    return 0


_HANDLERS: Dict[str, Callable[[Optional[str], str, str, Optional[str]], int]] = {
    "base": run_base_mode,
    "scenarios": run_scenarios_mode,
    "sensitivity": run_sensitivity_mode,
    "schema": run_schema_mode,
}


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="DPR loan-viability pipeline - canonical entry point",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Available modes:
{chr(10).join(f'  {mode:12s} - {desc}' for mode, desc in MODE_REGISTRY.items())}

Examples:
  # Full evaluation
  python run_full_pipeline.py --mode base --config scenarios/example_textile_unit.yaml

  # Scenario comparison as JSON, also written to disk
  python run_full_pipeline.py --mode scenarios --config scenarios/example_textile_unit.yaml \\
      --format json --export outputs/scenarios.json

  # Skip validation
  python run_full_pipeline.py --mode base --config scenarios/draft.yaml --validation none
        """,
    )

    parser.add_argument(
        "--mode",
        type=str,
        default="base",
        choices=list(MODE_REGISTRY.keys()),
        help="Pipeline execution mode (default: base)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to project config file (YAML/JSON); required except for schema mode",
    )
    parser.add_argument(
        "--validation",
        type=str,
        default="strict",
        choices=list(VALIDATION_MODES),
        help="Schema validation mode (default: strict)",
    )
    parser.add_argument(
        "--format",
        type=str,
        default="text",
        choices=["text", "json"],
        help="Output format on stdout (default: text)",
    )
    parser.add_argument(
        "--export",
        type=str,
        default=None,
        help="Path to export results (JSON format)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Shortcut for --log-level DEBUG",
    )
    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point with mode registry."""
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, args.log_level)
    logging.basicConfig(
        level=level,
        format="%(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )

    if args.mode != "schema" and not args.config:
        logger.error("--config required for %s mode", args.mode)
        return 1

    handler = _HANDLERS[args.mode]
    return handler(args.config, args.validation, args.format, args.export)


if __name__ == "__main__":
    sys.exit(main())
