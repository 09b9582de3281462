"""Smoke tests for CLI invocation of run_full_pipeline.py."""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest
import yaml

REPO_ROOT = Path(__file__).resolve().parents[2]
SCRIPT = REPO_ROOT / "run_full_pipeline.py"
EXAMPLE_CONFIG = REPO_ROOT / "scenarios" / "example_textile_unit.yaml"


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        capture_output=True,
        text=True,
        cwd=str(REPO_ROOT),
        env={**os.environ, "COLUMNS": "200"},
    )


def test_example_config_is_present():
    assert SCRIPT.exists(), f"Pipeline script not found: {SCRIPT}"
    assert EXAMPLE_CONFIG.exists(), f"Missing example config: {EXAMPLE_CONFIG}"


def test_base_mode_text_output():
    result = _run("--mode", "base", "--config", str(EXAMPLE_CONFIG))

    assert result.returncode == 0, result.stderr
    assert "Loan Readiness" in result.stdout


def test_base_mode_json_and_export(tmp_path):
    export = tmp_path / "out" / "base.json"

    result = _run("--mode", "base", "--config", str(EXAMPLE_CONFIG), "--format", "json",
                  "--export", str(export))

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["scenario_name"] == "textile_unit_base"
    assert payload["projections"][0]["pat"] == pytest.approx(4.0)
    assert json.loads(export.read_text(encoding="utf-8")) == payload


def test_scenarios_mode_applies_config_overrides():
    result = _run("--mode", "scenarios", "--config", str(EXAMPLE_CONFIG), "--format", "json")

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert [s["type"] for s in payload] == ["Pessimistic", "Base", "Optimistic"]
    assert payload[0]["inputs"]["interest_rate"] == 14


def test_sensitivity_mode_json():
    result = _run("--mode", "sensitivity", "--config", str(EXAMPLE_CONFIG), "--format", "json")

    assert result.returncode == 0, result.stderr
    rows = json.loads(result.stdout)
    assert len(rows) == 8
    assert {"parameter", "stressed_irr", "swing"} <= set(rows[0])


def test_schema_mode_needs_no_config():
    result = _run("--mode", "schema", "--format", "json")

    assert result.returncode == 0, result.stderr
    rows = json.loads(result.stdout)
    assert any(r["name"] == "loan_required" and r["required"] for r in rows)


def test_failed_evaluation_exits_non_zero(tmp_path):
    cfg = yaml.safe_load(EXAMPLE_CONFIG.read_text(encoding="utf-8"))
    cfg["financials"]["loan_required"] = 5
    bad = tmp_path / "unbalanced.yaml"
    bad.write_text(yaml.safe_dump(cfg), encoding="utf-8")

    result = _run("--mode", "base", "--config", str(bad))

    assert result.returncode == 1
    assert "Mismatch" in result.stderr


def test_missing_config_argument_exits_non_zero():
    assert _run("--mode", "base").returncode == 1
