"""
Project configuration loader.

Responsibilities:
- Load YAML / JSON project config files.
- Perform light structural checks only (top level is a mapping, the
  ``financials`` / ``policy`` / ``scenarios`` sections are mappings when
  present).

Field-level rules live with the stages that consume them and are enforced
by dpr_analytics.schema_guard.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

_SECTION_KEYS = ("financials", "policy", "scenarios")


class ScenarioConfigError(ValueError):
    """Configuration-level error for project config loading."""


def _load_raw_config(path: Path) -> Dict[str, Any]:
    """
    Load a raw project configuration from YAML or JSON.

    Only cares that the top level is a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Project config not found: {path}")

    suffix = path.suffix.lower()
    with path.open("r", encoding="utf-8") as f:
        try:
            if suffix in (".yml", ".yaml"):
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ScenarioConfigError(
                    f"Unsupported project config extension '{suffix}' for {path}"
                )
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ScenarioConfigError(f"Could not parse {path}: {exc}") from exc

    if data is None:
        raise ScenarioConfigError(f"Empty configuration in file: {path}")

    if not isinstance(data, dict):
        raise ScenarioConfigError(
            f"Expected a mapping at top level of {path}, "
            f"got {type(data).__name__}"
        )

    return data


def _check_sections(cfg: Dict[str, Any], path: Path) -> None:
    for key in _SECTION_KEYS:
        section = cfg.get(key)
        if section is not None and not isinstance(section, dict):
            raise ScenarioConfigError(
                f"Section '{key}' in {path} must be a mapping, got {type(section).__name__}"
            )


def _ensure_meta_source(cfg: Dict[str, Any], path: Path) -> None:
    """Attach a 'meta.source_path' breadcrumb for diagnostics."""
    meta = cfg.setdefault("meta", {})
    meta.setdefault("source_path", str(path))


def load_scenario_config(path: str | Path) -> Dict[str, Any]:
    """
    Load and lightly normalise a project configuration.

    - Loads YAML/JSON and ensures a top-level mapping.
    - Rejects non-mapping ``financials`` / ``policy`` / ``scenarios`` sections.
    - Attaches meta.source_path for traceability.
    """
    p = Path(path)
    cfg = _load_raw_config(p)
    _check_sections(cfg, p)
    _ensure_meta_source(cfg, p)
    logger.debug("Loaded project config %s (sections: %s)", p, sorted(cfg))
    return cfg


__all__ = [
    "ScenarioConfigError",
    "load_scenario_config",
]
