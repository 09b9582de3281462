"""
Schema guard for DPR project configs.

Sits on top of dpr_analytics.config_schema and:
  * lazily imports the stage modules so their registration side-effects run;
  * checks a raw config against every registered field spec.

Usage::

    from dpr_analytics.schema_guard import validate_config

    validate_config(
        raw_config=config,
        config_path="scenarios/textile_unit.yaml",
        modules=["financials", "scenarios"],
        mode="strict",
    )
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from dpr_analytics.config_schema import RequiredFieldSpec, get_required_fields

logger = logging.getLogger(__name__)

PathSpec = Tuple[str, ...]

VALIDATION_MODES = ("strict", "relaxed", "none")


class ConfigValidationError(RuntimeError):
    """Raised when a project config is missing required fields."""


# Logical module name -> module that registers its fields
_MODULE_IMPORTS: Dict[str, str] = {
    "financials": "dpr_analytics.validation",
    "scenarios": "dpr_analytics.scenarios",
}


def _ensure_module_registered(name: str) -> None:
    """Import the module owning ``name`` so its specs are registered (no-op if unknown)."""
    module_path = _MODULE_IMPORTS.get(name)
    if not module_path:
        return
    importlib.import_module(module_path)


def _get_nested(container: Mapping[str, Any], path: PathSpec) -> Any:
    current: Any = container
    for seg in path:
        if not isinstance(current, Mapping) or seg not in current:
            return None
        current = current[seg]
    return current


def resolve_first(raw_config: Mapping[str, Any], paths: Sequence[PathSpec]) -> Any:
    """Return the value at the first candidate path that exists, else None."""
    for path in paths:
        if not path:
            continue
        parent = _get_nested(raw_config, path[:-1])
        if isinstance(parent, Mapping) and path[-1] in parent:
            return parent[path[-1]]
    return None


def _check_spec(raw_config: Mapping[str, Any], spec: RequiredFieldSpec) -> bool:
    val = resolve_first(raw_config, spec.paths)
    if val is None:
        return not spec.required
    if spec.validator is None:
        return True
    try:
        return bool(spec.validator(val))
    except (TypeError, ValueError):
        return False


def find_config_problems(
    raw_config: Mapping[str, Any],
    modules: Sequence[str],
) -> Tuple[List[str], List[str]]:
    """
    Check ``raw_config`` against the specs registered for ``modules``.

    Returns
    -------
    (errors, warnings)
        Human-readable descriptions, split by spec severity.
    """
    for m in modules:
        _ensure_module_registered(m)

    errors: List[str] = []
    warnings: List[str] = []
    for m in modules:
        for spec in get_required_fields(m):
            if _check_spec(raw_config, spec):
                continue
            path_labels = [".".join(p) for p in spec.paths] or ["<no paths registered>"]
            problem = f"{spec.name} (paths: {', '.join(path_labels)})"
            if spec.severity.lower() == "error":
                errors.append(problem)
            else:
                warnings.append(problem)
    return sorted(errors), sorted(warnings)


def validate_config(
    raw_config: Dict[str, Any],
    config_path: str,
    modules: Sequence[str],
    mode: str = "strict",
) -> None:
    """
    Validate a raw YAML/JSON config against the registered field specs.

    Modes:
      * ``strict``  – error-severity problems raise ConfigValidationError.
      * ``relaxed`` – every problem is logged as a warning; nothing raises.
      * ``none``    – skip the check entirely.

    Raises:
        ConfigValidationError: strict mode with at least one error.
        ValueError: unknown mode.
    """
    if mode not in VALIDATION_MODES:
        raise ValueError(f"Unknown validation mode {mode!r}; expected one of {VALIDATION_MODES}")
    if mode == "none":
        logger.debug("Schema validation skipped for %s", config_path)
        return

    errors, warnings = find_config_problems(raw_config, modules)

    for problem in warnings:
        logger.warning("Config '%s': check %s", config_path, problem)

    if not errors:
        return

    details = "; ".join(errors)
    if mode == "relaxed":
        logger.warning(
            "Config '%s' has missing or invalid fields (relaxed mode): %s",
            config_path,
            details,
        )
        return

    raise ConfigValidationError(
        f"Config '{config_path}' is missing or has invalid required fields: {details}"
    )


__all__ = [
    "ConfigValidationError",
    "VALIDATION_MODES",
    "find_config_problems",
    "resolve_first",
    "validate_config",
]
