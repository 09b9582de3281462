"""Registry of config fields each DPR pipeline stage expects.

Stages declare what they read from a project config at import time; the
schema guard (``dpr_analytics.schema_guard``) later checks a loaded config
against those declarations. Keeping the declarations next to the code that
consumes the fields means the schema cannot silently drift from it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

ValidatorFn = Callable[[Any], bool]
PathSpec = Tuple[str, ...]

SCHEMA_COLUMNS = [
    "module",
    "name",
    "path_candidates",
    "required",
    "severity",
    "description",
]


@dataclass(frozen=True)
class RequiredFieldSpec:
    """
    Description of one config field needed by a pipeline stage.

    Attributes
    ----------
    module:
        Logical owner ("financials", "scenarios", "policy").
    name:
        Logical key ("loan_tenure", "net_margin", ...).
    paths:
        Candidate paths tried in order, e.g. ("financials", "loan_tenure")
        then ("financials", "loanTenure").
    required:
        True = the field must be present.
    severity:
        "error" blocks a strict run; "warning" is only reported.
    description:
        Human-friendly explanation used in error messages and schema dumps.
    validator:
        Optional predicate returning True when the resolved value is valid.
    """

    module: str
    name: str
    paths: Sequence[PathSpec]
    required: bool = True
    severity: str = "error"
    description: str = ""
    validator: Optional[ValidatorFn] = field(default=None)


_REGISTRY: Dict[str, List[RequiredFieldSpec]] = {}


def register_required_fields(
    module: str,
    specs: Iterable[RequiredFieldSpec],
) -> None:
    """
    Register specs for a module. Re-registering a name replaces the old spec,
    so re-importing a module does not duplicate entries.
    """
    bucket = _REGISTRY.setdefault(module, [])
    for spec in specs:
        bucket[:] = [s for s in bucket if s.name != spec.name]
        bucket.append(spec)


def get_required_fields(module: Optional[str] = None) -> List[RequiredFieldSpec]:
    """Return registered specs, optionally limited to one module."""
    if module is None:
        out: List[RequiredFieldSpec] = []
        for specs in _REGISTRY.values():
            out.extend(specs)
        return out
    return list(_REGISTRY.get(module, []))


def build_schema_dataframe() -> pd.DataFrame:
    """
    Flatten the registry into a DataFrame, sorted by module then name.

    Used by ``run_full_pipeline.py --mode schema`` to show what a project
    config must contain.
    """
    rows: List[Dict[str, Any]] = [
        {
            "module": spec.module,
            "name": spec.name,
            "path_candidates": [".".join(p) for p in spec.paths],
            "required": spec.required,
            "severity": spec.severity,
            "description": spec.description,
        }
        for spec in get_required_fields()
    ]

    if not rows:
        return pd.DataFrame(columns=SCHEMA_COLUMNS)

    df = pd.DataFrame(rows, columns=SCHEMA_COLUMNS)
    return df.sort_values(["module", "name"]).reset_index(drop=True)


# ---------------------------------------------------------------------------
# Reusable validators
# ---------------------------------------------------------------------------


def is_number(value: Any) -> bool:
    """True for finite ints/floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_non_negative(value: Any) -> bool:
    return is_number(value) and value >= 0


def is_whole_years(value: Any) -> bool:
    return is_number(value) and value >= 1 and float(value).is_integer()


__all__ = [
    "RequiredFieldSpec",
    "register_required_fields",
    "get_required_fields",
    "build_schema_dataframe",
    "is_number",
    "is_non_negative",
    "is_whole_years",
    "ValidatorFn",
    "PathSpec",
]
