"""Financial input assumptions for a single DPR computation.

``FinancialInputs`` is the only thing the engine consumes. It is immutable:
scenario variants are produced with ``with_overrides`` rather than by mutating
an instance. Total project cost is derived from the five cost components and
cannot be set on its own.

All monetary fields share one currency-agnostic unit (lakhs in practice).
Rates are annual percentages (11 means 11%).
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from dpr_finance.utils import as_float

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when an engine precondition is violated (fatal, fail fast)."""


# camelCase aliases accepted by from_mapping (form/JSON payloads use them)
_ALIASES: Dict[str, str] = {
    "landCost": "land_cost",
    "buildingCost": "building_cost",
    "machineryCost": "machinery_cost",
    "workingCapitalCost": "working_capital_cost",
    "otherCost": "other_cost",
    "ownContribution": "own_contribution",
    "loanRequired": "loan_required",
    "interestRate": "interest_rate",
    "year1Revenue": "year1_revenue",
    "revenueGrowthRate": "revenue_growth_rate",
    "netMargin": "net_margin",
    "incomeTaxRate": "income_tax_rate",
    "depreciationBuilding": "depreciation_building",
    "depreciationMachinery": "depreciation_machinery",
    "depreciationOther": "depreciation_other",
    "loanTenure": "loan_tenure",
}


@dataclass(frozen=True)
class FinancialInputs:
    """Business and loan assumptions driving the projection pipeline."""

    land_cost: float
    building_cost: float
    machinery_cost: float
    working_capital_cost: float
    other_cost: float
    own_contribution: float
    loan_required: float
    interest_rate: float
    year1_revenue: float
    revenue_growth_rate: float
    net_margin: float
    income_tax_rate: float = 25.0
    depreciation_building: float = 5.0
    depreciation_machinery: float = 15.0
    depreciation_other: float = 10.0
    loan_tenure: int = 7

    # ------------------------------------------------------------------
    # Derived figures
    # ------------------------------------------------------------------
    @property
    def project_cost(self) -> float:
        """Sum of the five cost components (never stored)."""
        return (
            self.land_cost
            + self.building_cost
            + self.machinery_cost
            + self.working_capital_cost
            + self.other_cost
        )

    @property
    def gross_block(self) -> float:
        """Fixed assets at cost: everything except working capital."""
        return self.land_cost + self.building_cost + self.machinery_cost + self.other_cost

    @property
    def debt_equity_ratio(self) -> float:
        """Loan over promoter contribution; ``inf`` for a fully debt-funded project."""
        if self.own_contribution == 0:
            return math.inf
        return self.loan_required / self.own_contribution

    @property
    def promoter_share_pct(self) -> float:
        return self.own_contribution / self.project_cost * 100

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FinancialInputs":
        """Build inputs from a snake_case or camelCase mapping.

        A supplied ``project_cost``/``projectCost`` is ignored: the total is
        always recomputed from its components.
        """
        normalised: Dict[str, Any] = {}
        for key, value in data.items():
            normalised[_ALIASES.get(key, key)] = value

        supplied_total = normalised.pop("project_cost", normalised.pop("projectCost", None))

        kwargs: Dict[str, Any] = {}
        missing = []
        for f in dataclasses.fields(cls):
            if f.name not in normalised:
                if f.default is dataclasses.MISSING:
                    missing.append(f.name)
                continue
            raw = normalised[f.name]
            if f.name == "loan_tenure":
                tenure = as_float(raw)
                if tenure is None or not math.isfinite(tenure) or tenure != int(tenure):
                    raise InvalidInputError(f"loan_tenure must be a whole number of years, got {raw!r}")
                kwargs[f.name] = int(tenure)
                continue
            value = as_float(raw)
            if value is None:
                raise InvalidInputError(f"{f.name} must be numeric, got {raw!r}")
            kwargs[f.name] = value

        if missing:
            raise InvalidInputError(f"Missing financial inputs: {', '.join(sorted(missing))}")

        inputs = cls(**kwargs)
        total = as_float(supplied_total)
        if total is not None and abs(total - inputs.project_cost) > 1e-9:
            logger.debug(
                "Ignoring supplied project cost %.2f; derived total is %.2f",
                total,
                inputs.project_cost,
            )
        return inputs

    def with_overrides(self, **changes: Any) -> "FinancialInputs":
        """Return a copy with some assumptions replaced."""
        return dataclasses.replace(self, **changes)

    def check_finite(self) -> None:
        """Raise InvalidInputError if any field is NaN or infinite."""
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise InvalidInputError(f"{f.name} must be finite, got {value!r}")

    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        out["project_cost"] = self.project_cost
        return out


__all__ = [
    "FinancialInputs",
    "InvalidInputError",
]
