"""Sector default assumptions.

Typical margins, working-capital needs, depreciation rates and growth for
common MSME sectors. ``apply_sector_defaults`` only fills fields the project
config leaves out; explicit figures always win.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)

SECTOR_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "general_mfg": {
        "label": "Manufacturing (General)",
        "description": "Standard production unit (Plastics, Packaging, Auto Parts)",
        "financials": {
            "net_margin": 12,
            "working_capital_cost": 20,
            "depreciation_machinery": 15,
            "depreciation_building": 5,
            "depreciation_other": 10,
            "revenue_growth_rate": 10,
        },
    },
    "textile": {
        "label": "Textile / Garments",
        "description": "Spinning, Weaving, or Garment manufacturing",
        "financials": {
            "net_margin": 10,
            "working_capital_cost": 25,
            "depreciation_machinery": 15,
            "depreciation_building": 5,
            "depreciation_other": 10,
            "revenue_growth_rate": 12,
        },
    },
    "food_processing": {
        "label": "Food Processing / FMCG",
        "description": "Flour mills, Bakeries, Packaged Food",
        "financials": {
            "net_margin": 15,
            "working_capital_cost": 15,
            "depreciation_machinery": 15,
            "depreciation_building": 5,
            "depreciation_other": 10,
            "revenue_growth_rate": 15,
        },
    },
    "services_it": {
        "label": "IT / Consultancy Services",
        "description": "Software, BPO, Professional Services",
        "financials": {
            "net_margin": 25,
            "working_capital_cost": 5,
            "depreciation_machinery": 40,  # computers
            "depreciation_building": 5,
            "depreciation_other": 10,
            "revenue_growth_rate": 20,
        },
    },
    "retail": {
        "label": "Retail / Trading",
        "description": "Kirana, Supermarket, Wholesalers",
        "financials": {
            "net_margin": 6,
            "working_capital_cost": 10,
            "depreciation_machinery": 10,  # furniture & fixtures
            "depreciation_building": 5,
            "depreciation_other": 5,
            "revenue_growth_rate": 10,
        },
    },
    "logistics": {
        "label": "Logistics / Transport",
        "description": "Fleet owners, Warehousing",
        "financials": {
            "net_margin": 12,
            "working_capital_cost": 10,
            "depreciation_machinery": 30,  # vehicles
            "depreciation_building": 5,
            "depreciation_other": 10,
            "revenue_growth_rate": 15,
        },
    },
    "solar": {
        "label": "Solar / Renewable Energy",
        "description": "Solar Power Plant, EPC",
        "financials": {
            "net_margin": 18,
            "working_capital_cost": 5,
            "depreciation_machinery": 15,
            "depreciation_building": 5,
            "depreciation_other": 5,
            "revenue_growth_rate": 8,
        },
    },
    "restaurant": {
        "label": "Restaurant / Cloud Kitchen",
        "description": "Dine-in, Cafe, Food Delivery",
        "financials": {
            "net_margin": 20,
            "working_capital_cost": 8,
            "depreciation_machinery": 15,
            "depreciation_building": 5,
            "depreciation_other": 15,  # interiors
            "revenue_growth_rate": 18,
        },
    },
}

# camelCase spellings that count as "already provided"
_CAMEL = {
    "net_margin": "netMargin",
    "working_capital_cost": "workingCapitalCost",
    "depreciation_machinery": "depreciationMachinery",
    "depreciation_building": "depreciationBuilding",
    "depreciation_other": "depreciationOther",
    "revenue_growth_rate": "revenueGrowthRate",
}


def apply_sector_defaults(financials: Mapping[str, Any], sector: str) -> Dict[str, Any]:
    """Return a copy of ``financials`` with the sector's missing fields filled.

    Raises
    ------
    KeyError
        Unknown sector key; the message lists the known ones.
    """
    if sector not in SECTOR_TEMPLATES:
        raise KeyError(
            f"Unknown sector {sector!r}; expected one of {', '.join(sorted(SECTOR_TEMPLATES))}"
        )

    merged = dict(financials)
    filled = []
    for key, value in SECTOR_TEMPLATES[sector]["financials"].items():
        if key in merged or _CAMEL.get(key) in merged:
            continue
        merged[key] = value
        filled.append(key)

    if filled:
        logger.info("Sector '%s' defaults applied: %s", sector, ", ".join(filled))
    return merged


__all__ = [
    "SECTOR_TEMPLATES",
    "apply_sector_defaults",
]
