# catalog.py
from __future__ import annotations

import uuid
from typing import Any, Dict, List, Sequence

from models import CategoryRecord

DEFAULT_UNIT = "unit/year"
DEFAULT_METHOD = "Methodology not provided."
DEFAULT_LIFE_SPAN = "50"
CONSTRUCTED_AREA_NAME = "Constructed area"

# Built-in categories. Emission factors are kg CO2 per unit of consumption.
CATEGORY_SEED: List[Dict[str, Any]] = [
    {
        "name": "Electricity",
        "fe": 0.0545,
        "unit": "kWh/year",
        "method": "Implied factor of 2024 institutional emissions (Brazilian grid mix).",
    },
    {
        "name": "Water",
        "fe": 0.5,
        "unit": "m³/year",
        "method": "Amaral (2010) - USC.",
    },
    {
        "name": "Virgin paper",
        "fe": 1.84,
        "unit": "kg/year",
        "method": "USC (apud Amaral, 2010; Soares, 2015).",
    },
    {
        "name": "Recycled paper",
        "fe": 0.61,
        "unit": "kg/year",
        "method": "USC (apud Amaral, 2010; Soares, 2015).",
    },
    {
        "name": "Diesel",
        "fe": 2.671,
        "unit": "L/year",
        "method": "MMA (2011) / Soares (2015).",
    },
    {
        "name": "Gasoline",
        "fe": 2.269,
        "unit": "L/year",
        "method": "MMA (2011) / Soares (2015).",
    },
    {
        "name": "Ethanol",
        "fe": 1.178,
        "unit": "L/year",
        "method": "MMA (2011) / Soares (2015).",
    },
    {
        "name": "Solid waste (landfill)",
        "fe": "",
        "unit": "kg/year",
        "method": "IPCC / specific literature (adjust the FE to the waste type).",
    },
    {
        "name": "Meals",
        "fe": "",
        "unit": "meals/year",
        "method": "Adjust the FE to the menu profile served (literature per meal).",
    },
    {
        "name": CONSTRUCTED_AREA_NAME,
        "fe": 520,
        "unit": "m²",
        "method": "USC (apud Amaral, 2010). Amortized over the building's useful life.",
        "has_useful_life": True,
        "life_span": DEFAULT_LIFE_SPAN,
    },
]


def create_id() -> str:
    return str(uuid.uuid4())


def record_from_seed(seed: Dict[str, Any], **overrides: Any) -> CategoryRecord:
    has_useful_life = bool(seed.get("has_useful_life", False))
    values = dict(
        id=create_id(),
        name=seed["name"],
        unit=seed.get("unit") or DEFAULT_UNIT,
        fe=None if seed.get("fe") in ("", None) else seed["fe"],
        consumption=None,
        method=seed.get("method") or DEFAULT_METHOD,
        enabled=True,
        custom=False,
        has_useful_life=has_useful_life,
        life_span=seed.get("life_span", DEFAULT_LIFE_SPAN) if has_useful_life else None,
    )
    values.update(overrides)
    return CategoryRecord(**values)


def build_default_categories(catalog: Sequence[Dict[str, Any]] = CATEGORY_SEED) -> List[CategoryRecord]:
    return [record_from_seed(seed) for seed in catalog]
