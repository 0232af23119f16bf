# models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from parsing import parse_field_number, safe_positive
from settings import DEFAULT_ABSORPTION_FACTOR, DEFAULT_EQUIVALENCE_FACTOR

# Raw user value: text as typed (or a number from a seed/import). None = not set.
RawNumber = Union[str, int, float]


def _raw_out(value: Optional[RawNumber]) -> RawNumber:
    return "" if value is None else value


@dataclass
class CategoryRecord:
    id: str
    name: str
    unit: str
    fe: Optional[RawNumber] = None
    consumption: Optional[RawNumber] = None
    method: str = ""
    enabled: bool = True
    custom: bool = True
    has_useful_life: bool = False
    life_span: Optional[RawNumber] = None

    @property
    def fe_value(self) -> float:
        return parse_field_number(self.fe)

    @property
    def consumption_value(self) -> float:
        return parse_field_number(self.consumption)

    @property
    def life_span_value(self) -> float:
        return parse_field_number(self.life_span)

    def to_dict(self) -> Dict[str, Any]:
        """Persisted shape (camelCase keys, empty string for unset values)."""
        return {
            "id": self.id,
            "name": self.name,
            "fe": _raw_out(self.fe),
            "unit": self.unit,
            "method": self.method,
            "enabled": bool(self.enabled),
            "consumption": _raw_out(self.consumption),
            "custom": bool(self.custom),
            "hasUsefulLife": bool(self.has_useful_life),
            "lifeSpan": _raw_out(self.life_span),
        }


@dataclass
class GlobalParameters:
    base_year: str = ""
    unit_name: str = ""
    absorption_factor: str = str(DEFAULT_ABSORPTION_FACTOR)
    equivalence_factor: str = str(DEFAULT_EQUIVALENCE_FACTOR)
    population: str = ""
    use_gha: bool = True

    @property
    def absorption_value(self) -> float:
        return safe_positive(self.absorption_factor, DEFAULT_ABSORPTION_FACTOR)

    @property
    def equivalence_value(self) -> float:
        return safe_positive(self.equivalence_factor, DEFAULT_EQUIVALENCE_FACTOR)

    @property
    def population_value(self) -> float:
        return parse_field_number(self.population)


@dataclass(frozen=True)
class RowMetrics:
    kg: float = 0.0
    ton: float = 0.0
    area_ha: float = 0.0
    gha: float = 0.0
    valid: bool = False

    @classmethod
    def excluded(cls) -> "RowMetrics":
        return cls()

    def amount(self, use_gha: bool) -> float:
        return self.gha if use_gha else self.area_ha


@dataclass
class Snapshot:
    """Validated import/storage payload. Global fields are None when absent."""
    schema: int
    categories: List[Any]
    saved_at: Optional[str] = None
    base_year: Optional[str] = None
    unit_name: Optional[str] = None
    absorption_factor: Optional[str] = None
    equivalence_factor: Optional[str] = None
    population: Optional[str] = None
    use_gha: Optional[bool] = None


@dataclass
class MalformedInput:
    reason: str
