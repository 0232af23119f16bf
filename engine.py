# engine.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from models import CategoryRecord, GlobalParameters, RowMetrics
from parsing import is_usable


def compute_row(category: CategoryRecord, absorption_factor: float, equivalence_factor: float) -> RowMetrics:
    """
    kg  = consumption * FE / divisor   (divisor = useful life in years, else 1)
    t   = kg / 1000
    ha  = t / absorption factor
    gha = ha * equivalence factor
    """
    if not category.enabled:
        return RowMetrics.excluded()

    consumption = category.consumption_value
    fe = category.fe_value
    if not (is_usable(consumption) and is_usable(fe)):
        return RowMetrics.excluded()

    divisor = 1.0
    if category.has_useful_life:
        divisor = category.life_span_value
        if not is_usable(divisor):
            return RowMetrics.excluded()

    kg = consumption * fe / divisor
    ton = kg / 1000.0
    area_ha = ton / absorption_factor
    gha = area_ha * equivalence_factor
    return RowMetrics(kg=kg, ton=ton, area_ha=area_ha, gha=gha, valid=True)


@dataclass
class Row:
    category: CategoryRecord
    metrics: RowMetrics


@dataclass
class Computation:
    absorption_factor: float
    equivalence_factor: float
    use_gha: bool
    population: float
    rows: List[Row]
    total_ton: float
    total_ha: float
    total_gha: float
    per_capita: Optional[float]  # None = population not informed

    @property
    def total_footprint(self) -> float:
        return self.total_gha if self.use_gha else self.total_ha

    @property
    def unit_label(self) -> str:
        return "gha" if self.use_gha else "ha"

    def breakdown(self) -> List[Tuple[Row, float, float]]:
        """Valid rows, largest first, as (row, amount, percent of total)."""
        total = sum(row.metrics.amount(self.use_gha) for row in self.rows)
        if total <= 0:
            return []
        ranked = sorted(
            (row for row in self.rows if row.metrics.valid),
            key=lambda row: row.metrics.amount(self.use_gha),
            reverse=True,
        )
        return [
            (row, row.metrics.amount(self.use_gha), row.metrics.amount(self.use_gha) / total * 100.0)
            for row in ranked
        ]


def collect_computation(categories: Sequence[CategoryRecord], params: GlobalParameters) -> Computation:
    absorption = params.absorption_value
    equivalence = params.equivalence_value
    population = params.population_value

    rows = [Row(category, compute_row(category, absorption, equivalence)) for category in categories]

    # Invalid rows are all zeros, so no filtering is needed here
    total_ton = sum(row.metrics.ton for row in rows)
    total_ha = sum(row.metrics.area_ha for row in rows)
    total_gha = sum(row.metrics.gha for row in rows)

    per_capita = None
    if is_usable(population):
        per_capita = (total_gha if params.use_gha else total_ha) / population

    return Computation(
        absorption_factor=absorption,
        equivalence_factor=equivalence,
        use_gha=params.use_gha,
        population=population,
        rows=rows,
        total_ton=total_ton,
        total_ha=total_ha,
        total_gha=total_gha,
        per_capita=per_capita,
    )


# ---------------------------------
# Warnings
# ---------------------------------

@dataclass
class Warnings:
    invalid_fe: List[str] = field(default_factory=list)
    invalid_life_span: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.invalid_fe or self.invalid_life_span)

    def messages(self) -> List[str]:
        out = []
        if self.invalid_fe:
            out.append(
                f"Categories {', '.join(self.invalid_fe)} have consumption but an invalid or empty FE. "
                "They are left out of the totals until the FE is fixed."
            )
        if self.invalid_life_span:
            out.append(
                f"Categories {', '.join(self.invalid_life_span)} are amortized but have an invalid or empty "
                "useful life. They are left out of the totals until the useful life is fixed."
            )
        return out


def collect_warnings(categories: Sequence[CategoryRecord]) -> Warnings:
    warnings = Warnings()
    for category in categories:
        if not category.enabled or not is_usable(category.consumption_value):
            continue
        if not is_usable(category.fe_value):
            warnings.invalid_fe.append(category.name)
        if category.has_useful_life and not is_usable(category.life_span_value):
            warnings.invalid_life_span.append(category.name)
    return warnings
