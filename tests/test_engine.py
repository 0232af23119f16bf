"""Tests for row computation, aggregation, breakdown and warnings."""

from __future__ import annotations

import pytest

from engine import collect_computation, collect_warnings, compute_row
from models import CategoryRecord, GlobalParameters, RowMetrics

ABSORPTION = 6.27
EQUIVALENCE = 1.37


def _cat(name: str = "Water", consumption="10", fe=2, **kw) -> CategoryRecord:
    return CategoryRecord(id=f"id-{name}", name=name, unit="u", fe=fe, consumption=consumption, **kw)


# ===================================================================
# Row computation
# ===================================================================


class TestComputeRow:
    def test_reference_values(self) -> None:
        m = compute_row(_cat(), ABSORPTION, EQUIVALENCE)

        assert m.valid
        assert m.kg == pytest.approx(20.0)
        assert m.ton == pytest.approx(0.02)
        assert m.area_ha == pytest.approx(0.0031897926)
        assert m.gha == pytest.approx(0.0043700159)

    def test_regional_text_inputs(self) -> None:
        m = compute_row(_cat(consumption="1.000,5", fe="0,5"), ABSORPTION, EQUIVALENCE)
        assert m.kg == pytest.approx(500.25)

    def test_amortized_is_one_fiftieth(self) -> None:
        full = compute_row(_cat(), ABSORPTION, EQUIVALENCE)
        amortized = compute_row(_cat(has_useful_life=True, life_span="50"), ABSORPTION, EQUIVALENCE)

        assert amortized.valid
        assert amortized.kg == pytest.approx(full.kg / 50)
        assert amortized.ton == pytest.approx(full.ton / 50)
        assert amortized.area_ha == pytest.approx(full.area_ha / 50)
        assert amortized.gha == pytest.approx(full.gha / 50)

    def test_life_span_ignored_without_useful_life(self) -> None:
        m = compute_row(_cat(life_span="0"), ABSORPTION, EQUIVALENCE)
        assert m.valid
        assert m.kg == pytest.approx(20.0)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"enabled": False},
            {"consumption": None},
            {"consumption": ""},
            {"consumption": "0"},
            {"consumption": "-5"},
            {"consumption": "abc"},
            {"fe": None},
            {"fe": "0"},
            {"fe": "-1"},
            {"has_useful_life": True, "life_span": None},
            {"has_useful_life": True, "life_span": "0"},
            {"has_useful_life": True, "life_span": "ten"},
        ],
    )
    def test_exclusions_are_zero_and_invalid(self, overrides) -> None:
        m = compute_row(_cat(**overrides), ABSORPTION, EQUIVALENCE)
        assert m == RowMetrics.excluded()
        assert not m.valid

    def test_does_not_mutate_record(self) -> None:
        cat = _cat(consumption="1.234,5")
        compute_row(cat, ABSORPTION, EQUIVALENCE)
        assert cat.consumption == "1.234,5"


# ===================================================================
# Aggregation
# ===================================================================


@pytest.fixture
def params() -> GlobalParameters:
    return GlobalParameters(population="4", use_gha=True)


@pytest.fixture
def categories() -> list:
    return [
        _cat("Water", consumption="10", fe=2),
        _cat("Diesel", consumption="100", fe="2,671"),
        _cat("Waste", consumption="50", fe=None),
    ]


class TestCollectComputation:
    def test_totals_are_sums_of_valid_rows(self, categories, params) -> None:
        comp = collect_computation(categories, params)
        valid = [r.metrics for r in comp.rows if r.metrics.valid]

        assert len(valid) == 2
        assert comp.total_ton == pytest.approx(sum(m.ton for m in valid))
        assert comp.total_ha == pytest.approx(sum(m.area_ha for m in valid))
        assert comp.total_gha == pytest.approx(sum(m.gha for m in valid))

    def test_invalid_row_leaves_totals_unchanged(self, categories, params) -> None:
        before = collect_computation(categories, params)
        after = collect_computation(categories + [_cat("Broken", consumption="x")], params)

        assert after.total_ton == before.total_ton
        assert after.total_ha == before.total_ha
        assert after.total_gha == before.total_gha
        assert len(after.rows) == len(before.rows) + 1

    def test_per_capita_uses_gha(self, categories, params) -> None:
        comp = collect_computation(categories, params)
        assert comp.per_capita == pytest.approx(comp.total_gha / 4)

    def test_per_capita_uses_ha(self, categories, params) -> None:
        params.use_gha = False
        comp = collect_computation(categories, params)
        assert comp.per_capita == pytest.approx(comp.total_ha / 4)
        assert comp.total_footprint == comp.total_ha
        assert comp.unit_label == "ha"

    @pytest.mark.parametrize("population", ["", "0", "-3", "many"])
    def test_per_capita_unavailable(self, categories, params, population) -> None:
        params.population = population
        assert collect_computation(categories, params).per_capita is None

    def test_factor_fallbacks(self, categories) -> None:
        comp = collect_computation(categories, GlobalParameters(absorption_factor="", equivalence_factor="abc"))
        assert comp.absorption_factor == 6.27
        assert comp.equivalence_factor == 1.37

    def test_custom_factors(self, categories) -> None:
        comp = collect_computation(categories, GlobalParameters(absorption_factor="2", equivalence_factor="1"))
        water = comp.rows[0].metrics
        assert water.area_ha == pytest.approx(0.01)
        assert water.gha == pytest.approx(0.01)

    def test_repeatable(self, categories, params) -> None:
        assert collect_computation(categories, params) == collect_computation(categories, params)


class TestBreakdown:
    def test_valid_rows_sorted_descending(self, categories, params) -> None:
        ranked = collect_computation(categories, params).breakdown()

        assert [row.category.name for row, _, _ in ranked] == ["Diesel", "Water"]
        assert sum(pct for _, _, pct in ranked) == pytest.approx(100.0)
        assert ranked[0][1] >= ranked[1][1]

    def test_empty_when_nothing_valid(self, params) -> None:
        comp = collect_computation([_cat(consumption="")], params)
        assert comp.breakdown() == []


# ===================================================================
# Warnings
# ===================================================================


class TestWarnings:
    def test_grouped_by_cause(self) -> None:
        warnings = collect_warnings(
            [
                _cat("Waste", fe=None),
                _cat("Building", has_useful_life=True, life_span=""),
                _cat("Water"),
                _cat("Idle", consumption="", fe=None),
                _cat("Off", fe=None, enabled=False),
            ]
        )

        assert warnings
        assert warnings.invalid_fe == ["Waste"]
        assert warnings.invalid_life_span == ["Building"]
        messages = warnings.messages()
        assert len(messages) == 2
        assert "Waste" in messages[0]
        assert "Building" in messages[1]

    def test_no_warnings(self) -> None:
        warnings = collect_warnings([_cat()])
        assert not warnings
        assert warnings.messages() == []
