"""Tests for JSON and spreadsheet export."""

from __future__ import annotations

import json

import pytest

import exporters
from exporters import (
    ExportUnavailable,
    category_rows,
    export_filename,
    json_export,
    summary_rows,
    xlsx_export,
)
from session import FootprintSession


@pytest.fixture
def session() -> FootprintSession:
    s = FootprintSession()
    s.params.base_year = "2024"
    s.update_category(0, "consumption", "1.234,5")
    s.update_category(len(s.categories) - 1, "consumption", "100")
    return s


class TestFilenames:
    def test_with_year(self) -> None:
        assert export_filename("2024", "xlsx") == "ecological-footprint-2024.xlsx"

    def test_blank_year(self) -> None:
        assert export_filename("  ", "json") == "ecological-footprint-base-year.json"


class TestJsonExport:
    def test_snapshot_plus_exported_at(self, session: FootprintSession) -> None:
        payload = json.loads(json_export(session))

        assert payload["schema"] == 2
        assert payload["baseYear"] == "2024"
        assert "exportedAt" in payload
        assert payload["categories"][0]["consumption"] == "1.234,5"

    def test_export_reimports(self, session: FootprintSession) -> None:
        other = FootprintSession()
        assert other.import_json(json_export(session)) is True
        assert other.categories == session.categories


class TestSheets:
    def test_category_rows(self, session: FootprintSession) -> None:
        df = category_rows(session.compute())

        assert len(df) == len(session.categories)
        assert list(df.columns) == [
            "Category",
            "Active",
            "Annual consumption",
            "Useful life (years)",
            "Unit",
            "Emission factor (kg CO₂/unit)",
            "Emission (kg CO₂)",
            "Emission (t CO₂)",
            "Area (ha/year)",
            "Footprint (gha/year)",
            "Methodology",
        ]
        first = df.iloc[0]
        assert first["Annual consumption"] == pytest.approx(1234.5)
        assert first["Useful life (years)"] == ""
        assert first["Active"] == "Yes"

        area = df.iloc[-1]
        assert area["Useful life (years)"] == pytest.approx(50.0)
        assert area["Emission (kg CO₂)"] == pytest.approx(100 * 520 / 50)

    def test_summary_rows(self, session: FootprintSession) -> None:
        comp = session.compute()
        df = summary_rows(session, comp).set_index("Field")["Value"]

        assert df["Base year"] == "2024"
        assert df["Reported in"] == "gha"
        assert df["Total footprint (gha/year)"] == pytest.approx(comp.total_gha)
        assert df["Per capita footprint (gha/person/year)"] == ""

    def test_xlsx_bytes(self, session: FootprintSession) -> None:
        data = xlsx_export(session)
        assert data[:2] == b"PK"

    def test_missing_engine(self, session: FootprintSession, monkeypatch) -> None:
        monkeypatch.setattr(exporters, "excel_available", lambda: False)
        with pytest.raises(ExportUnavailable):
            xlsx_export(session)
