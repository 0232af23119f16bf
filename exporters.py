# exporters.py
from __future__ import annotations

import importlib.util
import io
import json
import logging
import math
from typing import Any

import pandas as pd

from engine import Computation
from models import RawNumber
from parsing import parse_field_number
from session import FootprintSession
from snapshot import utc_timestamp

log = logging.getLogger(__name__)

EXCEL_ENGINE = "xlsxwriter"


class ExportUnavailable(RuntimeError):
    """The spreadsheet writer library is not installed."""


def export_filename(base_year: str, ext: str) -> str:
    year = (base_year or "").strip() or "base-year"
    return f"ecological-footprint-{year}.{ext}"


def json_export(session: FootprintSession) -> str:
    payload = {**session.to_snapshot(), "exportedAt": utc_timestamp()}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _cell(value: RawNumber | None) -> Any:
    if value is None:
        return ""
    numeric = parse_field_number(value)
    return numeric if math.isfinite(numeric) else value


def category_rows(computation: Computation) -> pd.DataFrame:
    records = []
    for row in computation.rows:
        c, m = row.category, row.metrics
        records.append({
            "Category": c.name,
            "Active": "Yes" if c.enabled else "No",
            "Annual consumption": _cell(c.consumption),
            "Useful life (years)": _cell(c.life_span) if c.has_useful_life else "",
            "Unit": c.unit,
            "Emission factor (kg CO₂/unit)": _cell(c.fe),
            "Emission (kg CO₂)": m.kg,
            "Emission (t CO₂)": m.ton,
            "Area (ha/year)": m.area_ha,
            "Footprint (gha/year)": m.gha,
            "Methodology": c.method,
        })
    return pd.DataFrame.from_records(records)


def summary_rows(session: FootprintSession, computation: Computation) -> pd.DataFrame:
    params = session.params
    per_capita_unit = "gha/person/year" if computation.use_gha else "ha/person/year"
    rows = [
        ("Base year", params.base_year or ""),
        ("Unit", params.unit_name or ""),
        ("Absorption factor (t/ha/year)", computation.absorption_factor),
        ("Equivalence factor", computation.equivalence_factor),
        ("Population", params.population or ""),
        ("Reported in", computation.unit_label),
        ("Total emission (t CO₂/year)", computation.total_ton),
        ("Total area (ha/year)", computation.total_ha),
        ("Total footprint (gha/year)", computation.total_gha),
        (f"Per capita footprint ({per_capita_unit})", "" if computation.per_capita is None else computation.per_capita),
        ("Exported at", utc_timestamp()),
    ]
    return pd.DataFrame(rows, columns=["Field", "Value"])


def excel_available() -> bool:
    return importlib.util.find_spec(EXCEL_ENGINE) is not None


def xlsx_export(session: FootprintSession) -> bytes:
    """Workbook with a Summary and a Categories sheet."""
    if not excel_available():
        log.error("Spreadsheet export requested but %s is not installed", EXCEL_ENGINE)
        raise ExportUnavailable(f"Excel library ({EXCEL_ENGINE}) is not available.")

    computation = session.compute()
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine=EXCEL_ENGINE) as writer:
        summary_rows(session, computation).to_excel(writer, sheet_name="Summary", index=False)
        category_rows(computation).to_excel(writer, sheet_name="Categories", index=False)
    return buf.getvalue()
