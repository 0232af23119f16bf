# snapshot.py
"""
Snapshot building, validation and reconciliation.

A snapshot is the whole session as JSON:

    {schema, savedAt, baseYear, unitName, absorptionFactor,
     equivalenceFactor, population, useGha, categories: [...]}

Global numbers are stored as the raw text the user typed. On load, older
schemas are merged against the current built-in catalog so methodology
updates reach built-in rows without losing consumption or custom rows.
"""
from __future__ import annotations

import datetime as dt
import json
import unicodedata
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from catalog import (
    CATEGORY_SEED,
    CONSTRUCTED_AREA_NAME,
    DEFAULT_LIFE_SPAN,
    DEFAULT_METHOD,
    DEFAULT_UNIT,
    create_id,
    record_from_seed,
)
from models import CategoryRecord, GlobalParameters, MalformedInput, Snapshot

SCHEMA_VERSION = 2
STORAGE_KEY = "ecological-footprint-state-v2"

# snapshot key -> GlobalParameters attribute
_GLOBAL_TEXT_FIELDS = {
    "baseYear": "base_year",
    "unitName": "unit_name",
    "absorptionFactor": "absorption_factor",
    "equivalenceFactor": "equivalence_factor",
    "population": "population",
}


def utc_timestamp() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def name_key(name: str) -> str:
    """Case- and accent-insensitive key: 'Água ' -> 'agua'."""
    decomposed = unicodedata.normalize("NFKD", name or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw:
            return raw[key]
    return None


# ---------------------------------
# Normalization
# ---------------------------------

def normalize_category(raw: Union[Mapping[str, Any], CategoryRecord, Any], index: int) -> CategoryRecord:
    """Repair an untrusted category (import or legacy storage) into a CategoryRecord."""
    if isinstance(raw, CategoryRecord):
        raw = raw.to_dict()
    if not isinstance(raw, Mapping):
        raw = {}

    raw_id = raw.get("id")
    name = _text(raw.get("name")) or f"Category {index + 1}"

    has_useful_life = _pick(raw, "hasUsefulLife", "has_useful_life")
    if not isinstance(has_useful_life, bool):
        has_useful_life = name_key(CONSTRUCTED_AREA_NAME) in name_key(name)

    life_span = _pick(raw, "lifeSpan", "life_span")
    if _is_empty(life_span):
        life_span = DEFAULT_LIFE_SPAN if has_useful_life else None

    fe = raw.get("fe")
    consumption = raw.get("consumption")
    custom = raw.get("custom")

    return CategoryRecord(
        id=raw_id if isinstance(raw_id, str) and raw_id.strip() else create_id(),
        name=name,
        unit=_text(raw.get("unit")) or DEFAULT_UNIT,
        fe=None if _is_empty(fe) else fe,
        consumption=None if _is_empty(consumption) else consumption,
        method=_text(raw.get("method")) or DEFAULT_METHOD,
        enabled=raw.get("enabled") is not False,
        custom=custom if isinstance(custom, bool) else True,
        has_useful_life=has_useful_life,
        life_span=life_span,
    )


# ---------------------------------
# Build / parse
# ---------------------------------

def build_snapshot(
    categories: Iterable[CategoryRecord],
    params: GlobalParameters,
    saved_at: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "schema": SCHEMA_VERSION,
        "savedAt": saved_at or utc_timestamp(),
        "baseYear": params.base_year or "",
        "unitName": params.unit_name or "",
        "absorptionFactor": params.absorption_factor or "",
        "equivalenceFactor": params.equivalence_factor or "",
        "population": params.population or "",
        "useGha": bool(params.use_gha),
        "categories": [c.to_dict() for c in categories],
    }


def parse_snapshot(raw: Any) -> Union[Snapshot, MalformedInput]:
    """Validate a stored/imported payload (dict or JSON text)."""
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return MalformedInput("File is not UTF-8 text.")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return MalformedInput("Invalid JSON.")

    # Some exports wrap the payload as {"state": {...}}
    if isinstance(raw, dict) and isinstance(raw.get("state"), dict):
        raw = raw["state"]

    if not isinstance(raw, dict):
        return MalformedInput("Snapshot is not a JSON object.")

    categories = raw.get("categories")
    if not isinstance(categories, list) or not categories:
        return MalformedInput("Snapshot has no categories.")

    schema = raw.get("schema")
    if isinstance(schema, float) and schema.is_integer():
        schema = int(schema)
    if not isinstance(schema, int) or isinstance(schema, bool):
        schema = 1

    fields: Dict[str, Any] = {}
    for key, attr in _GLOBAL_TEXT_FIELDS.items():
        if key in raw:
            fields[attr] = "" if raw[key] is None else str(raw[key])
    if "useGha" in raw:
        fields["use_gha"] = bool(raw["useGha"])

    saved_at = raw.get("savedAt")
    return Snapshot(
        schema=schema,
        categories=list(categories),
        saved_at=saved_at if isinstance(saved_at, str) else None,
        **fields,
    )


# ---------------------------------
# Reconciliation
# ---------------------------------

def _merge_legacy(legacy: List[CategoryRecord], catalog: Sequence[Dict[str, Any]]) -> List[CategoryRecord]:
    # Only built-in rows carry over; custom rows are appended below as they are
    lookup: Dict[str, CategoryRecord] = {}
    for record in legacy:
        if not record.custom:
            lookup.setdefault(name_key(record.name), record)

    merged: List[CategoryRecord] = []
    for seed in catalog:
        match = lookup.get(name_key(seed["name"]))
        if match is None:
            merged.append(record_from_seed(seed))
        else:
            merged.append(
                record_from_seed(
                    seed,
                    id=match.id,
                    consumption=match.consumption,
                    enabled=match.enabled,
                )
            )

    merged.extend(record for record in legacy if record.custom)
    return merged


def reconcile_categories(
    snapshot: Snapshot,
    catalog: Sequence[Dict[str, Any]] = CATEGORY_SEED,
) -> List[CategoryRecord]:
    normalized = [normalize_category(raw, i) for i, raw in enumerate(snapshot.categories)]
    if snapshot.schema >= SCHEMA_VERSION:
        return normalized
    return _merge_legacy(normalized, catalog)


def apply_snapshot(
    snapshot: Snapshot,
    params: GlobalParameters,
    catalog: Sequence[Dict[str, Any]] = CATEGORY_SEED,
) -> List[CategoryRecord]:
    """Write present global fields onto `params`; return the reconciled categories."""
    for attr in (*_GLOBAL_TEXT_FIELDS.values(), "use_gha"):
        value = getattr(snapshot, attr)
        if value is not None:
            setattr(params, attr, value)
    return reconcile_categories(snapshot, catalog)
