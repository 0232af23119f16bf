# session.py
from __future__ import annotations

import datetime as dt
import json
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from catalog import (
    CATEGORY_SEED,
    DEFAULT_LIFE_SPAN,
    DEFAULT_METHOD,
    DEFAULT_UNIT,
    build_default_categories,
    create_id,
)
from engine import Computation, Warnings, collect_computation, collect_warnings
from models import CategoryRecord, GlobalParameters, MalformedInput
from snapshot import STORAGE_KEY, apply_snapshot, build_snapshot, parse_snapshot
from storage import LocalStore

log = logging.getLogger(__name__)

NEW_CATEGORY_NAME = "New category"
UNNAMED_CATEGORY = "Unnamed category"
CUSTOM_METHOD = "Custom category."

# Fields editable on every category; has_useful_life only on custom ones
EDITABLE_FIELDS = {"name", "unit", "method", "fe", "consumption", "enabled", "life_span"}
CUSTOM_ONLY_FIELDS = {"has_useful_life"}
_RAW_NUMBER_FIELDS = {"fe", "consumption", "life_span"}
_TEXT_FALLBACKS = {"name": UNNAMED_CATEGORY, "unit": DEFAULT_UNIT, "method": DEFAULT_METHOD}


def now_label() -> str:
    return dt.datetime.now().strftime("%d/%m/%Y %H:%M:%S")


class FootprintSession:
    """
    Owns the category list and global parameters for one user session.

    The view layer calls the mutation methods below and re-renders from
    compute(); records are replaced, never edited in place.
    """

    def __init__(
        self,
        categories: Optional[List[CategoryRecord]] = None,
        params: Optional[GlobalParameters] = None,
        catalog: Sequence[Dict[str, Any]] = CATEGORY_SEED,
    ):
        self.catalog = catalog
        self.categories: List[CategoryRecord] = (
            list(categories) if categories is not None else build_default_categories(catalog)
        )
        self.params = params or GlobalParameters()
        self.status: str = ""
        self.status_is_error: bool = False
        self._status_fresh = False

    # ------------------------------------------------------------------
    # Status line
    # ------------------------------------------------------------------
    def set_status(self, message: str, error: bool = False) -> None:
        self.status = message
        self.status_is_error = error
        self._status_fresh = True

    def take_status(self) -> Optional[Tuple[str, bool]]:
        """Return the status set since the last call, or None."""
        if not self._status_fresh:
            return None
        self._status_fresh = False
        return self.status, self.status_is_error

    def mark_exported(self, kind: str) -> None:
        self.set_status(f"{kind} exported successfully at {now_label()}.")

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------
    def compute(self) -> Computation:
        return collect_computation(self.categories, self.params)

    def warnings(self) -> Warnings:
        return collect_warnings(self.categories)

    # ------------------------------------------------------------------
    # Category mutations
    # ------------------------------------------------------------------
    def add_category(self) -> CategoryRecord:
        record = CategoryRecord(
            id=create_id(),
            name=NEW_CATEGORY_NAME,
            unit=DEFAULT_UNIT,
            fe=None,
            consumption=None,
            method=CUSTOM_METHOD,
            enabled=True,
            custom=True,
        )
        self.categories.append(record)
        return record

    def remove_category(self, index: int) -> bool:
        if not 0 <= index < len(self.categories):
            return False
        if not self.categories[index].custom:
            return False
        del self.categories[index]
        return True

    def update_category(self, index: int, field: str, value: Any) -> bool:
        if not 0 <= index < len(self.categories):
            return False
        current = self.categories[index]
        if field not in EDITABLE_FIELDS and not (field in CUSTOM_ONLY_FIELDS and current.custom):
            return False

        changes: Dict[str, Any] = {}
        if field in _RAW_NUMBER_FIELDS:
            changes[field] = None if value is None or value == "" else value
        elif field in _TEXT_FALLBACKS:
            changes[field] = str(value or "").strip() or _TEXT_FALLBACKS[field]
        else:
            changes[field] = bool(value)
            if field == "has_useful_life" and changes[field] and current.life_span is None:
                changes["life_span"] = DEFAULT_LIFE_SPAN

        self.categories[index] = replace(current, **changes)
        return True

    def reset_consumption(self) -> None:
        self.categories = [replace(c, consumption=None, enabled=True) for c in self.categories]

    def reset_to_defaults(self) -> None:
        self.categories = build_default_categories(self.catalog)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def to_snapshot(self, saved_at: Optional[str] = None) -> Dict[str, Any]:
        return build_snapshot(self.categories, self.params, saved_at=saved_at)

    def load_snapshot(self, raw: Any) -> bool:
        """Apply a stored/imported payload. Leaves state untouched when it is malformed."""
        parsed = parse_snapshot(raw)
        if isinstance(parsed, MalformedInput):
            log.warning("Rejected snapshot: %s", parsed.reason)
            return False
        params = replace(self.params)
        self.categories = apply_snapshot(parsed, params, self.catalog)
        self.params = params
        return True

    def import_json(self, raw: Any) -> bool:
        if not self.load_snapshot(raw):
            self.set_status("Failed to import JSON. Check the file format.", error=True)
            return False
        self.set_status(f"JSON imported successfully at {now_label()}.")
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self, store: LocalStore) -> bool:
        if store.set(STORAGE_KEY, json.dumps(self.to_snapshot(), ensure_ascii=False)):
            self.set_status(f"Data saved automatically. Last write: {now_label()}")
            return True
        self.set_status("Could not save automatically on this machine.", error=True)
        return False

    def load(self, store: LocalStore) -> bool:
        raw = store.get(STORAGE_KEY)
        if raw is None:
            if store.last_error:
                self.set_status("Failed to read saved data. The default state will be used.", error=True)
            return False
        if not self.load_snapshot(raw):
            self.reset_to_defaults()
            self.set_status("Failed to read saved data. The default state will be used.", error=True)
            return False
        return True
