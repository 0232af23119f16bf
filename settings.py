# settings.py
from __future__ import annotations

import datetime as dt
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import streamlit as st

DEFAULT_ABSORPTION_FACTOR = 6.27   # t CO2 absorbed per hectare per year
DEFAULT_EQUIVALENCE_FACTOR = 1.37  # ha -> gha
DEFAULT_STORAGE_DIR = "~/.ecological_footprint"


def _lookup(name: str) -> Optional[str]:
    """Streamlit secrets first, then environment."""
    try:
        value = st.secrets.get(name, None)
    except Exception:
        value = None
    if value is None:
        value = os.getenv(name)
    return value


@dataclass
class Settings:
    storage_dir: Path
    base_year: str


def load_settings(storage_dir: Optional[str] = None, base_year: Optional[str] = None) -> Settings:
    if storage_dir is None:
        storage_dir = _lookup("FOOTPRINT_STORAGE_DIR") or DEFAULT_STORAGE_DIR
    if base_year is None:
        base_year = _lookup("FOOTPRINT_BASE_YEAR") or str(dt.date.today().year)
    return Settings(storage_dir=Path(storage_dir).expanduser(), base_year=str(base_year))
