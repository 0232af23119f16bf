# parsing.py
from __future__ import annotations

import math
import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?", re.ASCII)


def parse_field_number(value: Any) -> float:
    """
    Turn a raw field value into a float, or NaN when it can't be read.

    Accepted text formats:
      • 1234.56     (plain decimal dot)
      • 1234,56     (decimal comma)
      • 1.234,56    (decimal comma with dot thousands separators)
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.nan
    if value is None:
        return math.nan

    raw = _WHITESPACE.sub("", str(value))
    if not raw:
        return math.nan

    # With a comma present, dots can only be thousands separators
    if "," in raw:
        raw = raw.replace(".", "").replace(",", ".")

    if not _DECIMAL.fullmatch(raw):
        return math.nan
    return float(raw)


def is_usable(value: float) -> bool:
    return math.isfinite(value) and value > 0


def safe_positive(value: Any, fallback: float) -> float:
    numeric = parse_field_number(value)
    return numeric if is_usable(numeric) else fallback


def format_number(value: float, max_fraction: int = 2) -> str:
    """Display a number pt-BR style: 1.234,56 (min. two decimals)."""
    if not math.isfinite(value):
        value = 0.0
    digits = max(max_fraction, 2)
    text = f"{value:,.{digits}f}"
    whole, _, frac = text.partition(".")
    frac = frac.rstrip("0")
    if len(frac) < 2:
        frac = frac.ljust(2, "0")
    return whole.replace(",", ".") + "," + frac
