# guides.py
from __future__ import annotations

from typing import List, Dict

# Short blurbs for the About page


def glossary() -> List[Dict[str, str]]:
    return [
        {"term": "Emission factor (FE)", "meaning": "kg CO₂-equivalent emitted per unit of a category's consumption."},
        {"term": "Absorption factor", "meaning": "t CO₂ one hectare absorbs per year; turns emissions into land area."},
        {"term": "Equivalence factor", "meaning": "Multiplier from hectares (ha) to global hectares (gha)."},
        {"term": "Global hectare (gha)", "meaning": "Area at world-average productivity, comparable across regions."},
        {"term": "Useful life", "meaning": "Years over which embodied emissions (e.g. buildings) are spread."},
        {"term": "Snapshot", "meaning": "All parameters and categories saved or exported at one moment."},
    ]


def how_it_works() -> List[Dict[str, str]]:
    return [
        {"step": "Emission", "formula": "kg CO₂ = consumption × FE ÷ useful life (when amortized)"},
        {"step": "Tonnes", "formula": "t CO₂ = kg ÷ 1000"},
        {"step": "Area", "formula": "ha = t CO₂ ÷ absorption factor"},
        {"step": "Footprint", "formula": "gha = ha × equivalence factor"},
        {"step": "Per capita", "formula": "total (gha or ha) ÷ population"},
    ]
