"""
mixing/patterns.py - Ingredient name heuristics.

Each predicate looks at an ingredient name only. They are fuzzy by nature
and kept apart from the classifier so they can be tuned or replaced on
their own.
"""

import re
from typing import Optional

EGG_PATTERN = re.compile(r"\beggs?\b|\begg\s*yolks?\b|\begg\s*whites?\b", re.IGNORECASE)
OIL_PATTERN = re.compile(r"\boil\b", re.IGNORECASE)
RYE_PATTERN = re.compile(r"\brye\b", re.IGNORECASE)
WHOLE_WHEAT_PATTERN = re.compile(r"\bwhole\s*wheat\b|\bWW\b|\bwheatmeal\b", re.IGNORECASE)
YEAST_PATTERN = re.compile(r"yeast", re.IGNORECASE)
CHEMICAL_LEAVENER_PATTERN = re.compile(r"baking\s*(powder|soda)|bicarb", re.IGNORECASE)
SEMOLINA_PATTERN = re.compile(r"semolina|durum", re.IGNORECASE)


def _matches(pattern, name: Optional[str]) -> bool:
    return bool(name) and pattern.search(name) is not None


def is_egg(name: Optional[str]) -> bool:
    """Whole eggs, yolks or whites."""
    return _matches(EGG_PATTERN, name)


def is_oil(name: Optional[str]) -> bool:
    """Liquid fats."""
    return _matches(OIL_PATTERN, name)


def is_rye(name: Optional[str]) -> bool:
    return _matches(RYE_PATTERN, name)


def is_whole_wheat(name: Optional[str]) -> bool:
    return _matches(WHOLE_WHEAT_PATTERN, name)


def is_yeast(name: Optional[str]) -> bool:
    return _matches(YEAST_PATTERN, name)


def is_chemical_leavener(name: Optional[str]) -> bool:
    """Baking powder, baking soda, bicarbonate."""
    return _matches(CHEMICAL_LEAVENER_PATTERN, name)


def is_semolina(name: Optional[str]) -> bool:
    """Semolina or durum flours."""
    return _matches(SEMOLINA_PATTERN, name)
