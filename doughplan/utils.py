"""
doughplan Utilities

Shared numeric and serialization helpers.
"""

from __future__ import annotations
import json
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

E = TypeVar("E", bound=Enum)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """
    Safe division that returns default if denominator is zero.

    Args:
        numerator: Numerator
        denominator: Denominator
        default: Default value for division by zero

    Returns:
        Result of division or default
    """
    if not denominator:
        return default
    return numerator / denominator


def parse_enum(enum_cls: Type[E], value: Any, default: Optional[E] = None) -> Optional[E]:
    """
    Coerce a raw value into a member of enum_cls.

    Accepts members, values and member names (case-insensitive for names).
    Unknown or empty values return default.
    """
    if value is None or value == "":
        return default
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str):
        member = enum_cls.__members__.get(value.strip().upper().replace(" ", "_"))
        if member is not None:
            return member
    return default


def determinize_dict(data: Dict[str, Any], precision: int = 6) -> Dict[str, Any]:
    """
    Make a dictionary deterministic for hashing and comparison.

    Operations:
    - Sorts all keys recursively
    - Rounds floats to consistent precision
    - Converts enums to their values

    Args:
        data: Dictionary to determinize
        precision: Float rounding precision (default: 6)

    Returns:
        Deterministic dictionary with sorted keys and rounded floats
    """
    def _process(obj: Any) -> Any:
        if isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, float):
            return round(obj, precision)
        elif isinstance(obj, dict):
            return {str(k): _process(v) for k, v in sorted(obj.items(), key=lambda kv: str(kv[0]))}
        elif isinstance(obj, (list, tuple)):
            return [_process(item) for item in obj]
        elif isinstance(obj, (int, str, bool, type(None))):
            return obj
        else:
            return str(obj)

    processed = _process(data)
    return json.loads(json.dumps(processed, sort_keys=True))
