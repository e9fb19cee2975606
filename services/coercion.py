# services/coercion.py
"""
Small, total helpers for turning whatever the model sent back into the type a
field expects. Each helper takes the raw value plus a fallback and never raises.
"""
import math
from typing import Any, Dict, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def as_string(value: Any, fallback: str = "") -> str:
    return value if isinstance(value, str) else fallback


def as_number(value: Any, fallback: float) -> float:
    # bool is an int subclass, but True is not a confidence score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    if isinstance(value, float) and not math.isfinite(value):
        return fallback
    return value


def as_array(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_string_list(value: Any) -> List[str]:
    """Keep the non-blank string entries of a list, stripped."""
    out: List[str] = []
    for item in as_array(value):
        text = as_string(item).strip()
        if text:
            out.append(text)
    return out


def clamp(n: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, n))


def pick_literal(value: Any, allowed: Iterable[T], fallback: T) -> T:
    """Return value only if it is exactly one of the allowed literals."""
    if isinstance(value, str) and value in allowed:
        return value
    return fallback


def as_positive_int(value: Any) -> Optional[int]:
    """
    Accept ints, integral floats and digit strings greater than zero.
    Strings must be plain digits. Anything else (None, "II", "1e2", "1_000",
    "+3", 0, -1, 2.5, nan, True) gives None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text.isdecimal():
            return None
        try:
            value = int(text)
        except ValueError:
            # past the interpreter's int-from-str digit limit
            return None
    if isinstance(value, int):
        return value if value > 0 else None
    if not isinstance(value, float) or not math.isfinite(value):
        return None
    if value <= 0 or not value.is_integer():
        return None
    return int(value)
