"""Normalization helpers.

Centralizes defensive parsing of loosely typed remote values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    """Coerce a number or numeric string to a finite float, else ``None``.

    Booleans are rejected even though Python treats them as integers.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif not isinstance(value, (int, float)):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_hour(value: Any) -> int | None:
    """Return an integral hour in ``[0, 23]`` or ``None``."""
    parsed = safe_float(value)
    if parsed is None or not parsed.is_integer():
        return None
    hour = int(parsed)
    return hour if 0 <= hour <= 23 else None


def safe_str(value: Any) -> str | None:
    """Return the trimmed string, or ``None`` for non-strings and blanks."""
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text if text else None


def unwrap_document(record: dict[str, Any]) -> dict[str, Any]:
    """Flatten a document whose fields are nested under ``data`` or ``fields``.

    Top-level keys (typically ``id``) are kept; nested fields win on conflict.
    """
    for key in ("data", "fields"):
        nested = record.get(key)
        if isinstance(nested, dict):
            merged = {k: v for k, v in record.items() if k != key}
            merged.update(nested)
            return merged
    return record
