"""Utility functions for formrules"""

import logging
import math
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def canonicalify(p: Path | str) -> Path:
    return Path(p).expanduser().resolve()


def ensure_path(p: Path | str) -> Path:
    path = canonicalify(p)
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_empty(value: Any) -> bool:
    """Whether a field value counts as "not filled in".

    Examples:
        >>> is_empty(None), is_empty("  "), is_empty([]), is_empty(0)
        (True, True, True, False)
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> float | None:
    """Parse a value as a number, returning None when it is not numeric.

    Booleans are never numbers. Strings are stripped before parsing; only
    plain decimal text counts, so ``"nan"``, ``"inf"`` and ``"1_000"`` are
    text. Non-finite results are never numbers.
    """
    if is_number(value):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_datetime(value: Any) -> datetime | None:
    """Parse a value as a date/datetime, returning None when it is not a date.

    Accepts ``date``/``datetime`` objects and ISO 8601 strings.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


def stringify(value: Any) -> str:
    """String form of a field value used by string operators.

    Booleans render as JSON does (``true``/``false``) and integral floats drop
    their fraction so ``18.0`` and ``"18"`` share a string form.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
