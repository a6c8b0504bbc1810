"""
Helper Functions

This module contains utility functions used throughout the application.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from dateutil import parser as dtparser


def parse_ts(x: Any) -> Optional[datetime]:
    """Parse timestamp from ISO or common log formats"""
    if not x:
        return None
    try:
        text = str(x)
        try:
            dt = dtparser.isoparse(text)
        except ValueError:
            # Apache style: 10/Oct/2023:13:55:36 +0000
            dt = dtparser.parse(text.replace(":", " ", 1))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except Exception:
        return None


def safe_int(x: Any) -> Optional[int]:
    """Safely convert to int"""
    try:
        return int(x) if x is not None else None
    except Exception:
        return None


def safe_float(x: Any) -> Optional[float]:
    """Safely convert to float"""
    try:
        return float(x) if x is not None else None
    except Exception:
        return None


def get_nested(d: Dict[str, Any], path: Tuple[str, ...]) -> Any:
    """Safely read nested dict keys"""
    cur: Any = d
    for k in path:
        if not isinstance(cur, dict) or k not in cur:
            return None
        cur = cur[k]
    return cur


def get_percentage(total: int, part: int) -> float:
    """Share of part in total, in [0, 100]"""
    if not total or total <= 0 or not part or part <= 0:
        return 0.0
    return min(100.0, part * 100.0 / total)


def scale_to_max(value: int, max_value: int) -> float:
    """
    Bar width of value relative to max_value, in percent.
    Nonzero values never drop below 1 so they stay visible.
    """
    if not value or value <= 0 or not max_value or max_value <= 0:
        return 0.0
    width = value * 100.0 / max_value
    return max(1.0, min(100.0, width))
