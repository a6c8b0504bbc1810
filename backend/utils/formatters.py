"""
Formatting Functions

Human-readable strings for raw counters (bytes, microseconds, numbers)
and markup escaping for log-derived text.
"""

from dataclasses import dataclass
from typing import Any, Optional

BYTE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB")

USECS_PER_MSEC = 1000
USECS_PER_SEC = 1000 * 1000

# Log-derived text goes through this table before it reaches the document
_MARKUP_ENTITIES = str.maketrans(
    {
        "'": "&#39;",
        '"': "&#34;",
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        " ": "&nbsp;",
    }
)


@dataclass(frozen=True)
class FormatContext:
    """Number formatting conventions (thousands separator, decimal point)"""
    thousands_sep: str = ","
    decimal_point: str = "."


DEFAULT_CONTEXT = FormatContext()


def format_number(n: Optional[int], ctx: FormatContext = DEFAULT_CONTEXT) -> str:
    """Integer with thousands separators, e.g. 1234567 -> '1,234,567'"""
    text = f"{int(n or 0):,}"
    return text.replace(",", ctx.thousands_sep)


def format_decimal(value: Optional[float], ctx: FormatContext = DEFAULT_CONTEXT, precision: int = 2) -> str:
    """Fixed precision decimal using the context's decimal point"""
    text = f"{float(value or 0.0):.{precision}f}"
    return text.replace(".", ctx.decimal_point)


def format_bytes(count: Optional[int]) -> str:
    """
    Scale a byte count to B/KB/MB/... using 1024-based steps.
    Plain integer below 1 KB, two decimals above (1024 -> '1.00 KB').
    """
    if count is None or count < 0:
        count = 0

    size = float(count)
    unit = 0
    while size >= 1024 and unit < len(BYTE_UNITS) - 1:
        size /= 1024
        unit += 1

    if unit == 0:
        return f"{int(count)} {BYTE_UNITS[0]}"
    return f"{size:.2f} {BYTE_UNITS[unit]}"


def format_duration(usecs: Optional[float]) -> str:
    """Render microseconds in the largest fitting unit (us, ms or s)"""
    if usecs is None or usecs < 0:
        usecs = 0

    if usecs >= USECS_PER_SEC:
        return f"{usecs / USECS_PER_SEC:.2f} s"
    if usecs >= USECS_PER_MSEC:
        return f"{usecs / USECS_PER_MSEC:.2f} ms"
    return f"{float(usecs):.2f} us"


def escape_markup(value: Any) -> str:
    """Replace quotes, ampersand, angle brackets and spaces with entities"""
    if value is None:
        return ""
    return str(value).translate(_MARKUP_ENTITIES)
