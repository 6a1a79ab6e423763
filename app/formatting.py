"""Raw text parsing and currency display for the form."""
from __future__ import annotations

import re
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(raw: Any, default: int = 0) -> int:
    """Leading integer of ``raw`` ("1.6" -> 1, "2000cc" -> 2000).

    Empty, non numeric or zero input gives ``default``, so a blank production
    year can fall back to the current year.
    """
    if isinstance(raw, bool):
        return default
    if isinstance(raw, (int, float)):
        value = int(raw)
    else:
        match = _LEADING_INT.match(str(raw or ""))
        if not match:
            return default
        value = int(match.group(1))
    return value or default


def format_currency(amount: float) -> str:
    """EUR with two decimals and thousands separators: 1234.5 -> '€1,234.50'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}€{abs(amount):,.2f}"
