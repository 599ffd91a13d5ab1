from __future__ import annotations

import re
from datetime import date, datetime

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD (a trailing time part is ignored) into date."""
    return datetime.strptime(value[:10], "%Y-%m-%d").date()


def month_key(value: date) -> str:
    """date -> 'YYYY-MM'. Month keys compare correctly as strings."""
    return value.strftime("%Y-%m")


def require_month(value: str) -> str:
    value = (value or "").strip()
    if not _MONTH_RE.match(value):
        raise ValidationError(f"Invalid month '{value}' (expected YYYY-MM)")
    return value


def shift_month(month: str, delta: int) -> str:
    """Move a 'YYYY-MM' key by ``delta`` months."""
    year, mon = (int(part) for part in month.split("-"))
    index = year * 12 + (mon - 1) + delta
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def trailing_months(month: str, count: int) -> list[str]:
    """The ``count`` months ending at ``month``, oldest first."""
    return [shift_month(month, -offset) for offset in range(count - 1, -1, -1)]
