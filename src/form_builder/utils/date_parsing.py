"""Date coercion for form values.

Date inputs arrive as ``date``/``datetime`` objects when built in Python
and as strings when loaded from JSON. Strings are accepted in ISO form
(2000-01-01, optionally with a time part) and in numeric day-first form
(01.01.2000, 01/01/2000, 01-01-2000).
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

# ISO: 2026-01-23 (optionally followed by T or space + time)
_RE_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T \s].*)?$")

# Numeric with separators: DD.MM.YYYY, DD/MM/YYYY, DD-MM-YYYY
_RE_NUMERIC = re.compile(r"^(\d{1,2})[./\-](\d{1,2})[./\-](\d{4})$")


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: Any) -> Optional[date]:
    """Parse a form value into a calendar date.

    Args:
        value: date, datetime, or date string (or None/other).

    Returns:
        The date, or None if the value cannot be read as a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    m = _RE_ISO.match(text)
    if m:
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return _build_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _RE_NUMERIC.match(text)
    if m:
        return _build_date(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    return None


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a form value into a naive UTC datetime for interval arithmetic."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    parsed = parse_date(value)
    if parsed is None:
        return None
    return datetime(parsed.year, parsed.month, parsed.day)
