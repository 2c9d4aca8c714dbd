"""Built-in functions available to derived-field formulas.

The vocabulary is fixed: today, age, sum, avg, min, max, round, floor,
ceil. today() and age() read the evaluation clock, so they are bound per
evaluation by build_function_table().
"""

import logging
import math
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional

from form_builder.utils.date_parsing import to_datetime

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 24 * 60 * 60

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_number(value: Any) -> float:
    if not _is_number(value):
        raise TypeError(f"Expected a number, got {type(value).__name__}: {value!r}")
    return value


def formula_sum(*values: Any):
    """Add numeric values; missing or non-numeric values count as 0."""
    total = 0
    for value in values:
        if _is_number(value):
            total += value
    return total


def formula_avg(*values: Any) -> Optional[float]:
    if not values:
        return None
    return formula_sum(*values) / len(values)


def formula_min(*values: Any):
    return min(_require_number(v) for v in values)


def formula_max(*values: Any):
    return max(_require_number(v) for v in values)


def formula_round(value: Any) -> int:
    """Round half up, matching browser Math.round (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(_require_number(value) + 0.5)


def formula_floor(value: Any) -> int:
    return math.floor(_require_number(value))


def formula_ceil(value: Any) -> int:
    return math.ceil(_require_number(value))


def compute_age(birth_date: Any, now: datetime) -> int:
    """Whole years between birth_date and now, using 365.25-day years.

    Approximate: calendar leap-day precision is ignored.

    Raises:
        ValueError: If birth_date cannot be read as a date.
    """
    birth = to_datetime(birth_date)
    if birth is None:
        raise ValueError(f"Cannot read birth date: {birth_date!r}")
    elapsed = (to_datetime(now) - birth).total_seconds()
    return math.floor(elapsed / SECONDS_PER_YEAR)


# Clock-independent functions
FORMULA_FUNCTIONS: Dict[str, Callable[..., Any]] = {
    "sum": formula_sum,
    "avg": formula_avg,
    "min": formula_min,
    "max": formula_max,
    "round": formula_round,
    "floor": formula_floor,
    "ceil": formula_ceil,
}


def build_function_table(now: datetime) -> Dict[str, Callable[..., Any]]:
    """All formula functions, with today() and age() bound to ``now``."""

    def today(*_args: Any) -> date:
        return now.date()

    def age(birth_date: Any) -> Optional[int]:
        # Empty or unreadable date: not computable yet
        if to_datetime(birth_date) is None:
            logger.debug(f"age() has no readable birth date: {birth_date!r}")
            return None
        return compute_age(birth_date, now)

    table = dict(FORMULA_FUNCTIONS)
    table["today"] = today
    table["age"] = age
    return table
