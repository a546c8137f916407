"""Parse free-text fields of external recipe datasets into typed values.

Source data is inconsistent ("25 minutes", "N/A", "6-8 servings", "Serves
four"). Anything that can't be parsed falls back to a default instead of
failing the record.
"""

import math
import re
from typing import Optional

DEFAULT_PREP_TIME = 30  # minutes
DEFAULT_SERVING_SIZE = 4

NOT_AVAILABLE = "N/A"

_DIGITS = re.compile(r"(\d+)")
_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")


def parse_prep_time(raw: Optional[str]) -> int:
    """Return the first integer found in ``raw``, in minutes.

    >>> parse_prep_time("25 minutes")
    25
    >>> parse_prep_time("N/A")
    30
    """
    if not raw or raw == NOT_AVAILABLE:
        return DEFAULT_PREP_TIME
    m = _DIGITS.search(str(raw))
    if not m:
        return DEFAULT_PREP_TIME
    minutes = int(m.group(1))
    return minutes if minutes > 0 else DEFAULT_PREP_TIME


def parse_serving_size(raw: Optional[str]) -> int:
    """Return the first number in ``raw`` rounded to a whole serving.

    >>> parse_serving_size("6-8 servings")
    6
    >>> parse_serving_size("2.5 cups")
    3
    """
    if not raw:
        return DEFAULT_SERVING_SIZE
    m = _NUMBER.search(str(raw))
    if not m:
        return DEFAULT_SERVING_SIZE
    # half rounds up; round() would give 2 for "2.5"
    servings = int(math.floor(float(m.group(1)) + 0.5))
    return servings if servings > 0 else DEFAULT_SERVING_SIZE


def format_prep_time(minutes: int) -> str:
    return f"{minutes} minutes"


def format_serving_size(servings: int) -> str:
    return f"{servings} servings"
