"""Lenient parsing of numeric strings from query strings and provider data."""

import re
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(value: Any) -> Optional[int]:
    """Parse the integer a string starts with.

    >>> parse_leading_int(" 1270000.5")
    1270000
    >>> parse_leading_int("abc") is None
    True

    Digit runs too long for int() (see sys.get_int_max_str_digits) count
    as unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value

    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        return None
