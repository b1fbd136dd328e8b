# content_cost_model/utils/parsing.py
"""
Lenient number parsing. Malformed values resolve to a fallback rather than
raising, so a bad cell or a hand-edited snapshot never stops a calculation.
"""

import logging
import math
from typing import Any

logger = logging.getLogger(__name__)


def to_number(value: Any, default: float = 0.0) -> float:
    """Parse ``value`` as a finite float, returning ``default`` when it is not one.

    Accepts ints, floats and numeric strings (surrounding whitespace allowed).
    ``None``, blanks, booleans, NaN/inf and anything unparseable yield ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return default
        try:
            number = float(text)
        except ValueError:
            logger.debug(f"Could not parse {value!r} as a number, using {default}")
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def to_non_negative(value: Any, default: float = 0.0) -> float:
    """Like :func:`to_number` but negative values are floored at zero."""
    return max(0.0, to_number(value, default))


def to_int(value: Any, default: int) -> int:
    number = to_number(value, float(default))
    return int(number)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))
