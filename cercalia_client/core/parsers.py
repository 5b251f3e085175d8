"""
Defensive numeric parsers for response fields.

The optional parsers return None for missing, blank or malformed input and
never raise. parse_required_coordinate is the exception: coordinates are
never optional, so a bad value is a validation error.
"""

import math
import re
from typing import Optional

import structlog

from .errors import CercaliaError

logger = structlog.get_logger(__name__)

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1

# Optional sign followed by digits only (no "1_000", no "1.0")
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")

# Plain decimal or scientific notation (no "nan", "inf", "1_000")
_DECIMAL_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_float_or_none(value: Optional[str]) -> Optional[float]:
    """
    Parse a decimal number.

    Args:
        value: Raw text (e.g. "41.38")

    Returns:
        float or None if blank or not a number
    """
    text = _clean(value)
    if text is None or not _DECIMAL_PATTERN.fullmatch(text):
        return None
    return float(text)


def _parse_integer(value: Optional[str], low: int, high: int) -> Optional[int]:
    text = _clean(value)
    if text is None or not _INTEGER_PATTERN.fullmatch(text):
        return None
    number = int(text)
    if number < low or number > high:
        return None
    return number


def parse_int_or_none(value: Optional[str]) -> Optional[int]:
    """Parse a signed 32-bit integer, or None."""
    return _parse_integer(value, INT32_MIN, INT32_MAX)


def parse_long_or_none(value: Optional[str]) -> Optional[int]:
    """Parse a signed 64-bit integer, or None."""
    return _parse_integer(value, INT64_MIN, INT64_MAX)


def parse_required_coordinate(value: Optional[str], axis: str) -> float:
    """
    Parse a coordinate component that must be present.

    Args:
        value: Raw text from the response
        axis: Axis name used in the error message ("latitude", "longitude")

    Returns:
        Parsed coordinate

    Raises:
        CercaliaError: VALIDATION error naming the axis
    """
    text = _clean(value)
    if text is None:
        raise CercaliaError.validation(f"{axis} coordinate cannot be empty")

    number = parse_float_or_none(text)
    if number is None or not math.isfinite(number):
        logger.warning("invalid_coordinate", axis=axis, value=text)
        raise CercaliaError.validation(f"Invalid {axis} coordinate: {text}")

    return number
