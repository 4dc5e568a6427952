"""
Lenient numeric parsing for untrusted order payloads.

Order ingestion must not fail on a single malformed value, so these helpers
never raise. Each returns a ``ParseResult`` whose ``ok`` flag records whether
the input actually parsed or the default was substituted.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, NamedTuple, Optional

_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")

CENTS = Decimal("0.01")


class ParseResult(NamedTuple):
    value: Any
    ok: bool


def _parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value.strip())
        if match:
            return float(match.group(0))
    return None


def lenient_float(value: Any, default: float = 0.0) -> ParseResult:
    """Parse the leading decimal number of ``value``, else ``default``."""
    number = _parse_float(value)
    if number is None:
        return ParseResult(default, False)
    return ParseResult(number, True)


def lenient_int(value: Any, default: int = 1) -> ParseResult:
    """Parse the leading integer of ``value`` (floats truncate), else ``default``."""
    if value is None or isinstance(value, bool):
        return ParseResult(default, False)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
        if not math.isfinite(number):
            return ParseResult(default, False)
        return ParseResult(int(number), True)
    if isinstance(value, str):
        match = _INT_PREFIX.match(value.strip())
        if match:
            return ParseResult(int(match.group(0)), True)
    return ParseResult(default, False)


def positive_quantity(value: Any) -> ParseResult:
    """Quantity for an invoice line: a parsed integer of at least 1."""
    parsed = lenient_int(value, default=1)
    if parsed.value < 1:
        return ParseResult(1, False)
    return parsed


def format_amount(value: Any) -> str:
    """Fixed two-decimal string, rounding half away from zero."""
    if isinstance(value, float) and not math.isfinite(value):
        value = 0
    return str(Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP))


def display_value(value: Any) -> str:
    """Render a property value as the customer supplied it."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
