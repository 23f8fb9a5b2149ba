"""Number formatting for deskcalc.

Converts between the engine's decimal strings and floats:
- parse_operand: lenient decimal-string parsing (longest numeric prefix)
- number_to_string: shortest round-trip text for a result
- format_display: what the screen shows for a current value
"""

import math
import re
from decimal import Decimal


# Values at or above this magnitude are shown in exponential notation
EXPONENTIAL_THRESHOLD = 1e12
EXPONENTIAL_DIGITS = 6
DISPLAY_PRECISION = 8
MAX_DISPLAY_LENGTH = 12

_NUMERIC_PREFIX = re.compile(
    r"^\s*[+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)"
)


def parse_operand(text: str) -> float:
    """Parse the leading number in text.

    Trailing garbage is ignored ("12." and "1e-7." both parse), and text with
    no numeric prefix yields NaN.

    Args:
        text: Decimal string as typed or stored by the engine.

    Returns:
        Parsed float.
    """
    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return math.nan
    return float(match.group(0))


def _exponential(value: float, digits: int) -> str:
    mantissa, exponent = f"{value:.{digits}e}".split("e")
    return f"{mantissa}e{int(exponent):+d}"


def number_to_string(value: float) -> str:
    """Render a number as the engine stores it.

    Integral values lose their fractional part, magnitudes below 1e-6 or from
    1e21 up use a compact exponent ("1e-7", "1.5e+21"), and everything else
    is plain decimal.

    Args:
        value: Number to render.

    Returns:
        Decimal string.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))

    text = repr(value)
    if "e" not in text:
        return text

    mantissa, exponent = text.split("e")
    exponent = int(exponent)
    if -7 < exponent < 21:
        return format(Decimal(text), "f")
    return f"{mantissa}e{exponent:+d}"


def to_exponential(value: float, digits: int = EXPONENTIAL_DIGITS) -> str:
    """Render value in exponential notation with a fixed mantissa length."""
    if not math.isfinite(value):
        return number_to_string(value)
    return _exponential(value, digits)


def to_precision(value: float, precision: int = DISPLAY_PRECISION) -> str:
    """Render value with a fixed count of significant digits.

    Trailing zeros are kept. Exponential notation is used when the decimal
    exponent is below -6 or not smaller than the precision.
    """
    if not math.isfinite(value):
        return number_to_string(value)
    if value == 0:
        return "0." + "0" * (precision - 1) if precision > 1 else "0"

    exponent = int(f"{value:.{precision - 1}e}".split("e")[1])
    if exponent < -6 or exponent >= precision:
        return _exponential(value, precision - 1)
    return f"{value:.{max(precision - 1 - exponent, 0)}f}"


def format_display(current_value: str, max_length: int = MAX_DISPLAY_LENGTH) -> str:
    """Format a current value for the screen.

    Never changes the stored value; only the returned text differs.

    Args:
        current_value: Engine decimal string.
        max_length: Longest raw string shown unmodified.

    Returns:
        Display text.
    """
    numeric = parse_operand(current_value)

    if abs(numeric) >= EXPONENTIAL_THRESHOLD:
        return to_exponential(numeric)
    if len(current_value) > max_length:
        return to_precision(numeric)
    return current_value
