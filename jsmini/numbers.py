"""Number conversions and Number.prototype formatting."""

from __future__ import annotations

import math
from decimal import Decimal

from .properties import JSRangeError

_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)
_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def number_to_string(x: float) -> str:
    """Format a number the way the language's ToString does."""
    if math.isnan(x):
        return "NaN"
    if x == 0:
        return "0"
    if math.isinf(x):
        return "-Infinity" if x < 0 else "Infinity"
    sign = "-" if x < 0 else ""
    parts = Decimal(repr(abs(float(x)))).as_tuple()
    digits = "".join(map(str, parts.digits))
    point = len(digits) + int(parts.exponent)
    digits = digits.rstrip("0")
    k = len(digits)
    if k <= point <= 21:
        body = digits + "0" * (point - k)
    elif 0 < point <= 21:
        body = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        body = "0." + "0" * -point + digits
    else:
        e = point - 1
        exp = f"e{'+' if e >= 0 else '-'}{abs(e)}"
        body = digits + exp if k == 1 else digits[0] + "." + digits[1:] + exp
    return sign + body


def to_integer(x: float) -> int:
    """Truncate toward zero, clamped to the 32-bit signed range; NaN gives 0."""
    if math.isnan(x) or x == 0:
        return 0
    if math.isinf(x):
        return _INT_MAX if x > 0 else _INT_MIN
    n = math.trunc(x)
    return max(_INT_MIN, min(_INT_MAX, n))


def to_int32(x: float) -> int:
    """Wrap a number into the 32-bit signed range."""
    if not math.isfinite(x) or x == 0:
        return 0
    n = math.trunc(x) % 2**32
    return n - 2**32 if n >= 2**31 else n


def to_uint32(x: float) -> int:
    """Wrap a number into the 32-bit unsigned range."""
    return to_int32(x) & 0xFFFFFFFF


def to_radix_string(x: float, radix: int = 10) -> str:
    """Number.prototype.toString with an optional radix from 2 to 36."""
    if radix == 10:
        return number_to_string(x)
    if radix < 2 or radix > 36:
        raise JSRangeError("invalid radix")
    if x == 0:
        return "0"
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "-Infinity" if x < 0 else "Infinity"

    sign = x < 0
    number = -x if sign else x
    limit = float(1 << 52)
    base = float(radix)

    exp = 0
    while number * base**exp > limit:
        exp -= 1
    while number * base ** (exp + 1) < limit:
        exp += 1
    u = int(number * base**exp + 0.5)

    while u > 0 and u % radix == 0:
        u //= radix
        exp -= 1

    rev: list[str] = []
    while u > 0:
        rev.append(_DIGITS[u % radix])
        u //= radix
    digits = "".join(reversed(rev))
    point = len(digits) - exp

    if point <= 0:
        body = "0." + "0" * -point + digits
    elif point >= len(digits):
        body = digits + "0" * (point - len(digits))
    else:
        body = digits[:point] + "." + digits[point:]
    return ("-" if sign else "") + body


def _format(fmt: str, width: int, x: float) -> str:
    text = fmt % (width, x)
    head, sep, tail = text.partition("e")
    if sep:
        text = f"{head}e{int(tail):+d}"
    return text


def _check_range(width: int, low: int, high: int) -> None:
    if width < low or width > high:
        raise JSRangeError(f"precision {width} out of range")


def to_fixed(x: float, digits: int = 0) -> str:
    """Number.prototype.toFixed."""
    _check_range(digits, 0, 20)
    if math.isnan(x) or math.isinf(x) or x <= -1e21 or x >= 1e21:
        return number_to_string(x)
    return _format("%.*f", digits, x)


def to_exponential(x: float, digits: int = 0) -> str:
    """Number.prototype.toExponential."""
    _check_range(digits, 0, 20)
    if math.isnan(x) or math.isinf(x):
        return number_to_string(x)
    return _format("%.*e", digits, x)


def to_precision(x: float, precision: int = 0) -> str:
    """Number.prototype.toPrecision."""
    _check_range(precision, 1, 21)
    if math.isnan(x) or math.isinf(x):
        return number_to_string(x)
    return _format("%.*g", precision, x)