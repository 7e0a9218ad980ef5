"""Number parsing with age and size suffixes and strict integer parsing."""

from __future__ import annotations

import math
import re


class ConversionError(ValueError):
    """A string could not be converted to a number."""


_FLOAT_RE = re.compile(
    r"""\s*[+-]?(?:
        0[xX](?:[0-9a-fA-F]+(?:\.[0-9a-fA-F]*)?|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?
      | (?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?
      | inf(?:inity)?
      | nan
    )""",
    re.VERBOSE | re.IGNORECASE,
)

_INT_RE = re.compile(r"\s*[+-]?[0-9]+")

_LONG_MIN = -(2**63)
_LONG_MAX = 2**63 - 1


def _with_upper(table: dict[str, float]) -> dict[str, float]:
    result = {"": 1.0}
    for key, factor in table.items():
        result[key] = factor
        result[key.upper()] = factor
    return result


_AGE_MULTIPLIERS = _with_upper(
    {"s": 1.0, "m": 60.0, "h": 3600.0, "d": 86400.0, "w": 7 * 86400.0, "y": 31557600.0}
)

_SIZE_MULTIPLIERS = _with_upper(
    {"b": 1.0, "k": 1e3, "m": 1e6, "g": 1e9, "t": 1e12, "p": 1e15}
)


def _scan_float(text: str) -> tuple[float, int]:
    """Read a floating point number at the start of ``text``.

    Return the value and the index just past it; the index is 0 when no
    number was found.
    """
    match = _FLOAT_RE.match(text)
    if not match:
        return 0.0, 0
    token = match.group().strip()
    if token.lstrip("+-")[:2].lower() == "0x":
        value = float.fromhex(token)
    else:
        value = float(token)
    return value, match.end()


def _convert(text: str | None, multipliers: dict[str, float]) -> int:
    if not text:
        raise ConversionError("no number to convert (empty string)")

    value, end = _scan_float(text)
    if end == 0 or (math.isinf(value) and "inf" not in text[:end].lower()):
        raise ConversionError(f"converting `{text}' to a number failed")

    suffix = text[end:end + 1]
    factor = multipliers.get(suffix)
    if factor is None:
        raise ConversionError(f"invalid suffix `{suffix}' in `{text}'")

    trailing = text[end + 1:]
    if trailing:
        raise ConversionError(
            f"invalid trailing character `{trailing[0]}' in `{text}'"
        )

    try:
        return int(value * factor)
    except (OverflowError, ValueError):
        raise ConversionError(f"converting `{text}' to a number failed") from None


def parse_age(text: str | None) -> int:
    """Convert an age with an optional s, m, h, d, w or y suffix to seconds."""
    return _convert(text, _AGE_MULTIPLIERS)


def parse_size(text: str | None) -> int:
    """Convert a size with an optional b, k, m, g, t or p suffix to bytes (powers of 1000)."""
    return _convert(text, _SIZE_MULTIPLIERS)


def parse_int(text: str | None, errmesg: str) -> int:
    """Parse a whole decimal integer, raising ConversionError with ``errmesg`` on failure."""
    if text and _INT_RE.fullmatch(text):
        number = int(text)
        if _LONG_MIN <= number <= _LONG_MAX:
            return number
    raise ConversionError(f"{errmesg}: '{text}'")