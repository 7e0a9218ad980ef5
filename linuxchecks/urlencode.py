"""Percent-encoding of strings for use in URLs."""

from __future__ import annotations

_HEX_DIGITS = "0123456789abcdef"
_UNRESERVED = frozenset(
    b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_.~"
)


def from_hex(ch: str) -> int:
    """Return the value of a single hexadecimal digit."""
    if ch.isdigit():
        return ord(ch) - ord("0")
    return ord(ch.lower()) - ord("a") + 10


def to_hex(code: int) -> str:
    """Return the lower-case hexadecimal digit for the low nibble of ``code``."""
    return _HEX_DIGITS[code & 15]


def url_encode(text: str) -> str:
    """Return ``text`` URL-encoded, with spaces written as ``+``."""
    parts = []
    for byte in text.encode("utf-8"):
        if byte in _UNRESERVED:
            parts.append(chr(byte))
        elif byte == 0x20:
            parts.append("+")
        else:
            parts.append("%" + to_hex(byte >> 4) + to_hex(byte))
    return "".join(parts)