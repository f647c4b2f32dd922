"""Strict literal parsers used by the coercer.

Every parser raises :class:`ValueError` on malformed input. These errors are
deliberately left untranslated so callers see the parser's own message.
"""

from __future__ import annotations

import math
import re
import struct
from datetime import datetime, timedelta, timezone

__all__ = [
    "parse_bool",
    "parse_int",
    "parse_uint",
    "parse_float",
    "parse_duration",
    "parse_timestamp",
]

BOOL_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
BOOL_FALSE = {"0", "f", "F", "FALSE", "false", "False"}

_BASE_PREFIXES = {"0x": 16, "0X": 16, "0o": 8, "0O": 8, "0b": 2, "0B": 2}
_DIGITS = "0123456789abcdef"

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

DURATION_UNITS = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}
_MAX_DURATION_NS = (1 << 63) - 1
_DURATION_TERM = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]+)")

RFC3339 = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})"
)

_FLOAT32_MAX = 3.4028234663852886e38


def _syntax_error(kind: str, text: str) -> ValueError:
    return ValueError(f"invalid {kind} literal: {text!r}")


def _range_error(kind: str, text: str, bits: int) -> ValueError:
    return ValueError(f"{kind} literal {text!r} out of range for {bits}-bit storage")


def _check_plain(kind: str, text: str) -> None:
    if not text or not text.isascii() or text != text.strip():
        raise _syntax_error(kind, text)


def parse_bool(text: str) -> bool:
    if text in BOOL_TRUE:
        return True
    if text in BOOL_FALSE:
        return False
    raise _syntax_error("boolean", text)


def _parse_digits(text: str, body: str, base: int, *, prefixed: bool) -> int:
    if not body:
        raise _syntax_error("integer", text)
    # Underscores may only separate digits and may follow a base prefix.
    if body.endswith("_") or "__" in body or (body.startswith("_") and not prefixed):
        raise _syntax_error("integer", text)
    value = 0
    for char in body.replace("_", "").lower():
        digit = _DIGITS.find(char)
        if digit < 0 or digit >= base:
            raise _syntax_error("integer", text)
        value = value * base + digit
    return value


def _parse_magnitude(text: str, unsigned: str) -> int:
    prefix = unsigned[:2]
    if prefix in _BASE_PREFIXES:
        return _parse_digits(text, unsigned[2:], _BASE_PREFIXES[prefix], prefixed=True)
    if len(unsigned) > 1 and unsigned[0] == "0":
        return _parse_digits(text, unsigned[1:], 8, prefixed=True)
    return _parse_digits(text, unsigned, 10, prefixed=False)


def parse_int(text: str, bits: int = 64) -> int:
    """Parse a signed integer with base auto-detection, bounded to ``bits``."""

    _check_plain("integer", text)
    negative = text[0] == "-"
    unsigned = text[1:] if text[0] in "+-" else text
    magnitude = _parse_magnitude(text, unsigned)
    value = -magnitude if negative else magnitude
    if not -(1 << (bits - 1)) <= value < (1 << (bits - 1)):
        raise _range_error("integer", text, bits)
    return value


def parse_uint(text: str, bits: int = 64) -> int:
    """Parse an unsigned integer with base auto-detection, bounded to ``bits``."""

    _check_plain("unsigned integer", text)
    if text[0] in "+-":
        raise _syntax_error("unsigned integer", text)
    value = _parse_magnitude(text, text)
    if value >= 1 << bits:
        raise _range_error("unsigned integer", text, bits)
    return value


def _narrow_float32(value: float) -> float:
    if math.isinf(value) or math.isnan(value):
        return value
    if abs(value) > _FLOAT32_MAX:
        return math.copysign(math.inf, value)
    return struct.unpack("f", struct.pack("f", value))[0]


def parse_float(text: str, bits: int = 64) -> float:
    _check_plain("float", text)
    lowered = text.lower().lstrip("+-")
    if lowered.startswith("0x"):
        try:
            value = float.fromhex(text.replace("_", ""))
        except (ValueError, OverflowError) as exc:
            raise _syntax_error("float", text) from exc
    else:
        try:
            value = float(text)
        except ValueError as exc:
            raise _syntax_error("float", text) from exc
    if math.isinf(value) and not lowered.startswith("inf"):
        raise _range_error("float", text, 64)
    if bits == 32:
        value = _narrow_float32(value)
    return value


def parse_duration(text: str) -> timedelta:
    """Parse a duration literal such as ``300ms``, ``-1.5h`` or ``2h45m``.

    The total is bounded to a signed 64-bit nanosecond count; precision below
    one microsecond is truncated toward zero.
    """

    original = text
    if not text:
        raise _syntax_error("duration", original)
    negative = False
    if text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise _syntax_error("duration", original)

    total = 0
    position = 0
    while position < len(text):
        match = _DURATION_TERM.match(text, position)
        if match is None:
            raise _syntax_error("duration", original)
        whole, fraction, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not fraction:
            raise _syntax_error("duration", original)
        scale = DURATION_UNITS.get(unit)
        if scale is None:
            raise ValueError(f"unknown unit {unit!r} in duration {original!r}")
        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > _MAX_DURATION_NS + (1 if negative else 0):
            raise _range_error("duration", original, 64)
        position = match.end()

    microseconds = total // MICROSECOND
    return timedelta(microseconds=-microseconds if negative else microseconds)


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 date-time into a timezone-aware :class:`datetime`."""

    match = RFC3339.fullmatch(text)
    if match is None:
        raise _syntax_error("RFC 3339 timestamp", text)
    offset = match.group("offset")
    if offset == "Z":
        tz = timezone.utc
    else:
        hours, minutes = int(offset[1:3]), int(offset[4:6])
        if hours > 23 or minutes > 59:
            raise _syntax_error("RFC 3339 timestamp", text)
        delta = timedelta(hours=hours, minutes=minutes)
        tz = timezone(-delta if offset[0] == "-" else delta)
    fraction = match.group("fraction") or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0
    try:
        return datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            microsecond,
            tzinfo=tz,
        )
    except ValueError as exc:
        raise _syntax_error("RFC 3339 timestamp", text) from exc
