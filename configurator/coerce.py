"""Conversion of raw strings into typed field values."""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Protocol

from .errors import UnsupportedTypeError
from .kinds import Kind, TypeInfo, resolve_type
from .literals import (
    parse_bool,
    parse_duration,
    parse_float,
    parse_int,
    parse_timestamp,
    parse_uint,
)
from .logging import get_logger

__all__ = [
    "Settable",
    "coerce",
    "parse_value",
]

logger = get_logger(__name__)


class Settable(Protocol):
    def set(self, value: Any) -> None: ...


def _bits(kind: Kind) -> int:
    bits = kind.bits
    assert bits is not None
    return bits


def _build_parsers() -> dict[Kind, Callable[[str], Any]]:
    parsers: dict[Kind, Callable[[str], Any]] = {
        Kind.BOOL: parse_bool,
        Kind.STRING: str,
        Kind.DURATION: parse_duration,
        Kind.TIMESTAMP: parse_timestamp,
    }
    for kind in Kind:
        if kind.is_signed_int:
            parsers[kind] = partial(parse_int, bits=_bits(kind))
        elif kind.is_unsigned_int:
            parsers[kind] = partial(parse_uint, bits=_bits(kind))
        elif kind.is_float:
            parsers[kind] = partial(parse_float, bits=_bits(kind))
    return parsers


_PARSERS = _build_parsers()

# Collections have no coercion rule yet; coercing into one leaves the field as is.
_SKIPPED = frozenset({Kind.SEQUENCE, Kind.MAPPING})


def _unsupported(info: TypeInfo) -> UnsupportedTypeError:
    return UnsupportedTypeError(
        f"coerce: unsupported type [{info.kind.value}]",
        details={"kind": info.kind.value, "type": info.describe(), "optional": info.optional},
    )


def parse_value(declared_type: Any, raw: str) -> Any:
    """Return ``raw`` converted for ``declared_type`` without storing it.

    Raises :class:`UnsupportedTypeError` for kinds without a rule, including
    collections; literal parse failures propagate as :class:`ValueError`.
    """

    info = resolve_type(declared_type)
    parser = _PARSERS.get(info.kind)
    if parser is None:
        raise _unsupported(info)
    return parser(raw)


def coerce(destination: Settable, declared_type: Any, raw: str) -> None:
    """Convert ``raw`` for ``declared_type`` and write it into ``destination``.

    Optional types take the rule of the type they wrap. Sequence and mapping
    fields are left untouched and a warning is logged.
    """

    info = resolve_type(declared_type)
    if info.kind in _SKIPPED:
        logger.warning("Skipping %s coercion for %s: collections are not supported", info.kind.value, info.describe())
        return
    parser = _PARSERS.get(info.kind)
    if parser is None:
        raise _unsupported(info)
    destination.set(parser(raw))
