"""Closed classification of the field types the configurator understands."""

from __future__ import annotations

import collections.abc
import dataclasses
import types
import typing
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, NewType

__all__ = [
    "Kind",
    "TypeInfo",
    "resolve_type",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "PLATFORM_INT_BITS",
]

PLATFORM_INT_BITS = 64

# Sized numeric markers. At runtime they are plain ``int``/``float``; the
# walker and coercer use them to pick the parse width.
Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Uint = NewType("Uint", int)
Uint8 = NewType("Uint8", int)
Uint16 = NewType("Uint16", int)
Uint32 = NewType("Uint32", int)
Uint64 = NewType("Uint64", int)
Float32 = NewType("Float32", float)


class Kind(Enum):
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT = "uint"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    DURATION = "duration"
    TIMESTAMP = "timestamp"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    UNSUPPORTED = "unsupported"

    @property
    def bits(self) -> int | None:
        """Storage width for numeric kinds, ``None`` for everything else."""

        return _BITS.get(self)

    @property
    def is_signed_int(self) -> bool:
        return self in _SIGNED

    @property
    def is_unsigned_int(self) -> bool:
        return self in _UNSIGNED

    @property
    def is_float(self) -> bool:
        return self in (Kind.FLOAT32, Kind.FLOAT64)


_SIGNED = frozenset({Kind.INT, Kind.INT8, Kind.INT16, Kind.INT32, Kind.INT64})
_UNSIGNED = frozenset({Kind.UINT, Kind.UINT8, Kind.UINT16, Kind.UINT32, Kind.UINT64})

_BITS: dict[Kind, int] = {
    Kind.INT: PLATFORM_INT_BITS,
    Kind.INT8: 8,
    Kind.INT16: 16,
    Kind.INT32: 32,
    Kind.INT64: 64,
    Kind.UINT: PLATFORM_INT_BITS,
    Kind.UINT8: 8,
    Kind.UINT16: 16,
    Kind.UINT32: 32,
    Kind.UINT64: 64,
    Kind.FLOAT32: 32,
    Kind.FLOAT64: 64,
}

_SCALAR_KINDS: dict[Any, Kind] = {
    bool: Kind.BOOL,
    int: Kind.INT,
    Int8: Kind.INT8,
    Int16: Kind.INT16,
    Int32: Kind.INT32,
    Int64: Kind.INT64,
    Uint: Kind.UINT,
    Uint8: Kind.UINT8,
    Uint16: Kind.UINT16,
    Uint32: Kind.UINT32,
    Uint64: Kind.UINT64,
    float: Kind.FLOAT64,
    Float32: Kind.FLOAT32,
    str: Kind.STRING,
    timedelta: Kind.DURATION,
    datetime: Kind.TIMESTAMP,
}

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, collections.abc.Sequence, collections.abc.Set)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping)


@dataclass(frozen=True, slots=True)
class TypeInfo:
    """Classification of a declared annotation.

    ``target`` is the annotation with ``Annotated`` and ``Optional`` layers
    removed; ``optional`` records whether a ``None`` layer was present.
    """

    declared: Any
    target: Any
    kind: Kind
    optional: bool = False

    @property
    def is_struct(self) -> bool:
        return self.kind is Kind.STRUCT

    def describe(self) -> str:
        name = getattr(self.target, "__name__", None) or repr(self.target)
        return f"{name} | None" if self.optional else name


def _strip_annotated(annotation: Any) -> Any:
    while typing.get_origin(annotation) is typing.Annotated:
        annotation = typing.get_args(annotation)[0]
    return annotation


def _is_union(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    return origin is typing.Union or origin is types.UnionType


def resolve_type(annotation: Any) -> TypeInfo:
    """Classify ``annotation`` into a :class:`Kind`.

    ``Optional`` layers may nest arbitrarily deep; they are all peeled off and
    reported as a single ``optional`` flag.
    """

    target = _strip_annotated(annotation)
    optional = False
    while _is_union(target):
        arms = [arm for arm in typing.get_args(target) if arm is not type(None)]
        if len(arms) == len(typing.get_args(target)) or len(arms) != 1:
            return TypeInfo(annotation, target, Kind.UNSUPPORTED, optional)
        optional = True
        target = _strip_annotated(arms[0])

    kind = _SCALAR_KINDS.get(target)
    if kind is None:
        kind = _classify_composite(target)
    return TypeInfo(annotation, target, kind, optional)


def _classify_composite(target: Any) -> Kind:
    if isinstance(target, type) and dataclasses.is_dataclass(target):
        return Kind.STRUCT
    origin = typing.get_origin(target) or target
    if isinstance(origin, type):
        if issubclass(origin, (str, bytes)):
            return Kind.UNSUPPORTED
        if issubclass(origin, _MAPPING_ORIGINS):
            return Kind.MAPPING
        if issubclass(origin, _SEQUENCE_ORIGINS):
            return Kind.SEQUENCE
    return Kind.UNSUPPORTED
