from __future__ import annotations

import logging
import typing
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from configurator import (
    ConfiguratorError,
    Float32,
    Int8,
    Int32,
    Uint,
    Uint8,
    Uint64,
    UnsupportedTypeError,
    build_catalog,
    coerce,
    parse_value,
)
from configurator.errors import UNSUPPORTED_TYPE
from configurator.fields import FieldRef


@dataclass
class Limits:
    burst: int = 0


@dataclass
class Target:
    enabled: bool = False
    count: int = 0
    small: Int8 = Int8(0)
    medium: Int32 = Int32(0)
    unsigned: Uint = Uint(0)
    byte: Uint8 = Uint8(0)
    big: Uint64 = Uint64(0)
    ratio: float = 0.0
    narrow: Float32 = Float32(0.0)
    name: str = ""
    timeout: timedelta = timedelta(0)
    started: datetime | None = None
    deadline: datetime = field(default_factory=lambda: datetime(2000, 1, 1, tzinfo=timezone.utc))
    retries: int | None = None
    label: Optional[str] = None
    grace: timedelta | None = None
    limits: Limits = field(default_factory=Limits)
    hosts: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)
    ratio_or_name: int | str = 0
    blob: bytes = b""


HINTS = typing.get_type_hints(Target)


def _coerce(target: Target, name: str, raw: str) -> None:
    coerce(FieldRef(target, name), HINTS[name], raw)


@pytest.mark.parametrize(
    ("name", "raw", "expected"),
    [
        ("enabled", "true", True),
        ("enabled", "0", False),
        ("count", "42", 42),
        ("count", "-0x10", -16),
        ("small", "-128", -128),
        ("medium", "2147483647", 2147483647),
        ("unsigned", "0b11", 3),
        ("byte", "255", 255),
        ("big", "18446744073709551615", (1 << 64) - 1),
        ("ratio", "2.5", 2.5),
        ("name", " spaced value ", " spaced value "),
        ("timeout", "1h30m", timedelta(hours=1, minutes=30)),
        ("started", "2024-03-01T12:30:00Z", datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)),
        ("deadline", "1999-12-31T23:59:59-01:00", datetime(2000, 1, 1, 0, 59, 59, tzinfo=timezone.utc)),
        ("retries", "5", 5),
        ("label", "primary", "primary"),
        ("grace", "250ms", timedelta(milliseconds=250)),
    ],
)
def test_coerce_supported_kinds(name: str, raw: str, expected: object) -> None:
    target = Target()

    _coerce(target, name, raw)

    assert getattr(target, name) == expected


def test_float32_is_narrowed() -> None:
    target = Target()

    _coerce(target, "narrow", "0.1")

    assert target.narrow != 0.1
    assert target.narrow == pytest.approx(0.1, rel=1e-7)


def test_round_trip_through_catalog() -> None:
    target = Target()
    catalog = build_catalog(target)
    originals = {
        "count": 42,
        "enabled": True,
        "timeout": timedelta(hours=1, minutes=30),
        "started": datetime(2023, 7, 4, 9, 15, 30, tzinfo=timezone.utc),
    }
    literals = {
        "count": "42",
        "enabled": "true",
        "timeout": "1h30m",
        "started": "2023-07-04T09:15:30Z",
    }

    for name, raw in literals.items():
        descriptor = catalog.find(name)
        assert descriptor is not None
        descriptor.coerce(raw)

    for name, value in originals.items():
        assert getattr(target, name) == value


def test_bad_literal_is_a_plain_parse_failure() -> None:
    target = Target()

    with pytest.raises(ValueError) as excinfo:
        _coerce(target, "count", "not-a-number")

    assert not isinstance(excinfo.value, ConfiguratorError)
    assert target.count == 0


def test_out_of_range_for_declared_width() -> None:
    with pytest.raises(ValueError):
        _coerce(Target(), "small", "128")
    with pytest.raises(ValueError):
        _coerce(Target(), "byte", "-1")


def test_struct_fields_are_unsupported() -> None:
    with pytest.raises(UnsupportedTypeError) as excinfo:
        _coerce(Target(), "limits", "burst=3")

    assert excinfo.value.code == UNSUPPORTED_TYPE
    assert "[struct]" in str(excinfo.value)


@pytest.mark.parametrize("name", ["ratio_or_name", "blob"])
def test_other_types_are_unsupported(name: str) -> None:
    with pytest.raises(UnsupportedTypeError) as excinfo:
        _coerce(Target(), name, "x")

    assert excinfo.value.to_dict()["details"]["kind"] == "unsupported"


@pytest.mark.parametrize("name", ["hosts", "labels"])
def test_collections_are_skipped_with_a_warning(name: str, caplog: pytest.LogCaptureFixture) -> None:
    target = Target()

    with caplog.at_level(logging.WARNING, logger="configurator"):
        _coerce(target, name, "a,b")

    assert not getattr(target, name)
    assert "collections are not supported" in caplog.text


def test_parse_value_does_not_store() -> None:
    assert parse_value(int, "0x10") == 16
    assert parse_value(timedelta | None, "2s") == timedelta(seconds=2)
    with pytest.raises(UnsupportedTypeError):
        parse_value(list[int], "1")
