"""Traversal of dataclass trees into a flat :class:`FieldCatalog`.

``build_catalog`` has upsert semantics: optional sub-configurations that are
``None`` are replaced by freshly constructed instances so their fields can be
catalogued. Use :func:`materialize` to run only that step.
"""

from __future__ import annotations

import dataclasses
import typing
from typing import Any, Callable

from .errors import InvalidConfigError
from .fields import FieldCatalog, FieldDescriptor, FieldRef
from .kinds import Kind, resolve_type
from .logging import get_logger
from .tags import parse_tag

__all__ = [
    "TAG_NAME",
    "EMBEDDED_KEY",
    "build_catalog",
    "materialize",
    "setting",
    "embed",
]

logger = get_logger(__name__)

TAG_NAME = "config"
EMBEDDED_KEY = "embedded"


def setting(tag: str = "", *, tag_name: str = TAG_NAME, **field_kwargs: Any) -> Any:
    """Declare a dataclass field carrying a directive string::

        @dataclass
        class Server:
            port: int = setting("env,flag,default=8080", default=8080)
    """

    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[tag_name] = tag
    return dataclasses.field(metadata=metadata, **field_kwargs)


def embed(factory: Callable[[], Any] | None = None, *, optional: bool = False, **field_kwargs: Any) -> Any:
    """Declare an embedded sub-configuration whose fields join the enclosing namespace."""

    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[EMBEDDED_KEY] = True
    if optional:
        field_kwargs.setdefault("default", None)
    elif factory is not None:
        field_kwargs.setdefault("default_factory", factory)
    return dataclasses.field(metadata=metadata, **field_kwargs)


def _is_mutable_struct(value: Any) -> bool:
    if isinstance(value, type) or not dataclasses.is_dataclass(value):
        return False
    return not type(value).__dataclass_params__.frozen


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise InvalidConfigError(
            f"cannot resolve field annotations of {cls.__qualname__}: {exc}",
            details={"type": cls.__qualname__},
        ) from exc


def _settable(name: str) -> bool:
    return not name.startswith("_")


class _Walker:
    def __init__(self, tag_name: str, *, catalogue: bool) -> None:
        self.tag_name = tag_name
        self.catalogue = catalogue
        self.leaves: list[FieldDescriptor] = []
        self._active_types: list[type] = []
        self._active_ids: set[int] = set()

    def walk(self, obj: Any, enclosing: FieldDescriptor | None) -> None:
        if id(obj) in self._active_ids:
            raise InvalidConfigError(
                f"{type(obj).__qualname__} instance is reachable from itself",
                details={"type": type(obj).__qualname__},
            )
        self._active_ids.add(id(obj))
        self._active_types.append(type(obj))
        try:
            self._walk_fields(obj, enclosing)
        finally:
            self._active_types.pop()
            self._active_ids.discard(id(obj))

    def _walk_fields(self, obj: Any, enclosing: FieldDescriptor | None) -> None:
        hints = _type_hints(type(obj))
        for spec in dataclasses.fields(obj):
            if not _settable(spec.name):
                continue

            declared = hints.get(spec.name, spec.type)
            info = resolve_type(declared)
            node = FieldDescriptor(
                ref=FieldRef(obj, spec.name),
                declared_type=declared,
                type_info=info,
                name=spec.name,
                directives=parse_tag(spec.metadata.get(self.tag_name), field_name=spec.name),
                enclosing=enclosing,
                transparent=bool(spec.metadata.get(EMBEDDED_KEY, False)),
            )

            if info.kind is not Kind.STRUCT:
                self._emit(node)
                continue

            value = node.value
            if value is None and info.optional:
                if info.target in self._active_types:
                    logger.debug("Leaving recursive field %s of %s unset", spec.name, type(obj).__qualname__)
                    continue
                try:
                    value = info.target()
                except TypeError as exc:
                    raise InvalidConfigError(
                        f"cannot create a default {info.target.__qualname__} for field {spec.name!r}: {exc}",
                        details={"field": spec.name, "type": info.describe()},
                    ) from exc
                node.ref.set(value)
                logger.debug("Created %s for field %s", info.target.__qualname__, spec.name)

            if not _is_mutable_struct(value):
                raise InvalidConfigError(
                    f"field {spec.name!r} of {type(obj).__qualname__} must hold a mutable "
                    f"{info.describe()} instance, got {type(value).__qualname__}",
                    details={"field": spec.name, "type": info.describe()},
                )
            self.walk(value, node)

    def _emit(self, node: FieldDescriptor) -> None:
        if self.catalogue:
            self.leaves.append(node)


def _check_root(config: Any) -> None:
    if not _is_mutable_struct(config):
        raise InvalidConfigError(
            f"configuration must be a mutable dataclass instance, got {type(config).__qualname__}",
            details={"type": type(config).__qualname__},
        )


def build_catalog(config: Any, *, tag_name: str = TAG_NAME) -> FieldCatalog:
    """Walk ``config`` and return its bindable leaf fields in declaration order.

    Raises :class:`InvalidConfigError` when ``config`` (or a nested struct
    value) is not a mutable dataclass instance, and
    :class:`InvalidTagFormatError` on the first malformed directive.
    """

    _check_root(config)
    walker = _Walker(tag_name, catalogue=True)
    walker.walk(config, None)
    logger.debug("Catalogued %d fields of %s", len(walker.leaves), type(config).__qualname__)
    return FieldCatalog(tuple(walker.leaves))


def materialize(config: Any, *, tag_name: str = TAG_NAME) -> Any:
    """Replace ``None`` optional sub-configurations with default instances.

    Returns ``config`` for chaining.
    """

    _check_root(config)
    _Walker(tag_name, catalogue=False).walk(config, None)
    return config
