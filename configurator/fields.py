"""Field descriptors, key derivation and the flat field catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Sequence

from .coerce import coerce
from .kinds import TypeInfo
from .tags import DirectiveSet

__all__ = [
    "ENV_KEY_SEPARATOR",
    "FLAG_KEY_SEPARATOR",
    "FieldRef",
    "FieldDescriptor",
    "FieldCatalog",
]

ENV_KEY_SEPARATOR = "_"
FLAG_KEY_SEPARATOR = "-"


@dataclass(slots=True, eq=False)
class FieldRef:
    """Settable handle to ``owner.name``. Does not own ``owner``."""

    owner: Any
    name: str

    def get(self) -> Any:
        return getattr(self.owner, self.name)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.name, value)


@dataclass(slots=True, eq=False)
class FieldDescriptor:
    """One node of the configuration tree.

    Leaves appear in a :class:`FieldCatalog`; struct-valued fields only show
    up as the ``enclosing`` node of their children. Embedded struct fields
    are ``transparent``: they add no segment to a child's path.
    """

    ref: FieldRef
    declared_type: Any
    type_info: TypeInfo
    name: str
    directives: DirectiveSet
    enclosing: FieldDescriptor | None = None
    transparent: bool = False

    @property
    def parent(self) -> FieldDescriptor | None:
        """Nearest enclosing field that contributes a path segment."""

        node = self.enclosing
        while node is not None and node.transparent:
            node = node.enclosing
        return node

    @property
    def value(self) -> Any:
        return self.ref.get()

    def path(self) -> list[str]:
        segments = [self.name]
        node = self.parent
        while node is not None:
            segments.append(node.name)
            node = node.parent
        segments.reverse()
        return segments

    def environment_key(self) -> str:
        """Environment variable name, or ``""`` when the field is not env-bindable."""

        if not self.directives.has_env:
            return ""
        if self.directives.env:
            return self.directives.env
        return ENV_KEY_SEPARATOR.join(self.path()).upper()

    def flag_key(self) -> str:
        """Flag name, or ``""`` when the field is not flag-bindable."""

        if not self.directives.has_flag:
            return ""
        if self.directives.flag:
            return self.directives.flag
        return FLAG_KEY_SEPARATOR.join(self.path()).lower()

    def default_value(self) -> str:
        if self.directives.has_default:
            return self.directives.default or ""
        return ""

    def coerce(self, raw: str) -> None:
        coerce(self.ref, self.declared_type, raw)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path(),
            "type": self.type_info.describe(),
            "kind": self.type_info.kind.value,
            "env": self.environment_key(),
            "flag": self.flag_key(),
            "default": self.default_value(),
            "has_default": self.directives.has_default,
        }


@dataclass(frozen=True, slots=True)
class FieldCatalog:
    """Ordered leaf descriptors of a configuration tree, in declaration order."""

    fields: tuple[FieldDescriptor, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __getitem__(self, index: int) -> FieldDescriptor:
        return self.fields[index]

    def find(self, *path: str) -> FieldDescriptor | None:
        wanted: Sequence[str] = list(path)
        for descriptor in self.fields:
            if descriptor.path() == wanted:
                return descriptor
        return None

    def by_environment_key(self) -> dict[str, FieldDescriptor]:
        """Env-bindable fields keyed by environment key; later fields win on clashes."""

        return {d.environment_key(): d for d in self.fields if d.environment_key()}

    def by_flag_key(self) -> dict[str, FieldDescriptor]:
        return {d.flag_key(): d for d in self.fields if d.flag_key()}

    def to_dict(self) -> dict[str, Any]:
        return {"fields": [descriptor.to_dict() for descriptor in self.fields]}
