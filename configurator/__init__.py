"""Struct-tree walking and string coercion for binding configuration values."""

from .coerce import coerce, parse_value
from .errors import (
    ConfiguratorError,
    InvalidConfigError,
    InvalidTagFormatError,
    UnsupportedTypeError,
)
from .fields import FieldCatalog, FieldDescriptor, FieldRef
from .kinds import (
    Float32,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    TypeInfo,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    resolve_type,
)
from .logging import configure_logging
from .render import catalog_table, print_catalog
from .tags import DirectiveSet, parse_tag
from .walker import build_catalog, embed, materialize, setting

__all__ = [
    "build_catalog",
    "materialize",
    "coerce",
    "parse_value",
    "parse_tag",
    "setting",
    "embed",
    "catalog_table",
    "print_catalog",
    "configure_logging",
    "DirectiveSet",
    "FieldCatalog",
    "FieldDescriptor",
    "FieldRef",
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
    "ConfiguratorError",
    "InvalidConfigError",
    "InvalidTagFormatError",
    "UnsupportedTypeError",
]
