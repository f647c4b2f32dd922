"""Tabular presentation of a field catalog."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .fields import FieldCatalog

__all__ = ["catalog_table", "print_catalog"]

_UNSET = "[dim]-[/dim]"


def catalog_table(catalog: FieldCatalog, *, title: str = "Configuration fields") -> Table:
    """Build a table listing each field's path, type, env key, flag key and default."""

    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Env", style="green")
    table.add_column("Flag", style="green")
    table.add_column("Default")
    for descriptor in catalog:
        env_key = descriptor.environment_key()
        flag_key = descriptor.flag_key()
        table.add_row(
            ".".join(descriptor.path()),
            descriptor.type_info.describe(),
            env_key or _UNSET,
            f"--{flag_key}" if flag_key else _UNSET,
            descriptor.default_value() if descriptor.directives.has_default else _UNSET,
        )
    return table


def print_catalog(catalog: FieldCatalog, console: Console | None = None, **table_kwargs: str) -> None:
    (console or Console()).print(catalog_table(catalog, **table_kwargs))
