"""Rich output primitives for the command line.

Rendering only: nothing here reads configuration or touches the registry.
"""

from __future__ import annotations

from typing import Any

import pandas as pd
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from busccpy.config import MULTI_VALUE_SEPARATOR, RECORD_FIELDS

console = Console()


def rprint(*objects: Any, **kwargs: Any) -> None:
    """Print through the shared Rich console."""
    console.print(*objects, **kwargs)


def ui_success(message: str) -> None:
    rprint(f"[green]{escape(message)}[/green]")


def ui_warning(message: str) -> None:
    rprint(f"[yellow]{escape(message)}[/yellow]")


def ui_error(message: str) -> None:
    rprint(f"[bold red]{escape(message)}[/bold red]")


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return MULTI_VALUE_SEPARATOR.join(str(v) for v in value)
    return str(value)


def render_record_table(record: dict[str, Any], title: str | None = None) -> Table:
    r"""Build a two-column field/value table for one project record.

    Record fields come first in their canonical order, followed by any
    extra keys the record file carries.

    Examples
    --------
    >>> table = render_record_table({"id": "2026fa_math_jdoe", "methods": ["ANOVA"]})
    >>> table.row_count == 2
    True
    """
    table = Table(title=title or record.get("id"), show_header=True, header_style="bold blue")
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    keys = [k for k in RECORD_FIELDS if k in record]
    keys += [k for k in record if k not in RECORD_FIELDS]
    for key in keys:
        table.add_row(key, Text(_display(record[key])))
    return table


def render_registry_summary(frame: pd.DataFrame) -> Table:
    """Build a compact table of compiled registry rows (id, term, status, project)."""
    columns = [c for c in ("id", "term", "status", "project_name") if c in frame.columns]
    table = Table(title=f"Project registry ({len(frame)} records)", header_style="bold blue")
    for column in columns:
        table.add_column(column)
    for _, row in frame.iterrows():
        table.add_row(*(Text(str(row[c])) for c in columns))
    return table


__all__ = [
    "console",
    "render_record_table",
    "render_registry_summary",
    "rprint",
    "ui_error",
    "ui_success",
    "ui_warning",
]
