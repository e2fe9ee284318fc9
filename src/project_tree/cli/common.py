import asyncio
from collections.abc import Coroutine, Sequence
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from project_tree.core.workspace import Workspace
from project_tree.errors import ProjectTreeError

T = TypeVar("T")

console = Console()


def get_workspace() -> Workspace:
    from project_tree.store.factory import open_workspace

    return open_workspace()


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run ``coro`` to completion, turning core errors into a non-zero exit."""
    try:
        return asyncio.run(coro)
    except ProjectTreeError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1) from exc


def render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*("" if v is None else str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")
