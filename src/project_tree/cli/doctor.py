"""Consistency checks, repairs and store backups."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from project_tree.cli.common import console, get_workspace, render_table, run
from project_tree.core.diagnostics import find_duplicate_paths, find_orphans, repair_orphans
from project_tree.store.json_store import JsonDatasetStore

doctor_app = typer.Typer(help="Find and repair inconsistencies in the node tree.")
store_app = typer.Typer(help="Back up and restore the dataset document.")

ProjectArg = Annotated[str, typer.Argument(help="Project id.")]


@doctor_app.command("orphans")
def orphans(project_id: ProjectArg) -> None:
    """List nodes whose parent is missing."""
    nodes = run(find_orphans(get_workspace(), project_id))
    render_table(["id", "type", "name", "parent_id"], [(n.id, n.type, n.name, n.parent_id) for n in nodes])


@doctor_app.command("repair")
def repair(project_id: ProjectArg) -> None:
    """Move orphaned nodes under the project root."""
    nodes = run(repair_orphans(get_workspace(), project_id))
    if not nodes:
        console.print("No orphaned files - all files are properly organized")
        return
    console.print(f"[green]Moved[/green] {len(nodes)} orphaned node(s) to the project root")


@doctor_app.command("duplicates")
def duplicates(project_id: ProjectArg) -> None:
    """List paths claimed by more than one node."""
    claims = run(find_duplicate_paths(get_workspace(), project_id))
    render_table(["file_path", "node_ids"], [(path, ", ".join(ids)) for path, ids in sorted(claims.items())])


def _json_store() -> JsonDatasetStore:
    store = get_workspace().store
    if not isinstance(store, JsonDatasetStore):
        console.print("[red]The configured store does not support backups.[/red]")
        raise typer.Exit(1)
    return store


@store_app.command("backup")
def backup() -> None:
    """Copy the dataset document to a timestamped backup file."""
    path = run(_json_store().backup())
    console.print(f"[green]Created backup[/green] {path}")


@store_app.command("restore")
def restore(backup_path: Annotated[Path, typer.Argument(help="Backup file to restore.")]) -> None:
    """Validate a backup and make it the current dataset document."""
    run(_json_store().restore(backup_path))
    console.print(f"[green]Restored[/green] projects from {backup_path}")
