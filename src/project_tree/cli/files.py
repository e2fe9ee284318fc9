import sys
from pathlib import Path
from typing import Annotated

import typer

from project_tree.cli.common import console, get_workspace, run
from project_tree.core.content import get_file_stats, read_file_content, save_file_content
from project_tree.core.nodes import create_file, create_folder, delete_node, rename_node
from project_tree.core.reconcile import format_file_size
from project_tree.core.transfer import export_file, export_folder, import_file, import_folder

import_app = typer.Typer(help="Copy files or folders into a project root.")
export_app = typer.Typer(help="Copy project files or folders elsewhere.")
node_app = typer.Typer(help="Create, rename and delete nodes.")

ProjectArg = Annotated[str, typer.Argument(help="Project id.")]
RelPathArg = Annotated[str, typer.Argument(help="Path relative to the project directory.")]
ParentOpt = Annotated[str | None, typer.Option("--parent", help="Parent folder node id (default: project root).")]


@import_app.command("file")
def import_file_cmd(
    project_id: ProjectArg,
    source: Annotated[Path, typer.Argument(help="File to import.")],
) -> None:
    """Import a file; name collisions get a ' (n)' suffix."""
    result = run(import_file(get_workspace(), project_id, source))
    console.print(f"[green]Imported[/green] {result.file_path} ({format_file_size(result.size)})")


@import_app.command("folder")
def import_folder_cmd(
    project_id: ProjectArg,
    source: Annotated[Path, typer.Argument(help="Folder to import.")],
) -> None:
    """Import a folder recursively; name collisions get a ' (n)' suffix."""
    result = run(import_folder(get_workspace(), project_id, source))
    console.print(f"[green]Imported[/green] {result.file_path}/ ({format_file_size(result.size)})")


@export_app.command("file")
def export_file_cmd(
    project_id: ProjectArg,
    file_path: RelPathArg,
    destination: Annotated[Path, typer.Argument(help="Destination file.")],
) -> None:
    """Export a single project file."""
    run(export_file(get_workspace(), project_id, file_path, destination))
    console.print(f"[green]Exported[/green] {file_path} -> {destination}")


@export_app.command("folder")
def export_folder_cmd(
    project_id: ProjectArg,
    folder_path: RelPathArg,
    destination: Annotated[Path, typer.Argument(help="Destination folder.")],
) -> None:
    """Export a project folder recursively."""
    run(export_folder(get_workspace(), project_id, folder_path, destination))
    console.print(f"[green]Exported[/green] {folder_path}/ -> {destination}")


def cat(project_id: ProjectArg, file_path: RelPathArg) -> None:
    """Print the text content of a project file."""
    content = run(read_file_content(get_workspace(), project_id, file_path))
    console.print(content, markup=False, highlight=False, end="")


def write(
    project_id: ProjectArg,
    file_path: RelPathArg,
    source: Annotated[Path | None, typer.Option(help="Read content from this file instead of stdin.")] = None,
) -> None:
    """Replace the content of a text file in a project."""
    content = source.read_text(encoding="utf-8") if source is not None else sys.stdin.read()
    run(save_file_content(get_workspace(), project_id, file_path, content))
    console.print(f"[green]Saved[/green] {file_path} ({len(content)} chars)")


def stats(project_id: ProjectArg, file_path: RelPathArg) -> None:
    """Show size, timestamps and type of a project file."""
    result = run(get_file_stats(get_workspace(), project_id, file_path))
    console.print(f"Type:     {result.file_type}")
    console.print(f"Size:     {format_file_size(result.size)} ({result.size} bytes)")
    console.print(f"Modified: {result.modified}")
    console.print(f"Created:  {result.created}")
    console.print(f"Binary:   {'yes' if result.is_binary else 'no'}")


@node_app.command("mkdir")
def mkdir(
    project_id: ProjectArg,
    name: Annotated[str, typer.Argument(help="Folder name.")],
    parent: ParentOpt = None,
) -> None:
    """Create a folder node and its directory."""
    node = run(create_folder(get_workspace(), project_id, parent, name))
    console.print(f"[green]Created[/green] folder {node.file_path} ({node.id})")


@node_app.command("touch")
def touch(
    project_id: ProjectArg,
    name: Annotated[str, typer.Argument(help="File name.")],
    parent: ParentOpt = None,
) -> None:
    """Create a file node with a template body."""
    node = run(create_file(get_workspace(), project_id, parent, name))
    console.print(f"[green]Created[/green] file {node.file_path} ({node.id})")


@node_app.command("rename")
def rename(
    node_id: Annotated[str, typer.Argument(help="Node id.")],
    new_name: Annotated[str, typer.Argument(help="New name.")],
) -> None:
    """Rename a node and its backing path."""
    node = run(rename_node(get_workspace(), node_id, new_name))
    console.print(f"[green]Renamed[/green] to {node.file_path}")


@node_app.command("rm")
def rm(node_id: Annotated[str, typer.Argument(help="Node id.")]) -> None:
    """Delete a node, everything below it and its backing path."""
    removed = run(delete_node(get_workspace(), node_id))
    console.print(f"[green]Deleted[/green] {len(removed)} node(s)")
