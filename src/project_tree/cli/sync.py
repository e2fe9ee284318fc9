from pathlib import Path
from typing import Annotated

import typer
from rich.tree import Tree

from project_tree.cli.common import console, get_workspace, render_table, run
from project_tree.core.projects import get_project_nodes, validate_project_structure
from project_tree.core.reconcile import auto_sync, rebuild_project_tree, summarize_sync, sync_external_files
from project_tree.models import Node

ProjectArg = Annotated[str, typer.Argument(help="Project id.")]


def _print_summary(nodes: list[Node], rebuild: bool) -> None:
    summary = summarize_sync(nodes, rebuild=rebuild)
    label = "Rebuilt" if rebuild else "Added"
    console.print(
        f"[green]{label}[/green] {summary.total_count} entries "
        f"({summary.file_count} files, {summary.folder_count} folders, {summary.total_size})"
    )


def sync(project_id: ProjectArg) -> None:
    """Add nodes for files created outside the application."""
    workspace = get_workspace()
    new_nodes = run(sync_external_files(workspace, project_id))
    if not new_nodes:
        console.print("No new files found - project is already in sync")
        return
    _print_summary(new_nodes, rebuild=False)
    render_table(["type", "file_path"], [(n.type, n.file_path) for n in new_nodes])


def rebuild(
    project_id: ProjectArg,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
) -> None:
    """Discard every node of a project and regenerate them from disk."""
    if not yes:
        typer.confirm("Rebuilding drops all node metadata not derivable from disk. Continue?", abort=True)
    workspace = get_workspace()
    nodes = run(rebuild_project_tree(workspace, project_id))
    _print_summary(nodes, rebuild=True)


def build_tree(label: str, nodes: list[Node], root_id: str | None) -> Tree:
    children: dict[str | None, list[Node]] = {}
    for node in nodes:
        children.setdefault(node.parent_id, []).append(node)

    tree = Tree(label)
    seen: set[str] = set()
    stack: list[tuple[Tree, str | None]] = [(tree, root_id)]
    while stack:
        branch, parent_id = stack.pop()
        for node in sorted(children.get(parent_id, []), key=lambda n: (n.type != "folder", n.name.lower())):
            if node.id in seen:
                continue
            seen.add(node.id)
            if node.type == "folder":
                stack.append((branch.add(f"[bold]{node.name}/[/bold]"), node.id))
            else:
                branch.add(node.name)
    return tree


def tree(project_id: ProjectArg) -> None:
    """Show the node tree of a project."""
    workspace = get_workspace()
    nodes = run(get_project_nodes(workspace, project_id, include_hidden=True))
    root = next((n for n in nodes if n.is_project_root), None)
    visible = [n for n in nodes if not n.is_project_root]
    console.print(build_tree(project_id, visible, root.id if root else None))


def watch(project_id: ProjectArg) -> None:
    """Watch a project directory and sync whenever files change."""
    from project_tree.watcher.watchfiles_adapter import WatchfilesWatcher

    workspace = get_workspace()
    if not validate_project_structure(workspace, project_id):
        console.print(f"[red]Project directory not found for {project_id}[/red]")
        raise typer.Exit(1)
    project_dir = workspace.project_dir(project_id)

    async def _on_change(paths: set[Path]) -> None:
        if await auto_sync(workspace, project_id):
            console.print(f"[green]Synced[/green] after {len(paths)} change(s)")

    async def _run() -> None:
        watcher = WatchfilesWatcher(project_dir, _on_change)
        await watcher.start()
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    console.print(f"Watching {project_dir} (Ctrl+C to stop)")
    try:
        run(_run())
    except KeyboardInterrupt:
        console.print("Stopped")
