from typing import Annotated

import typer

from project_tree.cli.common import console, get_workspace, render_table, run
from project_tree.core.projects import create_project, delete_project, list_projects, project_size
from project_tree.core.reconcile import format_file_size

project_app = typer.Typer(help="Create, list and delete projects.")


@project_app.command("list")
def list_() -> None:
    """List projects in the dataset."""
    workspace = get_workspace()
    projects = run(list_projects(workspace))
    render_table(["id", "name", "client_id"], [(p.id, p.name, p.client_id) for p in projects])


@project_app.command("create")
def create(
    name: Annotated[str, typer.Argument(help="Display name of the project.")],
    client: Annotated[str | None, typer.Option(help="Id of the owning client.")] = None,
) -> None:
    """Create a project with its root node and backing directory."""
    workspace = get_workspace()
    project = run(create_project(workspace, name, client_id=client))
    console.print(f"[green]Created[/green] project {project.name} ({project.id})")
    console.print(f"Directory: {workspace.project_dir(project.id)}")


@project_app.command("delete")
def delete(
    project_id: Annotated[str, typer.Argument(help="Project id.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False,
) -> None:
    """Delete a project, its nodes and its directory on disk."""
    if not yes:
        typer.confirm(f"Delete project {project_id} and all of its files?", abort=True)
    workspace = get_workspace()
    run(delete_project(workspace, project_id))
    console.print(f"[green]Deleted[/green] project {project_id}")


@project_app.command("size")
def size(project_id: Annotated[str, typer.Argument(help="Project id.")]) -> None:
    """Show the total size of a project's files on disk."""
    workspace = get_workspace()
    total = run(project_size(workspace, project_id))
    console.print(f"{project_id}: {format_file_size(total)} ({total} bytes)")
