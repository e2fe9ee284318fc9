import asyncio
import logging
import shutil

from project_tree.core.reconcile import new_node_id
from project_tree.core.scanner import directory_size
from project_tree.core.workspace import Workspace
from project_tree.errors import NotFoundError, StorageIOError
from project_tree.models import PROJECT_ROOT_NAME, Node, Project

logger = logging.getLogger(__name__)


async def list_projects(workspace: Workspace) -> list[Project]:
    dataset = await workspace.snapshot()
    return list(dataset.projects)


async def get_project_nodes(workspace: Workspace, project_id: str, include_hidden: bool = False) -> list[Node]:
    dataset = await workspace.snapshot()
    if dataset.find_project(project_id) is None and dataset.find_root(project_id) is None:
        raise NotFoundError(f"Project not found: {project_id}")
    return [n for n in dataset.project_nodes(project_id) if include_hidden or not n.is_project_root]


async def create_project(workspace: Workspace, name: str, client_id: str | None = None) -> Project:
    """Register a project with its hidden root node and create its directory."""
    project_id = new_node_id()
    root = Node(
        id=new_node_id(),
        name=PROJECT_ROOT_NAME,
        type="folder",
        project_id=project_id,
        hidden=True,
    )
    project = Project(id=project_id, name=name, root_id=root.id, client_id=client_id)
    project_dir = workspace.project_dir(project_id)

    async with workspace.transaction() as dataset:
        if client_id is not None:
            client = next((c for c in dataset.clients if c.id == client_id), None)
            if client is None:
                raise NotFoundError(f"Client not found: {client_id}")
            client.projects.append(project_id)
        try:
            await asyncio.to_thread(project_dir.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError("Failed to create project directory", exc) from exc
        dataset.projects.append(project)
        dataset.nodes.append(root)

    logger.info("Created project %s (%s) at %s", name, project_id, project_dir)
    return project


async def delete_project(workspace: Workspace, project_id: str) -> None:
    """Remove the project, its nodes, client references and backing directory.

    The directory is removed only after the dataset has been saved.
    """
    project_dir = workspace.project_dir(project_id)

    async with workspace.transaction() as dataset:
        if dataset.find_project(project_id) is None:
            raise NotFoundError(f"Project not found: {project_id}")
        dataset.projects = [p for p in dataset.projects if p.id != project_id]
        dataset.nodes = [n for n in dataset.nodes if n.project_id != project_id]
        for client in dataset.clients:
            client.projects = [pid for pid in client.projects if pid != project_id]

    if not project_dir.exists():
        logger.warning("Project directory not found: %s", project_dir)
        return
    try:
        await asyncio.to_thread(shutil.rmtree, project_dir)
    except OSError as exc:
        raise StorageIOError("Failed to delete project directory", exc) from exc
    logger.info("Deleted project directory %s", project_dir)


def validate_project_structure(workspace: Workspace, project_id: str) -> bool:
    project_dir = workspace.project_dir(project_id)
    if not project_dir.is_dir():
        logger.warning("Project directory does not exist: %s", project_dir)
        return False
    return True


async def project_size(workspace: Workspace, project_id: str) -> int:
    project_dir = workspace.project_dir(project_id)
    if not project_dir.exists():
        return 0
    size = await asyncio.to_thread(directory_size, project_dir)
    logger.info("Project %s size: %d bytes", project_id, size)
    return size
