from fastapi import APIRouter, Depends, Response, status

from project_tree.api.dependencies import get_workspace
from project_tree.api.schemas import ProjectCreateRequest, SyncResponse
from project_tree.core.projects import create_project, delete_project, get_project_nodes, list_projects
from project_tree.core.reconcile import rebuild_project_tree, summarize_sync, sync_external_files
from project_tree.core.workspace import Workspace
from project_tree.models import Node, Project

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=list[Project])
async def projects(workspace: Workspace = Depends(get_workspace)) -> list[Project]:
    return await list_projects(workspace)


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create(body: ProjectCreateRequest, workspace: Workspace = Depends(get_workspace)) -> Project:
    return await create_project(workspace, body.name, client_id=body.client_id)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(project_id: str, workspace: Workspace = Depends(get_workspace)) -> Response:
    await delete_project(workspace, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{project_id}/nodes", response_model=list[Node])
async def nodes(
    project_id: str,
    include_hidden: bool = False,
    workspace: Workspace = Depends(get_workspace),
) -> list[Node]:
    return await get_project_nodes(workspace, project_id, include_hidden=include_hidden)


@router.post("/{project_id}/sync", response_model=SyncResponse)
async def sync(project_id: str, workspace: Workspace = Depends(get_workspace)) -> SyncResponse:
    """Add nodes for files created on disk outside the application."""
    new_nodes = await sync_external_files(workspace, project_id)
    return SyncResponse(nodes=new_nodes, summary=summarize_sync(new_nodes))


@router.post("/{project_id}/rebuild", response_model=SyncResponse)
async def rebuild(project_id: str, workspace: Workspace = Depends(get_workspace)) -> SyncResponse:
    """Regenerate every non-root node of the project from disk."""
    rebuilt = await rebuild_project_tree(workspace, project_id)
    return SyncResponse(nodes=rebuilt, summary=summarize_sync(rebuilt, rebuild=True))
