from fastapi import APIRouter, Depends, Query, Response, status

from project_tree.api.dependencies import get_workspace
from project_tree.api.schemas import ContentResponse, ContentUpdateRequest
from project_tree.core.content import get_file_stats, read_file_content, save_file_content
from project_tree.core.workspace import Workspace
from project_tree.models import FileStats

router = APIRouter(prefix="/projects/{project_id}", tags=["content"])


@router.get("/content", response_model=ContentResponse)
async def read_content(
    project_id: str,
    file_path: str = Query(..., description="Path relative to the project directory."),
    workspace: Workspace = Depends(get_workspace),
) -> ContentResponse:
    content = await read_file_content(workspace, project_id, file_path)
    return ContentResponse(file_path=file_path, content=content)


@router.put("/content", status_code=status.HTTP_204_NO_CONTENT)
async def write_content(
    project_id: str,
    body: ContentUpdateRequest,
    workspace: Workspace = Depends(get_workspace),
) -> Response:
    await save_file_content(workspace, project_id, body.file_path, body.content)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=FileStats)
async def stats(
    project_id: str,
    file_path: str = Query(..., description="Path relative to the project directory."),
    workspace: Workspace = Depends(get_workspace),
) -> FileStats:
    return await get_file_stats(workspace, project_id, file_path)
