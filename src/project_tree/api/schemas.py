from __future__ import annotations

from pydantic import BaseModel

from project_tree.models import Node, SyncSummary


class HealthResponse(BaseModel):
    status: str = "ok"


class ProjectCreateRequest(BaseModel):
    name: str
    client_id: str | None = None


class SyncResponse(BaseModel):
    nodes: list[Node]
    summary: SyncSummary


class ContentResponse(BaseModel):
    file_path: str
    content: str


class ContentUpdateRequest(BaseModel):
    file_path: str
    content: str
