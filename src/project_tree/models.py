from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PROJECT_ROOT_NAME = "__PROJECT_ROOT__"

NodeType = Literal["file", "folder"]


class ClientColor(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    value: str
    bg: str
    dark: str


class Client(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    projects: list[str] = Field(default_factory=list)
    color: ClientColor | None = None


class Project(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    root_id: str | None = None
    client_id: str | None = None


class Node(BaseModel):
    """One file or folder in a project's virtual tree.

    ``file_path`` is relative to the project's backing directory and always
    uses forward slashes.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    type: NodeType
    extension: str | None = None
    parent_id: str | None = None
    project_id: str
    hidden: bool | None = None
    file_path: str | None = None
    size: int | None = None
    modified: int | None = None
    is_binary: bool | None = None

    @property
    def is_project_root(self) -> bool:
        return self.hidden is True or self.name == PROJECT_ROOT_NAME


class Dataset(BaseModel):
    """The whole persisted document, read and written as one unit."""

    model_config = ConfigDict(extra="ignore")

    projects: list[Project] = Field(default_factory=list)
    nodes: list[Node] = Field(default_factory=list)
    clients: list[Client] = Field(default_factory=list)

    def project_nodes(self, project_id: str) -> list[Node]:
        return [n for n in self.nodes if n.project_id == project_id]

    def find_project(self, project_id: str) -> Project | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def find_root(self, project_id: str) -> Node | None:
        return next((n for n in self.nodes if n.project_id == project_id and n.is_project_root), None)

    def node_index(self) -> dict[str, Node]:
        return {n.id: n for n in self.nodes}


class FileStats(BaseModel):
    size: int
    modified: int
    created: int
    is_binary: bool
    file_type: str


class ImportResult(BaseModel):
    node_id: str
    name: str
    type: NodeType
    extension: str | None = None
    size: int
    is_binary: bool
    file_path: str | None = None


class SyncSummary(BaseModel):
    file_count: int
    folder_count: int
    total_count: int
    total_size: str
    is_rebuild: bool
