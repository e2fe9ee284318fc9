"""FastMCP server exposing project-tree tools."""

from __future__ import annotations

from typing import Any

from fastmcp import FastMCP

from project_tree.core.content import get_file_stats, read_file_content
from project_tree.core.projects import get_project_nodes
from project_tree.core.projects import list_projects as _list_projects
from project_tree.core.reconcile import rebuild_project_tree, summarize_sync, sync_external_files
from project_tree.core.workspace import Workspace


def create_mcp_server(workspace: Workspace) -> FastMCP:
    """Create a FastMCP server wired to the given workspace."""

    mcp = FastMCP("project-tree", instructions="Browse and reconcile project file trees with disk.")

    @mcp.tool()
    async def list_projects() -> list[dict[str, Any]]:
        """List projects."""
        return [p.model_dump() for p in await _list_projects(workspace)]

    @mcp.tool()
    async def list_nodes(project_id: str, include_hidden: bool = False) -> list[dict[str, Any]]:
        """List the nodes of a project."""
        nodes = await get_project_nodes(workspace, project_id, include_hidden=include_hidden)
        return [n.model_dump() for n in nodes]

    @mcp.tool()
    async def sync(project_id: str) -> dict[str, Any]:
        """Add nodes for files created on disk outside the application."""
        new_nodes = await sync_external_files(workspace, project_id)
        return {
            "summary": summarize_sync(new_nodes).model_dump(),
            "file_paths": [n.file_path for n in new_nodes],
        }

    @mcp.tool()
    async def rebuild(project_id: str) -> dict[str, Any]:
        """Regenerate every non-root node of a project from disk."""
        nodes = await rebuild_project_tree(workspace, project_id)
        return {
            "summary": summarize_sync(nodes, rebuild=True).model_dump(),
            "file_paths": [n.file_path for n in nodes],
        }

    @mcp.tool()
    async def read_content(project_id: str, file_path: str) -> str:
        """Read a text file from a project."""
        return await read_file_content(workspace, project_id, file_path)

    @mcp.tool()
    async def file_stats(project_id: str, file_path: str) -> dict[str, Any]:
        """Size, timestamps and type of a project file."""
        return (await get_file_stats(workspace, project_id, file_path)).model_dump()

    return mcp
