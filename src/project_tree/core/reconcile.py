"""Merge what is on disk into the persisted node set."""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path

from project_tree.core.paths import normalize_path
from project_tree.core.scanner import DiscoveredEntry, scan
from project_tree.core.workspace import Workspace, require_root
from project_tree.models import Dataset, Node, SyncSummary

logger = logging.getLogger(__name__)


def new_node_id() -> str:
    return str(uuid.uuid4())


def tracked_paths(dataset: Dataset, project_id: str) -> dict[str, str]:
    """Map each normalized ``file_path`` of the project to the id of the node claiming it."""
    tracked: dict[str, str] = {}
    for node in dataset.project_nodes(project_id):
        if node.is_project_root or not node.file_path:
            continue
        tracked.setdefault(normalize_path(node.file_path), node.id)
    return tracked


def merge_entries(
    entries: Iterable[DiscoveredEntry],
    *,
    project_id: str,
    root_id: str,
    tracked: Mapping[str, str],
    id_factory: Callable[[], str] = new_node_id,
) -> list[Node]:
    """Synthesize nodes for every entry whose path is not tracked yet.

    Entries must arrive with each folder ahead of its contents. A new entry is
    parented to the node already holding its parent path (tracked or created
    earlier in this pass), falling back to the project root.
    """
    path_ids = dict(tracked)
    new_nodes: list[Node] = []

    for entry in entries:
        if entry.relative_path in path_ids:
            logger.debug("Already tracking %s", entry.relative_path)
            continue

        parent_path = entry.parent_path
        parent_id = path_ids.get(parent_path, root_id) if parent_path else root_id
        node = Node(
            id=id_factory(),
            name=entry.name,
            type=entry.kind,
            extension=entry.extension,
            parent_id=parent_id,
            project_id=project_id,
            hidden=False,
            file_path=entry.relative_path,
            size=entry.size,
            modified=entry.modified,
            is_binary=entry.is_binary,
        )
        path_ids[entry.relative_path] = node.id
        new_nodes.append(node)
        logger.debug("New %s %s", entry.kind, entry.relative_path)

    return new_nodes


async def _scan_project(project_dir: Path) -> list[DiscoveredEntry]:
    return await asyncio.to_thread(lambda: list(scan(project_dir)))


async def sync_external_files(workspace: Workspace, project_id: str) -> list[Node]:
    """Add nodes for files and folders that exist on disk but are not tracked.

    Existing nodes are never removed or changed, so entries whose backing file
    was deleted externally stay until a rebuild. All-or-nothing: a scan or
    store failure leaves the persisted dataset untouched.
    """
    project_dir = workspace.existing_project_dir(project_id)
    logger.info("Starting sync for project %s in %s", project_id, project_dir)

    async with workspace.transaction() as dataset:
        root = require_root(dataset, project_id)
        tracked = tracked_paths(dataset, project_id)
        logger.info("Found %d existing tracked paths", len(tracked))

        entries = await _scan_project(project_dir)
        new_nodes = merge_entries(entries, project_id=project_id, root_id=root.id, tracked=tracked)
        dataset.nodes.extend(new_nodes)

    if new_nodes:
        logger.info("Added %d new files/folders to project %s", len(new_nodes), project_id)
    else:
        logger.info("No new files found; project %s is already in sync", project_id)
    return new_nodes


async def rebuild_project_tree(workspace: Workspace, project_id: str) -> list[Node]:
    """Replace every non-root node of the project with a fresh scan of its directory."""
    project_dir = workspace.existing_project_dir(project_id)
    logger.info("Starting complete rebuild for project %s", project_id)

    async with workspace.transaction() as dataset:
        root = require_root(dataset, project_id)
        dataset.nodes = [n for n in dataset.nodes if n.project_id != project_id or n.is_project_root]

        entries = await _scan_project(project_dir)
        new_nodes = merge_entries(entries, project_id=project_id, root_id=root.id, tracked={})
        dataset.nodes.extend(new_nodes)

    logger.info("Rebuilt project %s with %d nodes", project_id, len(new_nodes))
    return new_nodes


async def auto_sync(workspace: Workspace, project_id: str) -> bool:
    """Run an incremental sync and report whether anything was added."""
    try:
        new_nodes = await sync_external_files(workspace, project_id)
    except Exception:
        logger.error("Auto-sync failed for project %s", project_id)
        raise
    logger.info("Auto-sync completed for project %s: %d new entries", project_id, len(new_nodes))
    return bool(new_nodes)


def format_file_size(size: int) -> str:
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    value = float(size)
    exponent = 0
    while value >= 1024 and exponent < len(units) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {units[exponent]}"


def summarize_sync(nodes: Iterable[Node], rebuild: bool = False) -> SyncSummary:
    node_list = list(nodes)
    file_count = sum(1 for n in node_list if n.type == "file")
    folder_count = sum(1 for n in node_list if n.type == "folder")
    total_size = sum(n.size or 0 for n in node_list)
    return SyncSummary(
        file_count=file_count,
        folder_count=folder_count,
        total_count=len(node_list),
        total_size=format_file_size(total_size),
        is_rebuild=rebuild,
    )
