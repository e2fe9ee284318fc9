"""Create, rename and delete individual nodes together with their files on disk."""

from __future__ import annotations

import asyncio
import logging
import shutil
from pathlib import Path

from project_tree.core.binary import get_extension, is_binary_extension
from project_tree.core.content import default_file_content
from project_tree.core.paths import is_root_reference, join_project_path, resolve_path, validate_segment
from project_tree.core.reconcile import new_node_id, tracked_paths
from project_tree.core.scanner import is_excluded
from project_tree.core.workspace import Workspace, require_node, require_root
from project_tree.errors import InvalidInputError, StorageIOError
from project_tree.models import Dataset, Node, NodeType

logger = logging.getLogger(__name__)


def descendant_ids(dataset: Dataset, node_id: str) -> set[str]:
    """Ids of every node below ``node_id``; revisits are ignored."""
    children: dict[str, list[str]] = {}
    for node in dataset.nodes:
        if node.parent_id:
            children.setdefault(node.parent_id, []).append(node.id)

    found: set[str] = set()
    stack = list(children.get(node_id, []))
    while stack:
        current = stack.pop()
        if current in found or current == node_id:
            continue
        found.add(current)
        stack.extend(children.get(current, []))
    return found


def _parent_for(dataset: Dataset, project_id: str, parent_id: str | None) -> str:
    root = require_root(dataset, project_id)
    if is_root_reference(parent_id) or parent_id == root.id:
        return root.id
    assert parent_id is not None
    parent = require_node(dataset, parent_id)
    if parent.project_id != project_id:
        raise InvalidInputError(f"Parent {parent_id} belongs to another project")
    if parent.type != "folder":
        raise InvalidInputError(f"Parent {parent_id} is not a folder")
    return parent.id


def _materialize(full_path: Path, kind: NodeType) -> None:
    if full_path.exists():
        raise InvalidInputError(f"Path already exists: {full_path}")
    try:
        if kind == "folder":
            full_path.mkdir(parents=True)
        else:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(default_file_content(full_path.name), encoding="utf-8")
    except OSError as exc:
        raise StorageIOError(f"Failed to create {kind}", exc) from exc


async def _create_node(
    workspace: Workspace,
    project_id: str,
    parent_id: str | None,
    name: str,
    kind: NodeType,
) -> Node:
    validate_segment(name)
    if is_excluded(name):
        logger.warning("Name %s is hidden from scans and will not be picked up by sync", name)
    project_dir = workspace.project_dir(project_id)

    async with workspace.transaction() as dataset:
        resolved_parent = _parent_for(dataset, project_id, parent_id)
        relative = resolve_path(resolved_parent, name, dataset.node_index())
        if relative in tracked_paths(dataset, project_id):
            raise InvalidInputError(f"Path already tracked by another node: {relative}")
        full_path = join_project_path(project_dir, relative)
        await asyncio.to_thread(_materialize, full_path, kind)

        node = Node(
            id=new_node_id(),
            name=name,
            type=kind,
            extension=get_extension(name) if kind == "file" else None,
            parent_id=resolved_parent,
            project_id=project_id,
            hidden=False,
            file_path=relative,
        )
        if kind == "file":
            stat = full_path.stat()
            node.size = stat.st_size
            node.modified = int(stat.st_mtime)
            node.is_binary = is_binary_extension(name)
        dataset.nodes.append(node)

    logger.info("Created %s %s in project %s", kind, relative, project_id)
    return node


async def create_folder(workspace: Workspace, project_id: str, parent_id: str | None, name: str) -> Node:
    return await _create_node(workspace, project_id, parent_id, name, "folder")


async def create_file(workspace: Workspace, project_id: str, parent_id: str | None, name: str) -> Node:
    """Create a file with a template body picked by its extension."""
    return await _create_node(workspace, project_id, parent_id, name, "file")


async def rename_node(workspace: Workspace, node_id: str, new_name: str) -> Node:
    """Rename a node on disk and rewrite the stored paths of everything below it."""
    validate_segment(new_name)

    async with workspace.transaction() as dataset:
        node = require_node(dataset, node_id)
        if node.is_project_root:
            raise InvalidInputError("The project root cannot be renamed")

        index = dataset.node_index()
        project_dir = workspace.project_dir(node.project_id)
        old_relative = node.file_path or resolve_path(node.parent_id, node.name, index)
        new_relative = resolve_path(node.parent_id, new_name, index)
        owner = tracked_paths(dataset, node.project_id).get(new_relative)
        if owner is not None and owner != node.id:
            raise InvalidInputError(f"Path already tracked by another node: {new_relative}")
        old_path = join_project_path(project_dir, old_relative)
        new_path = join_project_path(project_dir, new_relative)

        if old_path.exists():
            if new_path.exists():
                raise InvalidInputError(f"Path already exists: {new_relative}")
            try:
                await asyncio.to_thread(old_path.rename, new_path)
            except OSError as exc:
                raise StorageIOError("Failed to rename file/folder", exc) from exc
        else:
            logger.warning("Original file/folder not found, skipping rename on disk: %s", old_path)

        node.name = new_name
        node.file_path = new_relative
        if node.type == "file":
            node.extension = get_extension(new_name)
            node.is_binary = is_binary_extension(new_name)

        prefix = f"{old_relative}/"
        for child_id in descendant_ids(dataset, node.id):
            child = index[child_id]
            if child.file_path and child.file_path.startswith(prefix):
                child.file_path = f"{new_relative}/{child.file_path[len(prefix):]}"

    logger.info("Renamed %s -> %s", old_relative, new_relative)
    return node


def _remove_path(full_path: Path, kind: NodeType) -> None:
    try:
        if full_path.is_dir():
            shutil.rmtree(full_path)
        elif full_path.exists():
            full_path.unlink()
        else:
            logger.warning("File/folder not found on disk: %s", full_path)
    except OSError as exc:
        raise StorageIOError(f"Failed to delete {kind}", exc) from exc


async def delete_node(workspace: Workspace, node_id: str) -> list[str]:
    """Delete a node, its descendants and its backing file or folder.

    Returns the ids removed from the dataset. The dataset is saved before the
    backing path is removed, so a failed save leaves the files in place and a
    failed removal leaves untracked files that the next sync picks up again.
    A backing path that is already gone is not an error.
    """
    async with workspace.transaction() as dataset:
        node = require_node(dataset, node_id)
        if node.is_project_root:
            raise InvalidInputError("The project root cannot be deleted; delete the project instead")

        project_dir = workspace.project_dir(node.project_id)
        relative = node.file_path or resolve_path(node.parent_id, node.name, dataset.node_index())
        full_path = join_project_path(project_dir, relative)
        kind = node.type

        removed = {node.id} | descendant_ids(dataset, node.id)
        dataset.nodes = [n for n in dataset.nodes if n.id not in removed]

    await asyncio.to_thread(_remove_path, full_path, kind)
    logger.info("Deleted %s and %d node(s)", relative, len(removed))
    return sorted(removed)
