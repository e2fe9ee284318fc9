"""Copy files and folders into and out of a project directory."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from pathlib import Path

from project_tree.core.binary import get_extension, is_binary_extension
from project_tree.core.conflicts import resolve_destination
from project_tree.core.paths import join_project_path
from project_tree.core.reconcile import new_node_id
from project_tree.core.workspace import Workspace
from project_tree.errors import InvalidInputError, NotFoundError, StorageIOError
from project_tree.models import ImportResult

logger = logging.getLogger(__name__)


def copy_directory(src: Path, dst: Path) -> int:
    """Recursively copy ``src`` into ``dst`` and return the bytes copied.

    Symlinked directories are skipped; symlinked files are copied by content.
    """
    total_size = 0
    dst.mkdir(parents=True, exist_ok=True)
    with os.scandir(src) as it:
        entries = list(it)
    for entry in entries:
        target = dst / entry.name
        if entry.is_dir() and entry.is_symlink():
            logger.debug("Not copying symlinked directory %s", entry.path)
        elif entry.is_dir():
            total_size += copy_directory(Path(entry.path), target)
        else:
            shutil.copy2(entry.path, target)
            total_size += target.stat().st_size
    return total_size


def _ensure_project_dir(project_dir: Path) -> None:
    try:
        project_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageIOError("Failed to create project directory", exc) from exc


def _relative_file_path(destination: Path, project_dir: Path) -> str:
    return destination.relative_to(project_dir).as_posix()


def _import_file(project_dir: Path, source: Path) -> ImportResult:
    if not source.exists():
        raise NotFoundError(f"Source file does not exist: {source}")
    if not source.is_file():
        raise InvalidInputError(f"Source path is not a file: {source}")

    _ensure_project_dir(project_dir)
    destination = resolve_destination(project_dir / source.name)
    try:
        shutil.copy2(source, destination)
        size = destination.stat().st_size
    except OSError as exc:
        raise StorageIOError("Failed to copy file", exc) from exc

    is_binary = is_binary_extension(destination.name)
    logger.info("Imported file %s -> %s (%d bytes, binary: %s)", source, destination, size, is_binary)
    return ImportResult(
        node_id=new_node_id(),
        name=destination.name,
        type="file",
        extension=get_extension(destination.name),
        size=size,
        is_binary=is_binary,
        file_path=_relative_file_path(destination, project_dir),
    )


def _import_folder(project_dir: Path, source: Path) -> ImportResult:
    if not source.is_dir():
        raise NotFoundError(f"Source folder does not exist or is not a directory: {source}")

    _ensure_project_dir(project_dir)
    destination = resolve_destination(project_dir / source.name, split_extension=False)
    try:
        total_size = copy_directory(source, destination)
    except OSError as exc:
        shutil.rmtree(destination, ignore_errors=True)
        raise StorageIOError("Failed to copy folder", exc) from exc

    logger.info("Imported folder %s -> %s (total size: %d bytes)", source, destination, total_size)
    return ImportResult(
        node_id=new_node_id(),
        name=destination.name,
        type="folder",
        extension=None,
        size=total_size,
        is_binary=False,
        file_path=_relative_file_path(destination, project_dir),
    )


def _export_file(source: Path, destination: Path) -> None:
    if not source.exists():
        raise NotFoundError(f"Source file does not exist: {source}")
    if not source.is_file():
        raise InvalidInputError(f"Source path is not a file: {source}")
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
    except OSError as exc:
        raise StorageIOError("Failed to export file", exc) from exc
    logger.info("Exported file %s -> %s", source, destination)


def _export_folder(source: Path, destination: Path) -> None:
    if not source.is_dir():
        raise NotFoundError(f"Source folder does not exist or is not a directory: {source}")
    try:
        copy_directory(source, destination)
    except OSError as exc:
        raise StorageIOError("Failed to export folder", exc) from exc
    logger.info("Exported folder %s -> %s", source, destination)


async def import_file(workspace: Workspace, project_id: str, source: str | Path) -> ImportResult:
    """Copy ``source`` into the project root without overwriting existing content.

    The dataset is not touched; a following sync picks the file up.
    """
    project_dir = workspace.project_dir(project_id)
    return await asyncio.to_thread(_import_file, project_dir, Path(source))


async def import_folder(workspace: Workspace, project_id: str, source: str | Path) -> ImportResult:
    project_dir = workspace.project_dir(project_id)
    return await asyncio.to_thread(_import_folder, project_dir, Path(source))


async def export_file(workspace: Workspace, project_id: str, file_path: str, destination: str | Path) -> None:
    source = join_project_path(workspace.project_dir(project_id), file_path)
    await asyncio.to_thread(_export_file, source, Path(destination))


async def export_folder(workspace: Workspace, project_id: str, folder_path: str, destination: str | Path) -> None:
    source = join_project_path(workspace.project_dir(project_id), folder_path)
    await asyncio.to_thread(_export_folder, source, Path(destination))
