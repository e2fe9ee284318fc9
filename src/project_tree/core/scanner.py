"""Recursive directory walk producing flat, project-relative entries."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from project_tree.core.binary import get_extension, is_binary_extension
from project_tree.errors import StorageIOError
from project_tree.models import NodeType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredEntry:
    relative_path: str
    name: str
    kind: NodeType
    extension: str | None = None
    size: int | None = None
    modified: int | None = None
    is_binary: bool | None = None

    @property
    def parent_path(self) -> str | None:
        head, sep, _ = self.relative_path.rpartition("/")
        return head if sep else None


def is_excluded(name: str) -> bool:
    """Dot-files and dunder names are never treated as project content."""
    return name.startswith(".") or name.startswith("__")


def _modified_seconds(stat: os.stat_result) -> int:
    try:
        return max(int(stat.st_mtime), 0)
    except (OverflowError, ValueError):
        return 0


def _file_entry(entry: os.DirEntry[str], relative_path: str) -> DiscoveredEntry:
    try:
        stat = entry.stat()
    except OSError as exc:
        raise StorageIOError(f"Failed to get file metadata for {entry.path}", exc) from exc
    return DiscoveredEntry(
        relative_path=relative_path,
        name=entry.name,
        kind="file",
        extension=get_extension(entry.name),
        size=stat.st_size,
        modified=_modified_seconds(stat),
        is_binary=is_binary_extension(entry.name),
    )


def scan(root_dir: str | Path) -> Iterator[DiscoveredEntry]:
    """Walk ``root_dir`` depth-first and yield every visible entry.

    A folder is always yielded before anything inside it. Sibling order is
    not significant. Each call re-walks from scratch. A directory that cannot
    be read raises ``StorageIOError``; entries already yielded stay yielded.
    """
    root = Path(root_dir)
    pending: list[tuple[Path, str]] = [(root, "")]

    while pending:
        directory, prefix = pending.pop()
        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            raise StorageIOError(f"Failed to read directory {directory}", exc) from exc

        subdirectories: list[tuple[Path, str]] = []
        for entry in children:
            if is_excluded(entry.name):
                logger.debug("Skipping hidden/special entry %s", entry.path)
                continue

            relative_path = f"{prefix}/{entry.name}" if prefix else entry.name
            try:
                is_dir = entry.is_dir()
                is_symlink = entry.is_symlink()
                is_file = entry.is_file()
            except OSError as exc:
                raise StorageIOError(f"Failed to inspect {entry.path}", exc) from exc

            if is_dir:
                yield DiscoveredEntry(relative_path=relative_path, name=entry.name, kind="folder")
                if is_symlink:
                    logger.debug("Not descending into symlinked directory %s", entry.path)
                else:
                    subdirectories.append((Path(entry.path), relative_path))
            elif is_file:
                yield _file_entry(entry, relative_path)

        pending.extend(reversed(subdirectories))


def directory_size(root_dir: str | Path) -> int:
    """Total size in bytes of every regular file below ``root_dir``."""
    total = 0
    for dirpath, _dirnames, filenames in os.walk(root_dir):
        for filename in filenames:
            try:
                total += os.stat(os.path.join(dirpath, filename)).st_size
            except OSError:
                continue
    return total
