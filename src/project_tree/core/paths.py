import logging
from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from project_tree.errors import InvalidInputError
from project_tree.models import PROJECT_ROOT_NAME, Node

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Return ``path`` with every backslash turned into a forward slash."""
    return path.replace("\\", "/")


def is_root_reference(parent_id: str | None) -> bool:
    return not parent_id or parent_id == PROJECT_ROOT_NAME


def resolve_path(parent_id: str | None, name: str, nodes: Mapping[str, Node]) -> str:
    """Compose the project-relative path of ``name`` placed under ``parent_id``.

    Walks the parent chain through ``nodes`` and prepends each ancestor name
    until the hidden project root is reached. A parent id that cannot be
    found, or one already visited, ends the walk early so the result may be
    shallower than intended on inconsistent data.
    """
    segments = [name]
    visited: set[str] = set()
    current = parent_id

    while not is_root_reference(current):
        assert current is not None
        if current in visited:
            logger.warning("Cycle in parent chain at node %s; truncating path %s", current, "/".join(segments))
            break
        visited.add(current)

        parent = nodes.get(current)
        if parent is None or parent.is_project_root:
            break
        segments.insert(0, parent.name)
        current = parent.parent_id

    return "/".join(segments)


def validate_relative_path(relative: str) -> str:
    """Normalize ``relative`` and refuse anything that leaves the project directory."""
    normalized = normalize_path(relative)
    if not normalized:
        raise InvalidInputError("Path must not be empty")
    pure = PurePosixPath(normalized)
    if pure.is_absolute() or Path(relative).is_absolute() or (len(normalized) > 1 and normalized[1] == ":"):
        raise InvalidInputError(f"Path must be relative to the project: {relative!r}")
    if ".." in pure.parts:
        raise InvalidInputError(f"Path escapes the project directory: {relative!r}")
    return str(pure)


def validate_segment(name: str) -> str:
    """Check that ``name`` is a single, usable path segment."""
    if not name or name in {".", ".."} or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidInputError(f"Invalid file or folder name: {name!r}")
    return name


def join_project_path(project_dir: Path, relative: str) -> Path:
    return project_dir.joinpath(*PurePosixPath(validate_relative_path(relative)).parts)
