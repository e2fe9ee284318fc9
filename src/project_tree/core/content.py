import asyncio
import logging
from pathlib import Path

from project_tree.core.binary import (
    BINARY_PLACEHOLDER,
    describe_file_type,
    get_extension,
    is_binary_extension,
    is_content_binary,
)
from project_tree.core.paths import join_project_path
from project_tree.core.workspace import Workspace
from project_tree.errors import InvalidInputError, NotFoundError, StorageIOError
from project_tree.models import FileStats

logger = logging.getLogger(__name__)

_DEFAULT_CONTENT = {
    "py": '# Python script\n\ndef main():\n    print("Hello, World!")\n\nif __name__ == "__main__":\n    main()\n',
    "js": "// JavaScript file\nconsole.log('Hello, World!');\n",
    "md": "# Document Title\n\nYour content here...\n",
    "txt": "Your text content here...\n",
    "json": '{\n  "example": "data"\n}\n',
    "html": (
        "<!DOCTYPE html>\n<html>\n<head>\n  <title>Document</title>\n</head>\n"
        "<body>\n  <h1>Hello, World!</h1>\n</body>\n</html>\n"
    ),
    "css": "/* CSS Styles */\nbody {\n  font-family: Arial, sans-serif;\n}\n",
}


def default_file_content(filename: str) -> str:
    return _DEFAULT_CONTENT.get(get_extension(filename) or "", "")


def _read_text(full_path: Path) -> str:
    if not full_path.exists():
        logger.warning("File not found: %s", full_path)
        return ""
    if is_binary_extension(full_path):
        logger.debug("Binary file detected by extension: %s", full_path)
        return BINARY_PLACEHOLDER

    try:
        data = full_path.read_bytes()
    except OSError as exc:
        raise StorageIOError("Failed to read file bytes", exc) from exc

    if is_content_binary(data):
        logger.debug("Binary content detected: %s", full_path)
        return BINARY_PLACEHOLDER
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("UTF-8 decoding failed, treating as binary: %s", full_path)
        return BINARY_PLACEHOLDER


def _write_text(full_path: Path, content: str) -> None:
    if is_binary_extension(full_path):
        raise InvalidInputError("Cannot save content to binary file")
    try:
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise StorageIOError("Failed to write file", exc) from exc
    logger.info("Saved %s (%d chars)", full_path, len(content))


def _stats(full_path: Path) -> FileStats:
    if not full_path.exists():
        raise NotFoundError(f"File not found: {full_path}")
    try:
        stat = full_path.stat()
    except OSError as exc:
        raise StorageIOError("Failed to get file metadata", exc) from exc

    modified = int(stat.st_mtime)
    created = int(getattr(stat, "st_birthtime", stat.st_mtime))
    return FileStats(
        size=stat.st_size,
        modified=modified,
        created=created,
        is_binary=is_binary_extension(full_path),
        file_type=describe_file_type(full_path),
    )


async def read_file_content(workspace: Workspace, project_id: str, file_path: str) -> str:
    """Return the text of a project file, or a placeholder for binary content."""
    full_path = join_project_path(workspace.project_dir(project_id), file_path)
    return await asyncio.to_thread(_read_text, full_path)


async def save_file_content(workspace: Workspace, project_id: str, file_path: str, content: str) -> None:
    full_path = join_project_path(workspace.project_dir(project_id), file_path)
    await asyncio.to_thread(_write_text, full_path, content)


async def get_file_stats(workspace: Workspace, project_id: str, file_path: str) -> FileStats:
    full_path = join_project_path(workspace.project_dir(project_id), file_path)
    return await asyncio.to_thread(_stats, full_path)
