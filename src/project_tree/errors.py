"""Exception types raised by the project-tree core."""

from __future__ import annotations


class ProjectTreeError(Exception):
    """Base class for every error raised by this package."""


class NotFoundError(ProjectTreeError, LookupError):
    """A project, node, directory or store document does not exist."""


class StorageIOError(ProjectTreeError, OSError):
    """A read, write, copy or metadata call on the filesystem failed."""

    def __init__(self, operation: str, cause: OSError | None = None) -> None:
        self.operation = operation
        self.cause = cause
        message = f"{operation}: {cause}" if cause is not None else operation
        super().__init__(message)


class DataCorruptionError(ProjectTreeError, ValueError):
    """The persisted dataset document could not be parsed."""


class InvalidInputError(ProjectTreeError, ValueError):
    """A caller supplied a path, name or kind the core refuses to act on."""
