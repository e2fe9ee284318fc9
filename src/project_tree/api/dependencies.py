from __future__ import annotations

from collections.abc import AsyncIterator

from project_tree.core.workspace import Workspace
from project_tree.store.factory import open_workspace

_workspace: Workspace | None = None


async def get_workspace() -> AsyncIterator[Workspace]:
    """Yield the process-wide ``Workspace``, creating it lazily on first call."""
    global _workspace  # noqa: PLW0603
    if _workspace is None:
        _workspace = open_workspace()
    yield _workspace


def reset_workspace() -> None:
    global _workspace  # noqa: PLW0603
    _workspace = None
