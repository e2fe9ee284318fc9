"""Shared fixtures and helpers for tests."""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest

from project_tree.core.workspace import Workspace
from project_tree.errors import StorageIOError
from project_tree.models import PROJECT_ROOT_NAME, Dataset, Node, Project
from project_tree.store import AppLayout, InMemoryDatasetStore

_TESTS_ROOT = Path(__file__).parent

PROJECT_ID = "proj-1"
ROOT_ID = "root-1"


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_TESTS_ROOT)
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Dataset helpers
# ---------------------------------------------------------------------------


def make_root(project_id: str = PROJECT_ID, root_id: str = ROOT_ID) -> Node:
    return Node(id=root_id, name=PROJECT_ROOT_NAME, type="folder", project_id=project_id, hidden=True)


def make_node(
    node_id: str,
    name: str,
    parent_id: str | None = ROOT_ID,
    type: str = "file",
    file_path: str | None = None,
    project_id: str = PROJECT_ID,
) -> Node:
    return Node(
        id=node_id,
        name=name,
        type=type,  # type: ignore[arg-type]
        parent_id=parent_id,
        project_id=project_id,
        hidden=False,
        file_path=file_path if file_path is not None else name,
    )


def seeded_dataset(*extra_nodes: Node) -> Dataset:
    return Dataset(
        projects=[Project(id=PROJECT_ID, name="Demo", root_id=ROOT_ID)],
        nodes=[make_root(), *extra_nodes],
    )


requires_enforced_permissions = pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="directory permissions are not enforced for this user",
)


@contextmanager
def unreadable(path: Path) -> Iterator[Path]:
    """Strip all permissions from ``path`` for the duration of the block."""
    path.chmod(0o000)
    try:
        yield path
    finally:
        path.chmod(0o755)


class FailingSaveStore(InMemoryDatasetStore):
    """An in-memory store whose saves always fail."""

    async def save(self, dataset: Dataset) -> None:
        raise StorageIOError("Failed to write projects file")


def write_file(path: Path, content: str | bytes = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def layout(tmp_path: Path) -> AppLayout:
    return AppLayout(base_dir=tmp_path / "home")


@pytest.fixture
def store() -> InMemoryDatasetStore:
    return InMemoryDatasetStore(seeded_dataset())


@pytest.fixture
def workspace(store: InMemoryDatasetStore, layout: AppLayout) -> Workspace:
    return Workspace(store, layout)


@pytest.fixture
def project_dir(layout: AppLayout) -> Path:
    path = layout.project_dir(PROJECT_ID)
    path.mkdir(parents=True)
    return path
