from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from project_tree.core.ports.store import DatasetStore
from project_tree.errors import NotFoundError
from project_tree.models import Dataset, Node
from project_tree.store.layout import AppLayout


class Workspace:
    """Single owner of dataset mutations for one store and one directory layout.

    ``transaction()`` serializes load-modify-save so two operations can never
    interleave and lose each other's writes.
    """

    def __init__(self, store: DatasetStore, layout: AppLayout) -> None:
        self.store = store
        self.layout = layout
        self._lock = asyncio.Lock()

    def project_dir(self, project_id: str) -> Path:
        return self.layout.project_dir(project_id)

    def existing_project_dir(self, project_id: str) -> Path:
        project_dir = self.project_dir(project_id)
        if not project_dir.is_dir():
            raise NotFoundError(f"Project directory not found: {project_dir}")
        return project_dir

    async def snapshot(self) -> Dataset:
        async with self._lock:
            return await self.store.load()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Dataset]:
        """Yield a private copy of the dataset and persist it on clean exit.

        Nothing is written if the block raises or leaves the dataset unchanged.
        """
        async with self._lock:
            dataset = await self.store.load()
            before = dataset.model_copy(deep=True)
            yield dataset
            if dataset != before:
                await self.store.save(dataset)


def require_root(dataset: Dataset, project_id: str) -> Node:
    root = dataset.find_root(project_id)
    if root is None:
        raise NotFoundError(f"Project root not found for project {project_id}")
    return root


def require_node(dataset: Dataset, node_id: str) -> Node:
    node = next((n for n in dataset.nodes if n.id == node_id), None)
    if node is None:
        raise NotFoundError(f"Node not found: {node_id}")
    return node
