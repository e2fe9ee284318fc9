from typing import Protocol

from project_tree.models import Dataset


class DatasetStore(Protocol):
    async def load(self) -> Dataset: ...

    async def save(self, dataset: Dataset) -> None: ...
