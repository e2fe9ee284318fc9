from project_tree.models import Dataset


class InMemoryDatasetStore:
    """Keeps the dataset in process memory.

    Every ``load`` hands out a deep copy so callers can mutate freely without
    touching the stored snapshot until they ``save``.
    """

    def __init__(self, dataset: Dataset | None = None) -> None:
        self._dataset = dataset.model_copy(deep=True) if dataset is not None else Dataset()
        self.save_count = 0

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    async def load(self) -> Dataset:
        return self._dataset.model_copy(deep=True)

    async def save(self, dataset: Dataset) -> None:
        self._dataset = dataset.model_copy(deep=True)
        self.save_count += 1
