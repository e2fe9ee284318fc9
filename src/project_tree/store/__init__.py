from project_tree.store.json_store import JsonDatasetStore
from project_tree.store.layout import AppLayout, get_layout
from project_tree.store.memory import InMemoryDatasetStore

__all__ = [
    "AppLayout",
    "InMemoryDatasetStore",
    "JsonDatasetStore",
    "get_layout",
]
