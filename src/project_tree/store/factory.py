from project_tree.core.workspace import Workspace
from project_tree.store.json_store import JsonDatasetStore
from project_tree.store.layout import AppLayout, get_layout


def open_workspace(layout: AppLayout | None = None) -> Workspace:
    """Build a workspace over the JSON document of ``layout`` (default: from the environment)."""
    resolved = layout or get_layout()
    return Workspace(JsonDatasetStore(resolved.projects_file), resolved)
