from project_tree.core.binary import classify
from project_tree.core.conflicts import resolve_destination
from project_tree.core.paths import resolve_path
from project_tree.core.reconcile import rebuild_project_tree, sync_external_files
from project_tree.core.scanner import scan
from project_tree.core.workspace import Workspace

__version__ = "0.1.0"

__all__ = [
    "Workspace",
    "classify",
    "rebuild_project_tree",
    "resolve_destination",
    "resolve_path",
    "scan",
    "sync_external_files",
]
