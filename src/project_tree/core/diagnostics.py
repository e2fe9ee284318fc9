import logging

from project_tree.core.paths import normalize_path
from project_tree.core.workspace import Workspace, require_root
from project_tree.models import Dataset, Node

logger = logging.getLogger(__name__)


def _orphans(dataset: Dataset, project_id: str) -> list[Node]:
    known = {n.id for n in dataset.nodes}
    return [
        n
        for n in dataset.project_nodes(project_id)
        if not n.is_project_root and (not n.parent_id or n.parent_id not in known)
    ]


async def find_orphans(workspace: Workspace, project_id: str) -> list[Node]:
    """Visible nodes with no parent or whose parent no longer exists."""
    dataset = await workspace.snapshot()
    return _orphans(dataset, project_id)


async def repair_orphans(workspace: Workspace, project_id: str) -> list[Node]:
    """Attach every orphan of the project directly to its hidden root."""
    async with workspace.transaction() as dataset:
        root = require_root(dataset, project_id)
        orphans = _orphans(dataset, project_id)
        for node in orphans:
            logger.info("Moving orphaned %s %s to project root", node.type, node.name)
            node.parent_id = root.id

    logger.info("Repaired %d orphaned node(s) in project %s", len(orphans), project_id)
    return orphans


async def find_duplicate_paths(workspace: Workspace, project_id: str) -> dict[str, list[str]]:
    """Group node ids by normalized ``file_path`` where more than one node claims it."""
    dataset = await workspace.snapshot()
    claims: dict[str, list[str]] = {}
    for node in dataset.project_nodes(project_id):
        if node.file_path:
            claims.setdefault(normalize_path(node.file_path), []).append(node.id)
    return {path: ids for path, ids in claims.items() if len(ids) > 1}
