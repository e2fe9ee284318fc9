import os
from dataclasses import dataclass
from pathlib import Path

from project_tree.core.paths import validate_segment
from project_tree.errors import InvalidInputError

_HOME_ENV = "PROJECT_TREE_HOME"
_DEFAULT_HOME = Path("~/.project-tree")
_PROJECTS_FILE = "projects.json"
_FILES_DIR = "files"


@dataclass(frozen=True)
class AppLayout:
    """Where the dataset document and project directories live on disk."""

    base_dir: Path

    @property
    def projects_file(self) -> Path:
        return self.base_dir / _PROJECTS_FILE

    @property
    def files_dir(self) -> Path:
        return self.base_dir / _FILES_DIR

    def project_dir(self, project_id: str) -> Path:
        try:
            validate_segment(project_id)
        except InvalidInputError:
            raise InvalidInputError(f"Invalid project id: {project_id!r}") from None
        return self.files_dir / project_id


def get_layout() -> AppLayout:
    base_dir = os.getenv(_HOME_ENV)
    path = Path(base_dir) if base_dir else _DEFAULT_HOME
    return AppLayout(base_dir=path.expanduser())
