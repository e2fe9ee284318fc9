"""Whole-document JSON persistence for the project dataset."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from project_tree.errors import DataCorruptionError, NotFoundError, StorageIOError
from project_tree.models import Dataset

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _parse(content: str, source: Path) -> Dataset:
    try:
        return Dataset.model_validate_json(content)
    except ValidationError as exc:
        raise DataCorruptionError(f"Failed to parse projects data in {source}: {exc}") from exc


class JsonDatasetStore:
    """Reads and writes the dataset as a single pretty-printed JSON file.

    Implements the ``DatasetStore`` protocol. Writes go to a temporary file
    in the same directory which then replaces the document, so readers never
    observe a half-written snapshot.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def load(self) -> Dataset:
        return await asyncio.to_thread(self._load)

    async def save(self, dataset: Dataset) -> None:
        await asyncio.to_thread(self._save, dataset)

    async def backup(self) -> Path:
        return await asyncio.to_thread(self._backup)

    async def restore(self, backup_path: str | Path) -> None:
        await asyncio.to_thread(self._restore, Path(backup_path))

    def _load(self) -> Dataset:
        if not self.path.exists():
            logger.info("No projects file at %s, starting with empty data", self.path)
            return Dataset()
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageIOError("Failed to read projects file", exc) from exc

        dataset = _parse(content, self.path)
        logger.info(
            "Loaded %d projects, %d nodes, %d clients",
            len(dataset.projects),
            len(dataset.nodes),
            len(dataset.clients),
        )
        return dataset

    def _save(self, dataset: Dataset) -> None:
        payload = dataset.model_dump_json(indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(prefix=".projects-", suffix=".json", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(temp_name, self.path)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageIOError("Failed to write projects file", exc) from exc

        logger.info(
            "Saved %d projects, %d nodes, %d clients",
            len(dataset.projects),
            len(dataset.nodes),
            len(dataset.clients),
        )

    def _backup(self, prefix: str = "projects_backup") -> Path:
        if not self.path.exists():
            raise NotFoundError("No projects file to backup")
        backup_path = self.path.parent / f"{prefix}_{_timestamp()}.json"
        try:
            shutil.copy2(self.path, backup_path)
        except OSError as exc:
            raise StorageIOError("Failed to create backup", exc) from exc
        logger.info("Created backup %s", backup_path)
        return backup_path

    def _restore(self, backup_path: Path) -> None:
        if not backup_path.exists():
            raise NotFoundError(f"Backup file does not exist: {backup_path}")
        try:
            content = backup_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageIOError("Failed to read backup file", exc) from exc
        _parse(content, backup_path)

        if self.path.exists():
            self._backup(prefix="projects_pre_restore")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(backup_path, self.path)
        except OSError as exc:
            raise StorageIOError("Failed to restore backup", exc) from exc
        logger.info("Restored projects from backup %s", backup_path)
