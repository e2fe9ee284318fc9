"""Tests for incremental sync and full rebuild of a project tree."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from project_tree.core.reconcile import (
    auto_sync,
    format_file_size,
    merge_entries,
    rebuild_project_tree,
    summarize_sync,
    sync_external_files,
    tracked_paths,
)
from project_tree.core.scanner import DiscoveredEntry
from project_tree.core.workspace import Workspace
from project_tree.errors import NotFoundError, StorageIOError
from project_tree.models import Dataset, Node, Project
from project_tree.store import AppLayout, InMemoryDatasetStore
from tests.conftest import (
    PROJECT_ID,
    ROOT_ID,
    make_node,
    requires_enforced_permissions,
    seeded_dataset,
    unreadable,
    write_file,
)


def _by_path(nodes: list[Node]) -> dict[str, Node]:
    return {n.file_path: n for n in nodes if n.file_path}


def _counter() -> Callable[[], str]:
    ids = iter(f"n{i}" for i in range(1000))
    return lambda: next(ids)


class TestMergeEntries:
    def test_parents_follow_entry_order(self) -> None:
        entries = [
            DiscoveredEntry("a", "a", "folder"),
            DiscoveredEntry("a/b", "b", "folder"),
            DiscoveredEntry("a/b/c.txt", "c.txt", "file", extension="txt", size=3),
        ]
        nodes = merge_entries(entries, project_id="p", root_id="r", tracked={}, id_factory=_counter())

        assert [(n.id, n.parent_id, n.file_path) for n in nodes] == [
            ("n0", "r", "a"),
            ("n1", "n0", "a/b"),
            ("n2", "n1", "a/b/c.txt"),
        ]
        assert all(n.hidden is False and n.project_id == "p" for n in nodes)

    def test_tracked_paths_are_skipped_and_reused_as_parents(self) -> None:
        entries = [DiscoveredEntry("a", "a", "folder"), DiscoveredEntry("a/new.txt", "new.txt", "file")]
        nodes = merge_entries(entries, project_id="p", root_id="r", tracked={"a": "existing"}, id_factory=_counter())

        assert len(nodes) == 1
        assert nodes[0].parent_id == "existing"
        assert nodes[0].file_path == "a/new.txt"

    def test_unknown_parent_falls_back_to_root(self) -> None:
        entries = [DiscoveredEntry("ghost/x.txt", "x.txt", "file")]
        (node,) = merge_entries(entries, project_id="p", root_id="r", tracked={})
        assert node.parent_id == "r"


def test_tracked_paths_ignore_root_and_normalize() -> None:
    dataset = seeded_dataset(
        make_node("a", "docs", type="folder", file_path="docs"),
        make_node("b", "x.txt", parent_id="a", file_path="docs\\x.txt"),
        make_node("c", "other.txt", project_id="elsewhere"),
    )
    assert tracked_paths(dataset, PROJECT_ID) == {"docs": "a", "docs/x.txt": "b"}


class TestSyncExternalFiles:
    @pytest.mark.asyncio
    async def test_empty_directory_adds_nothing(
        self, workspace: Workspace, store: InMemoryDatasetStore, project_dir: Path
    ) -> None:
        assert await sync_external_files(workspace, PROJECT_ID) == []
        assert store.save_count == 0

    @pytest.mark.asyncio
    async def test_nested_file(self, workspace: Workspace, store: InMemoryDatasetStore, project_dir: Path) -> None:
        write_file(project_dir / "notes" / "todo.md", "- milk\n")

        new_nodes = await sync_external_files(workspace, PROJECT_ID)

        assert len(new_nodes) == 2
        by_path = _by_path(new_nodes)
        folder, todo = by_path["notes"], by_path["notes/todo.md"]
        assert folder.type == "folder"
        assert folder.parent_id == ROOT_ID
        assert todo.type == "file"
        assert todo.parent_id == folder.id
        assert todo.extension == "md"
        assert todo.size == 7
        assert todo.is_binary is False
        assert store.save_count == 1
        assert len(store.dataset.nodes) == 3

    @pytest.mark.asyncio
    async def test_second_sync_is_idempotent(
        self, workspace: Workspace, store: InMemoryDatasetStore, project_dir: Path
    ) -> None:
        write_file(project_dir / "a.txt")
        write_file(project_dir / "src" / "b.py")

        first = await sync_external_files(workspace, PROJECT_ID)
        second = await sync_external_files(workspace, PROJECT_ID)

        assert len(first) == 3
        assert second == []
        assert store.save_count == 1
        paths = [n.file_path for n in store.dataset.nodes if n.file_path]
        assert len(paths) == len(set(paths))

    @pytest.mark.asyncio
    async def test_new_file_in_tracked_folder(
        self, workspace: Workspace, store: InMemoryDatasetStore, project_dir: Path
    ) -> None:
        write_file(project_dir / "src" / "a.py")
        first = await sync_external_files(workspace, PROJECT_ID)
        folder_id = _by_path(first)["src"].id

        write_file(project_dir / "src" / "b.py")
        (added,) = await sync_external_files(workspace, PROJECT_ID)

        assert added.file_path == "src/b.py"
        assert added.parent_id == folder_id

    @pytest.mark.asyncio
    async def test_existing_nodes_are_untouched(self, layout: AppLayout, project_dir: Path) -> None:
        existing = make_node("keep", "gone.txt", file_path="gone.txt")
        existing.size = 99
        store = InMemoryDatasetStore(seeded_dataset(existing))
        workspace = Workspace(store, layout)
        write_file(project_dir / "new.txt")

        await sync_external_files(workspace, PROJECT_ID)

        kept = next(n for n in store.dataset.nodes if n.id == "keep")
        assert kept == existing

    @pytest.mark.asyncio
    async def test_windows_style_tracked_path_is_recognized(self, layout: AppLayout, project_dir: Path) -> None:
        store = InMemoryDatasetStore(
            seeded_dataset(
                make_node("d", "docs", type="folder", file_path="docs"),
                make_node("f", "a.txt", parent_id="d", file_path="docs\\a.txt"),
            )
        )
        write_file(project_dir / "docs" / "a.txt")

        assert await sync_external_files(Workspace(store, layout), PROJECT_ID) == []

    @pytest.mark.asyncio
    async def test_missing_root(self, layout: AppLayout, project_dir: Path) -> None:
        store = InMemoryDatasetStore(Dataset(projects=[Project(id=PROJECT_ID, name="Demo")]))
        write_file(project_dir / "a.txt")

        with pytest.raises(NotFoundError, match="Project root not found"):
            await sync_external_files(Workspace(store, layout), PROJECT_ID)
        assert store.save_count == 0

    @pytest.mark.asyncio
    async def test_missing_directory(self, workspace: Workspace, store: InMemoryDatasetStore) -> None:
        with pytest.raises(NotFoundError, match="Project directory not found"):
            await sync_external_files(workspace, PROJECT_ID)
        assert store.save_count == 0

    @pytest.mark.asyncio
    async def test_scan_failure_persists_nothing(
        self, workspace: Workspace, store: InMemoryDatasetStore, project_dir: Path
    ) -> None:
        write_file(project_dir / "a.txt")
        before = store.dataset.model_copy(deep=True)

        with (
            patch("project_tree.core.reconcile.scan", side_effect=StorageIOError("Failed to read directory")),
            pytest.raises(StorageIOError),
        ):
            await sync_external_files(workspace, PROJECT_ID)

        assert store.save_count == 0
        assert store.dataset == before

    @pytest.mark.asyncio
    @requires_enforced_permissions
    async def test_unreadable_subdirectory_persists_nothing(
        self, workspace: Workspace, store: InMemoryDatasetStore, project_dir: Path
    ) -> None:
        write_file(project_dir / "a.txt")
        write_file(project_dir / "locked" / "inner.txt")
        before = store.dataset.model_copy(deep=True)

        with unreadable(project_dir / "locked"), pytest.raises(StorageIOError):
            await sync_external_files(workspace, PROJECT_ID)

        assert store.save_count == 0
        assert store.dataset == before


class TestRebuildProjectTree:
    @pytest.mark.asyncio
    async def test_rebuild_matches_disk(self, layout: AppLayout, project_dir: Path) -> None:
        other = make_node("other", "x.txt", project_id="p2")
        stale = make_node("stale", "deleted.txt", file_path="deleted.txt")
        store = InMemoryDatasetStore(seeded_dataset(stale, other))
        write_file(project_dir / "src" / "main.py")
        write_file(project_dir / "README.md")

        rebuilt = await rebuild_project_tree(Workspace(store, layout), PROJECT_ID)

        assert sorted(n.file_path for n in rebuilt) == ["README.md", "src", "src/main.py"]
        ids = {n.id for n in store.dataset.nodes}
        assert "stale" not in ids
        assert "other" in ids
        assert ROOT_ID in ids
        project_nodes = store.dataset.project_nodes(PROJECT_ID)
        assert len(project_nodes) == 4

    @pytest.mark.asyncio
    async def test_rebuild_then_sync_adds_nothing(
        self, workspace: Workspace, store: InMemoryDatasetStore, project_dir: Path
    ) -> None:
        write_file(project_dir / "a" / "b.txt")
        await rebuild_project_tree(workspace, PROJECT_ID)
        assert await sync_external_files(workspace, PROJECT_ID) == []

    @pytest.mark.asyncio
    async def test_rebuild_twice_regenerates_ids(self, workspace: Workspace, project_dir: Path) -> None:
        write_file(project_dir / "a.txt")
        (first,) = await rebuild_project_tree(workspace, PROJECT_ID)
        (second,) = await rebuild_project_tree(workspace, PROJECT_ID)
        assert first.file_path == second.file_path
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_rebuild_missing_root(self, layout: AppLayout, project_dir: Path) -> None:
        store = InMemoryDatasetStore(Dataset())
        with pytest.raises(NotFoundError):
            await rebuild_project_tree(Workspace(store, layout), PROJECT_ID)
        assert store.save_count == 0

    @pytest.mark.asyncio
    async def test_rebuild_scan_failure_keeps_old_nodes(self, layout: AppLayout, project_dir: Path) -> None:
        store = InMemoryDatasetStore(seeded_dataset(make_node("keep", "a.txt")))

        with (
            patch("project_tree.core.reconcile.scan", side_effect=StorageIOError("boom")),
            pytest.raises(StorageIOError),
        ):
            await rebuild_project_tree(Workspace(store, layout), PROJECT_ID)

        assert {n.id for n in store.dataset.nodes} == {ROOT_ID, "keep"}


class TestAutoSync:
    @pytest.mark.asyncio
    async def test_reports_change(self, workspace: Workspace, project_dir: Path) -> None:
        write_file(project_dir / "a.txt")
        assert await auto_sync(workspace, PROJECT_ID) is True
        assert await auto_sync(workspace, PROJECT_ID) is False

    @pytest.mark.asyncio
    async def test_propagates_failure(self, workspace: Workspace) -> None:
        with pytest.raises(NotFoundError):
            await auto_sync(workspace, PROJECT_ID)


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024, "1 MB"),
        (5 * 1024**3, "5 GB"),
    ],
)
def test_format_file_size(size: int, expected: str) -> None:
    assert format_file_size(size) == expected


def test_summarize_sync() -> None:
    folder = make_node("f", "src", type="folder")
    a = make_node("a", "a.txt")
    a.size = 1024
    b = make_node("b", "b.txt")
    b.size = 512

    summary = summarize_sync([folder, a, b], rebuild=True)

    assert summary.file_count == 2
    assert summary.folder_count == 1
    assert summary.total_count == 3
    assert summary.total_size == "1.5 KB"
    assert summary.is_rebuild is True
