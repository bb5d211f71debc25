"""Tests for project_content.walker."""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Iterable, List, Sequence

import pytest

from project_content.models import FileEntry, SkippedPath
from project_content.walker import LocalFileSystem, TreeWalker
from tests._fixtures.project_builder import ProjectBuilder


class _FlakyFileSystem(LocalFileSystem):
    """Raises PermissionError for selected paths and records listing order."""

    def __init__(self, failing: Iterable[Path] = (), reverse_listing: bool = False) -> None:
        self.failing = {os.path.normpath(str(path)) for path in failing}
        self.reverse_listing = reverse_listing

    def listdir(self, path: str) -> List[str]:
        if path in self.failing:
            raise PermissionError(13, "Permission denied", path)
        return sorted(super().listdir(path), reverse=self.reverse_listing)

    def read_text(self, path: str) -> str:
        if path in self.failing:
            raise PermissionError(13, "Permission denied", path)
        return super().read_text(path)


def _walk(
    walker: TreeWalker, roots: Sequence[str]
) -> tuple[List[FileEntry], List[SkippedPath]]:
    skipped: List[SkippedPath] = []

    async def _collect() -> List[FileEntry]:
        return [entry async for entry in walker.walk(roots, on_skip=skipped.append)]

    return asyncio.run(_collect()), skipped


def test_walk_yields_regular_files_recursively(project_builder: ProjectBuilder) -> None:
    root = project_builder.write(
        "src/myapp",
        {"a.txt": "hello\nworld", "sub/b.txt": "  x   y  ", "sub/deeper/c.txt": "c"},
    )

    entries, skipped = _walk(TreeWalker(), [str(root)])

    by_path = {entry.path: entry for entry in entries}
    assert set(by_path) == {
        str(root / "a.txt"),
        str(root / "sub" / "b.txt"),
        str(root / "sub" / "deeper" / "c.txt"),
    }
    assert by_path[str(root / "a.txt")].content == "hello\nworld"
    assert all(entry.root == str(root) for entry in entries)
    assert skipped == []


def test_walk_is_depth_first_in_listing_order(project_builder: ProjectBuilder) -> None:
    root = project_builder.write(
        "proj", {"a/1.txt": "1", "a/2.txt": "2", "b.txt": "b", "c/3.txt": "3"}
    )

    entries, _ = _walk(TreeWalker(_FlakyFileSystem(reverse_listing=True)), [str(root)])

    relative = [Path(entry.path).relative_to(root).as_posix() for entry in entries]
    assert relative == ["c/3.txt", "b.txt", "a/2.txt", "a/1.txt"]


def test_walk_accepts_file_roots(project_builder: ProjectBuilder) -> None:
    root = project_builder.write("proj", {"only.txt": "single"})

    entries, _ = _walk(TreeWalker(), [str(root / "only.txt")])

    assert [entry.content for entry in entries] == ["single"]
    assert entries[0].root == str(root / "only.txt")


def test_unreadable_file_does_not_hide_siblings(project_builder: ProjectBuilder, caplog) -> None:
    root = project_builder.write("proj", {"a.txt": "a", "locked.txt": "secret", "z.txt": "z"})
    filesystem = _FlakyFileSystem(failing=[root / "locked.txt"])

    with caplog.at_level(logging.WARNING, logger="project_content"):
        entries, skipped = _walk(TreeWalker(filesystem), [str(root)])

    names = {Path(entry.path).name for entry in entries}
    assert names == {"a.txt", "z.txt"}
    assert [item.path for item in skipped] == [str(root / "locked.txt")]
    assert "Permission denied" in skipped[0].reason
    assert "locked.txt" in caplog.text


def test_unlistable_directory_skips_only_its_subtree(project_builder: ProjectBuilder) -> None:
    root = project_builder.write(
        "proj", {"private/inner.txt": "hidden", "public/visible.txt": "shown"}
    )
    filesystem = _FlakyFileSystem(failing=[root / "private"])

    entries, skipped = _walk(TreeWalker(filesystem), [str(root)])

    assert [Path(entry.path).name for entry in entries] == ["visible.txt"]
    assert [item.path for item in skipped] == [str(root / "private")]


def test_missing_root_does_not_stop_other_roots(project_builder: ProjectBuilder, tmp_path: Path) -> None:
    root = project_builder.write("proj", {"kept.txt": "kept"})
    missing = tmp_path / "missing"

    entries, skipped = _walk(TreeWalker(), [str(missing), str(root)])

    assert [Path(entry.path).name for entry in entries] == ["kept.txt"]
    assert [item.path for item in skipped] == [str(missing)]


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
def test_broken_symlink_is_skipped(project_builder: ProjectBuilder) -> None:
    root = project_builder.write("proj", {"real.txt": "real"})
    os.symlink(root / "gone.txt", root / "dangling.txt")

    entries, skipped = _walk(TreeWalker(), [str(root)])

    assert [Path(entry.path).name for entry in entries] == ["real.txt"]
    assert [Path(item.path).name for item in skipped] == ["dangling.txt"]


def test_undecodable_bytes_are_replaced(project_builder: ProjectBuilder) -> None:
    root = project_builder.write("proj", {"latin1.txt": b"caf\xe9\r\n"})

    entries, skipped = _walk(TreeWalker(), [str(root)])

    assert entries[0].content == "caf\ufffd\r\n"
    assert skipped == []
