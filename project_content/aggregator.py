"""Builds the relative-path to content mapping for a project."""

from __future__ import annotations

import os
from typing import Callable, Optional, Sequence

from .logging import get_logger
from .models import ProjectSnapshot
from .normalizer import normalize_content
from .walker import TreeWalker

logger = get_logger("aggregator")


def relative_key(path: str, project_id: str, root: str) -> str:
    """Return the forward-slash key for ``path``.

    Keys are relative to ``project_id`` when the file lives beneath it; otherwise
    they are relative to the configured root the file was discovered under (its
    parent directory when the root names a single file).
    """
    absolute = os.path.abspath(path)
    anchor = os.path.abspath(os.path.expanduser(root))
    if _same_path(absolute, anchor):
        anchor = os.path.dirname(anchor)

    for base in (os.path.expanduser(project_id), anchor):
        relative = _relative_under(absolute, base)
        if relative is not None:
            return relative.replace("\\", "/")
    return os.path.basename(absolute).replace("\\", "/")


def _same_path(left: str, right: str) -> bool:
    return os.path.normcase(left) == os.path.normcase(right)


def _relative_under(absolute: str, base: str) -> Optional[str]:
    if not base:
        return None
    base_abs = os.path.abspath(base)
    try:
        common = os.path.commonpath([os.path.normcase(absolute), os.path.normcase(base_abs)])
    except ValueError:
        # Paths on different drives.
        return None
    if common != os.path.normcase(base_abs) or _same_path(absolute, base_abs):
        return None
    return os.path.relpath(absolute, base_abs)


class Aggregator:
    """Drives the walker and folds each file into a ``ProjectSnapshot``."""

    def __init__(
        self,
        walker: TreeWalker | None = None,
        normalizer: Callable[[str], str] = normalize_content,
    ) -> None:
        self.walker = walker or TreeWalker()
        self.normalizer = normalizer

    async def aggregate(self, project_id: str, roots: Sequence[str]) -> ProjectSnapshot:
        """Collect normalized contents of every readable file under ``roots``."""
        snapshot = ProjectSnapshot(project_id=project_id)
        async for entry in self.walker.walk(roots, on_skip=snapshot.skipped.append):
            key = relative_key(entry.path, project_id, entry.root)
            if key in snapshot.files:
                # Last processed root wins.
                logger.warning("Duplicate path %s from %s replaces earlier entry", key, entry.root)
                snapshot.collisions.append(key)
            snapshot.files[key] = self.normalizer(entry.content)

        logger.info(
            "Collected %d file(s) for %s (%d skipped)",
            len(snapshot.files),
            project_id,
            len(snapshot.skipped),
        )
        return snapshot


__all__ = ["Aggregator", "relative_key"]
