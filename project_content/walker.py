"""Depth-first traversal of configured roots with per-node failure isolation."""

from __future__ import annotations

import asyncio
import os
import stat
from typing import AsyncIterator, Callable, List, Optional, Sequence, TypeVar

from .errors import TraversalError
from .logging import get_logger
from .models import FileEntry, SkippedPath

logger = get_logger("walker")

SkipCallback = Callable[[SkippedPath], None]

_T = TypeVar("_T")


class LocalFileSystem:
    """Blocking filesystem primitives used by the walker."""

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def listdir(self, path: str) -> List[str]:
        return os.listdir(path)

    def read_text(self, path: str) -> str:
        # newline="" keeps \r\n intact; normalization handles line breaks.
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            return handle.read()


class TreeWalker:
    """Yields every regular file reachable from a set of roots, one at a time."""

    def __init__(self, filesystem: LocalFileSystem | None = None) -> None:
        self.filesystem = filesystem or LocalFileSystem()

    async def walk(
        self, roots: Sequence[str], on_skip: Optional[SkipCallback] = None
    ) -> AsyncIterator[FileEntry]:
        """Traverse ``roots`` in order, skipping any node that fails."""
        for root in roots:
            async for entry in self._visit(root, root, on_skip):
                yield entry

    async def _visit(
        self, item_path: str, root: str, on_skip: Optional[SkipCallback]
    ) -> AsyncIterator[FileEntry]:
        full_path = os.path.normpath(item_path)
        names: List[str] = []
        content: Optional[str] = None
        try:
            info = await self._run(self.filesystem.stat, full_path)
            if stat.S_ISDIR(info.st_mode):
                names = await self._run(self.filesystem.listdir, full_path)
            elif stat.S_ISREG(info.st_mode):
                content = await self._run(self.filesystem.read_text, full_path)
            else:
                logger.debug("Ignoring non-regular path %s", full_path)
                return
        except (OSError, ValueError) as exc:
            self._skip(full_path, exc, on_skip)
            return

        if content is not None:
            yield FileEntry(path=full_path, root=root, content=content)
            return

        for name in names:
            async for entry in self._visit(os.path.join(item_path, name), root, on_skip):
                yield entry

    async def _run(self, func: Callable[[str], _T], path: str) -> _T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, path)

    def _skip(
        self, path: str, exc: BaseException, on_skip: Optional[SkipCallback]
    ) -> None:
        error = TraversalError(path, exc)
        logger.warning("%s", error)
        if on_skip is not None:
            on_skip(SkippedPath(path=path, reason=str(exc)))


__all__ = ["LocalFileSystem", "SkipCallback", "TreeWalker"]
