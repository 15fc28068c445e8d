"""Bounded recursive collection of documents, used for recency ranking."""

import asyncio
import logging
import os

from studiovault.core.config import FRONTMATTER_EXTENSIONS, RECENT_MAX_DEPTH
from studiovault.core.frontmatter import is_document_name
from studiovault.core.guard import PathGuard, canonicalize
from studiovault.core.scanner import DirectoryScanner
from studiovault.core.types import EntryMetadata, ScanResult

logger = logging.getLogger(__name__)


class RecursiveCollector:
    """Walks a subtree depth-first and collects document entries."""

    def __init__(
        self,
        guard: PathGuard,
        scanner: DirectoryScanner,
        *,
        extensions: tuple[str, ...] = FRONTMATTER_EXTENSIONS,
        max_depth: int = RECENT_MAX_DEPTH,
    ):
        self.guard = guard
        self.scanner = scanner
        self.extensions = extensions
        self.max_depth = max_depth

    async def collect(
        self, dir_path: str, depth: int = 0, max_depth: int | None = None
    ) -> list[EntryMetadata]:
        """
        Collect documents at or below ``dir_path``.

        Args:
            dir_path: Directory inside the vault
            depth: Nesting level of ``dir_path`` itself
            max_depth: Deepest level visited (defaults to the collector's)

        Returns:
            Document entries in listing order; directories are not emitted
        """
        result = await self.collect_detailed(dir_path, depth, max_depth)
        return result.entries

    async def collect_detailed(
        self, dir_path: str, depth: int = 0, max_depth: int | None = None
    ) -> ScanResult:
        limit = self.max_depth if max_depth is None else max_depth
        if not self.guard.is_safe(dir_path):
            self.guard.report(dir_path, "collect")
            return ScanResult.rejected()
        return await asyncio.to_thread(
            self._collect_sync, canonicalize(dir_path), depth, limit
        )

    def _collect_sync(self, dir_path: str, depth: int, max_depth: int) -> ScanResult:
        if depth > max_depth:
            return ScanResult()

        try:
            children = self.scanner.iter_children(dir_path)
        except OSError as exc:
            logger.error("Error scanning recursively %s: %s", dir_path, exc)
            return ScanResult.io_error()

        found: list[EntryMetadata] = []
        for child in children:
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if is_dir:
                found.extend(self._collect_sync(child.path, depth + 1, max_depth).entries)
            elif is_document_name(child.name, self.extensions):
                entry = self.scanner.build_entry(child)
                if entry is not None:
                    found.append(entry)
        return ScanResult(entries=found)

    async def most_recent(
        self,
        dir_path: str,
        limit: int,
        *,
        max_depth: int | None = None,
        exclude_direct_descendants: bool = False,
    ) -> list[EntryMetadata]:
        """
        Newest documents below ``dir_path``.

        Args:
            dir_path: Directory inside the vault
            limit: Maximum number of entries returned
            max_depth: Deepest level visited
            exclude_direct_descendants: Drop documents sitting directly in
                ``dir_path``

        Returns:
            Entries by creation time, newest first; entries without a
            timestamp sort last and ties keep listing order
        """
        if limit <= 0:
            return []

        entries = await self.collect(dir_path, 0, max_depth)
        logger.debug("Found %d documents below %s", len(entries), dir_path)

        if exclude_direct_descendants and entries:
            parent = canonicalize(dir_path)
            entries = [e for e in entries if os.path.dirname(e.path) != parent]

        ranked = sorted(entries, key=lambda e: e.created_timestamp, reverse=True)
        return ranked[:limit]
