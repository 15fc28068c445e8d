"""Directory listing for the vault."""

import asyncio
import logging
import os
from datetime import datetime, timezone

from studiovault.core.config import FRONTMATTER_EXTENSIONS
from studiovault.core.frontmatter import is_document_name, parse_frontmatter
from studiovault.core.guard import PathGuard, canonicalize
from studiovault.core.types import DocumentAttributes, EntryMetadata, ScanResult

logger = logging.getLogger(__name__)


def ordering_key(is_directory: bool, name: str) -> tuple[bool, str, str]:
    """Directories first, then case-insensitive names; lowercase wins ties."""
    return (not is_directory, name.casefold(), name.swapcase())


def sort_entries(entries: list[EntryMetadata]) -> list[EntryMetadata]:
    return sorted(entries, key=lambda e: ordering_key(e.is_directory, e.name))


def _timestamp(value: float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class DirectoryScanner:
    """Lists the immediate children of a vault directory."""

    def __init__(
        self,
        guard: PathGuard,
        *,
        frontmatter_extensions: tuple[str, ...] = FRONTMATTER_EXTENSIONS,
    ):
        self.guard = guard
        self.frontmatter_extensions = frontmatter_extensions

    async def scan(self, dir_path: str) -> list[EntryMetadata]:
        """
        List a directory.

        Args:
            dir_path: Directory inside the vault

        Returns:
            Sorted entries; empty when the path is rejected or unreadable
        """
        result = await self.scan_detailed(dir_path)
        return result.entries

    async def scan_detailed(self, dir_path: str) -> ScanResult:
        """List a directory and report why an empty listing is empty."""
        if not self.guard.is_safe(dir_path):
            self.guard.report(dir_path, "scan")
            return ScanResult.rejected()
        return await asyncio.to_thread(self._scan_sync, canonicalize(dir_path))

    def _scan_sync(self, dir_path: str) -> ScanResult:
        try:
            children = self.iter_children(dir_path)
        except OSError as exc:
            logger.error("Error scanning directory %s: %s", dir_path, exc)
            return ScanResult.io_error()

        entries = []
        for child in children:
            entry = self.build_entry(child)
            if entry is not None:
                entries.append(entry)
        return ScanResult(entries=sort_entries(entries))

    def iter_children(self, dir_path: str) -> list[os.DirEntry[str]]:
        """
        Visible children of ``dir_path`` in listing order.

        Hidden entries, symlinks and anything the guard rejects are dropped.

        Raises:
            OSError: If the directory cannot be read
        """
        with os.scandir(dir_path) as it:
            dirents = list(it)

        children = []
        for dirent in dirents:
            if dirent.name.startswith("."):
                continue
            if not self.guard.is_safe(dirent.path):
                self.guard.report(dirent.path, "scan")
                continue
            try:
                if dirent.is_symlink():
                    logger.debug("Skipping symlink %s", dirent.path)
                    continue
                is_dir = dirent.is_dir(follow_symlinks=False)
            except OSError:
                continue
            children.append((ordering_key(is_dir, dirent.name), dirent))

        children.sort(key=lambda item: item[0])
        return [dirent for _, dirent in children]

    def build_entry(self, dirent: os.DirEntry[str]) -> EntryMetadata | None:
        """Stat a child and, for documents, merge its front matter."""
        try:
            stats = dirent.stat(follow_symlinks=False)
            is_dir = dirent.is_dir(follow_symlinks=False)
        except OSError as exc:
            logger.warning("Cannot stat %s: %s", dirent.path, exc)
            return None

        attributes = DocumentAttributes()
        if not is_dir and is_document_name(dirent.name, self.frontmatter_extensions):
            attributes = self._read_attributes(dirent.path)

        return EntryMetadata(
            path=dirent.path,
            name=dirent.name,
            is_directory=is_dir,
            size=None if is_dir else stats.st_size,
            last_modified=_timestamp(stats.st_mtime),
            created_at=_timestamp(getattr(stats, "st_birthtime", stats.st_ctime)),
            attributes=attributes,
        )

    def _read_attributes(self, path: str) -> DocumentAttributes:
        try:
            with open(path, encoding="utf-8") as fh:
                content = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to parse markdown frontmatter for %s: %s", path, exc)
            return DocumentAttributes()
        return DocumentAttributes.from_mapping(parse_frontmatter(content).attributes)
