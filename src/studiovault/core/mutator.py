"""Create, rename and delete entries inside the vault.

Each operation is a single filesystem call guarded by the PathGuard. There
is no rollback and no locking; concurrent callers race at the filesystem
level and exclusive creation keeps a file from being created twice.
"""

import asyncio
import errno
import logging
import os
import shutil

from studiovault.core.config import DEFAULT_DOCUMENT_EXTENSION, DOCUMENT_EXTENSIONS
from studiovault.core.frontmatter import create_default_document, is_document_name
from studiovault.core.guard import PathGuard, canonicalize
from studiovault.core.names import (
    has_document_extension,
    sanitize_name,
    slugify,
    strip_extension,
)
from studiovault.core.types import FailureReason, OperationResult

logger = logging.getLogger(__name__)


def _write_exclusive(path: str, content: str) -> None:
    with open(path, "x", encoding="utf-8", newline="") as fh:
        fh.write(content)


def _rename_no_clobber(source: str, target: str) -> None:
    if os.path.lexists(target) and not os.path.samefile(source, target):
        raise FileExistsError(errno.EEXIST, "Target already exists", target)
    os.rename(source, target)


class VaultMutator:
    """File and folder mutations with name sanitization and root protection."""

    def __init__(
        self,
        guard: PathGuard,
        *,
        document_extensions: tuple[str, ...] = DOCUMENT_EXTENSIONS,
        default_extension: str = DEFAULT_DOCUMENT_EXTENSION,
    ):
        self.guard = guard
        self.document_extensions = document_extensions
        self.default_extension = default_extension

    def document_file_name(self, raw_name: str) -> str | None:
        """
        File name for a new document.

        Names with a document extension are sanitized and kept; anything
        else is slugified and gets the default extension.

        Returns:
            File name, or None if the name reduces to nothing
        """
        if has_document_extension(raw_name, self.document_extensions):
            name = sanitize_name(raw_name)
            if name is None or not strip_extension(name, self.document_extensions).strip():
                return None
            return name
        slug = slugify(raw_name)
        if not slug:
            return None
        return f"{slug}{self.default_extension}"

    async def create_folder(self, parent_dir: str, raw_name: str) -> OperationResult:
        """Create a single folder named after the sanitized ``raw_name``."""
        if not self.guard.is_safe(parent_dir):
            self.guard.report(parent_dir, "create_folder")
            return OperationResult.fail(
                FailureReason.SECURITY, "Access denied: invalid path"
            )

        name = sanitize_name(raw_name)
        if name is None:
            return OperationResult.fail(FailureReason.VALIDATION, "Invalid folder name")

        target = os.path.join(canonicalize(parent_dir), name)
        if not self.guard.is_safe(target):
            self.guard.report(target, "create_folder")
            return OperationResult.fail(
                FailureReason.SECURITY, "Invalid or unsafe folder name"
            )

        try:
            await asyncio.to_thread(os.mkdir, target)
        except FileExistsError:
            return OperationResult.fail(
                FailureReason.ALREADY_EXISTS, "A folder with this name already exists"
            )
        except OSError as exc:
            logger.error("Error creating folder %s: %s", target, exc)
            return OperationResult.fail(
                FailureReason.NOT_FOUND_OR_IO,
                f"Error creating folder: {exc.strerror or 'unknown error'}",
            )

        logger.info("Folder created: %s", target)
        return OperationResult.ok(target)

    async def ensure_folder(self, parent_dir: str, raw_name: str) -> str | None:
        """Create a folder if missing and return its path."""
        if not self.guard.is_safe(parent_dir):
            self.guard.report(parent_dir, "ensure_folder")
            return None

        name = sanitize_name(raw_name)
        if name is None:
            return None

        target = os.path.join(canonicalize(parent_dir), name)
        if not self.guard.is_safe(target):
            self.guard.report(target, "ensure_folder")
            return None

        try:
            await asyncio.to_thread(os.makedirs, target, exist_ok=True)
        except OSError as exc:
            logger.error("Error creating folder %s: %s", target, exc)
            return None
        return target

    async def create_document(
        self, parent_dir: str, raw_name: str, content: str = ""
    ) -> OperationResult:
        """
        Create a new document without overwriting anything.

        Args:
            parent_dir: Folder that receives the document
            raw_name: Name as typed by the user
            content: Initial content; empty Markdown documents get the
                default header template

        Returns:
            OperationResult with the created path on success
        """
        if not self.guard.is_safe(parent_dir):
            self.guard.report(parent_dir, "create_document")
            return OperationResult.fail(
                FailureReason.SECURITY, "Access denied: invalid path"
            )

        file_name = self.document_file_name(raw_name)
        if file_name is None:
            return OperationResult.fail(
                FailureReason.VALIDATION, "Invalid document name"
            )

        target = os.path.join(canonicalize(parent_dir), file_name)
        if not self.guard.is_safe(target):
            self.guard.report(target, "create_document")
            return OperationResult.fail(
                FailureReason.SECURITY, "Invalid or unsafe document name"
            )

        if not content and is_document_name(file_name):
            content = create_default_document(raw_name)

        try:
            await asyncio.to_thread(_write_exclusive, target, content)
        except FileExistsError:
            return OperationResult.fail(
                FailureReason.ALREADY_EXISTS, "A file with this name already exists"
            )
        except OSError as exc:
            logger.error("Error creating document %s: %s", target, exc)
            return OperationResult.fail(
                FailureReason.NOT_FOUND_OR_IO, "Failed to create file"
            )

        logger.info("Document created: %s", target)
        return OperationResult.ok(target)

    async def delete_file(self, path: str) -> bool:
        """Delete a single file."""
        if not self.guard.is_safe(path):
            self.guard.report(path, "delete_file")
            return False

        target = canonicalize(path)
        try:
            await asyncio.to_thread(os.unlink, target)
        except OSError as exc:
            logger.error("Error deleting file %s: %s", target, exc)
            return False

        logger.info("File deleted: %s", target)
        return True

    async def delete_folder(self, path: str) -> bool:
        """Delete a folder and everything below it. The root is never deleted."""
        if not self.guard.is_safe(path):
            self.guard.report(path, "delete_folder")
            return False

        if self.guard.is_root(path):
            logger.warning("[Security] Cannot delete root vault folder")
            return False

        target = canonicalize(path)
        try:
            await asyncio.to_thread(shutil.rmtree, target)
        except OSError as exc:
            logger.error("Error deleting folder %s: %s", target, exc)
            return False

        logger.info("Folder deleted: %s", target)
        return True

    async def rename(self, old_path: str, raw_new_name: str) -> str | None:
        """
        Rename an entry within its current parent.

        Returns:
            New path, or None if the rename was refused or failed
        """
        if not self.guard.is_safe(old_path):
            self.guard.report(old_path, "rename")
            return None

        if self.guard.is_root(old_path):
            logger.warning("[Security] Cannot rename root vault folder")
            return None

        name = sanitize_name(raw_new_name)
        if name is None:
            return None

        source = canonicalize(old_path)
        target = os.path.join(os.path.dirname(source), name)
        if not self.guard.is_safe(target):
            self.guard.report(target, "rename")
            return None

        try:
            await asyncio.to_thread(_rename_no_clobber, source, target)
        except OSError as exc:
            logger.error("Error renaming %s: %s", source, exc)
            return None

        logger.info("Renamed %s -> %s", source, target)
        return target
