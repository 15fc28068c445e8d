"""VaultService - the single owner of the vault root.

The UI layer talks to the vault only through this class. Every method takes
untyped input, validates it, routes paths through the PathGuard and then
delegates to the scanner, collector or mutator.
"""

import asyncio
import logging
import os
import sqlite3
from pathlib import Path
from threading import Lock
from typing import Any

from studiovault.core.collector import RecursiveCollector
from studiovault.core.config import (
    DATABASE_PATH,
    IMPORTABLE_EXTENSIONS,
    RECENT_LIMIT,
    RECENT_MAX_DEPTH,
    STUDIOVAULT_HUB_DIR,
)
from studiovault.core.errors import VaultValidationError
from studiovault.core.frontmatter import parse_frontmatter, update_frontmatter
from studiovault.core.guard import PathGuard, canonicalize
from studiovault.core.mutator import VaultMutator
from studiovault.core.scanner import DirectoryScanner
from studiovault.core.types import (
    EntryMetadata,
    FailureReason,
    InitialState,
    OperationResult,
)
from studiovault.core.validators import (
    coerce_flag,
    coerce_limit,
    is_valid_string,
    optional_text,
    require_mapping,
    require_str,
)
from studiovault.storage.db import get_connection, init_db
from studiovault.storage.repos.preferences_repo import PreferencesRepo

logger = logging.getLogger(__name__)


def _read_verbatim(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def _write_verbatim(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)


class VaultService:
    """Request/response operations over one sandboxed vault.

    Example:
        service = VaultService("~/Documents/StudioVault")
        entries = await service.list_entries(str(service.root))
    """

    def __init__(
        self,
        root: Path | str | None = None,
        *,
        db_path: Path | str | None = None,
        hub_dir: Path | str | None = None,
        recent_limit: int = RECENT_LIMIT,
        max_depth: int = RECENT_MAX_DEPTH,
    ):
        """
        Initialize the service.

        Args:
            root: Initial vault root; None leaves every operation failing
                closed until a root is set
            db_path: Preferences database; None disables remembering the
                last opened vault
            hub_dir: Default vault created by ``get_initial_state``
            recent_limit: Default number of recent documents
            max_depth: Deepest level visited when collecting documents
        """
        self.guard = PathGuard(Path(root).expanduser() if root is not None else None)
        self.scanner = DirectoryScanner(self.guard)
        self.collector = RecursiveCollector(self.guard, self.scanner, max_depth=max_depth)
        self.mutator = VaultMutator(self.guard)
        self.db_path = Path(db_path) if db_path else None
        self.hub_dir = Path(hub_dir).expanduser() if hub_dir else STUDIOVAULT_HUB_DIR
        self.recent_limit = recent_limit
        self.max_depth = max_depth
        self._db_ready = False

    @property
    def root(self) -> Path | None:
        """Current vault root."""
        return self.guard.root

    # --- Root management ---

    def set_root(self, path: object) -> None:
        """
        Establish the vault root.

        Raises:
            VaultValidationError: If ``path`` is not a non-empty string
        """
        root = require_str(path, "path")
        self.guard.set_root(os.path.expanduser(root))

    async def open_vault(self, path: object) -> str | None:
        """Use a folder picked by the user as vault root and remember it."""
        if not is_valid_string(path):
            logger.error("open_vault: invalid path argument")
            return None

        candidate = canonicalize(os.path.expanduser(path))  # type: ignore[arg-type]
        if not await asyncio.to_thread(os.path.isdir, candidate):
            logger.error("open_vault: not a directory: %s", candidate)
            return None

        self.guard.set_root(candidate)
        await self._remember_root(candidate)
        return candidate

    async def restore_last_vault(self) -> str | None:
        """Re-open the last remembered vault if it still exists."""
        last = await self._last_root()
        if not last:
            return None
        if not await asyncio.to_thread(os.path.isdir, last):
            logger.info("Last vault %s no longer exists", last)
            return None
        self.guard.set_root(last)
        return str(self.guard.root)

    async def get_initial_state(self) -> InitialState | None:
        """Create the default vault hub if needed, open it and list it."""
        logger.info("Getting initial state (vault hub %s)", self.hub_dir)
        try:
            await asyncio.to_thread(self.hub_dir.mkdir, parents=True, exist_ok=True)
        except OSError:
            logger.exception("Error creating vault hub at %s", self.hub_dir)
            return None

        root = self.guard.set_root(self.hub_dir)
        await self._remember_root(str(root))
        entries = await self.scanner.scan(str(root))
        return InitialState(root_path=str(root), entries=entries)

    async def create_workspace(self, name: object) -> str | None:
        """Create a top-level workspace folder (idempotent)."""
        if not is_valid_string(name):
            logger.error("create_workspace: invalid name")
            return None
        if self.guard.root is None:
            logger.error("create_workspace: no vault root set")
            return None
        return await self.mutator.ensure_folder(str(self.guard.root), name)  # type: ignore[arg-type]

    # --- Reading ---

    async def list_entries(self, dir_path: object) -> list[EntryMetadata]:
        """List the immediate children of a directory. Never raises."""
        if not is_valid_string(dir_path):
            logger.error("list_entries: invalid dir_path argument")
            return []
        return await self.scanner.scan(dir_path)  # type: ignore[arg-type]

    async def list_recent_documents(
        self,
        root_dir: object,
        limit: object = None,
        *,
        exclude_direct_descendants: object = False,
    ) -> list[EntryMetadata]:
        """Newest documents below ``root_dir``. Never raises."""
        if not is_valid_string(root_dir):
            logger.error("list_recent_documents: invalid root_dir argument")
            return []
        if not isinstance(exclude_direct_descendants, bool):
            logger.warning(
                "list_recent_documents: non-boolean exclude_direct_descendants %r ignored",
                exclude_direct_descendants,
            )
        return await self.collector.most_recent(
            root_dir,  # type: ignore[arg-type]
            coerce_limit(limit, self.recent_limit),
            max_depth=self.max_depth,
            exclude_direct_descendants=coerce_flag(exclude_direct_descendants),
        )

    async def read_document(self, path: object) -> str:
        """
        Read a document.

        Raises:
            VaultValidationError: If ``path`` is malformed
            SecurityRejection: If ``path`` is outside the vault
            OSError: If the file cannot be read
        """
        target = self.guard.check(require_str(path, "path"), operation="read_document")
        return await asyncio.to_thread(_read_verbatim, target)

    def parent_of(self, path: object) -> str | None:
        """Parent directory for navigation; None above the vault root."""
        if not is_valid_string(path):
            logger.error("parent_of: invalid path argument")
            return None
        if not self.guard.is_safe(path) or self.guard.is_root(path):
            return None
        return os.path.dirname(canonicalize(path))  # type: ignore[arg-type]

    # --- Writing ---

    async def write_document(self, path: object, content: object) -> None:
        """
        Overwrite a document.

        Raises:
            VaultValidationError: If arguments are malformed
            SecurityRejection: If ``path`` is outside the vault
            OSError: If the file cannot be written
        """
        target = self.guard.check(require_str(path, "path"), operation="write_document")
        if not isinstance(content, str):
            raise VaultValidationError("field 'content' must be a string")
        await asyncio.to_thread(_write_verbatim, target, content)

    async def update_document_attributes(
        self, path: object, updates: object
    ) -> dict[str, Any]:
        """
        Merge ``updates`` into a document header, keeping the body.

        Returns:
            The header attributes after the update

        Raises:
            VaultValidationError: If arguments are malformed
            SecurityRejection: If ``path`` is outside the vault
            FrontMatterError: If a key cannot be written
            OSError: If the file cannot be read or written
        """
        target = self.guard.check(
            require_str(path, "path"), operation="update_document_attributes"
        )
        changes = require_mapping(updates, "updates")
        content = await asyncio.to_thread(_read_verbatim, target)
        updated = update_frontmatter(content, changes)
        await asyncio.to_thread(_write_verbatim, target, updated)
        return dict(parse_frontmatter(updated).attributes)

    async def create_folder(self, parent_dir: object, name: object) -> OperationResult:
        if not is_valid_string(parent_dir) or not is_valid_string(name):
            logger.error("create_folder: invalid arguments")
            return OperationResult.fail(FailureReason.VALIDATION, "Invalid arguments")
        return await self.mutator.create_folder(parent_dir, name)  # type: ignore[arg-type]

    async def create_document(
        self, parent_dir: object, name: object, content: object = None
    ) -> OperationResult:
        if not is_valid_string(parent_dir) or not is_valid_string(name):
            logger.error("create_document: invalid arguments")
            return OperationResult.fail(FailureReason.VALIDATION, "Invalid arguments")
        return await self.mutator.create_document(
            parent_dir,  # type: ignore[arg-type]
            name,  # type: ignore[arg-type]
            optional_text(content),
        )

    async def import_document(
        self, destination_dir: object, source_path: object
    ) -> OperationResult:
        """
        Copy an external text document into the vault.

        ``source_path`` comes from the file picker and may live outside the
        vault; only the destination is sandboxed. ``.txt`` files become
        ``.md`` documents.
        """
        if not is_valid_string(destination_dir) or not is_valid_string(source_path):
            logger.error("import_document: invalid arguments")
            return OperationResult.fail(
                FailureReason.VALIDATION, "Invalid destination folder"
            )

        source = Path(source_path)  # type: ignore[arg-type]
        extension = source.suffix.lower()
        if extension not in IMPORTABLE_EXTENSIONS:
            return OperationResult.fail(
                FailureReason.UNSUPPORTED,
                "Unsupported format: only .md and .txt files can be imported",
            )

        try:
            content = await asyncio.to_thread(_read_verbatim, source)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Import error reading %s: %s", source, exc)
            return OperationResult.fail(
                FailureReason.NOT_FOUND_OR_IO, "Could not read the selected file"
            )

        target_name = source.name
        if extension == ".txt":
            target_name = f"{source.stem}.md"

        return await self.mutator.create_document(
            destination_dir, target_name, content  # type: ignore[arg-type]
        )

    async def delete_file(self, path: object) -> bool:
        if not is_valid_string(path):
            logger.error("delete_file: invalid path argument")
            return False
        return await self.mutator.delete_file(path)  # type: ignore[arg-type]

    async def delete_folder(self, path: object) -> bool:
        if not is_valid_string(path):
            logger.error("delete_folder: invalid path argument")
            return False
        return await self.mutator.delete_folder(path)  # type: ignore[arg-type]

    async def rename(self, path: object, new_name: object) -> str | None:
        if not is_valid_string(path) or not is_valid_string(new_name):
            logger.error("rename: invalid arguments")
            return None
        return await self.mutator.rename(path, new_name)  # type: ignore[arg-type]

    # --- Preferences ---

    def _ensure_db(self) -> None:
        if not self._db_ready:
            init_db(self.db_path)
            self._db_ready = True

    def _store_root(self, path: str) -> None:
        self._ensure_db()
        with get_connection(self.db_path) as conn:
            PreferencesRepo(conn).set_last_vault_path(path)

    def _load_root(self) -> str | None:
        self._ensure_db()
        with get_connection(self.db_path) as conn:
            return PreferencesRepo(conn).get_last_vault_path()

    async def _remember_root(self, path: str) -> None:
        if self.db_path is None:
            return
        try:
            await asyncio.to_thread(self._store_root, path)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Could not remember vault path: %s", exc)

    async def _last_root(self) -> str | None:
        if self.db_path is None:
            return None
        try:
            return await asyncio.to_thread(self._load_root)
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Could not read last vault path: %s", exc)
            return None

    def __repr__(self) -> str:
        return f"VaultService({self.guard.root})"


# Default instance
_service: VaultService | None = None
_service_lock = Lock()


def get_vault_service() -> VaultService:
    """Get or create the default vault service."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = VaultService(db_path=DATABASE_PATH)
    return _service


def set_vault_service(service: VaultService | None) -> None:
    """Set the default vault service (for testing)."""
    global _service
    _service = service
