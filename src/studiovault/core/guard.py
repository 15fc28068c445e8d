"""Path containment checks for the vault root.

Every operation that touches disk asks the guard first. The decision is
purely lexical so it also works for paths that do not exist yet, such as the
target of a file creation.
"""

import logging
import os
from pathlib import Path

from studiovault.core.errors import SecurityRejection

logger = logging.getLogger(__name__)


def canonicalize(path: str | os.PathLike[str]) -> str:
    """Absolute, normalized form of ``path`` without touching disk."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


class PathGuard:
    """Holds the vault root and decides whether a path lies inside it."""

    def __init__(self, root: Path | str | None = None):
        """
        Initialize the guard.

        Args:
            root: Vault root directory; ``None`` leaves the guard unset and
                every path is rejected until ``set_root`` is called.
        """
        self._root: str | None = None
        if root is not None:
            self.set_root(root)

    @property
    def root(self) -> Path | None:
        """Canonical vault root, or None when unset."""
        return Path(self._root) if self._root is not None else None

    @property
    def is_set(self) -> bool:
        return self._root is not None

    def set_root(self, root: Path | str) -> Path:
        """Replace the vault root."""
        raw = os.fspath(root)
        if not raw or "\x00" in raw:
            raise ValueError("vault root must be a non-empty path")
        self._root = canonicalize(raw)
        logger.info("Vault root set to %s", self._root)
        return Path(self._root)

    def clear_root(self) -> None:
        """Unset the root; all paths become unsafe."""
        self._root = None

    def is_safe(self, candidate: object) -> bool:
        """Return True iff ``candidate`` is the root or a descendant of it."""
        if self._root is None:
            return False
        if not isinstance(candidate, (str, os.PathLike)):
            return False
        raw = os.fspath(candidate)
        if not isinstance(raw, str) or not raw or "\x00" in raw:
            return False
        target = canonicalize(raw)
        if target == self._root:
            return True
        prefix = self._root if self._root.endswith(os.sep) else self._root + os.sep
        return target.startswith(prefix)

    def is_root(self, candidate: object) -> bool:
        """Return True iff ``candidate`` canonicalizes to the root itself."""
        if self._root is None or not self.is_safe(candidate):
            return False
        return canonicalize(os.fspath(candidate)) == self._root  # type: ignore[arg-type]

    def check(self, candidate: object, *, operation: str = "access") -> Path:
        """
        Return the canonical path or raise.

        Raises:
            SecurityRejection: If the path is outside the vault root
        """
        if not self.is_safe(candidate):
            self.report(candidate, operation)
            raise SecurityRejection("Access denied: path is outside the vault")
        return Path(canonicalize(os.fspath(candidate)))  # type: ignore[arg-type]

    def report(self, candidate: object, operation: str) -> None:
        """Log a rejected path."""
        if self._root is None:
            logger.warning("[Security] %s refused: no vault root set", operation)
            return
        logger.warning(
            "[Security] Path traversal attempt blocked in %s: %r", operation, candidate
        )

    def __repr__(self) -> str:
        return f"PathGuard({self._root})"
