"""Sanitization helpers for user-supplied entry names."""

import re

from studiovault.core.config import DOCUMENT_EXTENSIONS

# Characters reserved by at least one supported filesystem
_RESERVED_CHARS_RE = re.compile(r'[\\/:*?"<>|\x00]')
_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")


def sanitize_name(raw: str) -> str | None:
    """
    Replace reserved characters with underscores.

    Args:
        raw: Name as typed by the user

    Returns:
        A single path component, or None if nothing usable is left
    """
    name = _RESERVED_CHARS_RE.sub("_", raw)
    if not name.strip() or name in (".", ".."):
        return None
    return name


def slugify(raw: str) -> str:
    """Lowercase ``raw`` and collapse non-alphanumeric runs into ``-``."""
    return _SLUG_SEPARATOR_RE.sub("-", raw.lower()).strip("-")


def has_document_extension(
    name: str, extensions: tuple[str, ...] = DOCUMENT_EXTENSIONS
) -> bool:
    """Check whether ``name`` already carries a document extension."""
    return name.endswith(extensions)


def strip_extension(name: str, extensions: tuple[str, ...] = DOCUMENT_EXTENSIONS) -> str:
    """Drop a trailing document extension, if any."""
    for ext in extensions:
        if name.endswith(ext):
            return name[: -len(ext)]
    return name
