"""Validation of untyped arguments arriving at the service boundary."""

from __future__ import annotations

import math
from typing import Any

from studiovault.core.errors import VaultValidationError


def is_valid_string(value: object) -> bool:
    """True for non-empty strings."""
    return isinstance(value, str) and len(value) > 0


def require_str(value: object, key: str) -> str:
    """Return ``value`` if it is a non-empty string, otherwise raise."""
    if not is_valid_string(value):
        raise VaultValidationError(f"field '{key}' must be a non-empty string")
    if "\x00" in value:  # type: ignore[operator]
        raise VaultValidationError(f"invalid {key}: null bytes not allowed")
    return value  # type: ignore[return-value]


def optional_text(value: object) -> str:
    """Content argument: strings pass through, anything else becomes empty."""
    return value if isinstance(value, str) else ""


def coerce_limit(value: object, default: int) -> int:
    """Numeric limit, falling back to ``default`` for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return max(int(value), 0)


def coerce_flag(value: object) -> bool:
    """Boolean option: only ``True`` switches it on."""
    return value is True


def require_mapping(value: object, key: str) -> dict[str, Any]:
    """Return ``value`` if it is a dict with string keys, otherwise raise."""
    if not isinstance(value, dict) or not all(isinstance(k, str) for k in value):
        raise VaultValidationError(f"field '{key}' must be a mapping")
    return value
