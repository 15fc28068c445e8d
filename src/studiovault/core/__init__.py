"""StudioVault core library - sandboxed access to a document vault."""

from typing import TYPE_CHECKING

from studiovault.core.errors import (
    FrontMatterError,
    SecurityRejection,
    VaultError,
    VaultValidationError,
)
from studiovault.core.types import (
    DocumentAttributes,
    EntryMetadata,
    FailureReason,
    InitialState,
    OperationResult,
    ScanResult,
    ScanStatus,
)

if TYPE_CHECKING:
    from studiovault.core.guard import PathGuard
    from studiovault.core.service import (
        VaultService,
        get_vault_service,
        set_vault_service,
    )

__all__ = [
    # Service
    "VaultService",
    "get_vault_service",
    "set_vault_service",
    "PathGuard",
    # Types
    "DocumentAttributes",
    "EntryMetadata",
    "FailureReason",
    "InitialState",
    "OperationResult",
    "ScanResult",
    "ScanStatus",
    # Errors
    "FrontMatterError",
    "SecurityRejection",
    "VaultError",
    "VaultValidationError",
]


def __getattr__(name: str):
    if name in ("VaultService", "get_vault_service", "set_vault_service"):
        from studiovault.core import service

        return getattr(service, name)
    if name == "PathGuard":
        from studiovault.core.guard import PathGuard

        return PathGuard
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
