"""Error types raised by the vault core."""


class VaultError(Exception):
    """Base error for vault operations."""


class SecurityRejection(VaultError):
    """Raised when a path leaves the vault root or targets a protected entry."""


class VaultValidationError(VaultError, ValueError):
    """Raised when caller input is malformed."""


class FrontMatterError(VaultError, ValueError):
    """Raised when a header mapping cannot be serialized."""
