"""API route modules."""

from studiovault.api.routes import documents, entries, folders, health, vault

__all__ = ["documents", "entries", "folders", "health", "vault"]
