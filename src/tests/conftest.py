"""Shared test fixtures and configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from studiovault.core.guard import PathGuard
from studiovault.core.service import VaultService, set_vault_service


@pytest.fixture
def vault_root(tmp_path) -> Path:
    """Provide an empty vault directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def guard(vault_root) -> PathGuard:
    """Guard rooted at the temporary vault."""
    return PathGuard(vault_root)


@pytest.fixture
def sample_vault(vault_root) -> Path:
    """
    Create a small vault:

        vault/
          ZFolder/
            nested.md
          aFolder/
            deeper/
              leaf.md
          a.md
          b.md
          notes.txt
          .hidden.md
    """
    (vault_root / "ZFolder").mkdir()
    (vault_root / "aFolder").mkdir()
    (vault_root / "aFolder" / "deeper").mkdir()

    (vault_root / "a.md").write_text(
        '---\ntitle: "Alpha"\nstatus: "active"\ntags: ["one", "two"]\n---\n# Alpha\n',
        encoding="utf-8",
    )
    (vault_root / "b.md").write_text("# No header\n", encoding="utf-8")
    (vault_root / "notes.txt").write_text("plain text", encoding="utf-8")
    (vault_root / ".hidden.md").write_text("secret", encoding="utf-8")
    (vault_root / "ZFolder" / "nested.md").write_text(
        "---\ntitle: Nested\n---\nbody\n", encoding="utf-8"
    )
    (vault_root / "aFolder" / "deeper" / "leaf.md").write_text(
        "---\ntitle: Leaf\n---\n", encoding="utf-8"
    )
    return vault_root


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Temporary preferences database path."""
    return tmp_path / "data" / "studiovault.db"


@pytest.fixture
def hub_dir(tmp_path) -> Path:
    """Default vault hub location (not created)."""
    return tmp_path / "Documents" / "StudioVault"


@pytest.fixture
def service(vault_root, db_path, hub_dir) -> VaultService:
    """Vault service bound to the temporary vault."""
    return VaultService(vault_root, db_path=db_path, hub_dir=hub_dir)


@pytest.fixture
def outside_file(tmp_path) -> Path:
    """A file next to, but outside, the vault."""
    path = tmp_path / "outside.md"
    path.write_text("outside", encoding="utf-8")
    return path


@pytest.fixture
def default_service(service):
    """Install ``service`` as the default instance for the API."""
    set_vault_service(service)
    yield service
    set_vault_service(None)
