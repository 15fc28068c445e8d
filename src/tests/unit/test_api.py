"""Tests for the REST API routes and middleware."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

import studiovault.api.middleware as middleware
from studiovault.api.app import create_app
from studiovault.api.routes.documents import UpdateAttributesRequest
from studiovault.core.frontmatter import parse_frontmatter

API = "/api/v1"


@pytest.fixture
def no_auth(monkeypatch):
    """Run the API without an API key."""
    monkeypatch.setattr(middleware, "STUDIOVAULT_API_KEY", None)
    monkeypatch.setattr(middleware, "STUDIOVAULT_ALLOW_NO_AUTH", True)


@pytest.fixture
def client(no_auth, default_service) -> TestClient:
    return TestClient(create_app())


class TestAuth:
    """Tests for api_key_middleware."""

    def test_fails_closed_without_key(self, monkeypatch, default_service):
        """Without a configured key the API refuses requests."""
        monkeypatch.setattr(middleware, "STUDIOVAULT_API_KEY", None)
        monkeypatch.setattr(middleware, "STUDIOVAULT_ALLOW_NO_AUTH", False)
        client = TestClient(create_app())

        assert client.get(f"{API}/vault").status_code == 503

    def test_health_is_public(self, monkeypatch, default_service):
        """Health checks need no key."""
        monkeypatch.setattr(middleware, "STUDIOVAULT_API_KEY", "secret")
        client = TestClient(create_app())

        assert client.get(f"{API}/health").status_code == 200
        assert client.get(f"{API}/health/live").json() == {"status": "ok"}

    def test_key_required(self, monkeypatch, default_service):
        """Requests need the right key."""
        monkeypatch.setattr(middleware, "STUDIOVAULT_API_KEY", "secret")
        client = TestClient(create_app())

        assert client.get(f"{API}/vault").status_code == 401
        assert (
            client.get(f"{API}/vault", headers={"X-API-Key": "wrong"}).status_code
            == 401
        )
        assert (
            client.get(f"{API}/vault", headers={"X-API-Key": "secret"}).status_code
            == 200
        )
        assert (
            client.get(
                f"{API}/vault", headers={"Authorization": "Bearer secret"}
            ).status_code
            == 200
        )


class TestHealth:
    """Tests for health endpoints."""

    def test_health_reports_vault(self, client: TestClient, vault_root: Path):
        """An open vault is healthy."""
        body = client.get(f"{API}/health").json()

        assert body["status"] == "healthy"
        assert body["components"]["vault"]["message"] == str(vault_root)

    def test_ready_without_vault(self, client: TestClient, default_service):
        """Readiness needs an open vault."""
        default_service.guard.clear_root()

        body = client.get(f"{API}/health/ready").json()

        assert body["ready"] is False
        assert body["reason"] == "no vault open"


class TestVaultRoutes:
    """Tests for /vault and /workspaces."""

    def test_get_vault(self, client: TestClient, vault_root: Path):
        """The current root is returned."""
        assert client.get(f"{API}/vault").json() == {"root_path": str(vault_root)}

    def test_open_vault(self, client: TestClient, tmp_path: Path):
        """Existing folders can be opened."""
        other = tmp_path / "other"
        other.mkdir()

        response = client.put(f"{API}/vault", json={"path": str(other)})

        assert response.status_code == 200
        assert response.json() == {"root_path": str(other)}

    def test_open_vault_missing(self, client: TestClient, tmp_path: Path):
        """Missing folders are rejected."""
        response = client.put(f"{API}/vault", json={"path": str(tmp_path / "nope")})
        assert response.status_code == 400

    def test_initial_state(self, client: TestClient, hub_dir: Path):
        """The hub is created and listed."""
        response = client.post(f"{API}/vault/initial")

        assert response.status_code == 200
        assert response.json() == {"root_path": str(hub_dir), "entries": []}

    def test_workspace(self, client: TestClient, vault_root: Path):
        """Workspaces are created under the root."""
        response = client.post(f"{API}/workspaces", json={"name": "Team"})

        assert response.status_code == 201
        assert response.json() == {"path": str(vault_root / "Team")}

    def test_workspace_without_vault(self, client: TestClient, default_service):
        """Workspaces need an open vault."""
        default_service.guard.clear_root()
        response = client.post(f"{API}/workspaces", json={"name": "Team"})
        assert response.status_code == 409


class TestEntryRoutes:
    """Tests for /entries."""

    def test_list_root(self, client: TestClient, sample_vault: Path):
        """Listing defaults to the root and returns flat records."""
        records = client.get(f"{API}/entries").json()

        assert [r["name"] for r in records] == [
            "aFolder",
            "ZFolder",
            "a.md",
            "b.md",
            "notes.txt",
        ]
        alpha = records[2]
        assert alpha["title"] == "Alpha"
        assert alpha["tags"] == ["one", "two"]
        assert alpha["isDirectory"] is False

    def test_list_outside_is_empty(self, client: TestClient, sample_vault: Path):
        """Paths outside the vault list as empty."""
        response = client.get(f"{API}/entries", params={"path": str(sample_vault.parent)})
        assert response.status_code == 200
        assert response.json() == []

    def test_recent(self, client: TestClient, sample_vault: Path):
        """Recent documents honour limit and exclude_direct."""
        limited = client.get(f"{API}/entries/recent", params={"limit": 1}).json()
        nested = client.get(
            f"{API}/entries/recent", params={"exclude_direct": "true"}
        ).json()

        assert len(limited) == 1
        assert sorted(r["name"] for r in nested) == ["leaf.md", "nested.md"]

    def test_parent(self, client: TestClient, sample_vault: Path):
        """Parent lookup stops at the root."""
        child = client.get(
            f"{API}/entries/parent", params={"path": str(sample_vault / "aFolder")}
        ).json()
        root = client.get(f"{API}/entries/parent", params={"path": str(sample_vault)}).json()

        assert child == {"parent": str(sample_vault)}
        assert root == {"parent": None}

    def test_rename(self, client: TestClient, sample_vault: Path):
        """Renames return the new path; collisions fail."""
        ok = client.post(
            f"{API}/entries/rename",
            json={"path": str(sample_vault / "b.md"), "new_name": "c.md"},
        )
        clash = client.post(
            f"{API}/entries/rename",
            json={"path": str(sample_vault / "c.md"), "new_name": "a.md"},
        )

        assert ok.json() == {"path": str(sample_vault / "c.md")}
        assert clash.status_code == 400


class TestDocumentRoutes:
    """Tests for /documents, /files and /folders."""

    def test_read(self, client: TestClient, sample_vault: Path):
        """Documents are returned with their path."""
        response = client.get(
            f"{API}/documents", params={"path": str(sample_vault / "notes.txt")}
        )
        assert response.json() == {
            "path": str(sample_vault / "notes.txt"),
            "content": "plain text",
        }

    def test_read_error_mapping(
        self, client: TestClient, sample_vault: Path, outside_file: Path
    ):
        """Outside, missing and malformed paths map to 403, 404 and 400."""
        outside = client.get(f"{API}/documents", params={"path": str(outside_file)})
        missing = client.get(
            f"{API}/documents", params={"path": str(sample_vault / "none.md")}
        )
        empty = client.get(f"{API}/documents", params={"path": ""})

        assert outside.status_code == 403
        assert missing.status_code == 404
        assert empty.status_code == 400

    def test_read_directory_is_server_error(self, client: TestClient, sample_vault: Path):
        """Other filesystem errors map to 500."""
        response = client.get(
            f"{API}/documents", params={"path": str(sample_vault / "aFolder")}
        )
        assert response.status_code == 500

    def test_write(self, client: TestClient, sample_vault: Path):
        """Documents are overwritten."""
        response = client.put(
            f"{API}/documents",
            json={"path": str(sample_vault / "b.md"), "content": "changed"},
        )
        assert response.status_code == 200
        assert (sample_vault / "b.md").read_text() == "changed"

    def test_create_and_collision(self, client: TestClient, vault_root: Path):
        """Creation returns 201, a second create 409."""
        body = {"parent_dir": str(vault_root), "name": "Road Map"}

        created = client.post(f"{API}/documents", json=body)
        clash = client.post(f"{API}/documents", json=body)

        assert created.status_code == 201
        assert created.json()["path"] == str(vault_root / "road-map.md")
        assert clash.status_code == 409
        assert clash.json()["reason"] == "already_exists"

    def test_create_outside_is_forbidden(self, client: TestClient, tmp_path: Path):
        """Creating outside the vault is 403."""
        response = client.post(
            f"{API}/documents", json={"parent_dir": str(tmp_path), "name": "x"}
        )
        assert response.status_code == 403

    def test_update_attributes(self, client: TestClient, sample_vault: Path):
        """Header updates merge into the document."""
        response = client.patch(
            f"{API}/documents/attributes",
            json={"path": str(sample_vault / "a.md"), "updates": {"status": "done"}},
        )

        assert response.status_code == 200
        assert response.json()["attributes"]["status"] == "done"
        doc = parse_frontmatter((sample_vault / "a.md").read_text())
        assert doc.attributes["status"] == "done"

    def test_update_attributes_bad_key(self, client: TestClient, sample_vault: Path):
        """Unwritable keys are a 400."""
        response = client.patch(
            f"{API}/documents/attributes",
            json={"path": str(sample_vault / "a.md"), "updates": {"a:b": "x"}},
        )
        assert response.status_code == 400

    def test_import(self, client: TestClient, vault_root: Path, tmp_path: Path):
        """Imports create documents; other formats are 415."""
        source = tmp_path / "list.txt"
        source.write_text("eggs")
        image = tmp_path / "img.png"
        image.write_bytes(b"png")

        ok = client.post(
            f"{API}/documents/import",
            json={"destination_dir": str(vault_root), "source_path": str(source)},
        )
        unsupported = client.post(
            f"{API}/documents/import",
            json={"destination_dir": str(vault_root), "source_path": str(image)},
        )

        assert ok.status_code == 201
        assert (vault_root / "list.md").read_text() == "eggs"
        assert unsupported.status_code == 415

    def test_folders(self, client: TestClient, vault_root: Path):
        """Folders are created sanitized and deleted recursively."""
        created = client.post(
            f"{API}/folders", json={"parent_dir": str(vault_root), "name": "a/b:c"}
        )
        assert created.status_code == 201
        assert (vault_root / "a_b_c").is_dir()

        deleted = client.delete(
            f"{API}/folders", params={"path": str(vault_root / "a_b_c")}
        )
        assert deleted.json() == {"success": True}
        assert not (vault_root / "a_b_c").exists()

    def test_root_cannot_be_deleted(self, client: TestClient, vault_root: Path):
        """Deleting the root is refused."""
        response = client.delete(f"{API}/folders", params={"path": str(vault_root)})
        assert response.status_code == 400
        assert vault_root.exists()

    def test_delete_file(self, client: TestClient, sample_vault: Path):
        """Files are deleted once."""
        params = {"path": str(sample_vault / "b.md")}

        assert client.delete(f"{API}/files", params=params).status_code == 200
        assert client.delete(f"{API}/files", params=params).status_code == 400


def test_update_attributes_request_requires_mapping():
    """The updates field must be an object."""
    with pytest.raises(ValidationError):
        UpdateAttributesRequest(path="/x.md", updates=["status"])
