"""Tests for the Typer CLI."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

import studiovault.interfaces.cli.app as cli
from studiovault.interfaces.cli.app import app

runner = CliRunner()


def invoke(vault: Path, *args: str, **kwargs):
    return runner.invoke(app, ["--vault", str(vault), *args], **kwargs)


class TestVaultResolution:
    """Tests for _get_vault_path()."""

    def test_explicit_missing_vault_fails(self, tmp_path: Path):
        """A missing --vault exits with an error."""
        result = invoke(tmp_path / "missing", "ls")
        assert result.exit_code == 1
        assert "Vault path not found" in result.output

    def test_env_var_fallback(self, sample_vault: Path, monkeypatch):
        """$STUDIOVAULT_VAULT is used when --vault is absent."""
        monkeypatch.setenv("STUDIOVAULT_VAULT", str(sample_vault))
        assert cli._get_vault_path(None) == sample_vault

    def test_hub_fallback(self, hub_dir: Path, monkeypatch):
        """The default hub is created when nothing else is configured."""
        monkeypatch.delenv("STUDIOVAULT_VAULT", raising=False)
        monkeypatch.setattr(cli, "STUDIOVAULT_HUB_DIR", hub_dir)

        assert cli._get_vault_path(None) == hub_dir
        assert hub_dir.is_dir()


class TestCommands:
    """Tests for the individual commands."""

    def test_ls(self, sample_vault: Path):
        """ls lists the root with folders first."""
        result = invoke(sample_vault, "ls")

        assert result.exit_code == 0
        assert result.output.index("aFolder/") < result.output.index("a.md")
        assert "Alpha" in result.output
        assert ".hidden.md" not in result.output

    def test_ls_outside_vault(self, sample_vault: Path):
        """Listing outside the vault is an error."""
        result = invoke(sample_vault, "ls", "..")
        assert result.exit_code == 1
        assert "rejected" in result.output

    def test_recent(self, sample_vault: Path):
        """recent shows nested documents."""
        result = invoke(sample_vault, "recent", "--exclude-direct")

        assert result.exit_code == 0
        assert "leaf.md" in result.output
        assert "nested.md" in result.output

    def test_cat(self, sample_vault: Path):
        """cat prints raw content."""
        result = invoke(sample_vault, "cat", "notes.txt", "--raw")

        assert result.exit_code == 0
        assert "plain text" in result.output

    def test_cat_outside(self, sample_vault: Path, outside_file: Path):
        """cat refuses paths outside the vault."""
        result = invoke(sample_vault, "cat", str(outside_file))
        assert result.exit_code == 1
        assert "Access denied" in result.output

    def test_cat_missing(self, sample_vault: Path):
        """cat reports missing files."""
        result = invoke(sample_vault, "cat", "missing.md")
        assert result.exit_code == 1

    def test_new_and_collision(self, vault_root: Path):
        """new creates a templated document once."""
        first = invoke(vault_root, "new", "Weekly Plan")
        second = invoke(vault_root, "new", "Weekly Plan")

        assert first.exit_code == 0
        assert (vault_root / "weekly-plan.md").exists()
        assert second.exit_code == 1
        assert "already exists" in second.output

    def test_new_in_folder_with_content(self, sample_vault: Path):
        """--in and --content are honoured."""
        result = invoke(sample_vault, "new", "idea.md", "--in", "ZFolder", "-c", "hello")

        assert result.exit_code == 0
        assert (sample_vault / "ZFolder" / "idea.md").read_text() == "hello"

    def test_mkdir(self, vault_root: Path):
        """mkdir sanitizes the name."""
        result = invoke(vault_root, "mkdir", "a/b:c")

        assert result.exit_code == 0
        assert (vault_root / "a_b_c").is_dir()

    def test_rm_file(self, sample_vault: Path):
        """rm deletes files without confirmation."""
        result = invoke(sample_vault, "rm", "b.md")

        assert result.exit_code == 0
        assert not (sample_vault / "b.md").exists()

    def test_rm_folder_confirms(self, sample_vault: Path):
        """Folders need confirmation."""
        declined = invoke(sample_vault, "rm", "aFolder", input="n\n")
        assert declined.exit_code == 1
        assert (sample_vault / "aFolder").exists()

        accepted = invoke(sample_vault, "rm", "aFolder", "--yes")
        assert accepted.exit_code == 0
        assert not (sample_vault / "aFolder").exists()

    def test_rm_root_refused(self, sample_vault: Path):
        """The vault root cannot be removed."""
        result = invoke(sample_vault, "rm", str(sample_vault), "--yes")

        assert result.exit_code == 1
        assert sample_vault.exists()

    def test_mv(self, sample_vault: Path):
        """mv renames in place."""
        result = invoke(sample_vault, "mv", "b.md", "c.md")

        assert result.exit_code == 0
        assert (sample_vault / "c.md").exists()

    def test_mv_collision(self, sample_vault: Path):
        """mv refuses to overwrite."""
        result = invoke(sample_vault, "mv", "b.md", "a.md")
        assert result.exit_code == 1

    def test_workspace(self, vault_root: Path):
        """workspace creates a top-level folder."""
        result = invoke(vault_root, "workspace", "Client")

        assert result.exit_code == 0
        assert (vault_root / "Client").is_dir()

    @pytest.mark.parametrize("args", [["--help"], ["ls", "--help"]])
    def test_help(self, args):
        """Help output works."""
        result = runner.invoke(app, args)
        assert result.exit_code == 0
