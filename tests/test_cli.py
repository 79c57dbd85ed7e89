"""
Tests for CLI commands — info, root, get, new, workspace.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from prjenv.core.config.manifest import read_manifest
from prjenv.main import cli


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        """Help text describes the tool."""
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Cargo workspace" in result.output

    def test_version(self):
        """--version prints the package version."""
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInfoCommand:
    """Environment summary."""

    def test_workspace_info(self, cargo_workspace: Path, monkeypatch):
        """info prints the workspace summary and its packages."""
        monkeypatch.setenv("CARGO_WORKSPACE_DIR", str(cargo_workspace))
        result = CliRunner().invoke(cli, ["info"])
        assert result.exit_code == 0
        assert "ws v1.0.0 (2 packages" in result.output
        assert "a v0.1.0" in result.output

    def test_info_json(self, cargo_workspace: Path, monkeypatch):
        """info --json dumps the whole Environment."""
        monkeypatch.setenv("CARGO_WORKSPACE_DIR", str(cargo_workspace))
        result = CliRunner().invoke(cli, ["info", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["kind"] == "workspace"
        assert data["config"]["port"] == 3000
        assert data["paths"]["project"] == str(cargo_workspace)
        assert [p["metadata"]["name"] for p in data["workspace"]["packages"]] == ["a", "b"]

    def test_bad_port(self, monkeypatch):
        """A malformed PORT fails with exit 1 and the error message."""
        monkeypatch.setenv("PORT", "abc")
        result = CliRunner().invoke(cli, ["info"])
        assert result.exit_code == 1
        assert "Invalid port: abc" in result.output


class TestRootAndGet:
    """Single-value commands."""

    def test_root(self, cargo_workspace: Path, monkeypatch):
        """root prints the located workspace root from a member directory."""
        monkeypatch.chdir(cargo_workspace / "crates" / "a")
        result = CliRunner().invoke(cli, ["root"])
        assert result.exit_code == 0
        assert result.output.strip() == str(cargo_workspace)

    def test_get_port(self, monkeypatch):
        """get prints one field."""
        monkeypatch.setenv("PORT", "8081")
        result = CliRunner().invoke(cli, ["get", "port"])
        assert result.exit_code == 0
        assert result.output.strip() == "8081"

    def test_get_unknown(self):
        """An unknown field fails with the error message."""
        result = CliRunner().invoke(cli, ["get", "nope"])
        assert result.exit_code == 1
        assert "Unknown environment field 'nope'" in result.output


class TestNewCommand:
    """Scaffolding from the CLI."""

    def test_binary(self, tmp_path: Path):
        """new --bin writes the manifest and main.rs stub."""
        result = CliRunner().invoke(
            cli,
            ["new", "demo", "--bin", "-d", "x", "--author", "A", "--dep", "serde=1", "--dir", str(tmp_path)],
        )
        assert result.exit_code == 0, result.output
        tree = read_manifest(tmp_path / "demo" / "Cargo.toml")
        assert tree["package"]["authors"] == ["A"]
        assert tree["dependencies"] == {"serde": "1"}
        assert "Hello from demo!" in (tmp_path / "demo" / "src" / "main.rs").read_text()

    def test_library_default(self, tmp_path: Path):
        """new defaults to a library package."""
        result = CliRunner().invoke(cli, ["new", "util", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert (tmp_path / "util" / "src" / "lib.rs").is_file()

    def test_bad_dependency(self, tmp_path: Path):
        """A malformed --dep is a usage error and creates nothing."""
        result = CliRunner().invoke(cli, ["new", "demo", "--dep", "serde", "--dir", str(tmp_path)])
        assert result.exit_code == 2
        assert not (tmp_path / "demo").exists()

    def test_bad_name(self, tmp_path: Path):
        """A path-like name fails before touching disk."""
        result = CliRunner().invoke(cli, ["new", "..", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "❌" in result.output

    def test_add_member(self, cargo_workspace: Path, monkeypatch):
        """--add-member registers the new package in the workspace."""
        monkeypatch.chdir(cargo_workspace)
        result = CliRunner().invoke(cli, ["new", "c", "--dir", "crates", "--add-member"])
        assert result.exit_code == 0, result.output
        members = read_manifest(cargo_workspace / "Cargo.toml")["workspace"]["members"]
        assert members == ["crates/a", "crates/b", "crates/c"]


class TestWorkspaceCommands:
    """Member management from the CLI."""

    def test_init_add_list_remove(self, tmp_path: Path):
        """Full member lifecycle through the workspace group."""
        runner = CliRunner()
        result = runner.invoke(cli, ["workspace", "init", "mono", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        root = str(tmp_path / "mono")

        assert runner.invoke(cli, ["workspace", "--root", root, "add", "a"]).exit_code == 0
        assert runner.invoke(cli, ["workspace", "--root", root, "add", "b"]).exit_code == 0

        result = runner.invoke(cli, ["workspace", "--root", root, "members", "--json"])
        assert json.loads(result.output) == ["a", "b"]

        assert runner.invoke(cli, ["workspace", "--root", root, "remove", "a"]).exit_code == 0
        result = runner.invoke(cli, ["workspace", "--root", root, "members"])
        assert "• b" in result.output
        assert "• a" not in result.output

    def test_members_located_root(self, cargo_workspace: Path, monkeypatch):
        """Without --root the workspace root is located."""
        monkeypatch.chdir(cargo_workspace)
        result = CliRunner().invoke(cli, ["workspace", "members", "--json"])
        assert json.loads(result.output) == ["crates/a", "crates/b"]

    def test_missing_manifest(self, tmp_path: Path):
        """Editing a directory without a manifest fails with exit 1."""
        result = CliRunner().invoke(cli, ["workspace", "--root", str(tmp_path), "add", "a"])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output
