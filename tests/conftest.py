"""
Shared test fixtures and configuration.

Every test starts from a clean process state: discovery variables
unset, the cwd moved into ``tmp_path``, and fresh write-once cells for
the Environment, the .env flag and the manifest tree.
"""

import textwrap
from pathlib import Path

import pytest

from prjenv.core import context
from prjenv.core.config import metadata_store
from prjenv.core.context import OnceCell

_ENV_VARS = (
    "PROJECT_ROOT",
    "WORKSPACE_ROOT",
    "CARGO_WORKSPACE_DIR",
    "CARGO_MANIFEST_DIR",
    "CARGO_PKG_NAME",
    "CARGO_PKG_VERSION",
    "CARGO_PKG_DESCRIPTION",
    "DATABASE_URL",
    "IP",
    "PORT",
    "RUST_LOG",
    "PRJENV_METADATA_PROBE",
    "PRJENV_LOG_LEVEL",
    "PRJENV_LOG_FILE",
    "PRJENV_LOG_FILE_LEVEL",
    "PRJENV_DOTENV",
)


@pytest.fixture(autouse=True)
def clean_process(monkeypatch, tmp_path: Path):
    """Isolate each test from the host environment and cached state."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("PRJENV_DOTENV", "0")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(context, "_ENV", OnceCell("environment"))
    monkeypatch.setattr(context, "_DOTENV_LOADED", OnceCell("dotenv"))
    monkeypatch.setattr(metadata_store, "_TREE", OnceCell("manifest tree"))


def write_manifest(directory: Path, body: str) -> Path:
    """Write ``directory/Cargo.toml`` from a dedented string."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "Cargo.toml"
    path.write_text(textwrap.dedent(body))
    return path


@pytest.fixture
def make_manifest():
    """Return the ``write_manifest(directory, body)`` helper."""
    return write_manifest


@pytest.fixture
def cargo_workspace(tmp_path: Path) -> Path:
    """A two-member workspace: ``ws v1.0.0`` with crates/a and crates/b."""
    root = tmp_path / "ws"
    write_manifest(root, """\
        [workspace]
        members = ["crates/a", "crates/b"]
        resolver = "2"

        [workspace.package]
        name = "ws"
        version = "1.0.0"
        description = "demo workspace"
    """)
    write_manifest(root / "crates" / "a", """\
        [package]
        name = "a"
        version = "0.1.0"
        description = "first"
    """)
    write_manifest(root / "crates" / "b", """\
        [package]
        name = "b"
        version = "0.2.0"
    """)
    return root
