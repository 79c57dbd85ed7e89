"""
Tests for package scaffolding.
"""

from pathlib import Path

import pytest

from prjenv.core.config.manifest import read_manifest, read_metadata
from prjenv.core.errors import EnvError, ErrorKind
from prjenv.core.services.scaffold import Scaffold


class TestScaffoldBuilders:
    """Frozen builder chain."""

    def test_defaults(self):
        """A scaffold needs only a name."""
        s = Scaffold(name="demo")
        assert s.version == "0.1.0"
        assert s.edition == "2024"
        assert s.description == ""
        assert s.authors == ()
        assert s.dependencies == ()
        assert s.is_binary is False

    def test_chain(self):
        """Builders chain and accumulate authors and dependencies."""
        s = (
            Scaffold(name="demo")
            .with_version("1.0.0")
            .with_description("x")
            .with_edition("2021")
            .with_author("A")
            .with_author("B")
            .with_dependency("serde", "1")
            .binary()
        )
        assert s.authors == ("A", "B")
        assert s.dependencies == (("serde", "1"),)
        assert s.is_binary
        assert not s.library().is_binary

    def test_builders_do_not_mutate(self):
        """Builders return copies and leave the original alone."""
        base = Scaffold(name="demo")
        base.binary().with_author("A")
        assert base.is_binary is False
        assert base.authors == ()


class TestToTable:
    """Manifest node tree."""

    def test_minimal(self):
        """Empty optional fields are left out of the table."""
        assert Scaffold(name="demo").to_table() == {
            "package": {"name": "demo", "version": "0.1.0", "edition": "2024"}
        }

    def test_full(self):
        """Description, authors and dependencies appear when set."""
        table = (
            Scaffold(name="demo")
            .with_description("x")
            .with_author("A")
            .with_dependency("serde", "1")
            .with_dependency("tokio", "1.40")
            .to_table()
        )
        assert table["package"]["description"] == "x"
        assert table["package"]["authors"] == ["A"]
        assert table["dependencies"] == {"serde": "1", "tokio": "1.40"}

    def test_metadata_survives_write(self, tmp_path: Path):
        """Identity written to disk reads back unchanged."""
        s = Scaffold(name="demo").with_version("2.0.0").with_description('quoted "desc"')
        s.write_manifest(tmp_path / "Cargo.toml")
        meta = read_metadata(tmp_path / "Cargo.toml")
        assert (meta.name, meta.version, meta.description) == (s.name, s.version, s.description)


class TestRenderSource:
    """Stub file text."""

    def test_binary(self):
        """Binary stub prints a greeting."""
        text = Scaffold(name="demo").with_description("x").binary().render_source()
        assert text == '//! x\n\nfn main() {\n    println!("Hello from demo!");\n}\n'

    def test_library(self):
        """Library stub carries a test module."""
        text = Scaffold(name="demo").with_description("x").render_source()
        assert text.startswith("//! x\n\n#[cfg(test)]\nmod tests {\n")
        assert "fn it_works()" in text
        assert "assert_eq!(2 + 2, 4);" in text
        assert text.endswith("}\n}\n")


class TestCreate:
    """On-disk package layout."""

    def test_binary_package(self, tmp_path: Path):
        """A binary package gets a manifest and main.rs only."""
        out = tmp_path / "out"
        pkg = Scaffold(name="demo").binary().with_description("x").create(out)
        assert pkg == out / "demo"
        assert read_manifest(pkg / "Cargo.toml")["package"]["name"] == "demo"
        assert '"Hello from demo!"' in (pkg / "src" / "main.rs").read_text()
        assert not (pkg / "src" / "lib.rs").exists()

    def test_library_package(self, tmp_path: Path):
        """A library package gets lib.rs only."""
        pkg = Scaffold(name="util").create(tmp_path)
        assert (pkg / "src" / "lib.rs").is_file()
        assert not (pkg / "src" / "main.rs").exists()

    def test_existing_directory_is_reused(self, tmp_path: Path):
        """An existing package directory is filled in."""
        (tmp_path / "demo" / "src").mkdir(parents=True)
        pkg = Scaffold(name="demo").create(tmp_path)
        assert (pkg / "Cargo.toml").is_file()

    @pytest.mark.parametrize("name", ["", "  ", ".", "..", "a/b", "a\\b"])
    def test_bad_names_rejected_before_disk(self, tmp_path: Path, name: str):
        """Empty or path-like names fail before anything is created."""
        with pytest.raises(EnvError) as exc:
            Scaffold(name=name).create(tmp_path / "out")
        assert exc.value.kind is ErrorKind.INVALID_METADATA
        assert exc.value.field == "name"
        assert not (tmp_path / "out").exists()

    def test_filesystem_error(self, tmp_path: Path):
        """A filesystem failure surfaces as IO."""
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(EnvError) as exc:
            Scaffold(name="demo").create(blocker)
        assert exc.value.kind is ErrorKind.IO
