"""
Tests for the TOML writer — value formatting and table layout.
"""

import datetime
import tomllib

import pytest

from prjenv.core.config.toml_writer import dumps, format_key, format_value


class TestFormatKey:
    """Bare vs. quoted keys."""

    def test_bare_keys(self):
        """Letters, digits, dash and underscore stay bare."""
        assert format_key("serde_json") == "serde_json"
        assert format_key("tokio-util") == "tokio-util"

    def test_quoted_keys(self):
        """Anything else is quoted."""
        assert format_key("a.b") == '"a.b"'
        assert format_key("") == '""'
        assert format_key("with space") == '"with space"'

    def test_non_string_key(self):
        """Keys must be strings."""
        with pytest.raises(TypeError):
            format_key(1)


class TestFormatValue:
    """Inline rendering of scalars, arrays and inline tables."""

    def test_scalars(self):
        """Booleans, integers, floats and strings."""
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value(42) == "42"
        assert format_value(1.5) == "1.5"
        assert format_value("x") == '"x"'

    def test_special_floats(self):
        """Infinities and NaN use TOML spellings."""
        assert format_value(float("inf")) == "inf"
        assert format_value(float("-inf")) == "-inf"
        assert format_value(float("nan")) == "nan"

    def test_string_escapes(self):
        """Quotes, backslashes and control characters are escaped."""
        assert format_value('say "hi"\n') == '"say \\"hi\\"\\n"'
        assert format_value("back\\slash") == '"back\\\\slash"'
        assert format_value("\x01") == '"\\u0001"'

    def test_dates(self):
        """Dates render in ISO form."""
        assert format_value(datetime.date(2024, 1, 2)) == "2024-01-02"

    def test_arrays(self):
        """Lists and tuples become inline arrays."""
        assert format_value([]) == "[]"
        assert format_value(["a", 1]) == '["a", 1]'
        assert format_value(("x",)) == '["x"]'

    def test_inline_tables(self):
        """Dicts inside values become inline tables."""
        assert format_value({}) == "{}"
        assert format_value({"path": "../a"}) == '{ path = "../a" }'

    def test_unsupported_type(self):
        """Unknown types raise TypeError."""
        with pytest.raises(TypeError):
            format_value(object())


class TestDumps:
    """Whole-document layout."""

    def test_empty(self):
        """An empty tree is an empty document."""
        assert dumps({}) == ""

    def test_workspace_layout(self):
        """A new workspace manifest renders as one table."""
        text = dumps({"workspace": {"members": [], "resolver": "2"}})
        assert text == '[workspace]\nmembers = []\nresolver = "2"\n'

    def test_root_scalars_before_tables(self):
        """Root scalars precede any table header."""
        text = dumps({"package": {"name": "a"}, "cargo-features": ["x"]})
        assert text.startswith('cargo-features = ["x"]\n')
        assert "[package]" in text

    def test_pure_container_header_omitted(self):
        """Tables holding only sub-tables are implied by their children."""
        text = dumps({"workspace": {"package": {"name": "ws"}}})
        assert text == '[workspace.package]\nname = "ws"\n'

    def test_empty_table_keeps_header(self):
        """An empty table still gets its header."""
        text = dumps({"dependencies": {}})
        assert text == "[dependencies]\n"

    def test_tables_separated_by_blank_line(self):
        """Consecutive tables are separated by a blank line."""
        text = dumps({"package": {"name": "a"}, "dependencies": {"serde": "1"}})
        assert text == '[package]\nname = "a"\n\n[dependencies]\nserde = "1"\n'

    def test_reads_back_equal(self):
        """A mixed tree parses back equal."""
        tree = {
            "package": {"name": "demo", "version": "0.1.0", "authors": ["A <a@x>"]},
            "dependencies": {"serde": {"version": "1", "features": ["derive"]}},
            "workspace": {"members": ["crates/*"], "metadata": {"x": {"y": 1}}},
        }
        assert tomllib.loads(dumps(tree)) == tree

    def test_root_must_be_table(self):
        """The document root must be a dict."""
        with pytest.raises(TypeError):
            dumps(["not", "a", "table"])
