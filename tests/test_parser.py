"""Tests for JavaScriptParser."""

import pytest
from bundle_resolver.analysis import JavaScriptParser
from bundle_resolver.analysis.parser import _character_column
from bundle_resolver.errors import ParseFailure


class TestJavaScriptParser:
    """Parsing and syntax error reporting."""

    def test_parses_commonjs(self):
        tree = JavaScriptParser().parse("var a = require('./a');\nmodule.exports = a;\n")
        assert tree.root_node.type == "program"
        assert not tree.root_node.has_error

    def test_parses_es_modules(self):
        tree = JavaScriptParser().parse("import a from './a';\nexport { a };\nexport * from './b';\n")
        assert not tree.root_node.has_error

    def test_syntax_error_raises(self):
        with pytest.raises(ParseFailure) as excinfo:
            JavaScriptParser().parse("var a = 1;\nvar = ;\n", filename="/p/bad.js")

        error = excinfo.value
        assert error.filename == "/p/bad.js"
        assert error.line == 2
        assert str(error).startswith("Unable to parse [/p/bad.js:2:")

    def test_column_counts_characters_not_bytes(self):
        source = '"' + "é" * 20 + '"; var = ;\n'

        with pytest.raises(ParseFailure) as excinfo:
            JavaScriptParser().parse(source)

        error = excinfo.value
        assert error.line == 1
        # the error lies within "var = ;", characters 25-31 (1-based)
        assert 25 <= error.column <= 31

    def test_character_column(self):
        data = "a\n'é'; x".encode("utf-8")
        start_byte = data.index(b"x")
        assert _character_column(data, start_byte, start_byte - 2) == 5

    def test_tolerant_option_keeps_tree(self):
        tree = JavaScriptParser().parse("var = ;\nrequire('./a');\n", {"tolerant": True})
        assert tree.root_node.has_error

    def test_empty_source(self):
        tree = JavaScriptParser().parse("")
        assert tree.root_node.child_count == 0
