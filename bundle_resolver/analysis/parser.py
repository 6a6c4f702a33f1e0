"""JavaScript parsing backed by tree-sitter."""

from __future__ import annotations

import logging
from typing import Any
from typing import Protocol

import tree_sitter_javascript
from tree_sitter import Language
from tree_sitter import Node
from tree_sitter import Parser as TreeSitterParser
from tree_sitter import Tree

from ..errors import ParseFailure

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())


class Parser(Protocol):
    """Protocol for source -> tree parsing."""

    def parse(self, source: str, parser_options: dict[str, Any] | None = None, filename: str | None = None) -> Any:
        """Parse source or raise ParseFailure."""
        ...


class JavaScriptParser:
    """Parses module source into a tree-sitter Tree.

    tree-sitter always produces a tree; syntax errors show up as ERROR or
    missing nodes. Unless parser_options["tolerant"] is set, the first such
    node is reported as a ParseFailure.
    """

    def __init__(self) -> None:
        self._parser = TreeSitterParser(JS_LANGUAGE)

    def parse(self, source: str, parser_options: dict[str, Any] | None = None, filename: str | None = None) -> Tree:
        options = parser_options or {}
        data = source.encode("utf-8")
        tree = self._parser.parse(data)

        if tree.root_node.has_error and not options.get("tolerant", False):
            error_node = _first_error(tree.root_node)
            if error_node is None:
                raise ParseFailure(filename, "syntax error")
            row, byte_column = error_node.start_point
            column = _character_column(data, error_node.start_byte, byte_column)
            what = f"missing {error_node.type}" if error_node.is_missing else "unexpected token"
            raise ParseFailure(filename, what, line=row + 1, column=column + 1)

        logger.debug(f"[parse] {filename or '<source>'}: {tree.root_node.child_count} top-level node(s)")
        return tree


def _character_column(data: bytes, start_byte: int, byte_column: int) -> int:
    """Convert a 0-based byte column on its line to a 0-based character column."""
    line_prefix = data[start_byte - byte_column : start_byte]
    return len(line_prefix.decode("utf-8", errors="replace"))


def _first_error(root: Node) -> Node | None:
    """Return the first ERROR or missing node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
