"""Dependency discovery for parsed modules."""

from __future__ import annotations

import re

from tree_sitter import Node
from tree_sitter import Tree

from ..required_module import RequiredModule

# Cheap pre-check run on raw source before walking the tree
_REQUIRE_HINT = re.compile(r"\brequire\s*\(|\bimport\b|\bexport\b[^;]*\bfrom\b")


class DependencyWalker:
    """Finds the specifiers a module requires.

    Recognized forms:
    - require("x")
    - import ... from "x" / import "x"
    - export ... from "x"
    - import("x") with a string literal
    """

    def has_require(self, source: str) -> bool:
        return _REQUIRE_HINT.search(source) is not None

    def collect_required_js_modules(self, required_module: RequiredModule) -> list[str]:
        """Return unique required specifiers in source order."""
        if not isinstance(required_module.ast, Tree):
            return []

        specifiers: list[str] = []
        stack = [required_module.ast.root_node]
        while stack:
            node = stack.pop()
            specifier = _specifier_for(node)
            if specifier and specifier not in specifiers:
                specifiers.append(specifier)
            stack.extend(reversed(node.children))
        return specifiers


def _specifier_for(node: Node) -> str | None:
    if node.type in ("import_statement", "export_statement"):
        return _string_value(node.child_by_field_name("source"))

    if node.type == "call_expression":
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None:
            return None
        is_require = function.type == "identifier" and function.text == b"require"
        if not (is_require or function.type == "import"):
            return None
        args = arguments.named_children
        if len(args) == 1:
            return _string_value(args[0])
    return None


def _string_value(node: Node | None) -> str | None:
    """Decoded value of a string literal node."""
    if node is None or node.type != "string":
        return None
    parts = []
    for child in node.children:
        if child.type in ('"', "'") or child.text is None:
            continue
        text = child.text.decode("utf-8")
        parts.append(_unescape(text) if child.type == "escape_sequence" else text)
    return "".join(parts)


_SINGLE_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "0": "\0"}


def _unescape(sequence: str) -> str:
    """Decode one JavaScript escape sequence such as \\x2e, \\u002e or \\u{2e}."""
    body = sequence[1:]
    if body.startswith("u{"):
        return chr(int(body[2:-1], 16))
    if body[:1] in ("x", "u") and len(body) > 1:
        return chr(int(body[1:], 16))
    if body in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        # line continuation
        return ""
    return _SINGLE_ESCAPES.get(body, body)
