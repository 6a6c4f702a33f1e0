"""Pytest configuration for bundle-resolver tests."""

from pathlib import Path

import pytest
from bundle_resolver.options import BundlerOptions


@pytest.fixture
def make_project(tmp_path: Path):
    """Write a small JS project tree under tmp_path.

    Usage:
        root = make_project({"a.js": "require('./b');", "b.js": ""})
    """

    def _make(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make


@pytest.fixture
def options(tmp_path: Path) -> BundlerOptions:
    """Options anchored at tmp_path without Node shims."""
    return BundlerOptions(base_dir=str(tmp_path), add_node_globals=False)
