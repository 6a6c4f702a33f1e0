"""Filename resolution for required modules.

FilenameResolver applies bundler policy (shims, aliases, anchoring) on top of a
SpecifierResolver; NodeSpecifierResolver is the default filesystem lookup.
"""

from .filename_resolver import FilenameResolver
from .filename_resolver import fix_windows_path
from .node_resolver import NodeSpecifierResolver
from .node_resolver import ResolveRequest
from .node_resolver import SpecifierNotFound
from .node_resolver import SpecifierResolver

__all__ = [
    "FilenameResolver",
    "NodeSpecifierResolver",
    "ResolveRequest",
    "SpecifierNotFound",
    "SpecifierResolver",
    "fix_windows_path",
]
