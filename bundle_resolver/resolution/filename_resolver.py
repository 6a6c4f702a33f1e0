"""Filename resolution: required specifier -> absolute file path.

Wraps a SpecifierResolver with bundler policy:
- Package specifiers are not anchored at the requiring file
- Node built-ins map to browser shims when add_node_globals is set
- resolve.alias rewrites paths inside packages via the path filter
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any

from ..errors import ConfigError
from ..errors import ResolutionFailure
from ..options import BundlerOptions
from ..required_module import RequiredModule
from .node_resolver import NodeSpecifierResolver
from .node_resolver import ResolveRequest
from .node_resolver import SpecifierNotFound
from .node_resolver import SpecifierResolver

logger = logging.getLogger(__name__)


def fix_windows_path(path: str) -> str:
    """Normalize backslash separators to forward slashes."""
    return path.replace("\\", "/")


def _compile_aliases(alias: dict[str, str]) -> list[tuple[re.Pattern[str], str]]:
    compiled = []
    for pattern, suffix in alias.items():
        try:
            compiled.append((re.compile(pattern), suffix))
        except re.error as e:
            raise ConfigError(f"Invalid resolve.alias pattern '{pattern}': {e}") from e
    return compiled


class FilenameResolver:
    """Maps a RequiredModule to its absolute filename."""

    def __init__(self, options: BundlerOptions, specifier_resolver: SpecifierResolver | None = None):
        self.options = options
        self.specifier_resolver = specifier_resolver or NodeSpecifierResolver()
        self.shims: dict[str, str] | None = None
        self._aliases = _compile_aliases(options.resolve.alias)

    def initialize(self) -> None:
        """Load the shim table when Node globals are requested."""
        if self.options.add_node_globals:
            from .shims import NODE_SHIMS

            self.shims = dict(NODE_SHIMS)
        else:
            self.shims = None
        logger.debug(f"[resolve] shims: {self.shims}")

    def build_request(self, requiring_file: str, required_module: RequiredModule) -> ResolveRequest:
        return ResolveRequest(
            anchor_file=None if required_module.is_npm_module() else requiring_file,
            extensions=self.options.resolve.extensions,
            module_directories=self.options.resolve.directories,
            base_dir=self.options.base_dir or os.getcwd(),
            shims=self.shims,
            path_filter=self.path_filter,
        )

    async def resolve_filename(self, requiring_file: str, required_module: RequiredModule) -> str:
        """Resolve the module's specifier relative to requiring_file.

        Raises:
            ResolutionFailure: No file matched the specifier
        """
        request = self.build_request(requiring_file, required_module)
        try:
            filename = await self.specifier_resolver.resolve(required_module.module_name, request)
        except SpecifierNotFound as e:
            raise ResolutionFailure(required_module.module_name, requiring_file, request.to_dict(), e) from e

        logger.debug(f"[resolve] {required_module.module_name} from {requiring_file} -> {filename}")
        return filename

    def path_filter(self, package: dict[str, Any] | None, full_path: str, relative_path: str) -> str | None:
        """Apply resolve.alias to a candidate path inside a package.

        Every matching pattern is applied in configuration order; the last
        match wins.
        """
        if not package or not relative_path:
            return None

        normalized_path = fix_windows_path(full_path)
        filtered_path = None
        for regex, suffix in self._aliases:
            if regex.search(normalized_path):
                filtered_path = os.path.normpath(os.path.join(full_path, suffix))
        return filtered_path
