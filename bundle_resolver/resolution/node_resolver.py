"""Default specifier resolution following Node/browser lookup rules.

The graph builder treats specifier resolution as a pluggable capability
(SpecifierResolver). NodeSpecifierResolver is the implementation used when
none is injected:
- Relative and absolute specifiers resolve against the anchor file's directory
- Package specifiers search module directories from the anchor upward
- package.json "browser" (string form) takes precedence over "main"
- Files are probed as-is, then with each configured extension, then as
  directories with an index file
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Protocol

logger = logging.getLogger(__name__)

# (package.json contents, candidate path, path relative to the package root) -> replacement path
PathFilter = Callable[[dict[str, Any] | None, str, str], str | None]


class SpecifierNotFound(Exception):
    """Raised by a SpecifierResolver when no file matches."""

    def __init__(self, specifier: str, tried: list[str] | None = None):
        self.specifier = specifier
        self.tried = tried or []
        message = f"Cannot find module '{specifier}'"
        if self.tried:
            message += f" (tried {len(self.tried)} path(s))"
        super().__init__(message)


@dataclass
class ResolveRequest:
    """Options for resolving one specifier.

    Attributes:
        anchor_file: File the lookup is anchored at (None for package lookups)
        extensions: Extensions probed, in order
        module_directories: Directory names searched for packages
        base_dir: Starting directory when there is no anchor file
        shims: Built-in specifier -> replacement package specifier
        path_filter: Hook that may rewrite candidate paths inside packages
    """

    anchor_file: str | None
    extensions: list[str]
    module_directories: list[str]
    base_dir: str = field(default_factory=os.getcwd)
    shims: dict[str, str] | None = None
    path_filter: PathFilter | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for diagnostics."""
        return {
            "extensions": self.extensions,
            "filename": self.anchor_file,
            "basedir": self.base_dir,
            "moduleDirectory": self.module_directories,
            "modules": sorted(self.shims) if self.shims else None,
        }


class SpecifierResolver(Protocol):
    """Protocol for specifier -> absolute file path resolution."""

    async def resolve(self, specifier: str, request: ResolveRequest) -> str:
        """Resolve specifier to an absolute path or raise SpecifierNotFound."""
        ...


def is_path_specifier(specifier: str) -> bool:
    return specifier.startswith(("./", "../", "/")) or specifier in (".", "..") or os.path.isabs(specifier)


class NodeSpecifierResolver:
    """Filesystem resolver following Node's lookup rules with browser field support."""

    def __init__(self) -> None:
        self._packages: dict[str, dict[str, Any] | None] = {}

    async def resolve(self, specifier: str, request: ResolveRequest) -> str:
        return await asyncio.to_thread(self.resolve_sync, specifier, request)

    def resolve_sync(self, specifier: str, request: ResolveRequest) -> str:
        tried: list[str] = []

        if request.shims and specifier in request.shims:
            shim = request.shims[specifier]
            logger.debug(f"[resolve] {specifier} -> shim {shim}")
            result = self._resolve_package(shim, request.base_dir, request, tried)
        elif is_path_specifier(specifier):
            base = os.path.dirname(request.anchor_file) if request.anchor_file else request.base_dir
            target = os.path.normpath(os.path.join(base, specifier))
            result = self._load_target(target, specifier.endswith("/"), request, tried)
        else:
            start = os.path.dirname(request.anchor_file) if request.anchor_file else request.base_dir
            result = self._resolve_package(specifier, start, request, tried)

        if result is None:
            raise SpecifierNotFound(specifier, tried)
        return os.path.abspath(result)

    def _resolve_package(
        self, specifier: str, start_dir: str, request: ResolveRequest, tried: list[str]
    ) -> str | None:
        directory_only = specifier.endswith("/")
        for modules_dir in self._module_paths(start_dir, request.module_directories):
            target = os.path.normpath(os.path.join(modules_dir, specifier))
            result = self._load_target(target, directory_only, request, tried)
            if result:
                return result
        return None

    def _load_target(self, target: str, directory_only: bool, request: ResolveRequest, tried: list[str]) -> str | None:
        if not directory_only:
            result = self._load_as_file(target, request, tried)
            if result:
                return result
        return self._load_as_directory(target, request, tried)

    def _module_paths(self, start_dir: str, module_directories: list[str]):
        """Yield candidate module directories from start_dir up to the filesystem root."""
        current = os.path.abspath(start_dir)
        while True:
            if os.path.basename(current) not in module_directories:
                for name in module_directories:
                    yield os.path.join(current, name)
            parent = os.path.dirname(current)
            if parent == current:
                return
            current = parent

    def _load_as_file(self, path: str, request: ResolveRequest, tried: list[str]) -> str | None:
        if request.path_filter:
            package_dir, package = self._find_package(path, request.module_directories)
            if package_dir is not None:
                relative = os.path.relpath(path, package_dir)
                relative = "" if relative == "." else relative.replace(os.sep, "/")
                filtered = request.path_filter(package, path, relative)
                if filtered:
                    logger.debug(f"[resolve] path filter {path} -> {filtered}")
                    path = filtered

        for candidate in [path, *(path + ext for ext in request.extensions)]:
            tried.append(candidate)
            if os.path.isfile(candidate):
                return candidate
        return None

    def _load_as_directory(self, path: str, request: ResolveRequest, tried: list[str]) -> str | None:
        package = self._read_package(os.path.join(path, "package.json"))
        if package:
            browser = package.get("browser")
            main = browser if isinstance(browser, str) else package.get("main")
            if isinstance(main, str) and main:
                target = os.path.normpath(os.path.join(path, main))
                result = self._load_as_file(target, request, tried)
                if result is None and target != path:
                    result = self._load_as_directory(target, request, tried)
                if result:
                    return result
        return self._load_as_file(os.path.join(path, "index"), request, tried)

    def _find_package(self, path: str, module_directories: list[str]) -> tuple[str | None, dict[str, Any] | None]:
        """Find the nearest package.json above path without leaving its module directory."""
        current = os.path.dirname(path)
        while True:
            if os.path.basename(current) in module_directories:
                return None, None
            package = self._read_package(os.path.join(current, "package.json"))
            if package is not None:
                return current, package
            parent = os.path.dirname(current)
            if parent == current:
                return None, None
            current = parent

    def _read_package(self, package_file: str) -> dict[str, Any] | None:
        if package_file in self._packages:
            return self._packages[package_file]

        package = None
        if os.path.isfile(package_file):
            try:
                with open(package_file, encoding="utf-8") as f:
                    data = json.load(f)
                package = data if isinstance(data, dict) else None
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to read {package_file}: {e}")

        self._packages[package_file] = package
        return package

    def __repr__(self) -> str:
        return "NodeSpecifierResolver(browser-field)"
