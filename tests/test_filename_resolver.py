"""Tests for FilenameResolver policy on top of specifier resolution."""

import json
import os
from unittest.mock import AsyncMock

import pytest
from bundle_resolver.errors import ConfigError
from bundle_resolver.errors import ResolutionFailure
from bundle_resolver.options import BundlerOptions
from bundle_resolver.required_module import RequiredModule
from bundle_resolver.resolution import FilenameResolver
from bundle_resolver.resolution import SpecifierNotFound
from bundle_resolver.resolution import fix_windows_path


def test_fix_windows_path():
    assert fix_windows_path("C:\\proj\\node_modules\\a.js") == "C:/proj/node_modules/a.js"
    assert fix_windows_path("/already/posix") == "/already/posix"


class TestInitialize:
    """Shim table loading."""

    def test_shims_loaded_with_node_globals(self):
        resolver = FilenameResolver(BundlerOptions(add_node_globals=True))
        resolver.initialize()
        assert resolver.shims["path"] == "path-browserify"
        assert "buffer" in resolver.shims

    def test_no_shims_without_node_globals(self):
        resolver = FilenameResolver(BundlerOptions(add_node_globals=False))
        resolver.initialize()
        assert resolver.shims is None


class TestBuildRequest:
    """Request anchoring."""

    def test_path_specifier_is_anchored(self, options):
        resolver = FilenameResolver(options)
        request = resolver.build_request("/p/src/a.js", RequiredModule("./b"))
        assert request.anchor_file == "/p/src/a.js"
        assert request.base_dir == options.base_dir

    def test_package_specifier_is_not_anchored(self, options):
        resolver = FilenameResolver(options)
        request = resolver.build_request("/p/src/a.js", RequiredModule("lodash"))
        assert request.anchor_file is None

    def test_carries_resolve_options(self):
        options = BundlerOptions(resolve={"extensions": [".js"], "directories": ["web_modules"]})
        request = FilenameResolver(options).build_request("/p/a.js", RequiredModule("./b"))
        assert request.extensions == [".js"]
        assert request.module_directories == ["web_modules"]


class TestResolveFilename:
    """Resolution and failure reporting."""

    @pytest.mark.asyncio
    async def test_resolves_relative(self, make_project, options):
        root = make_project({"a.js": "", "b.js": ""})
        resolver = FilenameResolver(options)
        resolver.initialize()

        filename = await resolver.resolve_filename(str(root / "a.js"), RequiredModule("./b"))
        assert filename == str(root / "b.js")

    @pytest.mark.asyncio
    async def test_resolves_shim_from_base_dir(self, make_project):
        root = make_project({"src/a.js": "", "node_modules/path-browserify/index.js": ""})
        resolver = FilenameResolver(BundlerOptions(base_dir=str(root)))
        resolver.initialize()

        filename = await resolver.resolve_filename(str(root / "src" / "a.js"), RequiredModule("path"))
        assert filename == str(root / "node_modules" / "path-browserify" / "index.js")

    @pytest.mark.asyncio
    async def test_failure_message(self, make_project, options):
        root = make_project({"a.js": ""})
        resolver = FilenameResolver(options)
        resolver.initialize()
        requiring = str(root / "a.js")

        with pytest.raises(ResolutionFailure) as excinfo:
            await resolver.resolve_filename(requiring, RequiredModule("./missing"))

        error = excinfo.value
        assert error.specifier == "./missing"
        assert error.requiring_file == requiring
        assert isinstance(error.cause, SpecifierNotFound)
        message = str(error)
        assert message.startswith(f"Unable to resolve module [./missing] from [{requiring}]" + os.linesep)
        assert '"extensions"' in message
        assert "Cannot find module './missing'" in message

    @pytest.mark.asyncio
    async def test_custom_specifier_resolver(self, options):
        specifier_resolver = AsyncMock()
        specifier_resolver.resolve.return_value = "/virtual/b.js"
        resolver = FilenameResolver(options, specifier_resolver)
        resolver.initialize()

        filename = await resolver.resolve_filename("/virtual/a.js", RequiredModule("./b"))

        assert filename == "/virtual/b.js"
        specifier, request = specifier_resolver.resolve.call_args.args
        assert specifier == "./b"
        assert request.anchor_file == "/virtual/a.js"


class TestPathFilter:
    """resolve.alias rewriting inside packages."""

    def test_requires_package_and_relative_path(self):
        resolver = FilenameResolver(BundlerOptions(resolve={"alias": {"lib": "../x"}}))
        assert resolver.path_filter(None, "/p/node_modules/pkg/lib/a", "lib/a") is None
        assert resolver.path_filter({"name": "pkg"}, "/p/node_modules/pkg/lib/a", "") is None

    def test_no_match(self):
        resolver = FilenameResolver(BundlerOptions(resolve={"alias": {"nomatch$": "../x"}}))
        assert resolver.path_filter({"name": "pkg"}, "/p/node_modules/pkg/lib/a", "lib/a") is None

    def test_match_joins_suffix(self):
        resolver = FilenameResolver(BundlerOptions(resolve={"alias": {"pkg/lib/a$": "../../dist/a"}}))
        full_path = os.path.join("/p", "node_modules", "pkg", "lib", "a")

        result = resolver.path_filter({"name": "pkg"}, full_path, "lib/a")
        assert result == os.path.normpath(os.path.join("/p", "node_modules", "pkg", "dist", "a"))

    def test_last_match_wins(self):
        alias = {"lib/a$": "../first", "pkg/": "../second"}
        resolver = FilenameResolver(BundlerOptions(resolve={"alias": alias}))
        full_path = os.path.join("/p", "node_modules", "pkg", "lib", "a")

        result = resolver.path_filter({"name": "pkg"}, full_path, "lib/a")
        assert result == os.path.normpath(os.path.join(full_path, "../second"))

    def test_invalid_pattern(self):
        with pytest.raises(ConfigError, match="Invalid resolve.alias pattern"):
            FilenameResolver(BundlerOptions(resolve={"alias": {"(": "x"}}))

    @pytest.mark.asyncio
    async def test_alias_applies_during_resolution(self, make_project, options):
        root = make_project(
            {
                "a.js": "",
                "node_modules/pkg/package.json": json.dumps({"name": "pkg"}),
                "node_modules/pkg/lib/a.js": "",
                "node_modules/pkg/dist/a.js": "",
            }
        )
        options.resolve.alias = {"pkg/lib/a$": "../../dist/a"}
        resolver = FilenameResolver(options)
        resolver.initialize()

        filename = await resolver.resolve_filename(str(root / "a.js"), RequiredModule("pkg/lib/a"))
        assert filename == str(root / "node_modules" / "pkg" / "dist" / "a.js")
