"""Module graph builder.

Resolver drives one required module through its lifecycle:

    filename resolution -> cache check -> load -> parse -> transform
    -> dependency walk -> children (concurrently) -> append to buffer

Modules are appended post-order: a module enters the buffer only after every
child has settled. Each physical file is loaded and walked once per
traversal; every other edge to it returns a leaf reference.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

from .analysis.parser import JavaScriptParser
from .analysis.parser import Parser
from .analysis.transformer import Transformer
from .analysis.walker import DependencyWalker
from .cache import ResolutionCache
from .errors import TransformFailure
from .loading.source_loader import SourceLoader
from .options import BundlerOptions
from .required_module import ModuleState
from .required_module import RequiredModule
from .required_module import StubProgram
from .resolution.filename_resolver import FilenameResolver

logger = logging.getLogger(__name__)


@dataclass
class TraversalContext:
    """Mutable state shared by every resolution in one traversal."""

    cache: ResolutionCache = field(default_factory=ResolutionCache)
    buffer: list[RequiredModule] = field(default_factory=list)


class Resolver:
    """Builds the ordered, deduplicated module list reachable from entry files."""

    def __init__(
        self,
        options: BundlerOptions | None = None,
        *,
        filename_resolver: FilenameResolver | None = None,
        source_loader: SourceLoader | None = None,
        parser: Parser | None = None,
        dependency_walker: DependencyWalker | None = None,
        transformer: Transformer | None = None,
    ):
        self.options = options or BundlerOptions()
        self.filename_resolver = filename_resolver or FilenameResolver(self.options)
        self.source_loader = source_loader or SourceLoader(self.options)
        self.parser = parser or JavaScriptParser()
        self.dependency_walker = dependency_walker or DependencyWalker()
        self.transformer = transformer or Transformer.from_options(self.options, self.parser)

    def initialize(self) -> None:
        self.filename_resolver.initialize()

    async def resolve_entries(self, entry_files: Iterable[str | Path]) -> list[RequiredModule]:
        """Resolve every entry file in one traversal and return the buffer.

        Raises:
            BundleResolverError: Any fatal resolution, read, parse or transform error
        """
        context = TraversalContext()
        requests = []
        for entry in entry_files:
            path = os.path.abspath(entry)
            requests.append(self.resolve_module(path, RequiredModule("./" + os.path.basename(path)), context))

        await asyncio.gather(*requests)
        logger.info(f"[resolve] {len(context.buffer)} module(s) from {len(requests)} entry file(s)")
        return context.buffer

    async def resolve_module(
        self, requiring_module: str, required_module: RequiredModule, context: TraversalContext
    ) -> RequiredModule:
        """Resolve required_module as imported from requiring_module.

        Returns the node once it, and everything it requires, has settled.
        Newly loaded modules are appended to context.buffer; cache hits and
        excluded modules are returned without being appended.
        """
        cache = context.cache
        required_module.lookup_name = self.lookup_name(requiring_module, required_module)

        pending = cache.get_lookup(required_module.lookup_name)
        if pending is not None:
            required_module.filename, _ = await pending
            required_module.state = ModuleState.CACHED
            await cache.wait_for(requiring_module, required_module.filename)
            return required_module

        if required_module.module_name in self.options.exclude:
            logger.debug(f"[resolve] excluding {required_module.module_name} from {requiring_module}")
            required_module.state = ModuleState.EXCLUDED
            return required_module

        required_module.state = ModuleState.RESOLVING
        task = asyncio.ensure_future(self._resolve_and_claim(requiring_module, required_module, cache))
        cache.record_lookup(required_module.lookup_name, task)
        filename, claimed = await task
        required_module.filename = filename

        if required_module.is_typescript_file():
            required_module.state = ModuleState.CACHED
            return required_module

        if not claimed:
            logger.debug(f"[cache] {filename} already loaded, skipping {required_module.module_name}")
            required_module.state = ModuleState.CACHED
            await cache.wait_for(requiring_module, filename)
            return required_module

        try:
            await self._load(required_module, context)
        finally:
            cache.mark_done(filename)
        return required_module

    def lookup_name(self, requiring_module: str, required_module: RequiredModule) -> str:
        """Package specifiers dedup by name; paths by location relative to the requiring file."""
        if required_module.is_npm_module():
            return required_module.module_name
        return os.path.normpath(os.path.join(os.path.dirname(requiring_module), required_module.module_name))

    def create_abstract_syntax_tree(self, required_module: RequiredModule) -> Any:
        if required_module.module_name in self.options.no_parse:
            return StubProgram()
        return self.parser.parse(required_module.source or "", self.options.parser_options, required_module.filename)

    async def resolve_dependencies(self, required_module: RequiredModule, context: TraversalContext) -> None:
        """Resolve every module required_module imports, concurrently."""
        filename = required_module.filename
        source = required_module.source or ""
        if filename is None or not (required_module.is_script() and self.dependency_walker.has_require(source)):
            return

        module_names = self.dependency_walker.collect_required_js_modules(required_module)
        if not module_names:
            return
        resolved = await asyncio.gather(
            *(self.resolve_module(filename, RequiredModule(name), context) for name in module_names)
        )
        required_module.required_modules.extend(child for child in resolved if child.filename)

    async def _resolve_and_claim(
        self, requiring_module: str, required_module: RequiredModule, cache: ResolutionCache
    ) -> tuple[str, bool]:
        """Resolve the filename and claim it in the same step.

        Edges awaiting this lookup therefore always see the file as claimed.
        """
        filename = await self.filename_resolver.resolve_filename(requiring_module, required_module)
        required_module.filename = filename
        if required_module.is_typescript_file():
            return filename, False
        return filename, cache.claim_filename(filename, requiring_module)

    async def _load(self, required_module: RequiredModule, context: TraversalContext) -> None:
        required_module.source = await self.source_loader.load_source(required_module)
        required_module.state = ModuleState.LOADED

        required_module.ast = self.create_abstract_syntax_tree(required_module)
        required_module.state = ModuleState.PARSED

        error = await self.transformer.apply_transforms(required_module)
        if error:
            raise TransformFailure(required_module.filename, error) from error
        required_module.state = ModuleState.TRANSFORMED

        await self.resolve_dependencies(required_module, context)

        context.buffer.append(required_module)
        required_module.state = ModuleState.RESOLVED
        logger.debug(
            f"[resolve] {required_module.filename} ({len(required_module.required_modules)} dependencies)"
        )
