"""Transform pipeline applied to each module before its dependencies are walked.

A transform is any callable taking a TransformContext. It may rewrite
``context.module.source``; returning True marks the module dirty so the
source is parsed again before dependency discovery. Async transforms are
awaited.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass

from ..errors import ConfigError
from ..options import BundlerOptions
from ..required_module import RequiredModule
from ..required_module import StubProgram
from .parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class TransformContext:
    """What a transform gets to see and modify."""

    module: RequiredModule
    options: BundlerOptions


Transform = Callable[[TransformContext], bool | None | Awaitable[bool | None]]


def load_transform(path: str) -> Transform:
    """Import a transform from 'package.module:callable'.

    Raises:
        ConfigError: Malformed path, missing module or missing attribute
    """
    module_path, sep, attr = path.partition(":")
    if not sep or not module_path or not attr:
        raise ConfigError(f"Invalid transform '{path}': expected 'package.module:callable'")

    try:
        module = importlib.import_module(module_path)
        transform = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ConfigError(f"Cannot load transform '{path}': {e}") from e

    if not callable(transform):
        raise ConfigError(f"Transform '{path}' is not callable")
    return transform


class Transformer:
    """Runs the configured transforms over one module at a time."""

    def __init__(self, options: BundlerOptions, parser: Parser, transforms: list[Transform] | None = None):
        self.options = options
        self.parser = parser
        self.transforms = list(transforms or [])

    @classmethod
    def from_options(cls, options: BundlerOptions, parser: Parser) -> Transformer:
        return cls(options, parser, [load_transform(path) for path in options.transforms])

    async def apply_transforms(self, required_module: RequiredModule) -> Exception | None:
        """Apply every transform in order.

        Returns:
            The exception raised by a failing transform, or None on success.
            Re-parse failures propagate as ParseFailure.
        """
        context = TransformContext(module=required_module, options=self.options)

        for transform in self.transforms:
            name = getattr(transform, "__name__", repr(transform))
            try:
                dirty = transform(context)
                if inspect.isawaitable(dirty):
                    dirty = await dirty
            except Exception as e:
                logger.error(f"[transform] {name} failed for {required_module.filename}: {e}")
                return e

            if dirty and not isinstance(required_module.ast, StubProgram):
                logger.debug(f"[transform] {name} rewrote {required_module.filename}, re-parsing")
                required_module.ast = self.parser.parse(
                    required_module.source or "", self.options.parser_options, required_module.filename
                )
        return None
