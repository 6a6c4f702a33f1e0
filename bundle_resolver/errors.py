"""Error taxonomy for module graph resolution.

Every traversal error is fatal: the graph is either fully resolved or the
whole operation fails with one of these.
"""

from __future__ import annotations

import json
import os
from typing import Any


class BundleResolverError(Exception):
    """Base class for all bundle-resolver errors."""


class ConfigError(BundleResolverError):
    """Raised when bundler options cannot be loaded or validated."""


class ResolutionFailure(BundleResolverError):
    """Raised when a specifier cannot be mapped to a file."""

    def __init__(
        self,
        specifier: str,
        requiring_file: str,
        options: dict[str, Any] | None = None,
        cause: BaseException | str | None = None,
    ):
        self.specifier = specifier
        self.requiring_file = requiring_file
        self.options = options or {}
        self.cause = cause
        message = (
            f"Unable to resolve module [{specifier}] from [{requiring_file}]"
            + os.linesep
            + json.dumps(self.options, indent=2, default=str)
        )
        if cause:
            message += os.linesep + str(cause)
        super().__init__(message)


class ReadFailure(BundleResolverError):
    """Raised when a resolved file cannot be read."""

    def __init__(self, filename: str, cause: BaseException):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Unable to read [{filename}]: {cause}")


class ParseFailure(BundleResolverError):
    """Raised when module source cannot be parsed."""

    def __init__(self, filename: str | None, message: str, line: int | None = None, column: int | None = None):
        self.filename = filename
        self.line = line
        self.column = column
        location = filename or "<source>"
        if line is not None:
            location += f":{line}"
            if column is not None:
                location += f":{column}"
        super().__init__(f"Unable to parse [{location}]: {message}")


class TransformFailure(BundleResolverError):
    """Raised when the transform pipeline reports an error for a module."""

    def __init__(self, filename: str | None, cause: BaseException | str):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Transform failed for [{filename}]: {cause}")
