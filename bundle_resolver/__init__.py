"""bundle-resolver: module graph resolution for JavaScript bundling.

Starting from entry files, discovers every transitively required module,
resolves it to a file, loads, parses and transforms it, and returns the
modules in dependency order with each physical file appearing once.
"""

from .cache import ResolutionCache
from .errors import BundleResolverError
from .errors import ConfigError
from .errors import ParseFailure
from .errors import ReadFailure
from .errors import ResolutionFailure
from .errors import TransformFailure
from .options import BundlerOptions
from .options import ResolveOptions
from .required_module import ModuleState
from .required_module import RequiredModule
from .required_module import StubProgram
from .resolver import Resolver
from .resolver import TraversalContext

__all__ = [
    "BundleResolverError",
    "BundlerOptions",
    "ConfigError",
    "ModuleState",
    "ParseFailure",
    "ReadFailure",
    "RequiredModule",
    "ResolutionCache",
    "ResolutionFailure",
    "ResolveOptions",
    "Resolver",
    "StubProgram",
    "TransformFailure",
    "TraversalContext",
]
