"""Dependency graph node model.

Defines the types carried through a traversal:
- ModuleState: where a node is in its resolution lifecycle
- StubProgram: placeholder tree for modules that are never parsed
- RequiredModule: one import edge target, filled in as resolution proceeds
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any

SCRIPT_EXTENSIONS = frozenset({".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx"})

_WINDOWS_ABSOLUTE = re.compile(r"^[a-zA-Z]:[\\/]")


class ModuleState(str, Enum):
    """Lifecycle of a RequiredModule.

    Terminal states:
    - EXCLUDED: on the exclusion list, never resolved
    - CACHED: resolved to a file processed elsewhere (by another edge, or
      TypeScript sources handled by the compiler)
    - RESOLVED: loaded, walked and appended to the output buffer
    """

    CREATED = "created"
    RESOLVING = "resolving"
    EXCLUDED = "excluded"
    CACHED = "cached"
    LOADED = "loaded"
    PARSED = "parsed"
    TRANSFORMED = "transformed"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class StubProgram:
    """Empty program tree substituted for modules on the no-parse list."""

    body: Any = None
    source_type: str = "script"
    type: str = "Program"


@dataclass(eq=False)
class RequiredModule:
    """A node in the dependency graph.

    Attributes:
        module_name: Specifier as written at the import site
        lookup_name: Logical dedup key (see Resolver.resolve_module)
        filename: Absolute resolved path, None until resolved or when excluded
        source: Raw or transformed source text
        ast: Parsed tree, or StubProgram for no-parse modules
        required_modules: Children that completed resolution
        state: Current lifecycle state
    """

    module_name: str
    lookup_name: str | None = None
    filename: str | None = None
    source: str | None = None
    ast: Any = None
    required_modules: list[RequiredModule] = field(default_factory=list)
    state: ModuleState = ModuleState.CREATED

    def is_npm_module(self) -> bool:
        """True for package-registry specifiers (not relative or absolute)."""
        name = self.module_name
        if name.startswith(".") or name.startswith("/") or name.startswith("\\"):
            return False
        return not _WINDOWS_ABSOLUTE.match(name)

    def is_script(self) -> bool:
        return self._extension() in SCRIPT_EXTENSIONS

    def is_json(self) -> bool:
        return self._extension() == ".json"

    def is_typescript_file(self) -> bool:
        """True for TypeScript sources, which are compiled and walked elsewhere."""
        if not self.filename or self.filename.endswith(".d.ts"):
            return False
        return self._extension() in (".ts", ".tsx")

    def is_excluded(self) -> bool:
        return self.state == ModuleState.EXCLUDED

    def _extension(self) -> str:
        if not self.filename:
            return ""
        return os.path.splitext(self.filename)[1].lower()

    def __repr__(self) -> str:
        return f"RequiredModule({self.module_name!r}, filename={self.filename!r}, state={self.state.value})"
