"""Source loading for resolved modules.

Reads module text from disk and turns non-script assets into CommonJS
modules so every loaded module can be parsed the same way.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from ..errors import ReadFailure
from ..options import BundlerOptions
from ..required_module import RequiredModule
from .source_map import delete_comment

logger = logging.getLogger(__name__)

EMPTY_MODULE = "module.exports={};"


class SourceLoader:
    """Produces the source text for a resolved RequiredModule."""

    def __init__(self, options: BundlerOptions):
        self.options = options

    def is_ignored(self, required_module: RequiredModule) -> bool:
        return required_module.module_name in self.options.ignore

    async def read_source(self, required_module: RequiredModule) -> str:
        """Read raw text for the module, or the empty stand-in for ignored modules.

        Raises:
            ReadFailure: The file could not be read
        """
        if self.is_ignored(required_module):
            logger.debug(f"[load] ignoring {required_module.module_name}")
            return EMPTY_MODULE

        filename = required_module.filename
        if filename is None:
            raise ReadFailure(required_module.module_name, FileNotFoundError("module has no resolved filename"))

        try:
            return await asyncio.to_thread(self._read_file, filename)
        except OSError as e:
            raise ReadFailure(filename, e) from e

    async def load_source(self, required_module: RequiredModule) -> str:
        """Read the module and return the text the parser should see.

        Source map annotations are stripped; JSON and other non-script
        assets are wrapped into a module.exports statement built from the
        raw text.
        """
        raw = await self.read_source(required_module)
        source = delete_comment(raw)

        if self.is_ignored(required_module) or required_module.is_script():
            return source

        literal = json.dumps(raw)
        if required_module.is_json():
            return f"\nmodule.isJSON = true;\nmodule.exports = JSON.parse({literal});"
        return f"\nmodule.exports = {literal};"

    @staticmethod
    def _read_file(filename: str) -> str:
        return Path(filename).read_bytes().decode("utf-8", errors="replace")
