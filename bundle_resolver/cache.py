"""Traversal-scoped resolution cache.

Two independent tiers:
- lookup_names: lookup name -> task resolving (filename, claimed). Recorded
  before the first await, so concurrent requests for the same logical
  specifier share one resolution instead of racing.
- filenames: filename -> completion event. Membership means the physical file
  has been claimed for loading; the event fires once it is in the buffer.

Edges that hit an in-flight file wait for its completion so a module is
never emitted before its dependencies. A wait-for graph between files keeps
cyclic imports from deadlocking: an edge that would close a wait cycle
returns immediately instead.
"""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class ResolutionCache:
    """Logical (lookup name) and physical (filename) dedup for one traversal."""

    def __init__(self) -> None:
        self.lookup_names: dict[str, asyncio.Task[tuple[str, bool]]] = {}
        self.filenames: dict[str, asyncio.Event] = {}
        self._waiting_on: dict[str, set[str]] = {}

    # ----- Lookup name tier -----

    def get_lookup(self, lookup_name: str) -> asyncio.Task[tuple[str, bool]] | None:
        return self.lookup_names.get(lookup_name)

    def record_lookup(self, lookup_name: str, task: asyncio.Task[tuple[str, bool]]) -> None:
        self.lookup_names[lookup_name] = task

    # ----- Filename tier -----

    def is_in_filename_cache(self, filename: str) -> bool:
        return filename in self.filenames

    def claim_filename(self, filename: str, requiring_file: str) -> bool:
        """Claim filename for loading.

        Returns:
            True if the caller now owns loading the file, False if another
            edge already claimed it
        """
        if filename in self.filenames:
            return False
        self.filenames[filename] = asyncio.Event()
        self._waiting_on.setdefault(requiring_file, set()).add(filename)
        return True

    def mark_done(self, filename: str) -> None:
        """Release waiters on filename; called once it is in the buffer or has failed."""
        event = self.filenames.get(filename)
        if event is not None:
            event.set()
        self._waiting_on.pop(filename, None)

    async def wait_for(self, requiring_file: str, filename: str) -> bool:
        """Wait until filename has been fully processed.

        Returns:
            True once the file is done, False without waiting when waiting
            would close a cycle (requiring_file is already upstream of filename)
        """
        event = self.filenames.get(filename)
        if event is None or event.is_set():
            return True

        if requiring_file == filename or self._reaches(filename, requiring_file):
            logger.debug(f"[cache] cycle: {requiring_file} -> {filename}, not waiting")
            return False

        self._waiting_on.setdefault(requiring_file, set()).add(filename)
        await event.wait()
        return True

    def _reaches(self, start: str, target: str) -> bool:
        """True if start is (transitively) waiting on target."""
        seen: set[str] = set()
        stack = [start]
        while stack:
            current = stack.pop()
            if current == target:
                return True
            if current in seen:
                continue
            seen.add(current)
            for dependency in self._waiting_on.get(current, ()):
                event = self.filenames.get(dependency)
                if event is not None and not event.is_set():
                    stack.append(dependency)
        return False

    def __repr__(self) -> str:
        return f"ResolutionCache(lookup_names={len(self.lookup_names)}, filenames={len(self.filenames)})"
