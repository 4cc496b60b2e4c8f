"""Workspace index — parsed-file cache and reference search.

NoteIndex owns a table mapping note paths to ParsedFile objects.  Entries
are created lazily on first lookup, filled by reading and tokenizing the
file, and invalidated explicitly by the host when a note is saved
(update_cache_for) or deleted (clear_cache_for).

Searches load every workspace note through the cache, reusing text and
candidates already present, and return hits in workspace file order
followed by in-file candidate order.

Reads run concurrently; results are always applied in enumeration order.
There is no lock on the table: a refresh that finishes after an eviction
puts the entry back (last writer wins).

Key class: NoteIndex.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from .parser import ParsedFile
from .types import SUPPORTED_KINDS, WIKI_LINK, ContextWord, Location
from .workspace import NoteWorkspace

logger = logging.getLogger(__name__)


class NoteIndex:
    """In-memory index of tags and wiki-links across a note workspace."""

    def __init__(self, workspace: NoteWorkspace) -> None:
        self.workspace = workspace
        self._parsed_files: dict[Path, ParsedFile] = {}
        self._refresh_tasks: set[asyncio.Task[ParsedFile]] = set()

    def __len__(self) -> int:
        return len(self._parsed_files)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and Path(path) in self._parsed_files

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def parsed_file_for(self, path: Path | str) -> ParsedFile:
        """Return the cached entry for path, creating an empty one if needed."""
        path = Path(path)
        pf = self._parsed_files.get(path)
        if pf is None:
            pf = ParsedFile(path, self.workspace)
            self._parsed_files[path] = pf
        return pf

    async def parsed_files_for_workspace(
        self, use_cache: bool = False
    ) -> list[ParsedFile]:
        """Read and parse every workspace note, in enumeration order.

        Files that fail to read are logged and left out of the result.
        """
        files = await self.workspace.note_files()
        parsed_files = [self.parsed_file_for(f) for f in files]
        results = await asyncio.gather(
            *(pf.read_file(use_cache) for pf in parsed_files),
            return_exceptions=True,
        )

        loaded: list[ParsedFile] = []
        for pf, result in zip(parsed_files, results):
            if isinstance(result, OSError):
                logger.warning("Skipping unreadable note %s: %s", pf.path, result)
                continue
            if isinstance(result, BaseException):
                raise result
            pf.parse_data(use_cache)
            loaded.append(pf)
        return loaded

    def update_cache_for(self, path: Path | str) -> asyncio.Task[ParsedFile]:
        """Re-read and re-parse one note after its contents changed.

        Runs in the background; await the returned task to wait for it.
        Must be called from a running event loop.
        """
        path = Path(path)
        pf = self.parsed_file_for(path)
        task = asyncio.create_task(self._refresh(path, pf))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._on_refresh_done)
        return task

    async def _refresh(self, path: Path, pf: ParsedFile) -> ParsedFile:
        await pf.read_file(use_cache=False)
        pf.parse_data(use_cache=False)
        self._parsed_files[path] = pf
        logger.debug("Refreshed cache for %s", path)
        return pf

    def _on_refresh_done(self, task: asyncio.Task[ParsedFile]) -> None:
        self._refresh_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Cache refresh failed: %s", exc)

    def clear_cache_for(self, path: Path | str) -> None:
        """Drop the entry for a deleted note."""
        if self._parsed_files.pop(Path(path), None) is not None:
            logger.debug("Cleared cache for %s", path)

    def clear(self) -> None:
        self._parsed_files.clear()

    async def hydrate_cache(self) -> list[ParsedFile]:
        """Force a full re-read and re-parse of the workspace."""
        parsed_files = await self.parsed_files_for_workspace(use_cache=False)
        logger.info("Hydrated index with %d notes", len(parsed_files))
        return parsed_files

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def distinct_tags(self) -> list[str]:
        """Every distinct tag in the workspace, sigil included."""
        tags: dict[str, None] = {}
        for pf in await self.parsed_files_for_workspace(use_cache=True):
            for tag in pf.tag_set():
                tags.setdefault(tag, None)
        return list(tags)

    async def search(self, context_word: ContextWord) -> list[Location]:
        """Locations of every reference matching the context word."""
        if context_word.kind not in SUPPORTED_KINDS:
            return []

        locations: list[Location] = []
        for pf in await self.parsed_files_for_workspace(use_cache=True):
            for r in pf.ranges_for_word(context_word):
                locations.append(Location(pf.path, r))
        return locations

    async def search_backlinks_for(self, file_basename: str) -> list[Location]:
        """Locations of wiki-links pointing at the named note."""
        cw = ContextWord(kind=WIKI_LINK, word=file_basename, has_extension=True)
        return await self.search(cw)
