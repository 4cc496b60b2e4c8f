"""Note workspace — file enumeration, file reads, and note-name matching.

Everything the parser needs from the outside world goes through a
NoteWorkspace: which files are notes, how to read one, what a tag or a
wiki-link looks like, and when two note names refer to the same note.
All of it is driven by an IndexConfig so tests can swap in synthetic
patterns or point the scanner at a temporary directory.

Blocking filesystem calls are wrapped in asyncio.to_thread().

Key class: NoteWorkspace.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from pathlib import Path

from .settings import IndexConfig

logger = logging.getLogger(__name__)

# Characters collapsed into the slug separator when normalizing note names
_SLUG_PUNCT_RE = re.compile(r"[!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_‘{|}~\s]+")
_BRACKETS_RE = re.compile(r"[\[\]]")


class NoteWorkspace:
    """Filesystem and naming rules for one note collection."""

    def __init__(self, config: IndexConfig | None = None) -> None:
        self.config = config or IndexConfig()
        self.root = self.config.workspace
        self._rx_tag = re.compile(self.config.tag_pattern)
        self._rx_wiki_link = re.compile(self.config.wiki_link_pattern)
        exts = "|".join(re.escape(e) for e in self.config.note_extensions)
        self._rx_extension = re.compile(rf"\.({exts})$", re.IGNORECASE)
        trailing = re.escape(self.config.slugify_char) + r"\-_"
        self._rx_trailing_slug = re.compile(rf"[{trailing}]+$")

    # ------------------------------------------------------------------
    # Tokenization patterns
    # ------------------------------------------------------------------

    def rx_tag(self) -> re.Pattern[str]:
        return self._rx_tag

    def rx_wiki_link(self) -> re.Pattern[str]:
        return self._rx_wiki_link

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def note_files(self) -> list[Path]:
        """Return every note file under the workspace root, sorted."""
        return await asyncio.to_thread(self._scan_note_files)

    def _scan_note_files(self) -> list[Path]:
        if not self.root.is_dir():
            logger.warning("Workspace directory not found: %s", self.root)
            return []

        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            # Prune in place so os.walk skips them
            dirnames[:] = [
                d
                for d in dirnames
                if not d.startswith(".") and d not in self.config.ignore_dirs
            ]
            for name in filenames:
                path = Path(dirpath) / name
                if self.config.is_note_file(path):
                    found.append(path)
        found.sort()
        logger.debug("Found %d note files under %s", len(found), self.root)
        return found

    async def read_note(self, path: Path) -> str:
        """Read a note's text. Raises OSError if missing or unreadable."""
        # Undecodable bytes become U+FFFD rather than failing the read
        return await asyncio.to_thread(
            Path(path).read_text, encoding="utf-8", errors="replace"
        )

    # ------------------------------------------------------------------
    # Note names
    # ------------------------------------------------------------------

    def strip_extension(self, name: str) -> str:
        return self._rx_extension.sub("", name)

    def slugify_title(self, title: str) -> str:
        """Collapse punctuation/whitespace runs and drop trailing separators."""
        t = _SLUG_PUNCT_RE.sub(self.config.slugify_char, title)
        t = self._rx_trailing_slug.sub("", t)
        return t.lower()

    def normalize_note_name_for_fuzzy_match(self, note_name: str) -> str:
        """Reduce a raw wiki-link or file name to a comparable key.

        ``[[Notes/My Idea.md|label]]``, ``My Idea`` and ``my-idea.markdown``
        all normalize to ``my-idea``.
        """
        n = _BRACKETS_RE.sub("", note_name)
        # [[target|label]] → target
        n = n.split(self.config.wiki_link_separator, 1)[0]
        n = n.strip()
        n = n.replace("\\", "/").rsplit("/", 1)[-1]
        n = self.strip_extension(n)
        return self.slugify_title(n)

    def note_names_fuzzy_match(self, left: str, right: str) -> bool:
        return self.normalize_note_name_for_fuzzy_match(
            left
        ) == self.normalize_note_name_for_fuzzy_match(right)
