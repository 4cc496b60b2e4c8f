"""Per-document parsing — tag and wiki-link reference candidates.

A ParsedFile caches the text of one note and the reference candidates
found in it, so the index does not have to re-read or re-tokenize a file
every time it looks up the locations of a tag or a wiki-link.

Each ParsedFile moves through three states:
  - UNLOADED: never read (data is None).
  - LOADED: text present, candidates not yet rebuilt for it.
  - PARSED: candidates reflect the current text.

Key classes: RefCandidate, ParsedFile.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .types import SUPPORTED_KINDS, TAG, WIKI_LINK, ContextWord, Range
from .workspace import NoteWorkspace

logger = logging.getLogger(__name__)

UNLOADED = "unloaded"
LOADED = "loaded"
PARSED = "parsed"

_LINE_SPLIT_RE = re.compile(r"\r?\n")

# Placeholder path for documents built from in-memory text
NO_PATH = Path("NO_PATH")


@dataclass(frozen=True)
class RefCandidate:
    """One textual occurrence of a potential tag or wiki-link."""

    raw_text: str  # e.g. "#tag" or "[[Name]]", sigils included
    range: Range
    kind: str  # TAG | WIKI_LINK

    @classmethod
    def from_match(cls, line_num: int, match: re.Match[str], kind: str) -> RefCandidate:
        start = match.start()
        text = match.group(0)
        return cls(text, Range.on_line(line_num, start, start + len(text)), kind)

    def matches_context_word(
        self,
        context_word: ContextWord,
        fuzzy_match: Callable[[str, str], bool],
    ) -> bool:
        if context_word.kind != self.kind:
            return False
        if context_word.kind == TAG:
            return self.raw_text == f"#{context_word.word}"
        if context_word.kind == WIKI_LINK:
            return fuzzy_match(self.raw_text, context_word.word)
        return False


class ParsedFile:
    """Cached text and reference candidates for a single note."""

    def __init__(self, path: Path, workspace: NoteWorkspace) -> None:
        self.path = path
        self.workspace = workspace
        self.data: str | None = None
        self.ref_candidates: list[RefCandidate] = []
        self._parsed = False
        self._read_failed = False

    def __repr__(self) -> str:
        return (
            f"ParsedFile({str(self.path)!r}, state={self.state}, "
            f"candidates={len(self.ref_candidates)})"
        )

    @classmethod
    def from_data(cls, data: str, workspace: NoteWorkspace) -> ParsedFile:
        """Build a parsed document from text, with no backing file."""
        pf = cls(NO_PATH, workspace)
        pf.data = data
        pf.parse_data(use_cache=False)
        return pf

    @property
    def parsed(self) -> bool:
        return self._parsed

    @property
    def state(self) -> str:
        if self.data is None:
            return UNLOADED
        return PARSED if self._parsed else LOADED

    async def read_file(self, use_cache: bool = False) -> ParsedFile:
        """Read the note into ``data`` and return self.

        With ``use_cache`` and text already present, returns immediately
        without touching the filesystem.  Raises OSError if the file
        cannot be read; ``data`` is then left as it was.  After a failed read,
        ``use_cache`` is ignored until a read succeeds again.
        """
        if use_cache and self.data is not None and not self._read_failed:
            return self

        # Re-reading: old candidates must not be served for new text
        self._parsed = False
        try:
            text = await self.workspace.read_note(self.path)
        except OSError as e:
            logger.debug("Failed to read %s: %s", self.path, e)
            self._read_failed = True
            raise
        self.data = text
        self._read_failed = False
        return self

    def parse_data(self, use_cache: bool = False) -> None:
        """Tokenize ``data`` into reference candidates.

        Per line, all tag matches come first, then all wiki-link matches.
        """
        if self.data == "":
            self.ref_candidates = []
            self._parsed = True
            return
        if self.data is None:
            logger.debug("parse_data: no data for %s", self.path)
            return
        if use_cache and self._parsed:
            return

        rx_tag = self.workspace.rx_tag()
        rx_wiki_link = self.workspace.rx_wiki_link()
        candidates: list[RefCandidate] = []
        for line_num, line in enumerate(_LINE_SPLIT_RE.split(self.data)):
            for m in rx_tag.finditer(line):
                candidates.append(RefCandidate.from_match(line_num, m, TAG))
            for m in rx_wiki_link.finditer(line):
                candidates.append(RefCandidate.from_match(line_num, m, WIKI_LINK))

        self.ref_candidates = candidates
        self._parsed = True
        logger.debug("Parsed %s: %d candidates", self.path, len(candidates))

    def ranges_for_word(self, context_word: ContextWord | None) -> list[Range]:
        """Ranges of every candidate matching the word, in document order.

        NB: parse_data() must have run first; nothing is parsed here.
        """
        if self.data == "":
            return []
        if self.data is None:
            logger.debug("ranges_for_word called on unloaded %s", self.path)
            return []
        if context_word is None:
            return []
        if context_word.kind not in SUPPORTED_KINDS:
            return []

        fuzzy = self.workspace.note_names_fuzzy_match
        return [
            c.range
            for c in self.ref_candidates
            if c.matches_context_word(context_word, fuzzy)
        ]

    def tag_set(self) -> set[str]:
        return {c.raw_text for c in self.ref_candidates if c.kind == TAG}
