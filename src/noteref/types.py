"""Value types shared by the parser and the index."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Reference kinds
TAG = "tag"
WIKI_LINK = "wiki_link"

SUPPORTED_KINDS = frozenset({TAG, WIKI_LINK})


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based (line, character) position in a document."""

    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """Half-open character span within a document."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} precedes start {self.start}")

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> Range:
        return cls(Position(line, start), Position(line, end))


@dataclass(frozen=True)
class Location:
    """A range inside a specific note file."""

    path: Path
    range: Range

    def __str__(self) -> str:
        # 1-based, grep style
        start = self.range.start
        return f"{self.path}:{start.line + 1}:{start.character + 1}"


@dataclass
class ContextWord:
    """Logical query: a tag name or a note name to look for."""

    kind: str  # TAG | WIKI_LINK
    word: str  # bare tag name, or note name with/without extension
    has_extension: bool = False
    range: Range | None = None  # where the word itself sits; unused for matching
