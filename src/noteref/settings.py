"""Index settings — reads settings.toml + .env to produce an IndexConfig.

Everything the parser treats as configuration lives here: the tag and
wiki-link patterns, the note file extensions, directories skipped while
scanning, and the slug separator used by fuzzy note-name matching.

Key entities:
  - IndexConfig: frozen dataclass with all resolved settings.
  - load_settings(): parse .env + settings.toml → IndexConfig.
"""

from __future__ import annotations

import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_TAG_PATTERN = r"#[\w\-_]+"
DEFAULT_WIKI_LINK_SEPARATOR = "|"


def wiki_link_pattern_for(separator: str) -> str:
    """Build the default wiki-link pattern around a label separator."""
    sep = re.escape(separator)
    return rf"\[\[[^{sep}\]]+({sep}[^{sep}\]]+)?\]\]"


def noteref_dir() -> Path:
    """Config directory: $NOTEREF_DIR, else ~/.noteref."""
    override = os.getenv("NOTEREF_DIR", "")
    if override:
        return Path(os.path.expanduser(override))
    return Path.home() / ".noteref"


# ---------------------------------------------------------------------------
# IndexConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IndexConfig:
    """Resolved configuration for one note workspace."""

    workspace: Path = field(default_factory=Path.cwd)

    # Tokenization patterns (no anchors; matched per line)
    tag_pattern: str = DEFAULT_TAG_PATTERN
    wiki_link_pattern: str = field(
        default_factory=lambda: wiki_link_pattern_for(DEFAULT_WIKI_LINK_SEPARATOR)
    )
    wiki_link_separator: str = DEFAULT_WIKI_LINK_SEPARATOR

    # Workspace scan
    note_extensions: tuple[str, ...] = ("md", "markdown")
    ignore_dirs: frozenset[str] = frozenset({"node_modules"})

    # Fuzzy note-name matching: runs of punctuation/space collapse to this
    slugify_char: str = "-"

    def is_note_file(self, path: Path) -> bool:
        return path.suffix.lstrip(".").lower() in self.note_extensions


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


def load_settings(
    config_dir: Path | None = None,
    workspace: Path | None = None,
) -> IndexConfig:
    """Read .env + settings.toml and return an IndexConfig.

    Args:
        config_dir: Override for the config directory.
                    Defaults to ``noteref_dir()``.
        workspace: Explicit workspace root; wins over the env var and
                   the ``[index].workspace`` key.

    A missing settings.toml is not an error; defaults are used.
    """
    if config_dir is None:
        config_dir = noteref_dir()

    # Load .env files (local cwd first, then config_dir)
    local_env = Path(".env")
    global_env = config_dir / ".env"
    if local_env.is_file():
        load_dotenv(local_env)
    if global_env.is_file():
        load_dotenv(global_env)

    raw: dict = {}
    toml_path = config_dir / "settings.toml"
    if toml_path.is_file():
        with open(toml_path, "rb") as f:
            raw = tomllib.load(f)
    else:
        logger.debug("No settings file at %s, using defaults", toml_path)

    section = raw.get("index", {})
    if not isinstance(section, dict):
        raise ValueError("settings.toml: [index] must be a table.")

    return _build_index_config(section, workspace)


def _build_index_config(section: dict, workspace: Path | None) -> IndexConfig:
    """Validate the [index] table and merge it with env overrides."""
    if workspace is None:
        env_ws = os.getenv("NOTEREF_WORKSPACE", "")
        raw_ws = env_ws or section.get("workspace", "")
        workspace = Path(os.path.expanduser(str(raw_ws))) if raw_ws else Path.cwd()

    separator = str(section.get("wiki_link_separator", DEFAULT_WIKI_LINK_SEPARATOR))
    if not separator:
        raise ValueError("wiki_link_separator must not be empty.")

    tag_pattern = str(section.get("tag_pattern", DEFAULT_TAG_PATTERN))
    wiki_link_pattern = str(
        section.get("wiki_link_pattern", wiki_link_pattern_for(separator))
    )
    for key, pattern in (
        ("tag_pattern", tag_pattern),
        ("wiki_link_pattern", wiki_link_pattern),
    ):
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid {key} {pattern!r}: {e}") from e

    raw_exts = section.get("note_extensions", ["md", "markdown"])
    if not isinstance(raw_exts, list):
        raise ValueError("note_extensions must be a list of strings.")
    note_extensions = tuple(str(e).lstrip(".").lower() for e in raw_exts if e)
    if not note_extensions:
        raise ValueError("note_extensions must contain at least one extension.")

    raw_ignore = section.get("ignore_dirs", ["node_modules"])
    if not isinstance(raw_ignore, list):
        raise ValueError("ignore_dirs must be a list of directory names.")

    return IndexConfig(
        workspace=workspace,
        tag_pattern=tag_pattern,
        wiki_link_pattern=wiki_link_pattern,
        wiki_link_separator=separator,
        note_extensions=note_extensions,
        ignore_dirs=frozenset(str(d) for d in raw_ignore),
        slugify_char=str(section.get("slugify_char", "-")),
    )
