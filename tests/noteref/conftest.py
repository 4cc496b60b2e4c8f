"""Shared fixtures for noteref tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from noteref.index import NoteIndex
from noteref.settings import IndexConfig
from noteref.workspace import NoteWorkspace


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    d = tmp_path / "notes"
    d.mkdir()
    return d


@pytest.fixture
def write_note(notes_dir: Path) -> Callable[[str, str], Path]:
    """Write a note under notes_dir, creating parent directories."""

    def _write(rel_path: str, content: str) -> Path:
        path = notes_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def workspace(notes_dir: Path) -> NoteWorkspace:
    return NoteWorkspace(IndexConfig(workspace=notes_dir))


@pytest.fixture
def index(workspace: NoteWorkspace) -> NoteIndex:
    return NoteIndex(workspace)
