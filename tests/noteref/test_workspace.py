"""Tests for workspace.py — file enumeration and note-name matching."""

from pathlib import Path

import pytest

from noteref.settings import IndexConfig
from noteref.workspace import NoteWorkspace


class TestNoteFiles:
    async def test_finds_notes_sorted(self, workspace: NoteWorkspace, write_note):
        b = write_note("sub/b.markdown", "")
        a = write_note("a.md", "")
        write_note("c.txt", "")
        assert await workspace.note_files() == [a, b]

    async def test_skips_hidden_and_ignored_dirs(
        self, workspace: NoteWorkspace, write_note
    ):
        keep = write_note("keep.md", "")
        write_note(".obsidian/cache.md", "")
        write_note("node_modules/pkg/readme.md", "")
        assert await workspace.note_files() == [keep]

    async def test_custom_extensions(self, notes_dir: Path, write_note):
        ws = NoteWorkspace(
            IndexConfig(workspace=notes_dir, note_extensions=("txt",))
        )
        txt = write_note("a.txt", "")
        write_note("b.md", "")
        assert await ws.note_files() == [txt]

    async def test_uppercase_extension(self, workspace: NoteWorkspace, write_note):
        path = write_note("README.MD", "")
        assert await workspace.note_files() == [path]

    async def test_missing_root(self, tmp_path: Path):
        ws = NoteWorkspace(IndexConfig(workspace=tmp_path / "nope"))
        assert await ws.note_files() == []


class TestReadNote:
    async def test_reads_utf8(self, workspace: NoteWorkspace, write_note):
        path = write_note("a.md", "café #tag")
        assert await workspace.read_note(path) == "café #tag"

    async def test_undecodable_bytes_replaced(
        self, workspace: NoteWorkspace, notes_dir: Path
    ):
        path = notes_dir / "latin.md"
        path.write_bytes(b"caf\xe9 #tag")
        assert await workspace.read_note(path) == "caf\ufffd #tag"

    async def test_missing_raises(self, workspace: NoteWorkspace, notes_dir: Path):
        with pytest.raises(FileNotFoundError):
            await workspace.read_note(notes_dir / "missing.md")


class TestNoteNames:
    @pytest.fixture
    def ws(self) -> NoteWorkspace:
        return NoteWorkspace(IndexConfig())

    def test_strip_extension(self, ws: NoteWorkspace):
        assert ws.strip_extension("Idea.md") == "Idea"
        assert ws.strip_extension("Idea.MARKDOWN") == "Idea"
        assert ws.strip_extension("Idea.txt") == "Idea.txt"
        assert ws.strip_extension("v1.2") == "v1.2"

    def test_slugify_title(self, ws: NoteWorkspace):
        assert ws.slugify_title("Hello,  World!!") == "hello-world"
        assert ws.slugify_title("my_idea") == "my-idea"

    def test_slugify_custom_char(self):
        ws = NoteWorkspace(IndexConfig(slugify_char="_"))
        assert ws.slugify_title("Big Plan") == "big_plan"

    @pytest.mark.parametrize(
        "raw",
        [
            "[[Notes/My Idea.md|label]]",
            "[[My Idea]]",
            "my-idea.markdown",
            "My Idea",
        ],
    )
    def test_normalize(self, ws: NoteWorkspace, raw: str):
        assert ws.normalize_note_name_for_fuzzy_match(raw) == "my-idea"

    def test_fuzzy_match_extension(self, ws: NoteWorkspace):
        assert ws.note_names_fuzzy_match("[[Idea.md]]", "Idea")
        assert ws.note_names_fuzzy_match("[[Idea]]", "Idea.md")

    def test_fuzzy_match_path_vs_basename(self, ws: NoteWorkspace):
        assert ws.note_names_fuzzy_match("[[Notes/Idea]]", "Idea")
        assert not ws.note_names_fuzzy_match("[[Notes/Idea]]", "Notes")

    def test_fuzzy_match_distinct_names(self, ws: NoteWorkspace):
        assert not ws.note_names_fuzzy_match("[[Ideas]]", "Idea")

    def test_fuzzy_match_custom_separator(self):
        ws = NoteWorkspace(IndexConfig(wiki_link_separator="#"))
        assert ws.note_names_fuzzy_match("[[Idea#section]]", "Idea")
