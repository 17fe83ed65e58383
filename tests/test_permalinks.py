"""Tests for PermalinkIndex."""

from pathlib import Path

import pytest

from pickaxe.core.discovery import VaultDiscovery
from pickaxe.core.models import DiscoveryError
from pickaxe.core.permalinks import PermalinkIndex, build_index, path_to_permalink


class TestPathToPermalink:
    """Tests for path_to_permalink."""

    def test_strips_suffix(self):
        assert path_to_permalink(Path("/v/notes/A Note.md"), Path("/v")) == "/notes/A Note"

    def test_top_level(self):
        assert path_to_permalink(Path("/v/Note.md"), Path("/v")) == "/Note"

    def test_index_collapses(self):
        assert path_to_permalink(Path("/v/guides/index.md"), Path("/v")) == "/guides"
        assert path_to_permalink(Path("/v/index.md"), Path("/v")) == "/"


class TestPermalinkIndex:
    """Tests for building and querying the index."""

    def test_resolve_short_name(self, index):
        assert index.resolve("Setup") == "/guides/Setup"

    def test_resolve_exact_path(self, index):
        assert index.resolve("guides/Setup") == "/guides/Setup"
        assert index.resolve("/Glossary") == "/Glossary"

    def test_resolve_path_suffix(self):
        index = PermalinkIndex.from_permalinks(["/a/b/c/Note"])
        assert index.resolve("c/Note") == "/a/b/c/Note"

    def test_resolve_strips_md_extension(self, index):
        assert index.resolve("Setup.md") == "/guides/Setup"

    def test_resolve_missing(self, index):
        assert index.resolve("Nonexistent") is None
        assert index.resolve("") is None

    def test_ambiguous_name_prefers_first_sorted(self):
        index = PermalinkIndex.from_permalinks(["/z/Note", "/a/Note"])
        assert index.resolve("Note") == "/a/Note"

    def test_len_and_contains(self, index):
        assert len(index) == 3
        assert "/Glossary" in index
        assert "/Missing" not in index

    def test_is_immutable(self, index):
        with pytest.raises(TypeError):
            index.by_name["New"] = "/New"
        with pytest.raises(AttributeError):
            index.permalinks = ()

    def test_build_from_discovery(self, notes_dir):
        index = PermalinkIndex.build(VaultDiscovery(notes_dir))
        assert index.resolve("1 - Intro") == "/guides/1 - Intro"
        assert index.resolve("README") is None

    def test_build_index_missing_root(self, tmp_path):
        with pytest.raises(DiscoveryError):
            build_index(tmp_path / "missing")
