"""Tests for directory listing helpers."""

from pathlib import Path

import pytest

from pickline.config.schema import SourceConfig
from pickline.providers.listing import read_entries, walk_files


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    for rel in ["b.txt", "a/one.py", "a/two.py", "node_modules/pkg/index.js", ".hidden/x", ".env"]:
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x", encoding="utf-8")
    return tmp_path


class TestReadEntries:
    def test_sorted_with_dir_suffix(self, tree: Path) -> None:
        assert read_entries(tree) == [".env", ".hidden/", "a/", "b.txt", "node_modules/"]

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_entries(tmp_path / "missing")


class TestWalkFiles:
    def test_skips_hidden_and_configured_dirs(self, tree: Path) -> None:
        assert walk_files(tree) == ["b.txt", "a/one.py", "a/two.py"]

    def test_show_hidden(self, tree: Path) -> None:
        config = SourceConfig(show_hidden=True, skip_dirs=[])
        files = walk_files(tree, config)
        assert ".env" in files
        assert ".hidden/x" in files
        assert "node_modules/pkg/index.js" in files

    def test_max_files(self, tree: Path) -> None:
        assert walk_files(tree, SourceConfig(max_files=2)) == ["b.txt", "a/one.py"]
