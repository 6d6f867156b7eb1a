"""
Tests for saving and restoring file system state.

Tests cover:
- Round trip of structure, content, listing order and current directory
- Rejection of malformed blobs
- File-backed helpers and their graceful failure
"""

import json

import pytest

from memfs.store import (
    PersistenceError,
    save,
    load,
    save_state,
    load_state,
)
from memfs.vfs import FileSystem


@pytest.fixture
def populated_fs():
    fs = FileSystem()
    fs.mkdir("zeta")
    fs.mkdir("alpha")
    fs.touch("empty")
    fs.echo("notes", "line one\nline two")
    fs.cd("alpha")
    fs.mkdir("inner")
    fs.echo("ünïcode.txt", "héllo [bold]")
    fs.cd("inner")
    return fs


ROOT = {"name": "/"}


def state(directories=None, files=(), cwd=0):
    """Build a hand-written state blob."""
    return json.dumps({
        "format": "memfs",
        "version": 1,
        "cwd": cwd,
        "directories": [ROOT] if directories is None else directories,
        "files": list(files),
    }).encode()


def snapshot(fs):
    """Describe a tree as nested (listing, contents) for comparison."""
    def describe(directory):
        return (
            directory.list_names(),
            [f.content for f in directory.files],
            [describe(d) for d in directory.directories],
        )
    return describe(fs.root)


class TestRoundTrip:
    """Test that load(save(fs)) is indistinguishable from fs."""

    def test_structure_and_content(self, populated_fs):
        restored = load(save(populated_fs))

        assert snapshot(restored) == snapshot(populated_fs)

    def test_listing_order_preserved(self, populated_fs):
        restored = load(save(populated_fs))

        assert restored.ls("/") == ["zeta/", "alpha/", "empty", "notes"]

    def test_current_directory_preserved(self, populated_fs):
        restored = load(save(populated_fs))

        assert restored.pwd() == "/alpha/inner"
        assert restored.current.is_attached_to(restored.root)

    def test_restored_tree_is_independent(self, populated_fs):
        restored = load(save(populated_fs))
        restored.cd("/")
        restored.echo("notes", "!")

        assert populated_fs.resolver.resolve_file("/notes", populated_fs.root).content == (
            "line one\nline two"
        )

    def test_parent_links_rebuilt(self, populated_fs):
        restored = load(save(populated_fs))

        for file in restored.root.walk_files():
            assert file.is_attached_to(restored.root)

    def test_empty_file_system(self):
        restored = load(save(FileSystem()))

        assert restored.ls() == []
        assert restored.current is restored.root

    def test_blob_is_bytes(self, populated_fs):
        assert isinstance(save(populated_fs), bytes)

    def test_hand_written_state(self):
        fs = load(state(
            directories=[ROOT, {"name": "docs", "parent": 0}],
            files=[{"name": "a.txt", "content": "hi", "directory": 1}],
            cwd=1,
        ))

        assert fs.pwd() == "/docs"
        assert fs.cat("a.txt") == "hi"

    def test_deep_tree(self):
        fs = FileSystem()
        for _ in range(1500):
            fs.mkdir("d")
            fs.cd("d")
        fs.echo("f", "x")

        restored = load(save(fs))

        assert restored.pwd() == "/d" * 1500
        assert restored.current.files[0].content == "x"
        assert restored.count() == (1500, 1)


class TestMalformedBlobs:
    """Test that invalid input raises PersistenceError."""

    @pytest.mark.parametrize("blob", [
        b"",
        b"\xff\xfe\x00",
        b"not json",
        b"[]",
        json.dumps({"format": "other", "version": 1}).encode(),
        json.dumps({"format": "memfs", "version": 99, "root": {}}).encode(),
        json.dumps({"format": "memfs", "version": 1}).encode(),
        state(files=[{"name": 3, "content": "", "directory": 0}]),
        state(directories=["x"]),
        state(directories=[]),
        state(cwd=5),
        state(cwd=True),
        state(directories=[ROOT, {"name": "a", "parent": 1}]),
        state(files=[{"name": "f", "content": "", "directory": 3}]),
        state(files=[{"name": "f", "content": None, "directory": 0}]),
    ])
    def test_invalid_blob(self, blob):
        with pytest.raises(PersistenceError):
            load(blob)

    @pytest.mark.parametrize("blob", [
        state(files=[{"name": "a", "content": "", "directory": 0}] * 2),
        state(directories=[ROOT, {"name": "a", "parent": 0}, {"name": "a", "parent": 0}]),
    ])
    def test_duplicate_names_rejected(self, blob):
        with pytest.raises(PersistenceError):
            load(blob)

    @pytest.mark.parametrize("name", ["a/b", "", ".", ".."])
    def test_unaddressable_names_rejected(self, name):
        with pytest.raises(PersistenceError):
            load(state(directories=[ROOT, {"name": name, "parent": 0}]))
        with pytest.raises(PersistenceError):
            load(state(files=[{"name": name, "content": "", "directory": 0}]))

    def test_deeply_nested_json_rejected(self):
        blob = (
            b'{"format": "memfs", "version": 1, "directories": '
            + b"[" * 100000 + b"]" * 100000 + b"}"
        )

        with pytest.raises(PersistenceError):
            load(blob)


class TestStateFiles:
    """Test save_state/load_state."""

    def test_save_and_load_state(self, populated_fs, tmp_path):
        path = save_state(populated_fs, tmp_path / "nested" / "state.json")

        assert path.exists()
        restored = load_state(path)
        assert restored is not None
        assert snapshot(restored) == snapshot(populated_fs)

    def test_load_missing_file_returns_none(self, tmp_path):
        assert load_state(tmp_path / "missing.json") is None

    def test_load_corrupt_file_returns_none(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(b"garbage")

        assert load_state(path) is None

    def test_save_state_failure(self, populated_fs, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(PersistenceError):
            save_state(populated_fs, blocker / "state.json")

    def test_load_deeply_nested_file_returns_none(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(
            b'{"format": "memfs", "version": 1, "directories": '
            + b"[" * 100000 + b"]" * 100000 + b"}"
        )

        assert load_state(path) is None
