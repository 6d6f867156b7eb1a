"""
Tests for the FileSystem operation layer.

Tests cover:
- mkdir/cd/ls/touch navigation and creation
- echo/cat append semantics and subtree lookup
- grep traversal and matching
- cp/mv/rm tree consistency
- Failure cases leave the tree untouched
"""

import pytest

from memfs.vfs import (
    FileSystem,
    NotFoundError,
    NotADirectoryError,
    NameConflictError,
    InvalidNameError,
    PathError,
)


@pytest.fixture
def fs():
    return FileSystem()


@pytest.fixture
def populated_fs(fs):
    """
    /
    ├── docs/
    │   ├── notes/
    │   │   └── todo.txt   "buy milk"
    │   └── a.txt          "hello world"
    ├── archive/
    └── readme             "read me first"
    """
    fs.mkdir("docs")
    fs.mkdir("archive")
    fs.echo("readme", "read me first")
    fs.cd("docs")
    fs.echo("a.txt", "hello world")
    fs.mkdir("notes")
    fs.cd("notes")
    fs.echo("todo.txt", "buy milk")
    fs.cd("/")
    return fs


class TestNavigation:
    """Test mkdir, cd, pwd and ls."""

    def test_starts_at_root(self, fs):
        assert fs.current is fs.root
        assert fs.root.name == "/"
        assert fs.pwd() == "/"

    def test_mkdir_is_resolvable(self, fs):
        created = fs.mkdir("docs")

        assert fs.resolver.resolve_directory("docs", fs.root) is created
        assert created.parent is fs.root

    def test_cd_and_back(self, fs):
        fs.mkdir("docs")
        fs.cd("docs")
        assert fs.pwd() == "/docs"

        fs.cd("..")
        assert fs.current is fs.root

    def test_cd_parent_from_root_fails(self, fs):
        with pytest.raises(NotFoundError):
            fs.cd("..")
        assert fs.current is fs.root

    def test_cd_invalid_path_keeps_current(self, populated_fs):
        populated_fs.cd("docs")

        with pytest.raises(NotFoundError, match="invalid path"):
            populated_fs.cd("missing/dir")
        assert populated_fs.pwd() == "/docs"

    def test_cd_absolute_and_root(self, populated_fs):
        populated_fs.cd("/docs/notes")
        assert populated_fs.pwd() == "/docs/notes"

        populated_fs.cd("/")
        assert populated_fs.pwd() == "/"

    def test_cd_into_file_fails(self, populated_fs):
        with pytest.raises(NotFoundError):
            populated_fs.cd("readme")

    def test_ls_current_root_and_path(self, populated_fs):
        populated_fs.cd("docs")

        assert populated_fs.ls() == ["notes/", "a.txt"]
        assert populated_fs.ls("") == ["notes/", "a.txt"]
        assert populated_fs.ls("/") == ["docs/", "archive/", "readme"]
        assert populated_fs.ls("notes") == ["todo.txt"]

    def test_ls_missing_path(self, populated_fs):
        with pytest.raises(NotFoundError):
            populated_fs.ls("nowhere")

    def test_ls_file_path(self, populated_fs):
        with pytest.raises(NotADirectoryError):
            populated_fs.ls("readme")

    def test_mkdir_duplicate_rejected(self, fs):
        fs.mkdir("docs")

        with pytest.raises(NameConflictError):
            fs.mkdir("docs")
        assert fs.ls() == ["docs/"]

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b"])
    def test_mkdir_invalid_name(self, fs, name):
        with pytest.raises(InvalidNameError):
            fs.mkdir(name)
        assert fs.ls() == []

    def test_directory_and_file_may_share_name(self, fs):
        fs.mkdir("notes")
        fs.touch("notes")

        assert fs.ls() == ["notes/", "notes"]


class TestFileContent:
    """Test touch, echo and cat."""

    def test_touch_creates_empty_file(self, fs):
        fs.touch("a.txt")

        assert fs.cat("a.txt") == ""
        assert fs.ls() == ["a.txt"]

    def test_touch_duplicate_rejected(self, fs):
        fs.touch("a.txt")
        fs.echo("a.txt", "keep")

        with pytest.raises(NameConflictError):
            fs.touch("a.txt")
        assert fs.cat("a.txt") == "keep"

    def test_echo_appends(self, fs):
        fs.echo("f", "a")
        fs.echo("f", "b")

        assert fs.cat("f") == "ab"

    def test_echo_keeps_content_verbatim(self, fs):
        fs.echo("f", "line one\n")
        fs.echo("f", "  two  ")

        assert fs.cat("f") == "line one\n  two  "

    def test_echo_finds_file_in_subtree(self, populated_fs):
        populated_fs.echo("todo.txt", ", eggs")

        assert populated_fs.ls() == ["docs/", "archive/", "readme"]
        assert populated_fs.resolver.resolve_file("/docs/notes/todo.txt", populated_fs.root).content == (
            "buy milk, eggs"
        )

    def test_echo_creates_in_current_directory(self, populated_fs):
        populated_fs.cd("archive")
        populated_fs.echo("new.txt", "x")

        assert populated_fs.ls() == ["new.txt"]

    def test_echo_invalid_name(self, fs):
        with pytest.raises(InvalidNameError):
            fs.echo("a/b", "x")

    def test_cat_searches_subtree(self, populated_fs):
        assert populated_fs.cat("todo.txt") == "buy milk"

    def test_cat_does_not_search_above_current(self, populated_fs):
        populated_fs.cd("archive")

        with pytest.raises(NotFoundError, match="file not found"):
            populated_fs.cat("readme")


class TestGrep:
    """Test grep traversal."""

    def test_grep_matches_across_subtree(self, populated_fs):
        populated_fs.echo("readme", " hello")

        assert populated_fs.grep("hello") == [
            ("readme", "read me first hello"),
            ("a.txt", "hello world"),
        ]

    def test_grep_pre_order(self, populated_fs):
        populated_fs.cd("docs")

        assert [name for name, _ in populated_fs.grep("")] == ["a.txt", "todo.txt"]

    def test_grep_no_match(self, populated_fs):
        assert populated_fs.grep("zzz") == []

    def test_grep_only_below_current(self, populated_fs):
        populated_fs.cd("docs/notes")

        assert populated_fs.grep("hello") == []


class TestCopy:
    """Test cp."""

    def test_cp_creates_independent_copy(self, populated_fs):
        populated_fs.cd("docs")
        copy = populated_fs.cp("a.txt", "/archive")
        copy.append("!")

        assert populated_fs.cat("a.txt") == "hello world"
        assert copy.get_path() == "/archive/a.txt"
        assert copy.content == "hello world!"

    def test_cp_source_must_be_direct_child(self, populated_fs):
        with pytest.raises(NotFoundError):
            populated_fs.cp("a.txt", "archive")
        assert populated_fs.ls("archive") == []

    def test_cp_with_source_path(self, populated_fs):
        populated_fs.cp("docs/notes/todo.txt", "archive")

        assert populated_fs.ls("archive") == ["todo.txt"]
        assert populated_fs.ls("docs/notes") == ["todo.txt"]

    def test_cp_missing_destination(self, populated_fs):
        with pytest.raises(NotFoundError, match="invalid destination path"):
            populated_fs.cp("readme", "missing")

    def test_cp_destination_is_file(self, populated_fs):
        with pytest.raises(NotADirectoryError):
            populated_fs.cp("readme", "docs/a.txt")

    def test_cp_name_conflict(self, populated_fs):
        populated_fs.cp("readme", "archive")

        with pytest.raises(NameConflictError):
            populated_fs.cp("readme", "archive")
        assert populated_fs.ls("archive") == ["readme"]


class TestMove:
    """Test mv."""

    def test_mv_relocates_same_node(self, populated_fs):
        before = populated_fs.count()
        node = populated_fs.resolver.resolve_file("docs/a.txt", populated_fs.root)

        moved = populated_fs.mv("docs/a.txt", "archive")

        assert moved is node
        assert node.parent.get_path() == "/archive"
        assert populated_fs.ls("docs") == ["notes/"]
        assert populated_fs.ls("archive") == ["a.txt"]
        assert node.content == "hello world"
        assert populated_fs.count() == before

    def test_mv_from_other_directory(self, populated_fs):
        populated_fs.cd("archive")
        populated_fs.mv("/docs/notes/todo.txt", ".")

        assert populated_fs.ls() == ["todo.txt"]
        assert populated_fs.ls("/docs/notes") == []

    def test_mv_same_directory_is_noop(self, populated_fs):
        populated_fs.cd("docs")
        populated_fs.mv("a.txt", ".")

        assert populated_fs.ls() == ["notes/", "a.txt"]
        assert populated_fs.cat("a.txt") == "hello world"

    def test_mv_missing_source(self, populated_fs):
        with pytest.raises(NotFoundError):
            populated_fs.mv("nope", "archive")

    def test_mv_missing_destination_keeps_file(self, populated_fs):
        with pytest.raises(NotFoundError):
            populated_fs.mv("readme", "nowhere")
        assert populated_fs.ls() == ["docs/", "archive/", "readme"]

    def test_mv_name_conflict(self, populated_fs):
        populated_fs.cp("readme", "archive")

        with pytest.raises(NameConflictError):
            populated_fs.mv("readme", "archive")
        assert "readme" in populated_fs.ls()


class TestRemove:
    """Test rm."""

    def test_rm_file(self, populated_fs):
        file = populated_fs.resolver.resolve_file("readme", populated_fs.root)
        result = populated_fs.rm("readme")

        assert result.removed is file
        assert result.files_removed == 1
        assert file.parent is None
        assert populated_fs.ls() == ["docs/", "archive/"]

    def test_rm_file_by_path(self, populated_fs):
        populated_fs.rm("docs/notes/todo.txt")

        assert populated_fs.ls("docs/notes") == []

    def test_rm_directory_recursively(self, populated_fs):
        result = populated_fs.rm("docs")

        assert result.files_removed == 2
        assert result.directories_removed == 2
        assert populated_fs.resolver.resolve_directory("docs", populated_fs.root) is None
        assert [f.name for f in populated_fs.root.walk_files()] == ["readme"]
        assert populated_fs.count() == (1, 1)

    def test_rm_prefers_file_over_directory(self, fs):
        fs.mkdir("notes")
        fs.touch("notes")

        fs.rm("notes")

        assert fs.ls() == ["notes/"]

    def test_rm_missing(self, populated_fs):
        with pytest.raises(NotFoundError, match="file or directory not found"):
            populated_fs.rm("ghost")

    def test_rm_root_refused(self, populated_fs):
        with pytest.raises(PathError):
            populated_fs.rm("/")
        assert populated_fs.count() == (3, 3)

    def test_rm_ancestor_of_current_resets_to_root(self, populated_fs):
        populated_fs.cd("docs/notes")

        result = populated_fs.rm("/docs")

        assert result.cwd_reset is True
        assert populated_fs.current is populated_fs.root

    def test_rm_sibling_keeps_current(self, populated_fs):
        populated_fs.cd("docs")

        result = populated_fs.rm("/archive")

        assert result.cwd_reset is False
        assert populated_fs.pwd() == "/docs"


class TestScenario:
    """End-to-end scenario from a fresh file system."""

    def test_docs_scenario(self, fs):
        fs.mkdir("docs")
        fs.cd("docs")
        fs.touch("a.txt")
        fs.echo("a.txt", "hello ")
        fs.echo("a.txt", "world")

        assert fs.cat("a.txt") == "hello world"

        fs.cd("..")
        assert "docs/" in fs.ls()
        assert fs.grep("hello") == [("a.txt", "hello world")]
        assert fs.grep("zzz") == []

    def test_independent_instances(self):
        first = FileSystem()
        second = FileSystem()
        first.mkdir("only-here")

        assert second.ls() == []


class TestDeepTree:
    """Operations on a tree deeper than the interpreter's recursion limit."""

    DEPTH = 1500

    @pytest.fixture
    def deep_fs(self, fs):
        for _ in range(self.DEPTH):
            fs.mkdir("d")
            fs.cd("d")
        fs.echo("bottom.txt", "needle")
        fs.cd("/")
        return fs

    def test_cat_and_echo_search_whole_depth(self, deep_fs):
        deep_fs.echo("bottom.txt", "!")

        assert deep_fs.cat("bottom.txt") == "needle!"

    def test_grep(self, deep_fs):
        assert deep_fs.grep("needle") == [("bottom.txt", "needle")]

    def test_rm(self, deep_fs):
        result = deep_fs.rm("d")

        assert result.directories_removed == self.DEPTH
        assert result.files_removed == 1
        assert deep_fs.count() == (0, 0)
