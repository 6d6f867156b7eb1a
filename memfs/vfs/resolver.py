"""Path resolution for the in-memory file system.

Handles path parsing and navigation (cd, ls, cp, mv, rm semantics).
Resolution never mutates the tree.
"""

from pathlib import PurePosixPath
from typing import List, Optional

from memfs.vfs.base import DirectoryNode, FileNode


class PathResolver:
    """Resolves paths against the tree.

    It handles:
    - Absolute paths: /docs/notes
    - Relative paths: notes, ../other, ./files
    - Special paths: /, .., .

    Two file lookup strategies exist side by side:
    - ``resolve_file``: the last component must be a direct child of the
      directory named by the preceding components (cp, mv, rm).
    - ``find_file``: the name is searched in the whole subtree of the base
      directory (cat, echo).
    """

    def __init__(self, root: DirectoryNode):
        """Initialize path resolver.

        Args:
            root: Root node of the tree
        """
        self.root = root

    def resolve_directory(
        self,
        path: str,
        base: DirectoryNode,
    ) -> Optional[DirectoryNode]:
        """Resolve a path to a directory node.

        Args:
            path: Path to resolve (absolute or relative)
            base: Directory relative paths start from

        Returns:
            Directory node or None if any component does not resolve
        """
        if path == "/":
            return self.root
        if path == "..":
            return base.parent

        start = self.root if path.startswith("/") else base
        return self._walk(start, self._parse_path(path))

    def resolve_file(
        self,
        path: str,
        base: DirectoryNode,
    ) -> Optional[FileNode]:
        """Resolve a path to a file that is a direct child of its directory.

        The final component is the file name; everything before it is a
        directory path resolved like ``resolve_directory``.

        Args:
            path: Path to resolve, e.g. "docs/a.txt" or "/a.txt"
            base: Directory relative paths start from

        Returns:
            File node or None
        """
        parts = self._parse_path(path)
        if not parts:
            return None

        start = self.root if path.startswith("/") else base
        directory = self._walk(start, parts[:-1])
        if directory is None:
            return None

        return directory.get_file(parts[-1])

    def find_file(self, name: str, base: DirectoryNode) -> Optional[FileNode]:
        """Search the whole subtree of ``base`` for a file by name.

        Args:
            name: Exact file name
            base: Directory whose subtree is searched

        Returns:
            First matching file (pre-order) or None
        """
        return base.find_file(name)

    def complete_path(
        self,
        partial: str,
        base: DirectoryNode,
    ) -> List[str]:
        """Get completion candidates for a partial path.

        Used for tab completion.

        Args:
            partial: Partial path to complete
            base: Current working directory

        Returns:
            List of completion candidates
        """
        # Split into directory part and name part
        if "/" in partial:
            dir_part, name_part = partial.rsplit("/", 1)
            if partial.startswith("/"):
                dir_part = dir_part or "/"
        else:
            dir_part = ""
            name_part = partial

        if dir_part:
            dir_node = self.resolve_directory(dir_part, base)
        else:
            dir_node = base

        if dir_node is None:
            return []

        if dir_part == "/":
            prefix = "/"
        elif dir_part:
            prefix = dir_part + "/"
        else:
            prefix = ""

        candidates = []
        for child in dir_node.list_children():
            if child.name.startswith(name_part):
                candidate = prefix + child.name
                # Add trailing slash for directories
                if isinstance(child, DirectoryNode):
                    candidate += "/"
                candidates.append(candidate)

        return candidates

    def _walk(self, start: DirectoryNode, parts: List[str]) -> Optional[DirectoryNode]:
        """Descend from ``start`` through sub-directories named by ``parts``."""
        node = start
        for part in parts:
            if part == ".":
                continue
            elif part == "..":
                if node.parent is None:
                    # No parent above root
                    return None
                node = node.parent
            else:
                node = node.get_directory(part)
                if node is None:
                    return None

        return node

    def _parse_path(self, path: str) -> List[str]:
        """Parse a path into parts.

        Empty components are dropped, so "//a//b/" yields ["a", "b"].

        Args:
            path: Path to parse

        Returns:
            List of path components
        """
        parts = PurePosixPath(path).parts

        # Drop the anchor ("/" or "//")
        if parts and not parts[0].strip("/"):
            parts = parts[1:]

        return list(parts)


class PathError(Exception):
    """Error resolving or mutating a path."""
    pass


class NotADirectoryError(PathError):
    """Path resolves to something that is not a directory."""
    pass


class NotFoundError(PathError):
    """Path does not exist."""
    pass


class NameConflictError(PathError):
    """A sibling of the same kind already has this name."""
    pass


class InvalidNameError(PathError):
    """Name cannot be used for a directory or file."""
    pass
