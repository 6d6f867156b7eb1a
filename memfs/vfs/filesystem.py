"""Main FileSystem class - the operation layer over the node tree."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from memfs.vfs.base import DirectoryNode, FileNode, Node
from memfs.vfs.resolver import (
    PathResolver,
    NotFoundError,
    NotADirectoryError,
    NameConflictError,
    InvalidNameError,
    PathError,
)

logger = logging.getLogger(__name__)

ROOT_NAME = "/"


@dataclass
class RemoveResult:
    """Outcome of ``FileSystem.rm``."""
    removed: Node
    files_removed: int = 0
    directories_removed: int = 0
    cwd_reset: bool = False


class FileSystem:
    """In-memory hierarchical file system.

    This is the main entry point. It owns the root directory, a resolver
    for path navigation and the current working directory. Every
    operation either completes or raises a ``PathError`` subclass without
    touching the tree.

    Usage:
        >>> fs = FileSystem()
        >>> fs.mkdir("docs")
        >>> fs.cd("docs")
        >>> fs.echo("a.txt", "hello ")
        >>> fs.echo("a.txt", "world")
        >>> fs.cat("a.txt")
        'hello world'
    """

    def __init__(self, root: Optional[DirectoryNode] = None):
        """Initialize a file system.

        Args:
            root: Existing root directory (e.g. restored from a saved
                state). A fresh empty root is created when omitted.
        """
        self.root = root if root is not None else DirectoryNode(ROOT_NAME)
        self.resolver = PathResolver(self.root)
        self.current = self.root  # Current working directory

    # Navigation

    def cd(self, path: str) -> DirectoryNode:
        """Change current directory.

        Args:
            path: Path to navigate to ("/", "..", absolute or relative)

        Returns:
            The new current directory

        Raises:
            NotFoundError: If the path does not resolve to a directory
        """
        new_dir = self.resolver.resolve_directory(path, self.current)
        if new_dir is None:
            raise NotFoundError("invalid path")

        self.current = new_dir
        return new_dir

    def pwd(self) -> str:
        """Get current working directory path."""
        return self.current.get_path()

    def ls(self, path: Optional[str] = None) -> List[str]:
        """List the names in a directory.

        Args:
            path: Directory to list; the current directory when empty

        Returns:
            Names with directories first (suffixed "/"), then files

        Raises:
            NotADirectoryError: If the path names a file
            NotFoundError: If the path does not resolve
        """
        return self.get_directory(path).list_names()

    def get_directory(self, path: Optional[str] = None) -> DirectoryNode:
        """Resolve a directory for listing.

        Args:
            path: Directory path; the current directory when empty
        """
        if not path:
            return self.current

        directory = self.resolver.resolve_directory(path, self.current)
        if directory is not None:
            return directory

        if self.resolver.resolve_file(path, self.current) is not None:
            raise NotADirectoryError(f"not a directory: {path}")
        raise NotFoundError("invalid path")

    # Creation

    def mkdir(self, name: str) -> DirectoryNode:
        """Create a directory under the current directory.

        Args:
            name: Name of the new directory

        Raises:
            InvalidNameError: If the name is not a plain component
            NameConflictError: If a sibling directory has the same name
        """
        self.check_name(name)
        if self.current.get_directory(name) is not None:
            raise NameConflictError(f"directory exists: {name}")

        directory = DirectoryNode(name)
        self.current.attach(directory)
        logger.debug(f"mkdir {directory.get_path()}")
        return directory

    def touch(self, name: str) -> FileNode:
        """Create an empty file under the current directory.

        Args:
            name: Name of the new file

        Raises:
            InvalidNameError: If the name is not a plain component
            NameConflictError: If a sibling file has the same name
        """
        self.check_name(name)
        if self.current.get_file(name) is not None:
            raise NameConflictError(f"file exists: {name}")

        file = FileNode(name)
        self.current.attach(file)
        logger.debug(f"touch {file.get_path()}")
        return file

    # Content

    def echo(self, name: str, content: str) -> FileNode:
        """Append content to a file, creating it if needed.

        The file is looked up anywhere in the current directory's subtree.
        When no file of that name exists it is created directly under the
        current directory. Existing content is never truncated.

        Args:
            name: File name
            content: Text to append

        Returns:
            The written file
        """
        file = self.resolver.find_file(name, self.current)
        if file is None:
            self.check_name(name)
            file = FileNode(name)
            self.current.attach(file)
            logger.debug(f"echo created {file.get_path()}")

        file.append(content)
        return file

    def cat(self, name: str) -> str:
        """Read a file found anywhere in the current directory's subtree.

        Raises:
            NotFoundError: If no such file exists
        """
        file = self.resolver.find_file(name, self.current)
        if file is None:
            raise NotFoundError("file not found")

        return file.read_content()

    def grep(self, query: str) -> List[Tuple[str, str]]:
        """Search the content of every file under the current directory.

        Files are visited pre-order: a directory's own files first, then
        its sub-directories in insertion order.

        Args:
            query: Substring to look for

        Returns:
            List of (file_name, content) tuples for every matching file;
            empty when nothing matched
        """
        return [
            (file.name, file.content)
            for file in self.current.walk_files()
            if query in file.content
        ]

    # Copy / move / remove

    def cp(self, source_path: str, dest_path: str) -> FileNode:
        """Copy a file into another directory.

        The source must be a direct child of the directory its path names.
        The copy shares nothing with the original.

        Args:
            source_path: Path of the file to copy
            dest_path: Destination directory

        Returns:
            The new copy

        Raises:
            NotFoundError: If the source file does not resolve
            NotADirectoryError: If the destination names a file
            NameConflictError: If the destination already holds that name
        """
        source = self._source_file(source_path)
        destination = self._destination_directory(dest_path)

        if destination.get_file(source.name) is not None:
            raise NameConflictError(f"file exists: {source.name} in {destination.get_path()}")

        copy = source.clone()
        destination.attach(copy)
        logger.debug(f"cp {source.get_path()} -> {copy.get_path()}")
        return copy

    def mv(self, source_path: str, dest_path: str) -> FileNode:
        """Move a file into another directory.

        The same node is relocated; moving into its own directory leaves
        the tree unchanged.

        Raises:
            NotFoundError: If the source file does not resolve
            NotADirectoryError: If the destination names a file
            NameConflictError: If the destination already holds that name
        """
        source = self._source_file(source_path)
        destination = self._destination_directory(dest_path)

        if source.parent is destination:
            return source

        if destination.get_file(source.name) is not None:
            raise NameConflictError(f"file exists: {source.name} in {destination.get_path()}")

        old_path = source.get_path()
        source.parent.detach(source)
        destination.attach(source)
        logger.debug(f"mv {old_path} -> {source.get_path()}")
        return source

    def rm(self, path: str) -> RemoveResult:
        """Remove a file or a directory with everything below it.

        A file (direct child of its directory) is tried first, then a
        directory. If the current directory was inside a removed subtree it
        is reset to root.

        Raises:
            NotFoundError: If neither a file nor a directory resolves
            PathError: If asked to remove the root directory
        """
        file = self.resolver.resolve_file(path, self.current)
        if file is not None:
            file.parent.detach(file)
            logger.debug(f"rm {path}")
            return RemoveResult(removed=file, files_removed=1)

        directory = self.resolver.resolve_directory(path, self.current)
        if directory is None:
            raise NotFoundError("file or directory not found")
        if directory is self.root:
            raise PathError("cannot remove root directory")

        result = RemoveResult(removed=directory)
        self._remove_directory(directory, result)

        if not self.current.is_attached_to(self.root):
            logger.warning(
                f"Current directory was removed with '{path}'; returning to {ROOT_NAME}"
            )
            self.current = self.root
            result.cwd_reset = True

        return result

    def count(self) -> Tuple[int, int]:
        """Count directories (root excluded) and files in the whole tree."""
        directories = sum(1 for _ in self.root.walk_directories()) - 1
        files = sum(1 for _ in self.root.walk_files())
        return directories, files

    # Helpers

    def complete(self, partial: str) -> List[str]:
        """Get tab completion candidates.

        Args:
            partial: Partial path

        Returns:
            List of completion candidates
        """
        return self.resolver.complete_path(partial, self.current)

    def _remove_directory(self, directory: DirectoryNode, result: RemoveResult) -> None:
        """Remove files, then sub-directories, then the directory itself."""
        # Reversed pre-order puts every directory after all of its descendants
        for node in reversed(list(directory.walk_directories())):
            for file in node.files:
                node.detach(file)
                result.files_removed += 1

            path = node.get_path()
            node.parent.detach(node)
            result.directories_removed += 1
            logger.debug(f"rm {path}")

    def _source_file(self, path: str) -> FileNode:
        file = self.resolver.resolve_file(path, self.current)
        if file is None:
            raise NotFoundError("file not found")
        return file

    def _destination_directory(self, path: str) -> DirectoryNode:
        directory = self.resolver.resolve_directory(path, self.current)
        if directory is not None:
            return directory

        if self.resolver.resolve_file(path, self.current) is not None:
            raise NotADirectoryError(f"not a directory: {path}")
        raise NotFoundError("invalid destination path")

    @staticmethod
    def check_name(name: str) -> None:
        """Reject names that no path could address.

        Raises:
            InvalidNameError: If the name is empty, "." or "..", or contains "/"
        """
        if not name or name in (".", "..") or "/" in name:
            raise InvalidNameError(f"invalid name: '{name}'")
