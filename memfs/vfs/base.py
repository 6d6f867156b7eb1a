"""Base classes for the in-memory file system.

The tree is made of two kinds of nodes:
    - DirectoryNode: Holds sub-directories and files (cd into them)
    - FileNode: Leaf nodes with text content (cat them)

Ownership flows top-down from the root through each directory to its
children. The ``parent`` attribute is only a back-reference for
navigation; it is set by ``attach`` and cleared by ``detach``.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Iterator, List, Optional, Any


class NodeType(Enum):
    """Type of file system node."""
    DIRECTORY = "directory"
    FILE = "file"


class Node(ABC):
    """Base class for all file system nodes.

    Attributes:
        name: The name of this node (e.g., "docs", "a.txt")
        parent: Parent directory node (None for root or detached nodes)
        node_type: Type of node (directory or file)
    """

    def __init__(self, name: str, node_type: NodeType = NodeType.FILE):
        """Initialize a node.

        Args:
            name: Name of this node
            node_type: Type of node
        """
        self.name = name
        self.parent: Optional['DirectoryNode'] = None
        self.node_type = node_type

    @abstractmethod
    def get_info(self) -> Dict[str, Any]:
        """Get metadata about this node for display.

        Returns:
            Dict with keys like: type, name, path, size
        """
        pass

    def get_path(self) -> str:
        """Get absolute path to this node.

        Returns:
            Path like /docs/a.txt
        """
        if self.parent is None:
            return "/"

        parts = []
        node = self
        while node.parent is not None:
            parts.append(node.name)
            node = node.parent

        return "/" + "/".join(reversed(parts))

    def is_attached_to(self, root: 'DirectoryNode') -> bool:
        """Check whether this node is reachable from ``root`` via parent links."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node is root

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', path='{self.get_path()}')"


class DirectoryNode(Node):
    """A directory that owns sub-directories and files.

    Sub-directories and files are kept in two separate insertion-ordered
    mappings, so a directory and a file may share a name, and listings
    always show directories before files.
    """

    def __init__(self, name: str):
        super().__init__(name, NodeType.DIRECTORY)
        self._directories: Dict[str, DirectoryNode] = {}
        self._files: Dict[str, FileNode] = {}

    @property
    def directories(self) -> List['DirectoryNode']:
        return list(self._directories.values())

    @property
    def files(self) -> List['FileNode']:
        return list(self._files.values())

    def attach(self, child: Node) -> None:
        """Attach a node as a child of this directory.

        Sets the child's parent and appends it after existing siblings of
        the same kind. No uniqueness check is made here: attaching a node
        whose name is already taken replaces the previous entry, so callers
        check for conflicts first.

        Args:
            child: Node to attach
        """
        child.parent = self
        if isinstance(child, DirectoryNode):
            self._directories[child.name] = child
        else:
            self._files[child.name] = child

    def detach(self, child: Node) -> None:
        """Remove a child from this directory and clear its parent link.

        Args:
            child: Node to detach

        Raises:
            KeyError: If ``child`` is not a child of this directory
        """
        entries = self._directories if isinstance(child, DirectoryNode) else self._files
        if entries.get(child.name) is not child:
            raise KeyError(child.name)
        del entries[child.name]
        child.parent = None

    def get_directory(self, name: str) -> Optional['DirectoryNode']:
        """Get a direct sub-directory by name."""
        return self._directories.get(name)

    def get_file(self, name: str) -> Optional['FileNode']:
        """Get a direct child file by name."""
        return self._files.get(name)

    def find_file(self, name: str) -> Optional['FileNode']:
        """Look up a file anywhere in the subtree rooted at this directory.

        Own files are checked first, then each sub-directory's subtree in
        insertion order. The first match wins.

        Args:
            name: File name

        Returns:
            FileNode or None if no file with that name exists in the subtree
        """
        for directory in self.walk_directories():
            found = directory._files.get(name)
            if found is not None:
                return found

        return None

    def walk_directories(self) -> Iterator['DirectoryNode']:
        """Yield this directory and every directory below it, pre-order.

        Uses an explicit stack, so the depth of the tree is not bounded by
        the interpreter's recursion limit.
        """
        pending = [self]
        while pending:
            directory = pending.pop()
            yield directory
            # Reversed so the first sub-directory is visited next
            pending.extend(reversed(directory.directories))

    def walk_files(self) -> Iterator['FileNode']:
        """Yield every file in the subtree, pre-order.

        This directory's files come first, then each sub-directory's
        subtree in insertion order.
        """
        for directory in self.walk_directories():
            yield from directory.files

    def list_children(self) -> List[Node]:
        """List direct children, directories first."""
        return self.directories + self.files

    def list_names(self) -> List[str]:
        """List child names, directories suffixed with ``/`` and listed first."""
        return [f"{d}/" for d in self._directories] + list(self._files)

    def listing(self) -> str:
        """Space-joined listing as printed by ``ls``."""
        return " ".join(self.list_names())

    def get_info(self) -> Dict[str, Any]:
        """Get directory metadata.

        Returns:
            Dict with directory information
        """
        return {
            "type": "directory",
            "name": self.name,
            "children_count": len(self._directories) + len(self._files),
            "path": self.get_path(),
        }


class FileNode(Node):
    """A file node with text content.

    Content is stored as-is; no newline is ever added or stripped.
    """

    def __init__(self, name: str, content: str = ""):
        super().__init__(name, NodeType.FILE)
        self.content = content

    def read_content(self) -> str:
        return self.content

    def append(self, text: str) -> None:
        """Append text to the end of the current content."""
        self.content += text

    def clone(self) -> 'FileNode':
        """Create a detached, independent copy with the same name and content."""
        return FileNode(self.name, self.content)

    def get_info(self) -> Dict[str, Any]:
        """Get file metadata.

        Returns:
            Dict with file information
        """
        return {
            "type": "file",
            "name": self.name,
            "size": len(self.content.encode("utf-8")),
            "path": self.get_path(),
        }
