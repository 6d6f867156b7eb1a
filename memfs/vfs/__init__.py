"""In-memory hierarchical file system.

The tree holds directories and files entirely in memory and is navigated
and modified with familiar shell operations.

Architecture:

    ```
    /                           # Root (DirectoryNode named "/")
    ├── docs/                   # DirectoryNode
    │   ├── notes/              # DirectoryNode
    │   │   └── todo.txt        # FileNode
    │   └── a.txt               # FileNode
    └── readme                  # FileNode
    ```

Node Types:

    - Node: Base class for all entries
    - DirectoryNode: Owns sub-directories and files (cd into them)
    - FileNode: Leaf nodes with text content (cat them)

Path Resolution:

    The PathResolver handles navigation:
    - Absolute paths: /docs/notes
    - Relative paths: ../other, ./notes
    - Special: /, ., ..
    - Direct-child file lookup (cp, mv, rm) and subtree file lookup
      (cat, echo)
    - Tab completion support

Usage Example:

    ```python
    from memfs.vfs import FileSystem

    fs = FileSystem()
    fs.mkdir("docs")
    fs.cd("docs")
    fs.echo("a.txt", "hello ")
    fs.echo("a.txt", "world")
    print(fs.cat("a.txt"))   # hello world

    fs.cd("..")
    print(fs.ls())           # ['docs/']
    ```
"""

from memfs.vfs.base import (
    Node,
    DirectoryNode,
    FileNode,
    NodeType,
)
from memfs.vfs.resolver import (
    PathResolver,
    PathError,
    NotADirectoryError,
    NotFoundError,
    NameConflictError,
    InvalidNameError,
)
from memfs.vfs.filesystem import FileSystem, RemoveResult

__all__ = [
    # Main entry point
    "FileSystem",
    "RemoveResult",
    # Core classes
    "Node",
    "DirectoryNode",
    "FileNode",
    "NodeType",
    # Path resolution
    "PathResolver",
    "PathError",
    "NotADirectoryError",
    "NotFoundError",
    "NameConflictError",
    "InvalidNameError",
]
