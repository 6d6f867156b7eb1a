"""Saving and restoring a whole file system.

A saved state is a single opaque blob: a UTF-8 encoded JSON document
holding the complete tree (structure, file contents, listing order) and
the current directory position.

The tree is stored flat so that its depth never turns into JSON nesting.
Directories are listed pre-order, root first; every other directory names
the index of its parent, which always comes earlier in the list. Files
name the index of their directory. Siblings keep their listing order.

    {
        "format": "memfs",
        "version": 1,
        "cwd": 1,
        "directories": [{"name": "/"}, {"name": "docs", "parent": 0}],
        "files": [{"name": "a.txt", "content": "hello", "directory": 1}]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from memfs.vfs.base import DirectoryNode, FileNode
from memfs.vfs.filesystem import FileSystem, ROOT_NAME
from memfs.vfs.resolver import PathError

logger = logging.getLogger(__name__)

FORMAT_NAME = "memfs"
FORMAT_VERSION = 1


class PersistenceError(Exception):
    """Saved state could not be written or read back."""
    pass


def save(fs: FileSystem) -> bytes:
    """Serialize a file system to bytes.

    Args:
        fs: File system to serialize

    Returns:
        Opaque blob accepted by ``load``
    """
    index: Dict[DirectoryNode, int] = {}
    directories: List[Dict[str, Any]] = []
    files: List[Dict[str, Any]] = []

    for directory in fs.root.walk_directories():
        index[directory] = len(directories)
        if directory is fs.root:
            directories.append({"name": ROOT_NAME})
        else:
            directories.append({"name": directory.name, "parent": index[directory.parent]})

        files.extend(
            {"name": f.name, "content": f.content, "directory": index[directory]}
            for f in directory.files
        )

    document = {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "cwd": index[fs.current],
        "directories": directories,
        "files": files,
    }
    return json.dumps(document, ensure_ascii=False).encode("utf-8")


def load(blob: bytes) -> FileSystem:
    """Rebuild a file system from a blob produced by ``save``.

    Args:
        blob: Serialized state

    Returns:
        Equivalent FileSystem, positioned at the saved current directory

    Raises:
        PersistenceError: If the blob is not a valid saved state
    """
    try:
        document = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise PersistenceError(f"Unreadable state: {e}") from e

    if not isinstance(document, dict) or document.get("format") != FORMAT_NAME:
        raise PersistenceError("Not a memfs state")
    if document.get("version") != FORMAT_VERSION:
        raise PersistenceError(f"Unsupported state version: {document.get('version')}")

    try:
        directories = _load_directories(document["directories"])
        _load_files(directories, document.get("files", []))
        fs = FileSystem(directories[0])
        fs.current = directories[_index(document.get("cwd", 0), len(directories))]
    except (AttributeError, KeyError, TypeError, ValueError, RecursionError, PathError) as e:
        raise PersistenceError(f"Corrupt state: {e}") from e

    return fs


def save_state(fs: FileSystem, path: Union[str, Path]) -> Path:
    """Write the state of a file system to a file.

    Args:
        fs: File system to save
        path: Destination file

    Returns:
        Path written

    Raises:
        PersistenceError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(save(fs))
    except OSError as e:
        raise PersistenceError(f"Error saving file system state: {e}") from e

    logger.info(f"File system state saved to {path}")
    return path


def load_state(path: Union[str, Path]) -> Optional[FileSystem]:
    """Read a saved file system from a file.

    Args:
        path: File written by ``save_state``

    Returns:
        Restored FileSystem, or None if the file is missing or invalid
    """
    path = Path(path)
    try:
        fs = load(path.read_bytes())
    except OSError as e:
        logger.warning(f"Error loading file system state: {e}")
        return None
    except PersistenceError as e:
        logger.warning(f"Error loading file system state from {path}: {e}")
        return None

    logger.info(f"File system state loaded from {path}")
    return fs


def _load_directories(entries: List[Dict[str, Any]]) -> List[DirectoryNode]:
    if not entries or entries[0].get("parent") is not None:
        raise ValueError("first directory must be the root")

    directories = [DirectoryNode(ROOT_NAME)]
    for entry in entries[1:]:
        # Only earlier entries are valid parents, so the result is a tree
        parent = directories[_index(entry["parent"], len(directories))]
        name = _name(entry["name"])
        if parent.get_directory(name) is not None:
            raise ValueError(f"duplicate directory '{name}'")

        directory = DirectoryNode(name)
        parent.attach(directory)
        directories.append(directory)

    return directories


def _load_files(directories: List[DirectoryNode], entries: List[Dict[str, Any]]) -> None:
    for entry in entries:
        directory = directories[_index(entry["directory"], len(directories))]
        name = _name(entry["name"])
        if directory.get_file(name) is not None:
            raise ValueError(f"duplicate file '{name}'")
        directory.attach(FileNode(name, _string(entry["content"])))


def _index(value: Any, limit: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"expected index, got {type(value).__name__}")
    if not 0 <= value < limit:
        raise ValueError(f"index {value} out of range")
    return value


def _name(value: Any) -> str:
    name = _string(value)
    FileSystem.check_name(name)
    return name


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value
