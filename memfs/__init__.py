"""
memfs - An in-memory hierarchical file system with an interactive shell.

Main API:
    from memfs import FileSystem, save, load

    fs = FileSystem()
    fs.mkdir("docs")
    fs.cd("docs")
    fs.echo("a.txt", "hello world")

    # Search everything below the current directory
    fs.grep("hello")         # [("a.txt", "hello world")]

    # Persist and restore the whole tree
    blob = save(fs)
    restored = load(blob)
"""

from .vfs import FileSystem
from .store import save, load, save_state, load_state, PersistenceError

__version__ = "0.1.0"
__all__ = ["FileSystem", "save", "load", "save_state", "load_state", "PersistenceError"]
