"""REPL shell for the in-memory file system.

This module provides an interactive shell that reads commands, dispatches
them to the file system and renders the results.
"""

from memfs.repl.shell import FileSystemShell

__all__ = ["FileSystemShell"]
