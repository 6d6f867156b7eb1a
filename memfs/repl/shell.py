"""Interactive REPL shell for the in-memory file system."""

import shlex
from pathlib import Path
from typing import Optional, List

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from memfs.config import MemFSConfig
from memfs.store import PersistenceError, save_state
from memfs.vfs import FileSystem, DirectoryNode, PathError


class PathCompleter(Completer):
    """Tab completion for file system paths."""

    def __init__(self, fs: FileSystem):
        self.fs = fs

    def get_completions(self, document, complete_event):
        """Get path completion candidates."""
        text = document.text_before_cursor
        words = text.split()

        # Only complete path arguments, not the command name
        if len(words) > 1 and not text.endswith(" "):
            partial = words[-1]
        elif words and text.endswith(" "):
            partial = ""
        else:
            return

        for candidate in self.fs.complete(partial):
            yield Completion(candidate, start_position=-len(partial))


class FileSystemShell:
    """Interactive shell for the in-memory file system.

    Provides a Linux-like shell interface with commands:
    - mkdir, cd, pwd, ls: Create and navigate directories
    - touch, echo, cat: Create, append to and read files
    - grep: Search file content under the current directory
    - cp, mv, rm: Copy, move and remove
    - save: Write the whole file system to a state file
    - help, exit, quit
    """

    def __init__(
        self,
        fs: Optional[FileSystem] = None,
        config: Optional[MemFSConfig] = None,
        console: Optional[Console] = None,
        state_file: Optional[Path] = None,
    ):
        """Initialize the REPL shell.

        Args:
            fs: File system to operate on (a fresh one when omitted)
            config: Shell configuration
            console: Console used for all output
            state_file: Default target of the ``save`` command
        """
        self.fs = fs if fs is not None else FileSystem()
        self.config = config or MemFSConfig()
        self.console = console or Console(no_color=not self.config.shell.color)
        self.state_file = Path(state_file or self.config.store.state_file)
        self.running = True
        self.session: Optional[PromptSession] = None

        # Command registry
        self.commands = {
            "mkdir": self.cmd_mkdir,
            "cd": self.cmd_cd,
            "pwd": self.cmd_pwd,
            "ls": self.cmd_ls,
            "touch": self.cmd_touch,
            "echo": self.cmd_echo,
            "cat": self.cmd_cat,
            "grep": self.cmd_grep,
            "cp": self.cmd_cp,
            "mv": self.cmd_mv,
            "rm": self.cmd_rm,
            "save": self.cmd_save,
            "help": self.cmd_help,
            "?": self.cmd_help,
            "exit": self.cmd_exit,
            "quit": self.cmd_quit,
        }

    def get_prompt(self) -> str:
        """Generate prompt showing the current directory name.

        Returns:
            Prompt string like "docs> " ("/> " at root)
        """
        return f"{self.fs.current.name}> "

    def _create_session(self) -> PromptSession:
        history_file = self.config.shell.history_file
        if history_file:
            history = FileHistory(str(Path(history_file).expanduser()))
        else:
            history = InMemoryHistory()

        return PromptSession(
            history=history,
            completer=PathCompleter(self.fs),
            style=Style.from_dict(
                {
                    "prompt": self.config.shell.prompt_style,
                }
            ),
        )

    def run(self):
        """Run the shell main loop."""
        self.console.print(
            "[bold cyan]memfs shell[/bold cyan] - In-memory file system", style="bold"
        )
        self.console.print("Type 'help' for available commands, 'exit' to quit.\n")

        if self.session is None:
            self.session = self._create_session()

        while self.running:
            try:
                line = self.session.prompt(self.get_prompt())
                line = line.strip()

                if not line:
                    continue

                self.execute(line)

            except KeyboardInterrupt:
                self.console.print("\nUse 'exit' or 'quit' to exit the shell.")
                continue
            except EOFError:
                break
            except Exception as e:
                self.console.print(f"[red]Error:[/red] {escape(str(e))}", style="bold")

    def execute(self, line: str) -> Optional[str]:
        """Parse and execute a command line.

        Args:
            line: Command line to execute

        Returns:
            Output of the command, if any
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self._error(f"Parse error: {e}")
            return None

        if not parts:
            return None

        cmd = parts[0]
        args = parts[1:]

        if cmd not in self.commands:
            self._error(f"Unknown command: {cmd}. Type 'help' for available commands.")
            return None

        return self.commands[cmd](args)

    # Output helpers

    def _output(self, text: str) -> str:
        """Print user data verbatim (no markup, no highlighting)."""
        self.console.print(text, markup=False, highlight=False)
        return text

    def _error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def _usage(self, usage: str) -> None:
        self.console.print(f"[red]Usage:[/red] {escape(usage)}")

    # Command implementations

    def cmd_mkdir(self, args: List[str]) -> Optional[str]:
        """Create a directory in the current directory.

        Usage: mkdir <directory_name>
        """
        if len(args) != 1:
            self._usage("mkdir <directory_name>")
            return None

        try:
            self.fs.mkdir(args[0])
        except PathError as e:
            self._error(f"mkdir: {e}")
        return None

    def cmd_cd(self, args: List[str]) -> Optional[str]:
        """Change directory.

        Usage: cd <path>

        Examples:
            cd /          - Go to the root directory
            cd ..         - Go to the parent directory
            cd docs/notes - Relative path
        """
        if len(args) != 1:
            self._usage("cd <path>")
            return None

        try:
            self.fs.cd(args[0])
        except PathError as e:
            self._error(str(e))
        return None

    def cmd_pwd(self, args: List[str]) -> Optional[str]:
        """Print working directory.

        Usage: pwd
        """
        return self._output(self.fs.pwd())

    def cmd_ls(self, args: List[str]) -> Optional[str]:
        """List directory contents.

        Usage: ls [-l] [path]

        Directories are listed first with a trailing "/".
        With -l, show one entry per line with details.
        """
        long_format = "-l" in args
        paths = [arg for arg in args if arg != "-l"]
        if len(paths) > 1:
            self._usage("ls [-l] [path]")
            return None

        try:
            directory = self.fs.get_directory(paths[0] if paths else None)
        except PathError as e:
            self._error(str(e))
            return None

        if not long_format:
            return self._output(directory.listing())

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Type", style="cyan")
        table.add_column("Name", style="white")
        table.add_column("Info", style="dim")

        output_lines = []
        for node in directory.list_children():
            info = node.get_info()
            if isinstance(node, DirectoryNode):
                type_char = "d"
                name = f"{node.name}/"
                info_str = f"{info['children_count']} entries"
            else:
                type_char = "f"
                name = node.name
                info_str = f"{info['size']} bytes"

            table.add_row(type_char, escape(name), info_str)
            output_lines.append(f"{type_char}\t{name}\t{info_str}")

        self.console.print(table)
        return "\n".join(output_lines)

    def cmd_touch(self, args: List[str]) -> Optional[str]:
        """Create an empty file in the current directory.

        Usage: touch <file_name>
        """
        if len(args) != 1:
            self._usage("touch <file_name>")
            return None

        try:
            self.fs.touch(args[0])
        except PathError as e:
            self._error(f"touch: {e}")
        return None

    def cmd_echo(self, args: List[str]) -> Optional[str]:
        """Append text to a file.

        Usage: echo <file_name> <content...>

        The file is looked up anywhere below the current directory and
        created in the current directory if it does not exist. Content is
        always appended, never overwritten.

        Examples:
            echo a.txt "hello "     - Append "hello " (quotes keep spaces)
            echo a.txt more words   - Append "more words"
        """
        if len(args) < 1:
            self._usage("echo <file_name> <content>")
            return None

        try:
            self.fs.echo(args[0], " ".join(args[1:]))
        except PathError as e:
            self._error(f"echo: {e}")
        return None

    def cmd_cat(self, args: List[str]) -> Optional[str]:
        """Print file content.

        Usage: cat <file_name>

        The file is looked up anywhere below the current directory.
        """
        if len(args) != 1:
            self._usage("cat <file_name>")
            return None

        try:
            content = self.fs.cat(args[0])
        except PathError as e:
            self._error(str(e))
            return None

        return self._output(content)

    def cmd_grep(self, args: List[str]) -> Optional[str]:
        """Search file content below the current directory.

        Usage: grep <search_string>

        Prints "name: content" for every file containing the string.
        """
        if not args:
            self._usage("grep <search_string>")
            return None

        query = " ".join(args)
        matches = self.fs.grep(query)
        if not matches:
            return self._output(f"not found: {query}")

        return self._output("\n".join(f"{name}: {content}" for name, content in matches))

    def cmd_cp(self, args: List[str]) -> Optional[str]:
        """Copy a file into a directory.

        Usage: cp <source_path> <destination_path>

        Examples:
            cp a.txt backup          - Copy a.txt into ./backup
            cp /docs/a.txt /archive  - Absolute paths
        """
        if len(args) != 2:
            self._usage("cp <source_path> <destination_path>")
            return None

        try:
            self.fs.cp(args[0], args[1])
        except PathError as e:
            self._error(str(e))
        return None

    def cmd_mv(self, args: List[str]) -> Optional[str]:
        """Move a file into a directory.

        Usage: mv <source_path> <destination_path>
        """
        if len(args) != 2:
            self._usage("mv <source_path> <destination_path>")
            return None

        try:
            self.fs.mv(args[0], args[1])
        except PathError as e:
            self._error(str(e))
        return None

    def cmd_rm(self, args: List[str]) -> Optional[str]:
        """Remove a file, or a directory and everything in it.

        Usage: rm <path>
        """
        if len(args) != 1:
            self._usage("rm <path>")
            return None

        try:
            result = self.fs.rm(args[0])
        except PathError as e:
            self._error(str(e))
            return None

        if result.cwd_reset:
            self.console.print(
                "[yellow]Warning: current directory was removed, returned to /[/yellow]"
            )
        return None

    def cmd_save(self, args: List[str]) -> Optional[str]:
        """Save the whole file system to a state file.

        Usage: save [file]

        Without a file, the configured state file is used.
        """
        if len(args) > 1:
            self._usage("save [file]")
            return None

        target = Path(args[0]) if args else self.state_file
        try:
            path = save_state(self.fs, target)
        except PersistenceError as e:
            self._error(str(e))
            return None

        directories, files = self.fs.count()
        self.console.print(
            f"[green]✓ Saved {directories} directories and {files} files "
            f"to {escape(str(path))}[/green]"
        )
        return str(path)

    def cmd_help(self, args: List[str]) -> Optional[str]:
        """Show help information.

        Usage: help [command]
        """
        if args:
            cmd = args[0]
            if cmd in self.commands:
                func = self.commands[cmd]
                self.console.print(f"[bold]{cmd}[/bold]")
                self.console.print(func.__doc__ or "No documentation available.", markup=False)
            else:
                self._error(f"Unknown command: {cmd}")
            return None

        self.console.print("[bold cyan]Available Commands:[/bold cyan]\n")

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Command", style="cyan")
        table.add_column("Description", style="white")

        table.add_row("mkdir <name>", "Create a directory")
        table.add_row("cd <path>", "Change directory (/, .., absolute or relative)")
        table.add_row("pwd", "Print working directory")
        table.add_row("ls [-l] [path]", "List directory contents")
        table.add_row("touch <name>", "Create an empty file")
        table.add_row("echo <name> <text>", "Append text to a file (creates it if needed)")
        table.add_row("cat <name>", "Print file content")
        table.add_row("grep <text>", "Search file content below the current directory")
        table.add_row("cp <src> <dest>", "Copy a file into a directory")
        table.add_row("mv <src> <dest>", "Move a file into a directory")
        table.add_row("rm <path>", "Remove a file or a directory tree")
        table.add_row("save [file]", "Save the file system state")
        table.add_row("help [cmd]", "Show help")
        table.add_row("exit, quit", "Exit the shell (state is not saved)")

        self.console.print(table)
        return None

    def cmd_exit(self, args: List[str]) -> Optional[str]:
        """Exit the shell without saving.

        Usage: exit
        """
        self.running = False
        return None

    def cmd_quit(self, args: List[str]) -> Optional[str]:
        """Quit the shell.

        Usage: quit
        """
        return self.cmd_exit(args)
