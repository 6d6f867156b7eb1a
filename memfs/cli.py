import logging
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install

from .decorators import handle_cli_errors

# Initialize Rich Traceback for better error messages
install(show_locals=False)

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,  # Set to INFO by default, DEBUG if verbose
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("memfs")

# Main app
app = typer.Typer()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    memfs - an in-memory hierarchical file system with an interactive shell.
    """
    from memfs.config import load_config

    if verbose or load_config().cli.verbose:
        logger.setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


@app.command()
@handle_cli_errors
def shell(
    load: bool = typer.Option(False, "--load", "-l", help="Restore the saved file system state"),
    state_file: Optional[Path] = typer.Option(None, "--state-file", "-s", help="State file to load from and save to"),
):
    """
    Launch the interactive shell.

    The file system lives in memory only. Use the 'save' command inside the
    shell to write it to the state file; 'exit' does not save.

    Example:
        memfs shell --load
    """
    from memfs.config import load_config
    from memfs.repl import FileSystemShell
    from memfs.store import load_state
    from memfs.vfs import FileSystem

    config = load_config()
    state_path = state_file or Path(config.store.state_file)

    fs = None
    if load or config.store.load_on_start:
        fs = load_state(state_path)
        if fs is None:
            console.print("Creating a new file system.")
        else:
            console.print(f"[green]File system state loaded from {state_path}[/green]")
    else:
        console.print("Creating a new file system.")

    shell = FileSystemShell(fs or FileSystem(), config=config, state_file=state_path)
    shell.run()


@app.command()
@handle_cli_errors
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    # Store settings
    set_state_file: Optional[str] = typer.Option(None, "--state-file", help="Set default state file"),
    set_load_on_start: Optional[bool] = typer.Option(None, "--load-on-start/--no-load-on-start", help="Restore saved state when the shell starts"),
    # Shell settings
    set_history_file: Optional[str] = typer.Option(None, "--history-file", help="Set shell history file"),
    set_color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Enable colored output"),
    # CLI settings
    set_verbose: Optional[bool] = typer.Option(None, "--cli-verbose/--no-cli-verbose", help="Enable verbose output by default"),
):
    """
    View or edit memfs configuration.

    Configuration is stored at ~/.config/memfs/config.json (or ~/.memfs/config.json).

    Examples:
        # Show current configuration
        memfs config --show

        # Always restore the saved state
        memfs config --load-on-start --state-file ~/fs.json
    """
    from memfs.config import (
        load_config, ensure_config_exists, update_config, get_config_path
    )

    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {config_path}[/green]")
        return

    has_settings = any([
        set_state_file, set_history_file,
        set_load_on_start is not None, set_color is not None, set_verbose is not None,
    ])

    if show or not has_settings:
        cfg = load_config()

        console.print(f"\n[bold]memfs Configuration[/bold]")
        console.print(f"[dim]Location: {get_config_path()}[/dim]\n")

        console.print("[bold cyan]Store Settings:[/bold cyan]")
        console.print(f"  State File:    {cfg.store.state_file}")
        console.print(f"  Load on Start: {cfg.store.load_on_start}")

        console.print("\n[bold cyan]Shell Settings:[/bold cyan]")
        if cfg.shell.history_file:
            console.print(f"  History File:  {cfg.shell.history_file}")
        else:
            console.print(f"  History File:  [dim]not set[/dim]")
        console.print(f"  Prompt Style:  {cfg.shell.prompt_style}")
        console.print(f"  Color:         {cfg.shell.color}")

        console.print("\n[bold cyan]CLI Settings:[/bold cyan]")
        console.print(f"  Verbose:       {cfg.cli.verbose}")
        return

    update_config(
        shell_history_file=set_history_file,
        shell_color=set_color,
        store_state_file=set_state_file,
        store_load_on_start=set_load_on_start,
        cli_verbose=set_verbose,
    )
    console.print(f"[green]Configuration updated at {get_config_path()}[/green]")


if __name__ == "__main__":
    app()
