"""Decorators for memfs CLI commands."""

import functools
import logging
from typing import Callable, Any
import typer
from rich.console import Console

from memfs.store import PersistenceError

logger = logging.getLogger(__name__)
console = Console()


def handle_cli_errors(func: Callable) -> Callable:
    """
    Decorator to handle common CLI command errors.

    Centralizes error handling for:
    - PersistenceError: Saved state cannot be read or written
    - PermissionError: No access to config or state files
    - OSError: Other file errors
    - General exceptions: Unexpected errors

    typer.Exit raised by the command itself passes through untouched.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except PersistenceError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except PermissionError as e:
            console.print(f"[bold red]Error:[/bold red] Permission denied: {e}")
            console.print("[yellow]Tip: Check file permissions of the config and state files[/yellow]")
            raise typer.Exit(code=1)
        except OSError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=1)

    return wrapper
