"""Shared Rich console for CLI status lines. Writes to stderr so stdout stays JSON."""

import os
from functools import wraps

from rich.console import Console

_console = Console(stderr=True)


def _should_print() -> bool:
    """Check if console output is enabled."""
    return os.environ.get("AISTACK_CONSOLE_ENABLED", "true").lower() == "true"


def _console_output(func):
    """Decorator to check if console output is enabled."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        if _should_print():
            return func(*args, **kwargs)

    return wrapper


@_console_output
def print_success(message: str):
    """Print success message."""
    _console.print(f"[green]{message}[/green]")


@_console_output
def print_error(message: str):
    """Print error message."""
    _console.print(f"[red]{message}[/red]")


@_console_output
def print_info(message: str):
    """Print info message."""
    _console.print(f"[cyan]{message}[/cyan]")


@_console_output
def print_warning(message: str):
    """Print warning message."""
    _console.print(f"[yellow]{message}[/yellow]")
