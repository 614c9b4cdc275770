"""Output formatting utilities for CLI."""

import logging
import sys

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich.

    Args:
        verbose: Log debug messages instead of warnings and errors only
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def output_script(script: str) -> None:
    """Print a generated SQL script to stdout.

    Terminals get syntax highlighting, pipes and files get the plain text.

    Args:
        script: Generated SQL text
    """
    if sys.stdout.isatty():
        console.print(Syntax(script, "sql", theme="monokai", line_numbers=False))
    else:
        typer.echo(script, nl=False)


def error_message(message: str, hint: str | None = None) -> None:
    """Print error message.

    Args:
        message: Error message
        hint: Optional hint for user
    """
    typer.secho(f"✗ Error: {message}", fg=typer.colors.RED, err=True)
    if hint:
        typer.secho(f"  Hint: {hint}", fg=typer.colors.YELLOW, err=True)


def warning_message(message: str) -> None:
    """Print warning message to stderr."""
    typer.secho(f"! {message}", fg=typer.colors.YELLOW, err=True)


def success_message(message: str) -> None:
    """Print success message.

    Args:
        message: Success message
    """
    typer.secho(f"✓ {message}", fg=typer.colors.GREEN, err=True)
