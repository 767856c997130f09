"""Rich-based output for the pickline CLI.

stdout carries protocol frames, so everything meant for a human goes to
stderr.
"""

from rich.console import Console
from rich.markup import escape

# Shared console instance
console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message in red.

    Args:
        message: The error message to display.
    """
    console.print(f"[bold red]pickline:[/bold red] {escape(message)}", soft_wrap=True)


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[dim]{escape(message)}[/dim]", soft_wrap=True)
