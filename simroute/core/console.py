"""Coloured terminal output for the person running the tool.

Log records go through :mod:`logging`; these helpers are for the short
status lines a user watches while a route plays.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)


def status(message: str) -> None:
    console.print(f"[green]{escape(message)}[/green]")


def notice(message: str) -> None:
    console.print(f"[yellow]{escape(message)}[/yellow]")


def error(message: str, detail: object = None) -> None:
    text = f"[bold red]{escape(message)}[/bold red]"
    if detail is not None:
        text = f"{text} {escape(str(detail))}"
    error_console.print(text)


__all__ = ["console", "error", "error_console", "notice", "status"]
