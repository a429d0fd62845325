"""Console status output for the CLI."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console()
err_console = Console(stderr=True)


def banner(name: str, version: str) -> None:
    """Show the app banner, only on an interactive terminal."""
    if not console.is_terminal:
        return
    console.print(Panel.fit(f"[bold cyan]{name}[/bold cyan] [dim]v{version}[/dim]"))


def title(text: str) -> None:
    console.print()
    console.rule(f"[bold cyan]{text}[/bold cyan]", align="left")


def info(text: str) -> None:
    console.print(f"[dim]INFO[/dim]    {escape(text)}")


def success(text: str) -> None:
    console.print(f"[green]✓ SUCCESS[/green] {text}")


def warn(text: str) -> None:
    console.print(f"[yellow]! WARN[/yellow]    {text}")


def error(text: str) -> None:
    err_console.print(f"[red]✗ ERROR[/red]   {text}")
