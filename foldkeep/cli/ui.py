# foldkeep/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from foldkeep.cli.ui import ui, console

    ui.header("My Command")
    ui.success("Done!")
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()


class UI:
    """Consistent Rich output for every command."""

    def print(self, msg: str, style: str = "") -> None:
        if style:
            console.print(f"[{style}]{msg}[/{style}]")
        else:
            console.print(msg)

    def header(self, title: str, subtitle: str = "") -> None:
        """Print a fitted box around the command title."""
        if subtitle:
            content = f"[bold]{title}[/bold]\n[dim]{subtitle}[/dim]"
        else:
            content = f"[bold]{title}[/bold]"
        console.print(Panel.fit(content, border_style="blue"))

    def section(self, title: str) -> None:
        console.print(f"\n[bold cyan]{title}[/bold cyan]")

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {escape(msg)}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗[/red] {escape(msg)}")

    def warning(self, msg: str, detail: str = "") -> None:
        detail_str = f" [dim]({escape(detail)})[/dim]" if detail else ""
        console.print(f"[yellow]⚠[/yellow] {escape(msg)}{detail_str}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{escape(msg)}[/dim]")

    def status(self, name: str, ok: bool, detail: str = "") -> None:
        """Print a status line (check/x with name and optional detail)."""
        icon = "✓" if ok else "✗"
        color = "green" if ok else "red"
        detail_str = f" [dim]({escape(detail)})[/dim]" if detail else ""
        console.print(f"  [{color}]{icon}[/{color}] {escape(name)}{detail_str}")

    def table(self, title: str, columns: list[str], rows: list[list[str]]) -> None:
        table = Table(title=title, show_lines=False)
        for column in columns:
            table.add_column(column, overflow="fold")
        for row in rows:
            table.add_row(*(escape(cell) for cell in row))
        console.print(table)


class UINotifier:
    """Notifier that prints diagnostics for CLI commands."""

    def add_error(self, message: str) -> None:
        ui.error(message)

    def add_warning(self, message: str) -> None:
        ui.warning(message)


ui = UI()

__all__ = ["ui", "console", "UI", "UINotifier"]
