# chainloom/cli/ui.py
"""
Shared UI helpers for CLI commands.

Usage:
    from chainloom.cli.ui import ui

    ui.header("chainloom generate")
    ui.success("Done!")
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console()


class UI:
    """Consistent rich styling for command output."""

    def header(self, title: str, subtitle: str = "") -> None:
        """Print a fitted box around the command title."""
        content = f"[bold]{escape(title)}[/bold]"
        if subtitle:
            content += f"\n[dim]{escape(subtitle)}[/dim]"
        console.print(Panel.fit(content, border_style="blue"))

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {escape(msg)}")

    def error(self, msg: str) -> None:
        console.print(f"[red]✗[/red] {escape(msg)}")

    def info(self, msg: str) -> None:
        console.print(f"[dim]{escape(msg)}[/dim]")

    def answer(self, text: str, label: str = "") -> None:
        """Print generated text verbatim (no markup, no highlighting)."""
        if label:
            console.print(f"[bold cyan]{escape(label)}[/bold cyan]")
        console.print(text, markup=False, highlight=False, soft_wrap=True)


ui = UI()

__all__ = ["UI", "ui", "console"]
