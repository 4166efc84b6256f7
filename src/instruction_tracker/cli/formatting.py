"""Rich formatting helpers for the itrack CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from instruction_tracker.models.records import (
        InstructionCounts,
        InstructionRecord,
        SweepResult,
    )

PREVIEW_LENGTH = 60


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_error(message: str, console: Console) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")


def preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    """First *length* characters of *text*, with ``...`` when truncated."""
    return text[:length] + ("..." if len(text) > length else "")


def format_status(
    chat_id: str,
    auto_hide: bool,
    counts: InstructionCounts,
    kept_count: int,
    console: Console,
) -> None:
    """Display tracker status for the current chat."""
    state = "[green]on[/green]" if auto_hide else "[dim]off[/dim]"
    console.print(f"Chat [green]{escape(chat_id)}[/green]")
    console.print(f"  Auto-hide:    {state}")
    console.print(f"  Instructions: {counts.active} active / {counts.total} total")
    console.print(f"  Kept:         {kept_count}")


def format_instructions(records: list[InstructionRecord], console: Console) -> None:
    """Display instruction records as a compact table."""
    if not records:
        console.print("[dim]No instruction messages found.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("#", justify="right", style="yellow")
    table.add_column("State", width=7)
    table.add_column("Kept", width=4)
    table.add_column("Preview")

    for record in records:
        table.add_row(
            str(record.position),
            "[dim]hidden[/dim]" if record.is_hidden else "[green]shown[/green]",
            "[cyan]yes[/cyan]" if record.is_kept else "",
            escape(preview(record.preview_text)),
        )

    console.print(table)


def format_sweep_result(result: SweepResult, console: Console) -> None:
    if result.is_informational:
        console.print(f"[dim]{result.message}[/dim]")
    else:
        positions = ", ".join(f"#{p}" for p in result.hidden_positions)
        console.print(f"[green]{result.message}[/green] ({positions})")
