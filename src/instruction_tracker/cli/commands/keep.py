"""itrack keep / cleanup -- manage kept instructions."""

from __future__ import annotations

import click

from instruction_tracker.cli.formatting import format_error


@click.command()
@click.argument("position", type=click.IntRange(min=0))
@click.pass_context
def keep(ctx: click.Context, position: int) -> None:
    """Toggle the kept marker of the instruction at POSITION.

    Kept instructions are never hidden.  Keeping a hidden instruction
    shows it again.
    """
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        kept = t.toggle_keep(position)
        if kept is None:
            if t.index.message_at(position) is None:
                format_error(f"No message at #{position}", console)
            else:
                format_error(f"#{position} is not an instruction message", console)
            raise SystemExit(1)
        label = "Kept" if kept else "Unkept"
        console.print(f"{label} [yellow]#{position}[/yellow]")


@click.command()
@click.pass_context
def cleanup(ctx: click.Context) -> None:
    """Remove kept markers whose message no longer exists."""
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        removed = t.cleanup_orphans()
        console.print(f"Removed {removed} orphaned kept instruction(s)")
