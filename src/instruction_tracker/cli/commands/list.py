"""itrack list -- list instruction messages of the current chat."""

from __future__ import annotations

import click

from instruction_tracker.cli.formatting import format_instructions


@click.command("list")
@click.option("--hidden/--all", "hidden_only", default=False, help="Only show hidden instructions.")
@click.pass_context
def list_instructions(ctx: click.Context, hidden_only: bool) -> None:
    """List instruction messages with their position, state, and preview."""
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        records = t.instructions()
        if hidden_only:
            records = [r for r in records if r.is_hidden]
        format_instructions(records, console)
