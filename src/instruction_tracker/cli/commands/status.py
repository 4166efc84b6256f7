"""itrack status -- show instruction counts and auto-hide state."""

from __future__ import annotations

import click

from instruction_tracker.cli.formatting import format_status


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the current chat, auto-hide state, and instruction counts."""
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        kept = t.retention.kept_fingerprints(t.chat_id)
        format_status(t.chat_id, t.auto_hide, t.counts(), len(kept), console)
