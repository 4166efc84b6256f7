"""itrack switch -- change the current chat."""

from __future__ import annotations

import click


@click.command()
@click.argument("chat_id")
@click.pass_context
def switch(ctx: click.Context, chat_id: str) -> None:
    """Make CHAT_ID the current chat.

    Kept markers of that chat with no matching message are cleaned up.
    """
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        t.host.switch_chat(chat_id)  # type: ignore[attr-defined]
        console.print(f"Switched to chat [green]{chat_id}[/green]")
