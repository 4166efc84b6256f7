"""itrack add / edit / delete -- mutate the transcript like a chat would."""

from __future__ import annotations

import click

from instruction_tracker.cli.formatting import preview


@click.command()
@click.argument("name")
@click.argument("body")
@click.option("--date", "send_date", default=None, help="Send timestamp (defaults to now, epoch ms).")
@click.option("--sent", is_flag=True, help="Mark as sent by the user instead of received.")
@click.pass_context
def add(ctx: click.Context, name: str, body: str, send_date: str | None, sent: bool) -> None:
    """Append a message from sender NAME with text BODY.

    Triggers the auto-hide sweep when auto-hide is on.
    """
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        message = t.host.add_message(name, body, send_date=send_date, sent=sent)  # type: ignore[attr-defined]
        console.print(f"Added [yellow]#{message.index}[/yellow] {name}: {preview(body)}")


@click.command()
@click.argument("position", type=click.IntRange(min=0))
@click.argument("body")
@click.pass_context
def edit(ctx: click.Context, position: int, body: str) -> None:
    """Replace the text of the message at POSITION."""
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        t.host.edit_message(position, body)  # type: ignore[attr-defined]
        console.print(f"Edited [yellow]#{position}[/yellow]")


@click.command()
@click.argument("position", type=click.IntRange(min=0))
@click.pass_context
def delete(ctx: click.Context, position: int) -> None:
    """Delete the message at POSITION.

    Kept markers left without a message are cleaned up afterwards.
    """
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        t.host.delete_message(position)  # type: ignore[attr-defined]
        console.print(f"Deleted [yellow]#{position}[/yellow]")
