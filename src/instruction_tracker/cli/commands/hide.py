"""itrack hide / auto-hide -- hide old instructions."""

from __future__ import annotations

import click

from instruction_tracker.cli.formatting import format_sweep_result


@click.command()
@click.pass_context
def hide(ctx: click.Context) -> None:
    """Hide every non-kept instruction except the last two messages."""
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        result = t.force_hide()
        format_sweep_result(result, console)


@click.command("auto-hide")
@click.argument("state", required=False, type=click.Choice(["on", "off"], case_sensitive=False))
@click.pass_context
def auto_hide(ctx: click.Context, state: str | None) -> None:
    """Show or set auto-hide.

    With auto-hide on, old instructions are hidden whenever a message is
    sent or received.
    """
    from instruction_tracker.cli import _tracker_session

    with _tracker_session(ctx) as (t, console):
        if state is not None:
            t.set_auto_hide(state.lower() == "on")
        console.print(f"Auto-hide is {'on' if t.auto_hide else 'off'}")
