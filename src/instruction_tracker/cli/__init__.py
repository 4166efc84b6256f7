"""itrack CLI -- terminal interface for the instruction tracker.

This module is NEVER imported from instruction_tracker/__init__.py.
It is only loaded via the ``itrack`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import click
from dotenv import load_dotenv

from instruction_tracker.cli.formatting import format_error, get_console

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from instruction_tracker.tracker import InstructionTracker


@click.group()
@click.option(
    "--db",
    default=".instructions.db",
    envvar="ITRACK_DB",
    help="Path to tracker database.",
)
@click.option(
    "--chat",
    "chat_id",
    default=None,
    envvar="ITRACK_CHAT",
    help="Chat to operate on (defaults to the current chat).",
)
@click.pass_context
def cli(ctx: click.Context, db: str, chat_id: str | None) -> None:
    """itrack: track, keep, and hide instruction messages in a chat."""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db
    ctx.obj["chat_id"] = chat_id


def _get_tracker(ctx: click.Context) -> InstructionTracker:
    """Open an InstructionTracker from Click context.

    When --chat names a chat other than the current one, the tracker
    switches to it first (which runs orphan cleanup for that chat).
    """
    from instruction_tracker.tracker import InstructionTracker

    tracker = InstructionTracker.open(ctx.obj["db_path"])
    chat_id = ctx.obj["chat_id"]
    if chat_id is not None and chat_id != tracker.chat_id:
        tracker.host.switch_chat(chat_id)  # type: ignore[attr-defined]
    return tracker


@contextmanager
def _tracker_session(ctx: click.Context) -> Iterator[tuple[InstructionTracker, Console]]:
    """Open a tracker, yield (tracker, console), and handle cleanup.

    Closing the tracker flushes coalesced writes.  Exceptions are formatted
    as CLI errors with exit code 1.
    """
    console = get_console()
    try:
        tracker = _get_tracker(ctx)
        try:
            yield tracker, console
        finally:
            tracker.close()
    except SystemExit:
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


def main() -> None:
    """Console-script entry point: load .env, then run the CLI."""
    load_dotenv()
    cli()


# Register subcommands after cli group is defined
from instruction_tracker.cli.commands.status import status  # noqa: E402
from instruction_tracker.cli.commands.list import list_instructions  # noqa: E402
from instruction_tracker.cli.commands.messages import add, delete, edit  # noqa: E402
from instruction_tracker.cli.commands.keep import cleanup, keep  # noqa: E402
from instruction_tracker.cli.commands.hide import auto_hide, hide  # noqa: E402
from instruction_tracker.cli.commands.switch import switch  # noqa: E402

cli.add_command(status)
cli.add_command(list_instructions)
cli.add_command(add)
cli.add_command(edit)
cli.add_command(delete)
cli.add_command(keep)
cli.add_command(cleanup)
cli.add_command(hide)
cli.add_command(auto_hide)
cli.add_command(switch)
