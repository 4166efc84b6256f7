"""Auto-Hide and Kept Instructions

Instruction messages steer a conversation, but once the chat moves on they
only take up space. With auto-hide on, every new message hides the older
instructions, leaving only the last two messages of the transcript alone.

Mark an instruction as kept and it is never hidden. Keeping a hidden
instruction shows it again. Kept markers that lose their message (deleted
or edited) are cleaned up on the next delete or chat switch.

Demonstrates: InstructionTracker.open(), set_auto_hide(), toggle_keep(),
              force_hide(), counts().badge, cleanup_orphans(), PANEL_REFRESH
"""

from instruction_tracker import EventType, InstructionTracker


def main():
    t = InstructionTracker.open()
    host = t.host

    t.dispatcher.subscribe(
        EventType.PANEL_REFRESH,
        lambda event: print(f"  [panel] {event.payload['counts'].badge}"),
    )

    # --- Auto-hide as the conversation grows ---

    print("=== Auto-hide on new messages ===\n")

    t.set_auto_hide(True)
    host.add_message("Instruction", "Answer in French.", send_date=1000)
    host.add_message("User", "Hello!", send_date=1500)
    host.add_message("Instruction", "Keep answers under 20 words.", send_date=2000)
    host.add_message("Bot", "Bonjour !", send_date=2500)

    for record in t.instructions():
        state = "hidden" if record.is_hidden else "shown"
        print(f"  #{record.position} {state:6} {record.preview_text}")
    print()

    # --- Keep an instruction ---

    print("=== Keep reveals and protects ===\n")

    t.toggle_keep(0)
    print(f"#0 kept: {t.is_kept(0)}")
    result = t.force_hide()
    print(f"Force hide: {result.message}\n")

    # --- Orphaned markers ---

    print("=== Orphan cleanup ===\n")

    host.edit_message(0, "Answer in German.")
    print(f"#0 kept after edit: {t.is_kept(0)}")
    print(f"Cleaned up {t.cleanup_orphans()} orphaned marker(s)\n")

    print(f"Stored settings: {t.settings.to_payload()}")

    t.close()


if __name__ == "__main__":
    main()
