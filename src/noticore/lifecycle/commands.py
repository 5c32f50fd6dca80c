"""Control commands smuggled in through the notification summary.

Senders pause and resume the daemon by posting a notification whose summary
is one of the reserved strings below. Matching is exact and case-sensitive.
"""

from enum import Enum


class Command(Enum):
    """Pause-state commands understood at admission."""

    PAUSE = "DUNST_COMMAND_PAUSE"
    RESUME = "DUNST_COMMAND_RESUME"
    TOGGLE = "DUNST_COMMAND_TOGGLE"


def parse_command(summary: str) -> Command | None:
    """Return the command encoded in a summary, or None for a normal notification."""
    try:
        return Command(summary)
    except ValueError:
        return None


def apply_command(command: Command, paused: bool) -> bool:
    """Return the pause flag after applying a command."""
    if command is Command.PAUSE:
        return True
    if command is Command.RESUME:
        return False
    return not paused
