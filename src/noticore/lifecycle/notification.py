"""Notification model for the noticore lifecycle engine.

A notification is owned by exactly one of the engine's queues (waiting,
displayed, history) at a time. Times are engine clock seconds; a ``start`` or
``timeout`` of 0 means "unset".
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, IntEnum

from noticore.config import NotiConfig, get_config


class Urgency(IntEnum):
    """Notification urgency levels (freedesktop byte values)."""

    LOW = 0
    NORMAL = 1
    CRITICAL = 2


class FullscreenMode(Enum):
    """Visibility policy while a fullscreen window is focused."""

    SHOW = "show"          # stay visible
    DELAY = "delay"        # don't promote until fullscreen ends
    PUSHBACK = "pushback"  # evict back to waiting, don't promote


class CloseReason(IntEnum):
    """Why a notification was closed, as reported to observers."""

    TIME = 1
    USER = 2
    SIGNALED = 3
    REPLACED = 4  # sent as "undefined" on the wire


@dataclass(eq=False)
class Notification:
    """A single notification known to the engine."""

    summary: str = ""
    body: str = ""
    appname: str = ""
    icon: str = ""
    category: str = ""
    msg: str = ""            # combined display text, empty = skip
    id: int = 0              # 0 = assign a fresh id on insert
    urgency: Urgency = Urgency.NORMAL
    timestamp: float = 0.0   # arrival time
    progress: int = -1       # -1 = no progress bar
    dup_count: int = 1       # instances merged into this entry
    start: float = 0.0       # visibility start, 0 = not shown
    timeout: float = 0.0     # 0 = sticky
    transient: bool = False
    fullscreen: FullscreenMode = FullscreenMode.SHOW
    redisplayed: bool = False
    history_ignore: bool = False
    script: str | None = None

    @classmethod
    def create(
        cls,
        summary: str,
        body: str = "",
        *,
        config: NotiConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        **fields,
    ) -> "Notification":
        """Build a notification stamped with its arrival time.

        Args:
            summary: Notification title.
            body: Notification text.
            config: NotiConfig instance (uses singleton if None).
            clock: Time source used for the arrival timestamp.
            **fields: Any other Notification attribute.

        Returns:
            A new notification. ``msg`` defaults to "summary body" and
            ``timeout`` to the configured timeout for its urgency.
        """
        config = config or get_config()
        urgency = Urgency(fields.pop("urgency", Urgency.NORMAL))
        if "timeout" not in fields:
            fields["timeout"] = (
                config.critical_timeout
                if urgency == Urgency.CRITICAL
                else config.default_timeout
            )
        if "msg" not in fields:
            fields["msg"] = " ".join(part for part in (summary, body) if part)
        fields.setdefault("timestamp", clock())
        return cls(summary=summary, body=body, urgency=urgency, **fields)

    def age(self, now: float) -> float:
        """Seconds since the notification arrived."""
        return now - self.timestamp


Comparator = Callable[[Notification, Notification], int]


def make_comparator(sort: bool = True) -> Comparator:
    """Return the default ordering: most urgent first, then oldest id first.

    Args:
        sort: If False, order by id only.
    """

    def compare(a: Notification, b: Notification) -> int:
        if sort and a.urgency != b.urgency:
            return b.urgency - a.urgency
        return a.id - b.id

    return compare


def is_duplicate(a: Notification, b: Notification) -> bool:
    """Default duplicate predicate: same sender, text, icon and urgency."""
    return (
        a.appname == b.appname
        and a.summary == b.summary
        and a.body == b.body
        and a.icon == b.icon
        and a.urgency == b.urgency
    )


def format_record(n: Notification) -> str:
    """Render the diagnostic record printed for an accepted notification."""
    lines = [
        "{",
        f"\tappname: '{n.appname}'",
        f"\tsummary: '{n.summary}'",
        f"\tbody: '{n.body}'",
        f"\ticon: '{n.icon}'",
        f"\tcategory: {n.category}",
        f"\ttimeout: {n.timeout}",
        f"\turgency: {n.urgency.name.lower()}",
        f"\ttransient: {int(n.transient)}",
        f"\tfullscreen: {n.fullscreen.value}",
        f"\tprogress: {n.progress}",
        f"\tid: {n.id}",
        f"\tdup_count: {n.dup_count}",
        f"\tscript: {n.script or ''}",
        "}",
    ]
    return "\n".join(lines)
