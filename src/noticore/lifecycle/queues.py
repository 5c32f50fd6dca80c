"""Notification lifecycle engine — admission, stacking, closure and scheduling.

Every notification lives in exactly one of three queues:

- waiting: admitted but not yet visible, comparator-ordered
- displayed: currently visible, comparator-ordered, capped by displayed_limit
- history: closed notifications kept for recall, oldest first

The engine is single-threaded. Scans that may close the entry they visit
iterate over a snapshot, so nested closures never break an outer traversal.
Callers driving it from several threads must serialise access themselves
(see ``noticore.lifecycle.loop``).
"""

import logging
import math
import time
from collections.abc import Callable

from noticore.config import NotiConfig, get_config
from noticore.lifecycle.commands import apply_command, parse_command
from noticore.lifecycle.notification import (
    CloseReason,
    Comparator,
    FullscreenMode,
    Notification,
    format_record,
    is_duplicate,
    make_comparator,
)
from noticore.lifecycle.store import QueueStore, SortedQueue
from noticore.utils.logger import console

logger = logging.getLogger(__name__)

# Ids are pre-incremented, so the first assigned id is 2
_ID_SEED = 1


class QueueInvariantError(AssertionError):
    """A notification was found in two queues at once."""


def _print_record(n: Notification) -> None:
    console.print(format_record(n), markup=False, highlight=False)


class NotificationQueues:
    """Owns the waiting, displayed and history queues of one daemon."""

    def __init__(
        self,
        config: NotiConfig | None = None,
        *,
        run_script: Callable[[Notification], None] | None = None,
        notify_closed: Callable[[Notification, CloseReason], None] | None = None,
        emit: Callable[[Notification], None] | None = None,
        is_duplicate_fn: Callable[[Notification, Notification], bool] | None = None,
        compare: Comparator | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_free: Callable[[Notification], None] | None = None,
    ) -> None:
        """Initialize empty queues.

        Args:
            config: NotiConfig instance (uses singleton if None).
            run_script: Runs a notification's script, fire-and-forget.
            notify_closed: Tells observers an id is no longer valid.
            emit: Diagnostic sink used when print_notifications is on.
            is_duplicate_fn: Equivalence used for stacking.
            compare: Total order for waiting and displayed.
            clock: Monotonic time source in seconds.
            on_free: Called once for every notification the engine drops.
        """
        self._config = config or get_config()
        self._run_script = run_script or (lambda n: None)
        self._notify_closed = notify_closed or (lambda n, reason: None)
        self._emit = emit or _print_record
        self._is_duplicate = is_duplicate_fn or is_duplicate
        self._clock = clock
        self._on_free = on_free

        self._store = QueueStore(compare or make_comparator(self._config.sort))
        self._displayed_limit = self._config.displayed_limit
        self._next_id = _ID_SEED
        self._paused = False

    # ── Queue Store ────────────────────────────────────────────────

    @property
    def displayed_limit(self) -> int:
        return self._displayed_limit

    def set_displayed_limit(self, limit: int) -> None:
        """Cap the number of visible notifications (0 = unbounded).

        Raises:
            ValueError: If limit is negative.
        """
        if limit < 0:
            raise ValueError(f"displayed limit must be >= 0, got {limit}")
        self._displayed_limit = limit

    def get_displayed(self) -> tuple[Notification, ...]:
        """Read-only view of the visible notifications, in display order."""
        return self._store.displayed.snapshot()

    def get_waiting(self) -> tuple[Notification, ...]:
        return self._store.waiting.snapshot()

    def get_history(self) -> tuple[Notification, ...]:
        return self._store.history.snapshot()

    def length_waiting(self) -> int:
        return len(self._store.waiting)

    def length_displayed(self) -> int:
        return len(self._store.displayed)

    def length_history(self) -> int:
        return len(self._store.history)

    # ── Admission ──────────────────────────────────────────────────

    def insert(self, n: Notification) -> int:
        """Admit a notification into the waiting queue.

        Empty notifications and control commands are consumed without being
        queued. Fresh notifications (id 0) get a new id and may be stacked
        onto a duplicate; notifications carrying an id replace the live
        notification with that id.

        Returns:
            The notification's id, or 0 if nothing was queued.
        """
        if not n.msg:
            if self._config.always_run_script:
                self._run_script(n)
            logger.info("Skipping notification: '%s' '%s'", n.body, n.summary)
            self._free(n)
            return 0

        command = parse_command(n.summary)
        if command is not None:
            self._paused = apply_command(command, self._paused)
            logger.info("Received %s command (paused=%s)", command.name, self._paused)
            self._free(n)
            return 0

        if n.id == 0:
            self._next_id += 1
            n.id = self._next_id
            if not (self._config.stack_duplicates and self._stack_duplicate(n)):
                self._store.waiting.insert_sorted(n)
        elif not self._replace_id(n):
            self._store.waiting.insert_sorted(n)

        if self._config.print_notifications:
            self._emit(n)

        return n.id

    # ── Stacking & Replacement ─────────────────────────────────────

    def _stack_duplicate(self, n: Notification) -> bool:
        """Merge ``n`` into an equivalent queued notification.

        Displayed entries are checked before waiting ones. The new
        notification takes over the duplicate's slot and counter.

        Returns:
            True if ``n`` was stacked, False if the caller must insert it.
        """
        for queue, visible in (
            (self._store.displayed, True),
            (self._store.waiting, False),
        ):
            for index, orig in enumerate(queue.snapshot()):
                if not self._is_duplicate(orig, n):
                    continue

                # Differing progress means a live update, not a repeat
                if orig.progress == n.progress:
                    orig.dup_count += 1
                else:
                    orig.progress = n.progress

                queue.replace(index, n)
                if visible:
                    n.start = self._clock()
                n.dup_count = orig.dup_count

                logger.debug(
                    "Stacked notification %d onto %d (dup_count=%d)",
                    n.id, orig.id, n.dup_count,
                )
                self._notify_closed(orig, CloseReason.REPLACED)
                self._free(orig)
                return True

        return False

    def _replace_id(self, n: Notification) -> bool:
        """Swap ``n`` into the slot of the live notification sharing its id.

        Returns:
            True if a notification with that id was replaced.
        """
        displayed = self._store.displayed
        index = displayed.find_id(n.id)
        if index is not None:
            old = displayed.replace(index, n)
            n.start = self._clock()
            n.dup_count = old.dup_count
            self._run_script(n)
            logger.debug("Replaced displayed notification %d", n.id)
            self._free(old)
            return True

        waiting = self._store.waiting
        index = waiting.find_id(n.id)
        if index is not None:
            old = waiting.replace(index, n)
            n.dup_count = old.dup_count
            logger.debug("Replaced waiting notification %d", n.id)
            self._free(old)
            return True

        return False

    # ── Closure & History ──────────────────────────────────────────

    def close(self, notification_id: int, reason: CloseReason) -> None:
        """Close a live notification and move it into history.

        Unknown ids are ignored: the notification may already be gone.

        Raises:
            QueueInvariantError: If the id is both displayed and waiting.
        """
        displayed = self._store.displayed
        waiting = self._store.waiting
        displayed_index = displayed.find_id(notification_id)
        waiting_index = waiting.find_id(notification_id)

        if displayed_index is not None and waiting_index is not None:
            raise QueueInvariantError(
                f"notification {notification_id} is both displayed and waiting"
            )

        if displayed_index is not None:
            queue: SortedQueue = displayed
            target = displayed.get(displayed_index)
        elif waiting_index is not None:
            queue = waiting
            target = waiting.get(waiting_index)
        else:
            logger.debug("Close of unknown notification %d ignored", notification_id)
            return

        queue.remove(target)
        logger.debug("Closed notification %d (%s)", target.id, reason.name)

        # Observers already saw this id close once before it was recalled
        if not target.redisplayed:
            self._notify_closed(target, reason)
        self.history_push(target)

    def close_notification(self, n: Notification, reason: CloseReason) -> None:
        self.close(n.id, reason)

    def close_all(self) -> None:
        """Dismiss everything: displayed first, then waiting, head first."""
        displayed = self._store.displayed
        while len(displayed) > 0:
            self.close_notification(displayed.peek_head(), CloseReason.USER)

        waiting = self._store.waiting
        while len(waiting) > 0:
            self.close_notification(waiting.peek_head(), CloseReason.USER)

    def history_push(self, n: Notification) -> None:
        """Archive a closed notification, evicting the oldest entry when full."""
        if n.history_ignore:
            self._free(n)
            return

        history = self._store.history
        limit = self._config.history_length
        if limit > 0 and len(history) >= limit:
            self._free(history.pop_head())

        history.push_tail(n)

    def history_pop(self) -> Notification | None:
        """Move the most recently closed notification back to the head of waiting.

        Returns:
            The recalled notification, or None if history is empty.
        """
        history = self._store.history
        if len(history) == 0:
            return None

        n = history.pop_tail()
        n.redisplayed = True
        n.start = 0
        if self._config.sticky_history:
            n.timeout = 0
        self._store.waiting.push_head(n)
        logger.debug("Recalled notification %d from history", n.id)
        return n

    # ── Timeouts & Scheduling ──────────────────────────────────────

    def check_timeouts(self, idle: bool, fullscreen: bool) -> None:
        """Close displayed notifications whose visible lifetime has run out.

        Args:
            idle: The user is away; non-transient notifications don't age.
            fullscreen: A fullscreen window is focused, which overrides idle.
        """
        displayed = self._store.displayed
        if len(displayed) == 0:
            return

        is_idle = False if fullscreen else idle
        now = self._clock()

        for n in displayed:
            # An earlier close in this scan may have taken it already
            if n not in displayed:
                continue

            if is_idle and not n.transient:
                n.start = now
                continue

            # Hidden or sticky
            if n.start == 0 or n.timeout == 0:
                continue

            if now - n.start > n.timeout:
                self.close_notification(n, CloseReason.TIME)

    def update(self, fullscreen: bool) -> None:
        """Move notifications between waiting and displayed for this tick.

        Args:
            fullscreen: A fullscreen window is focused.
        """
        displayed = self._store.displayed
        waiting = self._store.waiting

        if self._paused:
            while len(displayed) > 0:
                waiting.insert_sorted(displayed.pop_head())
            return

        if fullscreen:
            for n in displayed:
                if n.fullscreen is FullscreenMode.PUSHBACK:
                    displayed.remove(n)
                    waiting.insert_sorted(n)

        now = self._clock()
        for n in waiting:
            if self._displayed_limit > 0 and len(displayed) >= self._displayed_limit:
                break

            if fullscreen and n.fullscreen in (FullscreenMode.DELAY, FullscreenMode.PUSHBACK):
                continue

            n.start = now
            if not n.redisplayed and n.script:
                self._run_script(n)

            waiting.remove(n)
            displayed.insert_sorted(n)

    def next_wake_delay(self, now: float | None = None) -> float | None:
        """Seconds the caller may sleep before the displayed set needs attention.

        Args:
            now: Current clock time (defaults to the engine clock).

        Returns:
            0 if something already expired, None if nothing bounds the sleep.
        """
        if now is None:
            now = self._clock()

        threshold = self._config.show_age_threshold
        sleep = math.inf

        for n in self._store.displayed:
            ttl = n.timeout - (now - n.start)

            if n.timeout > 0:
                if ttl > 0:
                    sleep = min(sleep, ttl)
                else:
                    # Expired while we were busy
                    return 0.0

            if threshold >= 0:
                age = n.age(now)
                if age > threshold:
                    # Refresh exactly when the displayed age ticks over
                    sleep = min(sleep, 1.0 - age % 1.0)
                elif n.timeout == 0 or ttl > threshold:
                    sleep = min(sleep, threshold)

        return None if sleep == math.inf else sleep

    # ── Pause ──────────────────────────────────────────────────────

    def pause_on(self) -> None:
        self._paused = True

    def pause_off(self) -> None:
        self._paused = False

    def pause_toggle(self) -> None:
        self._paused = not self._paused

    def pause_status(self) -> bool:
        return self._paused

    # ── Teardown ───────────────────────────────────────────────────

    def teardown(self) -> None:
        """Drop every notification the engine still owns."""
        for queue in (self._store.history, self._store.displayed, self._store.waiting):
            for n in queue.clear():
                self._free(n)

    def _free(self, n: Notification) -> None:
        logger.debug("Dropping notification %d", n.id)
        if self._on_free is not None:
            self._on_free(n)
