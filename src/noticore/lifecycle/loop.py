"""Lifecycle loop — background thread driving the notification engine.

Each tick expires timed-out notifications, promotes waiting ones and then
sleeps until the engine next needs attention, or until new work wakes it.
All engine access goes through one lock so the engine keeps a single writer.
"""

import logging
import threading
from collections.abc import Callable

from noticore.config import NotiConfig, get_config
from noticore.lifecycle.notification import CloseReason, Notification
from noticore.lifecycle.queues import NotificationQueues

logger = logging.getLogger(__name__)

# Sleep after a failed tick instead of waiting forever
_RETRY_DELAY = 1.0


class LifecycleLoop:
    """Background thread that ticks a NotificationQueues engine."""

    def __init__(
        self,
        queues: NotificationQueues,
        config: NotiConfig | None = None,
        idle_fn: Callable[[], float] | None = None,
        fullscreen_fn: Callable[[], bool] | None = None,
        on_change: Callable[[tuple[Notification, ...]], None] | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            queues: Engine to drive.
            config: NotiConfig instance (uses singleton if None).
            idle_fn: Optional callable returning seconds since last user input.
            fullscreen_fn: Optional callable reporting a focused fullscreen window.
            on_change: Receives the displayed notifications after every tick.
        """
        self._queues = queues
        self._config = config or get_config()
        self._idle_fn = idle_fn
        self._fullscreen_fn = fullscreen_fn
        self._on_change = on_change
        self._lock = threading.RLock()
        self._wake_event = threading.Event()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning("Lifecycle loop already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info("Lifecycle loop started")

    def stop(self) -> None:
        """Stop the background thread and wait for it to exit."""
        self._stop_event.set()
        self._wake_event.set()
        if self._thread:
            self._thread.join(timeout=5)
            self._thread = None
        logger.info("Lifecycle loop stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def wake(self) -> None:
        """Interrupt the current sleep so the next tick runs now."""
        self._wake_event.set()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self._wake_event.clear()
            try:
                delay = self.tick()
            except Exception:
                logger.exception("Lifecycle tick failed")
                delay = _RETRY_DELAY
            # None sleeps until woken
            self._wake_event.wait(delay)

    def tick(self) -> float | None:
        """Run one expiry + promotion pass.

        Returns:
            Seconds until the next required tick, or None for "until woken".
        """
        with self._lock:
            fullscreen = bool(self._fullscreen_fn and self._fullscreen_fn())
            self._queues.check_timeouts(self._is_idle(), fullscreen)
            self._queues.update(fullscreen)
            displayed = self._queues.get_displayed()
            delay = self._queues.next_wake_delay()

            # Held-back entries must be promoted once fullscreen ends
            if fullscreen and self._queues.length_waiting() > 0:
                interval = self._config.fullscreen_poll_interval
                delay = interval if delay is None else min(delay, interval)

        if self._on_change:
            self._on_change(displayed)
        return delay

    def _is_idle(self) -> bool:
        if self._idle_fn is None:
            return False
        return self._idle_fn() >= self._config.idle_threshold

    # ── Thread-safe engine access ──────────────────────────────────

    def submit(self, n: Notification) -> int:
        """Insert a notification and wake the loop."""
        with self._lock:
            notification_id = self._queues.insert(n)
        self.wake()
        return notification_id

    def close(self, notification_id: int, reason: CloseReason = CloseReason.SIGNALED) -> None:
        with self._lock:
            self._queues.close(notification_id, reason)
        self.wake()

    def close_all(self) -> None:
        with self._lock:
            self._queues.close_all()
        self.wake()

    def history_pop(self) -> Notification | None:
        with self._lock:
            n = self._queues.history_pop()
        self.wake()
        return n

    def set_paused(self, paused: bool) -> None:
        with self._lock:
            if paused:
                self._queues.pause_on()
            else:
                self._queues.pause_off()
        self.wake()

    def is_paused(self) -> bool:
        with self._lock:
            return self._queues.pause_status()

    def has_pending(self) -> bool:
        """True while anything is displayed or waiting."""
        with self._lock:
            return bool(self._queues.length_displayed() or self._queues.length_waiting())
