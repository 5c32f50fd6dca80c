"""Queue containers for the lifecycle engine.

``SortedQueue`` keeps notifications ordered by an injected comparator and
supports in-place slot replacement. ``QueueStore`` bundles the waiting,
displayed and history containers. Neither class is thread-safe; the engine
is their only writer.
"""

from collections import deque
from collections.abc import Iterator

from noticore.lifecycle.notification import Comparator, Notification


class SortedQueue:
    """Comparator-ordered list of notifications."""

    def __init__(self, compare: Comparator) -> None:
        self._items: list[Notification] = []
        self._compare = compare

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Notification]:
        # Iterate over a copy so callers may remove the current entry
        return iter(tuple(self._items))

    def __contains__(self, n: object) -> bool:
        return any(item is n for item in self._items)

    def snapshot(self) -> tuple[Notification, ...]:
        """Return the current contents, head first."""
        return tuple(self._items)

    def insert_sorted(self, n: Notification) -> None:
        """Insert after every entry that compares strictly less than ``n``."""
        index = 0
        for item in self._items:
            if self._compare(item, n) >= 0:
                break
            index += 1
        self._items.insert(index, n)

    def push_head(self, n: Notification) -> None:
        self._items.insert(0, n)

    def pop_head(self) -> Notification:
        return self._items.pop(0)

    def peek_head(self) -> Notification | None:
        return self._items[0] if self._items else None

    def remove(self, n: Notification) -> None:
        """Remove ``n`` by identity.

        Raises:
            ValueError: If ``n`` is not queued here.
        """
        for index, item in enumerate(self._items):
            if item is n:
                del self._items[index]
                return
        raise ValueError(f"notification {n.id} not in queue")

    def find_id(self, notification_id: int) -> int | None:
        """Return the slot index holding ``notification_id``, or None."""
        for index, item in enumerate(self._items):
            if item.id == notification_id:
                return index
        return None

    def get(self, index: int) -> Notification:
        return self._items[index]

    def replace(self, index: int, n: Notification) -> Notification:
        """Put ``n`` into slot ``index`` keeping its position; return the old entry."""
        old = self._items[index]
        self._items[index] = n
        return old

    def clear(self) -> list[Notification]:
        """Remove and return every entry."""
        items, self._items = self._items, []
        return items


class History:
    """FIFO archive of closed notifications, oldest at the head."""

    def __init__(self) -> None:
        self._items: deque[Notification] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, n: object) -> bool:
        return any(item is n for item in self._items)

    def snapshot(self) -> tuple[Notification, ...]:
        return tuple(self._items)

    def push_tail(self, n: Notification) -> None:
        self._items.append(n)

    def pop_head(self) -> Notification:
        return self._items.popleft()

    def pop_tail(self) -> Notification:
        return self._items.pop()

    def clear(self) -> list[Notification]:
        items = list(self._items)
        self._items.clear()
        return items


class QueueStore:
    """The three queues a notification moves between."""

    def __init__(self, compare: Comparator) -> None:
        self.waiting = SortedQueue(compare)
        self.displayed = SortedQueue(compare)
        self.history = History()

    def owner_of(self, n: Notification) -> str | None:
        """Name of the queue holding ``n``, or None when it is unowned."""
        for name in ("displayed", "waiting", "history"):
            if n in getattr(self, name):
                return name
        return None
