import logging
import threading
from collections import deque
from typing import Callable, Deque, Iterator, Optional, Tuple

from stackclip.config import StackClipConfig
from stackclip.models.snapshot import ClipboardSnapshot

logger = logging.getLogger(__name__)

StackListener = Callable[[Tuple[ClipboardSnapshot, ...]], None]


class StackStore:
    """Newest-first, bounded stack of clipboard snapshots.

    Capacity is read from the shared config on every push, so a lowered
    ``max_stack_depth`` applies from the next push on (or right away through
    ``enforce_capacity``). ``on_change`` receives the new contents after
    each mutation that changed them.
    """

    def __init__(
        self,
        config: StackClipConfig,
        on_change: Optional[StackListener] = None,
    ) -> None:
        self._config = config
        self._on_change = on_change
        self._items: Deque[ClipboardSnapshot] = deque()
        self._lock = threading.RLock()

    def push(self, snapshot: ClipboardSnapshot) -> bool:
        with self._lock:
            if self._items and self._items[0] == snapshot:
                logger.debug("Snapshot matches the top of the stack, skipped")
                return False

            self._items.appendleft(snapshot)
            evicted = self._evict()
            contents = tuple(self._items)

        if evicted:
            logger.debug(f"Evicted {evicted} snapshot(s) over capacity")
        self._notify(contents)
        return True

    def peek_top(self) -> Optional[ClipboardSnapshot]:
        with self._lock:
            return self._items[0] if self._items else None

    def pop_top(self) -> Optional[ClipboardSnapshot]:
        with self._lock:
            if not self._items:
                return None
            snapshot = self._items.popleft()
            contents = tuple(self._items)

        self._notify(contents)
        return snapshot

    def clear(self) -> None:
        with self._lock:
            if not self._items:
                return
            self._items.clear()

        self._notify(())

    def enforce_capacity(self) -> int:
        with self._lock:
            evicted = self._evict()
            contents = tuple(self._items)

        if evicted:
            self._notify(contents)
        return evicted

    def snapshots(self) -> Tuple[ClipboardSnapshot, ...]:
        with self._lock:
            return tuple(self._items)

    def _evict(self) -> int:
        evicted = 0
        while len(self._items) > self._config.max_stack_depth:
            self._items.pop()
            evicted += 1
        return evicted

    def _notify(self, contents: Tuple[ClipboardSnapshot, ...]) -> None:
        if self._on_change is not None:
            self._on_change(contents)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[ClipboardSnapshot]:
        return iter(self.snapshots())

    def __bool__(self) -> bool:
        return len(self) > 0
