import logging
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from stackclip.clipboard.base import ClipboardBackend
from stackclip.models.snapshot import ClipboardSnapshot, capture
from stackclip.services.stack_store import StackStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorState:
    last_change_count: int = 0
    ignore_next_change: bool = False

    @property
    def suppressing(self) -> bool:
        return self.ignore_next_change


def observe(state: DetectorState, change_count: int) -> Tuple[DetectorState, bool]:
    """Advance the detector for one poll.

    Returns the new state and whether the clipboard should be captured.
    A pending suppression is consumed by this poll whether or not the
    counter moved.
    """
    if state.ignore_next_change:
        return DetectorState(last_change_count=change_count), False
    if change_count != state.last_change_count:
        return replace(state, last_change_count=change_count), True
    return state, False


class ChangeDetector:
    """Polls the clipboard change counter and pushes new content."""

    def __init__(self, backend: ClipboardBackend, store: StackStore) -> None:
        self._backend = backend
        self._store = store
        self.state = DetectorState()

    def sync(self) -> None:
        """Adopt the current counter without recording the current content."""
        self.state = DetectorState(
            last_change_count=self._backend.change_count(),
            ignore_next_change=self.state.ignore_next_change,
        )

    def suppress_next_change(self) -> None:
        self.state = replace(self.state, ignore_next_change=True)

    def poll(self) -> Optional[ClipboardSnapshot]:
        try:
            change_count = self._backend.change_count()
        except Exception as e:
            logger.error(f"Could not read clipboard change count: {e}")
            return None

        was_suppressing = self.state.suppressing
        self.state, should_capture = observe(self.state, change_count)
        if was_suppressing:
            logger.debug("Ignored a clipboard change caused by our own write")
            return None
        if not should_capture:
            return None

        try:
            snapshot = capture(self._backend)
        except Exception as e:
            logger.error(f"Clipboard capture failed: {e}")
            return None

        if snapshot is None:
            logger.debug("Clipboard changed but had no readable flavors")
            return None

        if self._store.push(snapshot):
            logger.info(
                f"Captured clipboard: {', '.join(sorted(snapshot.flavor_types))}")
            return snapshot
        return None
