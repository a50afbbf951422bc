import logging
from typing import Any, Callable, Optional

from stackclip.clipboard.base import ClipboardBackend
from stackclip.config import StackClipConfig
from stackclip.models.snapshot import ClipboardSnapshot
from stackclip.services.change_detector import ChangeDetector
from stackclip.services.event_loop import PendingAction
from stackclip.services.keystroke import PasteKeystroke
from stackclip.services.paste_delay import paste_delay
from stackclip.services.stack_store import StackStore

logger = logging.getLogger(__name__)

Scheduler = Callable[..., PendingAction]


class RestoreEngine:
    """Puts the top of the stack back on the clipboard and pastes it.

    ``call_later`` schedules the keystroke on the engine's event loop. It
    is any callable with the signature of ``EventLoop.call_later``.
    """

    def __init__(
        self,
        backend: ClipboardBackend,
        store: StackStore,
        detector: ChangeDetector,
        config: StackClipConfig,
        call_later: Scheduler,
        keystroke: PasteKeystroke,
    ) -> None:
        self._backend = backend
        self._store = store
        self._detector = detector
        self._config = config
        self._call_later = call_later
        self._keystroke = keystroke

    def restore(self, pop: bool = False) -> Optional[PendingAction]:
        snapshot = self._store.peek_top()
        if snapshot is None:
            logger.debug("Restore requested on an empty stack")
            return None

        # Must be set before the write so the next poll treats it as ours.
        self._detector.suppress_next_change()
        if not self._backend.write_item(snapshot.restore_form()):
            logger.error("Could not write the snapshot to the clipboard")
            return None

        delay = paste_delay(snapshot.flavor_types, self._config.base_paste_delay)
        pending = self._call_later(delay, self._paste, snapshot)
        logger.info(f"Restored clipboard, paste in {delay:.2f}s")

        if pop:
            self._store.pop_top()
        return pending

    def copy_to_clipboard(self, snapshot: ClipboardSnapshot) -> bool:
        """Write a snapshot without suppressing the echo or pasting.

        The next poll records the write as a new change, which brings the
        chosen content back to the top of the stack.
        """
        written = self._backend.write_item(snapshot.restore_form())
        if not written:
            logger.error("Could not write the snapshot to the clipboard")
        return written

    def _paste(self, snapshot: ClipboardSnapshot) -> Any:
        logger.debug(f"Pasting {snapshot!r}")
        return self._keystroke.send()
