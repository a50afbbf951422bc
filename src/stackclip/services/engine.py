import logging
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from stackclip.clipboard.base import ClipboardBackend
from stackclip.config import StackClipConfig
from stackclip.models.snapshot import ClipboardSnapshot, preview
from stackclip.services.change_detector import ChangeDetector
from stackclip.services.event_loop import EventLoop, PendingAction
from stackclip.services.keystroke import PasteKeystroke, get_paste_keystroke
from stackclip.services.restore_engine import RestoreEngine
from stackclip.services.stack_store import StackListener, StackStore

logger = logging.getLogger(__name__)

# Bound once in start(); changing them needs a restart.
STARTUP_ONLY_FIELDS = frozenset({"poll_interval", "pop_hotkey", "peek_hotkey"})


class StackClipEngine:
    """Clipboard stack wired to a single event loop.

    The ``request_*`` methods are safe to call from any thread (hotkey
    listeners, UI callbacks); they post onto the loop, where all stack and
    detector state is mutated. The direct methods (``poll``, ``restore``,
    ``clear``, ...) run on the calling thread and are what the loop executes.
    """

    def __init__(
        self,
        backend: ClipboardBackend,
        config: StackClipConfig,
        loop: Optional[EventLoop] = None,
        keystroke: Optional[PasteKeystroke] = None,
        on_stack_changed: Optional[StackListener] = None,
    ) -> None:
        self.config = config
        self.backend = backend
        self.loop = loop or EventLoop()
        self.store = StackStore(config, on_change=on_stack_changed)
        self.detector = ChangeDetector(backend, self.store)
        self.restorer = RestoreEngine(
            backend,
            self.store,
            self.detector,
            config,
            call_later=self.loop.call_later,
            keystroke=keystroke or get_paste_keystroke(),
        )
        self.pending_pastes: List[PendingAction] = []

    def start(self) -> None:
        self.detector.sync()
        self.loop.call_every(self.config.poll_interval, self.poll)
        self.loop.start()
        logger.info(
            f"Watching the clipboard every {self.config.poll_interval}s, "
            f"keeping up to {self.config.max_stack_depth} entries")

    def stop(self) -> None:
        self.loop.stop()

    def request_restore(self, pop: bool = True) -> None:
        self.loop.post(self.restore, pop)

    def request_clear(self) -> None:
        self.loop.post(self.clear)

    def request_copy(self, snapshot: ClipboardSnapshot) -> None:
        self.loop.post(self.copy_to_clipboard, snapshot)

    def request_config_update(self, **changes: Any) -> None:
        self.loop.post(self.update_config, changes)

    def poll(self) -> Optional[ClipboardSnapshot]:
        return self.detector.poll()

    def restore(self, pop: bool = True) -> Optional[PendingAction]:
        pending = self.restorer.restore(pop=pop)
        if pending is not None:
            self.pending_pastes = [p for p in self.pending_pastes if not p.fired]
            self.pending_pastes.append(pending)
        return pending

    def clear(self) -> None:
        self.store.clear()
        logger.info("Clipboard stack cleared")

    def copy_to_clipboard(self, snapshot: ClipboardSnapshot) -> bool:
        return self.restorer.copy_to_clipboard(snapshot)

    def update_config(self, changes: dict) -> bool:
        startup_only = STARTUP_ONLY_FIELDS.intersection(changes)
        if startup_only:
            logger.error(
                f"Rejected configuration change {changes}: "
                f"{', '.join(sorted(startup_only))} only apply at startup")
            return False

        try:
            updated = self.config.model_copy(update={})
            for name, value in changes.items():
                setattr(updated, name, value)
        except (ValidationError, ValueError) as e:
            logger.error(f"Rejected configuration change {changes}: {e}")
            return False

        for name in changes:
            setattr(self.config, name, getattr(updated, name))

        evicted = self.store.enforce_capacity()
        if evicted:
            logger.info(f"Dropped {evicted} entries over the new stack depth")
        return True

    def snapshots(self) -> Tuple[ClipboardSnapshot, ...]:
        return self.store.snapshots()

    def menu_entries(self) -> List[Tuple[str, str]]:
        limit = self.config.max_preview_length
        return [
            (snapshot.snapshot_id, preview(snapshot, limit))
            for snapshot in self.store.snapshots()
        ]
