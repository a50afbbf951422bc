"""Service layer for StackClip."""

from stackclip.services.change_detector import ChangeDetector, DetectorState, observe
from stackclip.services.engine import StackClipEngine
from stackclip.services.event_loop import EventLoop, PendingAction
from stackclip.services.restore_engine import RestoreEngine
from stackclip.services.stack_store import StackStore

__all__ = [
    "ChangeDetector",
    "DetectorState",
    "EventLoop",
    "PendingAction",
    "RestoreEngine",
    "StackClipEngine",
    "StackStore",
    "observe",
]
