from typing import Any, Callable, List, Tuple

import pytest

from stackclip.clipboard.memory import MemoryClipboard
from stackclip.config import StackClipConfig
from stackclip.services.event_loop import EventLoop, PendingAction
from stackclip.services.keystroke import PasteKeystroke


class RecordingKeystroke(PasteKeystroke):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent = 0

    def _post(self) -> None:
        if self.fail:
            raise RuntimeError("not trusted for accessibility")
        self.sent += 1


class ManualLoop(EventLoop):
    """Event loop whose deferred calls only run when a test fires them."""

    def __init__(self) -> None:
        super().__init__(name="test-loop")
        self.deferred: List[Tuple[PendingAction, Callable[..., Any], tuple]] = []

    def call_later(self, delay: float, fn: Callable[..., Any], *args: Any) -> PendingAction:
        action = PendingAction(delay)
        self.deferred.append((action, fn, args))
        return action

    def fire_deferred(self) -> List[Any]:
        results = []
        deferred, self.deferred = self.deferred, []
        for action, fn, args in deferred:
            results.append(action.run(fn, *args))
        return results


@pytest.fixture
def config() -> StackClipConfig:
    return StackClipConfig(base_paste_delay=0.2, max_stack_depth=20)


@pytest.fixture
def clipboard() -> MemoryClipboard:
    return MemoryClipboard()


@pytest.fixture
def keystroke() -> RecordingKeystroke:
    return RecordingKeystroke()


@pytest.fixture
def manual_loop() -> ManualLoop:
    return ManualLoop()
