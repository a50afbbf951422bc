import logging

from stackclip.clipboard.flavors import HTML, PLAIN_TEXT
from stackclip.clipboard.memory import MemoryClipboard
from stackclip.services.change_detector import ChangeDetector, DetectorState, observe
from stackclip.services.stack_store import StackStore


class BrokenClipboard(MemoryClipboard):
    def change_count(self) -> int:
        raise OSError("clipboard locked")


def make_detector(clipboard, config):
    store = StackStore(config)
    detector = ChangeDetector(clipboard, store)
    detector.sync()
    return detector, store


def test_observe_without_change_is_a_noop():
    state = DetectorState(last_change_count=3)

    assert observe(state, 3) == (state, False)


def test_observe_change_requests_capture_and_resyncs():
    new_state, capture = observe(DetectorState(last_change_count=3), 4)

    assert capture is True
    assert new_state.last_change_count == 4


def test_observe_consumes_suppression_even_without_change():
    state = DetectorState(last_change_count=3, ignore_next_change=True)

    new_state, capture = observe(state, 3)

    assert capture is False
    assert new_state == DetectorState(last_change_count=3)


def test_observe_suppression_resyncs_counter():
    state = DetectorState(last_change_count=3, ignore_next_change=True)

    new_state, capture = observe(state, 5)

    assert capture is False
    assert new_state == DetectorState(last_change_count=5)


def test_sync_skips_preexisting_content(clipboard, config):
    clipboard.copy_text("already there")
    detector, store = make_detector(clipboard, config)

    assert detector.poll() is None
    assert len(store) == 0


def test_poll_captures_new_content(clipboard, config):
    detector, store = make_detector(clipboard, config)
    clipboard.copy({PLAIN_TEXT: b"hello", HTML: b"<b>hello</b>"})

    snapshot = detector.poll()

    assert snapshot is not None
    assert store.peek_top() == snapshot
    assert detector.poll() is None
    assert len(store) == 1


def test_poll_skips_copy_equal_to_top(clipboard, config):
    detector, store = make_detector(clipboard, config)
    clipboard.copy_text("same")
    detector.poll()
    clipboard.copy_text("same")

    assert detector.poll() is None
    assert len(store) == 1
    assert detector.state.last_change_count == clipboard.change_count()


def test_poll_of_empty_clipboard_resyncs_without_push(clipboard, config):
    detector, store = make_detector(clipboard, config)
    clipboard.clear()

    assert detector.poll() is None
    assert len(store) == 0
    assert detector.state.last_change_count == clipboard.change_count()


def test_suppression_swallows_exactly_one_change(clipboard, config):
    detector, store = make_detector(clipboard, config)

    detector.suppress_next_change()
    clipboard.write_item({PLAIN_TEXT: b"ours"})
    assert detector.poll() is None
    assert len(store) == 0

    clipboard.copy_text("theirs")
    assert detector.poll() is not None
    assert len(store) == 1


def test_suppression_is_consumed_by_a_quiet_poll(clipboard, config):
    detector, store = make_detector(clipboard, config)

    detector.suppress_next_change()
    detector.poll()
    clipboard.copy_text("genuine")

    assert detector.poll() is not None
    assert len(store) == 1


def test_backend_error_is_logged_and_polling_continues(config, caplog):
    detector = ChangeDetector(BrokenClipboard(), StackStore(config))

    with caplog.at_level(logging.ERROR):
        assert detector.poll() is None

    assert "clipboard locked" in caplog.text
