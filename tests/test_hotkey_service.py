import sys
import types

import pytest

from stackclip.config import StackClipConfig
from stackclip.services.hotkey_service import HotkeyService


class FakeKeyboard(types.SimpleNamespace):
    def __init__(self, fail=False):
        super().__init__(bindings={}, removed=[], fail=fail)

    def add_hotkey(self, combo, callback, trigger_on_release=False):
        if self.fail:
            raise ImportError("You must be root to use this library on linux.")
        assert trigger_on_release is True
        self.bindings[combo] = callback
        return combo

    def remove_hotkey(self, handle):
        self.removed.append(handle)
        del self.bindings[handle]


@pytest.fixture
def fake_keyboard(monkeypatch):
    module = FakeKeyboard()
    monkeypatch.setitem(sys.modules, "keyboard", module)
    return module


def test_binds_pop_hotkey_only_by_default(fake_keyboard):
    calls = []
    service = HotkeyService(
        StackClipConfig(pop_hotkey="ctrl+alt+v"),
        on_pop=lambda: calls.append("pop"),
        on_peek=lambda: calls.append("peek"),
    )

    assert service.start() is True
    assert list(fake_keyboard.bindings) == ["ctrl+alt+v"]

    fake_keyboard.bindings["ctrl+alt+v"]()
    assert calls == ["pop"]


def test_binds_peek_hotkey_when_configured(fake_keyboard):
    calls = []
    config = StackClipConfig(pop_hotkey="ctrl+alt+v", peek_hotkey="ctrl+alt+shift+v")
    service = HotkeyService(config, on_pop=lambda: None, on_peek=lambda: calls.append("peek"))

    service.start()
    fake_keyboard.bindings["ctrl+alt+shift+v"]()

    assert calls == ["peek"]


def test_stop_removes_bindings(fake_keyboard):
    config = StackClipConfig(pop_hotkey="ctrl+alt+v", peek_hotkey="ctrl+alt+shift+v")
    service = HotkeyService(config, on_pop=lambda: None, on_peek=lambda: None)
    service.start()

    service.stop()
    service.stop()

    assert fake_keyboard.bindings == {}
    assert fake_keyboard.removed == ["ctrl+alt+v", "ctrl+alt+shift+v"]


def test_registration_failure_is_not_fatal(monkeypatch):
    monkeypatch.setitem(sys.modules, "keyboard", FakeKeyboard(fail=True))
    service = HotkeyService(StackClipConfig(), on_pop=lambda: None)

    assert service.start() is False
