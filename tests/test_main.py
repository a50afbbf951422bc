import os

import pytest

from stackclip.clipboard.memory import MemoryClipboard
from stackclip.main import StackClipApp, load_config, main, parse_args
from stackclip.models.snapshot import capture


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("STACKCLIP_"):
            monkeypatch.delenv(name)


def test_cli_flags_become_config():
    args = parse_args(["-d", "0.3", "-m", "5", "-l", "200", "--peek-hotkey", "ctrl+shift+v"])

    config = load_config(args)

    assert config.base_paste_delay == 0.3
    assert config.max_stack_depth == 5
    assert config.preview_unlimited
    assert config.peek_hotkey == "ctrl+shift+v"
    assert config.poll_interval == 0.5


def test_invalid_cli_value_exits_with_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main(["--max-depth", "0"])

    assert excinfo.value.code == 2


def test_stack_change_is_logged_with_previews(caplog):
    app = StackClipApp(load_config(parse_args(["-l", "3"])))
    clipboard = MemoryClipboard()
    clipboard.copy_text("hello")

    with caplog.at_level("INFO"):
        app._on_stack_changed((capture(clipboard),))
        app._on_stack_changed(())

    assert "[0] hel" in caplog.text
    assert "Stack is empty" in caplog.text
