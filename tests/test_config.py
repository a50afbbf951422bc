import os

import pytest
from pydantic import ValidationError

from stackclip.config import PREVIEW_LENGTH_CEILING, StackClipConfig

ENV_NAMES = (
    "STACKCLIP_BASE_PASTE_DELAY",
    "STACKCLIP_MAX_STACK_DEPTH",
    "STACKCLIP_MAX_PREVIEW_LENGTH",
    "STACKCLIP_POLL_INTERVAL",
    "STACKCLIP_POP_HOTKEY",
    "STACKCLIP_PEEK_HOTKEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for name in ENV_NAMES:
        os.environ.pop(name, None)


def test_defaults():
    config = StackClipConfig()

    assert config.base_paste_delay == 0.25
    assert config.max_stack_depth == 20
    assert config.max_preview_length == 32
    assert config.poll_interval == 0.5
    assert config.pop_hotkey
    assert config.peek_hotkey is None
    assert not config.preview_unlimited


@pytest.mark.parametrize(
    "field, value",
    [
        ("base_paste_delay", 0),
        ("base_paste_delay", -1.0),
        ("max_stack_depth", 0),
        ("max_preview_length", -1),
        ("poll_interval", 0),
        ("pop_hotkey", ""),
    ],
)
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        StackClipConfig(**{field: value})


def test_assignment_is_validated():
    config = StackClipConfig()

    with pytest.raises(ValidationError):
        config.max_stack_depth = -3
    assert config.max_stack_depth == 20


def test_preview_ceiling_means_unlimited():
    assert StackClipConfig(max_preview_length=PREVIEW_LENGTH_CEILING).preview_unlimited
    assert not StackClipConfig(max_preview_length=PREVIEW_LENGTH_CEILING - 1).preview_unlimited


def test_from_env_reads_environment(monkeypatch):
    monkeypatch.setenv("STACKCLIP_BASE_PASTE_DELAY", "0.4")
    monkeypatch.setenv("STACKCLIP_MAX_STACK_DEPTH", "7")
    monkeypatch.setenv("STACKCLIP_PEEK_HOTKEY", "ctrl+alt+shift+v")

    config = StackClipConfig.from_env()

    assert config.base_paste_delay == 0.4
    assert config.max_stack_depth == 7
    assert config.peek_hotkey == "ctrl+alt+shift+v"


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("STACKCLIP_MAX_STACK_DEPTH", "7")

    config = StackClipConfig.from_env(max_stack_depth=3, base_paste_delay=None)

    assert config.max_stack_depth == 3
    assert config.base_paste_delay == 0.25


def test_from_env_reads_env_file(tmp_path):
    env_file = tmp_path / "stackclip.env"
    env_file.write_text("STACKCLIP_MAX_PREVIEW_LENGTH=64\nSTACKCLIP_POLL_INTERVAL=0.25\n")

    config = StackClipConfig.from_env(env_path=env_file)

    assert config.max_preview_length == 64
    assert config.poll_interval == 0.25


def test_from_env_rejects_bad_values(monkeypatch):
    monkeypatch.setenv("STACKCLIP_MAX_STACK_DEPTH", "lots")

    with pytest.raises(ValidationError):
        StackClipConfig.from_env()
