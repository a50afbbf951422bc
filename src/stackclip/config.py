import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# A preview limit at or above this value means "show the whole text".
PREVIEW_LENGTH_CEILING = 100

_ENV_FIELDS = {
    "STACKCLIP_BASE_PASTE_DELAY": "base_paste_delay",
    "STACKCLIP_MAX_STACK_DEPTH": "max_stack_depth",
    "STACKCLIP_MAX_PREVIEW_LENGTH": "max_preview_length",
    "STACKCLIP_POLL_INTERVAL": "poll_interval",
    "STACKCLIP_POP_HOTKEY": "pop_hotkey",
    "STACKCLIP_PEEK_HOTKEY": "peek_hotkey",
}


def default_pop_hotkey() -> str:
    if platform.system() == "Darwin":
        return "command+option+v"
    return "ctrl+alt+v"


class StackClipConfig(BaseModel):
    """Settings shared by the engine components.

    One instance is owned by the application and handed to every component
    that reads it, so an update is seen at the next push or restore.
    Assignments are validated like construction.
    """

    model_config = ConfigDict(validate_assignment=True)

    base_paste_delay: float = Field(default=0.25, gt=0)
    max_stack_depth: int = Field(default=20, gt=0)
    max_preview_length: int = Field(default=32, ge=0)
    poll_interval: float = Field(default=0.5, gt=0)
    pop_hotkey: str = Field(default_factory=default_pop_hotkey, min_length=1)
    peek_hotkey: Optional[str] = None

    @property
    def preview_unlimited(self) -> bool:
        return self.max_preview_length >= PREVIEW_LENGTH_CEILING

    @classmethod
    def from_env(
        cls, *, env_path: Optional[Path] = None, **overrides: Any
    ) -> "StackClipConfig":
        load_dotenv(env_path)

        values: Dict[str, Any] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            raw = os.getenv(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
