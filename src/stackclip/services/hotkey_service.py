import logging
from typing import Callable, List, Optional

from stackclip.config import StackClipConfig

logger = logging.getLogger(__name__)


class HotkeyService:
    """Global hotkeys for pop-and-paste and paste-without-pop.

    Callbacks fire when the hotkey's main key is released, while its
    modifiers may still be held; the paste keystroke lifts them itself.
    Registration needs root on Linux and accessibility permission on macOS;
    when it fails the app keeps running without hotkeys.
    """

    def __init__(
        self,
        config: StackClipConfig,
        on_pop: Callable[[], None],
        on_peek: Optional[Callable[[], None]] = None,
    ) -> None:
        self._config = config
        self._on_pop = on_pop
        self._on_peek = on_peek
        self._handles: List[object] = []

    def start(self) -> bool:
        try:
            import keyboard

            self._handles.append(keyboard.add_hotkey(
                self._config.pop_hotkey, self._on_pop, trigger_on_release=True))
            if self._config.peek_hotkey and self._on_peek is not None:
                self._handles.append(keyboard.add_hotkey(
                    self._config.peek_hotkey, self._on_peek, trigger_on_release=True))
        except (ImportError, OSError, ValueError) as e:
            logger.warning(f"Global hotkeys unavailable: {e}")
            self.stop()
            return False

        logger.info(f"Pop and paste with {self._config.pop_hotkey}")
        if self._config.peek_hotkey:
            logger.info(f"Paste without pop with {self._config.peek_hotkey}")
        return True

    def stop(self) -> None:
        if not self._handles:
            return

        import keyboard

        for handle in self._handles:
            try:
                keyboard.remove_hotkey(handle)
            except (KeyError, ValueError):
                pass
        self._handles = []
