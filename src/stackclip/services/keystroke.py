import logging
import platform
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

# kVK_ANSI_V
MAC_V_KEY_CODE = 9


class PasteKeystroke(ABC):
    """Posts the platform's paste key combination as hardware input.

    ``send`` never raises: without automation permission (or root on Linux)
    the keystroke is dropped, the restored clipboard stays in place and the
    user can paste by hand.
    """

    @abstractmethod
    def _post(self) -> None:
        pass

    def send(self) -> bool:
        try:
            self._post()
            logger.debug("Synthetic paste sent")
            return True
        except Exception as e:
            logger.warning(f"Synthetic paste failed, paste manually: {e}")
            return False

    def __call__(self) -> bool:
        return self.send()


class MacOSPasteKeystroke(PasteKeystroke):
    def _post(self) -> None:
        from Quartz import (
            CGEventCreateKeyboardEvent,
            CGEventPost,
            CGEventSetFlags,
            CGEventSourceCreate,
            kCGEventFlagMaskCommand,
            kCGEventSourceStateCombinedSessionState,
            kCGHIDEventTap,
        )

        source = CGEventSourceCreate(kCGEventSourceStateCombinedSessionState)
        key_down = CGEventCreateKeyboardEvent(source, MAC_V_KEY_CODE, True)
        key_up = CGEventCreateKeyboardEvent(source, MAC_V_KEY_CODE, False)
        if key_down is None or key_up is None:
            raise RuntimeError("could not create keyboard events")

        CGEventSetFlags(key_down, kCGEventFlagMaskCommand)
        CGEventSetFlags(key_up, kCGEventFlagMaskCommand)
        CGEventPost(kCGHIDEventTap, key_down)
        CGEventPost(kCGHIDEventTap, key_up)


class KeyboardPasteKeystroke(PasteKeystroke):
    """Sends ``combo`` with the user's held modifiers lifted.

    Hotkeys fire while their modifiers are still down, so without the stash
    ctrl+alt+v would be sent in place of ctrl+v.
    """

    def __init__(self, combo: str = "ctrl+v") -> None:
        self.combo = combo

    def _post(self) -> None:
        import keyboard

        state = keyboard.stash_state()
        try:
            keyboard.send(self.combo)
        finally:
            keyboard.restore_modifiers(state)


def get_paste_keystroke() -> PasteKeystroke:
    if platform.system() == "Darwin":
        return MacOSPasteKeystroke()
    return KeyboardPasteKeystroke()


def has_automation_permission(prompt: bool = False) -> bool:
    """Whether synthetic input will reach other applications.

    Only macOS gates this behind a user grant; ``prompt`` asks the system
    to show its accessibility dialog when the grant is missing.
    """
    if platform.system() != "Darwin":
        return True

    try:
        from ApplicationServices import (
            AXIsProcessTrustedWithOptions,
            kAXTrustedCheckOptionPrompt,
        )
    except ImportError as e:
        logger.warning(f"Cannot check accessibility permission: {e}")
        return False

    return bool(AXIsProcessTrustedWithOptions({kAXTrustedCheckOptionPrompt: prompt}))
