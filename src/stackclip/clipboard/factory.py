import platform
from typing import Optional, Type

from stackclip.clipboard.base import ClipboardBackend


def get_clipboard_class(name: Optional[str] = None) -> Type[ClipboardBackend]:
    system = name or platform.system()

    if system == "memory":
        from stackclip.clipboard.memory import MemoryClipboard
        return MemoryClipboard
    elif system == "Windows":
        from stackclip.clipboard.windows import WindowsClipboard
        return WindowsClipboard
    elif system == "Linux":
        from stackclip.clipboard.linux import LinuxClipboard
        return LinuxClipboard
    elif system == "Darwin":
        from stackclip.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    else:
        raise NotImplementedError(f"Platform '{system}' is not supported")


def get_clipboard_backend(name: Optional[str] = None) -> ClipboardBackend:
    clipboard_class = get_clipboard_class(name)
    return clipboard_class()
