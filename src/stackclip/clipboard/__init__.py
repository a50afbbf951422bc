from stackclip.clipboard.base import ClipboardBackend
from stackclip.clipboard.factory import get_clipboard_backend, get_clipboard_class

__all__ = [
    'ClipboardBackend',
    'get_clipboard_backend',
    'get_clipboard_class',
]
