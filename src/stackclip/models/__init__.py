from stackclip.models.snapshot import NO_PREVIEW, ClipboardSnapshot, capture, preview

__all__ = [
    'NO_PREVIEW',
    'ClipboardSnapshot',
    'capture',
    'preview',
]
