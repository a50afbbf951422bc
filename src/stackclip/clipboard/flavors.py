from typing import Iterable

PLAIN_TEXT = "text/plain"
RICH_TEXT = "text/rtf"
HTML = "text/html"
PNG = "image/png"
TIFF = "image/tiff"
WIN_DIB = "image/x-win-dib"

IMAGE_PREFIX = "image/"


def is_image(flavor: str) -> bool:
    return flavor.lower().startswith(IMAGE_PREFIX)


def is_rich(flavor: str) -> bool:
    """Rich text, HTML or any image representation."""
    return flavor in (RICH_TEXT, HTML) or is_image(flavor)


def has_rich(flavors: Iterable[str]) -> bool:
    return any(is_rich(flavor) for flavor in flavors)
