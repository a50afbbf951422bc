import logging
from typing import Dict, List, Mapping, Optional

from AppKit import (
    NSPasteboard,
    NSPasteboardItem,
    NSPasteboardTypeHTML,
    NSPasteboardTypePNG,
    NSPasteboardTypeRTF,
    NSPasteboardTypeString,
    NSPasteboardTypeTIFF,
)
from Foundation import NSData

from stackclip.clipboard import flavors
from stackclip.clipboard.base import ClipboardBackend

logger = logging.getLogger(__name__)


class MacOSClipboard(ClipboardBackend):
    _TO_FLAVOR: Dict[str, str] = {
        str(NSPasteboardTypeString): flavors.PLAIN_TEXT,
        str(NSPasteboardTypeRTF): flavors.RICH_TEXT,
        str(NSPasteboardTypeHTML): flavors.HTML,
        str(NSPasteboardTypePNG): flavors.PNG,
        str(NSPasteboardTypeTIFF): flavors.TIFF,
    }
    _TO_NATIVE: Dict[str, str] = {v: k for k, v in _TO_FLAVOR.items()}

    def __init__(self, pasteboard=None) -> None:
        self._pasteboard = pasteboard or NSPasteboard.generalPasteboard()

    def change_count(self) -> int:
        return int(self._pasteboard.changeCount())

    def list_flavors(self) -> List[str]:
        types = self._pasteboard.types() or []
        seen: List[str] = []
        for native in types:
            flavor = self._TO_FLAVOR.get(str(native), str(native))
            if flavor not in seen:
                seen.append(flavor)
        return seen

    def read_bytes(self, flavor: str) -> Optional[bytes]:
        native = self._TO_NATIVE.get(flavor, flavor)
        try:
            data = self._pasteboard.dataForType_(native)
        except Exception as e:
            logger.debug(f"Could not read {native}: {e}")
            return None
        if data is None:
            return None
        return bytes(data)

    def clear(self) -> None:
        self._pasteboard.clearContents()

    def write_item(self, flavor_map: Mapping[str, bytes]) -> bool:
        try:
            item = NSPasteboardItem.alloc().init()
            for flavor, payload in flavor_map.items():
                native = self._TO_NATIVE.get(flavor, flavor)
                ns_data = NSData.dataWithBytes_length_(payload, len(payload))
                item.setData_forType_(ns_data, native)

            self._pasteboard.clearContents()
            return bool(self._pasteboard.writeObjects_([item]))
        except Exception as e:
            logger.error(f"Pasteboard write failed: {e}")
            return False
