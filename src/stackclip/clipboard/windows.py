import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

import win32clipboard as wc
import win32con

from stackclip.clipboard import flavors
from stackclip.clipboard.base import ClipboardBackend

logger = logging.getLogger(__name__)


class WindowsClipboard(ClipboardBackend):
    # Formats Windows derives from another one on the clipboard; restoring
    # the source format brings them back.
    _SYNTHESIZED_FORMATS = {
        win32con.CF_TEXT,
        win32con.CF_OEMTEXT,
        win32con.CF_LOCALE,
        win32con.CF_BITMAP,
        win32con.CF_DIBV5,
    }
    _STANDARD_FORMATS: Dict[int, str] = {
        win32con.CF_UNICODETEXT: flavors.PLAIN_TEXT,
        win32con.CF_DIB: flavors.WIN_DIB,
    }
    _REGISTERED_FORMATS: Dict[str, str] = {
        "Rich Text Format": flavors.RICH_TEXT,
        "HTML Format": flavors.HTML,
        "PNG": flavors.PNG,
    }

    def change_count(self) -> int:
        return int(wc.GetClipboardSequenceNumber())

    def list_flavors(self) -> List[str]:
        with self._open_clipboard() as opened:
            if not opened:
                return []
            return [flavor for _, flavor in self._enum_formats()]

    def read_bytes(self, flavor: str) -> Optional[bytes]:
        with self._open_clipboard() as opened:
            if not opened:
                return None
            return self._read_format(self._format_id(flavor), flavor)

    def read_flavors(self) -> Dict[str, Optional[bytes]]:
        with self._open_clipboard() as opened:
            if not opened:
                return {}
            return {
                flavor: self._read_format(fmt, flavor)
                for fmt, flavor in self._enum_formats()
            }

    def clear(self) -> None:
        with self._open_clipboard() as opened:
            if opened:
                wc.EmptyClipboard()

    def write_item(self, flavor_map: Mapping[str, bytes]) -> bool:
        with self._open_clipboard() as opened:
            if not opened:
                return False
            try:
                wc.EmptyClipboard()
                for flavor, payload in flavor_map.items():
                    fmt = self._format_id(flavor)
                    if fmt == win32con.CF_UNICODETEXT:
                        wc.SetClipboardData(
                            fmt, payload.decode("utf-8", errors="ignore"))
                    else:
                        wc.SetClipboardData(fmt, payload)
                return True
            except Exception as e:
                logger.error(f"Clipboard write failed: {e}")
                return False

    @contextmanager
    def _open_clipboard(self) -> Iterator[bool]:
        opened = False
        for _ in range(3):
            try:
                wc.OpenClipboard()
                opened = True
                break
            except Exception:
                time.sleep(0.05)

        if not opened:
            logger.warning("Clipboard is locked by another process")
        try:
            yield opened
        finally:
            if opened:
                try:
                    wc.CloseClipboard()
                except Exception:
                    pass

    def _enum_formats(self) -> List[Tuple[int, str]]:
        formats = []
        fmt = wc.EnumClipboardFormats(0)
        while fmt:
            flavor = self._flavor_name(fmt)
            if flavor is not None:
                formats.append((fmt, flavor))
            fmt = wc.EnumClipboardFormats(fmt)
        return formats

    def _flavor_name(self, fmt: int) -> Optional[str]:
        if fmt in self._SYNTHESIZED_FORMATS:
            return None
        if fmt in self._STANDARD_FORMATS:
            return self._STANDARD_FORMATS[fmt]
        try:
            name = wc.GetClipboardFormatName(fmt)
        except Exception:
            # Predefined formats without a name carry handles, not bytes.
            return None
        return self._REGISTERED_FORMATS.get(name, name)

    def _format_id(self, flavor: str) -> int:
        for fmt, name in self._STANDARD_FORMATS.items():
            if name == flavor:
                return fmt
        for native, name in self._REGISTERED_FORMATS.items():
            if name == flavor:
                return wc.RegisterClipboardFormat(native)
        return wc.RegisterClipboardFormat(flavor)

    def _read_format(self, fmt: int, flavor: str) -> Optional[bytes]:
        try:
            data = wc.GetClipboardData(fmt)
        except Exception as e:
            logger.debug(f"Could not read {flavor}: {e}")
            return None

        if isinstance(data, str):
            return data.encode("utf-8")
        if isinstance(data, (bytes, bytearray)):
            return bytes(data)
        return None
