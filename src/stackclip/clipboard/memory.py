import threading
from typing import Dict, List, Mapping, Optional

from stackclip.clipboard.base import ClipboardBackend
from stackclip.clipboard.flavors import PLAIN_TEXT


class MemoryClipboard(ClipboardBackend):
    """In-process clipboard with a pasteboard-style change counter.

    Every write or clear bumps the counter, whether it came from
    ``copy`` (a simulated user copy) or from ``write_item``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._flavors: Dict[str, bytes] = {}
        self._change_count = 0
        self.writes: List[Dict[str, bytes]] = []

    def change_count(self) -> int:
        with self._lock:
            return self._change_count

    def list_flavors(self) -> List[str]:
        with self._lock:
            return list(self._flavors)

    def read_bytes(self, flavor: str) -> Optional[bytes]:
        with self._lock:
            return self._flavors.get(flavor)

    def clear(self) -> None:
        with self._lock:
            self._flavors = {}
            self._change_count += 1

    def write_item(self, flavor_map: Mapping[str, bytes]) -> bool:
        with self._lock:
            self._flavors = dict(flavor_map)
            self._change_count += 1
            self.writes.append(dict(flavor_map))
        return True

    def copy(self, flavors: Mapping[str, bytes]) -> None:
        with self._lock:
            self._flavors = dict(flavors)
            self._change_count += 1

    def copy_text(self, text: str) -> None:
        self.copy({PLAIN_TEXT: text.encode("utf-8")})

    @property
    def contents(self) -> Dict[str, bytes]:
        with self._lock:
            return dict(self._flavors)
