from abc import ABC, abstractmethod
from typing import Dict, List, Mapping, Optional


class ClipboardBackend(ABC):
    """Access to the system clipboard as a set of flavors.

    Flavor identifiers are the canonical names from ``clipboard.flavors``
    where the backend knows one, otherwise the native type name.
    """

    @abstractmethod
    def change_count(self) -> int:
        pass

    @abstractmethod
    def list_flavors(self) -> List[str]:
        pass

    @abstractmethod
    def read_bytes(self, flavor: str) -> Optional[bytes]:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def write_item(self, flavor_map: Mapping[str, bytes]) -> bool:
        pass

    def read_flavors(self) -> Dict[str, Optional[bytes]]:
        return {flavor: self.read_bytes(flavor) for flavor in self.list_flavors()}
