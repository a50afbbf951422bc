"""Immutable capture of one clipboard state across all its flavors."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from striprtf.striprtf import rtf_to_text
from ulid import ULID

from stackclip.clipboard.base import ClipboardBackend
from stackclip.clipboard.flavors import PLAIN_TEXT, RICH_TEXT
from stackclip.config import PREVIEW_LENGTH_CEILING

logger = logging.getLogger(__name__)

NO_PREVIEW = "No preview available"


@dataclass(frozen=True)
class ClipboardSnapshot:
    """Flavor -> bytes mapping kept in sorted flavor order.

    Equality and hashing only look at the flavors, so two captures of the
    same content compare equal whatever order the platform listed them in.
    """
    items: Tuple[Tuple[str, bytes], ...]
    snapshot_id: str = field(
        default_factory=lambda: str(ULID()), compare=False)
    captured_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self) -> None:
        if not self.items:
            raise ValueError("a snapshot needs at least one flavor")
        flavor_map = dict(self.items)
        if len(flavor_map) != len(self.items):
            raise ValueError("a snapshot cannot repeat a flavor")
        object.__setattr__(self, "items", tuple(sorted(flavor_map.items())))

    @classmethod
    def from_flavors(
        cls, flavor_map: Mapping[str, Optional[bytes]]
    ) -> Optional["ClipboardSnapshot"]:
        """Build a snapshot, omitting flavors that yielded no bytes.

        Returns None when nothing is left.
        """
        items = tuple(sorted(
            (flavor, bytes(payload))
            for flavor, payload in flavor_map.items()
            if payload is not None
        ))
        if not items:
            return None
        return cls(items=items)

    @property
    def flavor_map(self) -> Dict[str, bytes]:
        return dict(self.items)

    @property
    def flavor_types(self) -> FrozenSet[str]:
        return frozenset(flavor for flavor, _ in self.items)

    def get(self, flavor: str) -> Optional[bytes]:
        for name, payload in self.items:
            if name == flavor:
                return payload
        return None

    def restore_form(self) -> Dict[str, bytes]:
        return self.flavor_map

    def preview(self, max_length: int = PREVIEW_LENGTH_CEILING) -> str:
        return preview(self, max_length)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{flavor}: {len(payload)}B" for flavor, payload in self.items)
        return f"ClipboardSnapshot({self.snapshot_id}, {{{sizes}}})"


def capture(backend: ClipboardBackend) -> Optional[ClipboardSnapshot]:
    """Read every flavor currently on the clipboard into a snapshot."""
    return ClipboardSnapshot.from_flavors(backend.read_flavors())


def display_string(snapshot: ClipboardSnapshot) -> Optional[str]:
    data = snapshot.get(PLAIN_TEXT)
    if data:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            text = ""
        if text:
            return text

    data = snapshot.get(RICH_TEXT)
    if data:
        try:
            text = rtf_to_text(data.decode("latin-1"))
        except Exception as e:
            logger.debug(f"Could not convert rich text: {e}")
            text = ""
        if text:
            return text

    return None


def preview(snapshot: ClipboardSnapshot, max_length: int) -> str:
    text = display_string(snapshot)
    if text is None:
        return NO_PREVIEW
    if max_length < PREVIEW_LENGTH_CEILING:
        return text[:max_length]
    return text
