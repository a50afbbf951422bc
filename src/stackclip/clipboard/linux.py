import hashlib
import logging
import os
import shutil
import subprocess
from typing import Dict, List, Mapping, Optional

from stackclip.clipboard import flavors
from stackclip.clipboard.base import ClipboardBackend

logger = logging.getLogger(__name__)


class LinuxClipboard(ClipboardBackend):
    """Clipboard access through wl-clipboard on Wayland or xclip on X11.

    Neither tool exposes a change counter, so this backend keeps its own:
    every call to ``change_count`` fingerprints the advertised targets and
    the primary payload, and bumps the counter when the fingerprint moves.

    Both tools serve a single target per write, so ``write_item`` writes
    the best flavor of the item only. Since the counter follows content,
    copying exactly what is already on the clipboard (for instance the text
    just restored) does not count as a change and is not recorded.
    """

    _TEXT_TARGETS = {
        "text/plain",
        "text/plain;charset=utf-8",
        "text/plain;charset=utf8",
        "utf8_string",
        "string",
        "text",
    }
    _IMAGE_TARGETS = {
        "image/png": "image/png",
        "image/jpeg": "image/jpeg",
        "image/jpg": "image/jpeg",
        "image/pjpeg": "image/jpeg",
        "image/bmp": "image/bmp",
        "image/x-ms-bmp": "image/bmp",
        "image/webp": "image/webp",
        "image/tiff": "image/tiff",
    }
    _OTHER_TARGETS = {
        "text/html": flavors.HTML,
        "text/rtf": flavors.RICH_TEXT,
        "text/richtext": flavors.RICH_TEXT,
        "application/rtf": flavors.RICH_TEXT,
    }
    _META_TARGETS = {
        "targets",
        "timestamp",
        "multiple",
        "save_targets",
        "delete",
        "include_selection",
        "insert_property",
        "insert_selection",
        "compound_text",
    }
    _WRITE_PRIORITY = (flavors.PLAIN_TEXT, flavors.HTML, flavors.RICH_TEXT)

    def __init__(self, tool: Optional[str] = None) -> None:
        self.tool = tool or self._detect_tool()
        self._native_targets: Dict[str, str] = {}
        self._fingerprint: Optional[str] = None
        self._change_count = 0

        if self.tool is None:
            logger.warning(
                "Neither wl-clipboard nor xclip found, clipboard is unavailable")

    def _detect_tool(self) -> Optional[str]:
        if os.environ.get("WAYLAND_DISPLAY") and shutil.which("wl-paste"):
            return "wayland"
        if shutil.which("xclip"):
            return "xclip"
        return None

    def change_count(self) -> int:
        fingerprint = self._current_fingerprint()
        if fingerprint != self._fingerprint:
            if self._fingerprint is not None:
                self._change_count += 1
            self._fingerprint = fingerprint
        return self._change_count

    def list_flavors(self) -> List[str]:
        self._native_targets = {}
        for target in self._list_targets():
            flavor = self._canonical_flavor(target)
            if flavor is not None and flavor not in self._native_targets:
                self._native_targets[flavor] = target
        return list(self._native_targets)

    def read_bytes(self, flavor: str) -> Optional[bytes]:
        target = self._native_targets.get(flavor, flavor)
        return self._read_target(target)

    def clear(self) -> None:
        if self.tool == "wayland":
            self._run_command(["wl-copy", "--clear"], timeout=2.0)
        elif self.tool == "xclip":
            self._run_command(
                ["xclip", "-selection", "clipboard", "-i"], timeout=2.0, input=b"")

    def write_item(self, flavor_map: Mapping[str, bytes]) -> bool:
        flavor = self._pick_write_flavor(flavor_map)
        if flavor is None or self.tool is None:
            return False

        payload = flavor_map[flavor]
        if self.tool == "wayland":
            command = ["wl-copy", "--type", flavor]
        else:
            command = ["xclip", "-selection", "clipboard", "-t", flavor, "-i"]

        if len(flavor_map) > 1:
            logger.debug(
                f"Writing {flavor} only, dropping {len(flavor_map) - 1} other flavors")
        return self._run_command(command, timeout=2.0, input=payload) is not None

    def _pick_write_flavor(self, flavor_map: Mapping[str, bytes]) -> Optional[str]:
        if not flavor_map:
            return None
        for flavor in flavor_map:
            if flavors.is_image(flavor):
                return flavor
        for flavor in self._WRITE_PRIORITY:
            if flavor in flavor_map:
                return flavor
        return next(iter(flavor_map))

    def _canonical_flavor(self, target: str) -> Optional[str]:
        target_lower = target.lower()
        if target_lower in self._META_TARGETS:
            return None
        if target_lower in self._TEXT_TARGETS:
            return flavors.PLAIN_TEXT
        if target_lower in self._IMAGE_TARGETS:
            return self._IMAGE_TARGETS[target_lower]
        if target_lower in self._OTHER_TARGETS:
            return self._OTHER_TARGETS[target_lower]
        return target

    def _current_fingerprint(self) -> str:
        targets = self._list_targets()
        digest = hashlib.md5("\n".join(targets).encode("utf-8"))

        primary = None
        for target in targets:
            if target.lower() in self._TEXT_TARGETS:
                primary = target
                break
        if primary is None:
            primary = next(
                (t for t in targets if t.lower() not in self._META_TARGETS), None)
        if primary is not None:
            digest.update(self._read_target(primary) or b"")
        return digest.hexdigest()

    def _list_targets(self) -> List[str]:
        if self.tool == "wayland":
            command = ["wl-paste", "--list-types"]
        elif self.tool == "xclip":
            command = ["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"]
        else:
            return []
        return self._parse_type_list(self._run_command(command, timeout=1.5))

    def _read_target(self, target: str) -> Optional[bytes]:
        if self.tool == "wayland":
            command = ["wl-paste", "--type", target]
            if target.lower().startswith("text/"):
                command.append("--no-newline")
        elif self.tool == "xclip":
            command = ["xclip", "-selection", "clipboard", "-t", target, "-o"]
        else:
            return None
        return self._run_command(command, timeout=1.5)

    def _parse_type_list(self, data: Optional[bytes]) -> List[str]:
        if not data:
            return []
        text = data.decode("utf-8", errors="ignore")
        return [line.strip() for line in text.splitlines() if line.strip()]

    def _run_command(
        self, command: List[str], timeout: float, input: Optional[bytes] = None
    ) -> Optional[bytes]:
        try:
            if input is None:
                result = subprocess.run(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    check=True,
                    timeout=timeout,
                )
                return result.stdout
            subprocess.run(
                command,
                input=input,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
                timeout=timeout,
            )
            return b""
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            logger.debug(f"{command[0]} failed: {e}")
            return None
