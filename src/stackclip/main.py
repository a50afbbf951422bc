#!/usr/bin/env python3

import argparse
import logging
import signal
import sys
import time
from pathlib import Path
from typing import Optional, Tuple

from pydantic import ValidationError

from stackclip.clipboard import get_clipboard_backend
from stackclip.config import StackClipConfig
from stackclip.models.snapshot import ClipboardSnapshot, preview
from stackclip.services.engine import StackClipEngine
from stackclip.services.hotkey_service import HotkeyService
from stackclip.services.keystroke import has_automation_permission

logger = logging.getLogger(__name__)


class StackClipApp:

    def __init__(self, config: StackClipConfig, backend_name: Optional[str] = None):
        self.config = config
        self.backend_name = backend_name
        self.engine: Optional[StackClipEngine] = None
        self.hotkeys: Optional[HotkeyService] = None
        self.running = False

    def _on_stack_changed(self, stack: Tuple[ClipboardSnapshot, ...]):
        if not stack:
            logger.info("Stack is empty")
            return

        limit = self.config.max_preview_length
        logger.info(f"Stack ({len(stack)}/{self.config.max_stack_depth}):")
        for index, snapshot in enumerate(stack):
            logger.info(f"  [{index}] {preview(snapshot, limit)}")

    def start(self):
        if self.running:
            return

        self.running = True

        backend = get_clipboard_backend(self.backend_name)
        self.engine = StackClipEngine(
            backend,
            self.config,
            on_stack_changed=self._on_stack_changed,
        )

        if not has_automation_permission(prompt=True):
            logger.warning(
                "Accessibility permission missing: restores will update the "
                "clipboard but not paste")

        self.hotkeys = HotkeyService(
            self.config,
            on_pop=lambda: self.engine.request_restore(pop=True),
            on_peek=lambda: self.engine.request_restore(pop=False),
        )
        self.hotkeys.start()

        self.engine.start()
        print("StackClip running. Press Ctrl+C to stop")

    def stop(self):
        if not self.running:
            return

        self.running = False

        if self.hotkeys:
            self.hotkeys.stop()

        if self.engine:
            self.engine.stop()

        print("StackClip stopped")

    def run_forever(self):
        self.start()

        try:
            while self.running:
                time.sleep(1.0)
        except KeyboardInterrupt:
            print("\nStopping...")
        finally:
            self.stop()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="StackClip - Clipboard history stack with pop-and-paste"
    )

    parser.add_argument(
        "-d", "--base-delay",
        type=float,
        default=None,
        help="Base delay in seconds before the synthetic paste (default: 0.25)"
    )

    parser.add_argument(
        "-m", "--max-depth",
        type=int,
        default=None,
        help="Maximum number of stack entries (default: 20)"
    )

    parser.add_argument(
        "-l", "--preview-length",
        type=int,
        default=None,
        help="Preview length in characters, 100 or more for no limit (default: 32)"
    )

    parser.add_argument(
        "-i", "--poll-interval",
        type=float,
        default=None,
        help="Clipboard polling interval in seconds (default: 0.5)"
    )

    parser.add_argument(
        "--pop-hotkey",
        type=str,
        default=None,
        help="Hotkey that pastes and pops the top entry"
    )

    parser.add_argument(
        "--peek-hotkey",
        type=str,
        default=None,
        help="Hotkey that pastes the top entry without popping it"
    )

    parser.add_argument(
        "--backend",
        type=str,
        default=None,
        help="Clipboard backend override (Darwin, Windows, Linux or memory)"
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Read STACKCLIP_* settings from this .env file"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args(argv)


def load_config(args) -> StackClipConfig:
    return StackClipConfig.from_env(
        env_path=args.env_file,
        base_paste_delay=args.base_delay,
        max_stack_depth=args.max_depth,
        max_preview_length=args.preview_length,
        poll_interval=args.poll_interval,
        pop_hotkey=args.pop_hotkey,
        peek_hotkey=args.peek_hotkey,
    )


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_config(args)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)

    app = StackClipApp(config, backend_name=args.backend)

    def signal_handler(signum, frame):
        app.stop()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        app.run_forever()
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
