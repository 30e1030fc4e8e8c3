from __future__ import annotations

import argparse
import logging
import sys

from ports.errors import ConnectError, DeviceUnavailable
from pydantic import ValidationError
from shared.config.loader import load_viewer_settings
from textual.logging import TextualHandler

from apps.viewer.compose import build_viewer


def _setup_logging(level: str, log_file: str | None) -> None:
    # stderr would tear the TUI; log to a file or to the Textual devtools console
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = TextualHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level.upper(), handlers=[handler])


def main() -> int:
    ap = argparse.ArgumentParser(prog="termvid-viewer")
    ap.add_argument("--profile", help="Settings profile under configs/profiles (default: dev).")
    ap.add_argument("--mode", choices=("local", "remote"), help="Render local capture or a stream.")
    ap.add_argument("--connect", help="Streamer endpoint, e.g. 127.0.0.1:3012.")
    ap.add_argument("--send", action="store_true", help="Remote mode: also send our camera.")
    ap.add_argument("--source", choices=("opencv", "mss"), help="Capture from camera or screen.")
    ap.add_argument("--device", type=int, help="Camera index for the opencv source.")
    ap.add_argument("--tick-ms", type=float, help="Render tick interval.")
    ap.add_argument("--log-level", default="INFO", help="Python logging level.")
    ap.add_argument("--log-file", help="Write logs here instead of the Textual console.")
    args = ap.parse_args()

    _setup_logging(args.log_level, args.log_file)

    try:
        settings = load_viewer_settings(profile=args.profile)
        updates: dict[str, object] = {}
        if args.mode:
            updates["mode"] = args.mode
        if args.connect:
            updates["connect"] = args.connect
        if args.send:
            updates["send_video"] = True
        if args.tick_ms is not None:
            updates["tick_ms"] = args.tick_ms
        capture_updates: dict[str, object] = {}
        if args.source:
            capture_updates["adapter"] = args.source
        if args.device is not None:
            capture_updates["device"] = args.device
        if capture_updates:
            updates["capture"] = {**settings.capture.model_dump(), **capture_updates}
        settings = type(settings).model_validate({**settings.model_dump(), **updates})
    except (ValidationError, RuntimeError) as ex:
        print(f"[viewer] invalid settings: {ex}", file=sys.stderr)
        return 2

    try:
        session = build_viewer(settings)
    except (DeviceUnavailable, ConnectError) as ex:
        print(f"[viewer] {ex}", file=sys.stderr)
        return 1

    # Launch the TUI; it starts and stops the session's loops.
    from apps.viewer.tui import ViewerTUI

    app = ViewerTUI(session)
    try:
        app.run()
    finally:
        session.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
