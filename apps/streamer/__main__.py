from __future__ import annotations

import argparse
import logging
import sys

from ports.errors import DeviceUnavailable, ListenError
from pydantic import ValidationError
from shared.config.loader import load_streamer_settings

from apps.streamer.compose import build_streamer


def main() -> int:
    ap = argparse.ArgumentParser(prog="termvid-streamer")
    ap.add_argument("--profile", help="Settings profile under configs/profiles (default: dev).")
    ap.add_argument("--listen", help="Endpoint to listen on, e.g. 0.0.0.0:3012.")
    ap.add_argument("--source", choices=("opencv", "mss"), help="Capture from camera or screen.")
    ap.add_argument("--device", type=int, help="Camera index for the opencv source.")
    ap.add_argument("--log-level", default="INFO", help="Python logging level.")
    ap.add_argument("--quiet", action="store_true", help="Reduce console output.")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.WARNING if args.quiet else args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_streamer_settings(profile=args.profile)
        updates: dict[str, object] = {}
        if args.listen:
            updates["listen"] = args.listen
        capture_updates: dict[str, object] = {}
        if args.source:
            capture_updates["adapter"] = args.source
        if args.device is not None:
            capture_updates["device"] = args.device
        if capture_updates:
            updates["capture"] = {**settings.capture.model_dump(), **capture_updates}
        settings = type(settings).model_validate({**settings.model_dump(), **updates})
    except (ValidationError, RuntimeError) as ex:
        print(f"[streamer] invalid settings: {ex}", file=sys.stderr)
        return 2

    if not args.quiet:
        print(
            f"[streamer] channel_impl={settings.channel_impl} listen={settings.listen} "
            f"source={settings.capture.adapter} size={settings.width}x{settings.height}"
        )

    try:
        session = build_streamer(settings)
    except (DeviceUnavailable, ListenError) as ex:
        print(f"[streamer] {ex}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0

    try:
        session.run()
    except KeyboardInterrupt:
        if not args.quiet:
            print("\n[streamer] shutting down...")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
