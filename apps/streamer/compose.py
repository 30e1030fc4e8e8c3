from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Final

from domain.frames import Outbox
from domain.stream import CaptureProducer, ChannelPump, NetworkSink
from ports.channel import ConnectionPort
from ports.vision import CapturePort, ResizePort

from apps.streamer.settings import CaptureSettings, StreamerSettings

LOG: Final = logging.getLogger("termvid.streamer")


def build_capture(cfg: CaptureSettings) -> CapturePort:
    if cfg.adapter == "opencv":
        from adapters.camera_capture.opencv import OpenCVCapture

        return OpenCVCapture(device=cfg.device)
    if cfg.adapter == "mss":
        from adapters.screen_capture.mss import MSSCapture

        return MSSCapture(monitor=cfg.monitor, target_fps=cfg.target_fps)
    raise ValueError(f"Unknown capture adapter: {cfg.adapter}")


def open_capture(cfg: CaptureSettings, capture: CapturePort | None = None) -> CapturePort:
    """Build (unless given) and open the device; DeviceUnavailable propagates."""
    capture = capture if capture is not None else build_capture(cfg)
    capture.open()
    return capture


def build_resizer() -> ResizePort:
    from adapters.imaging import Cv2Resizer

    return Cv2Resizer()


def listen(settings: StreamerSettings) -> ConnectionPort:
    """Block until one viewer connects; ListenError propagates."""
    if settings.channel_impl == "zmq":
        from adapters.channel_zmq import ZmqConnection

        return ZmqConnection.listen(settings.listen, accept_timeout_ms=settings.accept_timeout_ms)

    from adapters.channel_inproc import InprocChannel

    return InprocChannel.listen(settings.listen, accept_timeout_ms=settings.accept_timeout_ms)


@dataclass
class StreamerSession:
    producer: CaptureProducer
    pump: ChannelPump
    cancel: threading.Event = field(default_factory=threading.Event)

    def run(self) -> None:
        """Producer on the calling thread, pump on its own; returns when either stops."""
        pump_thr = threading.Thread(
            target=self.pump.run, args=(self.cancel,), name="channel-pump", daemon=True
        )
        pump_thr.start()
        try:
            self.producer.run(self.cancel)
        finally:
            self.cancel.set()
            pump_thr.join(timeout=1.0)


def build_streamer(
    settings: StreamerSettings,
    capture: CapturePort | None = None,
    resizer: ResizePort | None = None,
    link: ConnectionPort | None = None,
) -> StreamerSession:
    # device first: no point accepting a viewer we cannot feed
    capture = open_capture(settings.capture, capture)
    try:
        link = link if link is not None else listen(settings)
    except BaseException:
        capture.close()
        raise

    geometry = settings.geometry()
    cancel = threading.Event()
    outbox = Outbox()
    producer = CaptureProducer(
        capture,
        resizer if resizer is not None else build_resizer(),
        NetworkSink(outbox, link, cancel),
        geometry.width,
        geometry.height,
        idle_ms=settings.capture.idle_ms,
    )
    pump = ChannelPump(link, state=None, outbox=outbox, poll_ms=settings.poll_ms)
    LOG.info(
        "streaming %dx%d (%d bytes per frame)",
        geometry.width,
        geometry.height,
        geometry.frame_bytes,
    )
    return StreamerSession(producer=producer, pump=pump, cancel=cancel)
