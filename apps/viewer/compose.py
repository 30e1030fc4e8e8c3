from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Final

from adapters.terminal import KeyQueue
from domain.frames import Outbox, SharedFrameState
from domain.stream import CaptureProducer, ChannelPump, LocalSink, NetworkSink, RenderConsumer
from ports.channel import ConnectionPort
from ports.vision import CapturePort, ResizePort

from apps.streamer.compose import build_resizer, open_capture
from apps.viewer.settings import ViewerSettings

LOG: Final = logging.getLogger("termvid.viewer")


def connect(settings: ViewerSettings) -> ConnectionPort:
    """Connect to a streamer; ConnectError propagates (no retries)."""
    if settings.channel_impl == "zmq":
        from adapters.channel_zmq import ZmqConnection

        return ZmqConnection.connect(settings.connect, timeout_ms=settings.connect_timeout_ms)

    from adapters.channel_inproc import InprocChannel

    return InprocChannel.connect(settings.connect, timeout_ms=settings.connect_timeout_ms)


@dataclass
class ViewerSession:
    settings: ViewerSettings
    state: SharedFrameState
    consumer: RenderConsumer
    keys: KeyQueue = field(default_factory=KeyQueue)
    cancel: threading.Event = field(default_factory=threading.Event)
    capture: CapturePort | None = None
    producer: CaptureProducer | None = None
    pump: ChannelPump | None = None
    link: ConnectionPort | None = None
    _threads: list[threading.Thread] = field(default_factory=list)
    _started: bool = False

    def start(self) -> None:
        """Start the frame writers (producer and/or pump). The render loop is the caller's."""
        self._started = True
        if self.producer is not None:
            self._spawn("capture-producer", self.producer.run)
        if self.pump is not None:
            self._spawn("channel-pump", self.pump.run)

    def _spawn(self, name: str, target: Callable[[threading.Event], None]) -> None:
        t = threading.Thread(target=target, args=(self.cancel,), name=name, daemon=True)
        t.start()
        self._threads.append(t)

    def stop(self, timeout: float = 1.0) -> None:
        self.cancel.set()
        if not self._started:
            # loops never ran; release what they would have closed
            if self.link is not None:
                self.link.close()
            if self.capture is not None:
                self.capture.close()
        for t in self._threads:
            t.join(timeout=timeout)
        self._threads.clear()

    def link_state(self) -> str:
        if self.link is None:
            return "local"
        return "down" if self.link.closed else "up"


def build_viewer(
    settings: ViewerSettings,
    capture: CapturePort | None = None,
    resizer: ResizePort | None = None,
    link: ConnectionPort | None = None,
) -> ViewerSession:
    geometry = settings.geometry()
    state = SharedFrameState.from_geometry(geometry)
    consumer = RenderConsumer(state, tick_ms=settings.tick_ms)
    session = ViewerSession(settings=settings, state=state, consumer=consumer)

    wants_capture = settings.mode == "local" or settings.send_video
    if wants_capture:
        session.capture = open_capture(settings.capture, capture)
        resizer = resizer if resizer is not None else build_resizer()

    if settings.mode == "local":
        assert session.capture is not None and resizer is not None
        session.producer = CaptureProducer(
            session.capture,
            resizer,
            LocalSink(state),
            geometry.width,
            geometry.height,
            idle_ms=settings.capture.idle_ms,
        )
        LOG.info("local mode %dx%d", geometry.width, geometry.height)
        return session

    try:
        session.link = link if link is not None else connect(settings)
    except BaseException:
        if session.capture is not None:
            session.capture.close()
        raise

    outbox = Outbox() if settings.send_video else None
    session.pump = ChannelPump(session.link, state=state, outbox=outbox, poll_ms=settings.poll_ms)
    if outbox is not None:
        assert session.capture is not None and resizer is not None
        session.producer = CaptureProducer(
            session.capture,
            resizer,
            NetworkSink(outbox, session.link, session.cancel),
            geometry.width,
            geometry.height,
            idle_ms=settings.capture.idle_ms,
        )
    LOG.info(
        "remote mode %dx%d, expecting %d-byte frames, send_video=%s",
        geometry.width,
        geometry.height,
        geometry.frame_bytes,
        settings.send_video,
    )
    return session
