# libs/domain/stream/producer.py
from __future__ import annotations

import logging
import threading
from typing import Final

from domain.frames import FrameBuffer
from ports.errors import ConnectionClosed, ReadError
from ports.vision import CapturePort, ResizePort

from .sinks import FrameSink

LOG: Final = logging.getLogger("termvid.producer")


class CaptureProducer:
    """
    Capture -> resize -> emit loop, written once against FrameSink.
    The capture device must already be open (see the app compose layer).
    """

    def __init__(
        self,
        capture: CapturePort,
        resizer: ResizePort,
        sink: FrameSink,
        width: int,
        height: int,
        idle_ms: float = 5.0,
    ) -> None:
        self.capture: Final = capture
        self.resizer: Final = resizer
        self.sink: Final = sink
        self.width = width
        self.height = height
        self._idle_s = max(0.0, idle_ms) / 1000.0
        self.frames_emitted = 0
        self.read_failures = 0

    def step(self) -> bool:
        """One iteration. Returns False when the read failed and the tick was skipped."""
        try:
            frame = self.capture.read()
        except ReadError as ex:
            self.read_failures += 1
            LOG.debug("frame read failed (%d so far): %s", self.read_failures, ex)
            return False
        pixels = self.resizer.resize(frame, self.width, self.height)
        self.sink.emit(FrameBuffer(pixels=pixels, width=self.width, height=self.height))
        self.frames_emitted += 1
        return True

    def run(self, cancel: threading.Event) -> None:
        try:
            while not cancel.is_set():
                try:
                    self.step()
                except ConnectionClosed:
                    LOG.info("link closed; producer stopping")
                    break
                except Exception:
                    # stop the whole session, not just this thread
                    LOG.exception("producer failed; stopping session")
                    cancel.set()
                    break
                if cancel.wait(self._idle_s):
                    break
        finally:
            self.sink.close()
            self.capture.close()
            LOG.info(
                "producer stopped: %d frames, %d read failures",
                self.frames_emitted,
                self.read_failures,
            )
