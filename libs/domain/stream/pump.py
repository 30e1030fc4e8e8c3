from __future__ import annotations

import logging
import threading
from typing import Final

from domain.frames import FrameBuffer, Outbox, SharedFrameState
from ports.channel import ConnectionPort, Message
from ports.errors import ConnectionClosed

LOG: Final = logging.getLogger("termvid.pump")


class ChannelPump:
    """
    Owns one connection. Each step sends the pending outbound frame (if any),
    then receives at most one message and dispatches it:
      binary of the negotiated size -> state.replace
      binary of any other size      -> rejected
      text                          -> ignored (reserved for control)
    """

    def __init__(
        self,
        conn: ConnectionPort,
        state: SharedFrameState | None = None,
        outbox: Outbox | None = None,
        poll_ms: int = 5,
    ) -> None:
        self.conn: Final = conn
        self.state = state
        self.outbox = outbox
        self.poll_ms = max(0, int(poll_ms))
        self.frames_sent = 0
        self.frames_dropped = 0
        self.frames_received = 0
        self.frames_rejected = 0

    def dispatch(self, msg: Message) -> bool:
        """Apply one inbound message. True if it replaced the shared frame."""
        if msg.kind == "text":
            LOG.debug("text message ignored: %r", msg.payload)
            return False
        if self.state is None:
            LOG.debug("binary message ignored: no frame state on this side")
            return False
        payload = msg.payload
        if not isinstance(payload, bytes):
            payload = payload.encode("utf-8")
        geometry = self.state.geometry
        if len(payload) != geometry.frame_bytes:
            self.frames_rejected += 1
            LOG.warning(
                "rejected frame: %d bytes, expected %d for %dx%d",
                len(payload),
                geometry.frame_bytes,
                geometry.width,
                geometry.height,
            )
            return False
        buffer = FrameBuffer(pixels=payload, width=geometry.width, height=geometry.height)
        self.state.replace(buffer)
        self.frames_received += 1
        return True

    def step(self) -> None:
        if self.outbox is not None:
            pending = self.outbox.take()
            if pending is not None:
                if self.conn.send_binary(pending):
                    self.frames_sent += 1
                else:
                    self.frames_dropped += 1
        msg = self.conn.recv(timeout_ms=self.poll_ms)
        if msg is not None:
            self.dispatch(msg)

    def run(self, cancel: threading.Event) -> None:
        try:
            while not cancel.is_set():
                self.step()
        except ConnectionClosed as ex:
            LOG.info("connection closed: %s", ex)
        finally:
            self.conn.close()
            # stop the counterpart loops too
            cancel.set()
            LOG.info(
                "pump stopped: sent=%d dropped=%d received=%d rejected=%d",
                self.frames_sent,
                self.frames_dropped,
                self.frames_received,
                self.frames_rejected,
            )
