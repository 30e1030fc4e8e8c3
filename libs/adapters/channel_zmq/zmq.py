import logging
from time import monotonic
from typing import Final

import zmq
from ports.channel import ConnectionPort, Message
from ports.errors import ConnectError, ConnectionClosed, ListenError
from shared.contracts.v1.stream import FRAME_KIND, TEXT_KIND
from zmq.utils.monitor import recv_monitor_message

LOG: Final = logging.getLogger("termvid.channel.zmq")

# --------- Common helpers ---------

_CONNECT_FAILURES: Final = frozenset(
    {
        zmq.EVENT_CLOSED,
        zmq.EVENT_CONNECT_RETRIED,
        zmq.EVENT_HANDSHAKE_FAILED_NO_DETAIL,
        zmq.EVENT_HANDSHAKE_FAILED_PROTOCOL,
        zmq.EVENT_HANDSHAKE_FAILED_AUTH,
    }
)
_LISTEN_FAILURES: Final = frozenset({zmq.EVENT_CLOSED})
_OPENED: Final = frozenset({zmq.EVENT_ACCEPTED, zmq.EVENT_CONNECTED})
_PEER_GONE: Final = frozenset({zmq.EVENT_DISCONNECTED, zmq.EVENT_CLOSED})


def _new_ctx() -> zmq.Context:
    return zmq.Context.instance()


def endpoint(addr: str) -> str:
    """'host:port' -> 'tcp://host:port'; full endpoints pass through."""
    return addr if "://" in addr else f"tcp://{addr}"


def _pair_socket(snd_ms: int, rcv_ms: int) -> zmq.Socket:
    sock = _new_ctx().socket(zmq.PAIR)
    sock.setsockopt(zmq.LINGER, 0)
    sock.setsockopt(zmq.SNDTIMEO, snd_ms)
    sock.setsockopt(zmq.RCVTIMEO, rcv_ms)
    # keep queues short: stale frames are worthless
    sock.setsockopt(zmq.SNDHWM, 2)
    sock.setsockopt(zmq.RCVHWM, 2)
    # one peer for the life of the link; no automatic reconnect
    sock.setsockopt(zmq.RECONNECT_IVL, -1)
    return sock


def _wait_for_peer(
    monitor: zmq.Socket, timeout_ms: int | None, fail_on: frozenset
) -> tuple[int | None, int | None]:
    """
    Read monitor events until the ZMTP handshake succeeds or a failure event
    arrives. Returns (event, peer fd); event is None when timeout_ms elapses
    first. Handshake events carry no fd, so the peer is the oldest connection
    still open at that point, which is the one PAIR attached.
    """
    open_fds: list[int] = []
    deadline = None if timeout_ms is None else monotonic() + timeout_ms / 1000.0
    while True:
        slice_ms = 100
        if deadline is not None:
            slice_ms = min(slice_ms, int((deadline - monotonic()) * 1000))
            if slice_ms <= 0:
                return None, None
        if not monitor.poll(timeout=slice_ms):
            continue
        msg = recv_monitor_message(monitor)
        event, value = msg["event"], msg["value"]
        LOG.debug("monitor event %r (%r)", event, value)
        if event in _OPENED:
            open_fds.append(value)
        elif event == zmq.EVENT_DISCONNECTED and value in open_fds:
            open_fds.remove(value)
        elif event == zmq.EVENT_HANDSHAKE_SUCCEEDED:
            return event, (open_fds[0] if open_fds else None)
        if event in fail_on:
            return event, None


# --------- Connection (PAIR) ---------


class ZmqConnection(ConnectionPort):
    """
    PAIR socket carrying [kind, payload] messages. Bind side accepts exactly
    one peer; the socket monitor reports the peer going away.
    Not thread-safe: use from the pump thread only.
    """

    def __init__(self, sock: zmq.Socket, monitor: zmq.Socket, ep: str) -> None:
        self._sock = sock
        self._monitor = monitor
        self.endpoint = ep
        self._closed = False
        self._released = False
        # fd of the one accepted peer; monitor events for other fds are ignored
        self._peer_fd: int | None = None

    @classmethod
    def listen(
        cls, addr: str, accept_timeout_ms: int | None = None, send_timeout_ms: int = 500
    ) -> "ZmqConnection":
        ep = endpoint(addr)
        sock = _pair_socket(send_timeout_ms, send_timeout_ms)
        monitor = sock.get_monitor_socket()
        conn = cls(sock, monitor, ep)
        try:
            sock.bind(ep)
        except zmq.ZMQError as ex:
            conn.close()
            raise ListenError(f"cannot listen on {ep}: {ex}") from ex
        LOG.info("listening on %s", ep)
        event, peer_fd = _wait_for_peer(monitor, accept_timeout_ms, _LISTEN_FAILURES)
        if event != zmq.EVENT_HANDSHAKE_SUCCEEDED:
            conn.close()
            raise ListenError(f"no peer connected to {ep}")
        conn._peer_fd = peer_fd
        LOG.info("peer accepted on %s", ep)
        return conn

    @classmethod
    def connect(
        cls, addr: str, timeout_ms: int = 2000, send_timeout_ms: int = 500
    ) -> "ZmqConnection":
        ep = endpoint(addr)
        sock = _pair_socket(send_timeout_ms, send_timeout_ms)
        monitor = sock.get_monitor_socket()
        conn = cls(sock, monitor, ep)
        try:
            sock.connect(ep)
        except zmq.ZMQError as ex:
            conn.close()
            raise ConnectError(f"cannot connect to {ep}: {ex}") from ex
        event, peer_fd = _wait_for_peer(monitor, timeout_ms, _CONNECT_FAILURES)
        if event != zmq.EVENT_HANDSHAKE_SUCCEEDED:
            conn.close()
            reason = "timed out" if event is None else f"monitor event {event!r}"
            raise ConnectError(f"could not connect to {ep}: {reason}")
        conn._peer_fd = peer_fd
        LOG.info("connected to %s", ep)
        return conn

    # ----- ConnectionPort -----

    @property
    def closed(self) -> bool:
        return self._closed

    def send_binary(self, data: bytes) -> bool:
        return self._send(FRAME_KIND, data)

    def send_text(self, text: str) -> None:
        if not self._send(TEXT_KIND, text.encode("utf-8")):
            LOG.debug("text message dropped under backpressure")

    def recv(self, timeout_ms: int = 100) -> Message | None:
        self._ensure_open()
        try:
            if not self._sock.poll(timeout=timeout_ms):
                return None
            parts = self._sock.recv_multipart(flags=zmq.NOBLOCK)
        except zmq.Again:
            return None
        except zmq.ZMQError as ex:
            raise self._fail(ex) from ex
        if len(parts) != 2:
            LOG.warning("dropping %d-part message", len(parts))
            return None
        kind, payload = parts
        if kind == FRAME_KIND:
            return Message(kind="binary", payload=payload)
        if kind == TEXT_KIND:
            return Message(kind="text", payload=payload.decode("utf-8", errors="replace"))
        LOG.warning("dropping message of unknown kind %r", kind)
        return None

    def close(self) -> None:
        self._closed = True
        if self._released:
            return
        self._released = True
        self._sock.disable_monitor()
        self._monitor.close(0)
        self._sock.close(0)
        LOG.debug("closed %s", self.endpoint)

    # ----- internals -----

    def _send(self, kind: bytes, payload: bytes) -> bool:
        self._ensure_open()
        try:
            self._sock.send_multipart([kind, payload], flags=zmq.NOBLOCK, copy=False)
        except zmq.Again:
            # peer not draining; drop rather than queue a stale frame
            return False
        except zmq.ZMQError as ex:
            raise self._fail(ex) from ex
        return True

    def _ensure_open(self) -> None:
        if self._closed:
            raise ConnectionClosed(f"{self.endpoint} is closed")
        while True:
            try:
                msg = recv_monitor_message(self._monitor, flags=zmq.NOBLOCK)
            except zmq.Again:
                return
            if msg["event"] not in _PEER_GONE:
                continue
            if self._peer_fd is not None and msg["value"] != self._peer_fd:
                # a stray second peer; PAIR already refused it
                LOG.debug("ignoring monitor event %r for fd %r", msg["event"], msg["value"])
                continue
            self._closed = True
            raise ConnectionClosed(f"peer on {self.endpoint} disconnected")

    def _fail(self, ex: zmq.ZMQError) -> ConnectionClosed:
        self._closed = True
        return ConnectionClosed(f"{self.endpoint}: {ex}")
