from __future__ import annotations

import threading
import time

import pytest
from adapters.channel_inproc import InprocChannel, InprocConnection
from ports.channel import Message
from ports.errors import ConnectError, ConnectionClosed, ListenError


def _recv(conn: InprocConnection, timeout_s: float = 0.5) -> Message | None:
    end = time.time() + timeout_s
    while time.time() < end:
        msg = conn.recv(timeout_ms=20)
        if msg is not None:
            return msg
    return None


def _linked(addr: str) -> tuple[InprocConnection, InprocConnection]:
    got: dict[str, InprocConnection] = {}
    th = threading.Thread(
        target=lambda: got.__setitem__("server", InprocChannel.listen(addr, accept_timeout_ms=1000)),
        daemon=True,
    )
    th.start()
    client = InprocChannel.connect(addr, timeout_ms=1000)
    th.join(timeout=1.0)
    return got["server"], client


def test_listen_connect_and_binary_roundtrip_is_byte_identical():
    server, client = _linked("inproc://roundtrip")
    payload = bytes(range(256)) * 3

    assert client.send_binary(payload) is True
    msg = _recv(server)
    assert msg == Message(kind="binary", payload=payload)

    assert server.send_binary(b"\x01\x02\x03") is True
    assert _recv(client) == Message(kind="binary", payload=b"\x01\x02\x03")


def test_text_kind_is_preserved():
    a, b = InprocConnection.pair()
    a.send_text("hello")
    assert _recv(b) == Message(kind="text", payload="hello")


def test_closing_either_end_closes_the_link():
    a, b = InprocConnection.pair()
    b.close()
    assert a.closed is True
    with pytest.raises(ConnectionClosed):
        a.recv(timeout_ms=1)
    with pytest.raises(ConnectionClosed):
        a.send_binary(b"x")


def test_send_reports_backpressure_when_peer_is_not_reading():
    a, _b = InprocConnection.pair()
    assert a.send_binary(b"1") is True
    assert a.send_binary(b"2") is True
    assert a.send_binary(b"3") is False


def test_connect_without_listener_fails():
    with pytest.raises(ConnectError):
        InprocChannel.connect("inproc://nobody-home", timeout_ms=30)


def test_listen_times_out_without_peer():
    with pytest.raises(ListenError, match="no peer"):
        InprocChannel.listen("inproc://lonely", accept_timeout_ms=20)
    # address is free again afterwards
    with pytest.raises(ListenError, match="no peer"):
        InprocChannel.listen("inproc://lonely", accept_timeout_ms=20)


def test_address_in_use():
    addr = "inproc://busy"
    errors: list[Exception] = []

    def first_listener() -> None:
        try:
            InprocChannel.listen(addr, accept_timeout_ms=300)
        except ListenError as ex:
            errors.append(ex)

    th = threading.Thread(target=first_listener, daemon=True)
    th.start()
    end = time.time() + 1.0
    while addr not in InprocChannel._listeners and time.time() < end:
        time.sleep(0.005)

    with pytest.raises(ListenError, match="in use"):
        InprocChannel.listen(addr, accept_timeout_ms=10)
    th.join(timeout=1.0)
    # the first listener simply timed out
    assert len(errors) == 1
