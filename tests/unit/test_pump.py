from __future__ import annotations

import threading

from adapters.channel_zmq import FakeConnection
from domain.frames import FrameBuffer, Outbox, SharedFrameState, frame_len
from domain.stream import ChannelPump
from ports.channel import Message


def test_binary_of_expected_size_replaces_frame():
    state = SharedFrameState(2, 2)
    pump = ChannelPump(FakeConnection(), state=state)
    payload = bytes(range(12))

    assert pump.dispatch(Message(kind="binary", payload=payload)) is True
    assert state.snapshot().pixels == payload
    assert pump.frames_received == 1


def test_binary_of_wrong_size_is_rejected_and_frame_kept():
    state = SharedFrameState(4, 2)
    before = state.snapshot()
    pump = ChannelPump(FakeConnection(), state=state)

    assert pump.dispatch(Message(kind="binary", payload=bytes(frame_len(4, 2) - 3))) is False
    assert pump.dispatch(Message(kind="binary", payload=b"")) is False

    assert state.snapshot() is before
    assert state.generation == 0
    assert pump.frames_rejected == 2
    assert pump.frames_received == 0


def test_text_messages_are_ignored():
    state = SharedFrameState(2, 2)
    pump = ChannelPump(FakeConnection(), state=state)
    assert pump.dispatch(Message(kind="text", payload="hello")) is False
    assert state.generation == 0
    assert pump.frames_rejected == 0


def test_binary_ignored_without_frame_state():
    pump = ChannelPump(FakeConnection(), state=None)
    assert pump.dispatch(Message(kind="binary", payload=bytes(12))) is False
    assert pump.frames_rejected == 0


def test_step_sends_pending_outbox_frame_once():
    conn = FakeConnection()
    outbox = Outbox()
    pump = ChannelPump(conn, outbox=outbox, poll_ms=0)

    outbox.put(b"abc")
    pump.step()
    pump.step()

    assert conn.sent_binary == [b"abc"]
    assert pump.frames_sent == 1


def test_step_counts_frames_dropped_under_backpressure():
    conn = FakeConnection(backpressure=True)
    outbox = Outbox()
    pump = ChannelPump(conn, outbox=outbox, poll_ms=0)

    outbox.put(b"abc")
    pump.step()

    assert conn.sent_binary == []
    assert pump.frames_dropped == 1


def test_step_receives_and_dispatches_injected_frame():
    state = SharedFrameState(1, 1)
    conn = FakeConnection(inbound=[Message(kind="binary", payload=b"\x01\x02\x03")])
    pump = ChannelPump(conn, state=state, poll_ms=10)

    pump.step()

    assert state.snapshot() == FrameBuffer(pixels=b"\x01\x02\x03", width=1, height=1)


def test_run_ends_on_peer_disconnect_and_fires_cancel():
    conn = FakeConnection()
    conn.drop_peer()
    cancel = threading.Event()
    pump = ChannelPump(conn, state=SharedFrameState(1, 1))

    pump.run(cancel)

    assert cancel.is_set()
    assert conn.close_calls == 1


def test_run_ends_on_cancel_and_closes_link():
    conn = FakeConnection()
    cancel = threading.Event()
    pump = ChannelPump(conn, state=SharedFrameState(1, 1), poll_ms=1)
    t = threading.Thread(target=pump.run, args=(cancel,), daemon=True)
    t.start()

    cancel.set()
    t.join(timeout=1.0)

    assert not t.is_alive()
    assert conn.closed is True
