from __future__ import annotations

import threading
import time

from adapters.terminal import RecordingCanvas, RecordingSurface, ScriptedKeys
from domain.frames import FrameBuffer, SharedFrameState
from domain.stream import RenderConsumer


def test_paint_black_2x2_frame_draws_centred_points():
    black = FrameBuffer(pixels=bytes(12), width=2, height=2)
    consumer = RenderConsumer(SharedFrameState(2, 2, initial=black))
    canvas = RecordingCanvas()

    assert consumer.paint(canvas) == 4

    assert canvas.calls == [
        (-1.0, 1.0, (0, 0, 0)),
        (0.0, 1.0, (0, 0, 0)),
        (-1.0, 0.0, (0, 0, 0)),
        (0.0, 0.0, (0, 0, 0)),
    ]


def test_paint_swaps_stored_bgr_to_rgb():
    buf = FrameBuffer(pixels=bytes([1, 2, 3, 4, 5, 6]), width=2, height=1)
    consumer = RenderConsumer(SharedFrameState(2, 1, initial=buf))
    canvas = RecordingCanvas()

    consumer.paint(canvas)

    assert [c for _, _, c in canvas.calls] == [(3, 2, 1), (6, 5, 4)]


def test_bounds_follow_frame_size():
    consumer = RenderConsumer(SharedFrameState(720, 180))
    assert consumer.x_bounds == (-360.0, 360.0)
    assert consumer.y_bounds == (-90.0, 90.0)


def test_quit_key_fires_cancel_and_stops_loop():
    consumer = RenderConsumer(SharedFrameState(2, 2), tick_ms=1.0)
    surface = RecordingSurface()
    keys = ScriptedKeys([None, "x", "q"])
    cancel = threading.Event()

    consumer.run(surface, keys, cancel)

    assert cancel.is_set()
    # two ticks rendered ("no key" and a non-quit key); the quit tick draws nothing
    assert len(surface.passes) == 2
    assert consumer.ticks == 2
    assert all(len(p.calls) == 4 for p in surface.passes)


def test_loop_exits_when_cancel_already_set():
    consumer = RenderConsumer(SharedFrameState(2, 2))
    surface = RecordingSurface()
    keys = ScriptedKeys()
    cancel = threading.Event()
    cancel.set()

    consumer.run(surface, keys, cancel)

    assert keys.polls == 0
    assert surface.passes == []


def test_loop_stops_when_another_thread_cancels():
    consumer = RenderConsumer(SharedFrameState(2, 2), tick_ms=5.0)
    surface = RecordingSurface()
    cancel = threading.Event()
    t = threading.Thread(
        target=consumer.run, args=(surface, ScriptedKeys(), cancel), daemon=True
    )
    t.start()
    time.sleep(0.05)
    cancel.set()
    t.join(timeout=1.0)

    assert not t.is_alive()
    assert len(surface.passes) > 0
