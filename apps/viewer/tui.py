from __future__ import annotations

import threading

from adapters.terminal import GridCanvas, GridSurface
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Static

from apps.viewer.compose import ViewerSession


class FrameView(Static):
    DEFAULT_CSS = """
    FrameView {
        height: 1fr;
        border: round $accent;
    }
    """

    def show(self, canvas: GridCanvas, marker: str) -> None:
        self.update(canvas.to_text(marker))


class ViewerTUI(App):
    CSS_PATH = None
    TITLE = "termvid"
    BINDINGS = [
        ("q", "request_quit", "Quit"),
    ]

    def __init__(self, session: ViewerSession) -> None:
        super().__init__()
        self.session = session
        self._view: FrameView | None = None
        self._status: Static | None = None
        self._render_thread: threading.Thread | None = None
        consumer = session.consumer
        self._surface = GridSurface(self._view_size, consumer.x_bounds, consumer.y_bounds)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static(self._info_text())
        self._view = FrameView()
        self._view.border_title = "Video Capture"
        yield self._view
        # status bar under the frame (dynamic)
        self._status = Static("")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        self.session.start()
        self._render_thread = threading.Thread(
            target=self._render_loop, name="render-consumer", daemon=True
        )
        self._render_thread.start()
        self.set_interval(self.session.consumer.tick_s, self._flush_frame)
        self.set_interval(0.5, self._refresh_status)

    def on_unmount(self) -> None:
        self.session.stop()
        if self._render_thread and self._render_thread.is_alive():
            self._render_thread.join(timeout=1.0)

    # ----- Actions (key bindings) -----

    def action_request_quit(self) -> None:
        # the render loop owns shutdown; it fires the cancel signal
        self.session.keys.push("q")

    # ----- Render loop -----

    def _render_loop(self) -> None:
        self.session.consumer.run(self._surface, self.session.keys, self.session.cancel)

    def _view_size(self) -> tuple[int, int]:
        if self._view is None:
            return 0, 0
        size = self._view.content_size
        return size.width, size.height

    def _flush_frame(self) -> None:
        canvas = self._surface.take()
        if canvas is not None and self._view is not None:
            self._view.show(canvas, self.session.settings.marker)
        if self.session.cancel.is_set():
            self.exit()

    # ----- Status -----

    def _refresh_status(self) -> None:
        if self._status:
            self._status.update(self._status_text())

    def _info_text(self) -> str:
        s = self.session.settings
        where = "local capture" if s.mode == "local" else s.connect
        return f"[b]mode[/b]= {s.mode} • {where} • {s.width}x{s.height}"

    def _status_text(self) -> str:
        s = self.session
        parts = [f"Link: {s.link_state()}", f"Frame #{s.state.generation}"]
        if s.pump is not None:
            parts.append(f"rx {s.pump.frames_received} • rejected {s.pump.frames_rejected}")
            if s.pump.outbox is not None:
                parts.append(f"tx {s.pump.frames_sent}")
        if s.capture is not None:
            parts.append(f"Capture: {s.capture.fps():.1f} fps")
        return " • ".join(parts) + " • Q quit"
