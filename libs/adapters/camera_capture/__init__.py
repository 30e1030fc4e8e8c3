from .fakes import FakeCapturePort, FakeResizer, solid_frame

__all__ = ["FakeCapturePort", "FakeResizer", "solid_frame"]
