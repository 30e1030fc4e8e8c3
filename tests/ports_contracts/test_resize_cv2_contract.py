import importlib.util

import pytest
from ports.vision import Frame

cv2_available = importlib.util.find_spec("cv2") is not None

pytestmark = pytest.mark.skipif(not cv2_available, reason="opencv not installed")


def _solid(width: int, height: int, channels: int, px: bytes) -> Frame:
    return Frame(width=width, height=height, channels=channels, data=px * (width * height))


def test_bgr_downsample_keeps_colour_and_size():
    from adapters.imaging import Cv2Resizer

    out = Cv2Resizer().resize(_solid(64, 32, 3, bytes([10, 20, 30])), 16, 8)
    assert isinstance(out, bytes)
    assert len(out) == 16 * 8 * 3
    assert out == bytes([10, 20, 30]) * (16 * 8)


def test_bgra_input_comes_out_bgr():
    from adapters.imaging import Cv2Resizer

    out = Cv2Resizer().resize(_solid(40, 20, 4, bytes([1, 2, 3, 255])), 4, 2)
    assert out == bytes([1, 2, 3]) * 8


def test_upscale_is_allowed():
    from adapters.imaging import Cv2Resizer

    out = Cv2Resizer().resize(_solid(2, 2, 3, bytes([5, 5, 5])), 7, 3)
    assert len(out) == 7 * 3 * 3
