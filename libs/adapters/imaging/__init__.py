from .resize import Cv2Resizer

__all__ = ["Cv2Resizer"]
