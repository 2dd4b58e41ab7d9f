# core/export.py
from pathlib import Path

import cv2
import numpy as np

from .. import settings
from .buffer import PixelBuffer


class ImageSaveError(Exception):
    """Raised when a buffer cannot be encoded or written."""
    pass


_JPEG_EXTENSIONS = (".jpg", ".jpeg")


def _to_bgr(buffer: PixelBuffer, keep_alpha: bool) -> np.ndarray:
    rgba = buffer.as_array()
    if keep_alpha:
        return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
    return cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)


def _encode_params(ext: str, quality: int) -> list[int]:
    if ext in _JPEG_EXTENSIONS:
        return [cv2.IMWRITE_JPEG_QUALITY, int(quality)]
    if ext == ".png":
        return [cv2.IMWRITE_PNG_COMPRESSION, settings.DEFAULT_PNG_COMPRESSION]
    return []


def encode_image(
    buffer: PixelBuffer,
    ext: str = ".jpg",
    quality: int = settings.DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Encode a buffer to image file bytes (for download/display).
    JPEG drops alpha, PNG keeps it.
    """
    ext = ext.lower() if ext.startswith(".") else "." + ext.lower()
    img = _to_bgr(buffer, keep_alpha=ext not in _JPEG_EXTENSIONS)

    try:
        ok, encoded = cv2.imencode(ext, img, _encode_params(ext, quality))
    except cv2.error as e:
        raise ImageSaveError(f"Encoding as {ext} failed: {e}") from e
    if not ok:
        raise ImageSaveError(f"Encoding as {ext} failed")
    return encoded.tobytes()


def save_image(
    buffer: PixelBuffer,
    path: str | Path,
    quality: int = settings.DEFAULT_JPEG_QUALITY,
) -> None:
    """
    Write a buffer to disk, format from the file extension. Uses OpenCV.
    """
    path = Path(path)
    ext = path.suffix.lower()
    if not ext:
        raise ImageSaveError(f"No file extension in {path}, cannot pick a format")

    path.parent.mkdir(parents=True, exist_ok=True)
    img = _to_bgr(buffer, keep_alpha=ext not in _JPEG_EXTENSIONS)

    try:
        ok = cv2.imwrite(str(path), img, _encode_params(ext, quality))
    except cv2.error as e:
        raise ImageSaveError(f"Saving failed: {path}: {e}") from e
    if not ok:
        raise ImageSaveError(f"Saving failed: {path}")


def to_qimage(buffer: PixelBuffer):
    """
    Buffer -> QImage (RGBA8888) for display. Needs PyQt6.
    """
    from PyQt6.QtGui import QImage

    arr = np.ascontiguousarray(buffer.as_array())
    bytes_per_line = 4 * buffer.width
    qimg = QImage(
        arr.data, buffer.width, buffer.height, bytes_per_line, QImage.Format.Format_RGBA8888
    )
    # Force a copy so the numpy array can be released
    return qimg.copy()
