"""
RGBA pixel buffer and small numeric helpers shared by the pipeline.

A PixelBuffer is what the decode collaborator hands to the core and what
the core hands back: width, height and a flat, interleaved RGBA byte array
(row-major, top-to-bottom).
"""

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


class InvalidBufferError(ValueError):
    """Raised when pixel data does not match the declared dimensions."""
    pass


class RGB(NamedTuple):
    r: int
    g: int
    b: int


class HSL(NamedTuple):
    h: float  # degrees, 0..360
    s: float  # 0..1
    l: float  # 0..1


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    8-bit RGBA image.

    Args:
        width: Image width in pixels
        height: Image height in pixels
        pixels: width*height*4 bytes (bytes, bytearray, sequence or ndarray)

    Raises:
        InvalidBufferError: If the pixel count does not match width*height*4
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise InvalidBufferError(
                f"Negative dimensions: {self.width}x{self.height}"
            )

        data = self.pixels
        if isinstance(data, (bytes, bytearray, memoryview)):
            arr = np.frombuffer(data, dtype=np.uint8).copy()
        else:
            # Own copy, the caller may keep writing to its array
            arr = np.array(data)
            if arr.dtype != np.uint8:
                if arr.size and np.issubdtype(arr.dtype, np.floating):
                    if not np.all(np.isfinite(arr)) or np.any(arr != np.floor(arr)):
                        raise InvalidBufferError("Pixel values must be integers")
                if arr.size and (arr.min() < 0 or arr.max() > 255):
                    raise InvalidBufferError("Pixel values must be in 0..255")
                arr = arr.astype(np.uint8)
            arr = arr.reshape(-1)

        expected = self.width * self.height * 4
        if arr.size != expected:
            raise InvalidBufferError(
                f"Buffer has {arr.size} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGBA"
            )

        object.__setattr__(self, "pixels", arr)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an (H, W, 4) or (H, W, 3) uint8 array."""
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise InvalidBufferError(f"Expected (H, W, 3|4) array, got shape {arr.shape}")

        h, w = arr.shape[:2]
        if arr.shape[2] == 3:
            rgba = np.empty((h, w, 4), dtype=np.uint8)
            rgba[..., :3] = arr
            rgba[..., 3] = 255
            arr = rgba

        return cls(w, h, np.ascontiguousarray(arr, dtype=np.uint8).reshape(-1))

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        """Uniform-color buffer."""
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[...] = rgba
        return cls(width, height, arr.reshape(-1))

    def as_array(self) -> np.ndarray:
        return self.pixels.reshape(self.height, self.width, 4)

    def rgb(self) -> np.ndarray:
        return self.as_array()[..., :3]

    def alpha(self) -> np.ndarray:
        return self.as_array()[..., 3]

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.pixels.copy())

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.pixels, other.pixels)
        )

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"


def round_half_up(x):
    """Round like JavaScript's Math.round (ties go towards +inf)."""
    return np.floor(np.asarray(x, dtype=np.float64) + 0.5)


def to_clamped_u8(x) -> np.ndarray:
    """Store values the way a clamped byte array does: clamp, ties to even."""
    return np.clip(np.rint(x), 0, 255).astype(np.uint8)


def unwrap_scalar(x):
    # 0-d arrays back to Python scalars so scalar callers get scalars
    x = np.asarray(x)
    return x.item() if x.ndim == 0 else x
