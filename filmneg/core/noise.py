"""
Neighbour-averaging noise reduction.
"""

import logging

import cv2
import numpy as np

from .buffer import InvalidBufferError, round_half_up

logger = logging.getLogger(__name__)

# top, bottom, left, right - centre pixel excluded
_NEIGHBOUR_KERNEL = np.array(
    [
        [0.0, 0.25, 0.0],
        [0.25, 0.0, 0.25],
        [0.0, 0.25, 0.0],
    ],
    dtype=np.float64,
)


def apply_noise_reduction(
    pixels: np.ndarray,
    width: int,
    height: int,
    strength: float = 0.5,
) -> np.ndarray:
    """
    Blend every interior pixel with the mean of its 4-connected neighbours.

    Args:
        pixels: Flat RGBA uint8 data (width*height*4) or (H, W, 4) array
        width, height: Image dimensions
        strength: 0..1, 0 = no change, 1 = neighbour mean only

    Returns:
        New flat uint8 array. The 1-pixel frame and alpha are copied
        unchanged; neighbours are always read from the unfiltered input.

    Raises:
        InvalidBufferError: If the data size does not match width*height*4
    """
    data = np.asarray(pixels, dtype=np.uint8)
    if data.size != width * height * 4:
        raise InvalidBufferError(
            f"Buffer has {data.size} bytes, expected {width * height * 4} "
            f"for {width}x{height} RGBA"
        )
    snapshot = data.reshape(height, width, 4)
    out = snapshot.copy()

    if width < 3 or height < 3:
        return out.reshape(-1)

    rgb = snapshot[..., :3].astype(np.float64)

    # Border mode is irrelevant, the frame is discarded below
    avg = cv2.filter2D(rgb, cv2.CV_64F, _NEIGHBOUR_KERNEL, borderType=cv2.BORDER_REPLICATE)

    blended = (1.0 - strength) * rgb + strength * avg
    blended = round_half_up(blended)

    out[1:-1, 1:-1, :3] = np.clip(blended[1:-1, 1:-1], 0, 255).astype(np.uint8)

    logger.debug("Noise reduction %dx%d, strength=%.2f", width, height, strength)

    return out.reshape(-1)
