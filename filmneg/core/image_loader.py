"""
Decode image files into RGBA pixel buffers.

RAW files (RAF, DNG, NEF, ARW, CR2, CR3, ...) are developed with rawpy
(LibRaw) to 8-bit RGB with no white balance and no auto brightness, so
the orange film mask survives for the conversion to remove. Everything
else (TIFF, PNG, JPEG scans) goes through Pillow.
"""

from pathlib import Path

import numpy as np
import rawpy
from PIL import Image, UnidentifiedImageError

from .. import settings
from .buffer import PixelBuffer


class ImageLoadError(Exception):
    """Raised when an image file cannot be loaded or decoded."""
    pass


def is_raw_file(filepath: str | Path) -> bool:
    return Path(filepath).suffix.lower() in settings.RAW_EXTENSIONS


def load_image(filepath: str | Path) -> PixelBuffer:
    """
    Load an image file as an 8-bit RGBA buffer.

    Args:
        filepath: Path to a RAW or raster image

    Returns:
        PixelBuffer (RAW files get alpha 255)

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded
    """
    filepath = Path(filepath)

    if not filepath.exists():
        raise ImageLoadError(f"File not found: {filepath}")

    if is_raw_file(filepath):
        return PixelBuffer.from_array(_load_raw_rgb(filepath))

    try:
        with Image.open(filepath) as img:
            rgba = np.asarray(img.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Failed to decode image {filepath}: {e}") from e

    return PixelBuffer.from_array(rgba)


def _load_raw_rgb(filepath: Path) -> np.ndarray:
    try:
        with rawpy.imread(str(filepath)) as raw:
            rgb = raw.postprocess(
                demosaic_algorithm=rawpy.DemosaicAlgorithm.AHD,
                output_color=rawpy.ColorSpace.sRGB,
                no_auto_bright=True,     # No auto exposure
                use_camera_wb=False,     # No white balance, keep the mask
                use_auto_wb=False,
                output_bps=8,
            )
    except rawpy.LibRawError as e:
        raise ImageLoadError(f"Failed to process RAW file: {e}") from e

    return np.ascontiguousarray(rgb, dtype=np.uint8)


def get_image_info(filepath: str | Path) -> dict:
    """Dimensions and format of an image file (plus camera data for RAW)."""
    filepath = Path(filepath)

    if not filepath.exists():
        raise ImageLoadError(f"File not found: {filepath}")

    if is_raw_file(filepath):
        try:
            with rawpy.imread(str(filepath)) as raw:
                return {
                    "format": "RAW",
                    "width": raw.sizes.width,
                    "height": raw.sizes.height,
                    "color_desc": raw.color_desc.decode(errors="replace"),
                    "sensor_type": _sensor_type(raw),
                }
        except rawpy.LibRawError as e:
            raise ImageLoadError(f"Failed to read RAW info: {e}") from e

    try:
        with Image.open(filepath) as img:
            return {
                "format": img.format,
                "width": img.width,
                "height": img.height,
                "mode": img.mode,
            }
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Failed to read image info: {e}") from e


def _sensor_type(raw) -> str:
    # X-Trans has a 6x6 colour filter pattern, Bayer 2x2
    pattern = raw.raw_pattern
    if pattern is None:
        return "Unknown"
    return "X-Trans" if pattern.shape == (6, 6) else "Bayer"
