"""
Film negative to positive conversion.

Manual inversion technique (invert, subtract film base, per-channel curves):
https://www.alexburkephoto.com/blog/2019/10/16/manual-inversion-of-color-negative-film

Stage order is fixed, each stage works on the previous stage's output:

    1. invert
    2. subtract film base
    3. channel curves
    4. contrast S-curve
    5. cyan correction
    6. noise reduction (whole image, large images only)

Stages 1-5 are pure functions over (N, 3) float arrays of RGB values.
"""

import logging
from typing import Optional

import numpy as np

from .. import settings
from .buffer import RGB, PixelBuffer, to_clamped_u8
from .colorspace import hsl_to_rgb, rgb_to_hsl
from .curves import adjust_channel_curve, apply_s_curve
from .film_base import estimate_film_base
from .noise import apply_noise_reduction
from .options import ChannelAdjustments, ConversionOptions, CyanAdjustment

logger = logging.getLogger(__name__)


# ============================================================================
# Stages
# ============================================================================

def invert(rgb: np.ndarray) -> np.ndarray:
    return 255.0 - np.asarray(rgb, dtype=np.float64)


def subtract_film_base(rgb: np.ndarray, base: RGB, opacity: float) -> np.ndarray:
    """Subtract the inverted base colour, scaled by opacity (0..1)."""
    base = np.array(base, dtype=np.float64)
    amount = (255.0 - base) * opacity
    return np.clip(rgb - amount[None, :], 0.0, 255.0)


def apply_channel_curves(rgb: np.ndarray, adjustments: ChannelAdjustments) -> np.ndarray:
    out = np.array(rgb, dtype=np.float64, copy=True)
    for c, strength in enumerate(adjustments):
        # exact comparison: only a literal 1.0 skips the curve
        if strength != 1.0:
            out[:, c] = adjust_channel_curve(out[:, c], strength)
    return out


def apply_contrast(rgb: np.ndarray, boost: float) -> np.ndarray:
    if boost == 1.0:
        return np.asarray(rgb, dtype=np.float64)
    return np.asarray(apply_s_curve(rgb, boost), dtype=np.float64)


def is_cyan_candidate(rgb: np.ndarray) -> np.ndarray:
    """
    Boolean mask of cyan-biased pixels.

    All comparisons are strict: g > r, b > r, |g - b| < 50,
    (g + b) / 2 > r * 1.3, g > 100, b > 100.
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    r, g, b = rgb[:, 0], rgb[:, 1], rgb[:, 2]

    bias = (g > r) & (b > r) & (np.abs(g - b) < settings.CYAN_MAX_GB_DIFFERENCE)
    cyan = (
        ((g + b) / 2.0 > r * settings.CYAN_RATIO)
        & (g > settings.CYAN_MIN_CHANNEL)
        & (b > settings.CYAN_MIN_CHANNEL)
    )
    return bias & cyan


def correct_cyan(rgb: np.ndarray, adjustment: CyanAdjustment) -> np.ndarray:
    """
    Shift hue, saturation and lightness of cyan pixels.

    The shift is scaled per pixel by how far min(g, b) sits above r
    (full effect at a difference of 100). Other pixels are returned as is.
    """
    out = np.array(rgb, dtype=np.float64, copy=True)

    idx = np.flatnonzero(is_cyan_candidate(out))
    if idx.size == 0:
        return out

    r, g, b = out[idx, 0], out[idx, 1], out[idx, 2]
    h, s, l = rgb_to_hsl(r, g, b)

    lo, hi = settings.CYAN_HUE_RANGE
    in_range = (h > lo) & (h < hi)
    if not np.any(in_range):
        return out

    idx = idx[in_range]
    r, g, b = r[in_range], g[in_range], b[in_range]
    h, s, l = h[in_range], s[in_range], l[in_range]

    strength = np.clip((np.minimum(g, b) - r) / 100.0, 0.0, 1.0)

    new_h = h + adjustment.hue * strength
    new_s = s * (1.0 - (1.0 - adjustment.saturation) * strength)
    new_l = l + adjustment.lightness * strength

    out[idx] = np.stack(hsl_to_rgb(new_h, new_s, new_l), axis=-1)

    logger.debug("Cyan correction applied to %d pixels", idx.size)

    return out


# ============================================================================
# Pipeline
# ============================================================================

def convert_negative_to_positive(
    buffer: PixelBuffer,
    options: Optional[ConversionOptions] = None,
) -> PixelBuffer:
    """
    Convert a negative scan to a positive.

    Args:
        buffer: Negative scan, 8-bit RGBA (left untouched)
        options: Conversion options, defaults if None

    Returns:
        New buffer of the same size; alpha copied from the input
    """
    if options is None:
        options = ConversionOptions()

    width, height = buffer.width, buffer.height
    base = estimate_film_base(buffer, options)

    rgb = buffer.rgb().reshape(-1, 3)

    rgb = invert(rgb)
    rgb = subtract_film_base(rgb, base, options.base_subtraction_opacity)
    rgb = apply_channel_curves(rgb, options.channel_adjustments)
    rgb = apply_contrast(rgb, options.contrast_boost)
    rgb = correct_cyan(rgb, options.cyan_adjustment)

    out = np.empty((height, width, 4), dtype=np.uint8)
    out[..., :3] = to_clamped_u8(rgb).reshape(height, width, 3)
    out[..., 3] = buffer.alpha()
    pixels = out.reshape(-1)

    min_size = settings.NOISE_REDUCTION_MIN_SIZE
    if width > min_size and height > min_size:
        pixels = apply_noise_reduction(
            pixels, width, height, settings.NOISE_REDUCTION_STRENGTH
        )

    logger.debug(
        "Converted %dx%d negative (base=%s, opacity=%.2f, contrast=%.2f)",
        width, height, tuple(base), options.base_subtraction_opacity, options.contrast_boost,
    )

    return PixelBuffer(width, height, pixels)
