"""
Film base (orange mask) colour estimation.

The unexposed film border is pure film base. Its colour is what the
conversion subtracts to neutralise the mask. Sources, in order of priority:

1. Explicit colour (manual pick or preset) - used as is
2. Border sampling - average of pixels along the four image edges
3. Default C-41 base colour
"""

import logging
from typing import Optional

import numpy as np

from .. import settings
from .buffer import RGB, PixelBuffer, round_half_up
from .options import DEFAULT_FILM_BASE, ConversionOptions

logger = logging.getLogger(__name__)


def _edge_coordinates(width: int, height: int):
    """(x, y) sample positions per edge: top, bottom, left, right."""
    step = settings.BORDER_SAMPLE_STRIDE
    yield [(x, 0) for x in range(0, width, step)]
    yield [(x, height - 1) for x in range(0, width, step)]
    yield [(0, y) for y in range(0, height, step)]
    yield [(width - 1, y) for y in range(0, height, step)]


def sample_border(
    buffer: PixelBuffer,
    limit: int = settings.BORDER_SAMPLE_LIMIT,
) -> Optional[RGB]:
    """
    Estimate the film base colour from the image edges.

    Walks top, bottom, left and right edge with a fixed stride and stops
    as soon as `limit` samples are collected.

    Args:
        buffer: Negative scan
        limit: Maximum number of samples over all edges

    Returns:
        Average colour, or None if the image has no pixels
    """
    if buffer.width == 0 or buffer.height == 0:
        return None

    coords = []
    for edge in _edge_coordinates(buffer.width, buffer.height):
        for xy in edge:
            if len(coords) >= limit:
                break
            coords.append(xy)

    if not coords:
        return None

    xs, ys = np.array(coords).T
    samples = buffer.rgb()[ys, xs].astype(np.float64)

    mean = round_half_up(samples.sum(axis=0) / len(coords))
    return RGB(*(int(c) for c in mean))


def sample_color(buffer: PixelBuffer, x: int, y: int, patch_size: int = 1) -> RGB:
    """
    Colour at a picked position (colour dropper).

    Args:
        buffer: Negative scan
        x, y: Pixel coordinates
        patch_size: >1 averages a square patch centred on (x, y),
            clipped to the image

    Raises:
        ValueError: If (x, y) lies outside the image
    """
    if not (0 <= x < buffer.width and 0 <= y < buffer.height):
        raise ValueError(
            f"Pick position ({x}, {y}) outside image {buffer.width}x{buffer.height}"
        )

    if patch_size <= 1:
        r, g, b = buffer.rgb()[y, x]
        return RGB(int(r), int(g), int(b))

    half = patch_size // 2
    x0 = max(0, x - half)
    y0 = max(0, y - half)
    x1 = min(buffer.width, x + half + 1)
    y1 = min(buffer.height, y + half + 1)

    patch = buffer.rgb()[y0:y1, x0:x1].reshape(-1, 3).astype(np.float64)
    mean = round_half_up(patch.mean(axis=0))
    return RGB(*(int(c) for c in mean))


def estimate_film_base(buffer: PixelBuffer, options: ConversionOptions) -> RGB:
    """Resolve the film base colour to use for one conversion."""
    if options.film_base_color is not None:
        logger.info("Using manual film base color: %s", tuple(options.film_base_color))
        return options.film_base_color

    if options.use_border_sampling:
        sampled = sample_border(buffer)
        if sampled is not None:
            logger.info("Auto-sampled film base color: %s", tuple(sampled))
            return sampled
        logger.warning("Border sampling found no pixels, using default film base")

    return DEFAULT_FILM_BASE


# Typical unexposed-border colours of scanned stocks (8-bit sRGB scans,
# example values - adjust based on your scanner)
FILM_BASE_PRESETS = {
    "generic_c41": DEFAULT_FILM_BASE,
    "kodak_portra400": RGB(216, 146, 112),
    "kodak_portra160": RGB(220, 152, 118),
    "kodak_ektar100": RGB(224, 140, 104),
    "kodak_gold200": RGB(212, 138, 100),
    "fuji_pro400h": RGB(206, 150, 124),
    "fuji_superia400": RGB(204, 142, 116),
}


def get_film_base_preset(film_name: str) -> Optional[RGB]:
    """
    Base colour for a known film stock.

    Args:
        film_name: Film stock identifier (case-insensitive, underscores)

    Returns:
        RGB if a preset exists, None otherwise
    """
    return FILM_BASE_PRESETS.get(film_name.lower())
