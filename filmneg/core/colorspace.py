"""
RGB <-> HSL conversion.

Both directions work on scalars or numpy arrays of equal shape.
Channels are 0..255, hue in degrees (0..360), saturation/lightness 0..1.
"""

import numpy as np

from .buffer import HSL, RGB, round_half_up, unwrap_scalar


def rgb_to_hsl(r, g, b) -> HSL:
    """
    Convert RGB (0..255) to HSL.

    Hue is 0 for achromatic input (r == g == b).

    Args:
        r, g, b: Channel values, scalars or arrays

    Returns:
        HSL(h, s, l) with h in degrees
    """
    r = np.asarray(r, dtype=np.float64) / 255.0
    g = np.asarray(g, dtype=np.float64) / 255.0
    b = np.asarray(b, dtype=np.float64) / 255.0
    r, g, b = np.broadcast_arrays(r, g, b)

    maxc = np.maximum(np.maximum(r, g), b)
    minc = np.minimum(np.minimum(r, g), b)
    l = (maxc + minc) / 2.0

    d = maxc - minc
    chroma = d > 0
    # avoid 0/0 warnings for grey pixels, masked out below anyway
    d_safe = np.where(chroma, d, 1.0)

    s = np.where(
        l > 0.5,
        d / np.where(chroma, 2.0 - maxc - minc, 1.0),
        d / np.where(chroma, maxc + minc, 1.0),
    )
    s = np.where(chroma, s, 0.0)

    # Max-channel case split, red wins ties, then green
    mask_r = chroma & (maxc == r)
    mask_g = chroma & (maxc == g) & ~mask_r
    mask_b = chroma & ~mask_r & ~mask_g

    h = np.zeros_like(l)
    h = np.where(mask_r, (g - b) / d_safe + np.where(g < b, 6.0, 0.0), h)
    h = np.where(mask_g, (b - r) / d_safe + 2.0, h)
    h = np.where(mask_b, (r - g) / d_safe + 4.0, h)
    h = h / 6.0 * 360.0

    return HSL(unwrap_scalar(h), unwrap_scalar(s), unwrap_scalar(l))


def _hue_to_channel(p, q, t):
    # single +-1 wrap, then the six 1/6 sectors
    t = np.where(t < 0.0, t + 1.0, t)
    t = np.where(t > 1.0, t - 1.0, t)

    return np.select(
        [t < 1.0 / 6.0, t < 1.0 / 2.0, t < 2.0 / 3.0],
        [p + (q - p) * 6.0 * t, q, p + (q - p) * (2.0 / 3.0 - t) * 6.0],
        default=p,
    )


def hsl_to_rgb(h, s, l) -> RGB:
    """
    Convert HSL back to RGB (0..255, rounded half-up).

    Args:
        h: Hue in degrees
        s: Saturation 0..1 (0 gives grey)
        l: Lightness 0..1

    Returns:
        RGB(r, g, b) as integers (or integer-valued arrays)
    """
    h = np.asarray(h, dtype=np.float64) / 360.0
    s = np.asarray(s, dtype=np.float64)
    l = np.asarray(l, dtype=np.float64)
    h, s, l = np.broadcast_arrays(h, s, l)

    q = np.where(l < 0.5, l * (1.0 + s), l + s - l * s)
    p = 2.0 * l - q

    r = np.where(s == 0, l, _hue_to_channel(p, q, h + 1.0 / 3.0))
    g = np.where(s == 0, l, _hue_to_channel(p, q, h))
    b = np.where(s == 0, l, _hue_to_channel(p, q, h - 1.0 / 3.0))

    r = round_half_up(r * 255.0)
    g = round_half_up(g * 255.0)
    b = round_half_up(b * 255.0)

    if r.ndim == 0:
        return RGB(int(r), int(g), int(b))
    return RGB(r, g, b)
