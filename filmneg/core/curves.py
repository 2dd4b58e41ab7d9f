"""
Per-value tone curves.

Both curves map 0..255 to 0..255 and are applied to each RGB channel
independently. A strength of exactly 1.0 is neutral.
"""

import numpy as np

from .buffer import round_half_up, unwrap_scalar


def _finish(normalized: np.ndarray, scale: float, offset: float = 0.0):
    out = round_half_up((normalized + offset) * scale)
    return unwrap_scalar(np.clip(out, 0.0, 255.0))


def adjust_channel_curve(value, strength: float):
    """
    Power-curve channel adjustment.

    Args:
        value: Channel value(s), 0..255
        strength: 0..2, 1.0 = neutral. Below 1 the channel is pulled down
            with a gentler exponent, above 1 it is lifted.

    Returns:
        Adjusted value(s), rounded and clamped to 0..255
    """
    normalized = np.clip(np.asarray(value, dtype=np.float64), 0.0, 255.0) / 255.0

    if strength == 1.0:
        adjusted = normalized
    elif strength < 1.0:
        # 0.1 floor keeps the exponent finite as strength -> 0
        adjusted = np.power(normalized, 1.0 / (0.9 * strength + 0.1))
    else:
        adjusted = np.power(normalized, 1.0 / strength)

    return _finish(adjusted, 255.0)


def _sigmoid(x):
    return 1.0 / (1.0 + np.exp(-x))


def apply_s_curve(value, strength: float):
    """
    Sigmoid contrast curve centred on mid-grey.

    The deviation from neutral is tripled before it reaches the sigmoid,
    which otherwise compresses the effect.

    Args:
        value: Channel value(s), 0..255
        strength: Curve strength, 1.0 = neutral (returns the input)

    Returns:
        Adjusted value(s), rounded and clamped to 0..255
    """
    value = np.clip(np.asarray(value, dtype=np.float64), 0.0, 255.0)

    if strength == 1.0:
        return _finish(value / 255.0, 255.0)

    normalized = value / 127.5 - 1.0
    dampened = (strength - 1.0) * 3.0 + 1.0

    adjusted = _sigmoid(normalized * dampened) * 2.0 - 1.0

    return _finish(adjusted, 127.5, offset=1.0)
