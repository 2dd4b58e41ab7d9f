"""
Core image processing modules for film negative conversion.

This package contains the fundamental algorithms for:
- RGB <-> HSL conversion
- Channel and contrast curves
- Neighbour-averaging noise reduction
- Film base estimation (explicit, border sampling, colour pick)
- The negative-to-positive pipeline
- Image decode / encode and the stateful processor
"""

from .buffer import HSL, RGB, InvalidBufferError, PixelBuffer
from .colorspace import hsl_to_rgb, rgb_to_hsl
from .curves import adjust_channel_curve, apply_s_curve
from .film_base import (
    FILM_BASE_PRESETS,
    estimate_film_base,
    get_film_base_preset,
    sample_border,
    sample_color,
)
from .inversion import convert_negative_to_positive
from .noise import apply_noise_reduction
from .options import (
    DEFAULT_FILM_BASE,
    ChannelAdjustments,
    ConversionOptions,
    CyanAdjustment,
    OptionsError,
    load_options,
    save_options,
)

__version__ = "1.0.0"
