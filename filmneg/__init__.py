"""
Colour negative film to positive conversion.
"""

from .core import (
    HSL,
    RGB,
    ConversionOptions,
    InvalidBufferError,
    OptionsError,
    PixelBuffer,
    __version__,
    adjust_channel_curve,
    apply_noise_reduction,
    apply_s_curve,
    convert_negative_to_positive,
    estimate_film_base,
    hsl_to_rgb,
    rgb_to_hsl,
)
from .processing import PROCESSING_TYPES, process_image
