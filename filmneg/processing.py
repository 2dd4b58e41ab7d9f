"""
Processing type dispatch.

Each processing type maps a name to a buffer -> buffer function. The
"none" type, and any unknown type, returns the input untouched.
"""

import logging
from typing import Optional

from .core.buffer import PixelBuffer
from .core.inversion import convert_negative_to_positive
from .core.options import ConversionOptions

logger = logging.getLogger(__name__)

NO_PROCESSING = "none"
NEGATIVE_CONVERSION = "negative-conversion"

# List of available processing types
PROCESSING_TYPES = {
    NO_PROCESSING: "No Processing",
    NEGATIVE_CONVERSION: "Negative to Positive Conversion",
}


def process_image(
    buffer: PixelBuffer,
    processing_type: str = NEGATIVE_CONVERSION,
    options: Optional[ConversionOptions] = None,
) -> PixelBuffer:
    """
    Apply a processing type to a buffer.

    Args:
        buffer: Input image
        processing_type: Key of PROCESSING_TYPES
        options: Passed to the negative conversion

    Returns:
        Processed buffer, or the input itself for "none"/unknown types
    """
    if processing_type == NEGATIVE_CONVERSION:
        logger.info("Processing with %s", processing_type)
        return convert_negative_to_positive(buffer, options)

    if processing_type != NO_PROCESSING:
        logger.warning("Unknown processing type %r, returning original", processing_type)
    return buffer
