"""
Image processor orchestrating the conversion workflow.
"""

import logging
from pathlib import Path
from typing import Optional

from .. import settings
from ..processing import NEGATIVE_CONVERSION, process_image
from .buffer import RGB, PixelBuffer
from .export import save_image
from .film_base import get_film_base_preset, sample_color
from .image_loader import get_image_info, load_image
from .options import ConversionOptions

logger = logging.getLogger(__name__)


class ImageProcessor:
    """
    Main orchestrator for film negative conversion.

    Workflow:
        1. load() / set_negative() - Provide the negative scan
        2. pick_film_base() or set_border_sampling(True) - Optional,
           otherwise the default film base is used
        3. update_options() - Fine-tune curves, contrast, cyan
        4. convert() - Convert negative to positive
        5. get_positive() / export() - Get or save the result

    A manually picked base colour and border sampling are mutually
    exclusive: enabling one turns the other off.
    """

    def __init__(self, options: Optional[ConversionOptions] = None):
        self.negative: Optional[PixelBuffer] = None
        self.positive: Optional[PixelBuffer] = None

        self.source_path: Optional[Path] = None
        self.info: dict = {}
        self.options = options if options is not None else ConversionOptions()

    def load(self, filepath: str | Path) -> dict:
        """
        Load a negative scan and return file info.

        Args:
            filepath: RAW or raster image

        Returns:
            Dictionary with format / dimensions
        """
        self.source_path = Path(filepath)
        self.info = get_image_info(filepath)
        self.set_negative(load_image(filepath))

        logger.info(
            "Loaded %s (%dx%d)", self.source_path.name, self.negative.width, self.negative.height
        )
        return self.info

    def set_negative(self, buffer: PixelBuffer) -> None:
        self.negative = buffer
        # Reset pipeline
        self.positive = None

    # ---------- Film base

    def pick_film_base(self, x: int, y: int, patch_size: int = 1) -> RGB:
        """
        Use the colour at (x, y) of the negative as film base.

        Returns:
            The picked colour
        """
        if self.negative is None:
            raise RuntimeError("No negative loaded")

        color = sample_color(self.negative, x, y, patch_size)
        self.set_film_base(color)
        return color

    def set_film_base(self, color) -> None:
        self.options = self.options.replace(film_base_color=color, use_border_sampling=False)
        self.positive = None

    def use_film_preset(self, film_name: str) -> RGB:
        color = get_film_base_preset(film_name)
        if color is None:
            raise ValueError(f"Unknown film preset: {film_name}")
        self.set_film_base(color)
        return color

    def set_border_sampling(self, enabled: bool) -> None:
        if enabled:
            self.options = self.options.replace(film_base_color=None, use_border_sampling=True)
        else:
            self.options = self.options.replace(use_border_sampling=False)
        self.positive = None

    # ---------- Options

    def update_options(self, **changes) -> ConversionOptions:
        self.options = self.options.replace(**changes)
        self.positive = None
        return self.options

    # ---------- Conversion

    def convert(self, processing_type: str = NEGATIVE_CONVERSION) -> PixelBuffer:
        """Process the current negative with the current options."""
        if self.negative is None:
            raise RuntimeError("No negative loaded")

        logger.info("Processing with options: %s", self.options.to_dict())
        self.positive = process_image(self.negative, processing_type, self.options)
        return self.positive

    def get_positive(self) -> Optional[PixelBuffer]:
        return self.positive

    def export(self, path: str | Path, quality: int = settings.DEFAULT_JPEG_QUALITY) -> None:
        if self.positive is None:
            raise RuntimeError("No positive image to export - run convert() first")
        save_image(self.positive, path, quality=quality)
        logger.info("Saved: %s", path)
