# main.py

import argparse
import logging
import sys
from pathlib import Path

from . import settings
from .core.export import ImageSaveError
from .core.image_loader import ImageLoadError
from .core.image_processor import ImageProcessor
from .core.options import ConversionOptions, OptionsError, load_options, save_options
from .processing import NEGATIVE_CONVERSION, PROCESSING_TYPES

logger = logging.getLogger("filmneg")


def _parse_triplet(text: str, cast=float) -> tuple:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected three comma separated values, got {text!r}")
    try:
        return tuple(cast(p) for p in parts)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_point(text: str) -> tuple[int, int]:
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Expected X,Y, got {text!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filmneg",
        description="Convert scanned colour negatives to positives",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default look, default film base
  filmneg scan.tif -o positive.jpg

  # Estimate the film base from the image border
  filmneg scan.tif -o positive.jpg --border-sampling

  # Film base picked from the unexposed rebate at (12, 40)
  filmneg scan.NEF -o positive.png --pick 12,40 --pick-size 9

  # Fine tuning, saved for later
  filmneg scan.tif -o out.jpg --channels 1.0,0.85,0.7 --contrast 1.2 \\
      --save-preset portra.json
        """,
    )
    parser.add_argument("input", help="Input scan (RAW or raster image)")
    parser.add_argument(
        "-o", "--output", help="Output file (default: <input>_positive.jpg)", default=None
    )
    parser.add_argument(
        "--type",
        choices=sorted(PROCESSING_TYPES),
        default=NEGATIVE_CONVERSION,
        help="Processing type (default: %(default)s)",
    )
    parser.add_argument("--load-preset", help="Load options from a JSON preset file", default=None)
    parser.add_argument("--save-preset", help="Save the used options to a JSON file", default=None)

    base = parser.add_mutually_exclusive_group()
    base.add_argument("--base", type=lambda s: _parse_triplet(s, int), help="Film base color R,G,B")
    base.add_argument("--pick", type=_parse_point, help="Pick film base color at X,Y")
    base.add_argument("--preset", help="Film base color of a known stock, e.g. kodak_portra400")
    base.add_argument(
        "--border-sampling", action="store_true", help="Estimate film base from the image border"
    )
    parser.add_argument(
        "--pick-size", type=int, default=1, help="Patch size averaged by --pick (default: 1)"
    )

    parser.add_argument("--opacity", type=float, help="Base subtraction opacity 0..1 (default: 0.8)")
    parser.add_argument(
        "--channels", type=_parse_triplet, help="Channel curve strengths R,G,B (default: 1.0,0.8,0.7)"
    )
    parser.add_argument("--contrast", type=float, help="S-curve strength (default: 1.1)")
    parser.add_argument(
        "--cyan", type=_parse_triplet, help="Cyan hue,saturation,lightness (default: 10,0.8,0.1)"
    )
    parser.add_argument(
        "--quality",
        type=int,
        default=settings.DEFAULT_JPEG_QUALITY,
        help="JPEG quality (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="Show debug information")
    return parser


def options_from_args(args, base: ConversionOptions) -> ConversionOptions:
    changes = {}
    if args.base is not None:
        changes.update(film_base_color=args.base, use_border_sampling=False)
    if args.border_sampling:
        changes.update(film_base_color=None, use_border_sampling=True)
    if args.opacity is not None:
        changes["base_subtraction_opacity"] = args.opacity
    if args.channels is not None:
        changes["channel_adjustments"] = args.channels
    if args.contrast is not None:
        changes["contrast_boost"] = args.contrast
    if args.cyan is not None:
        changes["cyan_adjustment"] = args.cyan
    return base.replace(**changes)


def default_output_path(input_path: str) -> Path:
    p = Path(input_path)
    return p.with_name(f"{p.stem}_positive.jpg")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else getattr(logging, settings.LOGGING_LEVEL),
        format=settings.LOGGING_FORMAT,
    )

    output = Path(args.output) if args.output else default_output_path(args.input)

    try:
        base_options = load_options(args.load_preset) if args.load_preset else ConversionOptions()
        processor = ImageProcessor(options_from_args(args, base_options))

        processor.load(args.input)

        if args.pick is not None:
            x, y = args.pick
            color = processor.pick_film_base(x, y, args.pick_size)
            logger.info("Picked film base color at (%d, %d): %s", x, y, tuple(color))
        elif args.preset is not None:
            processor.use_film_preset(args.preset)

        if args.save_preset:
            save_options(processor.options, args.save_preset)
            logger.info("Saved preset: %s", args.save_preset)

        processor.convert(args.type)

        processor.export(output, quality=args.quality)

    except (ImageLoadError, ImageSaveError, OptionsError, ValueError) as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("I/O error: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
