#!/usr/bin/env python3
"""
Generate a demotivator poster from an image.

Usage:
    demotivator photo.jpg -t "Teamwork" -b "none of us is as dumb as all of us"
    demotivator photo.jpg -t "Failure" --font fonts/Impact.ttf -o out.png
    demotivator photo.jpg -t "Quiet" --embedded-font regular --no-uppercase
    demotivator photo.jpg -t "Settings" --config poster.json

Settings are layered: DEMOTIVATOR_* environment (and .env) < --config file
< command-line flags.
"""

import argparse
import logging
import sys
from pathlib import Path

from PIL import Image

from .config import config_from_env, load_config
from .errors import DemotivatorError
from .fonts import EMBEDDED_FONT_FILES, embedded_font
from .generator import Generator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="demotivator",
        description="Frame an image and add demotivator-style captions"
    )
    parser.add_argument("image", type=str, help="Path to source image")
    parser.add_argument("--top", "-t", type=str, default=None, help="Top caption")
    parser.add_argument("--bottom", "-b", type=str, default=None, help="Bottom caption")
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output PNG path (default: <image>_demotivator.png)"
    )

    font = parser.add_mutually_exclusive_group()
    font.add_argument("--font", type=str, default=None, help="Path to a TTF/OTF font file")
    font.add_argument(
        "--embedded-font",
        choices=sorted(EMBEDDED_FONT_FILES),
        default=None,
        help="Use a built-in face instead of the default bold"
    )

    parser.add_argument(
        "--font-size",
        type=float,
        default=None,
        help="Fixed font size in points (disables auto sizing)"
    )
    parser.add_argument("--padding", type=int, default=None, help="Padding around the image (px)")
    parser.add_argument("--border", type=int, default=None, help="Border band thickness (px)")
    parser.add_argument("--outline-width", type=int, default=None, help="Caption outline width (px)")
    parser.add_argument(
        "--no-uppercase",
        action="store_true",
        help="Keep caption case as typed"
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="JSON settings file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s",
    )

    overrides = {
        "top_text": args.top,
        "bottom_text": args.bottom,
        "font_path": args.font,
        "padding": args.padding,
        "border": args.border,
        "text_outline_width": args.outline_width,
    }
    if args.embedded_font:
        overrides["font_data"] = embedded_font(args.embedded_font)
    if args.font_size is not None:
        overrides["font_size"] = args.font_size
        overrides["auto_font_size"] = False
    if args.no_uppercase:
        overrides["text_uppercase"] = False
    overrides = {k: v for k, v in overrides.items() if v is not None}

    try:
        config = config_from_env()
        if args.config:
            config = load_config(args.config, base=config)
        config = config.with_options(**overrides)
    except (OSError, ValueError) as e:
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        return 1

    image_path = Path(args.image)
    output_path = Path(args.output) if args.output else image_path.with_name(
        f"{image_path.stem}_demotivator.png"
    )

    try:
        with Image.open(image_path) as img:
            img.load()
            poster = Generator(config).generate(img)
    except OSError as e:
        print(f"ERROR: Cannot read image {image_path}: {e}", file=sys.stderr)
        return 1
    except DemotivatorError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    output_path.parent.mkdir(parents=True, exist_ok=True)
    poster.save(str(output_path), "PNG")
    print(f"  Saved: {output_path} ({poster.width}x{poster.height})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
