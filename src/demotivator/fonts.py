"""
Font sources - Embedded faces and validated font file reads.

Embedded faces are the DejaVu Sans TTFs that ship inside matplotlib's
mpl-data directory, so no font files need to live in this repository.

File reads go through two stages:
  1. hard checks   - exists, readable, non-empty, <= 10 MiB, >= 4 bytes
  2. sniffing      - TTF/OTF magic compared, mismatch only logged
The parse in font_cache.parse_font is the real validity test.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Union

import matplotlib

from .errors import (
    FontFileAccessError, FontFileEmpty, FontFileMissing,
    FontFileTooLarge, FontFileTooSmall,
)
from .font_cache import parse_font

logger = logging.getLogger(__name__)

MAX_FONT_FILE_SIZE = 10 * 1024 * 1024
MIN_FONT_FILE_SIZE = 4

# TrueType, CFF-flavoured OpenType, legacy Apple TrueType
FONT_SIGNATURES = (b"\x00\x01\x00\x00", b"OTTO", b"true")

EMBEDDED_FONT_FILES = {
    "regular": "DejaVuSans.ttf",
    "bold": "DejaVuSans-Bold.ttf",
}
DEFAULT_EMBEDDED_FONT = "bold"


def _embedded_fonts_dir() -> Path:
    return Path(matplotlib.get_data_path()) / "fonts" / "ttf"


@lru_cache(maxsize=None)
def embedded_font(name: str = DEFAULT_EMBEDDED_FONT) -> bytes:
    """Raw TTF bytes of a built-in face ("regular" or "bold")."""
    try:
        filename = EMBEDDED_FONT_FILES[name]
    except KeyError:
        raise ValueError(
            f"Unknown embedded font {name!r}, expected one of {sorted(EMBEDDED_FONT_FILES)}"
        ) from None
    return (_embedded_fonts_dir() / filename).read_bytes()


def available_fonts() -> Dict[str, bytes]:
    """All built-in faces by name."""
    return {name: embedded_font(name) for name in EMBEDDED_FONT_FILES}


def has_font_signature(data: bytes) -> bool:
    return data[:4] in FONT_SIGNATURES


def read_font_file(path: Union[str, Path]) -> bytes:
    """
    Read a font file after size checks.

    Raises FontFileMissing, FontFileAccessError, FontFileEmpty,
    FontFileTooLarge or FontFileTooSmall. An unknown signature is logged and
    the bytes are still returned.
    """
    try:
        size = os.stat(path).st_size
    except FileNotFoundError as e:
        raise FontFileMissing(f"Font file not found: {path}", path=path) from e
    except OSError as e:
        raise FontFileAccessError(f"Cannot access font file {path}: {e}", path=path) from e

    if size == 0:
        raise FontFileEmpty(f"Font file is empty: {path}", path=path)
    if size > MAX_FONT_FILE_SIZE:
        raise FontFileTooLarge(
            f"Font file is too large: {size} bytes (max {MAX_FONT_FILE_SIZE})", path=path
        )

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise FontFileAccessError(f"Cannot read font file {path}: {e}", path=path) from e

    if len(data) < MIN_FONT_FILE_SIZE:
        raise FontFileTooSmall(f"Font file is too small to be a font: {path}", path=path)

    if not has_font_signature(data):
        logger.warning("Font file %s has unrecognized signature %r, parsing anyway", path, data[:4])

    return data


def validate_font_file(path: Union[str, Path]) -> None:
    """Raise the matching FontLoadError unless path holds a parseable font."""
    parse_font(read_font_file(path), key=os.fspath(path))
