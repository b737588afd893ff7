"""
Layout - Canvas size and caption baselines for a poster.

    +---------------------------+
    |         padding           |
    |   +-------------------+   |
    |   |      image        |   |   border is painted inside the padding
    |   +-------------------+   |   and never changes the layout
    |         padding           |
    |     TOP CAPTION           |   fontSize * 1.5 per non-empty caption
    |     bottom caption        |
    +---------------------------+

Auto font size follows the image width only. A long caption on a narrow
image can therefore be wider than the canvas; it is drawn as-is.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

from .config import DemotivatorConfig

logger = logging.getLogger(__name__)

BASE_FONT_SIZE = 48.0
BASE_IMAGE_WIDTH = 800.0
MIN_SCALE = 0.5
MAX_SCALE = 2.0

CAPTION_BLOCK_RATIO = 1.5
FIRST_BASELINE_RATIO = 0.8
LINE_ADVANCE_RATIO = 1.2


@dataclass(frozen=True)
class Layout:
    canvas_size: Tuple[int, int]
    image_size: Tuple[int, int]
    image_offset: Tuple[int, int]
    font_size: float
    captions: Tuple[Tuple[str, int], ...]  # (text, baseline y), top first

    @property
    def canvas_width(self) -> int:
        return self.canvas_size[0]

    @property
    def canvas_height(self) -> int:
        return self.canvas_size[1]


def auto_font_size(image_width: int) -> float:
    """48pt at 800px wide, scaled linearly and clamped to [24, 96]."""
    scale = image_width / BASE_IMAGE_WIDTH
    scale = max(MIN_SCALE, min(MAX_SCALE, scale))
    return BASE_FONT_SIZE * scale


def compute_layout(
    image_size: Tuple[int, int],
    config: DemotivatorConfig,
    top_text: str,
    bottom_text: str,
) -> Layout:
    """
    Lay out a poster for an image of image_size.

    top_text/bottom_text are the captions as they will be drawn, i.e. after
    any case transform. Empty captions take no space.
    """
    width, height = image_size
    padding = config.padding
    font_size = auto_font_size(width) if config.auto_font_size else config.font_size

    block = int(font_size * CAPTION_BLOCK_RATIO)
    text_height = 0
    if top_text:
        text_height += block
    if bottom_text:
        text_height += block

    canvas_size = (width + padding * 2, height + padding * 2 + text_height)

    captions = []
    y = padding + height + int(font_size * FIRST_BASELINE_RATIO)
    if top_text:
        captions.append((top_text, y))
        y += int(font_size * LINE_ADVANCE_RATIO)
    if bottom_text:
        captions.append((bottom_text, y))

    logger.debug(
        "Layout %dx%d -> canvas %dx%d, font %.1f, %d caption(s)",
        width, height, canvas_size[0], canvas_size[1], font_size, len(captions),
    )
    return Layout(
        canvas_size=canvas_size,
        image_size=(width, height),
        image_offset=(padding, padding),
        font_size=font_size,
        captions=tuple(captions),
    )
