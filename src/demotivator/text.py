"""
Text - Centered single-line captions with an offset-stamped outline.

The outline is the caption drawn in the outline color at every offset in
a (2w+1) x (2w+1) square around the origin, skipping the origin itself.
That is (2w+1)^2 - 1 full-string passes, so cost grows with w squared.
The fill pass goes last.
"""

from typing import Iterator, Tuple

from PIL import Image, ImageDraw

from .config import Color
from .font_cache import RenderFace


def outline_offsets(width: int) -> Iterator[Tuple[int, int]]:
    for dx in range(-width, width + 1):
        for dy in range(-width, width + 1):
            if dx == 0 and dy == 0:
                continue
            yield dx, dy


def centered_x(canvas_width: int, text_width: int) -> int:
    # truncates toward zero, so an overflowing caption shifts right, not left
    return int((canvas_width - text_width) / 2)


def draw_centered_text(
    canvas: Image.Image,
    face: RenderFace,
    text: str,
    y: int,
    fill: Color,
    outline: Color,
    outline_width: int,
) -> None:
    """Draw text centered horizontally with its baseline at y."""
    if not text:
        return

    draw = ImageDraw.Draw(canvas)
    x = centered_x(canvas.width, face.measure(text))

    if outline_width > 0:
        for dx, dy in outline_offsets(outline_width):
            face.draw(draw, (x + dx, y + dy), text, outline)

    face.draw(draw, (x, y), text, fill)
