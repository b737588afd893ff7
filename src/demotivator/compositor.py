"""
Compositor - Background, border band and source image on a fresh canvas.

The border is not a stroked outline: it is `border` nested rectangles,
each one pixel further in, repainted opaquely with the border color. The
source image then covers the inside of the band.
"""

from typing import Tuple

from PIL import Image

from .config import DemotivatorConfig
from .layout import Layout


def border_rects(layout: Layout, border: int) -> list:
    """Rectangles (x0, y0, x1, y1), exclusive max, outermost first."""
    x, y = layout.image_offset
    w, h = layout.image_size
    return [
        (x - border + i, y - border + i, x + w + border - i, y + h + border - i)
        for i in range(border)
    ]


def _clip(box: Tuple[int, int, int, int], size: Tuple[int, int]) -> Tuple[int, int, int, int]:
    x0, y0, x1, y1 = box
    return max(0, x0), max(0, y0), min(size[0], x1), min(size[1], y1)


def compose_frame(image: Image.Image, layout: Layout, config: DemotivatorConfig) -> Image.Image:
    """Return a new RGBA canvas with background, border and image drawn."""
    canvas = Image.new("RGBA", layout.canvas_size, config.background_color)

    for box in border_rects(layout, config.border):
        x0, y0, x1, y1 = _clip(box, canvas.size)
        if x1 > x0 and y1 > y0:
            canvas.paste(config.border_color, (x0, y0, x1, y1))

    src = image if image.mode == "RGBA" else image.convert("RGBA")
    canvas.alpha_composite(src, dest=layout.image_offset)
    return canvas
