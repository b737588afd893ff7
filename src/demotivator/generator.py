"""
Generator - Turns an image into a captioned demotivator poster.

One Generator owns one FontCache. generate() is synchronous and may be
called from several threads at once; every call snapshots the current
config and allocates its own canvas and render face, so the cache is the
only shared state.

Font resolution order:
  font_data   - parsed every call, never cached
  font_path   - read and parsed on first use, then served from the cache
  (neither)   - embedded bold face, parsed every call
"""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional, Union

from PIL import Image

from .compositor import compose_frame
from .config import DemotivatorConfig
from .errors import FontLoadError
from .font_cache import FontCache, FontResource, RenderFace, create_face, parse_font
from .fonts import embedded_font, read_font_file
from .layout import compute_layout
from .text import draw_centered_text

logger = logging.getLogger(__name__)

RAW_FONT_KEY = "embedded raw"
EMBEDDED_FONT_KEY = "embedded default"

FontReader = Callable[[Union[str, Path]], bytes]


class Generator:
    """Demotivator poster generator with a per-instance font cache."""

    def __init__(self, config: Optional[DemotivatorConfig] = None,
                 font_reader: FontReader = read_font_file):
        self._config = config or DemotivatorConfig()
        self._config_lock = threading.Lock()
        self._read_font = font_reader
        self.font_cache = FontCache()

    # ── Configuration ─────────────────────────────────────────────────

    @property
    def config(self) -> DemotivatorConfig:
        return self._config

    @config.setter
    def config(self, config: DemotivatorConfig) -> None:
        with self._config_lock:
            self._config = config

    def configure(self, **changes) -> DemotivatorConfig:
        """Replace selected config fields. Calls already running are unaffected."""
        with self._config_lock:
            self._config = self._config.with_options(**changes)
            return self._config

    # ── Generation ────────────────────────────────────────────────────

    def generate(self, image: Image.Image) -> Image.Image:
        """
        Compose the poster for image and return it as a new RGBA image.

        Raises a FontLoadError subclass when the configured font cannot be
        loaded; no image is returned in that case.
        """
        cfg = self._config
        top_text, bottom_text = cfg.captions()

        layout = compute_layout(image.size, cfg, top_text, bottom_text)
        canvas = compose_frame(image, layout, cfg)

        try:
            face = self._open_face(cfg, layout.font_size)
        except FontLoadError as e:
            logger.error("Font load failed: %s", e)
            raise

        with face:
            for text, y in layout.captions:
                draw_centered_text(
                    canvas, face, text, y,
                    fill=cfg.text_color,
                    outline=cfg.text_outline_color,
                    outline_width=cfg.text_outline_width,
                )

        return canvas

    # ── Fonts ─────────────────────────────────────────────────────────

    def _open_face(self, cfg: DemotivatorConfig, size: float) -> RenderFace:
        return create_face(self._resolve_font(cfg), size)

    def _resolve_font(self, cfg: DemotivatorConfig) -> FontResource:
        if cfg.font_data:
            return parse_font(cfg.font_data, RAW_FONT_KEY)

        if cfg.font_path:
            key = os.fspath(cfg.font_path)
            cached = self.font_cache.get(key)
            if cached is not None:
                logger.debug("Font cache hit: %s", key)
                return cached
            logger.debug("Font cache miss: %s", key)
            resource = parse_font(self._read_font(cfg.font_path), key)
            self.font_cache.put(key, resource)
            return resource

        return parse_font(embedded_font(), EMBEDDED_FONT_KEY)

    def clear_font_cache(self) -> None:
        """Forget every cached font; the next use of a path re-reads the file."""
        self.font_cache.clear()

    def preload_font(self, path: Union[str, Path]) -> FontResource:
        """Read and parse a font file into the cache ahead of generate()."""
        key = os.fspath(path)
        resource = parse_font(self._read_font(path), key)
        self.font_cache.put(key, resource)
        logger.info("Preloaded font %s", key)
        return resource

    def load_font_file(self, path: Union[str, Path]) -> DemotivatorConfig:
        """
        Read a font file and install it as this generator's font.

        Both font_data and font_path are set; font_data takes precedence at
        resolution time, so the bytes are parsed on every call.
        """
        data = self._read_font(path)
        return self.configure(font_data=data, font_path=path)


# ── Convenience ───────────────────────────────────────────────────────

def generate_with_text(image: Image.Image, top_text: str, bottom_text: str = "") -> Image.Image:
    """One-shot poster with default settings."""
    config = DemotivatorConfig(top_text=top_text, bottom_text=bottom_text)
    return Generator(config).generate(image)


def generate_with_custom_font(
    image: Image.Image,
    top_text: str,
    bottom_text: str,
    font_path: Union[str, Path],
) -> Image.Image:
    """One-shot poster with default settings and a font file."""
    config = DemotivatorConfig(top_text=top_text, bottom_text=bottom_text, font_path=font_path)
    return Generator(config).generate(image)
