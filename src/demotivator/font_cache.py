"""
Font cache - Parsed font resources and size-bound render faces.

A FontResource is parsed once and can be instantiated at any size.
FontCache keeps resources per key behind a reader/writer lock: lookups run
concurrently, inserts and clears are exclusive. Two threads missing on the
same key may both parse; the last put wins, which is harmless because
parsing is a pure function of the bytes.

RenderFace is the per-call, per-size handle. Use it as a context manager so
it is released on every exit path.
"""

import logging
import math
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from io import BytesIO
from typing import Dict, Iterator, Optional, Tuple

from PIL import ImageDraw, ImageFont

from .errors import FontFaceCreationError, FontParseError

logger = logging.getLogger(__name__)

# Size used to parse a resource; faces are re-instantiated at their own size.
PARSE_SIZE = 12


class ReadWriteLock:
    """Many readers or one writer. Waiting writers block new readers."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


@dataclass(frozen=True)
class FontResource:
    """Parsed font data, shared read-only by every face made from it."""
    key: str
    data: bytes = field(repr=False)
    font: ImageFont.FreeTypeFont = field(repr=False, compare=False)


def parse_font(data: bytes, key: str) -> FontResource:
    """Parse raw TTF/OTF bytes. Raises FontParseError on malformed data."""
    try:
        font = ImageFont.truetype(BytesIO(data), PARSE_SIZE)
    except (OSError, ValueError) as e:
        raise FontParseError(f"Failed to parse font {key!r}: {e}", key=key) from e
    logger.debug("Parsed font %r (%s %s)", key, *font.getname())
    return FontResource(key=key, data=data, font=font)


class RenderFace:
    """A FontResource instantiated at one point size."""

    def __init__(self, resource: FontResource, size: float):
        self.resource = resource
        self.size = size
        self._font: Optional[ImageFont.FreeTypeFont] = resource.font.font_variant(size=size)

    @property
    def font(self) -> ImageFont.FreeTypeFont:
        if self._font is None:
            raise RuntimeError(f"Render face for {self.resource.key!r} is closed")
        return self._font

    @property
    def closed(self) -> bool:
        return self._font is None

    def measure(self, text: str) -> int:
        """Advance width of text in whole pixels, rounded up."""
        return math.ceil(self.font.getlength(text))

    def draw(self, draw: ImageDraw.ImageDraw, xy: Tuple[int, int], text: str, fill) -> None:
        """Render text with its left baseline at xy."""
        draw.text(xy, text, font=self.font, fill=fill, anchor="ls")

    def close(self) -> None:
        self._font = None

    def __enter__(self) -> "RenderFace":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def create_face(resource: FontResource, size: float) -> RenderFace:
    """Instantiate resource at size. Raises FontFaceCreationError."""
    if size <= 0:
        raise FontFaceCreationError(
            f"Font size must be > 0 for {resource.key!r}, got {size}", key=resource.key
        )
    try:
        return RenderFace(resource, size)
    except (OSError, ValueError) as e:
        raise FontFaceCreationError(
            f"Failed to create face for {resource.key!r} at size {size}: {e}", key=resource.key
        ) from e


class FontCache:
    """Key -> FontResource map, safe for concurrent readers."""

    def __init__(self):
        self._lock = ReadWriteLock()
        self._fonts: Dict[str, FontResource] = {}

    def get(self, key: str) -> Optional[FontResource]:
        with self._lock.read_locked():
            return self._fonts.get(key)

    def put(self, key: str, resource: FontResource) -> None:
        with self._lock.write_locked():
            self._fonts[key] = resource

    def clear(self) -> None:
        with self._lock.write_locked():
            self._fonts = {}

    def keys(self) -> list:
        with self._lock.read_locked():
            return list(self._fonts)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._fonts)
