"""
Errors raised while resolving fonts and generating posters.

Every font failure is a FontLoadError subclass so callers can catch the
whole family at once. The original exception is always chained as
__cause__.
"""

from pathlib import Path
from typing import Optional, Union


class DemotivatorError(Exception):
    """Base class for all package errors."""


class FontLoadError(DemotivatorError):
    """A font could not be turned into a usable render face."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 key: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.key = key


class FontFileMissing(FontLoadError):
    """Font path does not exist."""


class FontFileAccessError(FontLoadError):
    """Font path exists but could not be stat'ed or read."""


class FontFileEmpty(FontLoadError):
    """Font file has zero bytes."""


class FontFileTooLarge(FontLoadError):
    """Font file exceeds the size ceiling."""


class FontFileTooSmall(FontLoadError):
    """Font file is shorter than a font signature."""


class FontParseError(FontLoadError):
    """Bytes passed the size checks but FreeType rejected them."""


class FontFaceCreationError(FontLoadError):
    """A parsed font could not be instantiated at the requested size."""
