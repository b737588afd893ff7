"""
Configuration - Poster settings as an immutable value object.

Settings can come from three places, lowest priority first:
  environment   - DEMOTIVATOR_* variables (a .env file is honoured)
  config file   - JSON object with the same field names
  keyword args  - DemotivatorConfig(...) or dataclasses.replace(...)

Colors accept "#RRGGBB", "#RRGGBBAA" or 3/4-tuples and are stored as RGBA.
"""

import json
import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Tuple, Union

from dotenv import load_dotenv

Color = Tuple[int, int, int, int]
ColorLike = Union[str, Tuple[int, ...]]

DEFAULT_FONT_SIZE = 48.0
ENV_PREFIX = "DEMOTIVATOR_"

_COLOR_FIELDS = ("background_color", "border_color", "text_color", "text_outline_color")
_INT_FIELDS = ("padding", "border", "text_outline_width")
_BOOL_FIELDS = ("text_uppercase", "auto_font_size")
_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


def hex_to_rgba(hex_color: str) -> Color:
    """Convert hex color to RGBA tuple."""
    h = hex_color.strip().lstrip("#")
    if len(h) not in (6, 8):
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    try:
        channels = tuple(int(h[i:i+2], 16) for i in range(0, len(h), 2))
    except ValueError:
        raise ValueError(f"Invalid hex color: {hex_color!r}") from None
    if len(channels) == 3:
        return (*channels, 255)
    return channels


def to_rgba(color: ColorLike) -> Color:
    """Normalize a hex string or 3/4-tuple to an RGBA tuple."""
    if isinstance(color, str):
        return hex_to_rgba(color)
    channels = tuple(int(c) for c in color)
    if len(channels) == 3:
        channels = (*channels, 255)
    if len(channels) != 4 or not all(0 <= c <= 255 for c in channels):
        raise ValueError(f"Invalid color: {color!r}")
    return channels


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise ValueError(f"Invalid boolean: {value!r}")


@dataclass(frozen=True)
class DemotivatorConfig:
    """
    Everything one generate() call needs to know.

    Font source precedence is font_data > font_path > embedded bold.
    font_size is only used when auto_font_size is off.
    """
    top_text: str = ""
    bottom_text: str = ""

    font_size: float = DEFAULT_FONT_SIZE
    font_path: Optional[Union[str, Path]] = None
    font_data: Optional[bytes] = None

    padding: int = 80
    border: int = 10

    background_color: ColorLike = (0, 0, 0, 255)
    border_color: ColorLike = (255, 255, 255, 255)
    text_color: ColorLike = (255, 255, 255, 255)
    text_outline_color: ColorLike = (0, 0, 0, 255)
    text_outline_width: int = 6

    text_uppercase: bool = True
    auto_font_size: bool = True

    def __post_init__(self):
        for name in _COLOR_FIELDS:
            object.__setattr__(self, name, to_rgba(getattr(self, name)))
        for name in _INT_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if not self.auto_font_size and not (math.isfinite(self.font_size) and self.font_size > 0):
            raise ValueError(f"font_size must be a finite number > 0, got {self.font_size}")
        if self.font_data is not None and not isinstance(self.font_data, (bytes, bytearray)):
            raise ValueError(f"font_data must be bytes, got {type(self.font_data).__name__}")

    def captions(self) -> Tuple[str, str]:
        """Top and bottom caption after the case transform."""
        if self.text_uppercase:
            return self.top_text.upper(), self.bottom_text.upper()
        return self.top_text, self.bottom_text

    def with_options(self, **changes) -> "DemotivatorConfig":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict, base: Optional["DemotivatorConfig"] = None) -> "DemotivatorConfig":
        """
        Build a config from a plain mapping (JSON, env, CLI).

        Unknown keys are ignored. String values are coerced to the field type,
        so {"padding": "40", "text_uppercase": "false"} works.
        """
        known = {f.name for f in fields(cls)}
        changes = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            if key in _INT_FIELDS:
                value = int(value)
            elif key == "font_size":
                value = float(value)
            elif key in _BOOL_FIELDS:
                value = _parse_bool(value)
            elif key in _COLOR_FIELDS and isinstance(value, list):
                value = tuple(value)
            changes[key] = value
        return replace(base or cls(), **changes)


def load_config(path: Union[str, Path], base: Optional[DemotivatorConfig] = None) -> DemotivatorConfig:
    """Load poster settings from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must hold a JSON object: {path}")
    return DemotivatorConfig.from_dict(data, base)


def config_from_env(prefix: str = ENV_PREFIX, base: Optional[DemotivatorConfig] = None) -> DemotivatorConfig:
    """
    Read DEMOTIVATOR_* variables, e.g. DEMOTIVATOR_PADDING=40 or
    DEMOTIVATOR_TEXT_COLOR=#FFD700. A .env file in the working directory is
    loaded first without overriding the real environment.
    """
    load_dotenv()
    data = {}
    for f in fields(DemotivatorConfig):
        if f.name == "font_data":
            continue
        value = os.getenv(prefix + f.name.upper())
        if value is not None:
            data[f.name] = value
    return DemotivatorConfig.from_dict(data, base)
