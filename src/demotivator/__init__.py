"""
Demotivator poster generator.

Modules:
  config       - DemotivatorConfig value object, JSON and environment loaders
  fonts        - Embedded faces and validated font file reads
  font_cache   - Parsed font resources, render faces and the per-generator cache
  layout       - Canvas size, auto font size and caption baselines
  compositor   - Background, border band and source image
  text         - Centered captions with offset-stamped outlines
  generator    - Generator orchestrating a full poster
  cli          - Command line entry point
"""

from .config import DemotivatorConfig, config_from_env, load_config
from .errors import (
    DemotivatorError, FontFaceCreationError, FontFileAccessError, FontFileEmpty,
    FontFileMissing, FontFileTooLarge, FontFileTooSmall, FontLoadError, FontParseError,
)
from .fonts import available_fonts, embedded_font, read_font_file, validate_font_file
from .generator import Generator, generate_with_custom_font, generate_with_text

__all__ = [
    "DemotivatorConfig", "config_from_env", "load_config",
    "DemotivatorError", "FontLoadError", "FontFileMissing", "FontFileAccessError",
    "FontFileEmpty", "FontFileTooLarge", "FontFileTooSmall", "FontParseError",
    "FontFaceCreationError",
    "available_fonts", "embedded_font", "read_font_file", "validate_font_file",
    "Generator", "generate_with_text", "generate_with_custom_font",
]
