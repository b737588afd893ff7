"""Shared pytest fixtures for the demotivator test suite.

Fixtures:
    font_bytes: Raw bytes of the embedded bold face
    font_file: The embedded bold face written to a temp .ttf file
    sample_image: 400x300 opaque RGB image
    counting_reader: read_font_file wrapper that records every call

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
"""

import numpy as np
import pytest
from PIL import Image

from demotivator.fonts import embedded_font, read_font_file


@pytest.fixture
def font_bytes():
    return embedded_font("bold")


@pytest.fixture
def font_file(tmp_path, font_bytes):
    path = tmp_path / "caption.ttf"
    path.write_bytes(font_bytes)
    return path


@pytest.fixture
def sample_image():
    return Image.new("RGB", (400, 300), (200, 30, 30))


class CountingReader:
    """Font reader collaborator that counts reads per path."""

    def __init__(self):
        self.calls = []

    def __call__(self, path):
        self.calls.append(str(path))
        return read_font_file(path)

    @property
    def count(self):
        return len(self.calls)


@pytest.fixture
def counting_reader():
    return CountingReader()


def pixels(image):
    return np.asarray(image.convert("RGBA"))


def same_pixels(a, b):
    return a.size == b.size and np.array_equal(pixels(a), pixels(b))
