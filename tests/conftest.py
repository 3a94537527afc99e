from __future__ import annotations

import pytest

from imgconv.image_buffer import Pixel, PixelBuffer


@pytest.fixture
def make_image():
    """Factory building a PixelBuffer from a function of (x, y) returning a Pixel."""

    def build(width: int, height: int, color_at) -> PixelBuffer:
        pixels = [color_at(x, y) for y in range(height) for x in range(width)]
        return PixelBuffer.from_pixels(width, height, pixels)

    return build


@pytest.fixture
def ramp_image(make_image) -> PixelBuffer:
    """3x3 image whose red channel is 10, 20, ..., 90 in row-major order."""
    return make_image(3, 3, lambda x, y: Pixel((y * 3 + x + 1) * 10, 0, 0))


@pytest.fixture
def gradient_image(make_image) -> PixelBuffer:
    """7x5 image with independent gradients on every channel."""
    return make_image(7, 5, lambda x, y: Pixel(x * 30, y * 50, (x * y * 7) % 256, 128))
