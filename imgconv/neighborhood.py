from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .image_buffer import Pixel, PixelBuffer, get_pixel


@dataclass
class Area:
    """Neighborhood of one output pixel, clipped to the image bounds.

    ``pixels`` holds the in-bounds samples as rows, top to bottom. Near the
    edges the grid shrinks; nothing outside the image is ever sampled.
    """

    left: int
    top: int
    right: int
    bottom: int
    center: Tuple[int, int]
    pixels: List[List[Pixel]] = field(default_factory=list)

    @property
    def width(self) -> int:
        return self.right - self.left + 1

    @property
    def height(self) -> int:
        return self.bottom - self.top + 1

    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def center_pixel(self) -> Pixel:
        cx, cy = self.center
        return self.pixels[cy - self.top][cx - self.left]

    def channel_values(self, name: str) -> list[float]:
        return [pixel.channel(name) for row in self.pixels for pixel in row]


def extract_area(image: PixelBuffer, x: int, y: int, half_size: int) -> Area:
    area = Area(
        left=max(0, x - half_size),
        top=max(0, y - half_size),
        right=min(image.width - 1, x + half_size),
        bottom=min(image.height - 1, y + half_size),
        center=(x, y),
    )
    for ay in range(area.top, area.bottom + 1):
        area.pixels.append([get_pixel(image, ax, ay) for ax in range(area.left, area.right + 1)])
    return area
