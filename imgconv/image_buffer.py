from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple

CHANNELS = 4
CHANNEL_NAMES = ("r", "g", "b", "a")


class Pixel:
    """RGBA color value with unclamped channels.

    Construction forms:

    ========================  ==================
    ``Pixel()``               rgba(0, 0, 0, 255)
    ``Pixel(n)``              rgba(n, n, n, 255)
    ``Pixel(n, a)``           rgba(n, n, n, a)
    ``Pixel(r, g, b)``        rgba(r, g, b, 255)
    ``Pixel(r, g, b, a)``     rgba(r, g, b, a)
    ========================  ==================

    Kernel weights share this representation, so a scalar weight ``n``
    becomes ``Pixel(n)``: the same gray weight on every color channel.
    """

    __slots__ = ("r", "g", "b", "a")

    def __init__(self, *values: float) -> None:
        count = len(values)
        if count == 0:
            r = g = b = 0
            a = 255
        elif count == 1:
            r = g = b = values[0]
            a = 255
        elif count == 2:
            r = g = b = values[0]
            a = values[1]
        elif count == 3:
            r, g, b = values
            a = 255
        elif count == 4:
            r, g, b, a = values
        else:
            raise TypeError(f"Pixel takes at most 4 channel values ({count} given)")
        self.r = r
        self.g = g
        self.b = b
        self.a = a

    def __iter__(self) -> Iterator[float]:
        yield self.r
        yield self.g
        yield self.b
        yield self.a

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pixel):
            return NotImplemented
        return tuple(self) == tuple(other)

    def __hash__(self) -> int:
        return hash(tuple(self))

    def __repr__(self) -> str:
        return f"Pixel({self.r!r}, {self.g!r}, {self.b!r}, {self.a!r})"

    def __add__(self, other: "Pixel") -> "Pixel":
        if not isinstance(other, Pixel):
            return NotImplemented
        return Pixel(self.r + other.r, self.g + other.g, self.b + other.b, self.a + other.a)

    def __mul__(self, other: "Pixel | float") -> "Pixel":
        if isinstance(other, Pixel):
            return Pixel(self.r * other.r, self.g * other.g, self.b * other.b, self.a * other.a)
        if isinstance(other, (int, float)):
            return Pixel(self.r * other, self.g * other, self.b * other, self.a * other)
        return NotImplemented

    __rmul__ = __mul__

    def channel(self, name: str) -> float:
        if name not in CHANNEL_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return self.r, self.g, self.b, self.a


@dataclass
class PixelBuffer:
    """RGBA raster backed by a flat bytearray, row-major, 4 bytes per pixel."""

    width: int
    height: int
    data: bytearray

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Image dimensions must be positive")
        if len(self.data) != self.width * self.height * CHANNELS:
            raise ValueError("Pixel data does not match provided dimensions")

    @classmethod
    def from_dimensions(
        cls,
        width: int,
        height: int,
        color: Pixel | None = None,
    ) -> "PixelBuffer":
        if width <= 0 or height <= 0:
            raise ValueError("Image dimensions must be positive")
        color = color or Pixel()
        data = bytearray(width * height * CHANNELS)
        r, g, b, a = (_clamp_channel(value) for value in color)
        for i in range(0, len(data), CHANNELS):
            data[i] = r
            data[i + 1] = g
            data[i + 2] = b
            data[i + 3] = a
        return cls(width, height, data)

    @classmethod
    def from_pixels(
        cls,
        width: int,
        height: int,
        pixels: Iterable[Pixel],
    ) -> "PixelBuffer":
        data = bytearray()
        for pixel in pixels:
            data.extend(_clamp_channel(value) for value in pixel)
        if len(data) != width * height * CHANNELS:
            raise ValueError("Pixel data does not match provided dimensions")
        return cls(width, height, data)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, bytearray(self.data))

    def offset(self, x: int, y: int) -> int:
        return (y * self.width + x) * CHANNELS

    def get_pixel(self, x: int, y: int) -> Pixel:
        self._validate_coordinates(x, y)
        idx = self.offset(x, y)
        return Pixel(self.data[idx], self.data[idx + 1], self.data[idx + 2], self.data[idx + 3])

    def set_pixel(self, x: int, y: int, color: Pixel) -> None:
        self._validate_coordinates(x, y)
        idx = self.offset(x, y)
        r, g, b, a = color
        self.data[idx] = _clamp_channel(r)
        self.data[idx + 1] = _clamp_channel(g)
        self.data[idx + 2] = _clamp_channel(b)
        self.data[idx + 3] = _clamp_channel(a)

    def iter_pixels(self) -> Iterator[Pixel]:
        for i in range(0, len(self.data), CHANNELS):
            yield Pixel(self.data[i], self.data[i + 1], self.data[i + 2], self.data[i + 3])

    def channel(self, index: int) -> list[int]:
        """Values of one channel (0=R, 1=G, 2=B, 3=A) in row-major order."""
        if index not in range(CHANNELS):
            raise ValueError("Channel index must be in range [0, 3]")
        return list(self.data[index::CHANNELS])

    def to_pillow_image(self):
        from PIL import Image

        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.data))

    @classmethod
    def from_pillow_image(cls, image) -> "PixelBuffer":
        rgba_image = image.convert("RGBA")
        return cls(rgba_image.width, rgba_image.height, bytearray(rgba_image.tobytes()))

    def _validate_coordinates(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError("Pixel coordinates out of bounds")


def pixel_offset(buffer: PixelBuffer, x: int, y: int) -> int:
    """Index of the first byte of pixel (x, y); coordinates must be in range."""
    return (y * buffer.width + x) * CHANNELS


def get_pixel(buffer: PixelBuffer, x: int, y: int) -> Pixel:
    idx = pixel_offset(buffer, x, y)
    data = buffer.data
    return Pixel(data[idx], data[idx + 1], data[idx + 2], data[idx + 3])


def _clamp_channel(value: float) -> int:
    return max(0, min(255, int(value)))
