import pytest
from PIL import Image

from imgconv.image_buffer import Pixel, PixelBuffer, get_pixel, pixel_offset


@pytest.mark.parametrize(
    "values, expected",
    [
        ((), (0, 0, 0, 255)),
        ((7,), (7, 7, 7, 255)),
        ((7, 9), (7, 7, 7, 9)),
        ((1, 2, 3), (1, 2, 3, 255)),
        ((1, 2, 3, 4), (1, 2, 3, 4)),
    ],
)
def test_pixel_construction_forms(values, expected):
    assert Pixel(*values).as_tuple() == expected


def test_pixel_rejects_more_than_four_values():
    with pytest.raises(TypeError):
        Pixel(1, 2, 3, 4, 5)


def test_pixel_channels_are_not_clamped():
    pixel = Pixel(-10, 300, 2.5)
    assert (pixel.r, pixel.g, pixel.b) == (-10, 300, 2.5)


def test_pixel_arithmetic():
    assert Pixel(1, 2, 3, 4) + Pixel(10, 20, 30, 40) == Pixel(11, 22, 33, 44)
    assert Pixel(1, 2, 3, 4) * 2 == Pixel(2, 4, 6, 8)
    assert Pixel(1, 2, 3, 4) * Pixel(2, 3, 4, 5) == Pixel(2, 6, 12, 20)


def test_offset_formula():
    image = PixelBuffer.from_dimensions(5, 4)
    for y in range(4):
        for x in range(5):
            assert image.offset(x, y) == (y * 5 + x) * 4
            assert pixel_offset(image, x, y) == image.offset(x, y)


def test_get_pixel_reads_four_bytes():
    image = PixelBuffer.from_dimensions(2, 2)
    image.data[12:16] = bytes([1, 2, 3, 4])
    assert image.get_pixel(1, 1) == Pixel(1, 2, 3, 4)
    assert get_pixel(image, 1, 1) == Pixel(1, 2, 3, 4)


def test_get_pixel_out_of_bounds():
    image = PixelBuffer.from_dimensions(2, 2)
    with pytest.raises(IndexError):
        image.get_pixel(2, 0)


def test_set_pixel_clamps():
    image = PixelBuffer.from_dimensions(1, 1)
    image.set_pixel(0, 0, Pixel(-5, 300, 12.9, 40))
    assert image.get_pixel(0, 0) == Pixel(0, 255, 12, 40)


@pytest.mark.parametrize("width, height", [(0, 3), (3, 0), (-1, 1)])
def test_from_dimensions_rejects_empty(width, height):
    with pytest.raises(ValueError):
        PixelBuffer.from_dimensions(width, height)


def test_from_pixels_rejects_wrong_count():
    with pytest.raises(ValueError):
        PixelBuffer.from_pixels(2, 2, [Pixel()] * 3)


def test_channel_extraction(ramp_image):
    assert ramp_image.channel(0) == [10, 20, 30, 40, 50, 60, 70, 80, 90]
    assert ramp_image.channel(3) == [255] * 9
    with pytest.raises(ValueError):
        ramp_image.channel(4)


def test_pillow_round_trip():
    image = Image.new("RGB", (4, 3), (10, 20, 30))
    buffer = PixelBuffer.from_pillow_image(image)
    assert (buffer.width, buffer.height) == (4, 3)
    assert buffer.get_pixel(3, 2) == Pixel(10, 20, 30, 255)

    back = buffer.to_pillow_image()
    assert back.mode == "RGBA"
    assert back.size == (4, 3)
    assert back.getpixel((0, 0)) == (10, 20, 30, 255)


def test_copy_is_independent():
    image = PixelBuffer.from_dimensions(1, 1, Pixel(9))
    clone = image.copy()
    clone.set_pixel(0, 0, Pixel(1))
    assert image.get_pixel(0, 0) == Pixel(9)
