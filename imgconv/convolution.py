from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple, Union

from joblib import Parallel, cpu_count, delayed
from PIL import Image

from .errors import DegenerateKernelError, InvalidSourceError
from .image_buffer import CHANNELS, Pixel, PixelBuffer, pixel_offset
from .kernels import Anchor, KernelSource, resolve_kernel, validate_static_kernel
from .neighborhood import extract_area

logger = logging.getLogger(__name__)

DEFAULT_KERNEL_SIZE = 5

# relative to the absolute weight total of a channel
ZERO_SUM_TOLERANCE = 1e-9

Rounding = Literal["truncate", "round"]
ImageSource = Union[PixelBuffer, Image.Image]


def _validate_size(size: int) -> None:
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError("Kernel size must be a positive integer")


@dataclass(frozen=True)
class ConvolutionSettings:
    """Explicit configuration for a convolution pass.

    ``kernel_size`` is used when neither ``size`` nor a static kernel gives
    one. ``n_jobs`` follows joblib: 1 runs in-process, -1 uses every core.
    ``kernel_anchor`` decides how a static kernel is cropped near the
    borders: ``"center"`` keeps it centered on the output pixel,
    ``"top_left"`` always reads it from its top-left corner.
    """

    kernel_size: int = DEFAULT_KERNEL_SIZE
    rounding: Rounding = "truncate"
    kernel_anchor: Anchor = "center"
    n_jobs: int = 1
    backend: Optional[str] = None

    def __post_init__(self) -> None:
        _validate_size(self.kernel_size)
        if self.rounding not in ("truncate", "round"):
            raise ValueError("Rounding must be 'truncate' or 'round'")
        if self.kernel_anchor not in ("center", "top_left"):
            raise ValueError("Kernel anchor must be 'center' or 'top_left'")
        if not isinstance(self.n_jobs, int) or self.n_jobs == 0:
            raise ValueError("n_jobs must be a non-zero integer")


DEFAULT_SETTINGS = ConvolutionSettings()


def as_pixel_buffer(source: ImageSource) -> PixelBuffer:
    if isinstance(source, PixelBuffer):
        return source
    if isinstance(source, Image.Image):
        return PixelBuffer.from_pillow_image(source)
    raise InvalidSourceError(type(source).__name__)


def convolve(
    source: ImageSource,
    kernel_source: KernelSource,
    size: int | None = None,
    settings: ConvolutionSettings | None = None,
) -> PixelBuffer:
    """
    Normalized convolution of ``source`` with a static kernel or a kernel
    generator called once per output pixel with that pixel's Area.

    Every output pixel is the per-channel weighted sum of its clipped
    neighborhood divided by the sum of the weights actually applied, so
    borders keep their brightness. Alpha is written as 255.
    """
    settings = settings or DEFAULT_SETTINGS
    image = as_pixel_buffer(source)
    is_generator = callable(kernel_source)
    if size is None:
        size = settings.kernel_size if is_generator else len(kernel_source)
    _validate_size(size)
    half_size = size // 2
    if not is_generator:
        kernel_source = validate_static_kernel(kernel_source, size)

    logger.debug(
        "Convolving %dx%d image with %s kernel, size=%d, n_jobs=%d",
        image.width,
        image.height,
        "generated" if is_generator else "static",
        size,
        settings.n_jobs,
    )
    if settings.n_jobs == 1:
        data = _convolve_rows(image, kernel_source, half_size, settings, 0, image.height)
    else:
        data = _convolve_parallel(image, kernel_source, half_size, settings)
    logger.debug("Convolution of %dx%d image finished", image.width, image.height)
    return PixelBuffer(image.width, image.height, data)


def convolve_pixel(
    image: PixelBuffer,
    kernel_source: KernelSource,
    x: int,
    y: int,
    half_size: int,
    anchor: Anchor = "center",
) -> Pixel:
    """Unrounded weighted average at (x, y); alpha is always 255."""
    area = extract_area(image, x, y, half_size)
    kernel = resolve_kernel(kernel_source, area, half_size, anchor)
    area_sum = Pixel(0, 0)
    kernel_sum = Pixel(0, 0)
    magnitude = Pixel(0, 0)
    for j, row in enumerate(area.pixels):
        kernel_row = kernel[j]
        for i, pixel in enumerate(row):
            weight = kernel_row[i]
            area_sum.r += pixel.r * weight.r
            area_sum.g += pixel.g * weight.g
            area_sum.b += pixel.b * weight.b
            kernel_sum.r += weight.r
            kernel_sum.g += weight.g
            kernel_sum.b += weight.b
            magnitude.r += abs(weight.r)
            magnitude.g += abs(weight.g)
            magnitude.b += abs(weight.b)
    for name in ("r", "g", "b"):
        tolerance = ZERO_SUM_TOLERANCE * max(1.0, magnitude.channel(name))
        if math.isclose(kernel_sum.channel(name), 0.0, abs_tol=tolerance):
            logger.debug("Zero weight sum for channel %s at (%d, %d)", name, x, y)
            raise DegenerateKernelError(x, y, name)
    return Pixel(
        area_sum.r / kernel_sum.r,
        area_sum.g / kernel_sum.g,
        area_sum.b / kernel_sum.b,
    )


def _convolve_rows(
    image: PixelBuffer,
    kernel_source: KernelSource,
    half_size: int,
    settings: ConvolutionSettings,
    start_y: int,
    end_y: int,
) -> bytearray:
    data = bytearray((end_y - start_y) * image.width * CHANNELS)
    base = pixel_offset(image, 0, start_y)
    for y in range(start_y, end_y):
        for x in range(image.width):
            average = convolve_pixel(image, kernel_source, x, y, half_size, settings.kernel_anchor)
            idx = pixel_offset(image, x, y) - base
            data[idx] = _to_channel(average.r, settings.rounding)
            data[idx + 1] = _to_channel(average.g, settings.rounding)
            data[idx + 2] = _to_channel(average.b, settings.rounding)
            data[idx + 3] = 255
    return data


def _convolve_parallel(
    image: PixelBuffer,
    kernel_source: KernelSource,
    half_size: int,
    settings: ConvolutionSettings,
) -> bytearray:
    bands = _row_bands(image.height, settings.n_jobs)
    logger.debug("Splitting %d rows into %d bands", image.height, len(bands))
    results = Parallel(n_jobs=settings.n_jobs, backend=settings.backend)(
        delayed(_convolve_rows)(image, kernel_source, half_size, settings, start_y, end_y)
        for start_y, end_y in bands
    )
    data = bytearray()
    for band in results:
        data.extend(band)
    return data


def _row_bands(height: int, n_jobs: int) -> List[Tuple[int, int]]:
    workers = cpu_count() if n_jobs < 0 else n_jobs
    # ~4 bands per worker for load balancing
    band_count = max(1, min(height, workers * 4))
    band_height = math.ceil(height / band_count)
    return [(start, min(start + band_height, height)) for start in range(0, height, band_height)]


def _to_channel(value: float, rounding: Rounding) -> int:
    stored = math.floor(value) if rounding == "truncate" else round(value)
    return max(0, min(255, stored))
