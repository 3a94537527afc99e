from __future__ import annotations

import logging
import math
from typing import Callable, List, Literal, Sequence, Tuple, Union

from .errors import KernelShapeError
from .image_buffer import Pixel
from .neighborhood import Area
from .statistics import mean, standard_deviation

logger = logging.getLogger(__name__)

Weight = Union[Pixel, float, Sequence[float]]
Kernel = Sequence[Sequence[Weight]]
KernelGenerator = Callable[[Area], Kernel]
KernelSource = Union[Kernel, KernelGenerator]
Anchor = Literal["center", "top_left"]

SHARPEN = [
    [0, -1, 0],
    [-1, 5, -1],
    [0, -1, 0],
]

IDENTITY = [[1]]


def box_kernel(size: int = 3) -> List[List[float]]:
    if size <= 0 or size % 2 == 0:
        raise ValueError("Kernel size must be a positive odd number")
    return [[1.0 for _ in range(size)] for _ in range(size)]


def gaussian_kernel(size: int = 5, sigma: float = 1.0) -> List[List[float]]:
    if size <= 0 or size % 2 == 0:
        raise ValueError("Kernel size must be a positive odd number")
    if sigma <= 0:
        raise ValueError("Sigma must be positive")
    radius = size // 2
    weights = [math.exp(-(i**2) / (2 * sigma**2)) for i in range(-radius, radius + 1)]
    return [[wy * wx for wx in weights] for wy in weights]


def promote(kernel: Kernel) -> List[List[Pixel]]:
    """Turn every cell into a Pixel weight; a bare number n becomes Pixel(n)."""
    return [[_promote_cell(cell) for cell in row] for row in kernel]


def kernel_shape(kernel: Kernel) -> Tuple[int, int]:
    rows = len(kernel)
    if rows == 0:
        return 0, 0
    widths = {len(row) for row in kernel}
    if len(widths) != 1:
        # ragged grid; report the widest row
        return rows, max(widths)
    return rows, widths.pop()


def kernel_weight_sums(kernel: Sequence[Sequence[Pixel]]) -> Pixel:
    total = Pixel(0, 0)
    for row in kernel:
        for weight in row:
            total = total + weight
    return total


def validate_static_kernel(kernel: Kernel, size: int) -> List[List[Pixel]]:
    """Check a fixed kernel against the window side for ``size`` and promote it."""
    side = 2 * (size // 2) + 1
    shape = kernel_shape(kernel)
    if shape != (side, side) or _is_ragged(kernel):
        logger.debug("Rejecting static kernel of shape %s for size %d", shape, size)
        raise KernelShapeError(0, 0, (side, side), shape)
    return promote(kernel)


def resolve_kernel(
    kernel_source: KernelSource,
    area: Area,
    half_size: int,
    anchor: Anchor = "center",
) -> List[List[Pixel]]:
    """
    Produce the Pixel weight grid for ``area``.

    Generators are called with the area and must return a grid of the
    area's shape. Static kernels (already promoted) are centered on the
    area's center and cropped where the window was clipped; with
    ``anchor="top_left"`` the crop always starts at the kernel's first
    row and column instead.
    """
    if callable(kernel_source):
        kernel = kernel_source(area)
        _check_shape(kernel, area)
        return promote(kernel)
    if anchor == "top_left":
        row_start = col_start = 0
    else:
        cx, cy = area.center
        row_start = area.top - (cy - half_size)
        col_start = area.left - (cx - half_size)
    return [
        list(row[col_start:col_start + area.width])
        for row in kernel_source[row_start:row_start + area.height]
    ]


def bilateral_generator(spatial_sigma: float = 2.0, intensity_sigma: float = 30.0) -> KernelGenerator:
    """
    Edge-preserving weights: a spatial Gaussian of the distance to the
    center times a per-channel Gaussian of the intensity difference to the
    center pixel.
    """
    if spatial_sigma <= 0 or intensity_sigma <= 0:
        raise ValueError("Sigma must be positive")
    spatial_denominator = 2 * spatial_sigma**2
    range_denominator = 2 * intensity_sigma**2

    def generate(area: Area) -> List[List[Pixel]]:
        cx, cy = area.center
        center = area.center_pixel
        kernel = []
        for j, row in enumerate(area.pixels):
            ny = area.top + j
            kernel_row = []
            for i, pixel in enumerate(row):
                nx = area.left + i
                spatial = math.exp(-((nx - cx) ** 2 + (ny - cy) ** 2) / spatial_denominator)
                kernel_row.append(
                    Pixel(
                        spatial * math.exp(-((pixel.r - center.r) ** 2) / range_denominator),
                        spatial * math.exp(-((pixel.g - center.g) ** 2) / range_denominator),
                        spatial * math.exp(-((pixel.b - center.b) ** 2) / range_denominator),
                        1,
                    )
                )
            kernel.append(kernel_row)
        return kernel

    return generate


def statistics_generator(threshold: float = 1.0) -> KernelGenerator:
    """
    Outlier-rejecting weights: pixels whose luminance lies within
    ``threshold`` standard deviations of the area's mean luminance get
    weight 1, the rest 0. The center pixel is always kept.
    """
    if threshold < 0:
        raise ValueError("Threshold must not be negative")

    def generate(area: Area) -> List[List[int]]:
        luminances = [[_luminance(pixel) for pixel in row] for row in area.pixels]
        flat = [value for row in luminances for value in row]
        center_value = mean(flat)
        limit = threshold * standard_deviation(flat)
        cx, cy = area.center
        kernel = []
        for j, row in enumerate(luminances):
            kernel_row = []
            for i, value in enumerate(row):
                is_center = (area.left + i, area.top + j) == (cx, cy)
                kernel_row.append(1 if is_center or abs(value - center_value) <= limit else 0)
            kernel.append(kernel_row)
        return kernel

    return generate


def _promote_cell(cell: Weight) -> Pixel:
    if isinstance(cell, Pixel):
        return cell
    if isinstance(cell, (tuple, list)):
        return Pixel(*cell)
    return Pixel(cell)


def _check_shape(kernel: Kernel, area: Area) -> None:
    shape = kernel_shape(kernel)
    if shape != area.shape or _is_ragged(kernel):
        x, y = area.center
        logger.debug("Rejecting generated kernel of shape %s at (%d, %d)", shape, x, y)
        raise KernelShapeError(x, y, area.shape, shape)


def _is_ragged(kernel: Kernel) -> bool:
    return len({len(row) for row in kernel}) > 1


def _luminance(pixel: Pixel) -> float:
    return 0.2126 * pixel.r + 0.7152 * pixel.g + 0.0722 * pixel.b
