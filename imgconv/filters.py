from __future__ import annotations

from .convolution import ConvolutionSettings, ImageSource, convolve
from .image_buffer import PixelBuffer
from .kernels import SHARPEN, bilateral_generator, box_kernel, gaussian_kernel, statistics_generator


def mean_filter(image: ImageSource, size: int = 3, settings: ConvolutionSettings | None = None) -> PixelBuffer:
    return convolve(image, box_kernel(size), size, settings)


def gaussian_blur(image: ImageSource, sigma: float = 1.0, settings: ConvolutionSettings | None = None) -> PixelBuffer:
    if sigma <= 0:
        raise ValueError("Sigma must be positive")
    radius = max(1, int(3 * sigma))
    size = 2 * radius + 1
    return convolve(image, gaussian_kernel(size, sigma), size, settings)


def sharpen(image: ImageSource, settings: ConvolutionSettings | None = None) -> PixelBuffer:
    return convolve(image, SHARPEN, 3, settings)


def bilateral_filter(
    image: ImageSource,
    spatial_sigma: float = 2.0,
    intensity_sigma: float = 30.0,
    settings: ConvolutionSettings | None = None,
) -> PixelBuffer:
    """
    Edge-preserving smoothing. The window covers two spatial sigmas on each
    side of the center.
    """
    size = 2 * max(1, int(2 * spatial_sigma)) + 1
    return convolve(image, bilateral_generator(spatial_sigma, intensity_sigma), size, settings)


def adaptive_mean_filter(
    image: ImageSource,
    size: int = 5,
    threshold: float = 1.0,
    settings: ConvolutionSettings | None = None,
) -> PixelBuffer:
    """
    Mean filter that ignores neighbors whose luminance is more than
    ``threshold`` standard deviations away from the local mean.
    """
    return convolve(image, statistics_generator(threshold), size, settings)
