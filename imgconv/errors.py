from __future__ import annotations


class ConvolutionError(RuntimeError):
    pass


class InvalidSourceError(ConvolutionError):
    """Image source is neither a PixelBuffer nor a decoded Pillow image."""

    def __init__(self, received_type: str) -> None:
        super().__init__(received_type)
        self.received_type = received_type

    def __str__(self) -> str:
        return (
            "Image source must be either a PixelBuffer or a PIL.Image.Image; "
            f"received {self.received_type}"
        )


class KernelShapeError(ConvolutionError):
    """Resolved kernel does not match the neighborhood it is applied to."""

    def __init__(self, x: int, y: int, expected: tuple[int, int], actual: tuple[int, int]) -> None:
        super().__init__(x, y, expected, actual)
        self.x = x
        self.y = y
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return (
            f"Kernel at ({self.x}, {self.y}) has shape {self.actual[0]}x{self.actual[1]}, "
            f"neighborhood is {self.expected[0]}x{self.expected[1]} (rows x columns)"
        )


class DegenerateKernelError(ConvolutionError):
    """A color channel's kernel weights sum to zero."""

    def __init__(self, x: int, y: int, channel: str) -> None:
        super().__init__(x, y, channel)
        self.x = x
        self.y = y
        self.channel = channel

    def __str__(self) -> str:
        return f"Kernel weights for channel '{self.channel}' sum to zero at ({self.x}, {self.y})"
