"""
Exceptions for DStretch Studio.

Numeric edge cases (unknown colorspace, degenerate covariance, out-of-range
parameters, NaN from inverse colorspace formulas) are handled by fallback
or clamping and never raise. Only caller contract violations and
undecodable images surface as errors:

- DStretchError (base)
  - DimensionMismatchError
    - BufferShapeError
  - ImageDecodeError
"""

from typing import Optional


class DStretchError(Exception):
    """Base exception for DStretch Studio errors."""

    pass


class DimensionMismatchError(DStretchError, ValueError):
    """Raised when two buffers handed to one stage disagree in size.

    Attributes:
        expected: Expected (height, width).
        actual: Received (height, width).
    """

    def __init__(
        self,
        message: str,
        expected: Optional[tuple[int, ...]] = None,
        actual: Optional[tuple[int, ...]] = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.expected is not None:
            parts.append(f"expected={self.expected}")
        if self.actual is not None:
            parts.append(f"actual={self.actual}")
        return " | ".join(parts)


class BufferShapeError(DimensionMismatchError):
    """Raised when pixel data cannot be interpreted as an RGBA buffer."""

    pass


class ImageDecodeError(DStretchError):
    """Raised when an input image cannot be decoded."""

    pass
