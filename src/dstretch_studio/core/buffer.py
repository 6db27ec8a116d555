"""
Pixel buffer helpers.

A pixel buffer is a (height, width, 4) uint8 RGBA array in row-major order.
Stages never keep a reference to the caller's array: they read from it and
return newly allocated buffers.
"""

from typing import Optional, Union

import numpy as np

from dstretch_studio.core.exceptions import BufferShapeError, DimensionMismatchError

PixelData = Union[np.ndarray, bytes, bytearray, memoryview]


def as_pixel_buffer(
    data: PixelData,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> np.ndarray:
    """Interpret pixel data as an RGBA buffer.

    Args:
        data: (H, W, 4) or (H, W, 3) array, or flat row-major RGBA data
        width: Image width, required for flat data
        height: Image height, required for flat data

    Returns:
        Contiguous (H, W, 4) uint8 copy of the data

    Raises:
        BufferShapeError: If the data does not describe an RGBA image
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(data, dtype=np.uint8)
    else:
        arr = np.asarray(data)

    if arr.ndim == 1:
        if width is None or height is None:
            raise BufferShapeError("Flat pixel data needs width and height")
        expected = int(width) * int(height) * 4
        if arr.size != expected:
            raise BufferShapeError(
                "Flat pixel data length does not match width*height*4",
                expected=(expected,),
                actual=(arr.size,),
            )
        arr = arr.reshape(int(height), int(width), 4)
    elif arr.ndim == 3 and arr.shape[2] == 3:
        alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
        arr = np.concatenate([_to_uint8(arr), alpha], axis=2)
    elif arr.ndim != 3 or arr.shape[2] != 4:
        raise BufferShapeError(f"Unsupported pixel array shape: {arr.shape}")

    if width is not None and height is not None and arr.shape[:2] != (height, width):
        raise BufferShapeError(
            "Pixel array does not match the declared size",
            expected=(height, width),
            actual=arr.shape[:2],
        )

    return np.ascontiguousarray(_to_uint8(arr)).copy()


def split_channels(buffer: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Split a buffer into float64 RGB (H, W, 3) and its uint8 alpha (H, W)."""
    return buffer[..., :3].astype(np.float64), buffer[..., 3].copy()


def merge_channels(rgb: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """Quantise float RGB and reattach alpha into a new RGBA buffer."""
    out = np.empty(rgb.shape[:2] + (4,), dtype=np.uint8)
    out[..., :3] = quantize(rgb)
    out[..., 3] = alpha
    return out


def clamp_channels(values: np.ndarray) -> np.ndarray:
    """Clamp to [0, 255]; NaN becomes 0, infinities the nearest bound."""
    values = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(values, 0.0, 255.0)


def quantize(values: np.ndarray) -> np.ndarray:
    """Clamp and round (half to even) to uint8."""
    return np.rint(clamp_channels(values)).astype(np.uint8)


def ensure_same_size(image: np.ndarray, other: np.ndarray, what: str) -> None:
    """Raise if two per-pixel arrays disagree in height or width.

    Raises:
        DimensionMismatchError: If the leading two dimensions differ
    """
    if image.shape[:2] != other.shape[:2]:
        raise DimensionMismatchError(
            f"{what} does not match image dimensions",
            expected=tuple(image.shape[:2]),
            actual=tuple(other.shape[:2]),
        )


def _to_uint8(arr: np.ndarray) -> np.ndarray:
    if arr.dtype == np.uint8:
        return arr
    return quantize(arr.astype(np.float64))
