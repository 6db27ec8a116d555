"""
Image decoding and encoding around the pixel pipeline.

The processing stages only see RGBA pixel buffers. These helpers turn
image files, encoded bytes and PIL images into buffers, and processed
buffers back into images for display or download.
"""

import io
import time
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from dstretch_studio.core.buffer import as_pixel_buffer
from dstretch_studio.core.exceptions import ImageDecodeError
from dstretch_studio.core.logging import get_logger

logger = get_logger(__name__)

ImageSource = Union[str, Path, bytes, Image.Image, np.ndarray]


def load_pixel_buffer(
    source: ImageSource,
    max_size: Optional[tuple[int, int]] = None,
) -> np.ndarray:
    """Decode an image into an RGBA pixel buffer.

    Args:
        source: Image path, encoded bytes, PIL Image, or numpy array
        max_size: Optional (width, height) bound; larger images are
            downscaled preserving aspect ratio (for live previews)

    Returns:
        (H, W, 4) uint8 RGBA buffer

    Raises:
        ImageDecodeError: If the source cannot be decoded
        TypeError: If the source type is not supported
    """
    if isinstance(source, np.ndarray):
        img = Image.fromarray(as_pixel_buffer(source))
    elif isinstance(source, Image.Image):
        img = source.copy()
    elif isinstance(source, (str, Path, bytes)):
        img = _open(source)
    else:
        raise TypeError(f"Unsupported source type: {type(source)}")

    img = ImageOps.exif_transpose(img)
    if img.mode != "RGBA":
        img = img.convert("RGBA")

    if max_size:
        img.thumbnail(max_size, Image.Resampling.LANCZOS)

    logger.debug(f"Loaded image: {img.size[0]}x{img.size[1]}")
    return np.array(img, dtype=np.uint8)


def pixel_buffer_to_image(buffer: np.ndarray) -> Image.Image:
    """Wrap a pixel buffer in an RGBA PIL Image."""
    return Image.fromarray(as_pixel_buffer(buffer))


def export_png_bytes(buffer: np.ndarray) -> bytes:
    """Encode a pixel buffer as PNG."""
    out = io.BytesIO()
    pixel_buffer_to_image(buffer).save(out, format="PNG", compress_level=6)
    return out.getvalue()


def save_pixel_buffer(buffer: np.ndarray, output_path: Union[str, Path]) -> Path:
    """Write a pixel buffer to disk; the format follows the file suffix.

    JPEG has no alpha channel, so alpha is dropped for .jpg/.jpeg.
    """
    output_path = Path(output_path)
    img = pixel_buffer_to_image(buffer)
    if output_path.suffix.lower() in (".jpg", ".jpeg"):
        img = img.convert("RGB")
    img.save(output_path)
    return output_path


def default_export_name(timestamp: Optional[float] = None) -> str:
    """Download file name of the form dstretch-<epoch milliseconds>.png."""
    if timestamp is None:
        timestamp = time.time()
    return f"dstretch-{int(timestamp * 1000)}.png"


def _open(source: Union[str, Path, bytes]) -> Image.Image:
    try:
        if isinstance(source, bytes):
            img = Image.open(io.BytesIO(source))
        else:
            img = Image.open(source)
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot decode image: {e}") from e
    return img
