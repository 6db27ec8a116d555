"""
Tonal adjustments applied after the stretch.

Steps run in a fixed order on R, G, B (alpha untouched):

1. Black point      channel - black_point * 2.55, floored at 0
2. Exposure         channel * 2 ** (exposure / 100)
3. Brightness       channel + brightness / 100 * 255
4. Shadow lift      pixels with luma < 128 get
                    channel * shadows / 100 * (1 - luma / 128) added
5. Contrast         ((channel / 255 - 0.5) * (contrast + 100) / 100 + 0.5) * 255
6. Saturation       gray + (channel - gray) * (1 + saturation / 100)
7. Clamp to [0, 255]
8. Sharpen          3x3 unsharp kernel blended by sharpness / 100

Contrast has to follow the shadow lift or it undoes part of the boost, and
saturation reads the post-contrast gray. A step whose parameter is neutral
is skipped, so the default ParameterSet leaves any image untouched.
"""

import numpy as np
from scipy.ndimage import convolve

from dstretch_studio.color.colorspaces import luma
from dstretch_studio.core.buffer import (
    as_pixel_buffer,
    clamp_channels,
    merge_channels,
    split_channels,
)
from dstretch_studio.core.logging import get_logger
from dstretch_studio.core.models import ParameterSet

logger = get_logger(__name__)

UNSHARP_KERNEL = np.array(
    [
        [0.0, -1.0, 0.0],
        [-1.0, 5.0, -1.0],
        [0.0, -1.0, 0.0],
    ]
)

SHADOW_LUMA_LIMIT = 128.0
MIDPOINT = 127.5


def unsharp_convolve(rgb: np.ndarray) -> np.ndarray:
    """Convolve each channel with the unsharp kernel, replicating edges."""
    out = np.empty_like(rgb, dtype=np.float64)
    for c in range(rgb.shape[-1]):
        out[..., c] = convolve(rgb[..., c].astype(np.float64), UNSHARP_KERNEL, mode="nearest")
    return out


def sharpen(rgb: np.ndarray, amount: float) -> np.ndarray:
    """Blend an image with its unsharp-masked version.

    Args:
        rgb: (H, W, 3) float channels
        amount: Blend factor in [0, 1]

    Returns:
        Clamped float channels
    """
    if amount <= 0:
        return rgb
    convolved = unsharp_convolve(rgb)
    return clamp_channels(rgb * (1.0 - amount) + convolved * amount)


def adjust_tones(rgb: np.ndarray, params: ParameterSet) -> np.ndarray:
    """Run steps 1-8 on float (H, W, 3) channels and return clamped floats."""
    rgb = np.asarray(rgb, dtype=np.float64).copy()

    if params.black_point:
        rgb = np.maximum(0.0, rgb - params.black_point * 2.55)

    if params.exposure:
        rgb = rgb * 2.0 ** (params.exposure / 100.0)

    if params.brightness:
        rgb = rgb + params.brightness / 100.0 * 255.0

    if params.shadows:
        y = luma(rgb)[..., np.newaxis]
        lift = rgb * (params.shadows / 100.0) * (1.0 - y / SHADOW_LUMA_LIMIT)
        rgb = np.where(y < SHADOW_LUMA_LIMIT, rgb + lift, rgb)

    if params.contrast:
        factor = (params.contrast + 100.0) / 100.0
        # Same map as ((c / 255 - 0.5) * factor + 0.5) * 255, exact at the midpoint
        rgb = (rgb - MIDPOINT) * factor + MIDPOINT

    if params.saturation:
        gray = luma(rgb)[..., np.newaxis]
        rgb = gray + (rgb - gray) * (1.0 + params.saturation / 100.0)

    rgb = clamp_channels(rgb)

    if params.sharpness > 0:
        rgb = sharpen(rgb, params.sharpness / 100.0)

    return rgb


def apply_tonal_adjustments(buffer: np.ndarray, params: ParameterSet) -> np.ndarray:
    """Apply the tonal adjustment stage to an RGBA buffer.

    Args:
        buffer: (H, W, 4) uint8 RGBA pixels (not modified)
        params: Parameter set; only the tonal fields are read

    Returns:
        New (H, W, 4) uint8 buffer
    """
    pixels = as_pixel_buffer(buffer)
    if not params.has_tonal_adjustments:
        return pixels

    rgb, alpha = split_channels(pixels)
    logger.debug(
        "Tonal adjustments: "
        + ", ".join(f"{name}={getattr(params, name)}" for name in (
            "black_point", "exposure", "brightness", "shadows",
            "contrast", "saturation", "sharpness",
        ))
    )
    return merge_channels(adjust_tones(rgb, params), alpha)
