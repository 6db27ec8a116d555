"""
Tonal adjustment module.

Black point, exposure, brightness, shadow lift, contrast, saturation and
unsharp-mask sharpening in a fixed order.
"""

from dstretch_studio.adjustments.tonal import (
    UNSHARP_KERNEL,
    adjust_tones,
    apply_tonal_adjustments,
    sharpen,
    unsharp_convolve,
)

__all__ = [
    "UNSHARP_KERNEL",
    "adjust_tones",
    "apply_tonal_adjustments",
    "sharpen",
    "unsharp_convolve",
]
