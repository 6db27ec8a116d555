"""
Colorspace codec.

Forward and inverse per-pixel conversions between RGB and the component
spaces used by the decorrelation stretch.
"""

from dstretch_studio.color.colorspaces import (
    BT601_WEIGHTS,
    BT709_WEIGHTS,
    convert_colorspace,
    convert_to_rgb,
    from_components,
    lab_to_lch,
    lab_to_rgb,
    lch_to_lab,
    luma,
    rgb_to_gray,
    rgb_to_lab,
    to_components,
)

__all__ = [
    "BT601_WEIGHTS",
    "BT709_WEIGHTS",
    "convert_colorspace",
    "convert_to_rgb",
    "from_components",
    "lab_to_lch",
    "lab_to_rgb",
    "lch_to_lab",
    "luma",
    "rgb_to_gray",
    "rgb_to_lab",
    "to_components",
]
