"""
Colorspace conversions for decorrelation stretching.

Every function works on (..., 3) float arrays so that a whole image is
converted in one call. Forward conversions take RGB in 0-255; inverse
conversions return RGB clamped to 0-255 with non-finite values removed.

Supported component spaces:
- RGB: identity
- LAB: sRGB -> linear -> XYZ (D65) -> CIE L*a*b*
- LCH: LAB in cylindrical form, hue in degrees [0, 360)
- YRE / LRE: luma, red, green (BT.601 / BT.709 luma weights)
- YBK: luma, blue, inverted green
- CRGB: each channel pushed away from the other two,
  c = (2 * channel - other_two + 510) / 2. The three components always
  sum to 765, so the gray level of a pixel is lost: the inverse restores
  the colour differences exactly and places every pixel at mid-gray
  luminance. A CRGB round trip is therefore approximate.
"""

from typing import Sequence

import numpy as np

from dstretch_studio.core.buffer import clamp_channels
from dstretch_studio.core.types import Colorspace

BT601_WEIGHTS = (0.299, 0.587, 0.114)
BT709_WEIGHTS = (0.2126, 0.7152, 0.0722)

D65_WHITE = np.array([95.047, 100.0, 108.883])

RGB_TO_XYZ = np.array(
    [
        [0.4124, 0.3576, 0.1805],
        [0.2126, 0.7152, 0.0722],
        [0.0193, 0.1192, 0.9505],
    ]
)

XYZ_TO_RGB = np.array(
    [
        [3.2406, -1.5372, -0.4986],
        [-0.9689, 1.8758, 0.0415],
        [0.0557, -0.2040, 1.0570],
    ]
)

SRGB_THRESHOLD = 0.04045
LINEAR_THRESHOLD = 0.0031308
LAB_EPSILON = 0.008856
LAB_KAPPA = 7.787
LAB_OFFSET = 16.0 / 116.0

CRGB_GRAY_LEVEL = 127.5


def luma(rgb: np.ndarray, weights: Sequence[float] = BT601_WEIGHTS) -> np.ndarray:
    """Weighted sum of the R, G, B channels (last axis)."""
    rgb = np.asarray(rgb, dtype=np.float64)
    return rgb[..., 0] * weights[0] + rgb[..., 1] * weights[1] + rgb[..., 2] * weights[2]


def rgb_to_gray(rgb: np.ndarray) -> np.ndarray:
    """BT.601 gray replicated over three channels."""
    y = luma(rgb)
    return np.stack([y, y, y], axis=-1)


# ----------------------------------------------------------------------------
# CIE L*a*b* / LCH
# ----------------------------------------------------------------------------


def _srgb_to_linear(values: np.ndarray) -> np.ndarray:
    return np.where(
        values > SRGB_THRESHOLD,
        np.power((np.maximum(values, 0.0) + 0.055) / 1.055, 2.4),
        values / 12.92,
    )


def _linear_to_srgb(values: np.ndarray) -> np.ndarray:
    return np.where(
        values > LINEAR_THRESHOLD,
        1.055 * np.power(np.maximum(values, 0.0), 1.0 / 2.4) - 0.055,
        12.92 * values,
    )


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert 0-255 sRGB to CIE L*a*b* (D65)."""
    linear = _srgb_to_linear(np.asarray(rgb, dtype=np.float64) / 255.0)
    xyz = linear @ RGB_TO_XYZ.T * 100.0 / D65_WHITE

    f = np.where(xyz > LAB_EPSILON, np.cbrt(xyz), LAB_KAPPA * xyz + LAB_OFFSET)
    fx, fy, fz = f[..., 0], f[..., 1], f[..., 2]

    return np.stack([116.0 * fy - 16.0, 500.0 * (fx - fy), 200.0 * (fy - fz)], axis=-1)


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert CIE L*a*b* (D65) to 0-255 sRGB, clamped."""
    lab = np.asarray(lab, dtype=np.float64)
    fy = (lab[..., 0] + 16.0) / 116.0
    fx = lab[..., 1] / 500.0 + fy
    fz = fy - lab[..., 2] / 200.0
    f = np.stack([fx, fy, fz], axis=-1)

    cubed = f ** 3
    xyz = np.where(cubed > LAB_EPSILON, cubed, (f - LAB_OFFSET) / LAB_KAPPA)
    xyz = xyz * D65_WHITE / 100.0

    linear = xyz @ XYZ_TO_RGB.T
    with np.errstate(invalid="ignore", over="ignore"):
        return clamp_channels(_linear_to_srgb(linear) * 255.0)


def lab_to_lch(lab: np.ndarray) -> np.ndarray:
    """Cylindrical form of L*a*b*: lightness, chroma, hue in [0, 360)."""
    lab = np.asarray(lab, dtype=np.float64)
    a, b = lab[..., 1], lab[..., 2]
    chroma = np.hypot(a, b)
    hue = np.mod(np.degrees(np.arctan2(b, a)), 360.0)
    # mod of a tiny negative angle rounds up to exactly 360
    hue = np.where(hue >= 360.0, 0.0, hue)
    return np.stack([lab[..., 0], chroma, hue], axis=-1)


def lch_to_lab(lch: np.ndarray) -> np.ndarray:
    lch = np.asarray(lch, dtype=np.float64)
    hue = np.radians(lch[..., 2])
    return np.stack(
        [lch[..., 0], lch[..., 1] * np.cos(hue), lch[..., 1] * np.sin(hue)], axis=-1
    )


# ----------------------------------------------------------------------------
# Luma-based spaces
# ----------------------------------------------------------------------------


def _luma_red_green(rgb: np.ndarray, weights: Sequence[float]) -> np.ndarray:
    return np.stack([luma(rgb, weights), rgb[..., 0], rgb[..., 1]], axis=-1)


def _luma_red_green_to_rgb(comp: np.ndarray, weights: Sequence[float]) -> np.ndarray:
    wr, wg, wb = weights
    red, green = comp[..., 1], comp[..., 2]
    blue = (comp[..., 0] - wr * red - wg * green) / wb
    return np.stack([red, green, blue], axis=-1)


def _rgb_to_ybk(rgb: np.ndarray) -> np.ndarray:
    return np.stack([luma(rgb), rgb[..., 2], 255.0 - rgb[..., 1]], axis=-1)


def _ybk_to_rgb(comp: np.ndarray) -> np.ndarray:
    wr, wg, wb = BT601_WEIGHTS
    green = 255.0 - comp[..., 2]
    blue = comp[..., 1]
    red = (comp[..., 0] - wg * green - wb * blue) / wr
    return np.stack([red, green, blue], axis=-1)


def _rgb_to_crgb(rgb: np.ndarray) -> np.ndarray:
    total = rgb.sum(axis=-1, keepdims=True)
    # 2c - (sum of the other two) == 3c - total
    return (3.0 * rgb - total + 510.0) / 2.0


def _crgb_to_rgb(comp: np.ndarray) -> np.ndarray:
    # The forward map always sums to 765 and drops the gray level; undo it
    # on the chroma plane and put the gray level at mid-gray.
    return (2.0 * comp - 510.0) / 3.0 + CRGB_GRAY_LEVEL


# ----------------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------------


def to_components(rgb: np.ndarray, colorspace: Colorspace | str) -> np.ndarray:
    """Convert RGB (..., 3) in 0-255 to the components of a colorspace.

    Args:
        rgb: RGB values, last axis of length 3
        colorspace: Target space; unknown names are treated as RGB

    Returns:
        float64 array of the same shape
    """
    space = Colorspace.parse(colorspace)
    rgb = np.asarray(rgb, dtype=np.float64)

    if space == Colorspace.LAB:
        return rgb_to_lab(rgb)
    if space == Colorspace.LCH:
        return lab_to_lch(rgb_to_lab(rgb))
    if space == Colorspace.YRE:
        return _luma_red_green(rgb, BT601_WEIGHTS)
    if space == Colorspace.LRE:
        return _luma_red_green(rgb, BT709_WEIGHTS)
    if space == Colorspace.YBK:
        return _rgb_to_ybk(rgb)
    if space == Colorspace.CRGB:
        return _rgb_to_crgb(rgb)
    return rgb.copy()


def from_components(components: np.ndarray, colorspace: Colorspace | str) -> np.ndarray:
    """Convert colorspace components back to RGB, clamped to [0, 255].

    Division by the small blue/red luma weights can push the recovered
    channel far out of range (or to NaN/inf for non-finite input); the
    final clamp absorbs that.
    """
    space = Colorspace.parse(colorspace)
    comp = np.asarray(components, dtype=np.float64)

    with np.errstate(invalid="ignore", over="ignore", divide="ignore"):
        if space == Colorspace.LAB:
            rgb = lab_to_rgb(comp)
        elif space == Colorspace.LCH:
            rgb = lab_to_rgb(lch_to_lab(comp))
        elif space == Colorspace.YRE:
            rgb = _luma_red_green_to_rgb(comp, BT601_WEIGHTS)
        elif space == Colorspace.LRE:
            rgb = _luma_red_green_to_rgb(comp, BT709_WEIGHTS)
        elif space == Colorspace.YBK:
            rgb = _ybk_to_rgb(comp)
        elif space == Colorspace.CRGB:
            rgb = _crgb_to_rgb(comp)
        else:
            rgb = comp

    return clamp_channels(rgb)


def convert_colorspace(pixel: Sequence[float], colorspace: Colorspace | str) -> tuple[float, float, float]:
    """Convert a single (r, g, b) pixel to its three components."""
    c1, c2, c3 = to_components(np.asarray(pixel[:3], dtype=np.float64), colorspace)
    return float(c1), float(c2), float(c3)


def convert_to_rgb(c1: float, c2: float, c3: float, colorspace: Colorspace | str) -> tuple[int, int, int]:
    """Convert a single component triple back to a clamped 8-bit RGB pixel."""
    rgb = np.rint(from_components(np.array([c1, c2, c3], dtype=np.float64), colorspace))
    return int(rgb[0]), int(rgb[1]), int(rgb[2])
