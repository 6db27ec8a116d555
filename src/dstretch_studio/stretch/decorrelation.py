"""
Decorrelation stretch ("DStretch") for rock-art image enhancement.

The full stretch converts every pixel into a component space, finds the
principal axes of the component covariance and rescales each axis to a
common spread before converting back. Axes along which pigment colours
barely differ get amplified the most, which is what makes faint
pictographs visible.

A simpler per-channel variant normalises R, G and B independently and is
blended with the original; the pipeline runs it ahead of the full stretch.
"""

from typing import Optional

import numpy as np

from dstretch_studio.color.colorspaces import from_components, to_components
from dstretch_studio.core.buffer import as_pixel_buffer, merge_channels, split_channels
from dstretch_studio.core.logging import get_logger
from dstretch_studio.core.models import ComponentStatistics
from dstretch_studio.core.types import Colorspace
from dstretch_studio.stretch.statistics import MIN_VARIANCE, compute_statistics

logger = get_logger(__name__)

# Eigenvalues below this fraction of the largest one count as zero
EIGENVALUE_TOLERANCE = 1e-10

# Target of the per-channel normalisation
NEUTRAL_MEAN = 128.0
NEUTRAL_SIGMA = 64.0


def stretch_components(
    components: np.ndarray,
    stats: ComponentStatistics,
    amount: float,
    sigma_scale: float = 1.0,
    tolerance: float = EIGENVALUE_TOLERANCE,
) -> np.ndarray:
    """Rescale (N, 3) components along the eigen-axes of their covariance.

    Each pixel is centred on the means, projected onto the eigenbasis,
    scaled by ``amount * sigma_scale / sqrt(|eigenvalue|)`` per axis,
    projected back and re-centred. Zero eigenvalues use a divisor of 1.
    A degenerate (identity) basis carries no spread information, so its
    deviations are scaled by ``amount`` alone.

    Args:
        components: Component values, one row per pixel
        stats: Statistics of the image (usually of the same components)
        amount: Stretch amount
        sigma_scale: Target spread per unit of amount
        tolerance: Relative threshold under which an eigenvalue is zero

    Returns:
        Stretched components, same shape as the input
    """
    vectors = stats.basis.vectors
    magnitudes = np.abs(stats.basis.values)

    largest = magnitudes.max() if magnitudes.size else 0.0
    is_zero = magnitudes <= tolerance * largest if largest > 0 else np.ones(3, dtype=bool)
    divisors = np.where(is_zero, 1.0, np.sqrt(magnitudes))
    scale = amount if stats.basis.degenerate else amount * sigma_scale
    factors = scale / divisors

    centered = np.asarray(components, dtype=np.float64) - stats.means
    projected = centered @ vectors
    return (projected * factors) @ vectors.T + stats.means


def decorrelation_stretch(
    buffer: np.ndarray,
    colorspace: Colorspace | str,
    amount: float,
    sigma_scale: float = 1.0,
    max_samples: Optional[int] = None,
    tolerance: float = EIGENVALUE_TOLERANCE,
) -> np.ndarray:
    """Apply the decorrelation stretch to an RGBA buffer.

    Args:
        buffer: (H, W, 4) uint8 RGBA pixels (not modified)
        colorspace: Component space to stretch in; unknown names mean RGB
        amount: Stretch amount (negative values are treated as 0)
        sigma_scale: Target spread per unit of amount. With the default of
            1.0 the per-axis factor is ``amount / sqrt(eigenvalue)``.
        max_samples: Optional cap on pixels used for the statistics
        tolerance: Relative threshold under which an eigenvalue is zero

    Returns:
        New (H, W, 4) uint8 buffer; alpha is carried over unchanged
    """
    pixels = as_pixel_buffer(buffer)
    space = Colorspace.parse(colorspace)
    height, width = pixels.shape[:2]

    rgb, alpha = split_channels(pixels)
    components = to_components(rgb.reshape(-1, 3), space)
    stats = compute_statistics(components, max_samples=max_samples)

    if np.all(np.diag(stats.covariance) <= MIN_VARIANCE):
        logger.debug("Image has no colour variance, stretch skipped")
        return pixels

    stretched = stretch_components(
        components, stats, max(float(amount), 0.0), sigma_scale, tolerance=tolerance
    )
    out_rgb = from_components(stretched, space).reshape(height, width, 3)

    logger.debug(
        f"Decorrelation stretch: space={space.value}, amount={amount}, "
        f"eigenvalues={np.round(stats.basis.values, 3).tolist()}, "
        f"degenerate={stats.basis.degenerate}"
    )
    return merge_channels(out_rgb, alpha)


def simple_decorrelate(buffer: np.ndarray, amount: float) -> np.ndarray:
    """Per-channel mean/standard-deviation normalisation blended with the input.

    Each RGB channel is mapped to ``128 + z * 64`` where z is its own
    z-score; a channel without variance keeps its values. The result is
    mixed with the original as ``original * (1 - amount) + normalised * amount``.

    Args:
        buffer: (H, W, 4) uint8 RGBA pixels (not modified)
        amount: Blend factor, clamped to [0, 1]

    Returns:
        New (H, W, 4) uint8 buffer
    """
    pixels = as_pixel_buffer(buffer)
    amount = min(max(float(amount), 0.0), 1.0)
    if amount == 0.0:
        return pixels

    rgb, alpha = split_channels(pixels)
    flat = rgb.reshape(-1, 3)
    means = flat.mean(axis=0)
    stds = flat.std(axis=0)

    safe_stds = np.where(stds > 0, stds, 1.0)
    normalised = np.where(
        stds > 0,
        NEUTRAL_MEAN + (rgb - means) / safe_stds * NEUTRAL_SIGMA,
        rgb,
    )

    logger.debug(f"Simple decorrelate: amount={amount}, stds={np.round(stds, 2).tolist()}")
    return merge_channels(rgb * (1.0 - amount) + normalised * amount, alpha)
