"""
Relief enhancement stage.

Three independent effects, each enabled by its own amount being positive
and run in this order:

- Normal-map lighting (normal_map_strength, light_angle, light_intensity)
- Edge overlay (edge_strength, edge_thickness): thresholded Sobel edges,
  optionally dilated, darken the image
- Directional sharpen (directional_sharpen): unsharp mask restricted to
  edge pixels

Luminance, edge maps and normal maps are rebuilt from the current working
pixels before every effect.
"""

from typing import Optional

import numpy as np

from dstretch_studio.adjustments.tonal import unsharp_convolve
from dstretch_studio.color.colorspaces import luma
from dstretch_studio.config import ReliefSettings, get_settings
from dstretch_studio.core.buffer import (
    as_pixel_buffer,
    clamp_channels,
    ensure_same_size,
    merge_channels,
    split_channels,
)
from dstretch_studio.core.logging import get_logger
from dstretch_studio.core.models import ParameterSet
from dstretch_studio.relief.edges import EDGE_ON, detect_edges, dilate_edges
from dstretch_studio.relief.lighting import apply_lighting, compute_normal_map

logger = get_logger(__name__)


def overlay_edges(rgb: np.ndarray, edge_map: np.ndarray, darken: float = 0.5) -> np.ndarray:
    """Darken pixels by ``1 - edge / 255 * darken``.

    Raises:
        DimensionMismatchError: If the edge map and image differ in size
    """
    ensure_same_size(rgb, edge_map, "Edge map")
    factor = 1.0 - np.asarray(edge_map, dtype=np.float64) / EDGE_ON * darken
    return clamp_channels(rgb * factor[..., np.newaxis])


def directional_sharpen(rgb: np.ndarray, edge_map: np.ndarray, amount: float) -> np.ndarray:
    """Unsharp-mask only the pixels marked in the edge map.

    Args:
        rgb: (H, W, 3) float channels
        edge_map: (H, W) map, nonzero = sharpen here
        amount: Blend factor in [0, 1]

    Raises:
        DimensionMismatchError: If the edge map and image differ in size
    """
    ensure_same_size(rgb, edge_map, "Edge map")
    if amount <= 0:
        return rgb

    blended = rgb * (1.0 - amount) + unsharp_convolve(rgb) * amount
    mask = (np.asarray(edge_map) > 0)[..., np.newaxis]
    return clamp_channels(np.where(mask, blended, rgb))


def enhance_relief(
    rgb: np.ndarray,
    params: ParameterSet,
    settings: Optional[ReliefSettings] = None,
) -> np.ndarray:
    """Run the enabled relief effects on float (H, W, 3) channels."""
    settings = settings or get_settings().relief
    rgb = np.asarray(rgb, dtype=np.float64)

    if params.normal_map_strength > 0:
        strength = params.normal_map_strength / 100.0
        normals = compute_normal_map(luma(rgb), strength)
        rgb = apply_lighting(
            rgb,
            normals,
            strength=strength,
            angle=params.light_angle,
            intensity=params.light_intensity / 100.0,
            elevation=settings.light_elevation,
        )
        logger.debug(f"Normal-map lighting: strength={strength}, angle={params.light_angle}")

    if params.edge_strength > 0:
        edges = detect_edges(luma(rgb), params.edge_strength / 100.0)
        edges = dilate_edges(edges, params.edge_thickness)
        rgb = overlay_edges(rgb, edges, darken=settings.edge_darken)
        logger.debug(
            f"Edge overlay: strength={params.edge_strength}, thickness={params.edge_thickness}, "
            f"edge_pixels={int(np.count_nonzero(edges))}"
        )

    if params.directional_sharpen > 0:
        edges = detect_edges(luma(rgb), settings.directional_edge_threshold)
        rgb = directional_sharpen(rgb, edges, params.directional_sharpen / 100.0)
        logger.debug(
            f"Directional sharpen: amount={params.directional_sharpen}, "
            f"edge_pixels={int(np.count_nonzero(edges))}"
        )

    return rgb


def apply_relief_enhancement(
    buffer: np.ndarray,
    params: ParameterSet,
    settings: Optional[ReliefSettings] = None,
) -> np.ndarray:
    """Apply the relief enhancement stage to an RGBA buffer.

    Args:
        buffer: (H, W, 4) uint8 RGBA pixels (not modified)
        params: Parameter set; only the relief fields are read
        settings: Relief constants, defaults to the global settings

    Returns:
        New (H, W, 4) uint8 buffer
    """
    pixels = as_pixel_buffer(buffer)
    if not params.has_relief_effects:
        return pixels

    rgb, alpha = split_channels(pixels)
    return merge_channels(enhance_relief(rgb, params, settings), alpha)
