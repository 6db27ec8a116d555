"""
Normal-map synthesis and directional lighting.

Luminance gradients are turned into surface normals, which are lit from a
direction given in degrees to bring out carved or pecked relief.
"""

import math

import numpy as np

from dstretch_studio.core.buffer import clamp_channels, ensure_same_size
from dstretch_studio.relief.edges import sobel_gradients

DEFAULT_ELEVATION = 0.5


def compute_normal_map(luminance: np.ndarray, strength: float) -> np.ndarray:
    """Unit surface normals (-dx * strength, -dy * strength, 1), normalised.

    Args:
        luminance: (H, W) values in 0-255
        strength: Relief strength

    Returns:
        (H, W, 3) float64 unit vectors; flat (0, 0, 1) on the border
    """
    dx, dy = sobel_gradients(luminance)
    normals = np.stack([-dx * strength, -dy * strength, np.ones_like(dx)], axis=-1)
    return normals / np.linalg.norm(normals, axis=-1, keepdims=True)


def light_vector(angle: float, elevation: float = DEFAULT_ELEVATION) -> np.ndarray:
    """Unit light direction for an angle in degrees."""
    theta = math.radians(angle)
    vec = np.array([math.cos(theta), math.sin(theta), elevation])
    return vec / np.linalg.norm(vec)


def apply_lighting(
    rgb: np.ndarray,
    normal_map: np.ndarray,
    strength: float,
    angle: float,
    intensity: float,
    elevation: float = DEFAULT_ELEVATION,
) -> np.ndarray:
    """Light an image through its normal map.

    lighting = max(0, normal . light) * intensity, blended as
    ``rgb * (1 - strength) + rgb * (1 + lighting) * strength``. Border
    pixels have no gradient information and are left unlit.

    Raises:
        DimensionMismatchError: If the normal map and image differ in size
    """
    ensure_same_size(rgb, normal_map, "Normal map")

    light = light_vector(angle, elevation)
    lighting = np.maximum(0.0, normal_map @ light) * intensity
    lighting[0, :] = 0.0
    lighting[-1, :] = 0.0
    lighting[:, 0] = 0.0
    lighting[:, -1] = 0.0

    lit = rgb * (1.0 + lighting[..., np.newaxis])
    return clamp_channels(rgb * (1.0 - strength) + lit * strength)
