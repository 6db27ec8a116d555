"""
Sobel gradients and binary edge maps.

Gradients are computed on the luminance plane for interior pixels only;
the one-pixel frame of the image always has zero gradient.
"""

import numpy as np
from scipy.ndimage import binary_dilation, generate_binary_structure, sobel

EDGE_ON = 255


def sobel_gradients(luminance: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Horizontal and vertical Sobel derivatives of a 2-D plane.

    Args:
        luminance: (H, W) values in 0-255

    Returns:
        (dx, dy), each (H, W), zero on the one-pixel border
    """
    plane = np.asarray(luminance, dtype=np.float64)
    dx = sobel(plane, axis=1, mode="nearest")
    dy = sobel(plane, axis=0, mode="nearest")
    for grad in (dx, dy):
        grad[0, :] = 0.0
        grad[-1, :] = 0.0
        grad[:, 0] = 0.0
        grad[:, -1] = 0.0
    return dx, dy


def edge_magnitude(luminance: np.ndarray) -> np.ndarray:
    """Sobel gradient magnitude."""
    dx, dy = sobel_gradients(luminance)
    return np.hypot(dx, dy)


def detect_edges(luminance: np.ndarray, strength: float) -> np.ndarray:
    """Binary edge map: 255 where the gradient magnitude exceeds strength * 255.

    Args:
        luminance: (H, W) values in 0-255
        strength: Threshold as a fraction of 255

    Returns:
        (H, W) uint8 map of 0 / 255
    """
    magnitude = edge_magnitude(luminance)
    return np.where(magnitude > strength * 255.0, EDGE_ON, 0).astype(np.uint8)


def dilate_edges(edge_map: np.ndarray, thickness: int) -> np.ndarray:
    """Thicken an edge map by ``thickness - 1`` four-neighbour dilations.

    Args:
        edge_map: (H, W) map, nonzero = edge
        thickness: Edge width; 1 or less leaves the map unchanged

    Returns:
        New (H, W) uint8 map of 0 / 255
    """
    edge_map = np.asarray(edge_map)
    if thickness <= 1:
        return np.where(edge_map > 0, EDGE_ON, 0).astype(np.uint8)

    cross = generate_binary_structure(2, 1)
    grown = binary_dilation(edge_map > 0, structure=cross, iterations=int(thickness) - 1)
    return np.where(grown, EDGE_ON, 0).astype(np.uint8)
