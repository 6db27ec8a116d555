"""
Relief enhancement module.

Normal-map lighting, edge detection and overlay, and edge-guided
sharpening for bringing out engraved or pecked surface detail.
"""

from dstretch_studio.relief.edges import (
    detect_edges,
    dilate_edges,
    edge_magnitude,
    sobel_gradients,
)
from dstretch_studio.relief.enhancement import (
    apply_relief_enhancement,
    directional_sharpen,
    enhance_relief,
    overlay_edges,
)
from dstretch_studio.relief.lighting import (
    apply_lighting,
    compute_normal_map,
    light_vector,
)

__all__ = [
    # Edges
    "detect_edges",
    "dilate_edges",
    "edge_magnitude",
    "sobel_gradients",
    # Lighting
    "apply_lighting",
    "compute_normal_map",
    "light_vector",
    # Stage
    "apply_relief_enhancement",
    "directional_sharpen",
    "enhance_relief",
    "overlay_edges",
]
