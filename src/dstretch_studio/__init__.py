"""
DStretch Studio - decorrelation stretch and relief enhancement for rock-art photography.

This package provides the pixel-processing core of an interactive
enhancement tool, including:

- Colorspace conversions (RGB, LAB, LCH, YRE, LRE, YBK, CRGB)
- Covariance statistics and eigen-decomposition
- Decorrelation stretch and per-channel decorrelation
- Tonal adjustments (black point, exposure, shadows, contrast, saturation, sharpening)
- Relief enhancement (normal-map lighting, edge overlay, directional sharpening)
- A single-flight background worker and undo history for interactive use
"""

__version__ = "1.0.0"

# Core models
from dstretch_studio.core.models import (
    ComponentStatistics,
    EigenBasis,
    ParameterSet,
)
from dstretch_studio.core.types import Colorspace, PipelineStage
from dstretch_studio.core.exceptions import (
    BufferShapeError,
    DimensionMismatchError,
    DStretchError,
    ImageDecodeError,
)

# Configuration
from dstretch_studio.config import Settings, configure, get_settings

# Processing stages
from dstretch_studio.color import convert_colorspace, convert_to_rgb
from dstretch_studio.stretch import (
    compute_statistics,
    decorrelation_stretch,
    simple_decorrelate,
)
from dstretch_studio.adjustments import apply_tonal_adjustments
from dstretch_studio.relief import apply_relief_enhancement

# Pipeline and session
from dstretch_studio.pipeline import EnhancementPipeline, PipelineWorker, ProcessingResult
from dstretch_studio.session import HistoryStack

__all__ = [
    "__version__",
    # Models
    "ComponentStatistics",
    "EigenBasis",
    "ParameterSet",
    "Colorspace",
    "PipelineStage",
    # Exceptions
    "BufferShapeError",
    "DimensionMismatchError",
    "DStretchError",
    "ImageDecodeError",
    # Configuration
    "Settings",
    "configure",
    "get_settings",
    # Stages
    "convert_colorspace",
    "convert_to_rgb",
    "compute_statistics",
    "decorrelation_stretch",
    "simple_decorrelate",
    "apply_tonal_adjustments",
    "apply_relief_enhancement",
    # Pipeline
    "EnhancementPipeline",
    "PipelineWorker",
    "ProcessingResult",
    "HistoryStack",
]
