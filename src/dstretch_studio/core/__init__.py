"""Core models, types, buffers, logging and exceptions."""

from dstretch_studio.core.buffer import (
    as_pixel_buffer,
    clamp_channels,
    ensure_same_size,
    merge_channels,
    quantize,
    split_channels,
)
from dstretch_studio.core.exceptions import (
    BufferShapeError,
    DimensionMismatchError,
    DStretchError,
    ImageDecodeError,
)
from dstretch_studio.core.models import (
    ComponentStatistics,
    EigenBasis,
    ParameterSet,
)
from dstretch_studio.core.types import Colorspace, PipelineStage

__all__ = [
    # Buffers
    "as_pixel_buffer",
    "clamp_channels",
    "ensure_same_size",
    "merge_channels",
    "quantize",
    "split_channels",
    # Exceptions
    "BufferShapeError",
    "DimensionMismatchError",
    "DStretchError",
    "ImageDecodeError",
    # Models
    "ComponentStatistics",
    "EigenBasis",
    "ParameterSet",
    # Types
    "Colorspace",
    "PipelineStage",
]
