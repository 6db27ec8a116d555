"""
Enhancement pipeline.

Runs the processing stages over one pixel buffer:

    simple decorrelate -> decorrelation stretch -> tonal -> relief

Each stage is skipped when its parameters are neutral. The caller's buffer
is copied on entry and never modified; the result holds a new buffer.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import numpy as np

from dstretch_studio.adjustments.tonal import apply_tonal_adjustments
from dstretch_studio.config import Settings, get_settings
from dstretch_studio.core.buffer import as_pixel_buffer
from dstretch_studio.core.logging import LogContext, get_logger, log_operation
from dstretch_studio.core.models import ParameterSet
from dstretch_studio.core.types import PipelineStage
from dstretch_studio.relief.enhancement import apply_relief_enhancement
from dstretch_studio.stretch.decorrelation import decorrelation_stretch, simple_decorrelate

logger = get_logger(__name__)


@dataclass
class ProcessingResult:
    """Result of one pipeline run."""

    buffer: np.ndarray
    params: ParameterSet
    stages: list[PipelineStage] = field(default_factory=list)
    processing_notes: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def size(self) -> tuple[int, int]:
        """Image size as (width, height)."""
        return self.buffer.shape[1], self.buffer.shape[0]

    def get_info(self) -> dict:
        """Get processing info as dictionary."""
        return {
            "size": f"{self.size[0]}x{self.size[1]}",
            "colorspace": self.params.colorspace.value,
            "stages": [stage.value for stage in self.stages],
            "duration_seconds": round(self.duration_seconds, 4),
            "notes": self.processing_notes,
        }


class EnhancementPipeline:
    """Apply a ParameterSet to RGBA pixel buffers.

    The pipeline holds no per-image state, so one instance can serve any
    number of images and threads.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the pipeline.

        Args:
            settings: Application settings. If None, uses the global settings.
        """
        self.settings = settings or get_settings()

    def process(
        self,
        buffer: np.ndarray,
        params: Union[ParameterSet, dict[str, Any], None] = None,
    ) -> ProcessingResult:
        """Run every enabled stage over a buffer.

        Args:
            buffer: (H, W, 4) uint8 RGBA pixels
            params: ParameterSet or a dict of its fields; defaults if None

        Returns:
            ProcessingResult with the new buffer and the stages that ran
        """
        params = self._coerce_params(params)
        pixels = as_pixel_buffer(buffer)
        height, width = pixels.shape[:2]

        stages: list[PipelineStage] = []
        notes: list[str] = []
        start = time.perf_counter()

        with LogContext(width=width, height=height, colorspace=params.colorspace.value):
            with log_operation(logger, "enhancement_pipeline"):
                if params.decorrelation > 0:
                    pixels = simple_decorrelate(pixels, params.decorrelation / 100.0)
                    stages.append(PipelineStage.SIMPLE_DECORRELATE)
                    notes.append(f"Per-channel decorrelation: {params.decorrelation:g}%")

                if params.dstretch_enabled:
                    stretch = self.settings.stretch
                    pixels = decorrelation_stretch(
                        pixels,
                        params.colorspace,
                        params.stretch_amount,
                        sigma_scale=stretch.sigma_scale,
                        max_samples=stretch.max_sample_pixels or None,
                        tolerance=stretch.eigenvalue_tolerance,
                    )
                    stages.append(PipelineStage.DSTRETCH)
                    notes.append(
                        f"DStretch: {params.colorspace.value}, amount {params.stretch_amount:g}"
                    )

                if params.has_tonal_adjustments:
                    pixels = apply_tonal_adjustments(pixels, params)
                    stages.append(PipelineStage.TONAL)
                    notes.append("Tonal adjustments applied")

                if params.has_relief_effects:
                    pixels = apply_relief_enhancement(pixels, params, self.settings.relief)
                    stages.append(PipelineStage.RELIEF)
                    notes.append("Relief enhancement applied")

        return ProcessingResult(
            buffer=pixels,
            params=params,
            stages=stages,
            processing_notes=notes,
            duration_seconds=time.perf_counter() - start,
        )

    @staticmethod
    def _coerce_params(params: Union[ParameterSet, dict[str, Any], None]) -> ParameterSet:
        if params is None:
            return ParameterSet()
        if isinstance(params, ParameterSet):
            return params
        return ParameterSet.model_validate(params)
