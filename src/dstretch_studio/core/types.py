"""
Enumerations shared across the processing pipeline.
"""

from enum import Enum
from typing import Any

from dstretch_studio.core.logging import get_logger

logger = get_logger(__name__)


class Colorspace(str, Enum):
    """Three-component colour representations used by the stretch engine."""

    RGB = "RGB"
    LAB = "LAB"  # CIE L*a*b*, D65
    LCH = "LCH"  # Cylindrical LAB
    YRE = "YRE"  # BT.601 luma, red, green
    LRE = "LRE"  # BT.709 luma, red, green
    YBK = "YBK"  # BT.601 luma, blue, inverted green
    CRGB = "CRGB"  # Contrast-boosted RGB remap

    @classmethod
    def parse(cls, value: Any) -> "Colorspace":
        """Map any value onto a colorspace.

        Unknown names fall back to RGB rather than failing.

        Args:
            value: Colorspace member or name (case-insensitive)

        Returns:
            Matching Colorspace, or Colorspace.RGB
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        logger.debug(f"Unknown colorspace {value!r}, using RGB")
        return cls.RGB


class PipelineStage(str, Enum):
    """Stages of the enhancement pipeline, in execution order."""

    SIMPLE_DECORRELATE = "simple_decorrelate"
    DSTRETCH = "dstretch"
    TONAL = "tonal"
    RELIEF = "relief"
