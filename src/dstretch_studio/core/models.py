"""
Core data models for DStretch Studio.

ParameterSet uses Pydantic for validation; the numeric results of the
statistics engine are plain frozen dataclasses around numpy arrays.
"""

import math
from dataclasses import dataclass
from typing import Any

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from dstretch_studio.core.types import Colorspace

# Valid (min, max) for every numeric ParameterSet field, in UI units
PARAMETER_RANGES: dict[str, tuple[float, float]] = {
    "stretch_amount": (0.0, 2.0),
    "decorrelation": (0.0, 100.0),
    "exposure": (-100.0, 100.0),
    "brightness": (-100.0, 100.0),
    "contrast": (-100.0, 100.0),
    "shadows": (0.0, 100.0),
    "black_point": (0.0, 50.0),
    "saturation": (-100.0, 100.0),
    "sharpness": (0.0, 100.0),
    "normal_map_strength": (0.0, 100.0),
    "light_angle": (0.0, 360.0),
    "light_intensity": (0.0, 100.0),
    "edge_strength": (0.0, 100.0),
    "edge_thickness": (1, 5),
    "directional_sharpen": (0.0, 100.0),
}

TONAL_FIELDS = (
    "exposure",
    "brightness",
    "contrast",
    "shadows",
    "black_point",
    "saturation",
    "sharpness",
)

RELIEF_FIELDS = (
    "normal_map_strength",
    "light_angle",
    "light_intensity",
    "edge_strength",
    "edge_thickness",
    "directional_sharpen",
)

# Values restored by ParameterSet.reset_advanced(); everything else goes to 0
ADVANCED_DEFAULTS: dict[str, float] = {
    "light_angle": 45.0,
    "light_intensity": 50.0,
    "edge_thickness": 1,
}


class ParameterSet(BaseModel):
    """Every user-tunable knob of one pipeline run.

    Out-of-range numbers are clamped to the nearest bound instead of being
    rejected; NaN falls back to the field default.
    """

    model_config = ConfigDict(frozen=True)

    # Decorrelation stretch
    colorspace: Colorspace = Field(default=Colorspace.RGB)
    dstretch_enabled: bool = Field(default=False)
    stretch_amount: float = Field(default=0.5, description="Target spread per eigen-axis")
    decorrelation: float = Field(default=0.0, description="Per-channel decorrelation (%)")

    # Tonal adjustments
    exposure: float = Field(default=0.0, description="Exposure; 100 = one stop")
    brightness: float = Field(default=0.0)
    contrast: float = Field(default=0.0)
    shadows: float = Field(default=0.0, description="Shadow lift (%)")
    black_point: float = Field(default=0.0, description="Black point (% of 255)")
    saturation: float = Field(default=0.0)
    sharpness: float = Field(default=0.0, description="Unsharp mask blend (%)")

    # Relief enhancement
    normal_map_strength: float = Field(default=0.0, description="Normal-map lighting (%)")
    light_angle: float = Field(default=45.0, description="Light direction (degrees)")
    light_intensity: float = Field(default=50.0, description="Light intensity (%)")
    edge_strength: float = Field(default=0.0, description="Edge threshold (% of 255)")
    edge_thickness: int = Field(default=1, description="Edge width in pixels")
    directional_sharpen: float = Field(default=0.0, description="Edge-only sharpening (%)")

    @field_validator("colorspace", mode="before")
    @classmethod
    def parse_colorspace(cls, v: Any) -> Colorspace:
        """Unknown colorspaces fall back to RGB."""
        return Colorspace.parse(v)

    @field_validator(*PARAMETER_RANGES, mode="before")
    @classmethod
    def clamp_to_range(cls, v: Any, info: ValidationInfo) -> Any:
        """Clamp numeric input into the field's valid range."""
        if isinstance(v, bool) or not isinstance(v, (int, float, np.number)):
            return v
        low, high = PARAMETER_RANGES[info.field_name]
        value = float(v)
        if math.isnan(value):
            return cls.model_fields[info.field_name].default
        value = min(max(value, low), high)
        if info.field_name == "edge_thickness":
            return int(round(value))
        return value

    def reset_adjustments(self) -> "ParameterSet":
        """Copy with every tonal adjustment back at neutral."""
        return self.model_copy(update={name: 0 for name in TONAL_FIELDS})

    def reset_advanced(self) -> "ParameterSet":
        """Copy with relief settings back at their defaults."""
        update = {name: ADVANCED_DEFAULTS.get(name, 0.0) for name in RELIEF_FIELDS}
        return self.model_copy(update=update)

    @property
    def has_tonal_adjustments(self) -> bool:
        return any(getattr(self, name) != 0 for name in TONAL_FIELDS)

    @property
    def has_relief_effects(self) -> bool:
        return (
            self.normal_map_strength > 0
            or self.edge_strength > 0
            or self.directional_sharpen > 0
        )


@dataclass(frozen=True)
class EigenBasis:
    """Working basis of one stretch.

    Attributes:
        vectors: 3x3 array whose columns are unit eigenvectors
        values: The three eigenvalues, matching the columns of vectors
        degenerate: True when the identity fallback was used
    """

    vectors: np.ndarray
    values: np.ndarray
    degenerate: bool = False

    @classmethod
    def identity(cls) -> "EigenBasis":
        return cls(vectors=np.eye(3), values=np.ones(3), degenerate=True)


@dataclass(frozen=True)
class ComponentStatistics:
    """Per-component means, covariance and eigenbasis of one image."""

    means: np.ndarray
    covariance: np.ndarray
    basis: EigenBasis
    sample_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "means": [round(float(m), 4) for m in self.means],
            "covariance": np.round(self.covariance, 4).tolist(),
            "eigenvalues": [round(float(v), 4) for v in self.basis.values],
            "degenerate": self.basis.degenerate,
            "sample_count": self.sample_count,
        }
