"""
Decorrelation stretch module.

Provides the statistics engine (means, covariance, eigenbasis) and the
two stretch stages built on it.
"""

from dstretch_studio.stretch.decorrelation import (
    decorrelation_stretch,
    simple_decorrelate,
    stretch_components,
)
from dstretch_studio.stretch.statistics import (
    compute_statistics,
    covariance3x3,
    eigendecompose,
    mean,
)

__all__ = [
    # Stretch
    "decorrelation_stretch",
    "simple_decorrelate",
    "stretch_components",
    # Statistics
    "compute_statistics",
    "covariance3x3",
    "eigendecompose",
    "mean",
]
