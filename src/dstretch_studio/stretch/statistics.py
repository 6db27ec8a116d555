"""
Statistics engine for the decorrelation stretch.

Computes per-component means, the unbiased 3x3 covariance matrix and its
eigen-decomposition. A matrix that cannot be decomposed meaningfully
(zero-variance component, non-finite entries, solver failure) yields the
identity basis with unit eigenvalues instead of an error, so a flat image
passes through the stretch unchanged.
"""

from typing import Optional, Sequence

import numpy as np

from dstretch_studio.core.logging import get_logger
from dstretch_studio.core.models import ComponentStatistics, EigenBasis

logger = get_logger(__name__)

# Variances at or below this are treated as zero
MIN_VARIANCE = 1e-12


def mean(values: Sequence[float] | np.ndarray) -> float:
    """Arithmetic mean of a sequence; 0.0 for an empty one."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def covariance3x3(
    c1: Sequence[float] | np.ndarray,
    c2: Sequence[float] | np.ndarray,
    c3: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """Unbiased (n - 1) covariance of three equal-length component sequences.

    Args:
        c1, c2, c3: One value per pixel for each component

    Returns:
        Symmetric 3x3 covariance matrix; all zeros for fewer than two samples

    Raises:
        ValueError: If the sequences differ in length
    """
    columns = [np.asarray(c, dtype=np.float64).ravel() for c in (c1, c2, c3)]
    if len({col.size for col in columns}) != 1:
        raise ValueError("Component sequences must have equal length")
    return _covariance(np.column_stack(columns))


def eigendecompose(matrix: np.ndarray) -> EigenBasis:
    """Eigen-decompose a symmetric 3x3 covariance matrix.

    Args:
        matrix: Covariance matrix

    Returns:
        EigenBasis with unit eigenvectors as columns. Degenerate input
        gives the identity basis with eigenvalues (1, 1, 1).
    """
    matrix = np.asarray(matrix, dtype=np.float64)

    if matrix.shape != (3, 3) or not np.all(np.isfinite(matrix)):
        logger.debug("Covariance matrix not finite 3x3, using identity basis")
        return EigenBasis.identity()

    if np.any(np.diag(matrix) <= MIN_VARIANCE):
        logger.debug("Zero-variance component, using identity basis")
        return EigenBasis.identity()

    try:
        values, vectors = np.linalg.eigh(matrix)
    except np.linalg.LinAlgError as e:
        logger.debug(f"Eigen-decomposition failed ({e}), using identity basis")
        return EigenBasis.identity()

    return EigenBasis(vectors=vectors, values=values, degenerate=False)


def compute_statistics(
    components: np.ndarray,
    max_samples: Optional[int] = None,
) -> ComponentStatistics:
    """Means, covariance and eigenbasis of an (N, 3) component array.

    Args:
        components: One row per pixel
        max_samples: If set and smaller than N, statistics use an evenly
            strided subset of rows (deterministic)

    Returns:
        ComponentStatistics
    """
    components = np.asarray(components, dtype=np.float64).reshape(-1, 3)

    if max_samples and components.shape[0] > max_samples:
        step = int(np.ceil(components.shape[0] / max_samples))
        components = components[::step]

    means = components.mean(axis=0) if components.size else np.zeros(3)
    covariance = _covariance(components)
    basis = eigendecompose(covariance)

    return ComponentStatistics(
        means=means,
        covariance=covariance,
        basis=basis,
        sample_count=int(components.shape[0]),
    )


def _covariance(components: np.ndarray) -> np.ndarray:
    n = components.shape[0]
    if n < 2:
        return np.zeros((3, 3))
    deviations = components - components.mean(axis=0)
    return deviations.T @ deviations / (n - 1)
