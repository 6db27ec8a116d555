"""
Shared fixtures for DStretch Studio tests.
"""

import numpy as np
import pytest

from dstretch_studio.core.models import ParameterSet


@pytest.fixture
def four_color_buffer():
    """2x2 RGBA buffer: red, green, blue, white."""
    return np.array(
        [
            [[255, 0, 0, 255], [0, 255, 0, 255]],
            [[0, 0, 255, 255], [255, 255, 255, 255]],
        ],
        dtype=np.uint8,
    )


@pytest.fixture
def solid_buffer():
    """Uniform 16x12 buffer of a reddish rock tone."""
    buf = np.zeros((12, 16, 4), dtype=np.uint8)
    buf[..., 0] = 150
    buf[..., 1] = 90
    buf[..., 2] = 60
    buf[..., 3] = 255
    return buf


@pytest.fixture
def rock_art_buffer():
    """Synthetic 48x64 rock surface with a faint red pictograph and noise."""
    rng = np.random.default_rng(42)
    height, width = 48, 64
    rgb = np.empty((height, width, 3), dtype=np.float64)
    rgb[..., 0] = 140.0
    rgb[..., 1] = 115.0
    rgb[..., 2] = 90.0
    rgb += rng.normal(0.0, 6.0, size=rgb.shape)

    # Faint ochre figure: a slightly redder disc in the middle
    yy, xx = np.mgrid[0:height, 0:width]
    figure = (yy - 24) ** 2 + (xx - 32) ** 2 < 100
    rgb[figure, 0] += 8.0
    rgb[figure, 1] -= 3.0

    buf = np.empty((height, width, 4), dtype=np.uint8)
    buf[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    buf[..., 3] = 255
    return buf


@pytest.fixture
def gradient_buffer():
    """32x32 buffer with independent horizontal and vertical colour ramps."""
    yy, xx = np.mgrid[0:32, 0:32]
    buf = np.empty((32, 32, 4), dtype=np.uint8)
    buf[..., 0] = (xx * 8).astype(np.uint8)
    buf[..., 1] = (yy * 8).astype(np.uint8)
    buf[..., 2] = 100
    buf[..., 3] = 200
    return buf


@pytest.fixture
def step_edge_buffer():
    """20x20 gray buffer, dark left half and bright right half."""
    buf = np.full((20, 20, 4), 255, dtype=np.uint8)
    buf[:, :10, :3] = 40
    buf[:, 10:, :3] = 200
    return buf


@pytest.fixture
def default_params():
    """Neutral parameter set."""
    return ParameterSet()
