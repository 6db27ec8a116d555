"""
Unit tests for relief enhancement: edges, lighting and the combined stage.
"""

import math

import numpy as np
import pytest

from dstretch_studio.config import ReliefSettings
from dstretch_studio.core.exceptions import DimensionMismatchError
from dstretch_studio.core.models import ParameterSet
from dstretch_studio.relief import (
    apply_lighting,
    apply_relief_enhancement,
    compute_normal_map,
    detect_edges,
    dilate_edges,
    directional_sharpen,
    edge_magnitude,
    light_vector,
    overlay_edges,
    sobel_gradients,
)


@pytest.fixture
def step_luminance(step_edge_buffer):
    return step_edge_buffer[..., 0].astype(np.float64)


class TestSobel:
    """Tests for gradient computation."""

    def test_vertical_step(self, step_luminance):
        """A vertical step has horizontal gradient only."""
        dx, dy = sobel_gradients(step_luminance)
        assert dx[5, 9] == pytest.approx(640.0)
        assert dx[5, 10] == pytest.approx(640.0)
        assert dx[5, 4] == 0.0
        np.testing.assert_array_equal(dy, np.zeros_like(dy))

    def test_border_is_zero(self, step_luminance):
        """The outer frame never has a gradient."""
        dx, _ = sobel_gradients(step_luminance)
        assert np.all(dx[0, :] == 0)
        assert np.all(dx[-1, :] == 0)
        assert np.all(dx[:, 0] == 0)
        assert np.all(dx[:, -1] == 0)

    def test_magnitude(self, step_luminance):
        """Magnitude combines both derivatives."""
        magnitude = edge_magnitude(step_luminance.T)
        assert magnitude[9, 5] == pytest.approx(640.0)


class TestEdgeMaps:
    """Tests for thresholding and dilation."""

    def test_detect_edges(self, step_luminance):
        """Only the two columns either side of the step are edges."""
        edges = detect_edges(step_luminance, 0.5)
        assert edges.dtype == np.uint8
        assert set(np.unique(edges)) == {0, 255}
        assert np.all(edges[1:-1, 9:11] == 255)
        assert np.count_nonzero(edges) == 36

    def test_high_threshold_finds_nothing(self, step_luminance):
        """A threshold above the magnitude finds no edges."""
        assert not np.any(detect_edges(step_luminance, 3.0))

    def test_flat_image_has_no_edges(self, solid_buffer):
        """No gradient, no edges even at threshold 0."""
        assert not np.any(detect_edges(solid_buffer[..., 0].astype(float), 0.0))

    def test_thickness_one_unchanged(self, step_luminance):
        """Thickness 1 keeps the map as is."""
        edges = detect_edges(step_luminance, 0.5)
        np.testing.assert_array_equal(dilate_edges(edges, 1), edges)

    def test_dilation_grows_map(self, step_luminance):
        """Thickness 2 adds the four-neighbour ring."""
        edges = detect_edges(step_luminance, 0.5)
        grown = dilate_edges(edges, 2)
        assert np.all(grown[1:-1, 8:12] == 255)
        assert grown[0, 9] == 255
        assert grown[0, 8] == 0
        assert np.count_nonzero(grown) == 76

    def test_isolated_pixel_grows_to_cross(self):
        """Thickness 3 turns a lone pixel into at least its 4-neighbourhood."""
        edges = np.zeros((9, 9), dtype=np.uint8)
        edges[4, 4] = 255
        grown = dilate_edges(edges, 3)
        for y, x in [(4, 4), (3, 4), (5, 4), (4, 3), (4, 5)]:
            assert grown[y, x] == 255
        assert grown[2, 4] == 255
        assert grown[0, 0] == 0

    def test_dilation_is_monotonic(self, step_luminance):
        """Thicker edges are a superset of thinner ones."""
        edges = detect_edges(step_luminance, 0.5)
        thin = dilate_edges(edges, 2) > 0
        thick = dilate_edges(edges, 4) > 0
        assert np.all(thick[thin])
        assert thick.sum() > thin.sum()


class TestLighting:
    """Tests for normal maps and lighting."""

    def test_flat_normals(self, solid_buffer):
        """A flat image faces straight up."""
        normals = compute_normal_map(solid_buffer[..., 0].astype(float), 1.0)
        np.testing.assert_allclose(normals[..., 2], 1.0)
        np.testing.assert_allclose(normals[..., :2], 0.0)

    def test_unit_normals(self, step_luminance):
        """Normals are unit length."""
        normals = compute_normal_map(step_luminance, 0.8)
        np.testing.assert_allclose(np.linalg.norm(normals, axis=-1), 1.0)

    def test_normal_faces_away_from_bright_side(self, step_luminance):
        """Surface tilts towards -x where brightness rises along +x."""
        normals = compute_normal_map(step_luminance, 1.0)
        assert normals[5, 9, 0] < 0

    def test_light_vector(self):
        """Unit vector from angle and elevation."""
        vec = light_vector(0.0, 0.5)
        np.testing.assert_allclose(vec, np.array([1.0, 0.0, 0.5]) / math.sqrt(1.25))
        np.testing.assert_allclose(np.linalg.norm(light_vector(123.0)), 1.0)

    def test_flat_surface_lighting(self, solid_buffer):
        """Interior pixels brighten by the lit fraction, border stays unlit."""
        rgb = solid_buffer[..., :3].astype(np.float64)
        normals = compute_normal_map(rgb[..., 0], 1.0)
        lit = apply_lighting(rgb, normals, strength=1.0, angle=0.0, intensity=1.0)

        gain = 0.5 / math.sqrt(1.25)
        assert lit[5, 5, 0] == pytest.approx(150.0 * (1.0 + gain))
        np.testing.assert_allclose(lit[0], rgb[0])
        np.testing.assert_allclose(lit[:, -1], rgb[:, -1])

    def test_lighting_clamped(self):
        """Lit values never exceed 255."""
        rgb = np.full((5, 5, 3), 250.0)
        normals = compute_normal_map(rgb[..., 0], 1.0)
        lit = apply_lighting(rgb, normals, strength=1.0, angle=90.0, intensity=1.0)
        assert lit.max() <= 255.0

    def test_mismatched_normal_map(self):
        """A normal map of the wrong size is rejected."""
        rgb = np.zeros((10, 10, 3))
        with pytest.raises(DimensionMismatchError):
            apply_lighting(rgb, np.zeros((5, 5, 3)), 1.0, 45.0, 0.5)


class TestOverlayAndDirectional:
    """Tests for the edge-driven effects."""

    def test_overlay_darkens_edges(self, step_edge_buffer, step_luminance):
        """Edge pixels are darkened by half, others untouched."""
        rgb = step_edge_buffer[..., :3].astype(np.float64)
        edges = detect_edges(step_luminance, 0.5)
        out = overlay_edges(rgb, edges)
        assert out[5, 9, 0] == pytest.approx(20.0)
        assert out[5, 10, 0] == pytest.approx(100.0)
        assert out[5, 2, 0] == pytest.approx(40.0)

    def test_overlay_size_mismatch(self):
        """Edge maps must match the image."""
        with pytest.raises(DimensionMismatchError) as exc_info:
            overlay_edges(np.zeros((4, 4, 3)), np.zeros((4, 5), dtype=np.uint8))
        assert "expected=(4, 4)" in str(exc_info.value)

    def test_directional_only_on_edges(self, step_edge_buffer):
        """Sharpening is confined to masked pixels."""
        rgb = step_edge_buffer[..., :3].astype(np.float64)
        mask = np.zeros((20, 20), dtype=np.uint8)
        mask[5, 10] = 255

        out = directional_sharpen(rgb, mask, 1.0)
        assert out[5, 10, 0] == 255.0
        assert out[5, 9, 0] == 40.0
        assert out[6, 10, 0] == 200.0

    def test_directional_size_mismatch(self):
        """Mask must match the image."""
        with pytest.raises(DimensionMismatchError):
            directional_sharpen(np.zeros((4, 4, 3)), np.zeros((3, 4)), 0.5)

    def test_mismatch_is_value_error(self):
        """Size errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            overlay_edges(np.zeros((4, 4, 3)), np.zeros((2, 2)))


class TestReliefStage:
    """Tests for the combined relief stage on RGBA buffers."""

    def test_no_effects_is_identity(self, rock_art_buffer, default_params):
        """Default parameters leave the image alone."""
        out = apply_relief_enhancement(rock_art_buffer, default_params)
        np.testing.assert_array_equal(out, rock_art_buffer)

    def test_edge_overlay(self, step_edge_buffer):
        """Edge strength 50 darkens the step edge only."""
        out = apply_relief_enhancement(step_edge_buffer, ParameterSet(edge_strength=50))
        assert out[5, 9, 0] == 20
        assert out[5, 10, 0] == 100
        assert out[5, 3, 0] == 40
        assert out[0, 9, 0] == 40

    def test_edge_thickness(self, step_edge_buffer):
        """Thicker edges darken more pixels."""
        thin = apply_relief_enhancement(step_edge_buffer, ParameterSet(edge_strength=50))
        thick = apply_relief_enhancement(
            step_edge_buffer, ParameterSet(edge_strength=50, edge_thickness=3)
        )
        changed_thin = np.count_nonzero(thin[..., 0] != step_edge_buffer[..., 0])
        changed_thick = np.count_nonzero(thick[..., 0] != step_edge_buffer[..., 0])
        assert changed_thick > changed_thin

    def test_normal_map_lighting(self, solid_buffer):
        """Lighting brightens the interior of a flat image."""
        params = ParameterSet(normal_map_strength=100, light_angle=0, light_intensity=100)
        out = apply_relief_enhancement(solid_buffer, params)
        assert out[5, 5, 0] > solid_buffer[5, 5, 0]
        np.testing.assert_array_equal(out[0], solid_buffer[0])

    def test_directional_sharpen_stage(self, step_edge_buffer):
        """Directional sharpening acts on the strong step edge."""
        out = apply_relief_enhancement(step_edge_buffer, ParameterSet(directional_sharpen=100))
        assert out[5, 9, 0] == 0
        assert out[5, 10, 0] == 255
        assert out[5, 3, 0] == 40

    def test_custom_settings(self, step_edge_buffer):
        """Edge darkening follows the relief settings."""
        settings = ReliefSettings(edge_darken=1.0)
        out = apply_relief_enhancement(step_edge_buffer, ParameterSet(edge_strength=50), settings)
        assert out[5, 9, 0] == 0
        assert out[5, 10, 0] == 0

    def test_alpha_and_input_preserved(self, gradient_buffer):
        """Alpha is kept and the input is not written to."""
        before = gradient_buffer.copy()
        params = ParameterSet(normal_map_strength=60, edge_strength=5, directional_sharpen=40)
        out = apply_relief_enhancement(gradient_buffer, params)
        np.testing.assert_array_equal(out[..., 3], before[..., 3])
        np.testing.assert_array_equal(gradient_buffer, before)
