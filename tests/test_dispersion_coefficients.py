"""Tests for Briggs dispersion coefficients and the wind profile."""

import numpy as np
import pytest

from models.dispersion_coefficients import (
    MIN_SIGMA_M,
    compute_sigma,
    get_coefficients,
    is_urban,
    sigma_x,
    sigma_y,
    sigma_z,
    wind_speed_at_height,
)

CLASSES = ["A", "B", "C", "D", "E", "F"]


class TestComputeSigma:
    """Tests for dispersion parameter computation."""

    @pytest.mark.parametrize("urban", [False, True])
    def test_sigmas_strictly_increase_with_distance(self, urban):
        distances = np.array([100.0, 250.0, 500.0, 1000.0, 5000.0, 20000.0])
        for stability in CLASSES:
            sy, sz = compute_sigma(distances, stability, urban)
            assert np.all(np.diff(sy) > 0), f"sigma_y not monotonic for class {stability}"
            assert np.all(np.diff(sz) > 0), f"sigma_z not monotonic for class {stability}"
            assert np.all(np.diff(sigma_x(distances, stability, urban)) > 0)

    def test_unstable_disperses_more_than_stable(self):
        sy_a, sz_a = compute_sigma(500.0, "A")
        sy_f, sz_f = compute_sigma(500.0, "F")
        assert sy_a > sy_f
        assert sz_a > sz_f

    def test_neutral_reference_values(self):
        assert float(sigma_y(1000.0, "D")) == pytest.approx(76.28, abs=0.01)
        assert float(sigma_z(1000.0, "D")) == pytest.approx(37.95, abs=0.01)

    def test_urban_changes_vertical_spread_only(self):
        for stability in CLASSES:
            np.testing.assert_allclose(
                sigma_y(1000.0, stability, urban=True), sigma_y(1000.0, stability)
            )
        assert sigma_z(1000.0, "D", urban=True) > sigma_z(1000.0, "D")

    def test_urban_reference_values(self):
        assert get_coefficients("F", urban=True).sz1 == 0.05
        assert float(sigma_z(1000.0, "D", urban=True)) == pytest.approx(122.79, abs=0.01)
        assert float(sigma_z(1000.0, "A", urban=True)) == pytest.approx(240.0)

    def test_floored_at_one_meter(self):
        sy, sz = compute_sigma(np.array([-50.0, 0.0, 0.5]), "F")
        assert np.all(sy >= MIN_SIGMA_M)
        assert np.all(sz >= MIN_SIGMA_M)

    def test_invalid_stability_class_raises(self):
        with pytest.raises(ValueError, match="Invalid stability class"):
            compute_sigma(100.0, "Z")

    def test_accepts_lowercase(self):
        assert get_coefficients("d") == get_coefficients("D")


class TestSurfaceType:
    def test_roughness_threshold(self):
        assert not is_urban(0.1)
        assert is_urban(0.2)
        assert is_urban(1.0)


class TestWindProfile:
    def test_reference_height_returns_reference_speed(self):
        assert float(wind_speed_at_height(5.0, 10.0, "D")) == pytest.approx(5.0)

    def test_neutral_two_meter_speed(self):
        assert float(wind_speed_at_height(5.0, 2.0, "D")) == pytest.approx(3.978, abs=1e-3)

    def test_speed_increases_with_height(self):
        heights = np.array([1.0, 2.0, 10.0, 50.0])
        u = wind_speed_at_height(4.0, heights, "E")
        assert np.all(np.diff(u) > 0)

    def test_ground_level_is_floored(self):
        assert float(wind_speed_at_height(5.0, 0.0, "D")) == pytest.approx(
            float(wind_speed_at_height(5.0, 1.0, "D"))
        )
        assert float(wind_speed_at_height(5.0, 0.0, "D")) > 0

    def test_stable_profile_steeper_than_unstable(self):
        assert wind_speed_at_height(5.0, 2.0, "F") < wind_speed_at_height(5.0, 2.0, "A")
