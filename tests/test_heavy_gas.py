"""Tests for the dense-gas dispersion model."""

import dataclasses

import numpy as np
import pytest

from models.estimate import Regime
from models.heavy_gas import (
    HeavyGasModel,
    air_density,
    gas_density,
    heavy_gas_concentration,
    source_parameters,
)


class TestSourceParameters:
    def test_air_density_at_standard_conditions(self):
        assert air_density(20.0, 101325.0) == pytest.approx(1.204, abs=1e-3)

    def test_chlorine_is_denser_than_air(self, one_kg_release, chlorine, neutral_wind):
        src = source_parameters(1.0, one_kg_release, chlorine, neutral_wind)
        assert src.gas_density / src.air_density == pytest.approx(2.448, abs=0.01)
        assert src.reduced_gravity > 0
        assert src.initial_radius > 0

    def test_gas_density_follows_ideal_gas_law(self):
        assert gas_density(70.91, 20.0, 101325.0) == pytest.approx(2.948, abs=1e-3)

    def test_cold_release_stays_finite(self, one_kg_release, chlorine, neutral_wind):
        cryogenic = dataclasses.replace(one_kg_release, initial_temperature=-200.0)
        model = HeavyGasModel(cryogenic, chlorine, neutral_wind)
        c = model.concentration(np.array([10.0, 1000.0, 5000.0]), 0.0, 0.0)
        assert np.all(np.isfinite(c)) and np.all(c >= 0)

    def test_release_conditions_override_ambient(self, one_kg_release, chlorine, neutral_wind):
        cold = dataclasses.replace(one_kg_release, initial_temperature=-34.0)
        warm_src = source_parameters(1.0, one_kg_release, chlorine, neutral_wind)
        cold_src = source_parameters(1.0, cold, chlorine, neutral_wind)
        assert cold_src.gas_density > warm_src.gas_density


class TestRichardsonNumber:
    def test_decreases_downwind(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        ri = model.richardson_number(np.array([10.0, 100.0, 1000.0, 5000.0]))
        assert np.all(np.diff(ri) < 0)

    def test_crosses_critical_value_for_chlorine(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        assert float(model.richardson_number(10.0)) > 1.0
        assert float(model.richardson_number(5000.0)) < 1.0

    def test_transition_distance(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        x_t = model.transition_distance(5000.0)
        assert x_t == pytest.approx(1478.0, rel=0.02)
        assert float(model.richardson_number(x_t)) == pytest.approx(1.0, abs=1e-6)

    def test_no_transition_when_ri_stays_on_one_side(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        assert model.transition_distance(500.0) is None

    def test_core_shrinks_to_zero_near_transition(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        x = np.array([10.0, 500.0, 1400.0])
        core = model.core_width(x)
        width = model.cloud_width(x)
        assert np.all(core < width / 2)
        assert np.all(np.diff(core / width) < 0)
        x_t = model.transition_distance(5000.0)
        assert float(model.core_width(x_t + 1.0)) == 0.0


class TestRegimes:
    def test_regime_flips_from_gravity_to_passive(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        field = model.evaluate(np.array([10.0, 100.0, 1000.0, 2000.0, 5000.0]), 0.0, 0.0)
        assert list(field.regime) == [
            Regime.GRAVITY_DOMINATED,
            Regime.GRAVITY_DOMINATED,
            Regime.GRAVITY_DOMINATED,
            Regime.PASSIVE_DIFFUSION,
            Regime.PASSIVE_DIFFUSION,
        ]
        assert all(isinstance(r, Regime) for r in field.regime)

    def test_upwind_points_report_passive_member(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        field = model.evaluate(np.array([-100.0, 0.0]), 0.0, 0.0)
        assert all(r is Regime.PASSIVE_DIFFUSION for r in field.regime)
        assert model.evaluate(3000.0, 0.0, 0.0).regime.item() is Regime.PASSIVE_DIFFUSION

    def test_concentration_decreases_downwind_within_each_regime(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        near = model.concentration(np.array([10.0, 100.0, 500.0, 1000.0]), 0.0, 0.0)
        far = model.concentration(np.array([2000.0, 3000.0, 5000.0]), 0.0, 0.0)
        assert np.all(np.diff(near) < 0)
        assert np.all(np.diff(far) < 0)

    def test_regime_boundary_is_not_smoothed(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        x_t = model.transition_distance(5000.0)
        before, after = model.concentration(np.array([x_t - 1.0, x_t + 1.0]), 0.0, 0.0)
        assert before > 5.0 * after

    @pytest.mark.parametrize("x", [50.0, 1000.0, 3000.0])
    def test_non_increasing_with_crosswind_offset(self, one_kg_release, chlorine, neutral_wind, x):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        offsets = np.linspace(0.0, 400.0, 41)
        left = model.concentration(x, offsets, 0.0)
        right = model.concentration(x, -offsets, 0.0)
        assert np.all(np.diff(left) <= 0)
        np.testing.assert_allclose(left, right)

    def test_gravity_core_is_flat(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        half_core = float(model.core_width(10.0)) / 2
        c = model.concentration(10.0, np.array([0.0, 0.9 * half_core]), 0.0)
        assert c[0] == pytest.approx(c[1])

    def test_zero_above_cloud_in_gravity_regime(self, one_kg_release, chlorine, neutral_wind):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        height = float(model.cloud_height(100.0))
        assert float(model.concentration(100.0, 0.0, height + 0.5)) == 0.0
        assert float(model.concentration(100.0, 0.0, 0.5 * height)) > 0.0

    def test_zero_upwind_and_in_still_air(self, one_kg_release, chlorine, neutral_wind, still_air):
        model = HeavyGasModel(one_kg_release, chlorine, neutral_wind)
        np.testing.assert_array_equal(model.concentration(np.array([-100.0, 0.0]), 0.0, 0.0), 0.0)
        calm = HeavyGasModel(one_kg_release, chlorine, still_air)
        np.testing.assert_array_equal(calm.concentration(np.array([10.0, 1000.0]), 0.0, 0.0), 0.0)

    def test_single_point_helper(self, one_kg_release, chlorine, neutral_wind):
        c = heavy_gas_concentration(100.0, 0.0, 0.0, one_kg_release, chlorine, neutral_wind)
        assert c > 1000.0
