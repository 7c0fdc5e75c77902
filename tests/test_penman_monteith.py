"""
Tests for the FAO-56 building blocks.
"""

import warnings

import numpy as np
import pytest

from pet_climatology.exceptions import NumericGuardWarning
from pet_climatology.penman_monteith import (
    actual_vapor_pressure,
    net_longwave_radiation,
    net_radiation,
    net_shortwave_radiation,
    penman_monteith_pet,
    psychrometric_constant,
    saturation_vapor_pressure,
    slope_vapor_pressure_curve,
    wind_speed,
)


def _near_singularity_sweep():
    # Cells just above -237.3 °C underflow to es == 0 before the pole
    return np.concatenate([
        [np.nextafter(-237.3, 0.0), -237.0, -235.0, -232.0],
        np.linspace(-231.0, 60.0, 1001),
    ])


def test_saturation_vapor_pressure_positive_on_valid_domain():
    T = _near_singularity_sweep()
    with pytest.warns(NumericGuardWarning):
        es = saturation_vapor_pressure(T)
    assert np.all((es > 0) | np.isnan(es)), "es must be positive or missing"
    assert np.isnan(es[:4]).all()
    assert np.all(es[T >= -231.0] > 0)


def test_saturation_vapor_pressure_fao_table():
    # FAO-56 Annex 2, Table 2.3
    np.testing.assert_allclose(saturation_vapor_pressure(20.0), 2.338, atol=1e-3)
    np.testing.assert_allclose(saturation_vapor_pressure(0.0), 0.6108, atol=1e-4)


def test_actual_vapor_pressure_uses_dewpoint():
    T_dew = np.array([5.0, 15.0, 25.0])
    np.testing.assert_array_equal(actual_vapor_pressure(T_dew), saturation_vapor_pressure(T_dew))


def test_slope_positive_and_fao_value():
    T = _near_singularity_sweep()
    with pytest.warns(NumericGuardWarning):
        Delta = slope_vapor_pressure_curve(T)
    assert np.all((Delta > 0) | np.isnan(Delta))
    assert np.isnan(Delta[:4]).all()
    assert np.all(Delta[T >= -231.0] > 0)
    np.testing.assert_allclose(slope_vapor_pressure_curve(20.0), 0.1447, atol=5e-4)


def test_guarded_temperatures_become_missing():
    T = np.array([-250.0, -237.3, 20.0])
    with pytest.warns(NumericGuardWarning):
        es = saturation_vapor_pressure(T)
    assert np.isnan(es[0]) and np.isnan(es[1])
    assert np.isfinite(es[2])

    with pytest.warns(NumericGuardWarning):
        Delta = slope_vapor_pressure_curve(T)
    assert np.isnan(Delta[:2]).all()
    assert Delta[2] > 0


def test_missing_input_does_not_warn():
    with warnings.catch_warnings():
        warnings.simplefilter("error", NumericGuardWarning)
        es = saturation_vapor_pressure(np.array([np.nan, 20.0]))
    assert np.isnan(es[0])
    assert np.isfinite(es[1])


def test_wind_speed_magnitude():
    assert wind_speed(3.0, 4.0) == 5.0
    u = np.array([0.0, -2.0, np.nan])
    v = np.array([0.0, 0.0, 1.0])
    out = wind_speed(u, v)
    np.testing.assert_allclose(out[:2], [0.0, 2.0])
    assert np.isnan(out[2])


def test_net_radiation_is_difference():
    rng = np.random.default_rng(0)
    Rs = rng.uniform(0, 30, 200)
    T_mean = rng.uniform(-20, 40, 200)
    ea = rng.uniform(0.1, 4.0, 200)

    Rns = net_shortwave_radiation(Rs)
    Rnl = net_longwave_radiation(T_mean, ea, Rs)
    np.testing.assert_allclose(net_radiation(Rns, Rnl), Rns - Rnl)
    np.testing.assert_allclose(Rns, 0.77 * Rs)


def test_longwave_uses_celsius_base_by_default():
    T_mean, ea, Rs = 25.0, 1.705, 15.0
    expected = 4.903e-9 * 25.0 ** 4 * (0.34 - 0.14 * np.sqrt(ea)) * (1.35 * Rs / 0.8 - 0.35)
    np.testing.assert_allclose(net_longwave_radiation(T_mean, ea, Rs), expected)

    kelvin = net_longwave_radiation(T_mean, ea, Rs, kelvin=True)
    assert kelvin > net_longwave_radiation(T_mean, ea, Rs)


def test_longwave_negative_vapor_pressure_is_guarded():
    with pytest.warns(NumericGuardWarning):
        Rnl = net_longwave_radiation([20.0, 20.0], [-0.5, 1.0], [15.0, 15.0])
    assert np.isnan(Rnl[0])
    assert np.isfinite(Rnl[1])


def test_psychrometric_constant_sea_level():
    # FAO-56 Eq. 8 gives 0.665e-3 * P
    gamma = psychrometric_constant(101.3)
    np.testing.assert_allclose(gamma, 0.000665 * 101.3, rtol=1e-3)


def test_pet_zero_denominator_is_missing():
    with pytest.warns(NumericGuardWarning):
        PET = penman_monteith_pet(
            Delta=np.array([0.0, 0.19]),
            gamma=np.array([0.0, 0.067]),
            Rn=np.array([10.0, 10.0]),
            T_mean=np.array([20.0, 20.0]),
            u=np.array([0.0, 2.0]),
            es=np.array([2.3, 2.3]),
            ea=np.array([1.4, 1.4]),
        )
    assert np.isnan(PET[0])
    assert np.isfinite(PET[1]) and PET[1] > 0
