import numpy as np

from pet_climatology.units import (
    celsius_to_kelvin,
    j_per_m2_to_mj_per_m2,
    kelvin_to_celsius,
    pa_to_kpa,
)


def test_kelvin_celsius_round_trip():
    x = np.array([0.0, 180.5, 273.15, 288.15, 330.0, 1.0e4])
    np.testing.assert_allclose(celsius_to_kelvin(kelvin_to_celsius(x)), x, atol=1e-9)
    assert kelvin_to_celsius(273.15) == 0.0


def test_scalar_conversions():
    assert np.isclose(pa_to_kpa(101325.0), 101.325)
    assert np.isclose(j_per_m2_to_mj_per_m2(15.0e6), 15.0)


def test_missing_passes_through():
    x = np.array([[np.nan, 300.0], [290.0, np.nan]])
    for func in (kelvin_to_celsius, celsius_to_kelvin, pa_to_kpa, j_per_m2_to_mj_per_m2):
        out = func(x)
        assert out.shape == x.shape
        np.testing.assert_array_equal(np.isnan(out), np.isnan(x))
