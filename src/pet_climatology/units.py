"""Unit conversion.

单位转换：ERA5-Land 原始单位 -> FAO-56 公式所需单位。
All functions are elementwise and pass NaN through unchanged.
"""

import numpy as np

KELVIN_OFFSET = 273.15


def kelvin_to_celsius(temperature_k):
    """K -> °C."""
    return np.asarray(temperature_k, dtype=np.float64) - KELVIN_OFFSET


def celsius_to_kelvin(temperature_c):
    """°C -> K."""
    return np.asarray(temperature_c, dtype=np.float64) + KELVIN_OFFSET


def pa_to_kpa(pressure_pa):
    """Pa -> kPa."""
    return np.asarray(pressure_pa, dtype=np.float64) / 1000.0


def j_per_m2_to_mj_per_m2(energy_j):
    """J m-2 -> MJ m-2 (daily sums stay daily sums)."""
    return np.asarray(energy_j, dtype=np.float64) / 1.0e6
