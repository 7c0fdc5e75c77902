"""
Shared fixtures: synthetic daily fields in ERA5-Land units.
"""

import numpy as np
import pandas as pd
import pytest

from pet_climatology.grids import DailyFields


def make_fields(shape=(1, 1), timestamp="2020-07-01", tmax=303.15, tmin=293.15,
                dewpoint=288.15, solar_radiation_sum=15.0e6,
                surface_pressure=101325.0, wind_u=2.0, wind_v=0.0):
    """Constant-valued DailyFields of the given shape."""
    values = dict(
        tmax=tmax,
        tmin=tmin,
        dewpoint=dewpoint,
        solar_radiation_sum=solar_radiation_sum,
        surface_pressure=surface_pressure,
        wind_u=wind_u,
        wind_v=wind_v,
    )
    grids = {k: np.full(shape, v, dtype=np.float64) for k, v in values.items()}
    return DailyFields(timestamp=pd.Timestamp(timestamp), **grids)


@pytest.fixture
def fields_factory():
    return make_fields


@pytest.fixture
def synthetic_series():
    """
    30 days on a 3 x 4 grid with a seasonal-like temperature ramp and noise.
    """
    rng = np.random.default_rng(42)
    shape = (3, 4)
    days = pd.date_range("2020-06-01", periods=30, freq="D")
    series = []
    for i, day in enumerate(days):
        warm = 2.0 * np.sin(2 * np.pi * i / 30)
        series.append(
            DailyFields(
                tmax=300.0 + warm + rng.normal(0, 0.5, shape),
                tmin=290.0 + warm + rng.normal(0, 0.5, shape),
                dewpoint=285.0 + rng.normal(0, 0.5, shape),
                solar_radiation_sum=np.clip(rng.normal(18e6, 2e6, shape), 0, None),
                surface_pressure=np.full(shape, 100500.0),
                wind_u=rng.normal(1.5, 0.5, shape),
                wind_v=rng.normal(0.5, 0.5, shape),
                timestamp=day,
            )
        )
    return series


@pytest.fixture
def grid_coords():
    lat = np.array([40.0, 40.5, 41.0])
    lon = np.array([-100.0, -99.5, -99.0, -98.5])
    return lat, lon
