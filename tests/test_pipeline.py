"""
End-to-end scenarios: series -> daily PET -> mean -> clip -> range.
"""

import numpy as np
import xarray as xr
import pytest
from shapely.geometry import Polygon, box

from pet_climatology.config import ERA5_LAND_VARIABLES, PET_UNITS
from pet_climatology.engine import PETEngine
from pet_climatology.exceptions import InvalidGeometry, InvalidInput
from pet_climatology.grids import FIELD_NAMES
from pet_climatology.pipeline import run_from_dataset, run_pet_climatology
from pet_climatology.temporal import TemporalReducer


def test_full_pipeline(synthetic_series, grid_coords):
    lat, lon = grid_coords
    # western half of the grid
    region = box(-100.25, 39.75, -99.25, 41.25)

    result = run_pet_climatology(synthetic_series, region, lat, lon, keep_daily=True)

    clim = result.climatology.values
    assert clim.shape == (3, 4)
    assert np.isfinite(clim[:, :2]).all()
    assert np.isnan(clim[:, 2:]).all()
    assert result.climatology.units == PET_UNITS
    assert result.climatology.attrs["n_days"] == 30

    assert len(result.daily) == 30
    expected = TemporalReducer().reduce(PETEngine().compute_series(synthetic_series))
    np.testing.assert_allclose(result.aggregate.values, expected.values)
    np.testing.assert_allclose(clim[:, :2], expected.values[:, :2])

    rng = result.value_range
    assert rng.units == PET_UNITS
    assert rng.vmin == np.nanmin(clim) and rng.vmax == np.nanmax(clim)
    assert 0.0 < rng.vmin <= rng.vmax < 10.0


def test_streaming_and_threaded_agree(synthetic_series, grid_coords):
    lat, lon = grid_coords
    region = box(-101, 39, -98, 42)
    streamed = run_pet_climatology(synthetic_series, region, lat, lon)
    threaded = run_pet_climatology(synthetic_series, region, lat, lon, n_workers=3)
    assert streamed.daily is None
    np.testing.assert_allclose(streamed.climatology.values, threaded.climatology.values)


def test_empty_series_gives_missing_climatology(grid_coords):
    lat, lon = grid_coords
    result = run_pet_climatology([], box(-101, 39, -98, 42), lat, lon)
    assert result.climatology.shape == (3, 4)
    assert np.isnan(result.climatology.values).all()
    assert result.value_range.is_empty
    assert result.aggregate.n_days == 0


def test_coordinate_mismatch(synthetic_series):
    with pytest.raises(InvalidInput):
        run_pet_climatology(synthetic_series, box(0, 0, 1, 1), [0.0, 1.0], [0.0, 1.0])


def test_degenerate_region(synthetic_series, grid_coords):
    lat, lon = grid_coords
    flat = Polygon([(-100, 40), (-99, 40), (-98, 40), (-100, 40)])
    with pytest.raises(InvalidGeometry):
        run_pet_climatology(synthetic_series, flat, lat, lon)


def test_run_from_dataset(synthetic_series, grid_coords):
    lat, lon = grid_coords
    times = [f.timestamp for f in synthetic_series]
    ds = xr.Dataset(
        {
            ERA5_LAND_VARIABLES[name]: (
                ("time", "lat", "lon"),
                np.stack([getattr(f, name) for f in synthetic_series]),
            )
            for name in FIELD_NAMES
        },
        coords={"time": times, "lat": lat, "lon": lon},
    )
    region = box(-101, 39, -98, 42)
    from_ds = run_from_dataset(ds, region)
    direct = run_pet_climatology(synthetic_series, region, lat, lon)
    np.testing.assert_allclose(from_ds.climatology.values, direct.climatology.values)
