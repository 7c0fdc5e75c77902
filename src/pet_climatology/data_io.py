"""Data I/O utilities.

数据读写：
- 将 (time, lat, lon) 的 xarray Dataset 拆分为逐日 DailyFields
- 将结果栅格包装为 xarray.DataArray 交给外部绘图/导出
与计算核心解耦，计算模块不依赖 xarray。
"""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
import xarray as xr

from .config import (
    DEFAULT_LAT_NAME,
    DEFAULT_LON_NAME,
    DEFAULT_TIME_NAME,
    ERA5_LAND_VARIABLES,
    PET_UNITS,
)
from .exceptions import InvalidInput
from .grids import FIELD_NAMES, DailyFields, GeoGrid, PETGrid, stack_values

_COORD_ALIASES = {"latitude": DEFAULT_LAT_NAME, "longitude": DEFAULT_LON_NAME}


def open_daily_dataset(path: Union[str, Path], engine: Optional[str] = None) -> xr.Dataset:
    """Open a NetCDF file of daily fields and load it into memory."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No dataset found at {path}")
    with xr.open_dataset(path, engine=engine) as ds:
        return standardize_coords(ds.load())


def standardize_coords(ds: xr.Dataset) -> xr.Dataset:
    """Rename latitude/longitude to lat/lon and check required dimensions."""
    rename = {old: new for old, new in _COORD_ALIASES.items() if old in ds.dims}
    if rename:
        ds = ds.rename(rename)
    for dim in (DEFAULT_TIME_NAME, DEFAULT_LAT_NAME, DEFAULT_LON_NAME):
        if dim not in ds.dims:
            raise InvalidInput(f"Dataset must contain a '{dim}' dimension")
    return ds


def coords_from_dataset(ds: xr.Dataset) -> Tuple[np.ndarray, np.ndarray]:
    ds = standardize_coords(ds)
    return ds[DEFAULT_LAT_NAME].values, ds[DEFAULT_LON_NAME].values


def daily_fields_from_dataset(
    ds: xr.Dataset,
    variables: Optional[Dict[str, str]] = None,
) -> List[DailyFields]:
    """
    Split a daily Dataset into an ordered TimeSeries<DailyFields>.

    Parameters
    ----------
    ds : xr.Dataset
        dims (time, lat, lon); latitude/longitude names are accepted.
    variables : dict, optional
        DailyFields attribute -> dataset variable name. Defaults to the
        ERA5-Land daily aggregate names.

    Returns
    -------
    list of DailyFields
        Sorted by time.
    """
    variables = dict(ERA5_LAND_VARIABLES if variables is None else variables)
    missing = [name for name in FIELD_NAMES if name not in variables]
    if missing:
        raise InvalidInput(f"No dataset variable mapped for fields: {missing}")
    absent = [variables[name] for name in FIELD_NAMES if variables[name] not in ds]
    if absent:
        raise InvalidInput(f"Variables not found in dataset: {absent}")

    ds = standardize_coords(ds).sortby(DEFAULT_TIME_NAME)
    dims = (DEFAULT_TIME_NAME, DEFAULT_LAT_NAME, DEFAULT_LON_NAME)
    arrays = {
        name: ds[variables[name]].transpose(*dims).values
        for name in FIELD_NAMES
    }
    times = pd.to_datetime(ds[DEFAULT_TIME_NAME].values)

    return [
        DailyFields(timestamp=t, **{name: arrays[name][i] for name in FIELD_NAMES})
        for i, t in enumerate(times)
    ]


def geogrid_to_dataarray(grid: GeoGrid, name: str = "pet_mean") -> xr.DataArray:
    """Wrap a GeoGrid as a (lat, lon) DataArray with a ``units`` attribute."""
    attrs = dict(grid.attrs)
    if grid.units is not None:
        attrs["units"] = grid.units
    return xr.DataArray(
        np.array(grid.values),
        coords={DEFAULT_LAT_NAME: grid.lat, DEFAULT_LON_NAME: grid.lon},
        dims=(DEFAULT_LAT_NAME, DEFAULT_LON_NAME),
        name=name,
        attrs=attrs,
    )


def daily_pet_to_dataarray(
    pets: Sequence[PETGrid], lat, lon, name: str = "pet"
) -> xr.DataArray:
    """Stack daily PET grids into a (time, lat, lon) DataArray."""
    data = stack_values(pets)
    times = pd.DatetimeIndex([p.timestamp for p in pets])
    return xr.DataArray(
        data,
        coords={
            DEFAULT_TIME_NAME: times,
            DEFAULT_LAT_NAME: np.asarray(lat),
            DEFAULT_LON_NAME: np.asarray(lon),
        },
        dims=(DEFAULT_TIME_NAME, DEFAULT_LAT_NAME, DEFAULT_LON_NAME),
        name=name,
        attrs={"units": PET_UNITS},
    )
