"""End-to-end PET climatology.

DailyFields series -> daily PET -> temporal mean -> region clip -> output range.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import xarray as xr

from .config import DEFAULT_CONSTANTS, PET_UNITS, PETConstants
from .data_io import coords_from_dataset, daily_fields_from_dataset
from .engine import PETEngine
from .exceptions import InvalidInput
from .grids import AggregateGrid, DailyFields, GeoGrid, OutputRange, PETGrid, validate_series
from .region import RegionLike, RegionMask
from .temporal import TemporalReducer


@dataclass(frozen=True, eq=False)
class PETClimatologyResult:
    """
    Output handed to the external renderer.

    Attributes
    ----------
    climatology : GeoGrid
        Mean PET (mm/day) clipped to the region.
    aggregate : AggregateGrid
        Unclipped mean with per-cell day counts.
    value_range : OutputRange
        Finite min/max of ``climatology`` for colour-scale calibration.
    daily : list of PETGrid or None
        Daily PET grids when requested.
    """

    climatology: GeoGrid
    aggregate: AggregateGrid
    value_range: OutputRange
    daily: Optional[List[PETGrid]] = None


def run_pet_climatology(
    series: Sequence[DailyFields],
    region: RegionLike,
    lat,
    lon,
    constants: PETConstants = DEFAULT_CONSTANTS,
    policy: str = "skipna",
    keep_daily: bool = False,
    n_workers: Optional[int] = None,
) -> PETClimatologyResult:
    """
    Compute the regional mean-PET climatology of a daily series.

    Parameters
    ----------
    series : sequence of DailyFields
        Ordered daily fields on the (lat, lon) grid.
    region : shapely Polygon/MultiPolygon or GeoJSON-like mapping
        Region of interest.
    lat, lon : array-like
        1-D cell-centre coordinates.
    constants : PETConstants
        Physical constants injected into the engine.
    policy : {"skipna", "propagate"}
        Missing-value policy of the temporal mean.
    keep_daily : bool, default=False
        Return the daily PET grids as well.
    n_workers : int, optional
        Thread-pool size for the per-day computation.

    Returns
    -------
    PETClimatologyResult

    Raises
    ------
    InvalidInput
        Grid shape does not match the coordinates, or series is inconsistent.
    InvalidGeometry
        Region is degenerate.
    """
    series = list(series)
    lat = np.asarray(lat, dtype=np.float64)
    lon = np.asarray(lon, dtype=np.float64)
    grid_shape = (lat.size, lon.size)

    shape = validate_series(series)
    if shape is not None and shape != grid_shape:
        raise InvalidInput(
            f"Series grids have shape {shape}, coordinates imply {grid_shape}"
        )

    # validate region before spending time on PET
    mask = RegionMask(region, lat, lon)
    engine = PETEngine(constants)
    reducer = TemporalReducer(policy)

    if keep_daily or (n_workers is not None and n_workers > 1):
        daily = engine.compute_series(series, n_workers=n_workers)
    else:
        # stream days straight into the reducer
        daily = (engine.compute(fields) for fields in series)
    aggregate = reducer.reduce(daily, shape=grid_shape)

    climatology = mask.clip(
        GeoGrid(aggregate.values, lat, lon, units=PET_UNITS,
                attrs={"n_days": aggregate.n_days})
    )
    return PETClimatologyResult(
        climatology=climatology,
        aggregate=aggregate,
        value_range=climatology.value_range(),
        daily=daily if keep_daily else None,
    )


def run_from_dataset(
    ds: xr.Dataset,
    region: RegionLike,
    variables: Optional[Dict[str, str]] = None,
    **kwargs,
) -> PETClimatologyResult:
    """Run :func:`run_pet_climatology` on a (time, lat, lon) Dataset."""
    series = daily_fields_from_dataset(ds, variables=variables)
    lat, lon = coords_from_dataset(ds)
    return run_pet_climatology(series, region, lat, lon, **kwargs)
