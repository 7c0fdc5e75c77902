"""
Grid containers for the PET pipeline.

This module defines the value-like records passed between pipeline stages.

Classes
-------
DailyFields
    One day of raw meteorological grids (dataset units) plus its timestamp.
PETGrid
    Daily PET (mm/day) for one timestamp; read-only.
AggregateGrid
    Temporal mean of daily PET with per-cell day counts; read-only.
GeoGrid
    A 2-D grid with its lat/lon cell-centre coordinates.
OutputRange
    Finite min/max and units of a grid, for calibrating an external colour scale.

Notes
-----
- Missing cells are NaN (``config.MISSING``).
- Shape checks raise :class:`InvalidInput`; nothing is broadcast silently.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import PET_UNITS
from .exceptions import InvalidInput

Array = np.ndarray

FIELD_NAMES = (
    "tmax",
    "tmin",
    "dewpoint",
    "solar_radiation_sum",
    "surface_pressure",
    "wind_u",
    "wind_v",
)


def _frozen_copy(values) -> Array:
    arr = np.array(values, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr


def _to_timestamp(value) -> Optional[pd.Timestamp]:
    if value is None:
        return None
    return pd.Timestamp(value)


@dataclass(frozen=True, eq=False)
class DailyFields:
    """
    Raw daily fields for one timestamp.

    Attributes
    ----------
    tmax, tmin, dewpoint : ndarray
        2 m maximum, minimum and dewpoint temperature (K).
    solar_radiation_sum : ndarray
        Daily surface solar radiation downwards (J m-2).
    surface_pressure : ndarray
        Surface pressure (Pa).
    wind_u, wind_v : ndarray
        10 m wind components (m s-1).
    timestamp : pandas.Timestamp
    """

    tmax: Array
    tmin: Array
    dewpoint: Array
    solar_radiation_sum: Array
    surface_pressure: Array
    wind_u: Array
    wind_v: Array
    timestamp: pd.Timestamp

    def __post_init__(self):
        shapes = {}
        for name in FIELD_NAMES:
            arr = _frozen_copy(getattr(self, name))
            object.__setattr__(self, name, arr)
            shapes[name] = arr.shape
        object.__setattr__(self, "timestamp", _to_timestamp(self.timestamp))

        if len(set(shapes.values())) != 1:
            raise InvalidInput(
                f"DailyFields at {self.timestamp} has mismatched grid shapes: {shapes}"
            )

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.tmax.shape


@dataclass(frozen=True, eq=False)
class PETGrid:
    """Daily potential evapotranspiration (mm/day) for one timestamp."""

    values: Array
    timestamp: pd.Timestamp
    units: str = PET_UNITS

    def __post_init__(self):
        object.__setattr__(self, "values", _frozen_copy(self.values))
        object.__setattr__(self, "timestamp", _to_timestamp(self.timestamp))

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.values.shape

    def value_range(self) -> "OutputRange":
        return value_range(self.values, self.units)


@dataclass(frozen=True, eq=False)
class AggregateGrid:
    """
    Temporal mean of daily PET.

    Attributes
    ----------
    values : ndarray
        Mean PET (mm/day); NaN where no day contributed.
    count : ndarray
        Number of days contributing to each cell.
    n_days : int
        Number of daily grids in the reduced series.
    start, end : pandas.Timestamp or None
        First and last timestamp of the series (None when empty or untagged).
    """

    values: Array
    count: Array
    n_days: int
    start: Optional[pd.Timestamp] = None
    end: Optional[pd.Timestamp] = None
    units: str = PET_UNITS

    def __post_init__(self):
        object.__setattr__(self, "values", _frozen_copy(self.values))
        count = np.array(self.count, dtype=np.int64, copy=True)
        count.setflags(write=False)
        object.__setattr__(self, "count", count)
        object.__setattr__(self, "start", _to_timestamp(self.start))
        object.__setattr__(self, "end", _to_timestamp(self.end))
        if self.count.shape != self.values.shape:
            raise InvalidInput(
                f"count shape {self.count.shape} != values shape {self.values.shape}"
            )

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.values.shape

    def value_range(self) -> "OutputRange":
        return value_range(self.values, self.units)


@dataclass(frozen=True, eq=False)
class GeoGrid:
    """
    Grid values with 1-D cell-centre coordinates.

    ``values`` has shape ``(len(lat), len(lon))``.
    """

    values: Array
    lat: Array
    lon: Array
    units: Optional[str] = None
    attrs: dict = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", _frozen_copy(self.values))
        object.__setattr__(self, "lat", _frozen_copy(self.lat))
        object.__setattr__(self, "lon", _frozen_copy(self.lon))
        if self.lat.ndim != 1 or self.lon.ndim != 1:
            raise InvalidInput("lat and lon must be 1-D coordinate arrays")
        expected = (self.lat.size, self.lon.size)
        if self.values.shape != expected:
            raise InvalidInput(
                f"GeoGrid values shape {self.values.shape} does not match "
                f"coordinates {expected}"
            )

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape

    def with_values(self, values) -> "GeoGrid":
        """New GeoGrid on the same coordinates."""
        return GeoGrid(values, self.lat, self.lon, units=self.units, attrs=dict(self.attrs))

    def value_range(self) -> "OutputRange":
        return value_range(self.values, self.units)


@dataclass(frozen=True)
class OutputRange:
    vmin: float
    vmax: float
    units: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return bool(np.isnan(self.vmin))


def value_range(values, units: Optional[str] = None) -> OutputRange:
    """Finite min/max of a grid; NaN bounds when every cell is missing."""
    arr = np.asarray(values, dtype=np.float64)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return OutputRange(np.nan, np.nan, units)
    return OutputRange(float(finite.min()), float(finite.max()), units)


def validate_series(series: Sequence[DailyFields]) -> Optional[Tuple[int, ...]]:
    """
    Check a TimeSeries<DailyFields> for a common shape and increasing time.

    Returns
    -------
    tuple or None
        The shared grid shape, or None for an empty series.
    """
    shape = None
    previous = None
    for i, entry in enumerate(series):
        if shape is None:
            shape = entry.shape
        elif entry.shape != shape:
            raise InvalidInput(
                f"Entry {i} ({entry.timestamp}) has shape {entry.shape}, "
                f"expected {shape}"
            )
        if previous is not None and entry.timestamp <= previous:
            raise InvalidInput(
                f"Timestamps must be strictly increasing: {entry.timestamp} "
                f"follows {previous}"
            )
        previous = entry.timestamp
    return shape


def stack_values(grids: Iterable[PETGrid]) -> Array:
    """Stack daily PET values into a ``(time, ...)`` array."""
    grids = list(grids)
    if not grids:
        raise InvalidInput("Cannot stack an empty series")
    return np.stack([g.values for g in grids], axis=0)


__all__ = [
    "FIELD_NAMES",
    "DailyFields",
    "PETGrid",
    "AggregateGrid",
    "GeoGrid",
    "OutputRange",
    "value_range",
    "validate_series",
    "stack_values",
]
