"""Region-of-interest masking.

区域裁剪：格点中心落在边界多边形内（含边界）的格点保留，其余置为缺测。
Clipping never changes the grid shape and can only remove coverage.
"""

from __future__ import annotations

from typing import Mapping, Union

import numpy as np
import shapely
from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry

from .exceptions import InvalidGeometry, InvalidInput
from .grids import GeoGrid, _frozen_copy

RegionLike = Union[BaseGeometry, Mapping]


def validate_region(region: RegionLike) -> BaseGeometry:
    """Return the region as a polygonal shapely geometry.

    Raises
    ------
    InvalidGeometry
        Region is not (Multi)Polygon, empty, invalid or has zero area.
    """
    if isinstance(region, Mapping):
        try:
            region = shape(region)
        except (KeyError, TypeError, ValueError, ShapelyError) as exc:
            raise InvalidGeometry(f"Cannot build geometry from mapping: {exc}") from exc

    if not isinstance(region, (Polygon, MultiPolygon)):
        raise InvalidGeometry(
            f"Region must be a Polygon or MultiPolygon, got {type(region).__name__}"
        )
    if region.is_empty:
        raise InvalidGeometry("Region geometry is empty")
    if not region.is_valid:
        raise InvalidGeometry(
            f"Region geometry is invalid: {shapely.is_valid_reason(region)}"
        )
    if region.area <= 0.0:
        raise InvalidGeometry("Region geometry has zero area")
    return region


def _match_longitude_convention(lon, geom):
    # Grid and region may disagree on [-180, 180) vs [0, 360)
    minx, _, maxx, _ = geom.bounds
    if maxx > 180.0:
        return np.mod(lon, 360.0)
    if minx < 0.0:
        return np.mod(lon + 180.0, 360.0) - 180.0
    return lon


def region_mask(lat, lon, region: RegionLike) -> np.ndarray:
    """Boolean ``(lat, lon)`` mask, True where the cell centre is in the region.

    Longitudes are wrapped to the region's convention first, so a
    ``[0, 360)`` grid can be clipped with a ``[-180, 180)`` polygon and
    the other way around.
    """
    geom = validate_region(region)
    lat = np.asarray(lat, dtype=np.float64)
    lon = _match_longitude_convention(np.asarray(lon, dtype=np.float64), geom)
    lon2d, lat2d = np.meshgrid(lon, lat)

    shapely.prepare(geom)
    return shapely.intersects_xy(geom, lon2d, lat2d)


def clip(grid: GeoGrid, region: RegionLike) -> GeoGrid:
    """Set cells outside ``region`` to NaN; inside cells keep their value.

    The grid keeps its own longitudes; only the membership test wraps them.
    """
    mask = region_mask(grid.lat, grid.lon, region)
    return grid.with_values(np.where(mask, grid.values, np.nan))


class RegionMask:
    """
    Mask for a fixed region on fixed coordinates, reused across grids.

    Parameters
    ----------
    region : shapely Polygon/MultiPolygon or GeoJSON-like mapping
    lat, lon : array-like
        1-D cell-centre coordinates of the grids to be clipped.
    """

    def __init__(self, region: RegionLike, lat, lon):
        self.region = validate_region(region)
        self.lat = _frozen_copy(lat)
        self.lon = _frozen_copy(lon)
        self.mask = region_mask(self.lat, self.lon, self.region)
        self.mask.setflags(write=False)

    @property
    def n_inside(self) -> int:
        return int(self.mask.sum())

    def apply(self, values) -> np.ndarray:
        """Clip a bare array laid out on this mask's coordinates."""
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self.mask.shape:
            raise InvalidInput(
                f"Grid shape {values.shape} does not match mask {self.mask.shape}"
            )
        return np.where(self.mask, values, np.nan)

    def clip(self, grid: GeoGrid) -> GeoGrid:
        if not (np.array_equal(grid.lat, self.lat) and np.array_equal(grid.lon, self.lon)):
            raise InvalidInput("Grid coordinates differ from the mask coordinates")
        return grid.with_values(self.apply(grid.values))
