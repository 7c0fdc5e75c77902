"""Temporal reduction of daily PET grids.

时间维聚合：逐格点求日 PET 的算术平均（气候态）。
Accumulation is streaming (running sum and count), so a generator of daily
grids is reduced without holding the whole series in memory, and partial
states from time shards can be merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .config import REDUCER_POLICIES
from .exceptions import InvalidInput
from .grids import AggregateGrid, PETGrid


@dataclass
class ReductionState:
    """Running sum / count accumulator for one grid shape."""

    shape: Tuple[int, ...]
    total: np.ndarray = field(init=False)
    count: np.ndarray = field(init=False)
    any_missing: np.ndarray = field(init=False)
    n_days: int = 0
    start: Optional[pd.Timestamp] = None
    end: Optional[pd.Timestamp] = None

    def __post_init__(self):
        self.shape = tuple(self.shape)
        self.total = np.zeros(self.shape, dtype=np.float64)
        self.count = np.zeros(self.shape, dtype=np.int64)
        self.any_missing = np.zeros(self.shape, dtype=bool)

    def add(self, values, timestamp=None) -> None:
        values = np.asarray(values, dtype=np.float64)
        if values.shape != self.shape:
            raise InvalidInput(
                f"Grid at {timestamp} has shape {values.shape}, expected {self.shape}"
            )
        valid = np.isfinite(values)
        self.total += np.where(valid, values, 0.0)
        self.count += valid
        self.any_missing |= ~valid
        self.n_days += 1

        if timestamp is not None:
            timestamp = pd.Timestamp(timestamp)
            if self.start is None or timestamp < self.start:
                self.start = timestamp
            if self.end is None or timestamp > self.end:
                self.end = timestamp

    def merge(self, other: "ReductionState") -> "ReductionState":
        """Combine two partial states (e.g. reduced on separate workers)."""
        if other.shape != self.shape:
            raise InvalidInput(
                f"Cannot merge states of shape {self.shape} and {other.shape}"
            )
        merged = ReductionState(self.shape)
        merged.total = self.total + other.total
        merged.count = self.count + other.count
        merged.any_missing = self.any_missing | other.any_missing
        merged.n_days = self.n_days + other.n_days
        starts = [t for t in (self.start, other.start) if t is not None]
        ends = [t for t in (self.end, other.end) if t is not None]
        merged.start = min(starts) if starts else None
        merged.end = max(ends) if ends else None
        return merged

    def result(self, policy: str = "skipna") -> AggregateGrid:
        with np.errstate(divide="ignore", invalid="ignore"):
            mean = np.where(self.count > 0, self.total / self.count, np.nan)
        if policy == "propagate":
            mean = np.where(self.any_missing, np.nan, mean)
        return AggregateGrid(
            values=mean,
            count=self.count,
            n_days=self.n_days,
            start=self.start,
            end=self.end,
        )


@dataclass(frozen=True)
class TemporalReducer:
    """
    Cell-wise temporal mean of daily PET.

    Parameters
    ----------
    policy : {"skipna", "propagate"}
        ``skipna`` averages the days with a value and leaves cells missing on
        every day as NaN; ``propagate`` makes a cell NaN as soon as one day
        is missing.
    """

    policy: str = "skipna"

    def __post_init__(self):
        if self.policy not in REDUCER_POLICIES:
            raise InvalidInput(
                f"policy must be one of {REDUCER_POLICIES}, got {self.policy!r}"
            )

    def accumulate(
        self,
        series: Iterable[Union[PETGrid, np.ndarray]],
        shape: Optional[Tuple[int, ...]] = None,
    ) -> Optional[ReductionState]:
        """Fold a series into a :class:`ReductionState` (None if empty, no shape)."""
        state = ReductionState(shape) if shape is not None else None
        for grid in series:
            if isinstance(grid, PETGrid):
                values, timestamp = grid.values, grid.timestamp
            else:
                values, timestamp = np.asarray(grid, dtype=np.float64), None
            if state is None:
                state = ReductionState(values.shape)
            state.add(values, timestamp)
        return state

    def reduce(
        self,
        series: Iterable[Union[PETGrid, np.ndarray]],
        shape: Optional[Tuple[int, ...]] = None,
    ) -> AggregateGrid:
        """
        Reduce daily PET grids to their mean.

        Parameters
        ----------
        series : iterable of PETGrid or array-like
            Daily grids of one common shape.
        shape : tuple, optional
            Expected grid shape; required to reduce an empty series.

        Returns
        -------
        AggregateGrid
            All-NaN with ``n_days == 0`` for an empty series.

        Raises
        ------
        InvalidInput
            Empty series without ``shape``, or mismatched grid shapes.
        """
        state = self.accumulate(series, shape=shape)
        if state is None:
            raise InvalidInput(
                "Cannot reduce an empty series without a shape hint"
            )
        return state.result(self.policy)


def temporal_mean(series, shape=None, policy="skipna") -> AggregateGrid:
    """Shortcut for ``TemporalReducer(policy).reduce(series, shape)``."""
    return TemporalReducer(policy).reduce(series, shape=shape)
