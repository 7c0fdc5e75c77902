"""Daily PET engine.

逐日计算 FAO-56 Penman-Monteith 潜在蒸散发栅格：
DailyFields (K, J m-2, Pa, m s-1) -> PETGrid (mm/day).
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .config import DEFAULT_CONSTANTS, PETConstants
from .grids import DailyFields, PETGrid, validate_series
from .penman_monteith import (
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
from .units import j_per_m2_to_mj_per_m2, kelvin_to_celsius, pa_to_kpa


@dataclass(frozen=True)
class PETEngine:
    """
    Compute daily PET grids from raw daily fields.

    Parameters
    ----------
    constants : PETConstants
        Albedo, cp, epsilon, lambda, G and the grass reference constants.
    kelvin_longwave : bool, default=False
        Use the Kelvin base in the longwave term (see
        :func:`net_longwave_radiation`).

    Examples
    --------
    >>> engine = PETEngine()
    >>> pet = engine.compute(fields)            # doctest: +SKIP
    >>> pets = engine.compute_series(series, n_workers=4)  # doctest: +SKIP
    """

    constants: PETConstants = DEFAULT_CONSTANTS
    kelvin_longwave: bool = False

    def compute(self, fields: DailyFields) -> PETGrid:
        """
        Daily PET for one timestamp.

        Parameters
        ----------
        fields : DailyFields
            Temperatures (K), solar radiation sum (J m-2), surface
            pressure (Pa) and 10 m wind components (m s-1).

        Returns
        -------
        PETGrid
            PET (mm/day) on the input grid shape, tagged with the input
            timestamp.

        Notes
        -----
        A NaN in any input cell gives NaN in that output cell only. Cells
        where a formula leaves its physical domain are also set to NaN and
        reported by :class:`NumericGuardWarning`, never raised.
        """
        c = self.constants

        # 1. temperatures
        T_max = kelvin_to_celsius(fields.tmax)
        T_min = kelvin_to_celsius(fields.tmin)
        T_dew = kelvin_to_celsius(fields.dewpoint)
        T_mean = (T_max + T_min) / 2.0

        # 2. vapor pressure
        es = saturation_vapor_pressure(T_mean)
        ea = actual_vapor_pressure(T_dew)

        # 3. 10 m wind used as is
        u = wind_speed(fields.wind_u, fields.wind_v)

        # 4-5. pressure and radiation
        P = pa_to_kpa(fields.surface_pressure)
        Rs = j_per_m2_to_mj_per_m2(fields.solar_radiation_sum)
        Rns = net_shortwave_radiation(Rs, albedo=c.albedo)
        Rnl = net_longwave_radiation(T_mean, ea, Rs, sigma=c.stefan_boltzmann,
                                     kelvin=self.kelvin_longwave)
        Rn = net_radiation(Rns, Rnl)

        # 6. curve slope and psychrometric constant
        Delta = slope_vapor_pressure_curve(T_mean)
        gamma = psychrometric_constant(P, cp=c.cp, epsilon=c.epsilon,
                                       latent_heat=c.latent_heat)

        # 7-8. G from constants, FAO-56 Eq. 6
        PET = penman_monteith_pet(
            Delta, gamma, Rn, T_mean, u, es, ea,
            G=c.soil_heat_flux, latent_heat=c.latent_heat, cn=c.cn, cd=c.cd,
        )

        if c.clip_negative:
            # np.maximum propagates NaN, missing cells stay missing
            PET = np.maximum(PET, 0.0)

        return PETGrid(np.broadcast_to(PET, fields.shape), fields.timestamp)

    def compute_series(
        self,
        series: Sequence[DailyFields],
        n_workers: Optional[int] = None,
    ) -> List[PETGrid]:
        """
        Compute one PETGrid per day, preserving order.

        Parameters
        ----------
        series : sequence of DailyFields
            Ordered by timestamp, common grid shape.
        n_workers : int, optional
            Thread-pool size; sequential when None or <= 1.
        """
        series = list(series)
        validate_series(series)

        if n_workers is None or n_workers <= 1 or len(series) <= 1:
            return [self.compute(fields) for fields in series]

        with ThreadPoolExecutor(max_workers=n_workers) as pool:
            return list(pool.map(self.compute, series))
