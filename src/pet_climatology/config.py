"""Global configuration & physical constants.

全局配置：FAO-56 常数、缺测标记与 ERA5-Land 日尺度变量名。
Constants are grouped in :class:`PETConstants` and injected into the engine,
so sensitivity runs only need ``DEFAULT_CONSTANTS.replace(albedo=0.2)``.
"""

from dataclasses import dataclass, replace as _dc_replace

import numpy as np

# Missing-value marker shared by every grid
MISSING = np.nan

PET_UNITS = "mm/day"

# Default coordinate names
DEFAULT_LAT_NAME = "lat"
DEFAULT_LON_NAME = "lon"
DEFAULT_TIME_NAME = "time"

# ERA5-Land daily aggregates (DailyFields attribute -> dataset variable)
ERA5_LAND_VARIABLES = {
    "tmax": "temperature_2m_max",
    "tmin": "temperature_2m_min",
    "dewpoint": "dewpoint_temperature_2m",
    "solar_radiation_sum": "surface_solar_radiation_downwards_sum",
    "surface_pressure": "surface_pressure",
    "wind_u": "u_component_of_wind_10m",
    "wind_v": "v_component_of_wind_10m",
}

REDUCER_POLICIES = ("skipna", "propagate")


@dataclass(frozen=True)
class PETConstants:
    """Constants of the daily FAO-56 Penman-Monteith reference-grass equation.

    Attributes
    ----------
    albedo : float
        Reference-crop albedo (-).
    cp : float
        Specific heat of air at constant pressure, 1013 J kg-1 °C-1
        expressed in MJ kg-1 °C-1 so that gamma comes out in kPa °C-1.
    epsilon : float
        Ratio of molecular weights of water vapour and dry air (-).
    latent_heat : float
        Latent heat of vaporization lambda (MJ kg-1).
    soil_heat_flux : float
        Daily soil heat flux G (MJ m-2 day-1).
    stefan_boltzmann : float
        Stefan-Boltzmann constant (MJ K-4 m-2 day-1).
    cn, cd : float
        Numerator / denominator constants of the grass reference surface.
    clip_negative : bool
        Floor PET at zero when True.
    """

    albedo: float = 0.23
    cp: float = 1.013e-3
    epsilon: float = 0.622
    latent_heat: float = 2.45
    soil_heat_flux: float = 0.0
    stefan_boltzmann: float = 4.903e-9
    cn: float = 900.0
    cd: float = 0.34
    clip_negative: bool = False

    def replace(self, **changes) -> "PETConstants":
        return _dc_replace(self, **changes)


DEFAULT_CONSTANTS = PETConstants()
