"""
Penman-Monteith building blocks for daily reference evapotranspiration.

Every function works cell-wise on float arrays (or scalars). Missing cells
(NaN) propagate; cells where a formula leaves its physical domain are set to
NaN and reported once per call through :class:`NumericGuardWarning`.

References
----------
Allen et al. (1998). Crop evapotranspiration - Guidelines for computing
crop water requirements. FAO Irrigation and Drainage Paper 56.
"""

import warnings

import numpy as np

from .config import DEFAULT_CONSTANTS
from .exceptions import NumericGuardWarning


def _guard(values, invalid, quantity):
    """Replace out-of-domain cells with NaN and warn with their count."""
    n_invalid = int(np.count_nonzero(invalid))
    if n_invalid:
        warnings.warn(
            f"{quantity}: {n_invalid} cell(s) outside the physical domain "
            "set to missing",
            NumericGuardWarning,
            stacklevel=3,
        )
    return np.where(invalid, np.nan, values)


def _tetens(T):
    # Returns (es, invalid) without warning so callers guard once.
    # Near -237.3 °C the exponent underflows to 0, which is out of domain too.
    T = np.asarray(T, dtype=np.float64)
    base = T + 237.3
    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        es = 0.6108 * np.exp(17.27 * T / base)
    invalid = (base <= 0) | (es == 0)
    return es, invalid, base


def saturation_vapor_pressure(T):
    """
    Saturation vapor pressure (FAO-56 Eq. 11).

    Parameters
    ----------
    T : float or array-like
        Air temperature (°C)

    Returns
    -------
    es : np.ndarray
        Saturation vapor pressure (kPa); NaN where T <= -237.3 °C or the
        exponential underflows (T below about -231.8 °C).
    """
    es, invalid, _ = _tetens(T)
    return _guard(es, invalid, "saturation vapor pressure")


def actual_vapor_pressure(T_dew):
    """
    Actual vapor pressure from dewpoint temperature (FAO-56 Eq. 14).

    Parameters
    ----------
    T_dew : float or array-like
        Dewpoint temperature (°C)

    Returns
    -------
    ea : np.ndarray
        Actual vapor pressure (kPa)
    """
    es, invalid, _ = _tetens(T_dew)
    return _guard(es, invalid, "actual vapor pressure")


def wind_speed(u, v):
    """Horizontal wind speed magnitude from its u/v components (m s-1)."""
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    return np.hypot(u, v)


def net_shortwave_radiation(Rs, albedo=DEFAULT_CONSTANTS.albedo):
    """Net shortwave radiation Rns = (1 - albedo) * Rs (MJ m-2 day-1)."""
    Rs = np.asarray(Rs, dtype=np.float64)
    return Rs * (1.0 - albedo)


def net_longwave_radiation(T_mean, ea, Rs,
                           sigma=DEFAULT_CONSTANTS.stefan_boltzmann,
                           kelvin=False):
    """
    Net outgoing longwave radiation.

    Parameters
    ----------
    T_mean : float or array-like
        Mean daily air temperature (°C)
    ea : float or array-like
        Actual vapor pressure (kPa)
    Rs : float or array-like
        Incoming solar radiation (MJ m-2 day-1)
    sigma : float
        Stefan-Boltzmann constant (MJ K-4 m-2 day-1)
    kelvin : bool, default=False
        Raise the Kelvin mean temperature to the 4th power instead of the
        Celsius value.

    Returns
    -------
    Rnl : np.ndarray
        Net longwave radiation (MJ m-2 day-1)

    Notes
    -----
    The default form reproduces the reference ERA5 workflow literally:
    ``sigma * T_mean**4 * (0.34 - 0.14 sqrt(ea)) * (1.35 Rs / 0.8 - 0.35)``
    with ``T_mean`` in °C. Canonical FAO-56 (Eq. 39) averages Tmax_K**4 and
    Tmin_K**4 and uses Rs/Rso, so absolute Rnl values here are much smaller
    than the physical term. ``kelvin=True`` restores the Kelvin base.
    """
    T_mean = np.asarray(T_mean, dtype=np.float64)
    ea = np.asarray(ea, dtype=np.float64)
    Rs = np.asarray(Rs, dtype=np.float64)

    T_base = T_mean + 273.16 if kelvin else T_mean
    invalid = ea < 0
    with np.errstate(invalid="ignore"):
        humidity = 0.34 - 0.14 * np.sqrt(ea)
    cloudiness = 1.35 * (Rs / 0.8) - 0.35

    Rnl = sigma * T_base ** 4 * humidity * cloudiness
    return _guard(Rnl, invalid, "net longwave radiation")


def net_radiation(Rns, Rnl):
    """Net radiation Rn = Rns - Rnl (MJ m-2 day-1)."""
    return np.asarray(Rns, dtype=np.float64) - np.asarray(Rnl, dtype=np.float64)


def slope_vapor_pressure_curve(T):
    """
    Slope of the saturation vapor pressure curve (FAO-56 Eq. 13).

    Parameters
    ----------
    T : float or array-like
        Air temperature (°C)

    Returns
    -------
    Delta : np.ndarray
        Slope (kPa °C-1); NaN where es is missing.
    """
    es, invalid, base = _tetens(T)
    with np.errstate(divide="ignore", invalid="ignore"):
        Delta = 4098.0 * es / base ** 2
    return _guard(Delta, invalid, "slope of vapor pressure curve")


def psychrometric_constant(P,
                           cp=DEFAULT_CONSTANTS.cp,
                           epsilon=DEFAULT_CONSTANTS.epsilon,
                           latent_heat=DEFAULT_CONSTANTS.latent_heat):
    """
    Psychrometric constant gamma = cp * P / (epsilon * lambda) (FAO-56 Eq. 8).

    Parameters
    ----------
    P : float or array-like
        Atmospheric pressure (kPa)

    Returns
    -------
    gamma : np.ndarray
        Psychrometric constant (kPa °C-1)
    """
    P = np.asarray(P, dtype=np.float64)
    return cp * P / (epsilon * latent_heat)


def penman_monteith_pet(Delta, gamma, Rn, T_mean, u, es, ea, G=0.0,
                        latent_heat=DEFAULT_CONSTANTS.latent_heat,
                        cn=DEFAULT_CONSTANTS.cn, cd=DEFAULT_CONSTANTS.cd):
    """
    Daily FAO-56 Penman-Monteith reference evapotranspiration (Eq. 6).

    Parameters
    ----------
    Delta : array-like
        Slope of vapor pressure curve (kPa °C-1)
    gamma : array-like
        Psychrometric constant (kPa °C-1)
    Rn : array-like
        Net radiation (MJ m-2 day-1)
    T_mean : array-like
        Mean daily air temperature (°C)
    u : array-like
        Wind speed (m s-1)
    es, ea : array-like
        Saturation and actual vapor pressure (kPa)
    G : float or array-like, default=0.0
        Soil heat flux (MJ m-2 day-1)
    latent_heat : float
        Converts the radiation term from MJ m-2 day-1 to mm day-1
        (1 / 2.45 = 0.408).

    Returns
    -------
    PET : np.ndarray
        Potential evapotranspiration (mm day-1). NaN where the denominator
        is not positive or T_mean <= -273 °C.
    """
    Delta = np.asarray(Delta, dtype=np.float64)
    gamma = np.asarray(gamma, dtype=np.float64)
    Rn = np.asarray(Rn, dtype=np.float64)
    T_mean = np.asarray(T_mean, dtype=np.float64)
    u = np.asarray(u, dtype=np.float64)
    es = np.asarray(es, dtype=np.float64)
    ea = np.asarray(ea, dtype=np.float64)

    T_base = T_mean + 273.0
    denominator = Delta + gamma * (1.0 + cd * u)
    invalid = (T_base <= 0) | (denominator <= 0)

    with np.errstate(divide="ignore", invalid="ignore"):
        numerator = (Delta * (Rn - G) / latent_heat
                     + gamma * (cn / T_base) * u * (es - ea))
        PET = numerator / denominator

    return _guard(PET, invalid, "Penman-Monteith PET")
