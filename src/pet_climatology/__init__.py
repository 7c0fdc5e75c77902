"""
PET-Climatology: 格点潜在蒸散发气候态计算工具包
Gridded Potential Evapotranspiration Climatology Toolkit

Computes daily FAO-56 Penman-Monteith PET grids from daily meteorological
fields (ERA5-Land daily aggregates by default), reduces them to a mean
climatology and clips the result to a region of interest.

示例 / Example:
---------------
>>> from pet_climatology import run_pet_climatology
>>> result = run_pet_climatology(series, region, lat, lon)   # doctest: +SKIP
>>> result.value_range                                       # doctest: +SKIP
OutputRange(vmin=1.8, vmax=5.2, units='mm/day')

包结构 / Package Structure:
---------------------------
pet_climatology/
├── config.py            # 常数与变量名 / Constants and variable names
├── exceptions.py        # 异常类型 / Error taxonomy
├── grids.py             # 数据结构 / Grid containers
├── units.py             # 单位转换 / Unit conversion
├── penman_monteith.py   # FAO-56 分项公式 / FAO-56 terms
├── engine.py            # 逐日 PET / Daily PET engine
├── temporal.py          # 时间平均 / Temporal mean
├── region.py            # 区域裁剪 / Region masking
├── data_io.py           # xarray 读写 / xarray glue
└── pipeline.py          # 端到端流程 / End-to-end run
"""

# ============================================================================
# 版本信息 / Version Information
# ============================================================================

__version__ = "0.1.0"
__license__ = "MIT"

# ============================================================================
# 模块导入 / Module Imports
# ============================================================================

from .config import DEFAULT_CONSTANTS, MISSING, PET_UNITS, PETConstants
from .exceptions import (
    InvalidGeometry,
    InvalidInput,
    NumericGuardWarning,
    PETClimatologyError,
)
from .grids import (
    AggregateGrid,
    DailyFields,
    GeoGrid,
    OutputRange,
    PETGrid,
    validate_series,
    value_range,
)
from .units import (
    celsius_to_kelvin,
    j_per_m2_to_mj_per_m2,
    kelvin_to_celsius,
    pa_to_kpa,
)
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
from .engine import PETEngine
from .temporal import ReductionState, TemporalReducer, temporal_mean
from .region import RegionMask, clip, region_mask, validate_region
from .data_io import (
    daily_fields_from_dataset,
    daily_pet_to_dataarray,
    geogrid_to_dataarray,
    open_daily_dataset,
)
from .pipeline import PETClimatologyResult, run_from_dataset, run_pet_climatology

# ============================================================================
# 公共 API / Public API
# ============================================================================

__all__ = [
    # 配置 / Configuration
    "DEFAULT_CONSTANTS",
    "MISSING",
    "PET_UNITS",
    "PETConstants",

    # 异常 / Errors
    "PETClimatologyError",
    "InvalidInput",
    "InvalidGeometry",
    "NumericGuardWarning",

    # 数据结构 / Data model
    "DailyFields",
    "PETGrid",
    "AggregateGrid",
    "GeoGrid",
    "OutputRange",
    "validate_series",
    "value_range",

    # 单位 / Units
    "kelvin_to_celsius",
    "celsius_to_kelvin",
    "pa_to_kpa",
    "j_per_m2_to_mj_per_m2",

    # FAO-56 分项 / Derived quantities
    "saturation_vapor_pressure",
    "actual_vapor_pressure",
    "wind_speed",
    "net_shortwave_radiation",
    "net_longwave_radiation",
    "net_radiation",
    "slope_vapor_pressure_curve",
    "psychrometric_constant",
    "penman_monteith_pet",

    # 计算流程 / Engine, reducer, mask, pipeline
    "PETEngine",
    "TemporalReducer",
    "ReductionState",
    "temporal_mean",
    "RegionMask",
    "clip",
    "region_mask",
    "validate_region",
    "daily_fields_from_dataset",
    "daily_pet_to_dataarray",
    "geogrid_to_dataarray",
    "open_daily_dataset",
    "PETClimatologyResult",
    "run_pet_climatology",
    "run_from_dataset",
]
