"""
Technical Indicators Module - Pure math functions for chart analysis.

All functions are stateless: they take a full bar series and return a new
result, recomputing from scratch on every call.
"""

from .adx import ADXResult, adx
from .atr import atr, atr_percent, true_range
from .bollinger import BollingerResult, bollinger_bands
from .macd import MACDResult, macd
from .moving_averages import ema, ema_series, sma
from .registry import (
    ADXConfig,
    ATRConfig,
    BollingerConfig,
    EMAConfig,
    IndicatorConfig,
    MACDConfig,
    RSIConfig,
    SMAConfig,
    SupertrendConfig,
    compute_indicator,
    config_for,
    list_indicators,
)
from .rsi import rsi
from .smoothing import wilder_smooth, wilder_sum
from .supertrend import SupertrendPoint, Trend, supertrend
from .tpo import (
    MarketProfile,
    TPOConfig,
    TPOLevel,
    TPOPeriod,
    auto_tick_size,
    calculate_tpo,
    get_tpo_stats,
    tpo_letter,
    tpo_to_render_data,
)

__all__ = [
    # Moving Averages
    "sma",
    "ema",
    "ema_series",
    # Wilder family
    "wilder_smooth",
    "wilder_sum",
    "rsi",
    "atr",
    "atr_percent",
    "true_range",
    "adx",
    "ADXResult",
    # Composite
    "macd",
    "MACDResult",
    "bollinger_bands",
    "BollingerResult",
    # Trend
    "supertrend",
    "SupertrendPoint",
    "Trend",
    # Market Profile
    "calculate_tpo",
    "MarketProfile",
    "TPOConfig",
    "TPOLevel",
    "TPOPeriod",
    "auto_tick_size",
    "tpo_letter",
    "get_tpo_stats",
    "tpo_to_render_data",
    # Registry
    "IndicatorConfig",
    "SMAConfig",
    "EMAConfig",
    "RSIConfig",
    "ATRConfig",
    "ADXConfig",
    "MACDConfig",
    "BollingerConfig",
    "SupertrendConfig",
    "compute_indicator",
    "config_for",
    "list_indicators",
]
