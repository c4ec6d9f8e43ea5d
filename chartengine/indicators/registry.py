"""
Indicator Registry - configure and compute indicators by kind.

Each indicator kind has a frozen config dataclass carrying its own
parameters. The configs form the IndicatorConfig union and are dispatched
by compute_indicator() through a single match statement.

Usage:
    from chartengine.indicators.registry import MACDConfig, compute_indicator

    result = compute_indicator(bars, MACDConfig(fast=8, slow=21))

    # From a name (command line, saved layouts)
    config = config_for("rsi", period=7)
"""

from collections.abc import Sequence
from dataclasses import dataclass

from chartengine.core.models import Bar, IndicatorPoint

from .adx import ADXResult, adx
from .atr import atr
from .bollinger import BollingerResult, bollinger_bands
from .macd import MACDResult, macd
from .moving_averages import ema, sma
from .rsi import rsi
from .supertrend import SupertrendPoint, supertrend
from .tpo import MarketProfile, TPOConfig, calculate_tpo


@dataclass(frozen=True)
class SMAConfig:
    period: int = 20


@dataclass(frozen=True)
class EMAConfig:
    period: int = 20


@dataclass(frozen=True)
class RSIConfig:
    period: int = 14


@dataclass(frozen=True)
class ATRConfig:
    period: int = 14


@dataclass(frozen=True)
class ADXConfig:
    period: int = 14


@dataclass(frozen=True)
class MACDConfig:
    fast: int = 12
    slow: int = 26
    signal: int = 9


@dataclass(frozen=True)
class BollingerConfig:
    period: int = 20
    std_dev: float = 2.0


@dataclass(frozen=True)
class SupertrendConfig:
    period: int = 10
    multiplier: float = 3.0


IndicatorConfig = (
    SMAConfig
    | EMAConfig
    | RSIConfig
    | ATRConfig
    | ADXConfig
    | MACDConfig
    | BollingerConfig
    | SupertrendConfig
    | TPOConfig
)

IndicatorOutput = (
    list[IndicatorPoint]
    | list[SupertrendPoint]
    | list[MarketProfile]
    | MACDResult
    | ADXResult
    | BollingerResult
)

# Registry of indicator names -> config type
_CONFIGS: dict[str, type] = {
    "sma": SMAConfig,
    "ema": EMAConfig,
    "rsi": RSIConfig,
    "atr": ATRConfig,
    "adx": ADXConfig,
    "macd": MACDConfig,
    "bollinger": BollingerConfig,
    "supertrend": SupertrendConfig,
    "tpo": TPOConfig,
}


def compute_indicator(bars: Sequence[Bar], config: IndicatorConfig) -> IndicatorOutput:
    """
    Compute one indicator over a bar series.

    Args:
        bars: Bars in time order
        config: Config of the indicator to compute

    Returns:
        The indicator's own result type (series, tuple result or profiles)

    Raises:
        TypeError: If config is not an indicator config
    """
    match config:
        case SMAConfig(period=period):
            return sma(bars, period)
        case EMAConfig(period=period):
            return ema(bars, period)
        case RSIConfig(period=period):
            return rsi(bars, period)
        case ATRConfig(period=period):
            return atr(bars, period)
        case ADXConfig(period=period):
            return adx(bars, period)
        case MACDConfig(fast=fast, slow=slow, signal=signal):
            return macd(bars, fast, slow, signal)
        case BollingerConfig(period=period, std_dev=std_dev):
            return bollinger_bands(bars, period, std_dev)
        case SupertrendConfig(period=period, multiplier=multiplier):
            return supertrend(bars, period, multiplier)
        case TPOConfig():
            return calculate_tpo(bars, config)
        case _:
            raise TypeError(f"Unsupported indicator config: {type(config).__name__}")


def config_for(name: str, **params) -> IndicatorConfig:
    """
    Build an indicator config from its name.

    Args:
        name: Indicator name (case-insensitive, e.g. "RSI", "bollinger")
        **params: Config fields to override

    Returns:
        Config instance

    Raises:
        ValueError: If the indicator is not known
        TypeError: If a parameter is not a field of that config

    Example:
        >>> config_for("macd", fast=8)
        MACDConfig(fast=8, slow=26, signal=9)
    """
    key = name.lower().replace(" ", "_").replace("-", "_")
    if key not in _CONFIGS:
        available = ", ".join(_CONFIGS.keys())
        raise ValueError(f"Unknown indicator '{name}'. Available: {available}")
    return _CONFIGS[key](**params)


def list_indicators() -> list[str]:
    """Names accepted by config_for()."""
    return list(_CONFIGS.keys())
