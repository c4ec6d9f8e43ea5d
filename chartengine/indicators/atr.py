"""
ATR Indicator - Average True Range.

Measures market volatility by calculating the average of true ranges
over a specified period. Used for stop placement and by Supertrend.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from chartengine.core.models import Bar, IndicatorPoint

from .smoothing import wilder_smooth

logger = logging.getLogger(__name__)


class CandleLike(Protocol):
    """Protocol for candle-like objects with OHLC data."""

    high: float
    low: float
    close: float


def true_range(current: CandleLike, previous_close: float | None = None) -> float:
    """
    Calculate True Range for a single candle.

    True Range is the greatest of:
    1. Current High - Current Low
    2. |Current High - Previous Close|
    3. |Current Low - Previous Close|

    Args:
        current: Current candle with high, low, close
        previous_close: Previous candle's close price (None for first candle)

    Returns:
        True Range value
    """
    high_low = current.high - current.low

    if previous_close is None:
        return high_low

    high_prev_close = abs(current.high - previous_close)
    low_prev_close = abs(current.low - previous_close)

    return max(high_low, high_prev_close, low_prev_close)


def true_ranges(bars: Sequence[CandleLike]) -> list[float]:
    """True range of every bar after the first (index i -> bars[i + 1])."""
    return [true_range(curr, prev.close) for prev, curr in zip(bars, bars[1:])]


def atr_values(bars: Sequence[CandleLike], period: int = 14) -> list[float]:
    """
    Raw ATR values, value j belonging to bars[period + j].

    Supertrend consumes this directly; callers who want timestamps use atr().
    """
    if period <= 0 or len(bars) < period + 1:
        return []
    return wilder_smooth(true_ranges(bars), period)


def atr(bars: Sequence[Bar], period: int = 14) -> list[IndicatorPoint]:
    """
    Calculate Average True Range series.

    Uses Wilder's smoothing method (same as RSI) for the average.

    Args:
        bars: Bars in time order (most recent last)
        period: Lookback period (default 14)

    Returns:
        List of non-negative IndicatorPoint aligned to bars[period:], or
        empty list if there is insufficient data
    """
    values = atr_values(bars, period)
    if not values:
        logger.debug(f"ATR({period}) skipped: {len(bars)} bars")
        return []

    return [
        IndicatorPoint(time=bar.time, value=value)
        for bar, value in zip(bars[period:], values, strict=True)
    ]


def atr_percent(bars: Sequence[Bar], period: int = 14) -> float | None:
    """
    Calculate the latest ATR as a percentage of the latest close.

    Useful for comparing volatility across different price levels.

    Returns:
        ATR as percentage of current close, or None if insufficient data
    """
    values = atr_values(bars, period)
    if not values:
        return None

    current_close = bars[-1].close
    if current_close == 0:
        return None

    return (values[-1] / current_close) * 100
