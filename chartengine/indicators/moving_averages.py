"""
Moving Average Indicators - SMA and EMA calculations.

Pure math functions for calculating simple and exponential moving averages.
The EMA helper works on plain float lists so composite indicators (MACD)
can run it over derived series as well as closes.
"""

import math
from collections.abc import Sequence

from chartengine.core.models import Bar, IndicatorPoint


def _valid_close(bar: object) -> float | None:
    """Return the bar's close if it is a finite number, else None."""
    close = getattr(bar, "close", None)
    if isinstance(close, bool) or not isinstance(close, (int, float)):
        return None
    if not math.isfinite(close):
        return None
    return float(close)


def sma(bars: Sequence[Bar], period: int) -> list[IndicatorPoint]:
    """
    Calculate Simple Moving Average of closes.

    One point per bar from index period - 1 onward. A window containing
    a missing or non-finite close is skipped rather than averaged over
    fewer values.

    Args:
        bars: Bars in time order (most recent last)
        period: Number of bars to average

    Returns:
        List of IndicatorPoint, empty if period <= 0 or bars is not a sequence
    """
    if not isinstance(bars, Sequence) or period <= 0:
        return []

    closes = [_valid_close(bar) for bar in bars]
    result: list[IndicatorPoint] = []

    for i in range(period - 1, len(bars)):
        window = closes[i - period + 1 : i + 1]
        if any(c is None for c in window):
            continue
        result.append(IndicatorPoint(time=bars[i].time, value=sum(window) / period))

    return result


def ema_series(values: Sequence[float], period: int) -> list[float]:
    """
    Calculate EMA series for all available data points.

    Uses the standard EMA formula with multiplier = 2 / (period + 1).
    The first EMA value is seeded with the SMA of the first `period` values.

    Args:
        values: List of values (most recent last)
        period: Number of periods for EMA calculation

    Returns:
        List of EMA values (len(values) - period + 1 of them)
    """
    if len(values) < period or period <= 0:
        return []

    multiplier = 2 / (period + 1)
    result: list[float] = [sum(values[:period]) / period]

    for value in values[period:]:
        prev_ema = result[-1]
        result.append((value - prev_ema) * multiplier + prev_ema)

    return result


def ema(bars: Sequence[Bar], period: int) -> list[IndicatorPoint]:
    """
    Calculate Exponential Moving Average of closes.

    Args:
        bars: Bars in time order (most recent last)
        period: Number of periods for EMA calculation

    Returns:
        List of IndicatorPoint aligned to bars[period - 1:]
    """
    if not isinstance(bars, Sequence) or period <= 0:
        return []

    values = ema_series([bar.close for bar in bars], period)
    return [
        IndicatorPoint(time=bar.time, value=value)
        for bar, value in zip(bars[period - 1 :], values, strict=True)
    ]
