"""
MACD Indicator - Moving Average Convergence Divergence.

Trend-following momentum indicator showing the relationship
between two exponential moving averages of price.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from chartengine.core.models import Bar, IndicatorPoint, PointColor

from .moving_averages import ema_series

logger = logging.getLogger(__name__)


@dataclass
class MACDResult:
    """Result of MACD calculation."""

    macd_line: list[IndicatorPoint] = field(default_factory=list)  # Fast EMA - Slow EMA
    signal_line: list[IndicatorPoint] = field(default_factory=list)  # EMA of MACD line
    histogram: list[IndicatorPoint] = field(default_factory=list)  # MACD line - Signal line

    @property
    def is_empty(self) -> bool:
        return not self.macd_line

    @property
    def is_bullish(self) -> bool:
        """True if the latest MACD value is above the signal line."""
        return bool(self.histogram) and self.histogram[-1].value > 0

    @property
    def is_bearish(self) -> bool:
        """True if the latest MACD value is below the signal line."""
        return bool(self.histogram) and self.histogram[-1].value < 0


def histogram_color(value: float) -> PointColor:
    """POSITIVE for value >= 0, NEGATIVE otherwise."""
    return PointColor.POSITIVE if value >= 0 else PointColor.NEGATIVE


def macd_values(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
) -> list[float]:
    """
    MACD line values (fast EMA - slow EMA), first value at closes[slow - 1].

    The fast EMA starts earlier, so it is shifted by slow - fast to line up
    with the slow EMA. Only indices present in both series are used.
    """
    fast_ema = ema_series(closes, fast)
    slow_ema = ema_series(closes, slow)

    offset = slow - fast
    return [f - s for f, s in zip(fast_ema[offset:], slow_ema)]


def macd(
    bars: Sequence[Bar],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> MACDResult:
    """
    Calculate MACD (Moving Average Convergence Divergence).

    MACD Line = Fast EMA - Slow EMA
    Signal Line = EMA of MACD Line
    Histogram = MACD Line - Signal Line

    Args:
        bars: Bars in time order (most recent last)
        fast: Fast EMA period (default 12)
        slow: Slow EMA period (default 26)
        signal: Signal line EMA period (default 9)

    Returns:
        MACDResult; all series empty if there is insufficient data or
        the periods are invalid (fast must be less than slow)
    """
    if fast <= 0 or slow <= 0 or signal <= 0 or slow <= fast:
        logger.debug(f"MACD({fast},{slow},{signal}) rejected: invalid periods")
        return MACDResult()

    if len(bars) < slow + signal:
        logger.debug(f"MACD({fast},{slow},{signal}) skipped: {len(bars)} bars")
        return MACDResult()

    line = macd_values([bar.close for bar in bars], fast, slow)
    signal_values = ema_series(line, signal)

    result = MACDResult()
    line_bars = bars[slow - 1 :]
    result.macd_line = [
        IndicatorPoint(time=bar.time, value=value)
        for bar, value in zip(line_bars, line, strict=True)
    ]

    # Signal starts signal - 1 points after the MACD line
    signal_offset = signal - 1
    for bar, macd_value, signal_value in zip(
        line_bars[signal_offset:], line[signal_offset:], signal_values, strict=True
    ):
        hist = macd_value - signal_value
        result.signal_line.append(IndicatorPoint(time=bar.time, value=signal_value))
        result.histogram.append(
            IndicatorPoint(time=bar.time, value=hist, color=histogram_color(hist))
        )

    return result
