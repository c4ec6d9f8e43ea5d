"""
Supertrend Indicator.

A trend-following indicator that uses ATR bands around hl2 to determine
trend direction.
- Green line (lower band) when bullish
- Red line (upper band) when bearish

The final bands are "sticky": the upper band only moves down (and the lower
band only moves up) unless the previous close broke through it, so the line
does not chase price inside an established trend.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from chartengine.core.models import Bar, IndicatorPoint, PointColor

from .atr import atr_values

logger = logging.getLogger(__name__)


class Trend(Enum):
    """Supertrend state."""

    BULLISH = 1
    BEARISH = -1

    @property
    def color(self) -> PointColor:
        return PointColor.BULLISH if self is Trend.BULLISH else PointColor.BEARISH


@dataclass(frozen=True)
class SupertrendPoint(IndicatorPoint):
    """Supertrend value with its trend direction (+1 bullish, -1 bearish)."""

    trend: int = Trend.BULLISH.value

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["trend"] = self.trend
        return data


@dataclass(frozen=True)
class TrendState:
    """Accumulator carried from one bar to the next."""

    upper: float  # Final upper band
    lower: float  # Final lower band
    trend: Trend
    close: float

    @property
    def value(self) -> float:
        """Active band: lower when bullish, upper when bearish."""
        return self.lower if self.trend is Trend.BULLISH else self.upper


def step(state: TrendState | None, bar: Bar, atr_value: float, multiplier: float) -> TrendState:
    """
    Advance the Supertrend state machine by one bar.

    Args:
        state: State after the previous bar (None for the first bar)
        bar: Current bar
        atr_value: ATR for the current bar
        multiplier: ATR multiplier

    Returns:
        State after this bar
    """
    basic_upper = bar.hl2 + multiplier * atr_value
    basic_lower = bar.hl2 - multiplier * atr_value

    if state is None:
        trend = Trend.BEARISH if bar.close <= basic_upper else Trend.BULLISH
        return TrendState(upper=basic_upper, lower=basic_lower, trend=trend, close=bar.close)

    if basic_upper < state.upper or state.close > state.upper:
        upper = basic_upper
    else:
        upper = state.upper

    if basic_lower > state.lower or state.close < state.lower:
        lower = basic_lower
    else:
        lower = state.lower

    if state.trend is Trend.BEARISH:
        trend = Trend.BULLISH if bar.close > upper else Trend.BEARISH
    else:
        trend = Trend.BEARISH if bar.close < lower else Trend.BULLISH

    return TrendState(upper=upper, lower=lower, trend=trend, close=bar.close)


def supertrend(
    bars: Sequence[Bar],
    period: int = 10,
    multiplier: float = 3.0,
) -> list[SupertrendPoint]:
    """
    Calculate Supertrend series.

    Args:
        bars: Bars in time order (most recent last)
        period: ATR period (default 10)
        multiplier: ATR multiplier (default 3)

    Returns:
        List of SupertrendPoint aligned to bars[period:] (the first `period`
        bars are ATR warm-up), or empty list if there is insufficient data
    """
    atrs = atr_values(bars, period)
    if not atrs:
        logger.debug(f"Supertrend({period}) skipped: {len(bars)} bars")
        return []

    result: list[SupertrendPoint] = []
    state: TrendState | None = None

    for bar, atr_value in zip(bars[period:], atrs, strict=True):
        state = step(state, bar, atr_value, multiplier)
        result.append(
            SupertrendPoint(
                time=bar.time,
                value=state.value,
                color=state.trend.color,
                trend=state.trend.value,
            )
        )

    return result
