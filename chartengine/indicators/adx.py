"""
ADX Indicator - Average Directional Index.

Measures trend strength regardless of direction.

Components:
- +DI: Positive Directional Indicator (buying pressure)
- -DI: Negative Directional Indicator (selling pressure)
- ADX: Wilder-smoothed DX (trend strength, 0-100)

Interpretation:
- ADX > 25: Strong trend
- ADX < 20: Weak trend or ranging
- +DI > -DI: Bullish
- -DI > +DI: Bearish
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from chartengine.core.models import Bar, IndicatorPoint

from .atr import true_ranges
from .smoothing import wilder_smooth, wilder_sum

logger = logging.getLogger(__name__)


@dataclass
class ADXResult:
    """
    Result of ADX calculation.

    plus_di / minus_di start at bars[period]; adx starts at the period-th
    +DI point, so it is always shorter.
    """

    adx: list[IndicatorPoint] = field(default_factory=list)
    plus_di: list[IndicatorPoint] = field(default_factory=list)
    minus_di: list[IndicatorPoint] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.plus_di


def directional_movement(prev: Bar, curr: Bar) -> tuple[float, float]:
    """
    (+DM, -DM) between two consecutive bars.

    +DM = upMove if upMove > downMove and upMove > 0, else 0
    -DM = downMove if downMove > upMove and downMove > 0, else 0
    """
    up_move = curr.high - prev.high
    down_move = prev.low - curr.low

    plus_dm = up_move if up_move > down_move and up_move > 0 else 0.0
    minus_dm = down_move if down_move > up_move and down_move > 0 else 0.0
    return plus_dm, minus_dm


def _directional_index(dm: float, tr: float) -> float:
    return (dm / tr) * 100 if tr > 0 else 0.0


def _dx(plus_di: float, minus_di: float) -> float:
    total = plus_di + minus_di
    return (abs(plus_di - minus_di) / total) * 100 if total > 0 else 0.0


def adx(bars: Sequence[Bar], period: int = 14) -> ADXResult:
    """
    Calculate ADX, +DI and -DI series.

    TR, +DM and -DM are each smoothed with Wilder's running sum. DX is then
    smoothed again (seeded with the mean of the first `period` DX values)
    to produce ADX.

    Args:
        bars: Bars in time order (most recent last)
        period: Smoothing period (default 14)

    Returns:
        ADXResult; all series empty if there is insufficient data
    """
    if period <= 0 or len(bars) < period + 1:
        logger.debug(f"ADX({period}) skipped: {len(bars)} bars")
        return ADXResult()

    movements = [directional_movement(prev, curr) for prev, curr in zip(bars, bars[1:])]

    smoothed_tr = wilder_sum(true_ranges(bars), period)
    smoothed_plus = wilder_sum([plus for plus, _ in movements], period)
    smoothed_minus = wilder_sum([minus for _, minus in movements], period)

    result = ADXResult()
    dx_values: list[float] = []

    for bar, tr, plus_dm, minus_dm in zip(
        bars[period:], smoothed_tr, smoothed_plus, smoothed_minus, strict=True
    ):
        plus_di = _directional_index(plus_dm, tr)
        minus_di = _directional_index(minus_dm, tr)

        result.plus_di.append(IndicatorPoint(time=bar.time, value=plus_di))
        result.minus_di.append(IndicatorPoint(time=bar.time, value=minus_di))
        dx_values.append(_dx(plus_di, minus_di))

    # First ADX lands on the period-th +DI point
    adx_values = wilder_smooth(dx_values, period)
    result.adx = [
        IndicatorPoint(time=point.time, value=value)
        for point, value in zip(result.plus_di[period - 1 :], adx_values, strict=True)
    ]

    return result
