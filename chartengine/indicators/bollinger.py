"""
Bollinger Bands Indicator.

Shows price volatility using a middle SMA and upper/lower bands placed
a number of population standard deviations away from it.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from chartengine.core.models import Bar, IndicatorPoint

logger = logging.getLogger(__name__)


@dataclass
class BollingerResult:
    """Upper, middle and lower bands, all aligned to the same bar times."""

    upper: list[IndicatorPoint] = field(default_factory=list)
    middle: list[IndicatorPoint] = field(default_factory=list)
    lower: list[IndicatorPoint] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.middle

    def bandwidth(self) -> list[IndicatorPoint]:
        """(upper - lower) / middle for each point with a non-zero middle."""
        return [
            IndicatorPoint(time=m.time, value=(u.value - lo.value) / m.value)
            for u, m, lo in zip(self.upper, self.middle, self.lower)
            if m.value != 0
        ]


def bollinger_bands(
    bars: Sequence[Bar],
    period: int = 20,
    std_dev: float = 2.0,
) -> BollingerResult:
    """
    Calculate Bollinger Bands.

    middle = SMA(close, period)
    upper  = middle + std_dev * sd
    lower  = middle - std_dev * sd

    where sd is the population standard deviation of the same window.

    Args:
        bars: Bars in time order (most recent last)
        period: SMA period (default 20)
        std_dev: Number of standard deviations (default 2)

    Returns:
        BollingerResult; empty if there is insufficient data
    """
    if period <= 0 or len(bars) < period:
        logger.debug(f"Bollinger({period}) skipped: {len(bars)} bars")
        return BollingerResult()

    closes = [bar.close for bar in bars]
    result = BollingerResult()

    for i in range(period - 1, len(bars)):
        window = closes[i - period + 1 : i + 1]
        mean = sum(window) / period
        sd = math.sqrt(sum((c - mean) ** 2 for c in window) / period)

        time = bars[i].time
        result.middle.append(IndicatorPoint(time=time, value=mean))
        result.upper.append(IndicatorPoint(time=time, value=mean + std_dev * sd))
        result.lower.append(IndicatorPoint(time=time, value=mean - std_dev * sd))

    return result
