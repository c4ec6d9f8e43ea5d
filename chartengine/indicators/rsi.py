"""
RSI Indicator - Relative Strength Index calculation.

Measures the speed and magnitude of recent price changes
to evaluate overbought or oversold conditions.
"""

import logging
from collections.abc import Sequence

from chartengine.core.models import Bar, IndicatorPoint

from .smoothing import wilder_smooth

logger = logging.getLogger(__name__)

# RS used when the average loss is zero (pure up-move window)
RS_CAP = 100.0


def rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    """
    RSI = 100 - (100 / (1 + RS)), RS = avg_gain / avg_loss.

    When avg_loss is 0 the ratio is capped at RS_CAP instead of dividing.
    """
    rs = RS_CAP if avg_loss == 0 else avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(bars: Sequence[Bar], period: int = 14) -> list[IndicatorPoint]:
    """
    Calculate RSI series using Wilder's smoothing.

    Gains and losses come from close-to-close changes. The first average is
    the SMA of the first `period` changes, later averages use Wilder's
    smoothing. Point j is aligned to bars[period + j].

    Args:
        bars: Bars in time order (most recent last), needs period + 1 minimum
        period: Lookback period (default 14)

    Returns:
        List of IndicatorPoint with values in [0, 100], or empty list if
        there is insufficient data
    """
    if period <= 0 or len(bars) < period + 1:
        logger.debug(f"RSI({period}) skipped: {len(bars)} bars")
        return []

    changes = [curr.close - prev.close for prev, curr in zip(bars, bars[1:])]
    gains = [max(change, 0.0) for change in changes]
    losses = [max(-change, 0.0) for change in changes]

    avg_gains = wilder_smooth(gains, period)
    avg_losses = wilder_smooth(losses, period)

    return [
        IndicatorPoint(time=bar.time, value=rsi_from_averages(gain, loss))
        for bar, gain, loss in zip(bars[period:], avg_gains, avg_losses, strict=True)
    ]
