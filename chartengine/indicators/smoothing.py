"""
Wilder Smoothing - shared recurrence for RSI, ATR and ADX.

Both helpers are folds over a list of raw per-bar quantities: the seed is
taken from the first `period` values, and each later value updates the
running accumulator. Output index 0 is the seed, so the result has
len(raw) - period + 1 entries.
"""

from collections.abc import Sequence
from itertools import accumulate


def wilder_smooth(raw: Sequence[float], period: int) -> list[float]:
    """
    Wilder's moving average.

    seed = mean(raw[:period])
    next = (prev * (period - 1) + value) / period

    Args:
        raw: Raw per-bar quantities (gains, losses, true ranges, DX...)
        period: Smoothing period

    Returns:
        Smoothed series, or empty list if fewer than `period` values
    """
    if period <= 0 or len(raw) < period:
        return []

    seed = sum(raw[:period]) / period
    return list(
        accumulate(
            raw[period:],
            lambda prev, value: (prev * (period - 1) + value) / period,
            initial=seed,
        )
    )


def wilder_sum(raw: Sequence[float], period: int) -> list[float]:
    """
    Running-sum form of Wilder smoothing.

    seed = sum(raw[:period])
    next = prev - prev / period + value

    This is `period` times wilder_smooth; ADX uses it for TR and +/-DM
    since only their ratios matter.
    """
    if period <= 0 or len(raw) < period:
        return []

    seed = sum(raw[:period])
    return list(
        accumulate(
            raw[period:],
            lambda prev, value: prev - prev / period + value,
            initial=seed,
        )
    )
