"""
TPO Profile Indicator Functions.

Pure functions for building and analyzing Market Profile data.
These are stateless helpers used by the profile builder and by callers
that want summary statistics or a render-ready view of a profile.

Functions:
- auto_tick_size: Pick a legible tick size from the price level
- quantize_price / price_levels_between: Price bucketing
- tpo_letter: Period index -> letter (A..Z, a..z, AA..)
- get_poc: Point of Control (most TPOs, lowest price on ties)
- get_value_area: Range holding value_area_percent of TPOs
- rotation_factor: Net period-over-period range extension
- detect_poor_high_low / detect_single_prints: Structural features
- get_tpo_stats / tpo_to_render_data: Summary and display helpers
"""

import math
import re
from collections.abc import Iterable, Mapping, Sequence

from chartengine.core.models import Bar

from .constants import (
    BLOCK_SIZE_MAP,
    DEFAULT_BLOCK_SIZE,
    DEFAULT_POOR_THRESHOLD,
    DEFAULT_VALUE_AREA_PERCENT,
    MAX_LEVELS,
    MAX_LEVELS_WIDE,
    MIN_LEVELS,
    MIN_TICK_SIZE,
    PRICE_DECIMALS,
    SECONDS_PER_DAY,
    TICK_SIZE_BANDS,
    TICK_SIZE_CEILING,
)
from .models import MarketProfile, TPOLevel, TPOPeriod

_HIGHER_TIMEFRAME = re.compile(r"^[0-9]*[DWM]$")


def parse_block_size(block_size: str | int) -> int:
    """
    Convert a block size ("30m", "1h", ...) or a number of minutes to minutes.

    Unknown strings and non-positive numbers fall back to the default block.
    """
    if isinstance(block_size, int) and not isinstance(block_size, bool):
        return block_size if block_size > 0 else BLOCK_SIZE_MAP[DEFAULT_BLOCK_SIZE]
    return BLOCK_SIZE_MAP.get(block_size, BLOCK_SIZE_MAP[DEFAULT_BLOCK_SIZE])


def parse_time_to_minutes(time_str: str) -> int:
    """Parse "HH:MM" to minutes from midnight."""
    hours, minutes = time_str.split(":")
    return int(hours) * 60 + int(minutes)


def is_higher_timeframe(bars: Sequence[Bar], interval: str | None = None) -> bool:
    """
    True for daily/weekly/monthly data.

    An explicit interval wins ("1D", "W", "3M"...); otherwise the gap between
    the first two bars decides (>= 1 day).
    """
    if interval:
        return bool(_HIGHER_TIMEFRAME.match(interval))
    if len(bars) >= 2:
        return bars[1].time - bars[0].time >= SECONDS_PER_DAY
    return False


def auto_tick_size(bars: Sequence[Bar]) -> float:
    """
    Auto-calculate a tick size from the price level and range.

    A base tick is picked from the average of the lowest low and highest
    high, then widened or narrowed so the profile has a readable number of
    levels (roughly 20-100).

    Args:
        bars: Bars the profile will be built from

    Returns:
        Tick size (>= 0.01), or 1.0 for an empty series
    """
    if not bars:
        return 1.0

    min_price = min(bar.low for bar in bars)
    max_price = max(bar.high for bar in bars)

    avg_price = (min_price + max_price) / 2
    price_range = max_price - min_price

    tick_size = next(
        (tick for bound, tick in TICK_SIZE_BANDS if avg_price < bound),
        TICK_SIZE_CEILING,
    )

    estimated_levels = price_range / tick_size
    if estimated_levels > MAX_LEVELS_WIDE:
        tick_size *= 2
    elif estimated_levels > MAX_LEVELS:
        tick_size *= 1.5
    elif estimated_levels < MIN_LEVELS and tick_size > TICK_SIZE_BANDS[0][1]:
        tick_size /= 2

    return max(MIN_TICK_SIZE, tick_size)


def _tick_index(price: float, tick_size: float) -> int:
    # Half-up rounding (round() would use banker's rounding)
    return math.floor(price / tick_size + 0.5)


def _index_price(index: int, tick_size: float) -> float:
    return round(index * tick_size, PRICE_DECIMALS)


def quantize_price(price: float, tick_size: float) -> float:
    """Round a price to the nearest multiple of tick_size."""
    return _index_price(_tick_index(price, tick_size), tick_size)


def price_levels_between(low: float, high: float, tick_size: float) -> list[float]:
    """All quantized prices from low to high inclusive, ascending."""
    first = _tick_index(low, tick_size)
    last = _tick_index(high, tick_size)
    return [_index_price(i, tick_size) for i in range(first, last + 1)]


def tpo_letter(period_index: int) -> str:
    """
    Letter for a period index.

    A-Z (0-25), a-z (26-51), then AA, AB, ... ZZ, then AAA, ... so a letter
    is never reused within a session. Negative indices map to "?".
    """
    if period_index < 0:
        return "?"
    if period_index < 26:
        return chr(ord("A") + period_index)
    if period_index < 52:
        return chr(ord("a") + period_index - 26)

    offset = period_index - 52
    width = 2
    while offset >= 26**width:
        offset -= 26**width
        width += 1

    chars = []
    for _ in range(width):
        offset, rem = divmod(offset, 26)
        chars.append(chr(ord("A") + rem))
    return "".join(reversed(chars))


def get_poc(levels: Mapping[float, TPOLevel]) -> float | None:
    """
    Point of Control - price level with the most TPOs.

    Prices are scanned in ascending order and the first maximum wins, so
    ties resolve to the lowest price.

    Returns:
        POC price, or None if there are no levels
    """
    poc = None
    max_count = 0
    for price in sorted(levels):
        if levels[price].tpo_count > max_count:
            max_count = levels[price].tpo_count
            poc = price
    return poc


def get_value_area(
    levels: Mapping[float, TPOLevel],
    poc: float,
    tick_size: float,
    value_area_percent: float = DEFAULT_VALUE_AREA_PERCENT,
) -> tuple[float, float]:
    """
    Value Area - price range containing value_area_percent of all TPOs.

    Algorithm:
    1. Start at POC
    2. Look one tick above VAH and one tick below VAL
    3. Add the side with more TPOs (above wins ties)
    4. Stop at the target or when both neighbours are empty

    Returns:
        (val, vah); (poc, poc) if there are no levels
    """
    if not levels:
        return (poc, poc)

    total_tpos = sum(level.tpo_count for level in levels.values())
    target_tpos = total_tpos * (value_area_percent / 100)

    def count_at(price: float) -> int:
        level = levels.get(price)
        return level.tpo_count if level else 0

    vah = val = poc
    included = count_at(poc)

    while included < target_tpos:
        price_above = quantize_price(vah + tick_size, tick_size)
        price_below = quantize_price(val - tick_size, tick_size)

        tpos_above = count_at(price_above)
        tpos_below = count_at(price_below)

        if tpos_above == 0 and tpos_below == 0:
            break

        if tpos_above >= tpos_below:
            vah = price_above
            included += tpos_above
        else:
            val = price_below
            included += tpos_below

    return (val, vah)


def period_ranges(levels: Mapping[float, TPOLevel]) -> dict[str, tuple[float, float]]:
    """(low, high) price touched by each letter."""
    ranges: dict[str, tuple[float, float]] = {}
    for price, level in levels.items():
        for letter in level.letters:
            low, high = ranges.get(letter, (price, price))
            ranges[letter] = (min(low, price), max(high, price))
    return ranges


def get_period_range(profile: MarketProfile, letter: str) -> tuple[float, float] | None:
    """(low, high) price range of one period, or None if it touched nothing."""
    return period_ranges(profile.price_levels).get(letter)


def rotation_factor(periods: Sequence[TPOPeriod], levels: Mapping[float, TPOLevel]) -> int:
    """
    Rotation Factor.

    For each period after the first: +1 if its high is above the previous
    period's high, -1 if its low is below the previous period's low.
    """
    ranges = period_ranges(levels)
    rf = 0
    for prev, curr in zip(periods, periods[1:]):
        prev_range = ranges.get(prev.letter)
        curr_range = ranges.get(curr.letter)
        if prev_range is None or curr_range is None:
            continue
        if curr_range[1] > prev_range[1]:
            rf += 1
        if curr_range[0] < prev_range[0]:
            rf -= 1
    return rf


def detect_poor_high_low(
    levels: Mapping[float, TPOLevel],
    range_high: float,
    range_low: float,
    threshold: int = DEFAULT_POOR_THRESHOLD,
) -> tuple[float | None, float | None]:
    """
    Poor High / Poor Low.

    A session extreme with few TPOs (<= threshold) is a weak, unfinished
    auction likely to be revisited.

    Returns:
        (poor_high, poor_low), each None when the extreme is not poor
    """
    high_level = levels.get(range_high)
    low_level = levels.get(range_low)

    poor_high = range_high if high_level and high_level.tpo_count <= threshold else None
    poor_low = range_low if low_level and low_level.tpo_count <= threshold else None
    return (poor_high, poor_low)


def detect_single_prints(levels: Mapping[float, TPOLevel], tick_size: float) -> list[float]:
    """
    Single Prints - levels with exactly one TPO whose neighbours one tick
    above and below both have more than one.

    Indicates price moved quickly through that zone.
    """
    single_prints = []
    for price in sorted(levels):
        if levels[price].tpo_count != 1:
            continue
        above = levels.get(quantize_price(price + tick_size, tick_size))
        below = levels.get(quantize_price(price - tick_size, tick_size))
        if above and below and above.tpo_count > 1 and below.tpo_count > 1:
            single_prints.append(price)
    return single_prints


def count_tpos_relative_to_poc(levels: Mapping[float, TPOLevel], poc: float) -> tuple[int, int]:
    """(TPOs above POC, TPOs below POC)."""
    above = sum(level.tpo_count for price, level in levels.items() if price > poc)
    below = sum(level.tpo_count for price, level in levels.items() if price < poc)
    return (above, below)


def get_tpo_stats(profile: MarketProfile | None) -> dict | None:
    """
    Get summary statistics for a TPO profile.

    Args:
        profile: MarketProfile to analyze

    Returns:
        Dictionary with profile statistics, or None for no profile
    """
    if profile is None:
        return None

    tpo_above_poc, tpo_below_poc = count_tpos_relative_to_poc(profile.price_levels, profile.poc)

    return {
        # Core stats
        "poc": profile.poc,
        "vah": profile.vah,
        "val": profile.val,
        "ib_high": profile.ib_high,
        "ib_low": profile.ib_low,
        "range_high": profile.range_high,
        "range_low": profile.range_low,
        # Calculated ranges
        "hl_range": profile.range_high - profile.range_low,
        "va_range": profile.vah - profile.val,
        "ib_range": profile.ib_high - profile.ib_low,
        # TPO counts
        "total_tpos": profile.total_tpos,
        "tpo_above_poc": tpo_above_poc,
        "tpo_below_poc": tpo_below_poc,
        "period_count": profile.period_count,
        # Structure
        "rotation_factor": profile.rotation_factor,
        "midpoint": profile.midpoint,
        "open_price": profile.open_price,
        "close_price": profile.close_price,
        "poor_high": profile.poor_high,
        "poor_low": profile.poor_low,
        "single_print_count": len(profile.single_prints),
        # Session info
        "session_key": profile.session_key,
        "block_size": profile.block_size,
        "tick_size": profile.tick_size,
    }


def tpo_to_render_data(
    profile: MarketProfile | None,
    show_letters: bool = True,
    max_letters_per_row: int = 20,
) -> list[dict]:
    """
    Flatten a profile into display rows, highest price first.

    Each row carries the letters at that price (in period order) and flags
    for POC / value area membership.
    """
    if profile is None:
        return []

    letter_order = {period.letter: i for i, period in enumerate(profile.periods)}

    def ordered(letters: Iterable[str]) -> list[str]:
        return sorted(letters, key=lambda letter: (letter_order.get(letter, len(letter_order)), letter))

    rows = []
    for price in sorted(profile.price_levels, reverse=True):
        level = profile.price_levels[price]
        rows.append(
            {
                "price": price,
                "tpo_count": level.tpo_count,
                "letters": ordered(level.letters)[:max_letters_per_row] if show_letters else [],
                "is_initial_balance": level.is_initial_balance,
                "is_poc": price == profile.poc,
                "is_value_area": profile.val <= price <= profile.vah,
                "is_vah": price == profile.vah,
                "is_val": price == profile.val,
            }
        )
    return rows
