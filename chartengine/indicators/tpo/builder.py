"""
TPO Profile Builder.

Builds Market Profiles (TPO charts) from OHLC bars.

Two modes:
- Intraday: bars are grouped into sessions (calendar day or week) and each
  bar is lettered by the time block it falls in
- Composite: daily/weekly/monthly bars are combined into one profile with
  one letter per bar

Usage:
    profiles = calculate_tpo(bars, TPOConfig(block_size="30m"))

    for profile in profiles:
        print(f"{profile.session_key}: POC {profile.poc}")
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from chartengine.core.models import Bar

from .constants import (
    COMPOSITE_SESSION_KEY,
    DEFAULT_BLOCK_SIZE,
    DEFAULT_POOR_THRESHOLD,
    DEFAULT_VALUE_AREA_PERCENT,
    INITIAL_BALANCE_PERIODS,
)
from .indicator import (
    auto_tick_size,
    detect_poor_high_low,
    detect_single_prints,
    get_poc,
    get_value_area,
    is_higher_timeframe,
    parse_block_size,
    parse_time_to_minutes,
    price_levels_between,
    rotation_factor,
    tpo_letter,
)
from .models import DEFAULT_TPO_CONFIG, MarketProfile, TPOConfig, TPOLevel, TPOPeriod

logger = logging.getLogger(__name__)


class TPOProfileBuilder:
    """
    Builds one Market Profile from bars of a single session.

    Each bar marks every tick between its low and high with its period
    letter. A (price, letter) pair is counted once no matter how many bars
    of that period touch the price.
    """

    def __init__(
        self,
        session_key: str,
        tick_size: float,
        block_size: str | int = DEFAULT_BLOCK_SIZE,
        value_area_percent: float = DEFAULT_VALUE_AREA_PERCENT,
        poor_threshold: int = DEFAULT_POOR_THRESHOLD,
        track_initial_balance: bool = True,
    ):
        """
        Initialize the builder.

        Args:
            session_key: Label for the session (date, week start or "composite")
            tick_size: Price bucket size
            block_size: Period length ("30m", "1h" or minutes)
            value_area_percent: Share of TPOs the value area must hold
            poor_threshold: Max TPOs at an extreme for it to count as poor
            track_initial_balance: Derive IB from periods A and B as bars are
                added (off for composite profiles, which set it explicitly)
        """
        self.session_key = session_key
        self.tick_size = tick_size
        self.block_size = block_size
        self.block_size_minutes = parse_block_size(block_size)
        self.value_area_percent = value_area_percent
        self.poor_threshold = poor_threshold
        self.track_initial_balance = track_initial_balance

        # Internal state
        self._levels: dict[float, TPOLevel] = {}
        self._periods: dict[str, TPOPeriod] = {}
        self._first_bar: Bar | None = None
        self._last_bar: Bar | None = None
        self._ib_high: float | None = None
        self._ib_low: float | None = None

    def add_bar(self, bar: Bar, period_index: int) -> None:
        """
        Add a bar to the profile.

        Args:
            bar: Bar to add (bars must arrive in time order)
            period_index: Time block the bar falls in (0 = A)
        """
        if self._first_bar is None:
            self._first_bar = bar
        self._last_bar = bar

        letter = tpo_letter(period_index)
        period = self._periods.get(letter)
        if period is None:
            self._periods[letter] = TPOPeriod(letter=letter, start_time=bar.time, end_time=bar.time)
        else:
            period.end_time = bar.time

        in_initial_balance = self.track_initial_balance and period_index < INITIAL_BALANCE_PERIODS

        for price in price_levels_between(bar.low, bar.high, self.tick_size):
            level = self._levels.get(price)
            if level is None:
                level = self._levels[price] = TPOLevel(price=price)
            level.add_letter(letter)

            if in_initial_balance:
                level.is_initial_balance = True
                self._ib_high = price if self._ib_high is None else max(self._ib_high, price)
                self._ib_low = price if self._ib_low is None else min(self._ib_low, price)

    def set_initial_balance(self, high: float, low: float) -> None:
        """Set the Initial Balance range explicitly."""
        self._ib_high = high
        self._ib_low = low

    def build(self) -> MarketProfile | None:
        """
        Compute the profile and its statistics.

        Returns:
            MarketProfile, or None if no bar touched any price level
        """
        if not self._levels or self._first_bar is None or self._last_bar is None:
            return None

        levels = dict(sorted(self._levels.items()))
        periods = list(self._periods.values())

        range_high = max(levels)
        range_low = min(levels)

        poc = get_poc(levels)
        if poc is None:
            return None
        val, vah = get_value_area(levels, poc, self.tick_size, self.value_area_percent)

        # No bar in periods A/B: fall back to the full range
        ib_high = self._ib_high if self._ib_high is not None else range_high
        ib_low = self._ib_low if self._ib_low is not None else range_low

        poor_high, poor_low = detect_poor_high_low(levels, range_high, range_low, self.poor_threshold)

        return MarketProfile(
            session_key=self.session_key,
            session_start=self._first_bar.time,
            session_end=self._last_bar.time,
            tick_size=self.tick_size,
            block_size_minutes=self.block_size_minutes,
            block_size=self.block_size,
            periods=periods,
            price_levels=levels,
            poc=poc,
            vah=vah,
            val=val,
            ib_high=ib_high,
            ib_low=ib_low,
            range_high=range_high,
            range_low=range_low,
            total_tpos=sum(level.tpo_count for level in levels.values()),
            open_price=self._first_bar.open,
            close_price=self._last_bar.close,
            rotation_factor=rotation_factor(periods, levels),
            poor_high=poor_high,
            poor_low=poor_low,
            single_prints=detect_single_prints(levels, self.tick_size),
            midpoint=(range_high + range_low) / 2,
        )

    @property
    def level_count(self) -> int:
        """Number of price levels touched so far."""
        return len(self._levels)

    @property
    def is_empty(self) -> bool:
        return not self._levels


def resolve_tick_size(bars: Sequence[Bar], tick_size: float | str) -> float:
    """Explicit positive tick size, or the auto tick size for "auto" / <= 0."""
    if isinstance(tick_size, str) or tick_size <= 0:
        return auto_tick_size(bars)
    return float(tick_size)


def _local_time(timestamp: int, tz: tzinfo) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=tz)


def minutes_from_midnight(timestamp: int, tz: tzinfo) -> int:
    """Minutes since local midnight for a unix timestamp."""
    local = _local_time(timestamp, tz)
    return local.hour * 60 + local.minute


def session_key_for(timestamp: int, session_type: str, tz: tzinfo) -> str:
    """
    Session key for a bar time.

    "daily" -> local calendar date; "weekly" -> date of the Sunday that
    starts the week.
    """
    day = _local_time(timestamp, tz).date()
    if session_type == "weekly":
        day -= timedelta(days=(day.weekday() + 1) % 7)
    return day.isoformat()


def group_sessions(bars: Sequence[Bar], session_type: str, tz: tzinfo) -> dict[str, list[Bar]]:
    """Group bars by session key, each session sorted by time."""
    sessions: dict[str, list[Bar]] = {}
    for bar in bars:
        sessions.setdefault(session_key_for(bar.time, session_type, tz), []).append(bar)
    for session_bars in sessions.values():
        session_bars.sort(key=lambda b: b.time)
    return sessions


def _composite_profile(bars: Sequence[Bar], tick_size: float, config: TPOConfig) -> list[MarketProfile]:
    """One profile over all bars, one letter per bar."""
    builder = TPOProfileBuilder(
        session_key=COMPOSITE_SESSION_KEY,
        tick_size=tick_size,
        block_size=config.block_size,
        value_area_percent=config.value_area_percent,
        poor_threshold=config.poor_threshold,
        track_initial_balance=False,
    )
    for index, bar in enumerate(bars):
        builder.add_bar(bar, index)
    builder.set_initial_balance(high=bars[0].high, low=bars[0].low)

    profile = builder.build()
    return [profile] if profile else []


def calculate_tpo(bars: Sequence[Bar], config: TPOConfig = DEFAULT_TPO_CONFIG) -> list[MarketProfile]:
    """
    Calculate TPO profiles.

    Args:
        bars: Bars in time order
        config: Profile options

    Returns:
        List of MarketProfile, one per session, ascending by session_start;
        empty for empty input
    """
    if not isinstance(bars, Sequence) or not bars:
        return []

    tick_size = resolve_tick_size(bars, config.tick_size)

    if is_higher_timeframe(bars, config.interval):
        logger.debug(f"TPO composite mode: {len(bars)} bars, tick {tick_size}")
        return _composite_profile(bars, tick_size, config)

    tz = ZoneInfo(config.timezone)
    block_minutes = parse_block_size(config.block_size)
    start_minutes = parse_time_to_minutes(config.session_start)
    end_minutes = parse_time_to_minutes(config.session_end)

    profiles: list[MarketProfile] = []

    for session_key, session_bars in group_sessions(bars, config.session_type, tz).items():
        builder = TPOProfileBuilder(
            session_key=session_key,
            tick_size=tick_size,
            block_size=config.block_size,
            value_area_percent=config.value_area_percent,
            poor_threshold=config.poor_threshold,
        )

        for bar in session_bars:
            minutes = minutes_from_midnight(bar.time, tz)
            if config.all_hours:
                minutes_into_session = minutes
            elif start_minutes <= minutes < end_minutes:
                minutes_into_session = minutes - start_minutes
            else:
                continue
            builder.add_bar(bar, minutes_into_session // block_minutes)

        profile = builder.build()
        if profile is None:
            logger.debug(f"TPO session {session_key}: no bars inside market hours")
            continue
        profiles.append(profile)

    profiles.sort(key=lambda p: p.session_start)
    logger.debug(f"TPO built {len(profiles)} profiles from {len(bars)} bars, tick {tick_size}")
    return profiles
