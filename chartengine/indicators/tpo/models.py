"""
TPO Profile Data Models.

Core data structures for Market Profile analysis:
- TPOConfig: Options for building profiles
- TPOPeriod: One time bucket (letter) of a session
- TPOLevel: TPO data at a single quantized price
- MarketProfile: Complete profile for a session
"""

from dataclasses import dataclass, field
from typing import Literal

from .constants import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_POOR_THRESHOLD,
    DEFAULT_VALUE_AREA_PERCENT,
)


@dataclass(frozen=True)
class TPOConfig:
    """
    Options for TPO profile calculation.

    tick_size: "auto" or a positive price increment (non-positive means auto)
    block_size: "5m".."4h" or minutes as int
    session_type: group intraday bars by calendar day or by week (Sunday start)
    session_start / session_end: "HH:MM" market hours, only used when
        all_hours is False
    all_hours: include every bar and letter periods from midnight (24x7 markets)
    interval: chart interval, e.g. "15m" or "1D"; D/W/M selects composite mode
    timezone: IANA zone used for session days and minutes-from-midnight
    """

    tick_size: float | Literal["auto"] = "auto"
    block_size: str | int = DEFAULT_BLOCK_SIZE
    session_type: Literal["daily", "weekly"] = "daily"
    session_start: str = "09:15"  # NSE market open
    session_end: str = "15:30"  # NSE market close
    value_area_percent: float = DEFAULT_VALUE_AREA_PERCENT
    all_hours: bool = True
    poor_threshold: int = DEFAULT_POOR_THRESHOLD
    interval: str | None = None
    timezone: str = "UTC"


DEFAULT_TPO_CONFIG = TPOConfig()


@dataclass
class TPOPeriod:
    """A single lettered time bucket inside a session."""

    letter: str
    start_time: int
    end_time: int

    def to_dict(self) -> dict:
        return {"letter": self.letter, "start_time": self.start_time, "end_time": self.end_time}


@dataclass
class TPOLevel:
    """
    TPO data at a single price level.

    tpo_count is the number of distinct letters that touched this price.
    """

    price: float
    tpo_count: int = 0
    letters: set[str] = field(default_factory=set)
    is_initial_balance: bool = False

    def add_letter(self, letter: str) -> bool:
        """
        Mark this price as touched by a period letter.

        Returns:
            True if the letter was new (tpo_count incremented)
        """
        if letter in self.letters:
            return False
        self.letters.add(letter)
        self.tpo_count += 1
        return True

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "price": self.price,
            "tpo_count": self.tpo_count,
            "letters": sorted(self.letters),
            "is_initial_balance": self.is_initial_balance,
        }


@dataclass
class MarketProfile:
    """
    Complete TPO profile for one session.

    Built once per call from the full bar series; never updated in place.
    """

    session_key: str
    session_start: int
    session_end: int
    tick_size: float
    block_size_minutes: int
    block_size: str | int = DEFAULT_BLOCK_SIZE
    periods: list[TPOPeriod] = field(default_factory=list)
    price_levels: dict[float, TPOLevel] = field(default_factory=dict)
    poc: float = 0.0
    vah: float = 0.0
    val: float = 0.0
    ib_high: float = 0.0
    ib_low: float = 0.0
    range_high: float = 0.0
    range_low: float = 0.0
    total_tpos: int = 0
    open_price: float = 0.0
    close_price: float = 0.0
    rotation_factor: int = 0
    poor_high: float | None = None
    poor_low: float | None = None
    single_prints: list[float] = field(default_factory=list)
    midpoint: float = 0.0

    @property
    def level_count(self) -> int:
        """Number of price levels in the profile."""
        return len(self.price_levels)

    @property
    def period_count(self) -> int:
        return len(self.periods)

    @property
    def is_empty(self) -> bool:
        return not self.price_levels

    def get_tpo_count(self, price: float) -> int:
        """TPO count at an exact quantized price (0 if untouched)."""
        level = self.price_levels.get(price)
        return level.tpo_count if level else 0

    def get_sorted_levels(self) -> list[TPOLevel]:
        """Levels in ascending price order."""
        return [self.price_levels[p] for p in sorted(self.price_levels)]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "session_key": self.session_key,
            "session_start": self.session_start,
            "session_end": self.session_end,
            "tick_size": self.tick_size,
            "block_size": self.block_size,
            "block_size_minutes": self.block_size_minutes,
            "periods": [p.to_dict() for p in self.periods],
            "price_levels": {str(k): v.to_dict() for k, v in sorted(self.price_levels.items())},
            "poc": self.poc,
            "vah": self.vah,
            "val": self.val,
            "ib_high": self.ib_high,
            "ib_low": self.ib_low,
            "range_high": self.range_high,
            "range_low": self.range_low,
            "total_tpos": self.total_tpos,
            "open_price": self.open_price,
            "close_price": self.close_price,
            "rotation_factor": self.rotation_factor,
            "poor_high": self.poor_high,
            "poor_low": self.poor_low,
            "single_prints": list(self.single_prints),
            "midpoint": self.midpoint,
        }
