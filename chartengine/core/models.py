"""
Core data models for the indicator engine.

Contains dataclasses for:
- Bar: a single OHLC price bar (input contract)
- IndicatorPoint: one value of a derived series
- PointColor: color tags attached to indicator points
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class PointColor(Enum):
    """Color tag for indicator points (rendered by the chart layer)."""

    POSITIVE = "#089981"  # MACD histogram >= 0
    NEGATIVE = "#F23645"  # MACD histogram < 0
    BULLISH = "#26a69a"  # Supertrend uptrend
    BEARISH = "#ef5350"  # Supertrend downtrend


@dataclass(frozen=True)
class Bar:
    """
    A single OHLC bar.

    `time` is a unix timestamp in seconds. Series are expected to be
    non-decreasing in time; low <= open, close <= high is assumed but
    never enforced.
    """

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def hl2(self) -> float:
        """Midpoint of the bar's range."""
        return (self.high + self.low) / 2

    @property
    def is_bullish(self) -> bool:
        """Returns True if close >= open (green bar)."""
        return self.close >= self.open

    @property
    def datetime(self) -> datetime:
        """Bar time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.time, tz=timezone.utc)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "time": self.time,
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "Bar":
        """
        Create from a mapping.

        Accepts either a `time` key (unix seconds) or a `timestamp` key
        (ISO-8601 string; naive values are read as UTC).
        """
        if data.get("time") not in (None, ""):
            ts = int(float(data["time"]))
        else:
            parsed = datetime.fromisoformat(str(data["timestamp"]))
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            ts = int(parsed.timestamp())

        volume = data.get("volume")
        return cls(
            time=ts,
            open=float(data["open"]),
            high=float(data["high"]),
            low=float(data["low"]),
            close=float(data["close"]),
            volume=float(volume) if volume not in (None, "") else 0.0,
        )


@dataclass(frozen=True)
class IndicatorPoint:
    """One point of an indicator series, aligned to an input bar's time."""

    time: int
    value: float
    color: PointColor | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        data: dict = {"time": self.time, "value": self.value}
        if self.color is not None:
            data["color"] = self.color.value
        return data
