"""
Bar Data Source - loads OHLC bars from CSV or Parquet files.

Rows need open/high/low/close and either a `time` column (unix seconds) or a
`timestamp` column (ISO-8601). `volume` is optional.
"""

import csv
import logging
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pyarrow.parquet as pq

from chartengine.core.models import Bar

logger = logging.getLogger(__name__)

PARQUET_SUFFIXES = (".parquet", ".pq")


class BarSource:
    """
    Reads a bar file into memory, sorted by time.

    Usage:
        source = BarSource("data/NIFTY_5m.csv")
        values = rsi(source.bars, 14)
    """

    def __init__(self, filepath: str | Path):
        """
        Initialize with path to a CSV or Parquet file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file holds no rows or a row is malformed
        """
        self.filepath = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(f"Bar data file not found: {filepath}")

        self.symbol = self.filepath.stem.split("_")[0]
        self._bars: list[Bar] = []
        self._load_data()

    @property
    def is_parquet(self) -> bool:
        return self.filepath.suffix.lower() in PARQUET_SUFFIXES

    def _read_rows(self) -> list[dict]:
        if self.is_parquet:
            return pq.read_table(self.filepath).to_pylist()
        with self.filepath.open(newline="") as f:
            return list(csv.DictReader(f))

    def _load_data(self) -> None:
        """Load rows into memory as Bars."""
        rows = self._read_rows()
        if not rows:
            raise ValueError(f"No data found in {self.filepath}")

        bars = []
        for line, row in enumerate(rows, start=1):
            # Parquet timestamp columns come back as datetime objects
            if isinstance(row.get("timestamp"), datetime):
                row = {**row, "timestamp": row["timestamp"].isoformat()}
            try:
                bars.append(Bar.from_dict(row))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid bar at row {line} in {self.filepath}: {e}") from e

        self._bars = sorted(bars, key=lambda b: b.time)
        logger.info(f"Loaded {len(self._bars)} bars from {self.filepath}")

    @property
    def bars(self) -> list[Bar]:
        """Bars in time order (a copy)."""
        return list(self._bars)

    @property
    def start_time(self) -> datetime:
        """Get the time of the first bar."""
        return self._bars[0].datetime

    @property
    def end_time(self) -> datetime:
        """Get the time of the last bar."""
        return self._bars[-1].datetime

    @property
    def bar_count(self) -> int:
        return len(self._bars)

    def stream(self) -> Iterator[Bar]:
        """Yield bars in chronological order."""
        yield from self._bars

    def __len__(self) -> int:
        return len(self._bars)

    def __repr__(self) -> str:
        return (
            f"BarSource({self.symbol}, "
            f"{self.bar_count} bars, "
            f"{self.start_time.strftime('%Y-%m-%d %H:%M')} to "
            f"{self.end_time.strftime('%Y-%m-%d %H:%M')})"
        )


def load_bars(filepath: str | Path) -> list[Bar]:
    """Load bars from a CSV or Parquet file, sorted by time."""
    return BarSource(filepath).bars
