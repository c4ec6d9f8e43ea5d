"""Bar loading from CSV / Parquet files."""

from .source import BarSource, load_bars

__all__ = ["BarSource", "load_bars"]
