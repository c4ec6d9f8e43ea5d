"""
Unit tests for bar loading and the Bar model.
"""

from datetime import datetime, timezone

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from chartengine.core.models import Bar
from chartengine.data import BarSource, load_bars

CSV_WITH_TIME = """time,open,high,low,close,volume
1704067500,101,103,100,102,20
1704067200,100,102,99,101,10
"""

CSV_WITH_TIMESTAMP = """timestamp,open,high,low,close
2024-01-01T00:00:00,100,102,99,101
2024-01-01T00:05:00+00:00,101,103,100,102
"""


class TestBarModel:
    """Tests for Bar helpers."""

    def test_hl2_and_direction(self) -> None:
        """Test bar midpoint and direction."""
        bar = Bar(time=0, open=10, high=12, low=8, close=11)
        assert bar.hl2 == 10.0
        assert bar.is_bullish

    def test_from_dict_time(self) -> None:
        """Test parsing an epoch time field."""
        bar = Bar.from_dict({"time": "60", "open": "1", "high": "2", "low": "0.5", "close": "1.5"})
        assert bar == Bar(time=60, open=1.0, high=2.0, low=0.5, close=1.5, volume=0.0)

    def test_from_dict_naive_timestamp_is_utc(self) -> None:
        """Test that a naive ISO timestamp is read as UTC."""
        bar = Bar.from_dict({"timestamp": "2024-01-01T00:00:00", "open": 1, "high": 1, "low": 1, "close": 1})
        assert bar.time == int(datetime(2024, 1, 1, tzinfo=timezone.utc).timestamp())

    def test_round_trip_dict(self) -> None:
        """Test bar serialization."""
        bar = Bar(time=60, open=1.0, high=2.0, low=0.5, close=1.5, volume=3.0)
        assert Bar.from_dict(bar.to_dict()) == bar


class TestBarSource:
    """Tests for CSV / Parquet loading."""

    def test_csv_sorted_by_time(self, tmp_path) -> None:
        """Test that CSV bars are sorted by time."""
        path = tmp_path / "NIFTY_5m.csv"
        path.write_text(CSV_WITH_TIME)
        source = BarSource(path)
        assert len(source) == 2
        assert [b.time for b in source.bars] == [1704067200, 1704067500]
        assert source.bars[1].volume == 20.0
        assert source.symbol == "NIFTY"

    def test_csv_iso_timestamps(self, tmp_path) -> None:
        """Test CSV files with ISO timestamps."""
        path = tmp_path / "bars.csv"
        path.write_text(CSV_WITH_TIMESTAMP)
        bars = load_bars(path)
        assert bars[1].time - bars[0].time == 300
        assert bars[0].volume == 0.0

    def test_parquet(self, tmp_path) -> None:
        """Test loading a Parquet file."""
        path = tmp_path / "bars.parquet"
        table = pa.table(
            {
                "time": [1704067200, 1704067500],
                "open": [100.0, 101.0],
                "high": [102.0, 103.0],
                "low": [99.0, 100.0],
                "close": [101.0, 102.0],
                "volume": [10.0, 20.0],
            }
        )
        pq.write_table(table, path)
        bars = load_bars(path)
        assert bars[0] == Bar(time=1704067200, open=100.0, high=102.0, low=99.0, close=101.0, volume=10.0)

    def test_parquet_timestamp_column(self, tmp_path) -> None:
        """Test Parquet files with a timestamp column."""
        path = tmp_path / "bars.parquet"
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        table = pa.table(
            {
                "timestamp": pa.array([start], type=pa.timestamp("s", tz="UTC")),
                "open": [1.0],
                "high": [2.0],
                "low": [0.5],
                "close": [1.5],
            }
        )
        pq.write_table(table, path)
        assert load_bars(path)[0].time == int(start.timestamp())

    def test_stream_and_repr(self, tmp_path) -> None:
        """Test streaming bars and the source repr."""
        path = tmp_path / "BTC_1m.csv"
        path.write_text(CSV_WITH_TIME)
        source = BarSource(path)
        assert list(source.stream()) == source.bars
        assert "2 bars" in repr(source)
        assert source.start_time < source.end_time

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing file."""
        with pytest.raises(FileNotFoundError):
            BarSource(tmp_path / "nope.csv")

    def test_empty_file(self, tmp_path) -> None:
        """Test a file with no rows."""
        path = tmp_path / "empty.csv"
        path.write_text("time,open,high,low,close\n")
        with pytest.raises(ValueError, match="No data"):
            BarSource(path)

    def test_malformed_row(self, tmp_path) -> None:
        """Test a row with a non-numeric price."""
        path = tmp_path / "bad.csv"
        path.write_text("time,open,high,low,close\n60,1,2,oops,1\n")
        with pytest.raises(ValueError, match="row 1"):
            BarSource(path)
