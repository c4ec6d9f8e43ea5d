"""
Unit tests for the indicator registry.
"""

import math

import pytest

from chartengine.core.models import Bar
from chartengine.indicators import (
    adx,
    bollinger_bands,
    calculate_tpo,
    macd,
    rsi,
    sma,
    supertrend,
)
from chartengine.indicators.registry import (
    ADXConfig,
    BollingerConfig,
    MACDConfig,
    RSIConfig,
    SMAConfig,
    SupertrendConfig,
    compute_indicator,
    config_for,
    list_indicators,
)
from chartengine.indicators.tpo import TPOConfig


@pytest.fixture
def bars() -> list[Bar]:
    return [
        Bar(
            time=1_700_000_000 + i * 300,
            open=100 + math.sin(i / 4),
            high=101 + math.sin(i / 4),
            low=99 + math.sin(i / 4),
            close=100.5 + math.sin(i / 4),
        )
        for i in range(80)
    ]


class TestConfigFor:
    """Tests for name -> config lookup."""

    def test_defaults(self) -> None:
        """Test default configs by name."""
        assert config_for("rsi") == RSIConfig(period=14)
        assert config_for("macd") == MACDConfig(fast=12, slow=26, signal=9)
        assert config_for("supertrend") == SupertrendConfig(period=10, multiplier=3.0)

    def test_name_normalized(self) -> None:
        """Test case-insensitive names with overrides."""
        assert config_for("RSI", period=7) == RSIConfig(period=7)
        assert config_for("SuperTrend") == SupertrendConfig()
        assert config_for("Bollinger", std_dev=1.5) == BollingerConfig(period=20, std_dev=1.5)

    def test_unknown_indicator(self) -> None:
        """Test an unknown indicator name."""
        with pytest.raises(ValueError, match="Unknown indicator 'vwap'"):
            config_for("vwap")

    def test_unknown_parameter(self) -> None:
        """Test a parameter the config does not have."""
        with pytest.raises(TypeError):
            config_for("rsi", fast=3)

    def test_list_indicators(self) -> None:
        """Test the list of indicator names."""
        assert set(list_indicators()) == {
            "sma",
            "ema",
            "rsi",
            "atr",
            "adx",
            "macd",
            "bollinger",
            "supertrend",
            "tpo",
        }


class TestComputeIndicator:
    """Dispatch matches calling the indicator function directly."""

    def test_series_indicators(self, bars) -> None:
        """Test single-series indicators."""
        assert compute_indicator(bars, SMAConfig(period=5)) == sma(bars, 5)
        assert compute_indicator(bars, RSIConfig(period=7)) == rsi(bars, 7)
        assert compute_indicator(bars, SupertrendConfig(period=7, multiplier=2.0)) == supertrend(bars, 7, 2.0)

    def test_tuple_indicators(self, bars) -> None:
        """Test multi-series indicators."""
        assert compute_indicator(bars, MACDConfig(fast=5, slow=13, signal=4)) == macd(bars, 5, 13, 4)
        assert compute_indicator(bars, ADXConfig(period=10)) == adx(bars, 10)
        assert compute_indicator(bars, BollingerConfig()) == bollinger_bands(bars, 20, 2.0)

    def test_tpo(self, bars) -> None:
        """Test TPO dispatch."""
        config = TPOConfig(tick_size=0.5)
        assert compute_indicator(bars, config) == calculate_tpo(bars, config)

    def test_unsupported_config(self, bars) -> None:
        """Test an unsupported config object."""
        with pytest.raises(TypeError, match="Unsupported indicator config"):
            compute_indicator(bars, object())  # type: ignore[arg-type]

    def test_configs_are_immutable(self) -> None:
        """Test that configs are frozen."""
        config = RSIConfig()
        with pytest.raises(AttributeError):
            config.period = 3  # type: ignore[misc]
