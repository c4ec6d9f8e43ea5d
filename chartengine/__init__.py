"""
chartengine - technical indicators, market profile and position sizing.

- chartengine.indicators: SMA/EMA, RSI/ATR/ADX, MACD, Bollinger, Supertrend, TPO
- chartengine.risk: position size calculator
- chartengine.data: CSV / Parquet bar loading
"""

__version__ = "0.1.0"
