"""
Engine configuration and defaults.

Centralizes default periods and display settings used by the CLI and by
callers that do not pass their own indicator configs.
"""

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Default parameters for indicator computation and CLI output.

    Indicator functions take their own arguments; these values are what the
    command line falls back to when a flag is omitted.
    """

    # =========================================================
    # Indicator Defaults
    # =========================================================

    # Wilder family (RSI / ATR / ADX)
    rsi_period: int = 14
    atr_period: int = 14
    adx_period: int = 14

    # Moving averages
    sma_period: int = 20
    ema_period: int = 20

    # MACD
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    # Bollinger Bands
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0

    # Supertrend
    supertrend_period: int = 10
    supertrend_multiplier: float = 3.0

    # =========================================================
    # Risk Calculator Defaults
    # =========================================================

    # Used when no explicit target price is given
    risk_reward_ratio: float = 2.0

    # Currency symbol for formatted risk output
    currency_symbol: str = "₹"

    # =========================================================
    # Display
    # =========================================================

    # Number of trailing points shown per series in CLI tables
    display_rows: int = 20

    # Decimal places for CLI output
    display_precision: int = 2

    # =========================================================
    # Logging
    # =========================================================

    log_level: str = "WARNING"
    log_format: str = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


# Default configuration instance
DEFAULT_ENGINE_CONFIG = EngineConfig()
