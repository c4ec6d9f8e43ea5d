"""
TPO Profile Constants.

Block sizes, auto tick-size bands and default thresholds.
"""

# Block size options (TPO period duration in minutes)
BLOCK_SIZE_MAP: dict[str, int] = {
    "5m": 5,
    "10m": 10,
    "15m": 15,
    "30m": 30,  # Default
    "1h": 60,
    "2h": 120,
    "4h": 240,
}

BLOCK_SIZE_OPTIONS = list(BLOCK_SIZE_MAP)
DEFAULT_BLOCK_SIZE = "30m"

# Auto tick size by average price: (upper bound exclusive, tick size)
TICK_SIZE_BANDS: list[tuple[float, float]] = [
    (10, 0.05),
    (50, 0.1),
    (100, 0.25),
    (500, 0.5),
    (1000, 1.0),
    (5000, 2.0),
    (10000, 5.0),
]
TICK_SIZE_CEILING = 10.0
MIN_TICK_SIZE = 0.01

# Level-count targets for the auto tick size adjustment
MAX_LEVELS_WIDE = 200  # Above this: double the tick
MAX_LEVELS = 100  # Above this: 1.5x the tick
MIN_LEVELS = 20  # Below this: halve the tick (unless already at the smallest band)

# Quantized prices are rounded to this many decimals to keep dict keys stable
PRICE_DECIMALS = 10

SECONDS_PER_DAY = 86400

# Period indices 0 and 1 (letters A and B) form the Initial Balance
INITIAL_BALANCE_PERIODS = 2

DEFAULT_VALUE_AREA_PERCENT = 70.0
DEFAULT_POOR_THRESHOLD = 2

COMPOSITE_SESSION_KEY = "composite"
