"""
TPO (Market Profile) Module.

Shows where price spent the most TIME, not volume:
- Data models (TPOConfig, TPOPeriod, TPOLevel, MarketProfile)
- Profile builder (session grouping, period letters, quantization)
- Indicator functions (POC, Value Area, Rotation Factor, Poor High/Low,
  Single Prints, summary stats)
"""

from .builder import TPOProfileBuilder, calculate_tpo
from .constants import BLOCK_SIZE_MAP, BLOCK_SIZE_OPTIONS, DEFAULT_BLOCK_SIZE
from .indicator import (
    auto_tick_size,
    detect_poor_high_low,
    detect_single_prints,
    get_period_range,
    get_poc,
    get_tpo_stats,
    get_value_area,
    parse_block_size,
    parse_time_to_minutes,
    quantize_price,
    rotation_factor,
    tpo_letter,
    tpo_to_render_data,
)
from .models import DEFAULT_TPO_CONFIG, MarketProfile, TPOConfig, TPOLevel, TPOPeriod

__all__ = [
    # Data models
    "TPOConfig",
    "DEFAULT_TPO_CONFIG",
    "TPOPeriod",
    "TPOLevel",
    "MarketProfile",
    # Constants
    "BLOCK_SIZE_MAP",
    "BLOCK_SIZE_OPTIONS",
    "DEFAULT_BLOCK_SIZE",
    # Builder
    "TPOProfileBuilder",
    "calculate_tpo",
    # Indicator functions
    "auto_tick_size",
    "quantize_price",
    "parse_block_size",
    "parse_time_to_minutes",
    "tpo_letter",
    "get_poc",
    "get_value_area",
    "get_period_range",
    "rotation_factor",
    "detect_poor_high_low",
    "detect_single_prints",
    "get_tpo_stats",
    "tpo_to_render_data",
]
