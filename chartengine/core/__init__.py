"""
Core types shared by every indicator.

Modules:
- models: Bar, IndicatorPoint and color tags
- config: Engine defaults for the CLI
"""

from chartengine.core.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from chartengine.core.models import Bar, IndicatorPoint, PointColor

__all__ = [
    "Bar",
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "IndicatorPoint",
    "PointColor",
]
