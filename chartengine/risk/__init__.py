"""
Risk Module - position sizing for a single trade.

Usage:
    from chartengine.risk import RiskParams, Side, size_position

    outcome = size_position(RiskParams(200000, 1.0, 100.0, 95.0, Side.BUY))
    if outcome.ok:
        print(outcome.quantity)  # 400
"""

from .calculator import (
    DetailedValidation,
    auto_detect_side,
    format_amount,
    size_position,
    validate_risk_params,
    validate_risk_params_detailed,
)
from .models import (
    DEFAULT_TEMPLATES,
    RiskError,
    RiskParams,
    RiskResult,
    RiskTemplate,
    Side,
    SizingOutcome,
    get_template,
)

__all__ = [
    "DEFAULT_TEMPLATES",
    "DetailedValidation",
    "RiskError",
    "RiskParams",
    "RiskResult",
    "RiskTemplate",
    "Side",
    "SizingOutcome",
    "auto_detect_side",
    "format_amount",
    "get_template",
    "size_position",
    "validate_risk_params",
    "validate_risk_params_detailed",
]
