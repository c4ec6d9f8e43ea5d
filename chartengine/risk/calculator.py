"""
Risk Calculator - position size from capital, risk % and stop distance.

Pure arithmetic:
    risk_amount = capital * risk_percent / 100
    sl_points   = |entry - stop|
    quantity    = floor(risk_amount / sl_points)

Invalid input is reported as a RiskError with a readable reason instead of
an exception, since the result gates a trade decision shown to the user.
"""

import logging
import math
from dataclasses import dataclass, field

from chartengine.core.config import DEFAULT_ENGINE_CONFIG

from .models import RiskError, RiskParams, RiskResult, Side, SizingOutcome

logger = logging.getLogger(__name__)

# Below this capital the detailed validator warns (non-blocking)
MIN_SUGGESTED_CAPITAL = 1000.0
# Above this risk % the detailed validator warns (non-blocking)
AGGRESSIVE_RISK_PERCENT = 5.0


def _positive(value: float | None) -> bool:
    # False for None, zero, negatives and NaN
    return value is not None and value > 0


def _group_indian(digits: str) -> str:
    """Group an integer digit string the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(value: float, decimals: int = 2) -> str:
    """Format a number with Indian digit grouping, e.g. 200000 -> 2,00,000.00."""
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{decimals}f}"
    whole, _, fraction = text.partition(".")
    grouped = _group_indian(whole)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def _format_result(params: RiskParams, result: dict, currency: str) -> dict[str, str]:
    return {
        "capital": f"{currency}{format_amount(params.capital, 0)}",
        "risk_percent": f"{params.risk_percent:g}%",
        "risk_amount": f"{currency}{format_amount(result['risk_amount'])}",
        "entry_price": f"{currency}{params.entry_price:.2f}",
        "stop_loss_price": f"{currency}{params.stop_loss_price:.2f}",
        "sl_points": f"{result['sl_points']:.2f}",
        "quantity": format_amount(result["quantity"], 0),
        "position_value": f"{currency}{format_amount(result['position_value'])}",
        "target_price": f"{currency}{result['target_price']:.2f}",
        "reward_points": f"{result['reward_points']:.2f}",
        "reward_amount": f"{currency}{format_amount(result['reward_amount'])}",
        "rr_ratio": f"1 : {result['risk_reward_ratio']:.2f}",
    }


def size_position(params: RiskParams, currency: str = DEFAULT_ENGINE_CONFIG.currency_symbol) -> SizingOutcome:
    """
    Calculate position size, target and reward for a trade.

    Validation runs in a fixed order and the first failure is returned:
    capital, risk %, entry, stop loss, risk:reward (only without a target),
    stop distance, side ordering, quantity, target side.

    Args:
        params: Sizing inputs
        currency: Symbol used in the formatted strings

    Returns:
        RiskResult on success, RiskError with the reason otherwise
    """
    if not _positive(params.capital):
        return RiskError("Capital must be greater than 0")

    if not _positive(params.risk_percent):
        return RiskError("Risk % must be greater than 0")

    if not _positive(params.entry_price):
        return RiskError("Entry price must be greater than 0")

    if not _positive(params.stop_loss_price):
        return RiskError("Stop loss price must be greater than 0")

    # Ratio only matters when the target is derived from it
    if not params.has_target and not _positive(params.risk_reward_ratio):
        return RiskError("Risk:Reward ratio must be greater than 0")

    risk_amount = params.capital * (params.risk_percent / 100)
    sl_points = abs(params.entry_price - params.stop_loss_price)

    if sl_points <= 0:
        return RiskError("Invalid stop loss: must be different from entry")

    if params.side is Side.BUY and params.entry_price <= params.stop_loss_price:
        return RiskError("For BUY: Entry must be above Stop Loss")

    if params.side is Side.SELL and params.entry_price >= params.stop_loss_price:
        return RiskError("For SELL: Entry must be below Stop Loss")

    quantity = math.floor(risk_amount / sl_points)
    if quantity <= 0:
        return RiskError("Calculated quantity is 0. Increase capital or risk %")

    position_value = quantity * params.entry_price

    if params.has_target:
        target_price = float(params.target_price)
        if params.side is Side.BUY and target_price <= params.entry_price:
            return RiskError("For BUY: Target must be above Entry")
        if params.side is Side.SELL and target_price >= params.entry_price:
            return RiskError("For SELL: Target must be below Entry")
        risk_reward_ratio = abs(target_price - params.entry_price) / sl_points
    else:
        risk_reward_ratio = params.risk_reward_ratio
        if params.side is Side.BUY:
            target_price = params.entry_price + sl_points * risk_reward_ratio
        else:
            target_price = params.entry_price - sl_points * risk_reward_ratio

    reward_points = abs(target_price - params.entry_price)
    reward_amount = reward_points * quantity

    values = {
        "risk_amount": risk_amount,
        "sl_points": sl_points,
        "quantity": quantity,
        "position_value": position_value,
        "target_price": target_price,
        "reward_points": reward_points,
        "reward_amount": reward_amount,
        "risk_reward_ratio": risk_reward_ratio,
    }
    logger.debug(f"Sized {params.side.value}: qty={quantity} risk={risk_amount:.2f} rr={risk_reward_ratio:.2f}")

    return RiskResult(**values, formatted=_format_result(params, values, currency))


def auto_detect_side(entry_price: float | None, stop_loss_price: float | None) -> Side | None:
    """
    Infer trade side from entry and stop loss.

    - SELL when the stop is above entry
    - BUY when the stop is below entry
    - None when they are equal or either price is missing / non-positive
    """
    if not _positive(entry_price) or not _positive(stop_loss_price):
        return None

    if entry_price == stop_loss_price:
        return None

    return Side.SELL if stop_loss_price > entry_price else Side.BUY


def validate_risk_params(params: RiskParams) -> tuple[bool, list[str]]:
    """
    Collect every validation problem (not just the first).

    Returns:
        (is_valid, errors)
    """
    errors: list[str] = []

    if not _positive(params.capital):
        errors.append("Capital must be greater than 0")

    if not _positive(params.risk_percent) or params.risk_percent > 100:
        errors.append("Risk % must be between 0 and 100")

    if not _positive(params.entry_price):
        errors.append("Entry price must be greater than 0")

    if not _positive(params.stop_loss_price):
        errors.append("Stop loss price must be greater than 0")

    if _positive(params.entry_price) and _positive(params.stop_loss_price):
        if params.side is Side.BUY and params.entry_price <= params.stop_loss_price:
            errors.append("For BUY: Entry must be above Stop Loss")
        if params.side is Side.SELL and params.entry_price >= params.stop_loss_price:
            errors.append("For SELL: Entry must be below Stop Loss")

    return (not errors, errors)


@dataclass
class DetailedValidation:
    """
    Field-level validation result.

    errors maps field name -> message; warnings lists fields whose message
    is advisory only; suggestions maps field name -> suggested price.
    """

    errors: dict[str, str] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    suggestions: dict[str, float] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """True when every error is only a warning."""
        return all(name in self.warnings for name in self.errors)


def validate_risk_params_detailed(
    params: RiskParams,
    currency: str = DEFAULT_ENGINE_CONFIG.currency_symbol,
) -> DetailedValidation:
    """
    Validate inputs with field-level messages, warnings and suggestions.

    Low capital and aggressive risk % are warnings; they do not make the
    form invalid.
    """
    result = DetailedValidation()
    errors = result.errors

    if not _positive(params.capital):
        errors["capital"] = "Capital must be greater than 0"
    elif params.capital < MIN_SUGGESTED_CAPITAL:
        errors["capital"] = f"Capital should be at least {currency}{format_amount(MIN_SUGGESTED_CAPITAL, 0)}"
        result.warnings.append("capital")

    if not _positive(params.risk_percent):
        errors["risk_percent"] = "Risk % must be greater than 0"
    elif params.risk_percent > 100:
        errors["risk_percent"] = "Risk % cannot exceed 100%"
    elif params.risk_percent > AGGRESSIVE_RISK_PERCENT:
        errors["risk_percent"] = f"Risk > {AGGRESSIVE_RISK_PERCENT:g}% is very aggressive"
        result.warnings.append("risk_percent")

    if not _positive(params.entry_price):
        errors["entry_price"] = "Entry must be greater than 0"

    if not _positive(params.stop_loss_price):
        errors["stop_loss_price"] = "Stop loss must be greater than 0"

    entry = params.entry_price
    if _positive(entry) and _positive(params.stop_loss_price):
        if entry == params.stop_loss_price:
            errors["stop_loss_price"] = "Stop loss must differ from entry"
            errors["entry_price"] = "Entry must differ from stop loss"
        elif params.side is Side.BUY and params.stop_loss_price > entry:
            errors["stop_loss_price"] = f"For BUY, stop loss must be below entry (< {currency}{entry:.2f})"
            result.suggestions["stop_loss_price"] = round(max(0.01, entry * 0.98), 2)
        elif params.side is Side.SELL and params.stop_loss_price < entry:
            errors["stop_loss_price"] = f"For SELL, stop loss must be above entry (> {currency}{entry:.2f})"
            result.suggestions["stop_loss_price"] = round(entry * 1.02, 2)

    if params.has_target and _positive(entry):
        if params.side is Side.BUY and params.target_price <= entry:
            errors["target_price"] = f"For BUY, target must be above entry (> {currency}{entry:.2f})"
            result.suggestions["target_price"] = round(entry * 1.02, 2)
        elif params.side is Side.SELL and params.target_price >= entry:
            errors["target_price"] = f"For SELL, target must be below entry (< {currency}{entry:.2f})"
            result.suggestions["target_price"] = round(max(0.01, entry * 0.98), 2)

    return result
