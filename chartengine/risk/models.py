"""
Risk Calculator Data Models.

- Side: Trade direction
- RiskParams: Inputs to position sizing
- RiskResult / RiskError: Discriminated sizing outcome
- RiskTemplate: Preset capital / risk % combinations
"""

from dataclasses import dataclass, field
from enum import Enum


class Side(Enum):
    """Trade direction."""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class RiskParams:
    """
    Inputs for position sizing.

    target_price is optional: when given (and > 0) the risk:reward ratio is
    derived from it, otherwise the target is derived from risk_reward_ratio.
    """

    capital: float
    risk_percent: float  # e.g. 1.0 = 1% of capital
    entry_price: float
    stop_loss_price: float
    side: Side
    target_price: float | None = None
    risk_reward_ratio: float = 2.0

    @property
    def has_target(self) -> bool:
        return self.target_price is not None and self.target_price > 0


@dataclass(frozen=True)
class RiskResult:
    """Successful sizing calculation."""

    risk_amount: float
    sl_points: float
    quantity: int
    position_value: float
    target_price: float
    reward_points: float
    reward_amount: float
    risk_reward_ratio: float
    formatted: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "success": True,
            "risk_amount": self.risk_amount,
            "sl_points": self.sl_points,
            "quantity": self.quantity,
            "position_value": self.position_value,
            "target_price": self.target_price,
            "reward_points": self.reward_points,
            "reward_amount": self.reward_amount,
            "risk_reward_ratio": self.risk_reward_ratio,
            "formatted": dict(self.formatted),
        }


@dataclass(frozen=True)
class RiskError:
    """Sizing rejected, with a human-readable reason."""

    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message}


SizingOutcome = RiskResult | RiskError


@dataclass(frozen=True)
class RiskTemplate:
    """Preset capital and risk percentage."""

    id: str
    name: str
    capital: float
    risk_percent: float


DEFAULT_TEMPLATES: list[RiskTemplate] = [
    RiskTemplate(id="conservative", name="Conservative", capital=100000, risk_percent=0.5),
    RiskTemplate(id="moderate", name="Moderate", capital=100000, risk_percent=1.0),
    RiskTemplate(id="aggressive", name="Aggressive", capital=100000, risk_percent=2.0),
]


def get_template(template_id: str) -> RiskTemplate:
    """
    Get a preset template by id.

    Raises:
        ValueError: If the template is not found
    """
    for template in DEFAULT_TEMPLATES:
        if template.id == template_id.lower():
            return template
    available = ", ".join(t.id for t in DEFAULT_TEMPLATES)
    raise ValueError(f"Unknown risk template '{template_id}'. Available: {available}")
