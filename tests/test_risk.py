"""
Unit tests for the risk (position sizing) calculator.

Tests:
- size_position happy paths (BUY / SELL, derived and explicit target)
- Validation order and messages
- auto_detect_side
- Bulk and field-level validation
- Formatting and templates
"""

import math

import pytest

from chartengine.risk import (
    DEFAULT_TEMPLATES,
    RiskError,
    RiskParams,
    RiskResult,
    Side,
    auto_detect_side,
    format_amount,
    get_template,
    size_position,
    validate_risk_params,
    validate_risk_params_detailed,
)


def params(**overrides) -> RiskParams:
    """Default long trade: 2 lakh capital, 1% risk, entry 100, stop 95."""
    values = {
        "capital": 200000.0,
        "risk_percent": 1.0,
        "entry_price": 100.0,
        "stop_loss_price": 95.0,
        "side": Side.BUY,
    }
    values.update(overrides)
    return RiskParams(**values)


class TestSizePosition:
    """Tests for successful sizing."""

    def test_buy_with_derived_target(self) -> None:
        """Test a long trade with the target from risk:reward."""
        result = size_position(params())
        assert isinstance(result, RiskResult)
        assert result.ok
        assert result.risk_amount == 2000.0
        assert result.sl_points == 5.0
        assert result.quantity == 400
        assert result.position_value == 40000.0
        assert result.target_price == 110.0
        assert result.reward_points == 10.0
        assert result.reward_amount == 4000.0
        assert result.risk_reward_ratio == 2.0

    def test_sell_with_derived_target(self) -> None:
        """Test a short trade with the target from risk:reward."""
        result = size_position(params(side=Side.SELL, stop_loss_price=105.0, risk_reward_ratio=1.5))
        assert result.ok
        assert result.quantity == 400
        assert result.target_price == pytest.approx(92.5)
        assert result.reward_amount == pytest.approx(3000.0)

    def test_explicit_target_sets_ratio(self) -> None:
        """Test that an explicit target determines the ratio."""
        result = size_position(params(target_price=115.0))
        assert result.target_price == 115.0
        assert result.risk_reward_ratio == pytest.approx(3.0)
        assert result.reward_points == 15.0

    def test_quantity_is_floored(self) -> None:
        """Test that quantity rounds down to whole units."""
        # 2000 / 3 = 666.67
        result = size_position(params(stop_loss_price=97.0))
        assert result.quantity == 666

    def test_risk_never_exceeds_budget(self) -> None:
        """Test that actual risk stays within the budget."""
        for stop in (99.5, 97.3, 91.0, 50.0):
            result = size_position(params(stop_loss_price=stop))
            assert result.quantity * result.sl_points <= result.risk_amount

    def test_ratio_ignored_when_target_given(self) -> None:
        """Test that a bad ratio is ignored when a target is given."""
        result = size_position(params(target_price=110.0, risk_reward_ratio=0))
        assert result.ok

    def test_zero_target_means_no_target(self) -> None:
        """Test that a zero target falls back to risk:reward."""
        result = size_position(params(target_price=0))
        assert result.target_price == 110.0

    def test_formatted_strings(self) -> None:
        """Test the formatted output strings."""
        formatted = size_position(params()).formatted
        assert formatted["capital"] == "₹2,00,000"
        assert formatted["risk_amount"] == "₹2,000.00"
        assert formatted["position_value"] == "₹40,000.00"
        assert formatted["quantity"] == "400"
        assert formatted["rr_ratio"] == "1 : 2.00"
        assert formatted["target_price"] == "₹110.00"

    def test_custom_currency(self) -> None:
        """Test a non-default currency symbol."""
        formatted = size_position(params(), currency="$").formatted
        assert formatted["risk_amount"] == "$2,000.00"

    def test_to_dict(self) -> None:
        """Test result serialization."""
        data = size_position(params()).to_dict()
        assert data["success"] is True
        assert data["quantity"] == 400


class TestSizingErrors:
    """Tests for validation order and messages."""

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"capital": 0}, "Capital must be greater than 0"),
            ({"capital": -5}, "Capital must be greater than 0"),
            ({"capital": math.nan}, "Capital must be greater than 0"),
            ({"risk_percent": 0}, "Risk % must be greater than 0"),
            ({"entry_price": 0}, "Entry price must be greater than 0"),
            ({"stop_loss_price": -1}, "Stop loss price must be greater than 0"),
            ({"risk_reward_ratio": 0}, "Risk:Reward ratio must be greater than 0"),
            ({"stop_loss_price": 100.0}, "Invalid stop loss: must be different from entry"),
            ({"stop_loss_price": 105.0}, "For BUY: Entry must be above Stop Loss"),
            ({"side": Side.SELL}, "For SELL: Entry must be below Stop Loss"),
            ({"capital": 1000, "risk_percent": 0.1}, "Calculated quantity is 0. Increase capital or risk %"),
            ({"target_price": 99.0}, "For BUY: Target must be above Entry"),
            (
                {"side": Side.SELL, "stop_loss_price": 105.0, "target_price": 101.0},
                "For SELL: Target must be below Entry",
            ),
        ],
    )
    def test_error_messages(self, overrides: dict, message: str) -> None:
        """Test each validation message."""
        result = size_position(params(**overrides))
        assert isinstance(result, RiskError)
        assert not result.ok
        assert result.message == message

    def test_first_failure_wins(self) -> None:
        """Test that only the first failing check is reported."""
        result = size_position(params(capital=0, risk_percent=0, entry_price=0))
        assert result.message == "Capital must be greater than 0"

    def test_error_to_dict(self) -> None:
        """Test error serialization."""
        assert size_position(params(capital=0)).to_dict() == {
            "success": False,
            "error": "Capital must be greater than 0",
        }


class TestAutoDetectSide:
    """Tests for side inference."""

    def test_stop_below_entry_is_buy(self) -> None:
        """Test side inference for a long trade."""
        assert auto_detect_side(100.0, 95.0) is Side.BUY

    def test_stop_above_entry_is_sell(self) -> None:
        """Test side inference for a short trade."""
        assert auto_detect_side(100.0, 105.0) is Side.SELL

    @pytest.mark.parametrize(("entry", "stop"), [(100.0, 100.0), (0, 95.0), (100.0, 0), (None, 95.0), (-1, 5)])
    def test_undetermined(self, entry, stop) -> None:
        """Test inputs where no side can be inferred."""
        assert auto_detect_side(entry, stop) is None


class TestValidateRiskParams:
    """Tests for collecting every validation problem."""

    def test_valid(self) -> None:
        """Test valid parameters."""
        assert validate_risk_params(params()) == (True, [])

    def test_collects_all_errors(self) -> None:
        """Test that every error is collected."""
        is_valid, errors = validate_risk_params(params(capital=0, risk_percent=150, entry_price=0))
        assert not is_valid
        assert errors == [
            "Capital must be greater than 0",
            "Risk % must be between 0 and 100",
            "Entry price must be greater than 0",
        ]

    def test_side_mismatch(self) -> None:
        """Test a stop on the wrong side of entry."""
        _, errors = validate_risk_params(params(side=Side.SELL))
        assert errors == ["For SELL: Entry must be below Stop Loss"]


class TestValidateRiskParamsDetailed:
    """Tests for field-level validation."""

    def test_valid(self) -> None:
        """Test valid parameters."""
        result = validate_risk_params_detailed(params())
        assert result.is_valid
        assert result.errors == {}

    def test_low_capital_is_warning(self) -> None:
        """Test the low capital warning."""
        result = validate_risk_params_detailed(params(capital=500))
        assert result.is_valid
        assert result.warnings == ["capital"]
        assert result.errors["capital"] == "Capital should be at least ₹1,000"

    def test_aggressive_risk_is_warning(self) -> None:
        """Test the aggressive risk warning."""
        result = validate_risk_params_detailed(params(risk_percent=10))
        assert result.is_valid
        assert result.errors["risk_percent"] == "Risk > 5% is very aggressive"

    def test_risk_over_100_is_error(self) -> None:
        """Test the risk percentage cap."""
        result = validate_risk_params_detailed(params(risk_percent=150))
        assert not result.is_valid
        assert "risk_percent" not in result.warnings

    def test_equal_prices(self) -> None:
        """Test entry equal to stop loss."""
        result = validate_risk_params_detailed(params(stop_loss_price=100.0))
        assert not result.is_valid
        assert set(result.errors) == {"entry_price", "stop_loss_price"}

    def test_buy_stop_above_entry_suggests_price(self) -> None:
        """Test the suggested stop for a long trade."""
        result = validate_risk_params_detailed(params(stop_loss_price=105.0))
        assert not result.is_valid
        assert result.suggestions["stop_loss_price"] == 98.0

    def test_sell_stop_below_entry_suggests_price(self) -> None:
        """Test the suggested stop for a short trade."""
        result = validate_risk_params_detailed(params(side=Side.SELL))
        assert result.suggestions["stop_loss_price"] == 102.0

    def test_target_wrong_side(self) -> None:
        """Test a target on the wrong side of entry."""
        result = validate_risk_params_detailed(params(target_price=90.0))
        assert "target_price" in result.errors
        assert result.suggestions["target_price"] == 102.0


class TestFormatting:
    """Tests for Indian digit grouping."""

    @pytest.mark.parametrize(
        ("value", "decimals", "expected"),
        [
            (999, 2, "999.00"),
            (1500, 2, "1,500.00"),
            (200000, 0, "2,00,000"),
            (12345678.9, 2, "1,23,45,678.90"),
            (-1500, 2, "-1,500.00"),
        ],
    )
    def test_format_amount(self, value: float, decimals: int, expected: str) -> None:
        """Test Indian digit grouping."""
        assert format_amount(value, decimals) == expected


class TestTemplates:
    """Tests for preset templates."""

    def test_defaults(self) -> None:
        """Test the built-in templates."""
        assert [t.id for t in DEFAULT_TEMPLATES] == ["conservative", "moderate", "aggressive"]

    def test_get_template(self) -> None:
        """Test template lookup by name."""
        assert get_template("Moderate").risk_percent == 1.0

    def test_unknown_template(self) -> None:
        """Test lookup of an unknown template."""
        with pytest.raises(ValueError, match="Unknown risk template"):
            get_template("yolo")
