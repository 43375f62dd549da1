"""Tests for strategy configuration."""

import math

import pytest
from pydantic import ValidationError

from mmt.domain.errors import InvalidInputError
from mmt.domain.strategy import DEFAULT_STRATEGY_CONFIG, PERCENTAGE_FIELDS, StrategyConfig


class TestStrategyConfigParsing:
    """Tests for building StrategyConfig from mappings."""

    def test_from_aliases(self, strategy_payload: dict) -> None:
        """camelCase keys are accepted."""
        config = StrategyConfig.from_dict(strategy_payload)

        assert config.base_spread == 1.0
        assert config.bid_adjustment == 0.5
        assert config.check_interval == 30
        assert config.emergency_stop is False
        assert config.enabled is True

    def test_from_field_names(self, strategy_payload: dict) -> None:
        """snake_case keys build the same config."""
        by_alias = StrategyConfig.from_dict(strategy_payload)
        by_name = StrategyConfig.from_dict(by_alias.model_dump())

        assert by_name == by_alias

    def test_missing_field(self, strategy_payload: dict) -> None:
        """A missing field is reported."""
        del strategy_payload["baseSpread"]

        with pytest.raises(InvalidInputError) as exc_info:
            StrategyConfig.from_dict(strategy_payload)

        assert exc_info.value.field in ("baseSpread", "base_spread")

    def test_unknown_field(self, strategy_payload: dict) -> None:
        """Unknown keys are rejected."""
        strategy_payload["leverage"] = 10

        with pytest.raises(InvalidInputError) as exc_info:
            StrategyConfig.from_dict(strategy_payload)

        assert exc_info.value.field == "leverage"

    def test_non_numeric_value(self, strategy_payload: dict) -> None:
        """Non-numeric strings are rejected."""
        strategy_payload["maxSlippage"] = "high"

        with pytest.raises(InvalidInputError) as exc_info:
            StrategyConfig.from_dict(strategy_payload)

        assert exc_info.value.value == "high"

    def test_bool_is_not_a_number(self, strategy_payload: dict) -> None:
        """Booleans in numeric fields are rejected."""
        strategy_payload["checkInterval"] = True

        with pytest.raises(InvalidInputError):
            StrategyConfig.from_dict(strategy_payload)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, strategy_payload: dict, bad: float) -> None:
        """NaN and infinities are rejected."""
        strategy_payload["baseSpread"] = bad

        with pytest.raises(InvalidInputError):
            StrategyConfig.from_dict(strategy_payload)

    def test_validation_error_chained(self, strategy_payload: dict) -> None:
        """The pydantic error is kept as the cause."""
        strategy_payload["targetRatio"] = "x"

        with pytest.raises(InvalidInputError) as exc_info:
            StrategyConfig.from_dict(strategy_payload)

        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_frozen(self, strategy_payload: dict) -> None:
        """Configs cannot be mutated in place."""
        config = StrategyConfig.from_dict(strategy_payload)

        with pytest.raises(ValidationError):
            config.base_spread = 2.0  # type: ignore[misc]


class TestStrategyConfigBehavior:
    """Tests for StrategyConfig helpers."""

    @pytest.mark.parametrize(
        ("enabled", "emergency_stop", "allowed"),
        [
            (True, False, True),
            (True, True, False),
            (False, False, False),
            (False, True, False),
        ],
    )
    def test_is_quoting_allowed(
        self, make_config, enabled: bool, emergency_stop: bool, allowed: bool
    ) -> None:
        """Quoting requires enabled and no emergency stop."""
        config = make_config(enabled=enabled, emergency_stop=emergency_stop)
        assert config.is_quoting_allowed is allowed

    def test_with_changes(self, make_config) -> None:
        """with_changes returns a new validated copy."""
        original = make_config()

        changed = original.with_changes({"baseSpread": 0.4, "enabled": True})

        assert changed.base_spread == 0.4
        assert changed.enabled is True
        assert original.base_spread == DEFAULT_STRATEGY_CONFIG.base_spread
        assert changed.max_slippage == original.max_slippage

    def test_with_changes_unknown_key(self, make_config) -> None:
        """Unknown keys raise InvalidInputError naming the key."""
        with pytest.raises(InvalidInputError) as exc_info:
            make_config().with_changes({"spread": 1})

        assert exc_info.value.field == "spread"

    def test_with_changes_invalid_value(self, make_config) -> None:
        """Invalid replacement values are rejected."""
        with pytest.raises(InvalidInputError):
            make_config().with_changes({"max_trade_size": math.nan})

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("baseSpread", "base_spread"),
            ("base_spread", "base_spread"),
            ("emergencyStop", "emergency_stop"),
            ("enabled", "enabled"),
        ],
    )
    def test_resolve_field(self, key: str, expected: str) -> None:
        """Names and aliases resolve to the field name."""
        assert StrategyConfig.resolve_field(key) == expected

    def test_to_wire(self, strategy_payload: dict) -> None:
        """to_wire emits camelCase keys."""
        config = StrategyConfig.from_dict(strategy_payload)

        assert config.to_wire() == strategy_payload

    def test_percentage_fields_exist(self) -> None:
        """Every percentage field is a config field."""
        assert set(PERCENTAGE_FIELDS) <= set(StrategyConfig.model_fields)


class TestSanityIssues:
    """Tests for StrategyConfig.sanity_issues."""

    def test_sane_config(self, make_config) -> None:
        """The default config has no issues."""
        assert make_config().sanity_issues() == []

    def test_bid_spread_too_wide(self, make_config) -> None:
        """A bid spread of 100% or more is flagged."""
        issues = make_config(base_spread=100.0, bid_adjustment=0.0).sanity_issues()
        assert any("bid spread" in issue for issue in issues)

    def test_ask_spread_too_negative(self, make_config) -> None:
        """An ask spread of -100% or less is flagged."""
        issues = make_config(base_spread=0.0, ask_adjustment=-100.0).sanity_issues()
        assert any("ask spread" in issue for issue in issues)

    def test_crossed_spreads(self, make_config) -> None:
        """Spreads whose sum is negative are flagged."""
        issues = make_config(
            base_spread=0.0, bid_adjustment=-0.5, ask_adjustment=0.1
        ).sanity_issues()
        assert any("cross" in issue for issue in issues)

    def test_trade_sizes(self, make_config) -> None:
        """Negative or inverted trade sizes are flagged."""
        assert make_config(min_trade_size=-1.0).sanity_issues()
        assert make_config(min_trade_size=500.0, max_trade_size=100.0).sanity_issues()

    def test_check_interval(self, make_config) -> None:
        """A non-positive interval is flagged."""
        assert make_config(check_interval=0).sanity_issues()

    def test_target_ratio(self, make_config) -> None:
        """A negative target ratio is flagged."""
        assert make_config(target_ratio=-0.1).sanity_issues()


class TestDefaultStrategyConfig:
    """Tests for DEFAULT_STRATEGY_CONFIG."""

    def test_values(self) -> None:
        """Defaults match the shipped strategy."""
        config = DEFAULT_STRATEGY_CONFIG

        assert config.base_spread == 0.1
        assert config.bid_adjustment == -0.05
        assert config.ask_adjustment == 0.05
        assert config.check_interval == 30
        assert config.min_trade_size == 100
        assert config.max_trade_size == 10000
        assert config.trade_size_percentage == 5
        assert config.target_ratio == 0.5
        assert config.rebalance_threshold == 5.0
        assert config.max_position_size == 50000
        assert config.max_slippage == 1.0
        assert config.stop_loss_percentage == 5.0
        assert config.emergency_stop is False
        assert config.enabled is False

    def test_disabled_by_default(self) -> None:
        """The default strategy never quotes."""
        assert DEFAULT_STRATEGY_CONFIG.is_quoting_allowed is False
