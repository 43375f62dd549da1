"""Tests for quote and history domain models."""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime

import pytest

from mmt.domain.quotes import (
    ChangeType,
    RebalanceAction,
    StrategyConfigChange,
    TradeType,
    TradingParams,
)


class TestTradingParams:
    """Tests for TradingParams."""

    def test_spread_and_mid(self) -> None:
        """Spread and mid are derived from bid and ask."""
        params = TradingParams(bid_price=99.0, ask_price=101.0)

        assert params.spread() == pytest.approx(2.0)
        assert params.mid_price() == pytest.approx(100.0)
        assert params.is_crossed() is False

    def test_crossed(self) -> None:
        """A bid at or above the ask is crossed."""
        assert TradingParams(bid_price=101.0, ask_price=100.0).is_crossed() is True
        assert TradingParams(bid_price=100.0, ask_price=100.0).is_crossed() is True

    def test_to_wire(self) -> None:
        """to_wire uses camelCase keys."""
        params = TradingParams(bid_price=99.5, ask_price=100.5)

        assert params.to_wire() == {"bidPrice": 99.5, "askPrice": 100.5}

    def test_immutable(self) -> None:
        """TradingParams cannot be modified."""
        params = TradingParams(bid_price=1.0, ask_price=2.0)

        with pytest.raises(FrozenInstanceError):
            params.bid_price = 3.0  # type: ignore[misc]


class TestRebalanceAction:
    """Tests for RebalanceAction."""

    def test_fields(self) -> None:
        """RebalanceAction stores its fields."""
        action = RebalanceAction(
            type=TradeType.SELL,
            amount=10.0,
            expected_price=2.0,
            min_received=19.8,
            max_spent=0.0,
        )

        assert action.type == TradeType.SELL
        assert action.amount == 10.0
        assert action.min_received == 19.8

    def test_trade_type_values(self) -> None:
        """Trade types serialize as upper-case strings."""
        assert TradeType.BUY.value == "BUY"
        assert TradeType("SELL") is TradeType.SELL


class TestStrategyConfigChange:
    """Tests for StrategyConfigChange."""

    def test_creation_entry(self) -> None:
        """A creation entry has no old values."""
        now = datetime.now(UTC)
        change = StrategyConfigChange(
            pool_id=1,
            change_type=ChangeType.CREATED,
            changed_fields=["baseSpread"],
            old_values=None,
            new_values={"baseSpread": 0.1},
            changed_by=None,
            created_at=now,
        )

        assert change.change_type == ChangeType.CREATED
        assert change.old_values is None
        assert change.created_at == now

    def test_change_type_from_string(self) -> None:
        """Stored strings convert back to ChangeType."""
        assert ChangeType("UPDATED") is ChangeType.UPDATED
