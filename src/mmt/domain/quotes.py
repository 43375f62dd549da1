"""Quote, rebalance and config-history domain models.

All models are immutable.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic.dataclasses import dataclass


@dataclass(frozen=True)
class TradingParams:
    """Bid and ask prices derived from a reference price.

    Prices are not clamped; a misconfigured strategy can produce a zero or
    negative bid.
    """

    bid_price: float
    ask_price: float

    def spread(self) -> float:
        """Return the absolute distance between ask and bid."""
        return self.ask_price - self.bid_price

    def mid_price(self) -> float:
        """Return the midpoint between bid and ask."""
        return (self.bid_price + self.ask_price) / 2

    def is_crossed(self) -> bool:
        """Return True if the bid is at or above the ask."""
        return self.bid_price >= self.ask_price

    def to_wire(self) -> dict[str, float]:
        """Serialize with camelCase keys."""
        return {"bidPrice": self.bid_price, "askPrice": self.ask_price}


class TradeType(str, Enum):
    """Direction of a rebalance trade, relative to token A."""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class RebalanceAction:
    """A single swap that moves pool inventory toward its target ratio.

    For SELL, amount is token A sold and min_received is token B.
    For BUY, amount is token A bought and max_spent is token B.
    """

    type: TradeType
    amount: float
    expected_price: float
    min_received: float
    max_spent: float


class ChangeType(str, Enum):
    """Kind of strategy configuration change."""

    CREATED = "CREATED"
    UPDATED = "UPDATED"


@dataclass(frozen=True)
class StrategyConfigChange:
    """One entry of a pool's strategy configuration history."""

    pool_id: int
    change_type: ChangeType
    changed_fields: list[str]
    old_values: dict[str, Any] | None  # None on creation
    new_values: dict[str, Any]
    changed_by: str | None
    created_at: datetime
