"""Market-making strategy configuration.

A StrategyConfig holds the tunable parameters of one pool's market-making
strategy. Percentage fields are expressed in percentage points (1.5 = 1.5%),
never as fractions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mmt.domain.errors import InvalidInputError

NUMERIC_FIELDS = (
    "base_spread",
    "bid_adjustment",
    "ask_adjustment",
    "check_interval",
    "min_trade_size",
    "max_trade_size",
    "trade_size_percentage",
    "target_ratio",
    "rebalance_threshold",
    "max_position_size",
    "max_slippage",
    "stop_loss_percentage",
)

# Fields stored as percentage points
PERCENTAGE_FIELDS = (
    "base_spread",
    "bid_adjustment",
    "ask_adjustment",
    "trade_size_percentage",
    "rebalance_threshold",
    "max_slippage",
    "stop_loss_percentage",
)


class StrategyConfig(BaseModel):
    """Tunable parameters for one pool's market-making strategy.

    Accepts either snake_case field names or the camelCase aliases used by
    the web client. No ordering or sign invariant is enforced here; use
    sanity_issues() before acting on a configuration.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="forbid",
        allow_inf_nan=False,
    )

    # Quoting
    base_spread: float = Field(alias="baseSpread")
    bid_adjustment: float = Field(alias="bidAdjustment")
    ask_adjustment: float = Field(alias="askAdjustment")
    check_interval: float = Field(alias="checkInterval")  # seconds

    # Sizing
    min_trade_size: float = Field(alias="minTradeSize")
    max_trade_size: float = Field(alias="maxTradeSize")
    trade_size_percentage: float = Field(alias="tradeSizePercentage")

    # Inventory
    target_ratio: float = Field(alias="targetRatio")
    rebalance_threshold: float = Field(alias="rebalanceThreshold")
    max_position_size: float = Field(alias="maxPositionSize")

    # Risk
    max_slippage: float = Field(alias="maxSlippage")
    stop_loss_percentage: float = Field(alias="stopLossPercentage")

    # Control flags
    emergency_stop: bool = Field(alias="emergencyStop")
    enabled: bool

    @field_validator(*NUMERIC_FIELDS, mode="before")
    @classmethod
    def reject_bool(cls, v: Any) -> Any:
        """Booleans are not numbers here, even though Python says they are."""
        if isinstance(v, bool):
            raise ValueError("Expected a number, got a boolean")
        return v

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StrategyConfig:
        """Build a validated config from a mapping.

        Args:
            data: Field names or aliases mapped to values

        Returns:
            Validated StrategyConfig

        Raises:
            InvalidInputError: If fields are missing, unknown or invalid
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise InvalidInputError(
                f"Invalid strategy config: {first['msg']}",
                field=field,
                value=first.get("input"),
                context={"errors": e.error_count()},
            ) from e

    @classmethod
    def resolve_field(cls, key: str) -> str:
        """Map a field name or alias to the field name.

        Raises:
            InvalidInputError: If the key names no field
        """
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        raise InvalidInputError(f"Unknown strategy field: {key}", field=key)

    @property
    def is_quoting_allowed(self) -> bool:
        """Return True if the strategy may quote or trade."""
        return self.enabled and not self.emergency_stop

    def with_changes(self, changes: Mapping[str, Any]) -> StrategyConfig:
        """Return a validated copy with the given fields replaced.

        Args:
            changes: Partial mapping keyed by field name or alias

        Returns:
            New StrategyConfig

        Raises:
            InvalidInputError: If a key is unknown or the result is invalid
        """
        data = self.model_dump()
        for key, value in changes.items():
            data[self.resolve_field(key)] = value
        return self.from_dict(data)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True)

    def sanity_issues(self) -> list[str]:
        """List configuration problems that would produce unusable quotes.

        Quoting itself never clamps; a bid spread of 100% or more yields a
        zero or negative bid. Orchestrators should refuse to act while this
        list is non-empty.

        Returns:
            Human-readable issue descriptions (empty if none)
        """
        issues: list[str] = []
        bid_spread = self.base_spread + self.bid_adjustment
        ask_spread = self.base_spread + self.ask_adjustment

        if bid_spread >= 100:
            issues.append(f"bid spread {bid_spread}% leaves a non-positive bid price")
        if ask_spread <= -100:
            issues.append(f"ask spread {ask_spread}% leaves a non-positive ask price")
        if bid_spread + ask_spread < 0:
            issues.append("bid and ask spreads cross (bid above ask)")
        if self.min_trade_size < 0 or self.max_trade_size < 0:
            issues.append("trade sizes must not be negative")
        if self.min_trade_size > self.max_trade_size:
            issues.append(
                f"min_trade_size {self.min_trade_size} exceeds "
                f"max_trade_size {self.max_trade_size}"
            )
        if self.check_interval <= 0:
            issues.append("check_interval must be positive")
        if self.target_ratio < 0:
            issues.append("target_ratio must not be negative")

        return issues


DEFAULT_STRATEGY_CONFIG = StrategyConfig(
    base_spread=0.1,
    bid_adjustment=-0.05,
    ask_adjustment=0.05,
    check_interval=30,
    min_trade_size=100,
    max_trade_size=10000,
    trade_size_percentage=5,
    target_ratio=0.5,
    rebalance_threshold=5.0,
    max_position_size=50000,
    max_slippage=1.0,
    stop_loss_percentage=5.0,
    emergency_stop=False,
    enabled=False,
)
