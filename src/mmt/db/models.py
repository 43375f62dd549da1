"""SQLAlchemy models for strategy persistence.

Percentage fields are stored as fractions (1.5% -> 0.015), matching the
columns the web client's database already uses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Wide enough for a percentage divided by 100 without losing digits.
# Read back as float so SQLite returns the stored double untouched.
AMOUNT = Numeric(38, 20, asdecimal=False)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class StrategyConfigRecord(Base):
    """Persisted strategy configuration, one row per pool."""

    __tablename__ = "mmt_pool_configs"

    pool_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    # Fractions
    base_spread: Mapped[float] = mapped_column(AMOUNT)
    bid_adjustment: Mapped[float] = mapped_column(AMOUNT)
    ask_adjustment: Mapped[float] = mapped_column(AMOUNT)
    trade_size_percentage: Mapped[float] = mapped_column(AMOUNT)
    rebalance_threshold: Mapped[float] = mapped_column(AMOUNT)
    max_slippage: Mapped[float] = mapped_column(AMOUNT)
    stop_loss_percentage: Mapped[float] = mapped_column(AMOUNT)

    # Plain values
    check_interval: Mapped[float] = mapped_column(AMOUNT)
    min_trade_size: Mapped[float] = mapped_column(AMOUNT)
    max_trade_size: Mapped[float] = mapped_column(AMOUNT)
    target_ratio: Mapped[float] = mapped_column(AMOUNT)
    max_position_size: Mapped[float] = mapped_column(AMOUNT)

    emergency_stop: Mapped[bool] = mapped_column(Boolean, default=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return (
            f"StrategyConfigRecord(pool_id={self.pool_id!r}, "
            f"base_spread={self.base_spread}, enabled={self.enabled!r}, "
            f"emergency_stop={self.emergency_stop!r})"
        )


class StrategyConfigHistoryRecord(Base):
    """Persisted strategy configuration change."""

    __tablename__ = "mmt_pool_config_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pool_id: Mapped[int] = mapped_column(Integer, index=True)
    change_type: Mapped[str] = mapped_column(String(16))  # "CREATED" or "UPDATED"
    changed_fields: Mapped[list[str]] = mapped_column(JSON)
    old_values: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    new_values: Mapped[dict[str, Any]] = mapped_column(JSON)
    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    def __repr__(self) -> str:
        return (
            f"StrategyConfigHistoryRecord(pool_id={self.pool_id!r}, "
            f"{self.change_type} {self.changed_fields}, at={self.created_at})"
        )
