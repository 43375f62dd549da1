"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy.engine import Engine

from mmt.core.config import DatabaseConfig
from mmt.db.engine import create_db_engine, init_schema
from mmt.db.repository import StrategyRepository
from mmt.domain.strategy import DEFAULT_STRATEGY_CONFIG, StrategyConfig


@pytest.fixture
def strategy_payload() -> dict:
    """Strategy config as sent by the web client (camelCase, percentage points)."""
    return {
        "baseSpread": 1.0,
        "bidAdjustment": 0.5,
        "askAdjustment": 0.5,
        "checkInterval": 30,
        "minTradeSize": 100,
        "maxTradeSize": 10000,
        "tradeSizePercentage": 5,
        "targetRatio": 0.5,
        "rebalanceThreshold": 5.0,
        "maxPositionSize": 50000,
        "maxSlippage": 1.0,
        "stopLossPercentage": 5.0,
        "emergencyStop": False,
        "enabled": True,
    }


@pytest.fixture
def make_config() -> Callable[..., StrategyConfig]:
    """Build a config from the defaults with field overrides."""

    def _make(**overrides: Any) -> StrategyConfig:
        return DEFAULT_STRATEGY_CONFIG.with_changes(overrides)

    return _make


@pytest.fixture
def engine() -> Engine:
    """In-memory database with schema."""
    engine = create_db_engine(DatabaseConfig(url="sqlite:///:memory:"), environ={})
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine: Engine) -> StrategyRepository:
    """Strategy repository over the in-memory database."""
    return StrategyRepository(engine)
