"""Domain models for the market-making strategy service.

This package contains the strategy configuration, quote and history models
plus the error hierarchy. All models are immutable.
"""

from mmt.domain.errors import (
    ConfigurationError,
    InvalidInputError,
    PersistenceError,
    PriceUnavailableError,
    StrategyNotFoundError,
    TradingError,
)
from mmt.domain.quotes import (
    ChangeType,
    RebalanceAction,
    StrategyConfigChange,
    TradeType,
    TradingParams,
)
from mmt.domain.strategy import (
    DEFAULT_STRATEGY_CONFIG,
    NUMERIC_FIELDS,
    PERCENTAGE_FIELDS,
    StrategyConfig,
)

__all__ = [
    # Strategy
    "DEFAULT_STRATEGY_CONFIG",
    "NUMERIC_FIELDS",
    "PERCENTAGE_FIELDS",
    "StrategyConfig",
    # Quotes
    "ChangeType",
    "RebalanceAction",
    "StrategyConfigChange",
    "TradeType",
    "TradingParams",
    # Errors
    "ConfigurationError",
    "InvalidInputError",
    "PersistenceError",
    "PriceUnavailableError",
    "StrategyNotFoundError",
    "TradingError",
]
