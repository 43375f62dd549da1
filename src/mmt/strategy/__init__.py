"""Strategy module for market-making quote generation.

This package contains:
- calculate_trading_params / PriceQuoter: bid/ask derivation from spreads
- Rebalance planning toward a target token ratio
- PriceFeed implementations and the periodic StrategyRunner
"""

from mmt.strategy.feeds import PriceFeed, StaticPriceFeed
from mmt.strategy.quoter import PriceQuoter, calculate_trading_params
from mmt.strategy.rebalance import calculate_rebalance_action, plan_rebalance
from mmt.strategy.runner import StrategyRunner

__all__ = [
    "PriceFeed",
    "PriceQuoter",
    "StaticPriceFeed",
    "StrategyRunner",
    "calculate_rebalance_action",
    "calculate_trading_params",
    "plan_rebalance",
]
