"""Inventory rebalancing.

Computes the swap that moves a pool position's token ratio back toward the
strategy's target ratio.
"""

from __future__ import annotations

from mmt.domain.errors import InvalidInputError
from mmt.domain.quotes import RebalanceAction, TradeType
from mmt.domain.strategy import StrategyConfig

# Ratio deviation below which no trade is proposed
DEFAULT_REBALANCE_THRESHOLD = 0.01


def calculate_rebalance_action(
    target_ratio: float,
    current_price: float,
    token_a_amount: float,
    token_b_amount: float,
    max_slippage: float,
    min_trade_size: float,
    max_trade_size: float,
    threshold: float = DEFAULT_REBALANCE_THRESHOLD,
) -> RebalanceAction | None:
    """Calculate the trade needed to restore the target ratio.

    The current ratio is the value of token A (in token B) divided by the
    token B balance.

    Args:
        target_ratio: Desired value ratio of token A to token B
        current_price: Price of token A in token B
        token_a_amount: Token A held
        token_b_amount: Token B held
        max_slippage: Accepted slippage as a fraction (0.01 = 1%)
        min_trade_size: Smallest trade amount (token A)
        max_trade_size: Largest trade amount (token A)
        threshold: Minimum ratio deviation that triggers a trade

    Returns:
        RebalanceAction, or None if the position is within threshold

    Raises:
        InvalidInputError: If price or token B balance is not positive
    """
    if current_price <= 0:
        raise InvalidInputError(
            "Current price must be positive", field="current_price", value=current_price
        )
    if token_b_amount <= 0:
        raise InvalidInputError(
            "Token B amount must be positive", field="token_b_amount", value=token_b_amount
        )

    current_ratio = (token_a_amount * current_price) / token_b_amount
    if abs(current_ratio - target_ratio) < threshold:
        return None

    is_selling_a = current_ratio > target_ratio
    if is_selling_a:
        amount = (token_a_amount * (current_ratio - target_ratio)) / (2 * current_ratio)
    else:
        if target_ratio <= 0:
            raise InvalidInputError(
                "Target ratio must be positive to buy token A",
                field="target_ratio",
                value=target_ratio,
            )
        amount = (token_b_amount * (target_ratio - current_ratio)) / (
            2 * target_ratio * current_price
        )

    amount = max(min_trade_size, min(max_trade_size, amount))
    slippage_factor = 1 - max_slippage

    if is_selling_a:
        return RebalanceAction(
            type=TradeType.SELL,
            amount=amount,
            expected_price=current_price,
            min_received=amount * current_price * slippage_factor,
            max_spent=amount,
        )
    return RebalanceAction(
        type=TradeType.BUY,
        amount=amount,
        expected_price=current_price,
        min_received=amount / current_price * slippage_factor,
        max_spent=amount * current_price * (1 + max_slippage),
    )


def plan_rebalance(
    config: StrategyConfig,
    current_price: float,
    token_a_amount: float,
    token_b_amount: float,
) -> RebalanceAction | None:
    """Calculate a rebalance trade using a strategy's settings.

    Percentage fields (max_slippage, rebalance_threshold) are converted to
    fractions.
    """
    return calculate_rebalance_action(
        target_ratio=config.target_ratio,
        current_price=current_price,
        token_a_amount=token_a_amount,
        token_b_amount=token_b_amount,
        max_slippage=config.max_slippage / 100,
        min_trade_size=config.min_trade_size,
        max_trade_size=config.max_trade_size,
        threshold=config.rebalance_threshold / 100,
    )
