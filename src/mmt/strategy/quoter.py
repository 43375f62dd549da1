"""Bid/ask quote derivation.

Quotes are placed symmetrically around the reference price using the
strategy's base spread, with per-side adjustments for skew:

    bid = price * (1 - (base_spread + bid_adjustment) / 100)
    ask = price * (1 + (base_spread + ask_adjustment) / 100)

No clamping is applied. The enabled/emergency_stop flags are the caller's
responsibility.
"""

from __future__ import annotations

import math
import numbers
from decimal import Decimal
from typing import Any

from mmt.core.logger import AppLogger, get_logger
from mmt.domain.errors import InvalidInputError
from mmt.domain.quotes import TradingParams
from mmt.domain.strategy import StrategyConfig


def _validate_reference_price(reference_price: Any) -> float:
    """Return the reference price as a float, rejecting unusable values."""
    if isinstance(reference_price, bool) or not isinstance(
        reference_price, (numbers.Real, Decimal)
    ):
        raise InvalidInputError(
            f"Reference price must be a number, got {type(reference_price).__name__}",
            field="reference_price",
            value=reference_price,
        )

    try:
        price = float(reference_price)
    except OverflowError:
        raise InvalidInputError(
            "Reference price is too large to represent",
            field="reference_price",
            value=reference_price,
        ) from None
    if not math.isfinite(price):
        raise InvalidInputError(
            f"Reference price must be finite, got {price}",
            field="reference_price",
            value=reference_price,
        )
    if price <= 0:
        raise InvalidInputError(
            f"Reference price must be positive, got {price}",
            field="reference_price",
            value=reference_price,
        )
    return price


def calculate_trading_params(
    config: StrategyConfig,
    reference_price: float,
) -> TradingParams:
    """Derive bid and ask prices from a reference price.

    Args:
        config: Strategy whose spread settings apply
        reference_price: Current market price in quote-currency units

    Returns:
        TradingParams with bid and ask prices

    Raises:
        InvalidInputError: If config is not a StrategyConfig or the reference
            price is not a finite positive number
    """
    if not isinstance(config, StrategyConfig):
        raise InvalidInputError(
            f"Expected StrategyConfig, got {type(config).__name__}",
            field="config",
        )
    price = _validate_reference_price(reference_price)

    bid_price = price * (1 - (config.base_spread + config.bid_adjustment) / 100)
    ask_price = price * (1 + (config.base_spread + config.ask_adjustment) / 100)

    return TradingParams(bid_price=bid_price, ask_price=ask_price)


class PriceQuoter:
    """Quote generator with an injectable logger.

    Stateless apart from the logger; safe to share between concurrent
    callers.
    """

    def __init__(self, logger: AppLogger | None = None) -> None:
        """Initialize quoter.

        Args:
            logger: Where to log quotes (default: ``mmt.quoter``)
        """
        self._logger = logger or get_logger("Quoter")

    def quote(self, config: StrategyConfig, reference_price: float) -> TradingParams:
        """Derive bid and ask prices; see calculate_trading_params."""
        params = calculate_trading_params(config, reference_price)
        self._logger.debug(
            f"ref={reference_price} bid={params.bid_price} ask={params.ask_price}"
        )
        return params
