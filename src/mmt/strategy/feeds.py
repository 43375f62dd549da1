"""Reference price sources for the strategy runner."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mmt.domain.errors import PriceUnavailableError


class PriceFeed(ABC):
    """Supplies the current reference price of a pool."""

    @abstractmethod
    async def get_price(self, pool_id: int) -> float:
        """Return the current market price of a pool.

        Args:
            pool_id: Pool identifier

        Returns:
            Price of token A in token B

        Raises:
            PriceUnavailableError: If no price is known
        """


class StaticPriceFeed(PriceFeed):
    """In-memory price feed.

    Prices are set explicitly. Useful for tests, dry runs and one-off
    quoting from the command line.
    """

    def __init__(self, prices: dict[int, float] | None = None) -> None:
        self._prices: dict[int, float] = dict(prices or {})

    def set_price(self, pool_id: int, price: float) -> None:
        """Set the price returned for a pool."""
        self._prices[pool_id] = price

    async def get_price(self, pool_id: int) -> float:
        try:
            return self._prices[pool_id]
        except KeyError:
            raise PriceUnavailableError(pool_id) from None
