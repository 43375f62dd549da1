"""Periodic strategy evaluation.

Runs one asyncio task per pool. Each cycle reloads the pool's strategy
from the repository, so edits take effect on the next cycle, then quotes
against the latest reference price and hands the result to a callback.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from mmt.core.logger import AppLogger, get_logger
from mmt.domain.errors import TradingError
from mmt.domain.quotes import TradingParams
from mmt.strategy.feeds import PriceFeed
from mmt.strategy.quoter import PriceQuoter

if TYPE_CHECKING:
    from mmt.db.repository import StrategyRepository

QuoteCallback = Callable[[int, TradingParams], Any]


class StrategyRunner:
    """Re-evaluates pool strategies every check_interval seconds.

    A cycle produces no quote when:
    - the pool has no stored strategy
    - the strategy is disabled or emergency-stopped
    - the strategy fails its sanity checks
    """

    def __init__(
        self,
        repository: StrategyRepository,
        price_feed: PriceFeed,
        quoter: PriceQuoter | None = None,
        on_quote: QuoteCallback | None = None,
        logger: AppLogger | None = None,
        default_interval: float = 30.0,
    ) -> None:
        """Initialize runner.

        Args:
            repository: Source of strategy configs
            price_feed: Source of reference prices
            quoter: Quote generator (default: new PriceQuoter)
            on_quote: Called with (pool_id, params) for each quote; may be async
            logger: Where to log (default: ``mmt.runner``)
            default_interval: Sleep between cycles when no config is stored
        """
        self._repository = repository
        self._price_feed = price_feed
        self._logger = logger or get_logger("Runner")
        self._quoter = quoter or PriceQuoter(self._logger)
        self._on_quote = on_quote
        self._default_interval = default_interval

        self._running = False
        self._tasks: dict[int, asyncio.Task] = {}

    @property
    def is_running(self) -> bool:
        """Check if the runner is running."""
        return self._running

    @property
    def pool_ids(self) -> list[int]:
        """Pools with an active evaluation task."""
        return list(self._tasks)

    async def run_once(self, pool_id: int) -> TradingParams | None:
        """Evaluate a pool's strategy once.

        Args:
            pool_id: Pool to evaluate

        Returns:
            The generated quote, or None if quoting was skipped

        Raises:
            TradingError: If the price feed or quoter fails
        """
        config = await asyncio.to_thread(self._repository.get, pool_id)
        if config is None:
            self._logger.warning(f"No strategy stored for pool {pool_id}, skipping")
            return None

        if config.emergency_stop:
            self._logger.warning(f"Emergency stop active for pool {pool_id}, not quoting")
            return None
        if not config.enabled:
            self._logger.debug(f"Strategy disabled for pool {pool_id}")
            return None

        issues = config.sanity_issues()
        if issues:
            self._logger.warning(
                f"Strategy for pool {pool_id} failed sanity checks: {'; '.join(issues)}"
            )
            return None

        price = await self._price_feed.get_price(pool_id)
        params = self._quoter.quote(config, price)

        if self._on_quote is not None:
            result = self._on_quote(pool_id, params)
            if inspect.isawaitable(result):
                await result

        self._logger.success(
            f"Pool {pool_id} quoted bid={params.bid_price:.6f} ask={params.ask_price:.6f}"
        )
        return params

    async def _next_interval(self, pool_id: int) -> float:
        """Return the sleep before the next cycle of a pool."""
        try:
            config = await asyncio.to_thread(self._repository.get, pool_id)
        except TradingError:
            return self._default_interval
        if config is None or config.check_interval <= 0:
            return self._default_interval
        return config.check_interval

    async def run_pool(self, pool_id: int) -> None:
        """Evaluate a pool until the runner stops.

        Errors in a cycle are logged; the next cycle still runs.
        """
        self._logger.info(f"Strategy loop started for pool {pool_id}")

        while self._running:
            try:
                await self.run_once(pool_id)
            except TradingError as e:
                self._logger.error(f"Cycle failed for pool {pool_id}: {e}")
            except Exception:
                # on_quote is caller code and may raise anything
                self._logger.exception(f"Unexpected error in cycle for pool {pool_id}")

            await asyncio.sleep(await self._next_interval(pool_id))

    async def start(self, pool_ids: list[int]) -> None:
        """Start one evaluation task per pool.

        Args:
            pool_ids: Pools to evaluate
        """
        self._running = True
        for pool_id in pool_ids:
            if pool_id in self._tasks:
                continue
            self._tasks[pool_id] = asyncio.create_task(self.run_pool(pool_id))
        self._logger.info(f"Runner started for pools {sorted(self._tasks)}")

    async def stop(self) -> None:
        """Cancel all evaluation tasks and wait for them to finish."""
        self._running = False
        tasks = list(self._tasks.values())
        self._tasks.clear()

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._logger.info("Runner stopped")
