"""FastAPI routes for strategy management.

Provides REST API for:
- Reading and saving per-pool strategy configs
- Partial strategy updates and change history
- On-demand bid/ask quotes and rebalance plans
- Reference prices for the strategy runner
- Health checks
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, HTTPException, Query
from pydantic import BaseModel, Field

from mmt.domain.errors import (
    InvalidInputError,
    PersistenceError,
    PriceUnavailableError,
    StrategyNotFoundError,
    TradingError,
)
from mmt.domain.strategy import DEFAULT_STRATEGY_CONFIG, StrategyConfig
from mmt.strategy.feeds import StaticPriceFeed
from mmt.strategy.quoter import PriceQuoter
from mmt.strategy.rebalance import plan_rebalance
from mmt.utils.token_icons import get_token_icon

if TYPE_CHECKING:
    from mmt.db.repository import StrategyRepository
    from mmt.strategy.runner import StrategyRunner

logger = logging.getLogger(__name__)

# API models


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: str
    uptime_seconds: float
    network: str | None


class QuoteResponse(BaseModel):
    """Quote for one pool."""

    poolId: int
    referencePrice: float
    bidPrice: float
    askPrice: float
    quotingAllowed: bool
    issues: list[str]


class HistoryEntry(BaseModel):
    """One strategy configuration change."""

    poolId: int
    changeType: str
    changedFields: list[str]
    oldValues: dict[str, Any] | None
    newValues: dict[str, Any]
    changedBy: str | None
    createdAt: str


class TokenIconResponse(BaseModel):
    """Resolved token icon."""

    symbol: str
    iconUrl: str


class PriceUpdate(BaseModel):
    """Reference price pushed for a pool."""

    price: float = Field(gt=0, allow_inf_nan=False)


class RebalanceActionResponse(BaseModel):
    """Proposed rebalance swap."""

    type: str
    amount: float
    expectedPrice: float
    minReceived: float
    maxSpent: float


class RebalanceResponse(BaseModel):
    """Rebalance plan for one pool; action is None when within threshold."""

    poolId: int
    action: RebalanceActionResponse | None


def _http_error(error: TradingError) -> HTTPException:
    """Map a domain error to an HTTP error."""
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, (StrategyNotFoundError, PriceUnavailableError)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, PersistenceError):
        return HTTPException(status_code=503, detail="Strategy store unavailable")
    return HTTPException(status_code=500, detail=str(error))


# Router factory


def create_strategy_router(
    repository: StrategyRepository,
    quoter: PriceQuoter | None = None,
    start_time: datetime | None = None,
    network: str | None = None,
    price_feed: StaticPriceFeed | None = None,
) -> APIRouter:
    """Create strategy API router.

    Args:
        repository: Strategy persistence
        quoter: Quote generator (default: new PriceQuoter)
        start_time: Application start time
        network: Solana network name reported by /health
        price_feed: Feed updated by PUT /pools/{pool_id}/price (omitted if None)

    Returns:
        FastAPI router
    """
    router = APIRouter(prefix="/api/v1", tags=["strategy"])
    _start_time = start_time or datetime.now(UTC)
    _quoter = quoter or PriceQuoter()

    @router.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        now = datetime.now(UTC)
        uptime = (now - _start_time).total_seconds()
        return HealthResponse(
            status="healthy",
            timestamp=now.isoformat(),
            uptime_seconds=uptime,
            network=network,
        )

    @router.get("/strategy/config")
    def get_strategy_config(
        pool_id: int = Query(alias="poolId"),
    ) -> dict[str, Any]:
        """Get a pool's strategy, or the defaults if none is stored."""
        try:
            stored = repository.get(pool_id)
        except TradingError as e:
            logger.error(f"Error fetching strategy config for pool {pool_id}: {e}")
            raise _http_error(e) from e

        config = stored if stored is not None else DEFAULT_STRATEGY_CONFIG
        return {
            "success": True,
            "config": config.to_wire(),
            "isDefault": stored is None,
        }

    @router.post("/strategy/config")
    def save_strategy_config(
        payload: dict[str, Any] = Body(...),
    ) -> dict[str, Any]:
        """Create or replace a pool's strategy."""
        data = dict(payload)
        pool_id = data.pop("poolId", None)
        wallet_address = data.pop("walletAddress", None)

        if pool_id is None:
            raise HTTPException(status_code=400, detail="poolId is required")
        try:
            pool_id = int(pool_id)
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail="poolId must be an integer") from None

        try:
            config = StrategyConfig.from_dict(data)
            repository.save(pool_id, config, changed_by=wallet_address)
        except TradingError as e:
            logger.error(f"Error saving strategy config for pool {pool_id}: {e}")
            raise _http_error(e) from e

        return {
            "success": True,
            "message": "Strategy config saved",
            "config": config.to_wire(),
        }

    @router.patch("/strategy/config/{pool_id}")
    def update_strategy_config(
        pool_id: int,
        payload: dict[str, Any] = Body(...),
    ) -> dict[str, Any]:
        """Apply a partial update to a pool's strategy."""
        changes = dict(payload)
        wallet_address = changes.pop("walletAddress", None)

        try:
            config = repository.update(pool_id, changes, changed_by=wallet_address)
        except TradingError as e:
            logger.error(f"Error updating strategy config for pool {pool_id}: {e}")
            raise _http_error(e) from e

        logger.info(f"Strategy for pool {pool_id} updated: {sorted(changes)}")
        return {"success": True, "config": config.to_wire()}

    @router.get(
        "/strategy/config/{pool_id}/history",
        response_model=list[HistoryEntry],
    )
    def get_strategy_history(
        pool_id: int,
        limit: int = Query(default=50, ge=1, le=500),
    ) -> list[HistoryEntry]:
        """Get a pool's strategy changes, newest first."""
        try:
            changes = repository.get_history(pool_id, limit=limit)
        except TradingError as e:
            raise _http_error(e) from e

        return [
            HistoryEntry(
                poolId=c.pool_id,
                changeType=c.change_type.value,
                changedFields=c.changed_fields,
                oldValues=c.old_values,
                newValues=c.new_values,
                changedBy=c.changed_by,
                createdAt=c.created_at.isoformat(),
            )
            for c in changes
        ]

    @router.get("/strategy/quote", response_model=QuoteResponse)
    def get_quote(
        pool_id: int = Query(alias="poolId"),
        price: float = Query(),
    ) -> QuoteResponse:
        """Quote a pool's stored strategy against a reference price.

        Quotes are returned even when the strategy is disabled;
        quotingAllowed tells the caller whether to act on them.
        """
        try:
            config = repository.load(pool_id)
            params = _quoter.quote(config, price)
        except TradingError as e:
            raise _http_error(e) from e

        return QuoteResponse(
            poolId=pool_id,
            referencePrice=price,
            bidPrice=params.bid_price,
            askPrice=params.ask_price,
            quotingAllowed=config.is_quoting_allowed,
            issues=config.sanity_issues(),
        )

    @router.get("/strategy/rebalance", response_model=RebalanceResponse)
    def get_rebalance(
        pool_id: int = Query(alias="poolId"),
        price: float = Query(),
        token_a_amount: float = Query(alias="tokenA"),
        token_b_amount: float = Query(alias="tokenB"),
    ) -> RebalanceResponse:
        """Plan the swap that restores a pool's target ratio."""
        try:
            config = repository.load(pool_id)
            action = plan_rebalance(config, price, token_a_amount, token_b_amount)
        except TradingError as e:
            raise _http_error(e) from e

        if action is None:
            return RebalanceResponse(poolId=pool_id, action=None)
        return RebalanceResponse(
            poolId=pool_id,
            action=RebalanceActionResponse(
                type=action.type.value,
                amount=action.amount,
                expectedPrice=action.expected_price,
                minReceived=action.min_received,
                maxSpent=action.max_spent,
            ),
        )

    if price_feed is not None:

        @router.put("/pools/{pool_id}/price")
        async def set_pool_price(pool_id: int, update: PriceUpdate) -> dict[str, Any]:
            """Publish the reference price the runner quotes against."""
            price_feed.set_price(pool_id, update.price)
            return {"success": True, "poolId": pool_id, "price": update.price}

    @router.get("/tokens/{symbol}/icon", response_model=TokenIconResponse)
    async def get_icon(
        symbol: str,
        logo_uri: str | None = Query(default=None, alias="logoUri"),
    ) -> TokenIconResponse:
        """Resolve the icon URL for a token."""
        return TokenIconResponse(symbol=symbol, iconUrl=get_token_icon(symbol, logo_uri))

    return router


def create_app(
    repository: StrategyRepository,
    quoter: PriceQuoter | None = None,
    network: str | None = None,
    runner: StrategyRunner | None = None,
    pool_ids: list[int] | None = None,
    price_feed: StaticPriceFeed | None = None,
) -> Any:
    """Create FastAPI application.

    When a runner and pool IDs are given, the runner is started with the
    application and stopped on shutdown.

    Args:
        repository: Strategy persistence
        quoter: Quote generator
        network: Solana network name reported by /health
        runner: Periodic strategy runner
        pool_ids: Pools the runner evaluates
        price_feed: Feed the price endpoint writes to

    Returns:
        FastAPI application
    """
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if runner is not None and pool_ids:
            await runner.start(list(pool_ids))
        try:
            yield
        finally:
            if runner is not None and runner.is_running:
                await runner.stop()

    app = FastAPI(
        title="MMT Strategy API",
        description="API for managing pool market-making strategies",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.runner = runner

    # Add CORS middleware for the web client
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    router = create_strategy_router(
        repository=repository,
        quoter=quoter,
        network=network,
        price_feed=price_feed,
    )
    app.include_router(router)

    return app
