"""Entry point for the MMT strategy service.

Usage:
    mmt --config config/mmt.yaml
    mmt --pool-id 7 --price 101.25
    mmt --network mainnet --dry-run
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from mmt.core.config import AppConfig, load_config
from mmt.core.logger import setup_logging
from mmt.core.network import NetworkType
from mmt.db.engine import create_db_engine, init_schema
from mmt.db.repository import StrategyRepository
from mmt.domain.errors import ConfigurationError, TradingError
from mmt.strategy.feeds import StaticPriceFeed
from mmt.strategy.quoter import PriceQuoter
from mmt.strategy.runner import StrategyRunner


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="MMT Strategy Service",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--network",
        "-n",
        choices=[n.value for n in NetworkType],
        help="Solana network (overrides config)",
    )

    parser.add_argument(
        "--db-url",
        type=str,
        help="Database URL (overrides config)",
    )

    parser.add_argument(
        "--pool-id",
        "-p",
        type=int,
        help="Pool to quote (with --price)",
    )

    parser.add_argument(
        "--price",
        type=float,
        help="Reference price to quote against (with --pool-id)",
    )

    parser.add_argument(
        "--log-level",
        "-l",
        choices=["DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="Log file path",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and validate without starting",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Build configuration from file and command line args.

    Args:
        args: Parsed command line arguments

    Returns:
        Merged configuration
    """
    config = load_config(args.config)

    if args.network:
        config.network.network = NetworkType(args.network)

    if args.db_url:
        config.database.url = args.db_url
        config.database.url_env = None

    if args.log_level:
        config.log_level = args.log_level

    if args.log_file:
        config.log_file = args.log_file

    return config


def quote_once(repository: StrategyRepository, pool_id: int, price: float) -> int:
    """Print one quote for a pool as JSON.

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)
    config = repository.load_or_default(pool_id)

    try:
        params = PriceQuoter().quote(config, price)
    except TradingError as e:
        logger.error(f"Cannot quote pool {pool_id}: {e}")
        return 1

    for issue in config.sanity_issues():
        logger.warning(f"Pool {pool_id}: {issue}")
    if not config.is_quoting_allowed:
        logger.warning(f"Pool {pool_id} is disabled or emergency-stopped")

    print(json.dumps({"poolId": pool_id, **params.to_wire()}))
    return 0


def serve(config: AppConfig, repository: StrategyRepository) -> int:
    """Run the API server until interrupted.

    Pools listed in ``runner.pool_ids`` are evaluated in the background
    against prices published through ``PUT /api/v1/pools/{id}/price``.

    Returns:
        Exit code
    """
    import uvicorn

    from mmt.api.routes import create_app

    price_feed = StaticPriceFeed()
    runner = StrategyRunner(
        repository=repository,
        price_feed=price_feed,
        default_interval=config.runner.default_interval,
    )
    if config.runner.pool_ids:
        logging.getLogger(__name__).info(
            f"Strategy runner enabled for pools {config.runner.pool_ids}"
        )

    app = create_app(
        repository=repository,
        network=config.network.resolved_network().value,
        runner=runner,
        pool_ids=config.runner.pool_ids,
        price_feed=price_feed,
    )
    uvicorn.run(
        app,
        host=config.api_host,
        port=config.api_port,
        log_level="warning",  # Reduce uvicorn noise
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except (ConfigurationError, FileNotFoundError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, config.log_file)

    logger = logging.getLogger(__name__)
    logger.info("MMT strategy service starting")
    logger.info(f"Network: {config.network.resolved_network().value}")
    logger.info(f"RPC endpoint: {config.network.endpoint()}")

    if args.dry_run:
        logger.info("Dry run - configuration valid")
        return 0

    if (args.pool_id is None) != (args.price is None):
        logger.error("--pool-id and --price must be given together")
        return 1

    engine = create_db_engine(config.database)
    try:
        init_schema(engine)
        repository = StrategyRepository(engine)

        if args.pool_id is not None:
            return quote_once(repository, args.pool_id, args.price)

        logger.info(f"API server on http://{config.api_host}:{config.api_port}")
        return serve(config, repository)
    except TradingError as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
