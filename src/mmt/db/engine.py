"""Database engine construction.

The engine (and its connection pool) is built once at process start and
passed to whatever needs persistence.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool

from mmt.core.config import DatabaseConfig
from mmt.db.models import Base

logger = logging.getLogger(__name__)


def create_db_engine(
    config: DatabaseConfig,
    environ: Mapping[str, str] | None = None,
) -> Engine:
    """Create a pooled SQLAlchemy engine.

    In-memory SQLite gets a single shared connection so every session sees
    the same database.

    Args:
        config: Pool settings and URL
        environ: Environment used to resolve the URL override

    Returns:
        Configured Engine
    """
    url = make_url(config.resolved_url(environ))
    kwargs: dict[str, Any] = {"echo": config.echo}

    if url.get_backend_name() == "sqlite":
        # Sessions run on worker threads (API threadpool, runner)
        kwargs["connect_args"] = {"check_same_thread": False}

    if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
            pool_recycle=config.pool_recycle,
            pool_pre_ping=config.pool_pre_ping,
        )

    engine = create_engine(url, **kwargs)
    logger.info(f"Database engine created for {url.render_as_string(hide_password=True)}")
    return engine


def init_schema(engine: Engine) -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(engine)
