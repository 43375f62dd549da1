"""Repository for strategy configuration access.

Provides load/save/update of per-pool strategies plus their change history.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from mmt.db.models import StrategyConfigHistoryRecord, StrategyConfigRecord
from mmt.domain.errors import PersistenceError, StrategyNotFoundError
from mmt.domain.quotes import ChangeType, StrategyConfigChange
from mmt.domain.strategy import (
    DEFAULT_STRATEGY_CONFIG,
    NUMERIC_FIELDS,
    PERCENTAGE_FIELDS,
    StrategyConfig,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


def _to_decimal(value: Any) -> Decimal:
    """Convert a stored or domain number to Decimal without float noise.

    Floats go through their shortest repr, so 1/3 becomes
    0.3333333333333333 and shifting by 100 moves only the decimal point.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class StrategyRepository:
    """Repository for persisting strategy configurations.

    Handles load/save/update of per-pool strategies and records every change.
    Thread-safe with session-per-operation pattern. The engine is owned by
    the caller.
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize repository.

        Args:
            engine: SQLAlchemy engine (see create_db_engine)
        """
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine)

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """Open a session, translating database errors to PersistenceError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error during {operation}: {e}")
            raise PersistenceError(
                f"Database error during {operation}: {e}", operation=operation
            ) from e
        finally:
            session.close()

    # --- Read Operations ---

    def get(self, pool_id: int) -> StrategyConfig | None:
        """Get a pool's strategy.

        Args:
            pool_id: Pool ID

        Returns:
            StrategyConfig or None if not stored
        """
        with self._session("get") as session:
            record = session.get(StrategyConfigRecord, pool_id)
            if not record:
                return None
            return self._config_from_record(record)

    def load(self, pool_id: int) -> StrategyConfig:
        """Load a pool's strategy.

        Raises:
            StrategyNotFoundError: If no strategy is stored for the pool
        """
        config = self.get(pool_id)
        if config is None:
            raise StrategyNotFoundError(pool_id)
        return config

    def load_or_default(self, pool_id: int) -> StrategyConfig:
        """Load a pool's strategy, or the default strategy if none is stored."""
        config = self.get(pool_id)
        return config if config is not None else DEFAULT_STRATEGY_CONFIG

    def list_pool_ids(self) -> list[int]:
        """Get IDs of all pools with a stored strategy."""
        with self._session("list_pool_ids") as session:
            stmt = select(StrategyConfigRecord.pool_id).order_by(
                StrategyConfigRecord.pool_id
            )
            return list(session.execute(stmt).scalars().all())

    def get_history(self, pool_id: int, limit: int = 50) -> list[StrategyConfigChange]:
        """Get a pool's configuration changes, newest first.

        Args:
            pool_id: Pool ID
            limit: Maximum number of entries

        Returns:
            List of changes
        """
        with self._session("get_history") as session:
            stmt = (
                select(StrategyConfigHistoryRecord)
                .where(StrategyConfigHistoryRecord.pool_id == pool_id)
                .order_by(
                    StrategyConfigHistoryRecord.created_at.desc(),
                    StrategyConfigHistoryRecord.id.desc(),
                )
                .limit(limit)
            )
            records = session.execute(stmt).scalars().all()
            return [self._change_from_record(r) for r in records]

    # --- Write Operations ---

    def save(
        self,
        pool_id: int,
        config: StrategyConfig,
        changed_by: str | None = None,
    ) -> None:
        """Save or replace a pool's strategy.

        Args:
            pool_id: Pool ID
            config: Strategy to persist
            changed_by: Wallet address or user recorded in history
        """
        with self._session("save") as session:
            record = session.get(StrategyConfigRecord, pool_id)
            self._write(session, pool_id, record, config, changed_by)
            session.commit()
        logger.info(f"Strategy saved for pool {pool_id}")

    def update(
        self,
        pool_id: int,
        changes: Mapping[str, Any],
        changed_by: str | None = None,
    ) -> StrategyConfig:
        """Apply a partial update to a stored strategy.

        Args:
            pool_id: Pool ID
            changes: Fields to replace, by name or camelCase alias
            changed_by: Wallet address or user recorded in history

        Returns:
            The updated strategy

        Raises:
            StrategyNotFoundError: If no strategy is stored for the pool
            InvalidInputError: If a field is unknown or a value invalid
        """
        with self._session("update") as session:
            record = session.get(StrategyConfigRecord, pool_id)
            if not record:
                raise StrategyNotFoundError(pool_id)

            config = self._config_from_record(record).with_changes(changes)
            self._write(session, pool_id, record, config, changed_by)
            session.commit()
        logger.info(f"Strategy updated for pool {pool_id}: {sorted(changes)}")
        return config

    def _write(
        self,
        session: Session,
        pool_id: int,
        record: StrategyConfigRecord | None,
        config: StrategyConfig,
        changed_by: str | None,
    ) -> None:
        """Upsert the config row and append a history entry."""
        now = datetime.now(UTC)
        new_values = config.to_wire()

        if record:
            old_values = self._config_from_record(record).to_wire()
            change_type = ChangeType.UPDATED
            changed_fields = [k for k, v in new_values.items() if old_values.get(k) != v]
        else:
            old_values = None
            change_type = ChangeType.CREATED
            changed_fields = list(new_values)
            record = StrategyConfigRecord(pool_id=pool_id, created_at=now)
            session.add(record)

        self._apply_to_record(record, config)
        record.updated_at = now

        session.add(
            StrategyConfigHistoryRecord(
                pool_id=pool_id,
                change_type=change_type.value,
                changed_fields=changed_fields,
                old_values=old_values,
                new_values=new_values,
                created_by=changed_by,
                created_at=now,
            )
        )

    # --- Conversions ---

    @staticmethod
    def _apply_to_record(record: StrategyConfigRecord, config: StrategyConfig) -> None:
        """Copy domain values onto a record, percentages as fractions."""
        for name in NUMERIC_FIELDS:
            value = _to_decimal(getattr(config, name))
            if name in PERCENTAGE_FIELDS:
                value = value / _HUNDRED
            setattr(record, name, value)
        record.emergency_stop = config.emergency_stop
        record.enabled = config.enabled

    @staticmethod
    def _config_from_record(record: StrategyConfigRecord) -> StrategyConfig:
        """Convert database record to domain StrategyConfig."""
        data: dict[str, Any] = {}
        for name in NUMERIC_FIELDS:
            value = _to_decimal(getattr(record, name))
            if name in PERCENTAGE_FIELDS:
                value = value * _HUNDRED
            data[name] = float(value)
        data["emergency_stop"] = bool(record.emergency_stop)
        data["enabled"] = bool(record.enabled)
        return StrategyConfig.from_dict(data)

    @staticmethod
    def _change_from_record(record: StrategyConfigHistoryRecord) -> StrategyConfigChange:
        """Convert database record to domain StrategyConfigChange."""
        return StrategyConfigChange(
            pool_id=record.pool_id,
            change_type=ChangeType(record.change_type),
            changed_fields=list(record.changed_fields or []),
            old_values=record.old_values,
            new_values=record.new_values,
            changed_by=record.created_by,
            created_at=record.created_at,
        )
