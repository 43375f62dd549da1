"""Database module.

Provides persistence for per-pool strategy configurations and their history.
"""

from mmt.db.engine import create_db_engine, init_schema
from mmt.db.models import Base, StrategyConfigHistoryRecord, StrategyConfigRecord
from mmt.db.repository import StrategyRepository

__all__ = [
    "Base",
    "StrategyConfigHistoryRecord",
    "StrategyConfigRecord",
    "StrategyRepository",
    "create_db_engine",
    "init_schema",
]
