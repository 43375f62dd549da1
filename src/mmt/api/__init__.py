"""Strategy API module.

Provides FastAPI routes for strategy management and quoting.
"""

from mmt.api.routes import (
    create_app,
    create_strategy_router,
)

__all__ = [
    "create_app",
    "create_strategy_router",
]
