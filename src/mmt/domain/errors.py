"""Exception hierarchy for market-making strategy errors.

All strategy-related errors inherit from TradingError, allowing code to catch
broad categories of errors. Each error type includes relevant context for
debugging and logging.

Error categories:
- InvalidInputError: Bad reference price or malformed strategy configuration
- ConfigurationError: Invalid application configuration
- StrategyNotFoundError: No stored strategy for a pool
- PersistenceError: Database failures
- PriceUnavailableError: No reference price for a pool
"""

from __future__ import annotations

from typing import Any


class TradingError(Exception):
    """Base exception for all trading-related errors.

    All errors in the strategy service inherit from this class, allowing
    code to catch broad categories of errors when needed.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize with message and optional context.

        Args:
            message: Human-readable error description
            context: Additional structured data for logging/debugging
        """
        super().__init__(message)
        self.context = context or {}


class InvalidInputError(TradingError):
    """Input to a strategy computation is unusable.

    Raised when:
    - The reference price is not a finite, positive real number
    - A strategy configuration is missing fields or holds non-numeric values
    - A partial update names fields that do not exist
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the offending field and value.

        Args:
            message: Human-readable error description
            field: Name of the invalid input
            value: The rejected value
            context: Additional structured data
        """
        super().__init__(message, context)
        self.field = field
        self.value = value


class ConfigurationError(TradingError):
    """Invalid application configuration.

    Raised when:
    - Configuration file is malformed
    - Required configuration values are missing
    - Configuration values fail validation
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with field information.

        Args:
            message: Human-readable error description
            field: Name of the configuration field with the issue
            context: Additional structured data
        """
        super().__init__(message, context)
        self.field = field


class StrategyNotFoundError(TradingError):
    """No strategy configuration is stored for a pool."""

    def __init__(self, pool_id: int, context: dict[str, Any] | None = None) -> None:
        """Initialize with pool ID.

        Args:
            pool_id: The pool without a stored strategy
            context: Additional structured data
        """
        super().__init__(f"Strategy not found for pool: {pool_id}", context)
        self.pool_id = pool_id


class PersistenceError(TradingError):
    """Database operation failed.

    Wraps driver and ORM errors so callers only deal with TradingError.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with the failed operation name.

        Args:
            message: Human-readable error description
            operation: Repository operation that failed (e.g. "save")
            context: Additional structured data
        """
        super().__init__(message, context)
        self.operation = operation


class PriceUnavailableError(TradingError):
    """No reference price could be obtained for a pool."""

    def __init__(self, pool_id: int, context: dict[str, Any] | None = None) -> None:
        """Initialize with pool ID.

        Args:
            pool_id: Pool whose price is unavailable
            context: Additional structured data
        """
        super().__init__(f"Price unavailable for pool: {pool_id}", context)
        self.pool_id = pool_id
