"""Tests for domain error types."""


from mmt.domain.errors import (
    ConfigurationError,
    InvalidInputError,
    PersistenceError,
    PriceUnavailableError,
    StrategyNotFoundError,
    TradingError,
)


class TestTradingError:
    """Tests for base TradingError."""

    def test_trading_error_is_exception(self) -> None:
        """TradingError inherits from Exception."""
        error = TradingError("Something went wrong")
        assert isinstance(error, Exception)

    def test_trading_error_message(self) -> None:
        """TradingError stores message."""
        error = TradingError("Test message")
        assert str(error) == "Test message"

    def test_trading_error_with_context(self) -> None:
        """TradingError can include context dictionary."""
        error = TradingError("Failed operation", context={"pool_id": 7})
        assert error.context == {"pool_id": 7}

    def test_trading_error_default_context(self) -> None:
        """TradingError has empty context by default."""
        error = TradingError("Test")
        assert error.context == {}


class TestInvalidInputError:
    """Tests for InvalidInputError."""

    def test_is_trading_error(self) -> None:
        """InvalidInputError inherits from TradingError."""
        assert isinstance(InvalidInputError("bad"), TradingError)

    def test_stores_field_and_value(self) -> None:
        """InvalidInputError stores the offending field and value."""
        error = InvalidInputError("Price must be positive", field="reference_price", value=-1)
        assert error.field == "reference_price"
        assert error.value == -1

    def test_defaults(self) -> None:
        """Field and value default to None."""
        error = InvalidInputError("bad")
        assert error.field is None
        assert error.value is None


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_is_trading_error(self) -> None:
        """ConfigurationError inherits from TradingError."""
        assert isinstance(ConfigurationError("bad"), TradingError)

    def test_stores_field(self) -> None:
        """ConfigurationError stores field name."""
        error = ConfigurationError("Invalid port", field="api_port")
        assert error.field == "api_port"


class TestStrategyNotFoundError:
    """Tests for StrategyNotFoundError."""

    def test_message_and_pool(self) -> None:
        """StrategyNotFoundError names the pool."""
        error = StrategyNotFoundError(12)
        assert isinstance(error, TradingError)
        assert error.pool_id == 12
        assert str(error) == "Strategy not found for pool: 12"


class TestPersistenceError:
    """Tests for PersistenceError."""

    def test_stores_operation(self) -> None:
        """PersistenceError stores the failed operation."""
        error = PersistenceError("Database unavailable", operation="save")
        assert isinstance(error, TradingError)
        assert error.operation == "save"

    def test_default_operation(self) -> None:
        """Operation defaults to None."""
        assert PersistenceError("x").operation is None


class TestPriceUnavailableError:
    """Tests for PriceUnavailableError."""

    def test_message_and_pool(self) -> None:
        """PriceUnavailableError names the pool."""
        error = PriceUnavailableError(3)
        assert isinstance(error, TradingError)
        assert error.pool_id == 3
        assert str(error) == "Price unavailable for pool: 3"
