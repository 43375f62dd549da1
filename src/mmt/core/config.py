"""Configuration models for the strategy service.

Loads and validates configuration from YAML files using pydantic. Invalid
files surface as ConfigurationError.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from mmt.core.network import NETWORK_ENV, NetworkType, get_endpoint, get_network
from mmt.domain.errors import ConfigurationError


class DatabaseConfig(BaseModel):
    """Database connection pool configuration."""

    url: str = "sqlite:///mmt.db"
    url_env: str | None = "MMT_DATABASE_URL"  # Overrides url when set

    pool_size: int = 10
    max_overflow: int = 0
    pool_timeout: float = 60.0  # Seconds to wait for a free connection
    pool_recycle: int = 3600  # Seconds before a connection is replaced
    pool_pre_ping: bool = True
    echo: bool = False

    def resolved_url(self, environ: Mapping[str, str] | None = None) -> str:
        """Return the database URL, preferring the environment override."""
        env = os.environ if environ is None else environ
        if self.url_env and env.get(self.url_env):
            return env[self.url_env]
        return self.url


class NetworkConfig(BaseModel):
    """Solana network configuration."""

    network: NetworkType | None = None  # None = read from network_env
    network_env: str = NETWORK_ENV
    rpc_url: str | None = None  # Overrides the public cluster endpoint

    def resolved_network(self, environ: Mapping[str, str] | None = None) -> NetworkType:
        """Return the configured network, falling back to the environment."""
        if self.network is not None:
            return self.network
        return get_network(environ, self.network_env)

    def endpoint(self, environ: Mapping[str, str] | None = None) -> str:
        """Return the RPC endpoint to use."""
        if self.rpc_url:
            return self.rpc_url
        return get_endpoint(self.resolved_network(environ))


class RunnerConfig(BaseModel):
    """Strategy runner configuration."""

    pool_ids: list[int] = Field(default_factory=list)
    default_interval: float = 30.0  # Used when a pool has no stored config


class AppConfig(BaseModel):
    """Root configuration for the strategy service."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8080

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AppConfig:
        """Validate a configuration mapping.

        Raises:
            ConfigurationError: If a value fails validation
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ConfigurationError(
                f"Invalid configuration at {field}: {first['msg']}", field=field
            ) from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> AppConfig:
        """Load configuration from a YAML file.

        An empty file yields the defaults.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigurationError: If the file is not a YAML mapping or fails validation
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Malformed YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationError(
                f"Expected a mapping at the top of {path}, got {type(data).__name__}"
            )
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path) -> None:
        """Write the configuration as YAML, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(self.model_dump(mode="json"), sort_keys=False))


# Searched in order when no path is given
CONFIG_SEARCH_PATHS = (
    Path("config/mmt.yaml"),
    Path("config/config.yaml"),
    Path("mmt.yaml"),
)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load the explicit file, else the first of CONFIG_SEARCH_PATHS, else defaults.

    Raises:
        FileNotFoundError: If an explicit path doesn't exist
        ConfigurationError: If the chosen file is invalid
    """
    if path:
        return AppConfig.from_yaml(path)

    found = next((p for p in CONFIG_SEARCH_PATHS if p.is_file()), None)
    return AppConfig.from_yaml(found) if found else AppConfig()
