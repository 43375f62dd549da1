"""Core application components: configuration, logging and network selection."""

from mmt.core.config import AppConfig, DatabaseConfig, NetworkConfig, RunnerConfig
from mmt.core.logger import SUCCESS, AppLogger, get_logger, setup_logging
from mmt.core.network import NetworkType, get_endpoint, get_network

__all__ = [
    "AppConfig",
    "AppLogger",
    "DatabaseConfig",
    "NetworkConfig",
    "NetworkType",
    "RunnerConfig",
    "SUCCESS",
    "get_endpoint",
    "get_logger",
    "get_network",
    "setup_logging",
]
