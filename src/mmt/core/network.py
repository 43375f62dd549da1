"""Solana network selection.

Maps the configured network name to a public cluster RPC endpoint.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from enum import Enum

logger = logging.getLogger(__name__)

NETWORK_ENV = "MMT_NETWORK"


class NetworkType(str, Enum):
    """Supported Solana clusters."""

    MAINNET = "mainnet"
    DEVNET = "devnet"


CLUSTER_URLS: dict[NetworkType, str] = {
    NetworkType.MAINNET: "https://api.mainnet-beta.solana.com",
    NetworkType.DEVNET: "https://api.devnet.solana.com",
}

DEFAULT_NETWORK = NetworkType.DEVNET


def get_network(
    environ: Mapping[str, str] | None = None,
    env_var: str = NETWORK_ENV,
) -> NetworkType:
    """Read the network from the environment.

    Unset or unknown values fall back to devnet.

    Args:
        environ: Environment mapping (default: os.environ)
        env_var: Variable holding the network name

    Returns:
        Selected network
    """
    env = os.environ if environ is None else environ
    raw = env.get(env_var)
    if not raw:
        return DEFAULT_NETWORK
    try:
        return NetworkType(raw.strip().lower())
    except ValueError:
        logger.warning(f"Unknown network {raw!r} in {env_var}, using {DEFAULT_NETWORK.value}")
        return DEFAULT_NETWORK


def get_endpoint(network: NetworkType | None = None) -> str:
    """Return the public RPC endpoint for a network.

    Args:
        network: Cluster to connect to (default: read from environment)

    Returns:
        HTTPS RPC URL
    """
    return CLUSTER_URLS[network or get_network()]
