"""Coin plugins.

Plugins are discovered via Python entry points (mnctl.coins group).
"""

from typing import Dict, Type

from mnctl.plugins.coins.base import (
    REQUIRED_HOOKS,
    CoinDescriptor,
    CoinPlugin,
    CoinState,
    PathOverrides,
)
from mnctl.plugins.coins.pivx import PIVXCoin
from mnctl.plugins.discovery import COIN_ENTRY_POINT_GROUP, discover_plugins


def discover_coin_plugins() -> Dict[str, Type[CoinPlugin]]:
    """Discover all installed coin plugins via entry points."""
    return discover_plugins(COIN_ENTRY_POINT_GROUP, CoinPlugin)


__all__ = [
    "REQUIRED_HOOKS",
    "CoinDescriptor",
    "CoinPlugin",
    "CoinState",
    "PathOverrides",
    "PIVXCoin",
    "discover_coin_plugins",
]
