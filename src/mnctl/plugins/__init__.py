"""Plugin infrastructure for mnctl.

Coin plugins (mnctl.coins) describe a masternode coin and implement its
commands. Plugins are discovered via Python entry points.
"""

from mnctl.plugins.discovery import (
    COIN_ENTRY_POINT_GROUP,
    discover_plugins,
)

__all__ = [
    "COIN_ENTRY_POINT_GROUP",
    "discover_plugins",
]
