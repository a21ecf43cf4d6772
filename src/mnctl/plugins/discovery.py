"""Plugin discovery via Python entry points.

Coin plugins register themselves in their pyproject.toml:

    [project.entry-points."mnctl.coins"]
    pivx = "mnctl.plugins.coins.pivx:PIVXCoin"
"""

from __future__ import annotations

from importlib.metadata import entry_points
from typing import Dict, Type, TypeVar

from mnctl.core.logging import get_logger

LOGGER = get_logger(__name__)

COIN_ENTRY_POINT_GROUP = "mnctl.coins"

T = TypeVar("T")


def discover_plugins(group: str, base_class: Type[T] | None = None) -> Dict[str, Type[T]]:
    """Discover all installed plugins for a given entry point group.

    Entries that fail to import, or that do not derive from `base_class`,
    are skipped with a warning.

    Args:
        group: Entry point group name (e.g., 'mnctl.coins').
        base_class: Optional base class to validate plugins against.

    Returns:
        Dictionary mapping plugin names to plugin classes.
    """
    plugins: Dict[str, Type[T]] = {}

    for ep in entry_points(group=group):
        try:
            plugin_class = ep.load()
        except Exception as e:
            LOGGER.warning(f"Failed to load plugin '{ep.name}': {e}")
            continue
        if base_class is not None and not (
            isinstance(plugin_class, type) and issubclass(plugin_class, base_class)
        ):
            LOGGER.warning(
                f"Plugin '{ep.name}' does not inherit from {base_class.__name__}, skipping"
            )
            continue
        plugins[ep.name] = plugin_class
        LOGGER.debug(f"Discovered plugin: {ep.name} (group: {group})")

    return plugins
