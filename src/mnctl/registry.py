"""Registry of coin plugins and command dispatch.

One registry is built at process start from the installed coin plugins and
handed to the CLI runner and the monitor. Tests build their own.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

from mnctl.core.errors import (
    DuplicateCoinError,
    IncompleteHooksError,
    UnknownCoinError,
    UnknownCommandError,
)
from mnctl.core.logging import get_logger
from mnctl.plugins.coins import REQUIRED_HOOKS, CoinPlugin, PathOverrides, discover_coin_plugins

LOGGER = get_logger(__name__)


class ReadWriteLock:
    """Many readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writing:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._readers:
                self._cond.wait()
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class CoinRegistry:
    """Coin plugins by name.

    Names and command names are case-insensitive. Commands for different
    coins may run concurrently; commands for the same coin run one at a time.
    """

    def __init__(self) -> None:
        self._coins: Dict[str, CoinPlugin] = {}
        self._dispatch_locks: Dict[str, threading.Lock] = {}
        self._lock = ReadWriteLock()

    def register(self, plugin: CoinPlugin) -> None:
        """Add a coin plugin.

        Raises:
            DuplicateCoinError: A coin with the same name is registered.
            IncompleteHooksError: The plugin is missing a required command.
        """
        name = plugin.descriptor.name.lower()
        with self._lock.write_locked():
            if name in self._coins:
                raise DuplicateCoinError(name)
            missing = [hook for hook in REQUIRED_HOOKS if not callable(getattr(plugin, hook, None))]
            if missing:
                raise IncompleteHooksError(name, missing)
            self._coins[name] = plugin
            self._dispatch_locks[name] = threading.Lock()
        LOGGER.debug(f"Registered coin: {name}")

    def lookup(self, name: str) -> CoinPlugin:
        """Return the plugin registered as `name`.

        Raises:
            UnknownCoinError: No such coin.
        """
        with self._lock.read_locked():
            plugin = self._coins.get(name.lower())
        if plugin is None:
            raise UnknownCoinError(name)
        return plugin

    def list(self) -> List[str]:
        with self._lock.read_locked():
            return sorted(self._coins)

    def is_registered(self, name: str) -> bool:
        with self._lock.read_locked():
            return name.lower() in self._coins

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_registered(name)

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._coins)

    def _dispatch_lock(self, name: str) -> threading.Lock:
        with self._lock.read_locked():
            return self._dispatch_locks[name.lower()]

    def refresh(self, name: str, overrides: Optional[PathOverrides] = None) -> CoinPlugin:
        """Re-resolve a coin's paths and reload its .conf file."""
        plugin = self.lookup(name)
        with self._dispatch_lock(name):
            plugin.update_state(overrides)
        return plugin

    def dispatch(
        self,
        name: str,
        command: str,
        options: Optional[Mapping[str, Any]] = None,
        overrides: Optional[PathOverrides] = None,
    ) -> Any:
        """Run a coin command against freshly resolved state.

        Returns:
            Whatever the command hook returns.

        Raises:
            UnknownCoinError: No such coin.
            UnknownCommandError: Not one of the coin commands.
        """
        plugin = self.lookup(name)
        hook_name = command.lower()
        if hook_name not in REQUIRED_HOOKS:
            raise UnknownCommandError(command)

        with self._dispatch_lock(name):
            plugin.update_state(overrides)
            LOGGER.debug(f"Dispatching {plugin.name} {hook_name}")
            return getattr(plugin, hook_name)(dict(options or {}))


def build_registry(**kwargs: Any) -> CoinRegistry:
    """Build a registry holding every installed coin plugin.

    Args:
        **kwargs: Passed to each plugin constructor (e.g. rpc_timeout).

    Raises:
        RegistryError: A plugin could not be registered.
    """
    registry = CoinRegistry()
    for ep_name, plugin_class in discover_coin_plugins().items():
        plugin = plugin_class(**kwargs)
        registry.register(plugin)
        if plugin.name != ep_name:
            LOGGER.debug(f"Entry point '{ep_name}' registered coin '{plugin.name}'")
    return registry
