"""Coin command implementation (info, download, bootstrap, configure, getinfo)."""

from __future__ import annotations

from argparse import Namespace
from typing import Any, Dict, Optional

from mnctl.cli.commands import Command
from mnctl.cli.exit_codes import EXIT_SUCCESS
from mnctl.config.models import MnctlSettings
from mnctl.core.logging import get_logger
from mnctl.plugins.coins import PathOverrides
from mnctl.registry import CoinRegistry

LOGGER = get_logger(__name__)

# Command options handed to coin hooks
HOOK_OPTIONS = ("url", "compression", "sha256", "ip", "mnprivkey")


def hook_options(args: Namespace) -> Dict[str, Any]:
    """Collect the command options that were given on the command line."""
    return {key: getattr(args, key) for key in HOOK_OPTIONS if getattr(args, key, None) is not None}


def path_overrides(settings: MnctlSettings) -> PathOverrides:
    return PathOverrides(wallet=settings.wallet, bins=settings.bins, data=settings.data)


class CoinCommand(Command):
    """Runs one coin command through the registry."""

    def __init__(self, registry: CoinRegistry, command: str):
        self._registry = registry
        self._command = command

    @property
    def name(self) -> str:
        return self._command

    def execute(self, args: Namespace, settings: Optional[MnctlSettings] = None) -> int:
        """Dispatch the command to the selected coin.

        Raises:
            MnctlError: Whatever the coin command raises.
        """
        settings = settings or MnctlSettings()
        LOGGER.debug(f"Running {self._command} for coin '{settings.coin}'")
        self._registry.dispatch(
            settings.coin,
            self._command,
            hook_options(args),
            path_overrides(settings),
        )
        return EXIT_SUCCESS
