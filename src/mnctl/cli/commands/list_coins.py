"""List coins command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mnctl.config.models import MnctlSettings

from mnctl.cli.commands import Command
from mnctl.cli.exit_codes import EXIT_SUCCESS
from mnctl.registry import CoinRegistry


class ListCoinsCommand(Command):
    """Lists the registered coins."""

    def __init__(self, registry: CoinRegistry):
        self._registry = registry

    @property
    def name(self) -> str:
        return "list"

    def execute(self, args: Namespace, settings: Optional["MnctlSettings"] = None) -> int:
        coins = self._registry.list()
        if not coins:
            print("No coins registered!")
            print()
            print("Install coin plugins via pip; they register under 'mnctl.coins'.")
            return EXIT_SUCCESS

        print("Registered coins:")
        for index, name in enumerate(coins, start=1):
            desc = self._registry.lookup(name).descriptor
            print(f"{index}. {name} (daemon {desc.daemon_bin}, rpc port {desc.rpc_port})")
        print()
        return EXIT_SUCCESS
