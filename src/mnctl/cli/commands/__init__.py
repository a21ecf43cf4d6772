"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mnctl.config.models import MnctlSettings


class Command(ABC):
    """Base class for CLI commands.

    Commands return an exit code for expected outcomes and let MnctlError
    propagate to the runner, which reports it and picks the exit code.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier."""

    @abstractmethod
    def execute(self, args: Namespace, settings: Optional["MnctlSettings"] = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            settings: Effective mnctl settings.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# ruff: noqa: E402
from mnctl.cli.commands.coin import CoinCommand
from mnctl.cli.commands.help import HelpCommand
from mnctl.cli.commands.list_coins import ListCoinsCommand
from mnctl.cli.commands.monitor import MonitorCommand

__all__ = [
    "Command",
    "CoinCommand",
    "HelpCommand",
    "ListCoinsCommand",
    "MonitorCommand",
]
