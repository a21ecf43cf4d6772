"""Help command implementation."""

from __future__ import annotations

from argparse import Namespace
from importlib.resources import files
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mnctl.config.models import MnctlSettings

from mnctl.cli.commands import Command
from mnctl.cli.exit_codes import EXIT_SUCCESS


def get_help_content() -> str:
    """Load the manual shipped with the package."""
    try:
        return files("mnctl.cli").joinpath("help.md").read_text(encoding="utf-8")
    except (FileNotFoundError, TypeError):
        return "Help documentation not found. Run 'mnctl --help' for usage."


class HelpCommand(Command):
    """Shows the mnctl manual."""

    def __init__(self, version: str):
        self._version = version

    @property
    def name(self) -> str:
        return "help"

    def execute(self, args: Namespace, settings: Optional["MnctlSettings"] = None) -> int:
        print(f"mnctl {self._version}")
        print(get_help_content())
        return EXIT_SUCCESS
