"""CLI runner orchestration.

This module handles command dispatch and execution for the mnctl CLI.
"""

from __future__ import annotations

import sys
import traceback
from argparse import Namespace
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, Iterable, Optional

from mnctl.bootstrap.paths import MnctlPaths
from mnctl.cli.arguments import COIN_COMMANDS, build_parser
from mnctl.cli.commands.coin import CoinCommand
from mnctl.cli.commands.help import HelpCommand
from mnctl.cli.commands.list_coins import ListCoinsCommand
from mnctl.cli.commands.monitor import MonitorCommand
from mnctl.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS, exit_code_for
from mnctl.config import load_settings
from mnctl.config.models import MnctlSettings
from mnctl.core.errors import MnctlError
from mnctl.core.logging import configure_logging, get_logger
from mnctl.registry import CoinRegistry, build_registry

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get mnctl version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("mnctl")
    except PackageNotFoundError:
        from mnctl import __version__
        return __version__


def args_to_overrides(args: Namespace) -> Dict[str, Any]:
    """Settings given on the command line, for merging over the settings file."""
    overrides: Dict[str, Any] = {}
    for key in ("coin", "wallet", "bins", "data"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value
    return overrides


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(
        self,
        registry: Optional[CoinRegistry] = None,
        paths: Optional[MnctlPaths] = None,
    ) -> None:
        """Initialize CLIRunner.

        Args:
            registry: Coin registry to use; built from the installed coin
                plugins when omitted.
            paths: mnctl home paths (defaults to ~/.mnctl).
        """
        self.parser = build_parser()
        self._version = get_version()
        self._registry = registry
        self._paths = paths
        self.help_cmd = HelpCommand(version=self._version)

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None
        try:
            args = self.parser.parse_args(argv_list)
        except SystemExit as e:
            # argparse exits 0 after --help and 2 on bad usage
            return EXIT_SUCCESS if not e.code else EXIT_INVALID_USAGE

        # Configure logging as early as possible
        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        command = getattr(args, "command", None)

        if args.version or command == "version":
            print(self._version)
            return EXIT_SUCCESS

        if command is None or command == "help":
            return self.help_cmd.execute(args)

        try:
            return self._dispatch(command, args)
        except MnctlError as e:
            return self._report(e, args)

    def _dispatch(self, command: str, args: Namespace) -> int:
        settings = load_settings(
            cli_config_path=getattr(args, "config", None),
            cli_overrides=args_to_overrides(args),
            paths=self._paths,
        )
        registry = self._get_registry(settings)

        if command == "list":
            return ListCoinsCommand(registry).execute(args, settings)

        if not settings.coin:
            print(
                f"Error: '{command}' needs a coin, use --coin NAME (see 'mnctl list')",
                file=sys.stderr,
            )
            return EXIT_INVALID_USAGE

        if command == "monitor":
            return MonitorCommand(registry, paths=self._paths).execute(args, settings)
        if command in COIN_COMMANDS:
            return CoinCommand(registry, command).execute(args, settings)

        self.parser.print_help()
        return EXIT_INVALID_USAGE

    def _get_registry(self, settings: MnctlSettings) -> CoinRegistry:
        if self._registry is None:
            self._registry = build_registry(
                rpc_timeout=settings.rpc_timeout,
                download_timeout=settings.download_timeout,
            )
        return self._registry

    def _report(self, error: MnctlError, args: Namespace) -> int:
        if args.debug:
            traceback.print_exc()
        print(f"Error: {error}", file=sys.stderr)
        code = exit_code_for(error)
        LOGGER.debug(f"{type(error).__name__} -> exit code {code}")
        return code
