"""Argument parser construction for the mnctl CLI.

    mnctl [--coin NAME] [--wallet PATH] [--bins SUBPATH] [--data PATH] COMMAND

Coin and path options are accepted before or after the command.
"""

from __future__ import annotations

import argparse
from pathlib import Path

COIN_COMMANDS = ("info", "download", "bootstrap", "configure", "getinfo")


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show mnctl version and exit.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        metavar="FILE",
        help="Settings file (default: ~/.mnctl/config/config.yml).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _add_coin_options(parser: argparse.ArgumentParser, default=None) -> None:
    parser.add_argument(
        "--coin",
        default=default,
        metavar="NAME",
        help='Coin to work on (e.g. "pivx").',
    )
    parser.add_argument(
        "--wallet",
        default=default,
        metavar="PATH",
        help="Where the wallet bundle is installed (coin default if empty).",
    )
    parser.add_argument(
        "--bins",
        default=default,
        metavar="SUBPATH",
        help="Binary directory inside the wallet path (coin default if empty).",
    )
    parser.add_argument(
        "--data",
        default=default,
        metavar="PATH",
        help="Data directory for the coin (coin default if empty).",
    )


def _coin_parent() -> argparse.ArgumentParser:
    # SUPPRESS keeps values given before the command from being reset
    parent = argparse.ArgumentParser(add_help=False)
    _add_coin_options(parent, default=argparse.SUPPRESS)
    return parent


def _build_download_parser(subparsers, parent: argparse.ArgumentParser) -> None:
    download_parser = subparsers.add_parser(
        "download",
        parents=[parent],
        help="Install the coin's wallet into the wallet path.",
        description=(
            "Download, verify and extract the coin's wallet bundle. "
            "Refuses to run if the wallet is already installed."
        ),
    )
    download_parser.add_argument(
        "--url",
        help="Fetch the wallet from this URL instead of the coin default.",
    )
    download_parser.add_argument(
        "--type",
        dest="compression",
        metavar="TYPE",
        help="Compression of the download: none, tar.gz or zip.",
    )
    download_parser.add_argument(
        "--sha256", "--shasum",
        dest="sha256",
        metavar="HEX",
        help="Expected SHA-256 digest of the download.",
    )


def _build_bootstrap_parser(subparsers, parent: argparse.ArgumentParser) -> None:
    bootstrap_parser = subparsers.add_parser(
        "bootstrap",
        parents=[parent],
        help="Install the coin's blockchain snapshot into the data path.",
        description=(
            "Download and extract the coin's blockchain bootstrap, if it "
            "publishes one. Refuses to run if the data path already exists."
        ),
    )
    bootstrap_parser.add_argument(
        "--url",
        help="Fetch the bootstrap from this URL instead of the coin default.",
    )
    bootstrap_parser.add_argument(
        "--type",
        dest="compression",
        metavar="TYPE",
        help="Compression of the download: none, tar.gz or zip.",
    )


def _build_configure_parser(subparsers, parent: argparse.ArgumentParser) -> None:
    configure_parser = subparsers.add_parser(
        "configure",
        parents=[parent],
        help="Write the coin's .conf file for masternode duty.",
    )
    configure_parser.add_argument(
        "--ip",
        help="Public IP address of this node.",
    )
    configure_parser.add_argument(
        "--mnprivkey", "--mnpkey",
        dest="mnprivkey",
        metavar="KEY",
        help="Masternode private key.",
    )


def _build_monitor_parser(subparsers, parent: argparse.ArgumentParser) -> None:
    monitor_parser = subparsers.add_parser(
        "monitor",
        parents=[parent],
        help="Watch the coin daemon, logging a heartbeat per interval.",
    )
    monitor_parser.add_argument(
        "--start",
        action="store_true",
        default=None,
        help="Start the daemon if it is not running.",
    )
    monitor_parser.add_argument(
        "--refresh",
        metavar="DURATION",
        help="Polling interval, e.g. 45, 30s, 5m, 1h30m (default: 30s).",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the mnctl CLI.

    Returns:
        Configured ArgumentParser instance with subcommands.
    """
    parser = argparse.ArgumentParser(
        prog="mnctl",
        description="mnctl - set up and watch cryptocurrency masternodes.",
        epilog=(
            "Examples:\n"
            "  mnctl list                                   # Known coins\n"
            "  mnctl --coin pivx download                   # Install the wallet\n"
            "  mnctl --coin pivx configure --ip 1.2.3.4 --mnprivkey KEY\n"
            "  mnctl --coin pivx monitor --start --refresh 1m\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _add_global_options(parser)
    _add_coin_options(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands:",
        metavar="COMMAND",
    )
    parent = _coin_parent()

    subparsers.add_parser("help", help="Show the mnctl manual.")
    subparsers.add_parser("version", help="Show mnctl version.")
    subparsers.add_parser("list", help="List known coins.")
    subparsers.add_parser(
        "info",
        parents=[parent],
        help="Show the coin's resolved paths and whether they exist.",
    )
    _build_download_parser(subparsers, parent)
    _build_bootstrap_parser(subparsers, parent)
    _build_configure_parser(subparsers, parent)
    subparsers.add_parser(
        "getinfo",
        parents=[parent],
        help="Run the daemon's getinfo RPC.",
    )
    _build_monitor_parser(subparsers, parent)

    return parser
